"""
Command-line interface for serialcalc.

Entry point for the `serialcalc` command.
"""

import argparse
import logging
import sys
from typing import Optional, Sequence

from .exchange_log import ExchangeLog
from .port import ConfigError, OpenError, SerialLink, report_error
from .protocol import (
    DEFAULT_LOG_FILE,
    EXIT_CONFIG_FAILED,
    EXIT_INTERRUPTED,
    EXIT_LOG_FAILED,
    EXIT_OPEN_FAILED,
    ErrorMessage,
    Prompt,
)
from .session import SessionRunner


def non_negative_float(value: str) -> float:
    try:
        seconds = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}")
    if seconds < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: {value}")
    return seconds


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='serialcalc',
        description="Send arithmetic expressions to a calculator board over serial",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Example:
    serialcalc --port COM3
    serialcalc -p ttyUSB0 --log-file results.txt

The line is fixed at 9600 baud, 8 data bits, 1 stop bit, no parity.
Type 'beenden' to quit.
        """
    )
    parser.add_argument('--port', '-p', default=None,
                        help='Serial port (e.g. COM3, ttyUSB0); asked for if omitted')
    parser.add_argument('--log-file', '-l', default=DEFAULT_LOG_FILE,
                        help=f'Exchange log, recreated on every run (default: {DEFAULT_LOG_FILE})')
    parser.add_argument('--timeout', '-t', type=non_negative_float, default=None,
                        help='Read timeout in seconds (default: wait forever)')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Log raw bytes sent and received')
    return parser


def ask_port() -> Optional[str]:
    print(Prompt.PORT)
    try:
        return input()
    except EOFError:
        return None


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s %(name)s %(levelname)s: %(message)s',
    )

    try:
        port = args.port if args.port is not None else ask_port()
        if port is None:
            print(OpenError(ErrorMessage.OPEN, "no port given"), file=sys.stderr)
            return EXIT_OPEN_FAILED

        link = SerialLink(port, timeout=args.timeout)
        with link:
            link.configure()
            log = ExchangeLog(args.log_file)
            try:
                log.open()
            except OSError as e:
                report_error(ErrorMessage.LOG_OPEN, e)
                return EXIT_LOG_FAILED
            with log:
                return SessionRunner(link, log).run()

    except OpenError as e:
        print(e, file=sys.stderr)
        return EXIT_OPEN_FAILED
    except ConfigError as e:
        print(e, file=sys.stderr)
        return EXIT_CONFIG_FAILED
    except KeyboardInterrupt:
        print(f"\n{Prompt.CANCELLED}")
        return EXIT_INTERRUPTED


if __name__ == '__main__':
    sys.exit(main())
