"""
Serial link to the calculator device
====================================

Owns the one `serial.Serial` handle used by a session: opening the
operator-named port, applying the line parameters once, and the blocking
write/read pair of every exchange.

Example:
    >>> from serialcalc import SerialLink
    >>>
    >>> with SerialLink('COM3') as link:
    ...     link.configure()
    ...     link.send('3+4\\n')
    ...     print(link.receive())

Fatal setup failures raise `OpenError` / `ConfigError`, whose text is the
operator-facing report. Failures during an exchange are reported on stderr
and never raised: `send` returns 0 and `receive` returns "".
"""

import logging
import sys
from typing import Optional, Union

import serial

from .data_types import PortConfig
from .protocol import ENCODING, MAX_READ_BYTES, ErrorMessage

logger = logging.getLogger(__name__)

WINDOWS_DEVICE_PREFIX = "\\\\.\\"
POSIX_DEVICE_DIR = "/dev/"


class SerialLinkError(Exception):
    """Base class for fatal serial setup errors."""

    def __init__(self, message: str, code: Optional[Union[int, str]] = None):
        super().__init__(message if code is None else f"{message}: {code}")
        self.code = code


class OpenError(SerialLinkError):
    """The port does not exist or is unavailable."""


class ConfigError(SerialLinkError):
    """Reading or applying the line parameters was rejected."""


def error_code(exc: BaseException) -> Union[int, str]:
    """OS error code of an exception, or its text when there is none."""
    code = getattr(exc, 'errno', None)
    return code if code is not None else str(exc)


def report_error(message: str, exc: BaseException) -> None:
    print(f"{message}: {error_code(exc)}", file=sys.stderr)


def resolve_port_name(identifier: str, platform: Optional[str] = None) -> str:
    """
    Turn an operator-supplied port name into a device path.

    Args:
        identifier: e.g. "COM3", "ttyUSB0" or "/dev/ttyACM0"
        platform: Value of sys.platform to resolve for (default: current)

    Returns:
        "\\\\.\\COM3" on Windows, "/dev/ttyUSB0" for bare POSIX names,
        anything that already looks like a path unchanged.

    Raises:
        OpenError: If the identifier is empty
    """
    platform = platform or sys.platform
    name = identifier.strip()
    if not name:
        raise OpenError(ErrorMessage.OPEN, "no port given")

    if platform.startswith('win'):
        if name.startswith(WINDOWS_DEVICE_PREFIX):
            return name
        if name.upper().startswith('COM'):
            return WINDOWS_DEVICE_PREFIX + name
        return name

    if '/' in name:
        return name
    return POSIX_DEVICE_DIR + name


class SerialLink:
    """
    Connection handle for one calculator session.

    The handle stays valid from `open()` until `close()`; `close()` is safe
    to call any number of times and runs on context-manager exit.
    """

    def __init__(
        self,
        port: str,
        timeout: Optional[float] = None,
        platform: Optional[str] = None,
    ):
        """
        Args:
            port: Operator-supplied port identifier (e.g. 'COM3', 'ttyUSB0')
            timeout: Read timeout in seconds. None blocks until data arrives.
            platform: Override sys.platform for port-name resolution
        """
        self.port = port
        self.timeout = timeout
        self.platform = platform or sys.platform
        self.device = resolve_port_name(port, self.platform)
        self.config: Optional[PortConfig] = None

        self._ser: Optional[serial.Serial] = None

    def __enter__(self) -> 'SerialLink':
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    @property
    def is_open(self) -> bool:
        return self._ser is not None and self._ser.is_open

    @property
    def is_configured(self) -> bool:
        return self.config is not None

    # =========================================================================
    # Setup
    # =========================================================================

    def open(self) -> None:
        """
        Open the device for exclusive read/write access.

        Raises:
            OpenError: If the device does not exist or is busy
        """
        if self.is_open:
            return

        options = {}
        if not self.platform.startswith('win'):
            # flock() the tty; Windows opens COM ports exclusively anyway
            options['exclusive'] = True

        try:
            self._ser = serial.Serial(
                port=self.device,
                timeout=self.timeout,
                **options,
            )
        except (serial.SerialException, OSError, ValueError) as e:
            self._ser = None
            raise OpenError(ErrorMessage.OPEN, error_code(e)) from e

        logger.debug("Opened %s (timeout=%s)", self.device, self.timeout)

    def configure(self, config: PortConfig = PortConfig()) -> None:
        """
        Overwrite the port's line parameters with `config`.

        The current settings are read first so that everything other than
        baud rate, byte size, stop bits and parity is kept as found.

        Raises:
            ConfigError: If the settings cannot be read or applied, or the
                port was already configured
        """
        if self.is_configured:
            raise ConfigError(ErrorMessage.SET_STATE, "already configured")
        if not self.is_open:
            raise ConfigError(ErrorMessage.GET_STATE, "port not open")

        try:
            settings = self._ser.get_settings()
        except (serial.SerialException, OSError, ValueError) as e:
            raise ConfigError(ErrorMessage.GET_STATE, error_code(e)) from e

        settings.update(config.as_settings())

        try:
            self._ser.apply_settings(settings)
        except (serial.SerialException, OSError, ValueError) as e:
            raise ConfigError(ErrorMessage.SET_STATE, error_code(e)) from e

        self.config = config
        logger.debug("Configured %s as %s", self.device, config)

    def close(self) -> None:
        """Release the handle."""
        if self._ser is not None:
            try:
                self._ser.close()
            finally:
                self._ser = None
                logger.debug("Closed %s", self.device)

    # =========================================================================
    # Exchange
    # =========================================================================

    def _require_open(self) -> None:
        if not self.is_open:
            raise ConnectionError(f"Serial port {self.device} is not open")

    def send(self, text: str) -> int:
        """
        Write `text` to the device.

        The caller appends the line terminator. Failures are reported on
        stderr and not retried.

        Returns:
            Number of bytes written, 0 on failure
        """
        self._require_open()
        data = text.encode(ENCODING)
        try:
            written = self._ser.write(data)
        except (serial.SerialException, OSError) as e:
            report_error(ErrorMessage.WRITE, e)
            return 0

        logger.debug("TX %r", data)
        return written if written is not None else len(data)

    def receive(self, limit: int = MAX_READ_BYTES) -> str:
        """
        Perform one bounded blocking read.

        Waits for the first byte, then takes whatever the driver has already
        buffered, never more than `limit` bytes. There is no framing: a reply
        that arrives in several pieces is cut at the first one.

        Returns:
            Decoded reply, "" if the read failed or timed out

        Raises:
            ValueError: If `limit` is below 1
        """
        if limit < 1:
            raise ValueError(f"Read limit must be at least 1, got {limit}")
        self._require_open()
        try:
            data = self._ser.read(1)
            if data and limit > 1:
                waiting = self._ser.in_waiting
                if waiting:
                    data += self._ser.read(min(waiting, limit - 1))
        except (serial.SerialException, OSError) as e:
            report_error(ErrorMessage.READ, e)
            return ""

        logger.debug("RX %r", data)
        return data[:limit].decode(ENCODING, errors='replace')
