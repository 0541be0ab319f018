"""
Calculator Session
==================

Runs the interactive loop against an opened, configured `SerialLink`:

    AwaitingInput --(expression)--> Exchanging --> AwaitingInput
    AwaitingInput --("beenden" / EOF)--> Terminated

Each expression gets exactly one send, one receive and one log line, in
that order, whether or not the write or read succeeded.

Example:
    >>> with SerialLink('COM3') as link:
    ...     link.configure()
    ...     with ExchangeLog() as log:
    ...         SessionRunner(link, log).run()
"""

import enum
import logging
from typing import Callable, Optional

from .data_types import Exchange
from .exchange_log import ExchangeLog
from .port import SerialLink
from .protocol import EXIT_OK, LINE_TERMINATOR, SENTINEL, Prompt

logger = logging.getLogger(__name__)


class SessionState(enum.Enum):
    AWAITING_INPUT = "awaiting_input"
    EXCHANGING = "exchanging"
    TERMINATED = "terminated"


class SessionRunner:
    """
    Request/response loop between the operator and the device.

    Attributes:
        state: Current `SessionState`
        exchanges: Number of completed exchanges
    """

    def __init__(
        self,
        link: SerialLink,
        log: ExchangeLog,
        input_fn: Optional[Callable[[], str]] = None,
        output_fn: Optional[Callable[[str], None]] = None,
    ):
        """
        Args:
            link: Open, configured serial link
            log: Open exchange log
            input_fn: Reads one operator line, raising EOFError at end of
                input (default: input)
            output_fn: Writes one line to the operator (default: print)
        """
        self.link = link
        self.log = log
        self._input = input_fn or input
        self._output = output_fn or print

        self.state = SessionState.AWAITING_INPUT
        self.exchanges = 0
        self._pending: Optional[str] = None

    def prompt(self) -> Optional[str]:
        """
        Ask for the next expression.

        Returns:
            The line as typed, or None if the session should end
        """
        self._output(Prompt.EXPRESSION)
        self._output(Prompt.OPERATORS)
        try:
            line = self._input()
        except EOFError:
            logger.debug("End of input, terminating")
            return None
        if line == SENTINEL:
            return None
        return line

    def exchange(self, user_input: str) -> Exchange:
        """Send one expression, wait for the reply, show and log it."""
        self.link.send(user_input + LINE_TERMINATOR)
        # Read failures come back as "" and are logged like any reply
        exchange = Exchange(user_input, self.link.receive())

        self._output(exchange.display_text())
        self.log.append(exchange)
        self.exchanges += 1
        return exchange

    def step(self) -> SessionState:
        """Advance the state machine by one transition."""
        if self.state is SessionState.AWAITING_INPUT:
            line = self.prompt()
            if line is None:
                self.state = SessionState.TERMINATED
            else:
                self._pending = line
                self.state = SessionState.EXCHANGING
        elif self.state is SessionState.EXCHANGING:
            self.exchange(self._pending)
            self._pending = None
            self.state = SessionState.AWAITING_INPUT
        return self.state

    def run(self) -> int:
        """
        Loop until the sentinel is entered.

        Returns:
            Process exit code (0)
        """
        while self.step() is not SessionState.TERMINATED:
            pass
        logger.debug("Session ended after %d exchanges", self.exchanges)
        return EXIT_OK
