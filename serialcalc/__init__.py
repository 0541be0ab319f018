"""
serialcalc - Serial Calculator Console
======================================

Relays arithmetic expressions typed at the console to a calculator
board (e.g. an Arduino) over a serial line, prints the reply and logs
every exchange.

Example:
    >>> from serialcalc import SerialLink, ExchangeLog, SessionRunner
    >>>
    >>> with SerialLink('COM3') as link:
    ...     link.configure()
    ...     with ExchangeLog('Berechnung.txt') as log:
    ...         SessionRunner(link, log).run()
"""

from .port import (
    SerialLink,
    SerialLinkError,
    OpenError,
    ConfigError,
    resolve_port_name,
)
from .data_types import PortConfig, Exchange
from .exchange_log import ExchangeLog
from .session import SessionRunner, SessionState
from .protocol import SENTINEL, MAX_READ_BYTES

__version__ = "1.0.0"
__all__ = [
    "SerialLink",
    "SerialLinkError",
    "OpenError",
    "ConfigError",
    "resolve_port_name",
    "PortConfig",
    "Exchange",
    "ExchangeLog",
    "SessionRunner",
    "SessionState",
    "SENTINEL",
    "MAX_READ_BYTES",
]
