"""
Exchange log
============

Text file with one line per exchange. A new session truncates the file;
every line is flushed as soon as it is written.
"""

import logging
import os
from typing import IO, Optional, Union

from .data_types import Exchange
from .protocol import DEFAULT_LOG_FILE, ENCODING

logger = logging.getLogger(__name__)


class ExchangeLog:
    """
    Append-only log of operator inputs and device replies.

    Example:
        >>> with ExchangeLog('Berechnung.txt') as log:
        ...     log.append(Exchange('3+4', '7'))
    """

    def __init__(self, path: Union[str, os.PathLike] = DEFAULT_LOG_FILE):
        self.path = path
        self.lines_written = 0
        self._file: Optional[IO[str]] = None

    def __enter__(self) -> 'ExchangeLog':
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    @property
    def is_open(self) -> bool:
        return self._file is not None and not self._file.closed

    def open(self) -> None:
        """Create the file, discarding any previous run's content."""
        if self.is_open:
            return
        self._file = open(self.path, 'w', encoding=ENCODING)
        logger.debug("Logging exchanges to %s", self.path)

    def append(self, exchange: Exchange) -> None:
        if not self.is_open:
            raise ValueError(f"Exchange log {self.path} is not open")
        self._file.write(exchange.to_log_line() + '\n')
        self._file.flush()
        self.lines_written += 1

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None
