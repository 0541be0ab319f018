"""
Data Types for serialcalc
=========================

Plain dataclasses shared by the serial link, the session and the log.
"""

from dataclasses import dataclass
from typing import Any, Dict

import serial

from .protocol import Label


@dataclass(frozen=True)
class PortConfig:
    """
    Serial line parameters applied once after the port is opened.

    Defaults are the calculator firmware's settings: 9600 8N1.
    """
    baudrate: int = 9600
    bytesize: int = serial.EIGHTBITS
    stopbits: float = serial.STOPBITS_ONE
    parity: str = serial.PARITY_NONE

    def as_settings(self) -> Dict[str, Any]:
        """Return the fields in the form `Serial.apply_settings()` takes."""
        return {
            'baudrate': self.baudrate,
            'bytesize': self.bytesize,
            'stopbits': self.stopbits,
            'parity': self.parity,
        }

    def matches(self, settings: Dict[str, Any]) -> bool:
        """Check whether a pyserial settings dict carries these parameters."""
        return all(settings.get(key) == value
                   for key, value in self.as_settings().items())

    def __str__(self) -> str:
        return f"{self.baudrate} {self.bytesize}{self.parity}{self.stopbits:g}"


@dataclass
class Exchange:
    """
    One request/response pair.

    Attributes:
        user_input: Expression exactly as the operator typed it
        response: Text read back from the device ("" if the read failed)
    """
    user_input: str
    response: str = ""

    @property
    def result(self) -> str:
        """
        Response on a single line.

        The trailing terminator is dropped and any line breaks left inside
        (e.g. two replies read at once) become spaces.
        """
        return " ".join(self.response.rstrip("\r\n").splitlines())

    def display_text(self) -> str:
        return f"{Label.RESULT}{self.result}"

    def to_log_line(self) -> str:
        return f"{Label.INPUT}{self.user_input} {Label.RESULT}{self.result}"
