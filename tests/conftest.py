"""
Shared fixtures for the serialcalc test suite.

`MockSerial` stands in for `serial.Serial` so that no hardware is needed.
"""

from typing import Callable, List, Optional, Tuple
from unittest.mock import patch

import pytest
import serial

from serialcalc import ExchangeLog, SerialLink


class MockSerial:
    """Mock serial port for testing without hardware."""

    # A port left behind by some other program: 115200 7E2
    PRIOR_SETTINGS = {
        'baudrate': 115200,
        'bytesize': serial.SEVENBITS,
        'parity': serial.PARITY_EVEN,
        'stopbits': serial.STOPBITS_TWO,
        'xonxoff': False,
        'dsrdtr': False,
        'rtscts': False,
        'timeout': None,
        'write_timeout': None,
        'inter_byte_timeout': None,
    }

    def __init__(self, responder: Optional[Callable[[bytes], bytes]] = None):
        self.settings = dict(self.PRIOR_SETTINGS)
        self.responder = responder
        self.is_open = True
        self.written: List[bytes] = []
        self.events: List[Tuple[str, bytes]] = []
        self.read_calls = 0
        self.apply_calls = 0
        self.close_calls = 0
        self.fail_write = False
        self.fail_read = False
        self.fail_get_settings = False
        self.fail_apply_settings = False
        self._rx = bytearray()

    def write(self, data: bytes) -> int:
        if self.fail_write:
            raise serial.SerialTimeoutException('Write timeout')
        self.written.append(bytes(data))
        self.events.append(('write', bytes(data)))
        if self.responder is not None:
            self.inject_response(self.responder(bytes(data)))
        return len(data)

    def read(self, size: int = 1) -> bytes:
        self.read_calls += 1
        if self.fail_read:
            raise serial.SerialException(5, 'Input/output error')
        data = bytes(self._rx[:size])
        del self._rx[:size]
        self.events.append(('read', data))
        return data

    @property
    def in_waiting(self) -> int:
        return len(self._rx)

    def reset_input_buffer(self) -> None:
        self._rx.clear()

    def inject_response(self, data: bytes) -> None:
        """Queue bytes to be read."""
        self._rx.extend(data)

    def get_settings(self) -> dict:
        if self.fail_get_settings:
            raise serial.SerialException(22, 'Invalid argument')
        return dict(self.settings)

    def apply_settings(self, settings: dict) -> None:
        if self.fail_apply_settings:
            raise serial.SerialException(22, 'Invalid argument')
        self.apply_calls += 1
        self.settings.update(settings)

    def close(self) -> None:
        self.close_calls += 1
        self.is_open = False


def arduino_calculator(data: bytes) -> bytes:
    """Reply the way the calculator sketch does for the few sums tests use."""
    results = {b'3+4\n': b'7', b'10-4\n': b'6', b'6*7\n': b'42', b'8/2\n': b'4'}
    return results.get(data, b'ERR') + b'\r\n'


class ScriptedInput:
    """Feeds operator lines one by one, then raises EOFError."""

    def __init__(self, *lines: str):
        self.lines = list(lines)
        self.calls = 0

    def __call__(self) -> str:
        self.calls += 1
        if not self.lines:
            raise EOFError
        return self.lines.pop(0)


@pytest.fixture
def mock_serial():
    """Create a mock serial port answering like the calculator board."""
    return MockSerial(responder=arduino_calculator)


@pytest.fixture
def serial_class(mock_serial):
    """Patch serial.Serial so every open returns `mock_serial`."""
    with patch('serial.Serial') as mock_serial_class:
        mock_serial_class.return_value = mock_serial
        yield mock_serial_class


@pytest.fixture
def link(serial_class, mock_serial):
    """Open, configured link on the mock port."""
    with SerialLink('ttyUSB0', platform='linux') as link:
        link.configure()
        yield link


@pytest.fixture
def log_path(tmp_path):
    return tmp_path / 'Berechnung.txt'


@pytest.fixture
def exchange_log(log_path):
    with ExchangeLog(log_path) as log:
        yield log
