"""
Calculator Protocol (Line-Based, Host Side)
===========================================

This module defines the plain-text protocol spoken with the calculator
firmware over the serial line, plus the fixed operator-facing text.

Protocol Overview
-----------------
There is no framing beyond a newline on the outbound side.

Input (Host → Device):
    <expression>\\n    - e.g. "3+4\\n", integers with one of + - * /

Output (Device → Host):
    <result>          - e.g. "7\\r\\n", read in one bounded read

The device does the arithmetic; the host forwards text verbatim.
"""


# Typing this exact line ends the session (case-sensitive)
SENTINEL = "beenden"

# Appended to every outbound expression
LINE_TERMINATOR = "\n"

# Usable bytes per receive: a 256-byte buffer less one for the terminator
READ_BUFFER_SIZE = 256
MAX_READ_BYTES = READ_BUFFER_SIZE - 1

DEFAULT_LOG_FILE = "Berechnung.txt"
ENCODING = "utf-8"


class Prompt:
    """Console text shown to the operator."""
    PORT = "Bitte geben sie den COM-Port an, mit dem der arduino verbunden ist. zb. COM3:"
    EXPRESSION = (
        "Bitte geben sie die Berechnung ein. "
        f"(oder schreiben sie '{SENTINEL}' um das Programm zu schliessen.):"
    )
    OPERATORS = "Es stehen folgende Rechenoperatoren zur Auswahl. (+) (-) (*) (/) und nur Ganzzahlen:"
    CANCELLED = "Abgebrochen."


class Label:
    """Prefixes used on the console and in the exchange log."""
    INPUT = "Benutzereingabe: "
    RESULT = "Ergebniss: "


class ErrorMessage:
    """Operator-facing error reports, followed by the OS error code."""
    OPEN = "Error opening serial port"
    GET_STATE = "Error getting state"
    SET_STATE = "Error setting state"
    WRITE = "Error writing to serial port"
    READ = "Error reading from serial port"
    LOG_OPEN = "Error opening log file"


# Process exit codes
EXIT_OK = 0
EXIT_OPEN_FAILED = 1
EXIT_CONFIG_FAILED = 1
EXIT_LOG_FAILED = 1
EXIT_INTERRUPTED = 1
