"""Input validation for ports and process IDs.

PUBLIC API:
  - ValidationResult: Result of port validation (valid + optional error)
  - validate_port: Validate user supplied port
  - validate_pid: Check a value is a usable process ID
"""

import math
from typing import NamedTuple

MIN_PORT = 1
MAX_PORT = 65535


class ValidationResult(NamedTuple):
    valid: bool
    error: str | None = None


def validate_port(value: str | int | float) -> ValidationResult:
    """Validate a port number.

    Strings must be all digits after trimming whitespace.

    Args:
        value: Raw input from the port prompt or command line.

    Returns:
        ValidationResult with error message when invalid.
    """
    if isinstance(value, str):
        trimmed = value.strip()
        if not trimmed.isdigit() or not trimmed.isascii():
            return ValidationResult(False, "Please enter a valid number")
        port: int | float = int(trimmed)
    elif isinstance(value, bool):
        return ValidationResult(False, "Please enter a valid number")
    else:
        port = value

    if isinstance(port, float):
        if math.isnan(port):
            return ValidationResult(False, "Please enter a valid number")
        if not port.is_integer():
            return ValidationResult(False, "Port must be a whole number")

    if port < MIN_PORT or port > MAX_PORT:
        return ValidationResult(False, f"Port must be between {MIN_PORT} and {MAX_PORT}")

    return ValidationResult(True)


def validate_pid(value: object) -> bool:
    """Check value is a positive integer process ID."""
    return isinstance(value, int) and not isinstance(value, bool) and value > 0
