"""Prockiller exceptions.

PUBLIC API:
  - ProcKillerError: Base exception for all prockiller operations
  - CommandTimeoutError: External command did not finish before its deadline
  - CommandError: External command could not be started
"""


class ProcKillerError(Exception):
    """Base exception for all prockiller operations."""

    pass


class CommandTimeoutError(ProcKillerError):
    """Raised when an external command outlives its deadline.

    The command itself is left running; only the wait is abandoned.

    Attributes:
        command: Command string that timed out.
        timeout: Deadline in seconds.
    """

    def __init__(self, command: str, timeout: float):
        self.command = command
        self.timeout = timeout
        super().__init__(f"Command timed out after {timeout:g}s: {command}")


class CommandError(ProcKillerError):
    """Raised when an external command cannot be started at all."""

    pass
