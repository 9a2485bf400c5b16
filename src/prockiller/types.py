"""Type definitions for prockiller.

Everything revolves around a port and the processes bound to it. Records are
plain dataclasses created by the resolver and replaced wholesale on each scan.

PUBLIC API:
  - Protocol: Socket protocol literal ("TCP" | "UDP")
  - ProcessRecord: One process bound to the scanned port
  - ParsedConnection: Intermediate parse result from a single output line
  - CommandResult: Captured output of an external command
  - KillOutcome: Result of a single kill attempt
  - BatchResult: Aggregated result of a kill-all batch
  - SessionState: States of the scan/termination session
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Literal

type Protocol = Literal["TCP", "UDP"]

# Shown when a process name cannot be resolved
UNKNOWN_NAME = "Unknown"


@dataclass(frozen=True)
class ProcessRecord:
    """Process bound to the scanned port.

    Attributes:
        pid: Process ID, unique within one resolved list.
        name: Display name, "Unknown" when lookup failed.
        port: The port that was scanned.
        protocol: TCP or UDP.
        local_address: Address as reported by the platform tool, verbatim.
    """

    pid: int
    name: str
    port: int
    protocol: Protocol
    local_address: str

    @property
    def label(self) -> str:
        """Get "name (pid)" format used in failure messages."""
        return f"{self.name} ({self.pid})"


@dataclass(frozen=True)
class ParsedConnection:
    """Single connection parsed from one line of tool output.

    Name is only present when the listing tool reports it (lsof does,
    netstat does not).
    """

    protocol: Protocol
    local_address: str
    pid: int
    name: str | None = None


@dataclass(frozen=True)
class CommandResult:
    """Captured result of a completed external command."""

    returncode: int
    stdout: str
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


@dataclass(frozen=True)
class KillOutcome:
    """Outcome of one kill attempt."""

    pid: int
    success: bool
    message: str


@dataclass
class BatchResult:
    """Aggregated outcome of a kill-all batch.

    Attributes:
        success: Rolled-up flag, True when at least one kill succeeded.
        message: Human readable summary.
        outcomes: Per-pid outcomes in the order the batch was issued.
    """

    success: bool
    message: str
    outcomes: list[KillOutcome] = field(default_factory=list)

    @property
    def killed_pids(self) -> set[int]:
        return {o.pid for o in self.outcomes if o.success}

    @property
    def failed_pids(self) -> set[int]:
        return {o.pid for o in self.outcomes if not o.success}


class SessionState(str, Enum):
    """States of a port scan session."""

    IDLE = "idle"
    SCANNING = "scanning"
    RESOLVED = "resolved"
    CONFIRMING_SINGLE = "confirming-single"
    CONFIRMING_ALL = "confirming-all"
    SHOWING_RESULT = "showing-result"
    FAILED = "failed"
