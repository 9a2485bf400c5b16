"""Process termination with outcome classification.

PUBLIC API:
  - Terminator: Kill one process or a batch concurrently
  - summarize_batch: Roll per-pid outcomes up into a BatchResult
"""

import asyncio
import logging
from typing import Optional

from ..config import DEFAULT_KILL_TIMEOUT
from ..errors import CommandError, CommandTimeoutError
from ..types import BatchResult, KillOutcome, ProcessRecord
from .platforms import Platform, get_platform
from .runner import CommandRunner, run_command

logger = logging.getLogger(__name__)

# Failure descriptions shown in a partial-failure summary
_MAX_LISTED_FAILURES = 2


def _plural(count: int) -> str:
    return "process" if count == 1 else "processes"


def summarize_batch(records: list[ProcessRecord], outcomes: list[KillOutcome]) -> BatchResult:
    """Aggregate outcomes of a kill-all batch.

    Any success makes the batch a success. Failures are still listed so the
    user can retry them individually.

    Args:
        records: Records the batch was issued for, same order as outcomes.
        outcomes: One outcome per record.
    """
    errors = [f"{record.label}: {outcome.message}" for record, outcome in zip(records, outcomes) if not outcome.success]
    killed = len(outcomes) - len(errors)
    failed = len(errors)

    if failed == 0:
        return BatchResult(True, f"Killed all {killed} {_plural(killed)}", outcomes)
    if killed == 0:
        return BatchResult(False, f"Failed to kill any processes. {errors[0]}", outcomes)
    listed = "; ".join(errors[:_MAX_LISTED_FAILURES])
    return BatchResult(True, f"Killed {killed}, failed {failed}: {listed}", outcomes)


class Terminator:
    """Issue platform kill commands and classify their results.

    Args:
        platform: Command family. Uses the running OS if None.
        runner: Command runner, injectable for tests.
        timeout: Deadline for each kill command.
    """

    def __init__(
        self,
        platform: Optional[Platform] = None,
        runner: CommandRunner = run_command,
        timeout: float = DEFAULT_KILL_TIMEOUT,
    ):
        self.platform = platform or get_platform()
        self.runner = runner
        self.timeout = timeout

    def _classify(self, pid: int, error: str) -> KillOutcome:
        if self.platform.is_permission_error(error):
            message = f"Permission denied. {self.platform.elevation_hint}"
        else:
            message = f"Failed to kill process: {error}"
        logger.warning(f"Kill pid {pid} failed: {error}")
        return KillOutcome(pid, False, message)

    async def kill_one(self, pid: int) -> KillOutcome:
        """Forcibly terminate pid. Never raises.

        Args:
            pid: Process ID to kill.

        Returns:
            KillOutcome with a user facing message.
        """
        try:
            result = await self.runner(self.platform.kill_command(pid), self.timeout)
        except CommandTimeoutError:
            logger.warning(f"Kill pid {pid} timed out after {self.timeout}s")
            return KillOutcome(pid, False, "Kill operation timed out")
        except (CommandError, OSError) as e:
            return self._classify(pid, str(e))

        if not result.ok:
            error = result.stderr.strip() or result.stdout.strip() or f"exit status {result.returncode}"
            return self._classify(pid, error)

        logger.info(f"Killed pid {pid}")
        return KillOutcome(pid, True, f"Process {pid} terminated successfully")

    async def kill_all(self, records: list[ProcessRecord]) -> BatchResult:
        """Kill every record concurrently and wait for all of them.

        One failing kill never cancels the others.

        Args:
            records: Snapshot of the current process list.

        Returns:
            BatchResult carrying per-pid outcomes.
        """
        if not records:
            return BatchResult(False, "No processes to kill")

        results = await asyncio.gather(*(self.kill_one(r.pid) for r in records), return_exceptions=True)

        outcomes = []
        for record, result in zip(records, results):
            if isinstance(result, BaseException):
                logger.error(f"Unexpected error killing pid {record.pid}: {result}")
                outcomes.append(KillOutcome(record.pid, False, str(result) or "Unknown error"))
            else:
                outcomes.append(result)

        batch = summarize_batch(records, outcomes)
        logger.info(batch.message)
        return batch
