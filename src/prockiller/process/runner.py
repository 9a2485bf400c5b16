"""Timeout-bounded execution of external commands.

PUBLIC API:
  - run_command: Run a shell command, return CommandResult or raise on timeout
  - CommandRunner: Callable type accepted by resolver and terminator
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from ..errors import CommandError, CommandTimeoutError
from ..types import CommandResult

logger = logging.getLogger(__name__)

type CommandRunner = Callable[[str, float], Awaitable[CommandResult]]

# Commands abandoned on timeout keep running; hold a reference until they finish
_abandoned: set[asyncio.Task] = set()


def _decode(data: bytes | None) -> str:
    return data.decode("utf-8", errors="replace") if data else ""


async def run_command(command: str, timeout: float) -> CommandResult:
    """Run command through the system shell with a deadline.

    The command races a timer. Whichever finishes first wins and the timer
    is always cancelled. On timeout the spawned process is not killed, it is
    left to finish in the background.

    Args:
        command: Shell command string.
        timeout: Deadline in seconds.

    Returns:
        CommandResult for any completed command, whatever its exit status.

    Raises:
        CommandTimeoutError: Command did not complete within timeout.
        CommandError: Command could not be started.
    """
    logger.debug(f"Running: {command} (timeout={timeout}s)")
    try:
        proc = await asyncio.create_subprocess_shell(
            command,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        raise CommandError(f"Failed to start {command!r}: {e}") from e

    command_task = asyncio.ensure_future(proc.communicate())
    timer_task = asyncio.ensure_future(asyncio.sleep(timeout))

    try:
        done, _ = await asyncio.wait({command_task, timer_task}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        timer_task.cancel()

    if command_task not in done:
        logger.warning(f"Command timed out after {timeout}s: {command}")
        _abandoned.add(command_task)
        command_task.add_done_callback(_abandoned.discard)
        raise CommandTimeoutError(command, timeout)

    stdout, stderr = command_task.result()
    result = CommandResult(returncode=proc.returncode or 0, stdout=_decode(stdout), stderr=_decode(stderr))
    logger.debug(f"Finished: {command} (exit={result.returncode})")
    return result
