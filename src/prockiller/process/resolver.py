"""Port to process resolution.

PUBLIC API:
  - ProcessResolver: Resolve the processes bound to a port
  - dedupe_by_pid: Keep the first connection seen for each pid
"""

import logging
from typing import Optional

from ..config import DEFAULT_SCAN_TIMEOUT
from ..errors import CommandError, CommandTimeoutError
from ..types import UNKNOWN_NAME, ParsedConnection, ProcessRecord
from .platforms import Platform, get_platform
from .runner import CommandRunner, run_command

logger = logging.getLogger(__name__)


def dedupe_by_pid(connections: list[ParsedConnection]) -> list[ParsedConnection]:
    """Collapse multiple sockets of one process, first match wins.

    Order of first appearance is preserved.
    """
    seen: set[int] = set()
    unique = []
    for conn in connections:
        if conn.pid not in seen:
            seen.add(conn.pid)
            unique.append(conn)
    return unique


class ProcessResolver:
    """Find processes bound to a port.

    Only timeouts escape. A missing tool, a denied listing or an empty result
    all look the same to the user, so they all resolve to [].

    Args:
        platform: Command family. Uses the running OS if None.
        runner: Command runner, injectable for tests.
        timeout: Deadline for each scan or name lookup command.
    """

    def __init__(
        self,
        platform: Optional[Platform] = None,
        runner: CommandRunner = run_command,
        timeout: float = DEFAULT_SCAN_TIMEOUT,
    ):
        self.platform = platform or get_platform()
        self.runner = runner
        self.timeout = timeout

    async def resolve(self, port: int) -> list[ProcessRecord]:
        """Resolve processes on port.

        Args:
            port: Port to scan.

        Returns:
            One record per pid, in the order the tool listed them.

        Raises:
            CommandTimeoutError: Scan command did not finish in time.
        """
        command = self.platform.scan_command(port)
        try:
            result = await self.runner(command, self.timeout)
        except CommandTimeoutError:
            raise
        except (CommandError, OSError) as e:
            logger.debug(f"Scan for port {port} failed to run: {e}")
            return []

        # lsof and findstr exit non-zero when nothing matches
        if not result.ok and not result.stdout.strip():
            logger.debug(f"Scan for port {port} found nothing (exit={result.returncode})")
            return []

        connections = dedupe_by_pid(self.platform.parse_scan_output(result.stdout, port))

        records = []
        for conn in connections:
            name = conn.name or await self._lookup_name(conn.pid)
            records.append(
                ProcessRecord(
                    pid=conn.pid,
                    name=name,
                    port=port,
                    protocol=conn.protocol,
                    local_address=conn.local_address,
                )
            )

        logger.info(f"Port {port}: found {len(records)} process(es)")
        return records

    async def _lookup_name(self, pid: int) -> str:
        """Resolve display name for pid, "Unknown" on any failure."""
        command = self.platform.name_lookup_command(pid)
        if command is None:
            return UNKNOWN_NAME

        try:
            result = await self.runner(command, self.timeout)
        except (CommandTimeoutError, CommandError, OSError) as e:
            logger.debug(f"Name lookup for pid {pid} failed: {e}")
            return UNKNOWN_NAME

        if not result.ok:
            logger.debug(f"Name lookup for pid {pid} exited {result.returncode}")
            return UNKNOWN_NAME

        return self.platform.parse_name_output(result.stdout) or UNKNOWN_NAME
