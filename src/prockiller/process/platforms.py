"""Platform command families.

Each platform knows which tools to shell out to and how to read their
output. The resolver and terminator stay platform-agnostic and only talk to
a Platform instance, which is picked once at startup.

PUBLIC API:
  - Platform: Abstract command family
  - UnixPlatform: lsof + kill (macOS, Linux, BSD)
  - WindowsPlatform: netstat + tasklist + taskkill
  - get_platform: Platform for the running OS (cached)
"""

import sys
from abc import ABC, abstractmethod
from typing import Optional

from ..types import ParsedConnection
from .parsers import parse_lsof_line, parse_netstat_line, parse_tasklist_name

__all__ = ["Platform", "UnixPlatform", "WindowsPlatform", "get_platform"]


class Platform(ABC):
    """Command family for one operating system.

    Attributes:
        name: Short identifier used in logs.
        permission_markers: Substrings of tool errors meaning "not allowed".
        elevation_hint: Advice appended to permission errors.
    """

    name: str = ""
    permission_markers: tuple[str, ...] = ()
    elevation_hint: str = ""

    @abstractmethod
    def scan_command(self, port: int) -> str:
        """Command listing sockets on port."""

    @abstractmethod
    def parse_scan_output(self, output: str, port: int) -> list[ParsedConnection]:
        """Parse every usable line of scan output, in tool order."""

    def name_lookup_command(self, pid: int) -> Optional[str]:
        """Command resolving pid to an image name, None if scan already has names."""
        return None

    def parse_name_output(self, output: str) -> Optional[str]:
        return None

    @abstractmethod
    def kill_command(self, pid: int) -> str:
        """Command forcibly terminating pid."""

    def is_permission_error(self, message: str) -> bool:
        return any(marker in message for marker in self.permission_markers)


class UnixPlatform(Platform):
    """lsof for scanning, kill -9 for termination."""

    name = "unix"
    permission_markers = ("Operation not permitted",)
    elevation_hint = "Try running with sudo."

    def scan_command(self, port: int) -> str:
        return f"lsof -i :{port} -P -n"

    def parse_scan_output(self, output: str, port: int) -> list[ParsedConnection]:
        # First line is the COMMAND/PID/USER header
        lines = output.strip().splitlines()[1:]
        return [conn for conn in map(parse_lsof_line, lines) if conn]

    def kill_command(self, pid: int) -> str:
        return f"kill -9 {pid}"


class WindowsPlatform(Platform):
    """netstat for scanning, tasklist for names, taskkill for termination."""

    name = "windows"
    permission_markers = ("Access is denied",)
    elevation_hint = "Try running as Administrator."

    def scan_command(self, port: int) -> str:
        return f"netstat -ano | findstr :{port}"

    def parse_scan_output(self, output: str, port: int) -> list[ParsedConnection]:
        results = []
        for line in output.splitlines():
            conn = parse_netstat_line(line, port)
            if conn:
                results.append(conn)
        return results

    def name_lookup_command(self, pid: int) -> Optional[str]:
        return f'tasklist /FI "PID eq {pid}" /FO CSV /NH'

    def parse_name_output(self, output: str) -> Optional[str]:
        return parse_tasklist_name(output)

    def kill_command(self, pid: int) -> str:
        return f"taskkill /PID {pid} /F"


_platform: Optional[Platform] = None


def get_platform() -> Platform:
    """Get the platform for the running OS, selected once."""
    global _platform
    if _platform is None:
        _platform = WindowsPlatform() if sys.platform == "win32" else UnixPlatform()
    return _platform
