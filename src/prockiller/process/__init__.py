"""Port to process resolution and termination.

Combines pure line parsers (parsers.py), the timeout-bounded command runner
(runner.py) and the platform command families (platforms.py) into the
resolver and terminator used by the session.

PUBLIC API:
  - ProcessResolver: Resolve the processes bound to a port
  - Terminator: Kill one process or a batch concurrently
  - Platform: Abstract command family
  - UnixPlatform: lsof + kill
  - WindowsPlatform: netstat + tasklist + taskkill
  - get_platform: Platform for the running OS
  - run_command: Run a shell command with a deadline
  - parse_lsof_line: Parse one lsof line
  - parse_netstat_line: Parse one netstat line for a port
  - parse_tasklist_name: Extract image name from tasklist output
  - dedupe_by_pid: Keep the first connection seen for each pid
  - summarize_batch: Roll kill outcomes up into a BatchResult
"""

from .parsers import parse_lsof_line, parse_netstat_line, parse_tasklist_name
from .platforms import Platform, UnixPlatform, WindowsPlatform, get_platform
from .resolver import ProcessResolver, dedupe_by_pid
from .runner import CommandRunner, run_command
from .terminator import Terminator, summarize_batch

__all__ = [
    "ProcessResolver",
    "Terminator",
    "Platform",
    "UnixPlatform",
    "WindowsPlatform",
    "get_platform",
    "CommandRunner",
    "run_command",
    "parse_lsof_line",
    "parse_netstat_line",
    "parse_tasklist_name",
    "dedupe_by_pid",
    "summarize_batch",
]
