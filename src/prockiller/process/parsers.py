"""Line parsers for platform listing tools.

Pure functions, one line in, one record (or None) out. Malformed lines are
rejected with None and never raise, so a noisy listing degrades to fewer
results instead of none.

PUBLIC API:
  - parse_lsof_line: Parse one line of `lsof -i :PORT -P -n` output
  - parse_netstat_line: Parse one line of `netstat -ano` output for a port
  - parse_tasklist_name: Extract image name from `tasklist /FO CSV` output
"""

import re
from typing import Optional

from ..types import ParsedConnection, Protocol

# lsof: COMMAND PID USER FD TYPE DEVICE SIZE/OFF NODE NAME
_LSOF_MIN_FIELDS = 9
_LSOF_NAME = 0
_LSOF_PID = 1
_LSOF_NODE = 7
_LSOF_ADDRESS = 8

# netstat: PROTO LOCAL FOREIGN [STATE] PID
_NETSTAT_MIN_FIELDS = 4
_NETSTAT_PROTOCOLS = frozenset(["TCP", "UDP"])

# Port is the last colon-delimited segment: 0.0.0.0:3000, [::1]:3000, [fe80::1%12]:3000
_PORT_SUFFIX = re.compile(r":(\d+)$")
_QUOTED_FIELD = re.compile(r'"([^"]+)"')


def _parse_positive_int(text: str) -> Optional[int]:
    """Parse base-10 integer > 0, None otherwise."""
    try:
        value = int(text, 10)
    except ValueError:
        return None
    return value if value > 0 else None


def parse_lsof_line(line: str) -> Optional[ParsedConnection]:
    """Parse a single lsof output line.

    Args:
        line: Raw line, e.g. "node 12345 walter 23u IPv4 12345 0t0 TCP *:3000 (LISTEN)".

    Returns:
        ParsedConnection with name, or None if the line is not a socket row.
        The address field is kept verbatim, including "a:p->b:q" notation.
    """
    parts = line.split()
    if len(parts) < _LSOF_MIN_FIELDS:
        return None

    pid = _parse_positive_int(parts[_LSOF_PID])
    if pid is None:
        return None

    protocol: Protocol = "TCP" if "TCP" in parts[_LSOF_NODE] else "UDP"

    return ParsedConnection(
        protocol=protocol,
        local_address=parts[_LSOF_ADDRESS],
        pid=pid,
        name=parts[_LSOF_NAME],
    )


def parse_netstat_line(line: str, target_port: int) -> Optional[ParsedConnection]:
    """Parse a single netstat -ano line, keeping only rows for target_port.

    Args:
        line: Raw line, e.g. "  TCP  0.0.0.0:3000  0.0.0.0:0  LISTENING  12345".
        target_port: Port being scanned; rows for other ports are rejected.

    Returns:
        ParsedConnection without name, or None. PID 0 (connections not yet
        attributed to a process, e.g. TIME_WAIT) is rejected.
    """
    trimmed = line.strip()
    if not trimmed:
        return None

    parts = trimmed.split()
    if len(parts) < _NETSTAT_MIN_FIELDS:
        return None

    protocol = parts[0].upper()
    if protocol not in _NETSTAT_PROTOCOLS:
        return None

    local_address = parts[1]
    match = _PORT_SUFFIX.search(local_address)
    if not match or int(match.group(1)) != target_port:
        return None

    # PID is always the last column (UDP rows have no state column)
    pid = _parse_positive_int(parts[-1])
    if pid is None:
        return None

    return ParsedConnection(protocol=protocol, local_address=local_address, pid=pid)  # type: ignore[arg-type]


def parse_tasklist_name(output: str) -> Optional[str]:
    """Get image name from tasklist CSV output.

    Args:
        output: e.g. '"node.exe","12345","Console","1","50,000 K"'.

    Returns:
        First quoted field, or None when tasklist found nothing.
    """
    match = _QUOTED_FIELD.search(output)
    return match.group(1) if match else None
