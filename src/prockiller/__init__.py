"""Find and kill processes hogging your ports.

Interactive terminal tool: enter a port, see which processes own it, kill
one or all of them. Uses lsof on Unix and netstat/tasklist/taskkill on
Windows.

PUBLIC API:
  - PortScanSession: Scan/kill state machine
  - ProcessResolver: Resolve processes bound to a port
  - Terminator: Kill one process or a batch
  - ProcessRecord: One process bound to a port
"""

__version__ = "0.1.0"

from .process import ProcessResolver, Terminator  # noqa: E402
from .session import PortScanSession  # noqa: E402
from .types import ProcessRecord  # noqa: E402

__all__ = ["PortScanSession", "ProcessResolver", "Terminator", "ProcessRecord", "__version__"]
