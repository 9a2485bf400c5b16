"""Textual UI for prockiller.

PUBLIC API:
  - ProcKillerApp: Terminal UI wrapping a PortScanSession
"""

from .app import ProcKillerApp

__all__ = ["ProcKillerApp"]
