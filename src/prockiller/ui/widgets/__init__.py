"""Textual widgets for prockiller.

PUBLIC API:
  - Banner: ASCII art title with tagline and version
  - ProcessTable: DataTable listing processes bound to the scanned port
"""

from .banner import Banner
from .process_table import ProcessTable

__all__ = ["Banner", "ProcessTable"]
