"""Textual screens for prockiller.

PUBLIC API:
  - MainScreen: Port prompt, process table and dialogs
"""

from .main_screen import MainScreen

__all__ = ["MainScreen"]
