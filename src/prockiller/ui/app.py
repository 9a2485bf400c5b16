"""Prockiller Textual application.

PUBLIC API:
  - ProcKillerApp: Terminal UI wrapping a PortScanSession
"""

import logging
from typing import Optional

from textual import work
from textual.app import App

from ..config import ConfigManager, get_config_manager
from ..process import ProcessResolver, Terminator
from ..session import PortScanSession
from ..update import check_for_update, update_message
from .screens import MainScreen

__all__ = ["ProcKillerApp"]

logger = logging.getLogger(__name__)


class ProcKillerApp(App):
    """Find and kill processes bound to a port.

    Args:
        initial_port: Scan this port as soon as the UI is up.
        config: Settings. Uses the global config manager if None.
        session: Pre-built session, mainly for tests.
    """

    TITLE = "prockiller"

    CSS = """
    Screen {
        padding: 1 2;
    }
    #input-box {
        height: auto;
        margin: 1 0;
    }
    #input-row {
        height: auto;
    }
    #input-label {
        width: auto;
        padding: 1 0;
    }
    #port-input {
        width: 20;
    }
    #input-error {
        height: auto;
    }
    #scanning, #process-count, #update-notice {
        height: auto;
        margin: 1 0;
    }
    #update-notice {
        display: none;
    }
    #process-table {
        height: auto;
        max-height: 20;
        border: round #ff6a00;
    }
    #panel {
        height: auto;
        margin: 1 0;
    }
    """

    def __init__(
        self,
        initial_port: Optional[int] = None,
        config: Optional[ConfigManager] = None,
        session: Optional[PortScanSession] = None,
    ):
        super().__init__()
        self.config = config or get_config_manager()
        self.initial_port = initial_port
        self.session = session or PortScanSession(
            resolver=ProcessResolver(timeout=self.config.scan_timeout),
            terminator=Terminator(timeout=self.config.kill_timeout),
        )
        self.session.on_change = self._on_session_change
        self.main_screen = MainScreen(self.session)

    def get_default_screen(self) -> MainScreen:
        return self.main_screen

    def on_mount(self) -> None:
        if self.config.check_updates:
            self._check_updates()
        if self.initial_port is not None:
            self.call_after_refresh(self.main_screen.start_scan, self.initial_port)

    def _on_session_change(self, session: PortScanSession) -> None:
        if self.main_screen.is_mounted:
            self.main_screen.render_session()

    @work(thread=True, group="update")
    def _check_updates(self) -> None:
        """Check PyPI off the UI thread and show a notice if outdated."""
        info = check_for_update()
        message = update_message(info)
        if message:
            logger.info(message)
            self.call_from_thread(self.main_screen.show_update_notice, message)
