"""Scan and termination session state machine.

The session is the single writer of the process list. The UI reads its
attributes and calls intent methods; every change is announced through the
on_change callback so the UI can re-render.

    idle -> scanning -> resolved | failed
    resolved -> confirming-single | confirming-all | scanning
    confirming-* -> showing-result (confirm) | resolved (cancel)
    showing-result -> resolved (list non-empty) | idle
    failed -> scanning (retry) | idle (dismiss)

PUBLIC API:
  - PortScanSession: Session state machine
"""

import logging
from collections.abc import Callable
from typing import Optional

from .errors import ProcKillerError
from .process import ProcessResolver, Terminator
from .types import BatchResult, KillOutcome, ProcessRecord, SessionState

logger = logging.getLogger(__name__)

_SCAN_FROM = frozenset([SessionState.IDLE, SessionState.RESOLVED, SessionState.FAILED])
_CONFIRMING = frozenset([SessionState.CONFIRMING_SINGLE, SessionState.CONFIRMING_ALL])


class PortScanSession:
    """State machine driving scans and kills for one port at a time.

    Args:
        resolver: Process resolver. Default uses the running OS.
        terminator: Terminator. Default uses the running OS.
        on_change: Called with the session after every state change.

    Attributes:
        state: Current SessionState.
        port: Last scanned port, None before the first scan.
        processes: Authoritative process list.
        selected_index: Highlighted row, always valid while the list is shown.
        error: Last scan error message.
        result: Last kill outcome or batch result.
    """

    def __init__(
        self,
        resolver: Optional[ProcessResolver] = None,
        terminator: Optional[Terminator] = None,
        on_change: Optional[Callable[["PortScanSession"], None]] = None,
    ):
        self.resolver = resolver or ProcessResolver()
        self.terminator = terminator or Terminator()
        self.on_change = on_change

        self.state = SessionState.IDLE
        self.port: Optional[int] = None
        self.processes: list[ProcessRecord] = []
        self.selected_index = 0
        self.error: Optional[str] = None
        self.result: Optional[KillOutcome | BatchResult] = None
        self._killing = False

    @property
    def selected(self) -> Optional[ProcessRecord]:
        """Currently highlighted record."""
        if 0 <= self.selected_index < len(self.processes):
            return self.processes[self.selected_index]
        return None

    @property
    def busy(self) -> bool:
        """True while a scan or kill is in flight."""
        return self.state == SessionState.SCANNING or self._killing

    @property
    def can_kill_all(self) -> bool:
        return self.state == SessionState.RESOLVED and len(self.processes) > 1

    def _set_state(self, state: SessionState) -> None:
        if state != self.state:
            logger.debug(f"Session {self.state.value} -> {state.value}")
        self.state = state
        self._notify()

    def _notify(self) -> None:
        if self.on_change:
            self.on_change(self)

    def _clamp_selection(self) -> None:
        self.selected_index = max(0, min(self.selected_index, len(self.processes) - 1))

    def _remove_pids(self, pids: set[int]) -> None:
        self.processes = [p for p in self.processes if p.pid not in pids]
        self._clamp_selection()

    async def scan(self, port: int) -> bool:
        """Scan port and replace the process list.

        Ignored while a scan is already running or a dialog is open.

        Args:
            port: Port to scan.

        Returns:
            True if a scan ran.
        """
        if self.state not in _SCAN_FROM or self._killing:
            logger.debug(f"Ignoring scan of port {port} in state {self.state.value}")
            return False

        self.port = port
        self.processes = []
        self.selected_index = 0
        self.error = None
        self.result = None
        self._set_state(SessionState.SCANNING)

        try:
            processes = await self.resolver.resolve(port)
        except ProcKillerError as e:
            logger.warning(f"Scan of port {port} failed: {e}")
            self.error = str(e)
            self._set_state(SessionState.FAILED)
            return True

        self.processes = processes
        self._set_state(SessionState.RESOLVED)
        return True

    async def rescan(self) -> bool:
        """Scan the last port again."""
        if self.port is None or self.state != SessionState.RESOLVED:
            return False
        return await self.scan(self.port)

    async def retry(self) -> bool:
        """Retry a failed scan with the same port."""
        if self.port is None or self.state != SessionState.FAILED:
            return False
        return await self.scan(self.port)

    def select_index(self, index: int) -> None:
        """Highlight row index, clamped to the list."""
        if self.state != SessionState.RESOLVED or not self.processes:
            return
        self.selected_index = max(0, min(index, len(self.processes) - 1))
        self._notify()

    def request_kill_selected(self) -> bool:
        """Ask for confirmation to kill the highlighted process."""
        if self.state != SessionState.RESOLVED or self.selected is None:
            return False
        self._set_state(SessionState.CONFIRMING_SINGLE)
        return True

    def request_kill_all(self) -> bool:
        """Ask for confirmation to kill every listed process."""
        if not self.can_kill_all:
            return False
        self._set_state(SessionState.CONFIRMING_ALL)
        return True

    async def confirm(self) -> bool:
        """Carry out the pending kill and show its result.

        Returns:
            True if a kill was issued.
        """
        if self.state not in _CONFIRMING or self._killing:
            return False

        self._killing = True
        try:
            if self.state == SessionState.CONFIRMING_SINGLE:
                record = self.selected
                if record is None:
                    self._set_state(SessionState.RESOLVED)
                    return False
                outcome = await self.terminator.kill_one(record.pid)
                if outcome.success:
                    self._remove_pids({record.pid})
                self.result = outcome
            else:
                batch = await self.terminator.kill_all(list(self.processes))
                self._remove_pids(batch.killed_pids)
                self.result = batch
        finally:
            self._killing = False

        self._set_state(SessionState.SHOWING_RESULT)
        return True

    def cancel(self) -> bool:
        """Close a confirmation without killing anything."""
        if self.state not in _CONFIRMING or self._killing:
            return False
        self._set_state(SessionState.RESOLVED)
        return True

    def dismiss_result(self) -> bool:
        """Close the result or error panel."""
        if self.state == SessionState.SHOWING_RESULT:
            self.result = None
            if self.processes:
                self._clamp_selection()
                self._set_state(SessionState.RESOLVED)
            else:
                self.reset()
            return True
        if self.state == SessionState.FAILED:
            self.reset()
            return True
        return False

    def reset(self) -> bool:
        """Clear everything and return to idle."""
        if self.busy:
            return False
        self.processes = []
        self.selected_index = 0
        self.error = None
        self.result = None
        self._set_state(SessionState.IDLE)
        return True
