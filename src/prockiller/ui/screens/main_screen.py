"""Main screen - port prompt, process table and dialogs.

PUBLIC API:
  - MainScreen: Single screen rendering a PortScanSession
"""

from rich.markup import escape
from rich.panel import Panel
from rich.text import Text
from textual import work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import Screen
from textual.widgets import DataTable, Footer, Input, Static

from ...session import PortScanSession
from ...types import SessionState
from ...validation import validate_port
from ..widgets import Banner, ProcessTable

__all__ = ["MainScreen"]

# Actions each state accepts; anything else is hidden from the footer
_ALLOWED_ACTIONS: dict[SessionState, frozenset[str]] = {
    SessionState.IDLE: frozenset(["quit"]),
    SessionState.SCANNING: frozenset(),
    SessionState.RESOLVED: frozenset(["kill", "kill_all", "rescan", "back", "quit"]),
    SessionState.CONFIRMING_SINGLE: frozenset(["confirm", "cancel", "back"]),
    SessionState.CONFIRMING_ALL: frozenset(["confirm", "cancel", "back"]),
    SessionState.SHOWING_RESULT: frozenset(["dismiss", "back"]),
    SessionState.FAILED: frozenset(["rescan", "back", "quit"]),
}


def _plural(count: int) -> str:
    return "process" if count == 1 else "processes"


class MainScreen(Screen):
    """Render the session and turn keys into session intents.

    Args:
        session: Session to drive.
    """

    BINDINGS = [
        Binding("k", "kill", "Kill"),
        Binding("a", "kill_all", "Kill all"),
        Binding("r", "rescan", "Rescan"),
        Binding("y", "confirm", "Confirm"),
        Binding("n", "cancel", "Cancel"),
        Binding("space", "dismiss", "Continue"),
        Binding("enter", "dismiss", "Continue", show=False),
        Binding("escape", "back", "Back"),
        Binding("q", "quit", "Quit"),
    ]

    def __init__(self, session: PortScanSession):
        super().__init__()
        self.session = session

    def compose(self) -> ComposeResult:
        yield Banner()
        yield Static(id="update-notice")
        with Vertical(id="input-box"):
            with Horizontal(id="input-row"):
                yield Static("[bold #ff8c00]❯[/] Enter port to scan: ", id="input-label")
                yield Input(placeholder="3000", id="port-input")
            yield Static(id="input-error")
            yield Static("[dim]  Press Enter to scan[/dim]", id="input-hint")
        yield Static(id="scanning")
        yield ProcessTable(id="process-table")
        yield Static(id="process-count")
        yield Static(id="panel")
        yield Footer()

    def on_mount(self) -> None:
        self.render_session()

    # Rendering

    def render_session(self) -> None:
        """Sync every widget with the session state."""
        session = self.session
        state = session.state
        showing_list = state in (
            SessionState.RESOLVED,
            SessionState.CONFIRMING_SINGLE,
            SessionState.CONFIRMING_ALL,
            SessionState.SHOWING_RESULT,
        )

        input_box = self.query_one("#input-box")
        port_input = self.query_one("#port-input", Input)
        input_box.display = state == SessionState.IDLE
        port_input.disabled = state != SessionState.IDLE

        scanning = self.query_one("#scanning", Static)
        scanning.display = state == SessionState.SCANNING
        if state == SessionState.SCANNING:
            scanning.update(f"[#ffa500]Scanning port {session.port}...[/]")

        table = self.query_one(ProcessTable)
        count = self.query_one("#process-count", Static)
        table.display = showing_list and bool(session.processes)
        count.display = showing_list
        if showing_list:
            table.set_processes(session.processes, session.selected_index)
            count.update(self._count_text())

        panel = self.query_one("#panel", Static)
        renderable = self._panel_renderable()
        panel.display = renderable is not None
        if renderable is not None:
            panel.update(renderable)

        if state == SessionState.IDLE:
            port_input.focus()
        elif table.display:
            table.focus()

        self.refresh_bindings()

    def _count_text(self) -> Text:
        processes = self.session.processes
        if not processes:
            return Text("No processes found on this port", style="#ff8c00")
        text = Text("Found ", style="dim")
        text.append(str(len(processes)), style="bold #ffa500")
        text.append(f" {_plural(len(processes))} on port {self.session.port}", style="dim")
        return text

    def _panel_renderable(self) -> Panel | None:
        session = self.session
        state = session.state

        if state == SessionState.CONFIRMING_SINGLE and session.selected:
            proc = session.selected
            body = (
                f"Kill [bold]{escape(proc.name)}[/bold] (PID {proc.pid})?\n\n"
                "[dim]Press [bold #ff4500]\\[Y][/] to confirm or [bold]\\[N][/] to cancel[/dim]"
            )
            return Panel(body, title="Confirm", title_align="left", border_style="#ff4500")

        if state == SessionState.CONFIRMING_ALL:
            count = len(session.processes)
            body = (
                f"Kill all [bold]{count}[/bold] {_plural(count)} on port {session.port}?\n\n"
                "[dim]Press [bold #ff4500]\\[Y][/] to confirm or [bold]\\[N][/] to cancel[/dim]"
            )
            return Panel(body, title="Confirm", title_align="left", border_style="#ff4500")

        if state == SessionState.SHOWING_RESULT and session.result:
            result = session.result
            mark, color = ("✓", "#4a9eff") if result.success else ("✗", "#ff4500")
            body = f"[{color}]{mark} {escape(result.message)}[/]\n\n[dim]Press Enter to continue[/dim]"
            return Panel(body, border_style=color)

        if state == SessionState.FAILED:
            body = (
                f"{escape(session.error or 'Unknown error')}\n\n"
                "[dim]Press [bold #ffa500]\\[R][/] to retry or [bold #ff4500]\\[Esc][/] to go back[/dim]"
            )
            return Panel(body, title="✗ Error", title_align="left", border_style="#ff4500")

        return None

    def show_update_notice(self, message: str | None) -> None:
        notice = self.query_one("#update-notice", Static)
        notice.display = bool(message)
        if message:
            notice.update(f"[#ffa500]⚠ {escape(message)}[/]")

    # Bindings

    def check_action(self, action: str, parameters: tuple[object, ...]) -> bool | None:
        """Enable bindings for the current session state only."""
        if action not in {b.action for b in self.BINDINGS}:
            return True
        state = self.session.state
        if action == "kill_all":
            return self.session.can_kill_all
        return action in _ALLOWED_ACTIONS[state]

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Validate port and start a scan."""
        error = self.query_one("#input-error", Static)
        result = validate_port(event.value)
        if not result.valid:
            error.update(f"[#ff4500]  ✗ {result.error}[/]")
            return
        error.update("")
        event.input.value = ""
        self.start_scan(int(event.value.strip()))

    def on_data_table_row_highlighted(self, event: DataTable.RowHighlighted) -> None:
        self.session.select_index(event.cursor_row)

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        """Enter on a row asks to kill it, or closes a result. Only Y confirms."""
        state = self.session.state
        if state == SessionState.RESOLVED:
            self.session.select_index(event.cursor_row)
            self.session.request_kill_selected()
        elif state == SessionState.SHOWING_RESULT:
            self.session.dismiss_result()

    def action_kill(self) -> None:
        self.session.request_kill_selected()

    def action_kill_all(self) -> None:
        self.session.request_kill_all()

    def action_rescan(self) -> None:
        """R: rescan the same port, or retry it after a failure."""
        if not self.session.busy:
            self._run_rescan()

    def action_confirm(self) -> None:
        self._run_confirm()

    def action_cancel(self) -> None:
        self.session.cancel()

    def action_dismiss(self) -> None:
        self.session.dismiss_result()

    def action_back(self) -> None:
        """Esc: cancel a dialog, close a result, or go back to the prompt."""
        state = self.session.state
        if state in (SessionState.CONFIRMING_SINGLE, SessionState.CONFIRMING_ALL):
            self.session.cancel()
        elif state == SessionState.SHOWING_RESULT:
            self.session.dismiss_result()
        else:
            self.session.reset()

    def action_quit(self) -> None:
        self.app.exit()

    # Workers

    def start_scan(self, port: int) -> None:
        """Scan port in a worker unless the session is busy."""
        if self.session.busy:
            return
        self._run_scan(port)

    @work(group="session")
    async def _run_scan(self, port: int) -> None:
        await self.session.scan(port)

    @work(group="session")
    async def _run_rescan(self) -> None:
        if self.session.state == SessionState.FAILED:
            await self.session.retry()
        else:
            await self.session.rescan()

    @work(group="session")
    async def _run_confirm(self) -> None:
        await self.session.confirm()
