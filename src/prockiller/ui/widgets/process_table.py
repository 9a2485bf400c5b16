"""Process table widget.

PUBLIC API:
  - ProcessTable: DataTable listing processes bound to the scanned port
"""

from rich.text import Text
from textual.widgets import DataTable

from ...types import ProcessRecord

__all__ = ["ProcessTable"]


class ProcessTable(DataTable):
    """Row-cursor DataTable of ProcessRecords.

    Rows are keyed by pid and only rebuilt when the set of pids changes,
    so cursor moves do not flicker.
    """

    def __init__(self, **kwargs):
        super().__init__(cursor_type="row", zebra_stripes=False, **kwargs)
        self._pids: tuple[int, ...] = ()

    def on_mount(self) -> None:
        """Setup table columns."""
        self.add_column(Text("PID", style="bold #ff6a00"), key="pid")
        self.add_column(Text("PROCESS", style="bold #ff6a00"), key="name")
        self.add_column(Text("PROTO", style="bold #ff6a00"), key="protocol")
        self.add_column(Text("ADDRESS", style="bold #ff6a00"), key="address")

    def set_processes(self, processes: list[ProcessRecord], selected: int) -> None:
        """Show processes with row selected highlighted."""
        pids = tuple(p.pid for p in processes)
        if pids != self._pids:
            self._pids = pids
            self.clear()
            for proc in processes:
                self.add_row(
                    Text(str(proc.pid), style="#ffb732"),
                    proc.name,
                    Text(proc.protocol, style="#ffcc66"),
                    Text(proc.local_address, style="#888888"),
                    key=str(proc.pid),
                )

        if processes and self.cursor_row != selected:
            self.move_cursor(row=selected)
