"""portkill - Main Textual application."""

import logging
from collections.abc import Sequence

from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.containers import Container, Vertical
from textual.screen import ModalScreen
from textual.widgets import DataTable, Static

from portkill.config import Settings, parse_args, setup_logging
from portkill.models import Mode, PortRecord, Severity, StatusFeedback
from portkill.state import AppState

logger = logging.getLogger(__name__)

KEY_HINTS = "[b] k [/b] Kill Port  |  [b] q [/b] Quit  |  ↑/↓ Navigate  |  / Search  |  r Refresh"


class PortGrid(DataTable, can_focus=False):
    """Data table whose cursor is driven by the application state only."""


class PortTable(Container):
    """Container for the port data table."""

    DEFAULT_CSS = """
    PortTable {
        height: 1fr;
        border: solid $primary;
    }

    PortTable.searching {
        border-title-color: $warning;
    }
    """

    def __init__(self, *args, **kwargs) -> None:
        """Initialize PortTable."""
        super().__init__(*args, **kwargs)
        self._records: list[PortRecord] = []

    @property
    def records(self) -> list[PortRecord]:
        """Records currently shown."""
        return list(self._records)

    def compose(self) -> ComposeResult:
        """Compose the port table."""
        yield PortGrid(id="port-table")

    def on_mount(self) -> None:
        """Initialize the data table when mounted."""
        self._setup_columns(self.query_one("#port-table", DataTable))

    def _setup_columns(self, table: DataTable) -> None:
        """Add the columns once."""
        if table.columns:
            return
        table.cursor_type = "row"
        table.add_column("PORT", key="port", width=8)
        table.add_column("PID", key="pid", width=8)
        table.add_column("NAME", key="name", width=20)
        table.add_column("COMMAND", key="command")

    def update_records(self, records: Sequence[PortRecord]) -> None:
        """
        Replace the table contents.

        The view is recomputed wholesale by the state machine, so rows are
        rebuilt rather than patched. Unchanged views are left alone.
        """
        if list(records) == self._records:
            return
        table = self.query_one("#port-table", DataTable)
        self._setup_columns(table)
        table.clear()
        for record in records:
            table.add_row(
                Text(str(record.port), style="cyan"),
                Text(str(record.pid)),
                Text(record.name, style="green"),
                Text(record.command),
            )
        self._records = list(records)

    def move_selection(self, index: int | None) -> None:
        """Move the highlighted row; None hides the cursor."""
        table = self.query_one("#port-table", DataTable)
        table.show_cursor = index is not None
        if index is not None:
            table.move_cursor(row=index)


class StatusBar(Static):
    """Footer showing the last kill outcome and the key hints."""

    DEFAULT_CSS = """
    StatusBar {
        dock: bottom;
        height: 3;
        border: solid $primary;
        content-align: center middle;
    }
    """

    SEVERITY_STYLES = {
        Severity.INFO: "bold white on green",
        Severity.WARNING: "bold white on dark_orange",
        Severity.ERROR: "bold white on red",
    }

    def show_status(self, status: StatusFeedback | None) -> None:
        """Render a status message, or "Ready" when there is none."""
        if status is None:
            badge = "[bold white on blue] Ready [/]"
        else:
            style = self.SEVERITY_STYLES[status.severity]
            badge = f"[{style}] {status.message} [/]"
        self.update(f"{badge}  {KEY_HINTS}")


class ConfirmScreen(ModalScreen[None]):
    """Kill confirmation popup. Keys are still handled by the application."""

    DEFAULT_CSS = """
    ConfirmScreen {
        align: center middle;
    }

    #confirm-dialog {
        width: 50;
        height: auto;
        padding: 1 2;
        border: solid $error;
        background: $panel;
        content-align: center middle;
    }

    #confirm-dialog Static {
        width: 100%;
        content-align: center middle;
    }
    """

    def __init__(self, record: PortRecord | None) -> None:
        """Initialize ConfirmScreen for the record about to be killed."""
        super().__init__()
        self._record = record

    def compose(self) -> ComposeResult:
        """Compose the dialog."""
        if self._record is None:
            target = "this process"
        else:
            target = f"{self._record.name} (PID {self._record.pid}, port {self._record.port})"
        dialog = Vertical(
            Static(Text(f"Are you sure you want to kill {target}?")),
            Static(""),
            Static("[b](y)[/b] Yes.   [b](n)[/b] No."),
            id="confirm-dialog",
        )
        dialog.border_title = "Confirm"
        yield dialog


class PortKillApp(App):
    """Main portkill application."""

    TITLE = "portkill"
    SUB_TITLE = "Ports and the processes holding them"

    CSS = """
    Screen {
        layout: vertical;
    }
    """

    def __init__(
        self,
        settings: Settings | None = None,
        state: AppState | None = None,
    ) -> None:
        """
        Initialize the PortKillApp.

        Args:
            settings: Outer application settings.
            state: Pre-built state, mainly for tests. Built from psutil otherwise.
        """
        super().__init__()
        self._port_settings = settings if settings is not None else Settings()
        self._port_state = state if state is not None else AppState()
        self._port_table = PortTable()
        self._status_bar = StatusBar(id="status-bar")

    @property
    def state(self) -> AppState:
        """Application state rendered by this app."""
        return self._port_state

    def compose(self) -> ComposeResult:
        """Compose the application layout."""
        yield self._port_table
        yield self._status_bar

    def on_mount(self) -> None:
        """Render the initial snapshot and start the optional refresh timer."""
        self._show_state()
        if self._port_settings.refresh_interval > 0:
            self.set_interval(self._port_settings.refresh_interval, self._tick_refresh)

    def on_key(self, event: events.Key) -> None:
        """Feed every key press to the state machine."""
        event.stop()
        self._port_state.handle_key(event.key, event.character)
        if self._port_state.should_quit:
            self.exit()
            return
        self._show_state()

    def _tick_refresh(self) -> None:
        """Refresh on timer, but never under a search or a pending confirmation."""
        if self._port_state.mode is not Mode.BROWSING:
            return
        self._port_state.refresh()
        self._show_state()

    def _show_state(self) -> None:
        """Bring every widget in line with the state. Reads state only."""
        state = self._port_state

        port_table = self._port_table
        port_table.update_records(state.view)
        port_table.move_selection(state.selection)
        if state.mode is Mode.SEARCHING or state.query:
            port_table.border_title = Text(f" Search: {state.query}_ ")
        else:
            port_table.border_title = " portkill "
        port_table.set_class(state.mode is Mode.SEARCHING, "searching")

        self._status_bar.show_status(state.status)

        confirming = isinstance(self.screen, ConfirmScreen)
        if state.mode is Mode.CONFIRMING_KILL and not confirming:
            self.push_screen(ConfirmScreen(state.selected_record))
        elif state.mode is not Mode.CONFIRMING_KILL and confirming:
            self.pop_screen()


def main(argv: Sequence[str] | None = None) -> None:
    """Entry point for portkill application."""
    settings = parse_args(argv)
    setup_logging(settings)
    logger.info("Starting portkill (refresh interval %.1fs)", settings.refresh_interval)
    app = PortKillApp(settings)
    app.run()


if __name__ == "__main__":
    main()
