"""Interaction state machine for portkill."""

import logging
from collections.abc import Callable

from portkill.collector import PortCollector, kill_process
from portkill.models import Mode, PortRecord, Severity, StatusFeedback

logger = logging.getLogger(__name__)

QUIT_KEY = "q"
KILL_KEY = "k"
SEARCH_KEY = "/"
REFRESH_KEY = "r"
CONFIRM_YES_KEY = "y"
CONFIRM_NO_KEY = "n"

Terminator = Callable[[int], bool]


def apply_filter(snapshot: list[PortRecord], query: str) -> list[PortRecord]:
    """
    Return the records of a snapshot that match a search query.

    Matching is a case-insensitive substring test against the process name
    and the decimal forms of pid and port, so "8" matches port 8080. An empty
    query matches everything. Order is preserved.
    """
    if not query:
        return list(snapshot)

    needle = query.lower()
    return [
        record
        for record in snapshot
        if needle in record.name.lower()
        or needle in str(record.pid)
        or needle in str(record.port)
    ]


class AppState:
    """
    Application state of the port dashboard.

    Owns the snapshot, the filtered view, the selection cursor, the current
    mode, the search query and the last status message. The renderer only
    reads it; every mutation goes through handle_key() or refresh().
    """

    def __init__(
        self,
        collector: PortCollector | None = None,
        terminator: Terminator = kill_process,
    ) -> None:
        """
        Initialize the state and take the first snapshot.

        Args:
            collector: Source of port snapshots. Defaults to a psutil collector.
            terminator: Kills a pid and reports success.
        """
        self._collector = collector if collector is not None else PortCollector()
        self._terminator = terminator
        self._snapshot: list[PortRecord] = []
        self._view: list[PortRecord] = []
        self._selection: int | None = None
        self._mode = Mode.BROWSING
        self._query = ""
        self._status: StatusFeedback | None = None
        self._should_quit = False
        self._handlers: dict[Mode, Callable[[str, str | None], None]] = {
            Mode.BROWSING: self._handle_browsing,
            Mode.CONFIRMING_KILL: self._handle_confirming,
            Mode.SEARCHING: self._handle_searching,
        }
        self.refresh()

    @property
    def mode(self) -> Mode:
        """Current interaction mode."""
        return self._mode

    @property
    def snapshot(self) -> list[PortRecord]:
        """Latest unfiltered snapshot."""
        return list(self._snapshot)

    @property
    def view(self) -> list[PortRecord]:
        """Records currently displayed."""
        return list(self._view)

    @property
    def selection(self) -> int | None:
        """Index into the view, or None when the view is empty."""
        return self._selection

    @property
    def selected_record(self) -> PortRecord | None:
        """Record under the cursor, if any."""
        if self._selection is None or not 0 <= self._selection < len(self._view):
            return None
        return self._view[self._selection]

    @property
    def query(self) -> str:
        """Search query, possibly still being typed."""
        return self._query

    @property
    def status(self) -> StatusFeedback | None:
        """Outcome of the last kill attempt."""
        return self._status

    @property
    def should_quit(self) -> bool:
        """Whether the operator asked to leave."""
        return self._should_quit

    def refresh(self) -> None:
        """Take a new snapshot and recompute the view."""
        self._snapshot = self._collector.refresh()
        logger.debug("Snapshot holds %d port bindings", len(self._snapshot))
        self._run_filter()

    def handle_key(self, key: str, character: str | None = None) -> None:
        """
        Interpret a key press under the current mode.

        Args:
            key: Key name, e.g. "up", "down", "enter", "escape", "backspace".
            character: Printable character produced by the key, if any.
        """
        self._handlers[self._mode](key, character)

    def move_down(self) -> None:
        """Advance the cursor, wrapping to the first row."""
        self._status = None
        if not self._view:
            return
        if self._selection is None or self._selection >= len(self._view) - 1:
            self._selection = 0
        else:
            self._selection += 1

    def move_up(self) -> None:
        """Retreat the cursor, wrapping to the last row."""
        self._status = None
        if not self._view:
            return
        if self._selection is None:
            self._selection = 0
        elif self._selection == 0:
            self._selection = len(self._view) - 1
        else:
            self._selection -= 1

    def kill_selected(self) -> None:
        """Kill the process under the cursor and reconcile with a new snapshot."""
        record = self.selected_record
        if record is None:
            return

        pid = record.pid
        if self._collector.lookup(pid) is None:
            self._status = StatusFeedback(f"Process {pid} not found", Severity.WARNING)
        elif self._terminator(pid):
            self._status = StatusFeedback(f"Successfully killed PID {pid}", Severity.INFO)
        else:
            self._status = StatusFeedback(f"Failed to kill PID {pid}", Severity.ERROR)
        logger.info("Kill of PID %d on port %d: %s", pid, record.port, self._status.message)

        self.refresh()

    def _run_filter(self) -> None:
        """Recompute the view; the cursor always goes back to the top."""
        self._view = apply_filter(self._snapshot, self._query)
        self._selection = 0 if self._view else None

    def _handle_browsing(self, key: str, character: str | None) -> None:
        if key == "down":
            self.move_down()
        elif key == "up":
            self.move_up()
        elif character == QUIT_KEY:
            self._should_quit = True
        elif character == KILL_KEY:
            self._mode = Mode.CONFIRMING_KILL
        elif character == SEARCH_KEY:
            self._mode = Mode.SEARCHING
        elif character == REFRESH_KEY:
            self.refresh()

    def _handle_confirming(self, key: str, character: str | None) -> None:
        if character == CONFIRM_YES_KEY:
            self.kill_selected()
            self._mode = Mode.BROWSING
        elif character == CONFIRM_NO_KEY or key == "escape":
            self._mode = Mode.BROWSING
        elif character == QUIT_KEY:
            self._should_quit = True

    def _handle_searching(self, key: str, character: str | None) -> None:
        if key in ("enter", "escape"):
            self._mode = Mode.BROWSING
        elif key == "backspace":
            self._query = self._query[:-1]
            self._run_filter()
        elif character and character.isprintable():
            self._query += character
            self._run_filter()
