"""Port snapshot collection for portkill."""

import logging
import socket
from collections.abc import Callable

import psutil

from portkill.models import PLACEHOLDER, PortBinding, PortRecord, ProcessInfo

logger = logging.getLogger(__name__)

PortLister = Callable[[], list[PortBinding]]
ProcessInspector = Callable[[int], ProcessInfo | None]


def list_listening_ports() -> list[PortBinding]:
    """
    Enumerate sockets that are accepting traffic on a local port.

    TCP sockets count when they are in LISTEN state, UDP sockets when they are
    bound locally without a remote peer. Sockets without an owning pid (other
    users' sockets when unprivileged) are skipped.

    Raises:
        psutil.AccessDenied: On platforms that require privileges for the
            system-wide socket table (macOS).
    """
    bindings: list[PortBinding] = []
    seen: set[tuple[str, int, int, int]] = set()

    for conn in psutil.net_connections(kind="inet"):
        if not conn.pid or not conn.laddr:
            continue
        if conn.type == socket.SOCK_STREAM and conn.status != psutil.CONN_LISTEN:
            continue
        if conn.type == socket.SOCK_DGRAM and conn.raddr:
            continue

        # One entry per socket; the table can repeat a socket per open fd
        key = (conn.laddr.ip, conn.laddr.port, conn.pid, int(conn.type))
        if key in seen:
            continue
        seen.add(key)
        bindings.append(PortBinding(port=conn.laddr.port, pid=conn.pid))

    return bindings


def inspect_process(pid: int) -> ProcessInfo | None:
    """
    Read name and argument vector of a process.

    Returns None if the process no longer exists. An unreadable command line
    yields an empty argv rather than an error.
    """
    try:
        proc = psutil.Process(pid)
        with proc.oneshot():
            name = proc.name()
            try:
                argv = tuple(proc.cmdline())
            except (psutil.AccessDenied, psutil.ZombieProcess):
                logger.debug("Command line of PID %d is not readable", pid)
                argv = ()
    except psutil.NoSuchProcess:
        return None
    except psutil.AccessDenied:
        # Exists, but we may not even read its name
        return ProcessInfo(name="")
    return ProcessInfo(name=name, argv=argv)


def kill_process(pid: int) -> bool:
    """Send SIGKILL (TerminateProcess on Windows) to a process."""
    try:
        psutil.Process(pid).kill()
    except (psutil.Error, OSError, ValueError) as exc:
        logger.warning("Failed to kill PID %d: %s", pid, exc)
        return False
    logger.info("Killed PID %d", pid)
    return True


class PortCollector:
    """
    Builds port snapshots from the socket table and the process table.

    Both sources are injectable so the collector can run against fakes. A
    failure to enumerate sockets yields an empty snapshot for that call; the
    next refresh simply tries again.
    """

    def __init__(
        self,
        lister: PortLister = list_listening_ports,
        inspector: ProcessInspector = inspect_process,
    ) -> None:
        """
        Initialize the PortCollector.

        Args:
            lister: Returns the current port bindings; may raise.
            inspector: Returns process details for a pid, or None if gone.
        """
        self._lister = lister
        self._inspector = inspector

    def lookup(self, pid: int) -> ProcessInfo | None:
        """Inspect a single process."""
        return self._inspector(pid)

    def refresh(self) -> list[PortRecord]:
        """Collect a fresh snapshot, sorted by port ascending."""
        try:
            bindings = self._lister()
        except Exception:
            logger.warning("Port enumeration failed; showing no ports", exc_info=True)
            bindings = []

        records = [self._build_record(binding) for binding in bindings]
        # sorted() is stable, equal ports keep enumeration order
        return sorted(records, key=lambda record: record.port)

    def _build_record(self, binding: PortBinding) -> PortRecord:
        """Merge a binding with whatever is known about its process."""
        info = self._inspector(binding.pid)
        if info is None:
            logger.debug("PID %d exited before it could be inspected", binding.pid)
            return PortRecord(
                port=binding.port,
                pid=binding.pid,
                name=binding.fallback_name,
                command=PLACEHOLDER,
            )

        return PortRecord(
            port=binding.port,
            pid=binding.pid,
            name=info.name or binding.fallback_name,
            command=" ".join(info.argv) if info.argv else PLACEHOLDER,
        )
