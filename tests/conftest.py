"""Shared fixtures for portkill tests."""

import pytest

from portkill.collector import PortCollector
from portkill.models import PortBinding, ProcessInfo


class FakeSystem:
    """In-memory stand-in for the socket table and the process table."""

    def __init__(self) -> None:
        self.bindings: list[PortBinding] = []
        self.processes: dict[int, ProcessInfo] = {}
        self.unkillable: set[int] = set()
        self.killed: list[int] = []
        self.fail_listing = False

    def listen(self, port: int, pid: int, name: str, argv: tuple[str, ...] = ()) -> None:
        """Register a process holding a port."""
        self.bindings.append(PortBinding(port=port, pid=pid))
        self.processes[pid] = ProcessInfo(name=name, argv=argv)

    def list_ports(self) -> list[PortBinding]:
        if self.fail_listing:
            raise PermissionError("socket table not readable")
        return list(self.bindings)

    def inspect(self, pid: int) -> ProcessInfo | None:
        return self.processes.get(pid)

    def kill(self, pid: int) -> bool:
        self.killed.append(pid)
        if pid in self.unkillable:
            return False
        self.processes.pop(pid, None)
        self.bindings = [b for b in self.bindings if b.pid != pid]
        return True

    def collector(self) -> PortCollector:
        return PortCollector(lister=self.list_ports, inspector=self.inspect)


@pytest.fixture
def system() -> FakeSystem:
    """A fake system with sshd on 22 and node on 8080."""
    fake = FakeSystem()
    fake.listen(8080, 200, "node", ("node", "server.js"))
    fake.listen(22, 100, "sshd", ("/usr/sbin/sshd", "-D"))
    return fake
