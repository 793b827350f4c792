"""Data models for portkill."""

from dataclasses import dataclass
from enum import Enum

PLACEHOLDER = "-"


@dataclass(slots=True, frozen=True)
class PortRecord:
    """Immutable record of one observed port binding."""

    port: int  # 0 - 65535
    pid: int
    name: str = PLACEHOLDER
    command: str = PLACEHOLDER


@dataclass(slots=True, frozen=True)
class PortBinding:
    """Raw (port, pid) pair as reported by the socket table."""

    port: int
    pid: int
    fallback_name: str = PLACEHOLDER


@dataclass(slots=True, frozen=True)
class ProcessInfo:
    """What could be read about a live process."""

    name: str
    argv: tuple[str, ...] = ()


class Mode(Enum):
    """Interaction modes of the dashboard."""

    BROWSING = "browsing"
    CONFIRMING_KILL = "confirming_kill"
    SEARCHING = "searching"


class Severity(Enum):
    """Severity of a status message."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(slots=True, frozen=True)
class StatusFeedback:
    """Outcome of the last kill attempt."""

    message: str
    severity: Severity
