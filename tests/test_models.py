"""Tests for portkill data models."""

from portkill.models import (
    PLACEHOLDER,
    Mode,
    PortBinding,
    PortRecord,
    ProcessInfo,
    Severity,
    StatusFeedback,
)


def test_port_record_creation():
    """Test PortRecord dataclass creation."""
    record = PortRecord(port=8080, pid=200, name="node", command="node server.js")

    assert record.port == 8080
    assert record.pid == 200
    assert record.name == "node"
    assert record.command == "node server.js"


def test_port_record_defaults_to_placeholders():
    """Test PortRecord falls back to placeholders for name and command."""
    record = PortRecord(port=53, pid=1)

    assert record.name == PLACEHOLDER
    assert record.command == PLACEHOLDER


def test_port_record_is_frozen():
    """Test that PortRecord is immutable (frozen)."""
    record = PortRecord(port=22, pid=100, name="sshd", command="/usr/sbin/sshd")

    try:
        record.pid = 999
        raise AssertionError("Should have raised FrozenInstanceError")
    except AttributeError:
        pass  # Expected behavior for frozen dataclass


def test_port_record_uses_slots():
    """Test that PortRecord uses __slots__."""
    record = PortRecord(port=22, pid=100)

    # Slots-based dataclasses don't have __dict__
    assert not hasattr(record, "__dict__")


def test_port_records_compare_by_value():
    """Test that records carry no identity beyond their fields."""
    assert PortRecord(port=22, pid=100, name="sshd") == PortRecord(port=22, pid=100, name="sshd")
    assert PortRecord(port=22, pid=100) != PortRecord(port=22, pid=101)


def test_port_binding_fallback_name():
    """Test PortBinding defaults its fallback name to the placeholder."""
    assert PortBinding(port=80, pid=1).fallback_name == PLACEHOLDER


def test_process_info_default_argv():
    """Test ProcessInfo has an empty argv by default."""
    assert ProcessInfo(name="init").argv == ()


def test_status_feedback_fields():
    """Test StatusFeedback holds message and severity."""
    status = StatusFeedback("Failed to kill PID 7", Severity.ERROR)

    assert status.message == "Failed to kill PID 7"
    assert status.severity is Severity.ERROR


def test_mode_members():
    """Test Mode enum has exactly the three interaction modes."""
    assert list(Mode) == [Mode.BROWSING, Mode.CONFIRMING_KILL, Mode.SEARCHING]
