"""
Tests for controlpanel.activity module.

Tests the bounded activity log including:
- Newest-first ordering
- Capacity eviction
- Append callback
"""

from __future__ import annotations

import pytest

from controlpanel.activity import LogBuffer
from controlpanel.models import LOG_CAPACITY, LogEntry


class TestLogBufferAppend:
    """Tests for LogBuffer.append."""

    def test_append_prepends(self, id_factory):
        """Test that the newest entry comes first."""
        buffer = LogBuffer(id_factory=id_factory, clock=lambda: "09:00:00")

        first = buffer.append("first", "info")
        second = buffer.append("second", "success")

        assert buffer.entries == (second, first)
        assert second.timestamp == "09:00:00"
        assert second.status == "success"

    def test_append_generates_unique_ids(self):
        """Test that default ids are unique."""
        buffer = LogBuffer()

        ids = {buffer.append(f"action {i}", "info").id for i in range(20)}

        assert len(ids) == 20

    def test_capacity_evicts_oldest(self, id_factory):
        """Test that the log never exceeds capacity and drops the oldest."""
        buffer = LogBuffer(id_factory=id_factory)

        for i in range(LOG_CAPACITY + 10):
            buffer.append(f"action {i}", "info")

        assert len(buffer) == LOG_CAPACITY
        actions = [entry.action for entry in buffer]
        assert actions[0] == f"action {LOG_CAPACITY + 9}"
        assert actions[-1] == "action 10"
        assert "action 9" not in actions

    def test_unknown_status_raises(self):
        """Test that an unknown status is rejected and nothing is added."""
        buffer = LogBuffer()

        with pytest.raises(ValueError, match="Unknown log status"):
            buffer.append("oops", "warning")

        assert len(buffer) == 0

    def test_on_append_called_after_trim(self):
        """Test that the callback sees each new entry with the log trimmed."""
        seen: list[tuple[LogEntry, int]] = []
        buffer = LogBuffer(
            capacity=2, on_append=lambda entry: seen.append((entry, len(buffer)))
        )

        for i in range(3):
            buffer.append(f"action {i}", "info")

        assert [entry.action for entry, _ in seen] == ["action 0", "action 1", "action 2"]
        assert [size for _, size in seen] == [1, 2, 2]


class TestLogBufferReplace:
    """Tests for adopting whole histories."""

    def test_replace_trims_to_capacity(self):
        """Test that replace keeps only the newest entries."""
        entries = [
            LogEntry(id=str(i), timestamp="t", action=f"a{i}", status="info")
            for i in range(5)
        ]
        buffer = LogBuffer(capacity=3)

        buffer.replace(entries)

        assert [entry.id for entry in buffer.entries] == ["0", "1", "2"]

    def test_initial_entries(self):
        """Test that initial entries are kept in order."""
        entry = LogEntry(id="x", timestamp="t", action="a", status="error")

        buffer = LogBuffer([entry])

        assert buffer.entries == (entry,)

    def test_invalid_capacity(self):
        """Test that a non-positive capacity is rejected."""
        with pytest.raises(ValueError):
            LogBuffer(capacity=0)
