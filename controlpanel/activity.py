# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Bounded activity log.

The activity log is a newest-first list capped at LOG_CAPACITY entries.
Appending prepends the new entry and trims the tail, so once the log is
full every append evicts the oldest entry. Nothing else removes entries.

Example:
    Record an action:
        ```python
        from controlpanel.activity import LogBuffer

        buffer = LogBuffer()
        entry = buffer.append('Program "Bot" linked', "success")
        assert buffer.entries[0] is entry
        ```
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from datetime import datetime
import uuid

from controlpanel.models import LOG_CAPACITY, STATUSES, LogEntry, Status


def local_time_of_day() -> str:
    """Return the current local time of day in the locale's format."""
    return datetime.now().strftime("%X")


def new_entry_id() -> str:
    """Return a fresh unique log entry id."""
    return uuid.uuid4().hex


class LogBuffer:
    """Newest-first activity log with a fixed capacity.

    Attributes:
        capacity: Maximum number of entries kept.
    """

    def __init__(
        self,
        entries: Iterable[LogEntry] = (),
        *,
        capacity: int = LOG_CAPACITY,
        on_append: Callable[[LogEntry], None] | None = None,
        clock: Callable[[], str] = local_time_of_day,
        id_factory: Callable[[], str] = new_entry_id,
    ) -> None:
        """Initialize the buffer.

        Args:
            entries: Initial entries, newest first. Trimmed to capacity.
            capacity: Maximum number of entries kept.
            on_append: Called with every appended entry, after trimming.
                The state store uses this to persist on every append.
            clock: Produces the timestamp for new entries.
            id_factory: Produces the id for new entries.

        """
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._on_append = on_append
        self._clock = clock
        self._id_factory = id_factory
        self._entries: list[LogEntry] = list(entries)[:capacity]

    def append(self, action: str, status: Status) -> LogEntry:
        """Prepend a new entry and evict anything beyond capacity.

        Args:
            action: Human-readable description.
            status: "success", "error" or "info".

        Returns:
            The new entry.

        Raises:
            ValueError: If status is not a known status.

        """
        if status not in STATUSES:
            raise ValueError(f"Unknown log status: {status!r}")

        entry = LogEntry(
            id=self._id_factory(),
            timestamp=self._clock(),
            action=action,
            status=status,
        )
        self._entries.insert(0, entry)
        del self._entries[self.capacity :]

        if self._on_append is not None:
            self._on_append(entry)
        return entry

    def replace(self, entries: Iterable[LogEntry]) -> None:
        """Adopt a whole history at once (newest first), trimmed to capacity."""
        self._entries = list(entries)[: self.capacity]

    @property
    def entries(self) -> tuple[LogEntry, ...]:
        """Snapshot of the entries, newest first."""
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[LogEntry]:
        return iter(tuple(self._entries))
