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

"""State store: the single owner of the control panel aggregate.

StateStore holds the link state, the settings and the activity log in
memory and mirrors them to a durable key-value store under one fixed key.
Every mutation records an activity log entry and is saved before the
method returns, so the durable copy never lags behind memory.

Lifecycle:

1. Construct once with a backend.
2. Call load() to adopt the persisted aggregate (or first-run defaults).
3. Mutate through link(), unlink(), toggle(), append_log() and
   import_blob(). There is no shutdown step.

Failed mutations (blank link name, unknown setting, rejected import) leave
the aggregate unchanged apart from the error entry they record, and raise
the matching ControlPanelError for the caller to present.

Example:
    Typical session:
        ```python
        from pathlib import Path
        from controlpanel.storage import FileKeyValueStore
        from controlpanel.store import StateStore

        store = StateStore(FileKeyValueStore(Path("~/.controlpanel").expanduser()))
        store.load()
        store.link("Bot")
        store.toggle("autoSync", True)
        blob = store.export_blob()
        ```

"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
import threading

from controlpanel.activity import LogBuffer, local_time_of_day, new_entry_id
from controlpanel.codec import decode_app_data, encode_app_data
from controlpanel.exceptions import (
    DeserializeError,
    EmptyNameError,
    ImportParseError,
    InvalidSettingKeyError,
    StorageError,
)
from controlpanel.link import ProgramLink
from controlpanel.logging import get_global_logger
from controlpanel.models import AppData, LinkState, LogEntry, Status
from controlpanel.settings import SettingsRegistry
from controlpanel.storage import KeyValueStore

__all__ = ["StateStore", "DEFAULT_STORAGE_KEY"]

DEFAULT_STORAGE_KEY = "control-panel-data"

MSG_STARTED = "Application started"
MSG_LOADED = "Data loaded from storage"
MSG_LOAD_FAILED = "Failed to load data"
MSG_LINK_EMPTY = "Link attempted without a program name"
MSG_UNLINKED = "Program unlinked"
MSG_IMPORTED = "Configuration loaded from file"
MSG_IMPORT_FAILED = "Configuration import failed"


def linked_message(name: str) -> str:
    return f'Program "{name}" linked'


def setting_changed_message(key: str, value: bool) -> str:
    return f'Setting "{key}" changed to {"on" if value else "off"}'


def unknown_setting_message(key: str) -> str:
    return f'Unknown setting "{key}"'


class StateStore:
    """Owns the in-memory aggregate and its durable mirror.

    Attributes:
        backend: Durable key-value store.
        key: Fixed key the aggregate is stored under.

    """

    def __init__(
        self,
        backend: KeyValueStore,
        key: str = DEFAULT_STORAGE_KEY,
        *,
        clock: Callable[[], str] = local_time_of_day,
        id_factory: Callable[[], str] = new_entry_id,
    ) -> None:
        self.backend = backend
        self.key = key
        self._lock = threading.RLock()
        self._autosave = True
        self._dirty = False
        self._link = ProgramLink()
        self._settings = SettingsRegistry()
        self._log = LogBuffer(
            on_append=self._on_append, clock=clock, id_factory=id_factory
        )
        self._reset_to_defaults()

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def link_state(self) -> LinkState:
        return self._link.state

    @property
    def settings(self) -> dict[str, bool]:
        return self._settings.as_dict()

    @property
    def logs(self) -> tuple[LogEntry, ...]:
        return self._log.entries

    def snapshot(self) -> AppData:
        """Return an immutable copy of the current aggregate."""
        with self._lock:
            return AppData(
                link_state=self._link.state,
                settings=self._settings.as_dict(),
                logs=self._log.entries,
            )

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def load(self) -> AppData:
        """Adopt the persisted aggregate, falling back to defaults.

        Missing value: first-run defaults with a single seeded entry.
        Corrupt value: defaults plus an error entry; the corrupt value is
        kept under "<key>.backup". Valid value: adopted verbatim, then a
        "data loaded" entry is recorded. The result is saved in all cases.

        Returns:
            Snapshot of the aggregate after loading.

        Raises:
            StorageError: If the backend cannot be read or written. A failed
                read or backup leaves memory and the stored value untouched.

        """
        logger = get_global_logger()
        with self._lock:
            # Read (and back up) before touching memory, so a storage
            # failure leaves both copies as they were.
            raw = self.backend.get(self.key)
            data: AppData | None = None
            if raw is not None:
                try:
                    data = decode_app_data(raw)
                except DeserializeError as err:
                    backup_key = f"{self.key}.backup"
                    self.backend.put(backup_key, raw)
                    logger.verbose(
                        "STORE",
                        f"Saved state is corrupt ({err}); backed up to {backup_key!r}",
                    )

            with self._mutation():
                self._reset_to_defaults()
                if raw is None:
                    logger.verbose(
                        "STORE", f"No saved state under {self.key!r}, using defaults"
                    )
                elif data is None:
                    self._log.append(MSG_LOAD_FAILED, "error")
                else:
                    self._adopt(data)
                    logger.verbose(
                        "STORE", f"Loaded state with {len(data.logs)} log entries"
                    )
                    self._log.append(MSG_LOADED, "success")
                self._dirty = True

        return self.snapshot()

    def save(self) -> None:
        """Write the complete aggregate under the fixed key.

        Raises:
            StorageError: If the backend cannot be written.

        """
        with self._lock:
            blob = encode_app_data(self.snapshot())
            self.backend.put(self.key, blob)
            self._dirty = False
        get_global_logger().debug("STORE", f"Saved {len(blob)} bytes under {self.key!r}")

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def append_log(self, action: str, status: Status) -> LogEntry:
        """Record an activity log entry and save."""
        with self._mutation():
            return self._log.append(action, status)

    def link(self, name: str) -> LinkState:
        """Link a program by name.

        Raises:
            EmptyNameError: If name is blank. An error entry is recorded
                and the link state is unchanged.

        """
        with self._mutation():
            try:
                state = self._link.link(name)
            except EmptyNameError:
                self._log.append(MSG_LINK_EMPTY, "error")
                raise
            self._log.append(linked_message(state.name), "success")
            return state

    def unlink(self) -> LinkState:
        """Clear the link. Always records an entry, even if already unlinked."""
        with self._mutation():
            state = self._link.unlink()
            self._log.append(MSG_UNLINKED, "info")
            return state

    def toggle(self, key: str, value: bool) -> None:
        """Set one setting.

        Raises:
            InvalidSettingKeyError: If key is unknown. An error entry is
                recorded and the settings are unchanged.

        """
        with self._mutation():
            try:
                self._settings.toggle(key, value)
            except InvalidSettingKeyError:
                self._log.append(unknown_setting_message(key), "error")
                raise
            self._log.append(setting_changed_message(key, bool(value)), "info")

    # ------------------------------------------------------------------
    # Export / import
    # ------------------------------------------------------------------

    def export_blob(self) -> bytes:
        """Serialize the current aggregate as indented UTF-8 JSON."""
        return encode_app_data(self.snapshot(), indent=2)

    def import_blob(self, data: bytes | str) -> AppData:
        """Replace the whole aggregate with an exported one.

        The blob is fully decoded and validated before anything changes,
        then link state, settings and log history are replaced together
        (the imported history replaces the current one).

        Returns:
            Snapshot of the aggregate after importing.

        Raises:
            ImportParseError: If the blob is rejected. An error entry is
                recorded and the aggregate is otherwise unchanged.

        """
        with self._mutation():
            try:
                imported = decode_app_data(data)
            except DeserializeError as err:
                get_global_logger().verbose("STORE", f"Import rejected: {err}")
                self._log.append(MSG_IMPORT_FAILED, "error")
                raise ImportParseError(str(err)) from err

            self._adopt(imported)
            self._log.append(MSG_IMPORTED, "success")

        return self.snapshot()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @contextmanager
    def _mutation(self) -> Iterator[None]:
        # Defers saving to a single write at the end of the operation.
        # A StorageError from inside the operation is not followed by a save.
        with self._lock:
            outer = self._autosave
            self._autosave = False
            storage_failed = False
            try:
                yield
            except StorageError:
                storage_failed = True
                raise
            finally:
                self._autosave = outer
                if outer and self._dirty and not storage_failed:
                    self.save()

    def _on_append(self, entry: LogEntry) -> None:
        self._dirty = True
        if self._autosave:
            self.save()

    def _reset_to_defaults(self) -> None:
        self._link.unlink()
        self._settings = SettingsRegistry()
        self._log.replace([])
        outer = self._autosave
        self._autosave = False
        try:
            self._log.append(MSG_STARTED, "success")
        finally:
            self._autosave = outer

    def _adopt(self, data: AppData) -> None:
        self._link.restore(data.link_state)
        self._settings.replace(data.settings)
        self._log.replace(data.logs)
        self._dirty = True
