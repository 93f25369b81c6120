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

"""Control surface: the operations a UI or script invokes.

ControlSurface is a stateless dispatch layer over StateStore. Each
operation delegates to the store, turns recovered errors into an
OperationResult and reports the outcome through the notification
collaborator. Presentation concerns (toasts, file pickers, downloads) are
reached only through two small protocols:

- Notifier.notify(message, level)
- FileTransfer.request_file_download(name, data) and
  FileTransfer.request_file_read(handle)

Example:
    Drive the panel from a script:
        ```python
        from pathlib import Path
        from controlpanel.control import (
            ConsoleNotifier, ControlSurface, DirectoryFileTransfer,
        )

        panel = ControlSurface(store, ConsoleNotifier(), DirectoryFileTransfer(Path(".")))
        panel.link_program("Bot")
        result = panel.export_config()
        print(result.filename)  # control-panel-config-2025-01-31.json
        ```

"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, date, datetime
import os
from pathlib import Path
from typing import Any, Protocol

from controlpanel.exceptions import (
    EmptyNameError,
    ImportParseError,
    InvalidSettingKeyError,
)
from controlpanel.logging import get_global_logger
from controlpanel.results import ExportResult, OperationResult
from controlpanel.store import MSG_IMPORT_FAILED, StateStore

__all__ = [
    "Notifier",
    "FileTransfer",
    "ConsoleNotifier",
    "RecordingNotifier",
    "DirectoryFileTransfer",
    "ControlSurface",
    "export_filename",
]

EXPORT_PREFIX = "control-panel-config"
EXPORT_EXTENSION = "json"

MSG_ENTER_NAME = "Enter a program name"


class Notifier(Protocol):
    """Receives user-visible notifications. Fire and forget."""

    def notify(self, message: str, level: str) -> None: ...


class FileTransfer(Protocol):
    """Moves export/import files between the panel and the user."""

    def request_file_download(self, name: str, data: bytes) -> None: ...

    def request_file_read(self, handle: Any) -> bytes: ...


class ConsoleNotifier:
    """Prints notifications as "[LEVEL] message" lines."""

    def notify(self, message: str, level: str) -> None:
        print(f"[{level.upper()}] {message}")


class RecordingNotifier:
    """Keeps every notification as a (message, level) tuple."""

    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    def notify(self, message: str, level: str) -> None:
        self.messages.append((message, level))


class DirectoryFileTransfer:
    """Saves downloads into a directory and reads imports from paths.

    Attributes:
        directory: Where downloaded files are written.
        last_path: Path of the most recent download, if any.

    """

    def __init__(self, directory: Path):
        self.directory = directory
        self.last_path: Path | None = None

    def request_file_download(self, name: str, data: bytes) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.directory / name
        tmp = path.with_suffix(path.suffix + ".tmp")
        tmp.write_bytes(data)
        os.replace(tmp, path)
        self.last_path = path

    def request_file_read(self, handle: Any) -> bytes:
        return Path(handle).read_bytes()


def export_filename(day: date) -> str:
    """Return the export file name for a given date."""
    return f"{EXPORT_PREFIX}-{day.isoformat()}.{EXPORT_EXTENSION}"


def _utc_today() -> date:
    return datetime.now(UTC).date()


class ControlSurface:
    """Dispatches panel operations to the state store.

    Holds no state of its own; everything lives in the store.
    """

    def __init__(
        self,
        store: StateStore,
        notifier: Notifier,
        transfer: FileTransfer | None = None,
        *,
        today: Callable[[], date] = _utc_today,
    ) -> None:
        self.store = store
        self.notifier = notifier
        self.transfer = transfer
        self._today = today

    def _report(self, result: OperationResult) -> OperationResult:
        self.notifier.notify(result.message, result.level)
        return result

    def link_program(self, name: str) -> OperationResult:
        try:
            state = self.store.link(name)
        except EmptyNameError as err:
            return self._report(
                OperationResult(ok=False, message=MSG_ENTER_NAME, level="error", error=err)
            )
        return self._report(
            OperationResult(
                ok=True,
                message=f'Program "{state.name}" linked successfully!',
                level="success",
            )
        )

    def unlink_program(self) -> OperationResult:
        self.store.unlink()
        return self._report(
            OperationResult(ok=True, message="Program unlinked", level="info")
        )

    def set_setting(self, key: str, value: bool) -> OperationResult:
        """Toggle one setting.

        Success is not notified (the toggle itself is the feedback); an
        unknown key is.
        """
        try:
            self.store.toggle(key, value)
        except InvalidSettingKeyError as err:
            return self._report(
                OperationResult(
                    ok=False,
                    message=f'Unknown setting "{key}"',
                    level="error",
                    error=err,
                )
            )
        state = "on" if value else "off"
        return OperationResult(
            ok=True, message=f'Setting "{key}" changed to {state}', level="info"
        )

    def export_config(self) -> ExportResult:
        """Export the aggregate and hand it to the download collaborator.

        Raises:
            RuntimeError: If no file transfer collaborator was given.

        """
        if self.transfer is None:
            raise RuntimeError("export_config requires a file transfer collaborator")

        data = self.store.export_blob()
        name = export_filename(self._today())
        self.transfer.request_file_download(name, data)
        get_global_logger().verbose("CONTROL", f"Exported {len(data)} bytes as {name}")

        self.store.append_log("Configuration exported to file", "success")
        result = ExportResult(
            ok=True,
            message="Configuration exported!",
            level="success",
            filename=name,
            data=data,
        )
        self._report(result)
        return result

    def import_config(self, data: bytes | str) -> OperationResult:
        try:
            self.store.import_blob(data)
        except ImportParseError as err:
            return self._report(
                OperationResult(
                    ok=False, message="Failed to read file", level="error", error=err
                )
            )
        return self._report(
            OperationResult(ok=True, message="Configuration imported!", level="success")
        )

    def import_file(self, handle: Any) -> OperationResult:
        """Read an import file through the transfer collaborator and import it.

        A file that cannot be read is reported like a rejected import.

        Raises:
            RuntimeError: If no file transfer collaborator was given.

        """
        if self.transfer is None:
            raise RuntimeError("import_file requires a file transfer collaborator")

        try:
            data = self.transfer.request_file_read(handle)
        except OSError as err:
            get_global_logger().verbose("CONTROL", f"Could not read {handle}: {err}")
            self.store.append_log(MSG_IMPORT_FAILED, "error")
            error = ImportParseError(f"Could not read {handle}: {err}")
            error.__cause__ = err
            return self._report(
                OperationResult(
                    ok=False, message="Failed to read file", level="error", error=error
                )
            )
        return self.import_config(data)
