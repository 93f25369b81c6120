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

"""Durable key-value store backends.

The state store keeps exactly one value under one fixed key, so a backend
only needs whole-value get, put and delete. Each backend guarantees that a
get never observes a half-written value.

Backends:

- FileKeyValueStore: One file per key in a directory. Writes go to a
  temporary file that is then renamed over the target (atomic on POSIX and
  Windows).
- MemoryKeyValueStore: Dict-backed, for tests and embedding.

Example:
    Store and read back a value:
        ```python
        from pathlib import Path
        from controlpanel.storage import FileKeyValueStore

        kv = FileKeyValueStore(Path("~/.controlpanel").expanduser())
        kv.put("control-panel-data", b"{}")
        assert kv.get("control-panel-data") == b"{}"
        ```

"""

from __future__ import annotations

from contextlib import suppress
import os
from pathlib import Path
import re
from typing import Protocol

from controlpanel.exceptions import StorageError
from controlpanel.logging import get_global_logger

_SAFE_KEY = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


class KeyValueStore(Protocol):
    """Protocol for durable whole-value key-value stores."""

    def get(self, key: str) -> bytes | None:
        """Return the value stored under key, or None if absent."""
        ...

    def put(self, key: str, value: bytes) -> None:
        """Replace the value stored under key."""
        ...

    def delete(self, key: str) -> None:
        """Remove key. Removing an absent key is not an error."""
        ...


class MemoryKeyValueStore:
    """In-memory key-value store."""

    def __init__(self, initial: dict[str, bytes] | None = None) -> None:
        self.data: dict[str, bytes] = dict(initial or {})

    def get(self, key: str) -> bytes | None:
        return self.data.get(key)

    def put(self, key: str, value: bytes) -> None:
        self.data[key] = bytes(value)

    def delete(self, key: str) -> None:
        self.data.pop(key, None)


class FileKeyValueStore:
    """Key-value store keeping each key in its own JSON file.

    Attributes:
        directory: Directory holding the files. Created on first write.

    """

    suffix = ".json"

    def __init__(self, directory: Path):
        self.directory = directory

    def path_for(self, key: str) -> Path:
        """Return the file backing key.

        Raises:
            StorageError: If key is not a safe file name.

        """
        if not _SAFE_KEY.match(key):
            raise StorageError(f"Invalid storage key: {key!r}")
        return self.directory / f"{key}{self.suffix}"

    def get(self, key: str) -> bytes | None:
        path = self.path_for(key)
        try:
            value = path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as err:
            raise StorageError(f"Failed to read {path}: {err}") from err

        get_global_logger().debug("STORAGE", f"Read {len(value)} bytes from {path}")
        return value

    def put(self, key: str, value: bytes) -> None:
        path = self.path_for(key)
        tmp = path.with_suffix(path.suffix + ".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_bytes(value)
            os.replace(tmp, path)
        except OSError as err:
            with suppress(OSError):
                tmp.unlink(missing_ok=True)
            raise StorageError(f"Failed to write {path}: {err}") from err

        get_global_logger().debug("STORAGE", f"Wrote {len(value)} bytes to {path}")

    def delete(self, key: str) -> None:
        path = self.path_for(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as err:
            raise StorageError(f"Failed to delete {path}: {err}") from err
