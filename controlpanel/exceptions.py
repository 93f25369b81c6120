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

"""Exception hierarchy for the control panel.

Every error the library raises inherits from ControlPanelError so callers
can catch them all with a single except clause:

- EmptyNameError: Linking a program with a blank name
- InvalidSettingKeyError: Toggling a setting that does not exist
- DeserializeError: Persisted or imported data is malformed
- ImportParseError: DeserializeError raised on the import path
- ConfigError: Configuration file problems
- StorageError: The durable key-value store could not be read or written

The first four are recovered by the control surface (state is left
unchanged, one activity log entry is written and the user is notified).
ConfigError and StorageError propagate to the caller.

Example:
    Catching a rejected import:
        ```python
        from controlpanel.exceptions import ImportParseError

        try:
            store.import_blob(b"not json")
        except ImportParseError as e:
            print(f"Import failed: {e}")
        ```
"""

from __future__ import annotations

__all__ = [
    "ControlPanelError",
    "EmptyNameError",
    "InvalidSettingKeyError",
    "DeserializeError",
    "ImportParseError",
    "ConfigError",
    "StorageError",
]


class ControlPanelError(Exception):
    """Base exception for all control panel errors."""

    pass


class EmptyNameError(ControlPanelError):
    """Raised when a program is linked with an empty or whitespace name."""

    pass


class InvalidSettingKeyError(ControlPanelError, KeyError):
    """Raised when a setting key is not one of the known toggles.

    The settings record has a fixed shape, so unknown keys are rejected
    instead of being added.

    Attributes:
        key: The rejected key.
    """

    def __init__(self, key: str) -> None:
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"Unknown setting: {self.key!r}"


class DeserializeError(ControlPanelError):
    """Raised when a serialized aggregate cannot be decoded.

    This covers invalid JSON, invalid UTF-8, missing or extra fields and
    fields of the wrong type.
    """

    pass


class ImportParseError(DeserializeError):
    """Raised when an imported configuration file is rejected.

    The in-memory state is guaranteed to be unchanged when this is raised.
    """

    pass


class ConfigError(ControlPanelError):
    """Raised for configuration-related errors.

    This exception is raised when there are problems with:

    - YAML parsing (syntax errors)
    - A top-level document that is not a mapping
    - Values of the wrong type
    """

    pass


class StorageError(ControlPanelError):
    """Raised when the durable store cannot be read or written."""

    pass
