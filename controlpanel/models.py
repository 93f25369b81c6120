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

"""Domain types for the control panel state.

The persisted aggregate (AppData) is made of three parts: the link state,
the five boolean settings and the newest-first activity log. All types here
are immutable values; the live, mutable state is owned by StateStore.

Setting keys use the same camelCase names as the persisted JSON so that a
key given on the command line, stored on disk and shown in the activity log
is always the same string.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

__all__ = [
    "Status",
    "STATUSES",
    "SETTING_KEYS",
    "DEFAULT_SETTINGS",
    "LOG_CAPACITY",
    "LogEntry",
    "LinkState",
    "AppData",
    "default_settings",
]

Status = Literal["success", "error", "info"]
STATUSES: tuple[str, ...] = ("success", "error", "info")

SETTING_KEYS: tuple[str, ...] = (
    "notifications",
    "autoSync",
    "darkMode",
    "soundEffects",
    "analytics",
)

DEFAULT_SETTINGS: dict[str, bool] = {
    "notifications": True,
    "autoSync": False,
    "darkMode": True,
    "soundEffects": True,
    "analytics": False,
}

LOG_CAPACITY = 50


def default_settings() -> dict[str, bool]:
    """Return a fresh copy of the first-run settings."""
    return dict(DEFAULT_SETTINGS)


@dataclass(frozen=True)
class LogEntry:
    """A single activity log entry.

    Attributes:
        id: Unique identifier of the entry.
        timestamp: Locale-formatted time of day when the entry was created.
        action: Human-readable description of what happened.
        status: One of "success", "error" or "info".
    """

    id: str
    timestamp: str
    action: str
    status: Status


@dataclass(frozen=True)
class LinkState:
    """Whether an external program is linked, and its name.

    The name is non-empty whenever linked is True and empty otherwise.
    """

    linked: bool = False
    name: str = ""


@dataclass(frozen=True)
class AppData:
    """The persisted aggregate: the unit of save, load, export and import.

    Attributes:
        link_state: Current program link.
        settings: Mapping of the five setting keys to their values.
        logs: Activity log, newest entry first.
    """

    link_state: LinkState = field(default_factory=LinkState)
    settings: dict[str, bool] = field(default_factory=default_settings)
    logs: tuple[LogEntry, ...] = ()
