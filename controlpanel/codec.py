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

"""JSON encoding and validation of the persisted aggregate.

The same document shape is used for the durable store and for export
files, so a file exported on one installation can be imported on another:

    {
      "programLinked": true,
      "programName": "Bot",
      "settings": {
        "notifications": true,
        "autoSync": false,
        "darkMode": true,
        "soundEffects": true,
        "analytics": false
      },
      "logs": [
        {"id": "...", "timestamp": "14:02:11", "action": "...", "status": "success"}
      ]
    }

There is no version field. Decoding is strict: any missing, extra or
mistyped field raises DeserializeError rather than being guessed at.
Log histories longer than LOG_CAPACITY are cut to the newest entries.

Example:
    Round trip:
        ```python
        from controlpanel.codec import decode_app_data, encode_app_data

        blob = encode_app_data(data, indent=2)
        assert decode_app_data(blob) == data
        ```
"""

from __future__ import annotations

import json
from typing import Any

from controlpanel.exceptions import DeserializeError
from controlpanel.logging import get_global_logger
from controlpanel.models import (
    LOG_CAPACITY,
    SETTING_KEYS,
    STATUSES,
    AppData,
    LinkState,
    LogEntry,
)

__all__ = ["app_data_to_dict", "app_data_from_dict", "encode_app_data", "decode_app_data"]

_TOP_LEVEL_KEYS = frozenset({"programLinked", "programName", "settings", "logs"})
_LOG_ENTRY_KEYS = frozenset({"id", "timestamp", "action", "status"})


def app_data_to_dict(data: AppData) -> dict[str, Any]:
    """Convert an aggregate to its JSON-ready document."""
    return {
        "programLinked": data.link_state.linked,
        "programName": data.link_state.name,
        "settings": {key: data.settings[key] for key in SETTING_KEYS},
        "logs": [
            {
                "id": entry.id,
                "timestamp": entry.timestamp,
                "action": entry.action,
                "status": entry.status,
            }
            for entry in data.logs
        ],
    }


def _check_keys(obj: dict[str, Any], expected: frozenset[str], where: str) -> None:
    missing = sorted(expected - obj.keys())
    extra = sorted(obj.keys() - expected)
    if missing:
        raise DeserializeError(f"{where}: missing field(s): {', '.join(missing)}")
    if extra:
        raise DeserializeError(f"{where}: unexpected field(s): {', '.join(extra)}")


def _log_entry_from_dict(obj: Any, index: int) -> LogEntry:
    where = f"logs[{index}]"
    if not isinstance(obj, dict):
        raise DeserializeError(f"{where}: expected an object")
    _check_keys(obj, _LOG_ENTRY_KEYS, where)
    for key in ("id", "timestamp", "action", "status"):
        if not isinstance(obj[key], str):
            raise DeserializeError(f"{where}.{key}: expected a string")
    if obj["status"] not in STATUSES:
        raise DeserializeError(f"{where}.status: unknown status {obj['status']!r}")
    return LogEntry(
        id=obj["id"],
        timestamp=obj["timestamp"],
        action=obj["action"],
        status=obj["status"],
    )


def app_data_from_dict(obj: Any) -> AppData:
    """Validate a decoded JSON document and build an aggregate from it.

    Args:
        obj: Result of json.loads on a persisted or exported blob.

    Returns:
        The aggregate described by obj.

    Raises:
        DeserializeError: If obj does not have exactly the expected shape.

    """
    if not isinstance(obj, dict):
        raise DeserializeError("top level: expected an object")
    _check_keys(obj, _TOP_LEVEL_KEYS, "top level")

    linked = obj["programLinked"]
    name = obj["programName"]
    if not isinstance(linked, bool):
        raise DeserializeError("programLinked: expected a boolean")
    if not isinstance(name, str):
        raise DeserializeError("programName: expected a string")
    if linked and not name.strip():
        raise DeserializeError("programName: must not be empty while linked")

    settings = obj["settings"]
    if not isinstance(settings, dict):
        raise DeserializeError("settings: expected an object")
    _check_keys(settings, frozenset(SETTING_KEYS), "settings")
    for key in SETTING_KEYS:
        if not isinstance(settings[key], bool):
            raise DeserializeError(f"settings.{key}: expected a boolean")

    logs = obj["logs"]
    if not isinstance(logs, list):
        raise DeserializeError("logs: expected an array")
    entries = tuple(_log_entry_from_dict(item, i) for i, item in enumerate(logs))

    if len(entries) > LOG_CAPACITY:
        get_global_logger().debug(
            "CODEC",
            f"Trimming {len(entries)} log entries to the newest {LOG_CAPACITY}",
        )
        entries = entries[:LOG_CAPACITY]

    return AppData(
        link_state=LinkState(linked=linked, name=name if linked else ""),
        settings={key: settings[key] for key in SETTING_KEYS},
        logs=entries,
    )


def encode_app_data(data: AppData, *, indent: int | None = None) -> bytes:
    """Serialize an aggregate to UTF-8 JSON bytes.

    Args:
        data: Aggregate to encode.
        indent: Pretty-print indentation. None produces compact output
            (used for the durable store); export files use 2.

    """
    document = app_data_to_dict(data)
    if indent is None:
        text = json.dumps(document, ensure_ascii=False, separators=(",", ":"))
    else:
        text = json.dumps(document, ensure_ascii=False, indent=indent)
    return text.encode("utf-8")


def decode_app_data(blob: bytes | str) -> AppData:
    """Parse and validate a serialized aggregate.

    Args:
        blob: UTF-8 JSON bytes, or already-decoded text.

    Raises:
        DeserializeError: If blob is not valid UTF-8, not valid JSON, or
            does not have the expected shape.

    """
    try:
        text = blob.decode("utf-8") if isinstance(blob, bytes) else blob
        obj = json.loads(text)
    except UnicodeDecodeError as err:
        raise DeserializeError(f"not valid UTF-8: {err}") from err
    except (ValueError, RecursionError) as err:
        # JSONDecodeError, over-long integers and over-deep nesting
        raise DeserializeError(f"not valid JSON: {err}") from err

    data = app_data_from_dict(obj)
    get_global_logger().debug(
        "CODEC",
        f"Decoded aggregate: linked={data.link_state.linked}, "
        f"{len(data.logs)} log entries",
    )
    return data
