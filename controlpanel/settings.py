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

"""Registry of the five boolean panel settings.

The record shape is closed: toggling a key that is not one of SETTING_KEYS
raises InvalidSettingKeyError and nothing is added.
"""

from __future__ import annotations

from collections.abc import Mapping

from controlpanel.exceptions import InvalidSettingKeyError
from controlpanel.models import SETTING_KEYS, default_settings


class SettingsRegistry:
    """Holds the current value of each known setting."""

    def __init__(self, values: Mapping[str, bool] | None = None) -> None:
        self._values = default_settings()
        if values is not None:
            self.replace(values)

    @staticmethod
    def known_keys() -> tuple[str, ...]:
        return SETTING_KEYS

    def get(self, key: str) -> bool:
        if key not in self._values:
            raise InvalidSettingKeyError(key)
        return self._values[key]

    def toggle(self, key: str, value: bool) -> None:
        """Set one setting, leaving the others untouched.

        Args:
            key: One of SETTING_KEYS.
            value: New value.

        Raises:
            InvalidSettingKeyError: If key is not a known setting.

        """
        if key not in self._values:
            raise InvalidSettingKeyError(key)
        self._values[key] = bool(value)

    def replace(self, values: Mapping[str, bool]) -> None:
        """Overwrite every setting from a complete mapping.

        Raises:
            InvalidSettingKeyError: If a key is unknown or missing; the
                registry is unchanged in that case.

        """
        for key in values:
            if key not in SETTING_KEYS:
                raise InvalidSettingKeyError(key)
        for key in SETTING_KEYS:
            if key not in values:
                raise InvalidSettingKeyError(key)
        self._values = {key: bool(values[key]) for key in SETTING_KEYS}

    def as_dict(self) -> dict[str, bool]:
        """Return a copy of the current values."""
        return dict(self._values)
