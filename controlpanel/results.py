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

"""Public API return types for the control panel.

Control surface operations never raise for the domain errors they
recover from; they return one of these frozen dataclasses instead, and the
caller decides how to present it.

Example:
    Inspecting a result:
        ```python
        result = panel.link_program("")
        if not result.ok:
            print(f"{result.level}: {result.message}")
            print(type(result.error).__name__)  # EmptyNameError
        ```
"""

from __future__ import annotations

from dataclasses import dataclass

from controlpanel.exceptions import ControlPanelError


@dataclass(frozen=True)
class OperationResult:
    """Outcome of a control surface operation.

    Attributes:
        ok: True when the operation succeeded.
        message: User-facing message (what was sent to notify, if anything).
        level: Notification level ("success", "error" or "info").
        error: The recovered error when ok is False, else None.
    """

    ok: bool
    message: str
    level: str
    error: ControlPanelError | None = None


@dataclass(frozen=True)
class ExportResult(OperationResult):
    """Outcome of exporting the configuration.

    Attributes:
        filename: Name handed to the download collaborator.
        data: Exact bytes written to the export file.
    """

    filename: str = ""
    data: bytes = b""
