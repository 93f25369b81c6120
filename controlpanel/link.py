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

"""Link state of the external program."""

from __future__ import annotations

from controlpanel.exceptions import EmptyNameError
from controlpanel.models import LinkState


class ProgramLink:
    """Tracks whether a program is linked and under which name.

    The name is only ever non-empty while linked.
    """

    def __init__(self, state: LinkState | None = None) -> None:
        self._state = LinkState()
        if state is not None:
            self.restore(state)

    @property
    def linked(self) -> bool:
        return self._state.linked

    @property
    def name(self) -> str:
        return self._state.name

    @property
    def state(self) -> LinkState:
        return self._state

    def link(self, name: str) -> LinkState:
        """Bind a program by name.

        Args:
            name: Program name. Surrounding whitespace is stripped.

        Returns:
            The new link state.

        Raises:
            EmptyNameError: If name is empty after stripping. The link
                state is unchanged.

        """
        cleaned = (name or "").strip()
        if not cleaned:
            raise EmptyNameError("Program name must not be empty")
        self._state = LinkState(linked=True, name=cleaned)
        return self._state

    def unlink(self) -> LinkState:
        """Clear the link. Unlinking an unlinked program is a no-op."""
        self._state = LinkState()
        return self._state

    def restore(self, state: LinkState) -> None:
        """Adopt a previously saved link state.

        Raises:
            EmptyNameError: If state claims to be linked without a name.

        """
        if state.linked and not state.name.strip():
            raise EmptyNameError("Linked state requires a program name")
        # an unlinked state never carries a name
        self._state = state if state.linked else LinkState()
