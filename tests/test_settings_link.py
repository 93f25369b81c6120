"""
Tests for controlpanel.settings and controlpanel.link modules.

Tests the closed settings record and the program link state.
"""

from __future__ import annotations

import pytest

from controlpanel.exceptions import EmptyNameError, InvalidSettingKeyError
from controlpanel.link import ProgramLink
from controlpanel.models import DEFAULT_SETTINGS, SETTING_KEYS, LinkState
from controlpanel.settings import SettingsRegistry


class TestSettingsRegistry:
    """Tests for SettingsRegistry."""

    def test_defaults(self):
        """Test first-run values."""
        registry = SettingsRegistry()

        assert registry.as_dict() == {
            "notifications": True,
            "autoSync": False,
            "darkMode": True,
            "soundEffects": True,
            "analytics": False,
        }

    def test_toggle_sets_only_one_key(self):
        """Test that toggle leaves the other settings untouched."""
        registry = SettingsRegistry()

        registry.toggle("analytics", True)

        expected = dict(DEFAULT_SETTINGS, analytics=True)
        assert registry.as_dict() == expected

    def test_last_value_wins(self):
        """Test that the registry reflects the last value set per key."""
        registry = SettingsRegistry()

        for value in (True, False, True):
            registry.toggle("autoSync", value)
        registry.toggle("darkMode", False)

        assert registry.get("autoSync") is True
        assert registry.get("darkMode") is False

    def test_unknown_key_rejected(self):
        """Test that unknown keys raise and are never added."""
        registry = SettingsRegistry()

        with pytest.raises(InvalidSettingKeyError) as exc_info:
            registry.toggle("volume", True)

        assert exc_info.value.key == "volume"
        assert set(registry.as_dict()) == set(SETTING_KEYS)

    def test_replace_requires_complete_record(self):
        """Test that replace rejects partial or extended mappings unchanged."""
        registry = SettingsRegistry()

        with pytest.raises(InvalidSettingKeyError):
            registry.replace({"notifications": False})
        with pytest.raises(InvalidSettingKeyError):
            registry.replace(dict(DEFAULT_SETTINGS, extra=True))

        assert registry.as_dict() == DEFAULT_SETTINGS

    def test_as_dict_is_a_copy(self):
        """Test that callers cannot mutate the registry through as_dict."""
        registry = SettingsRegistry()

        registry.as_dict()["autoSync"] = True

        assert registry.get("autoSync") is False


class TestProgramLink:
    """Tests for ProgramLink."""

    def test_link_sets_name(self):
        """Test linking with a valid name."""
        link = ProgramLink()

        state = link.link("Bot")

        assert state == LinkState(linked=True, name="Bot")
        assert link.linked is True

    def test_link_strips_whitespace(self):
        """Test that surrounding whitespace is not stored."""
        link = ProgramLink()

        assert link.link("  Bot  ").name == "Bot"

    @pytest.mark.parametrize("name", ["", "   ", "\t\n"])
    def test_blank_name_rejected(self, name):
        """Test that blank names raise and leave the state unlinked."""
        link = ProgramLink()

        with pytest.raises(EmptyNameError):
            link.link(name)

        assert link.state == LinkState()

    def test_unlink_is_idempotent(self):
        """Test that unlink clears the name and can be repeated."""
        link = ProgramLink()
        link.link("Bot")

        assert link.unlink() == LinkState()
        assert link.unlink() == LinkState()

    def test_restore_rejects_linked_without_name(self):
        """Test that a linked state without a name cannot be adopted."""
        link = ProgramLink()

        with pytest.raises(EmptyNameError):
            link.restore(LinkState(linked=True, name=" "))

    def test_restore_unlinked_drops_name(self):
        """Test that an unlinked state never keeps a name."""
        link = ProgramLink(LinkState(linked=False, name="draft"))

        assert link.name == ""
