"""
Tests for controlpanel.control module.

Tests the control surface including:
- Results and notifications for each operation
- Export file naming and download
- Import from bytes and from files
"""

from __future__ import annotations

from datetime import date

import pytest

from controlpanel.codec import decode_app_data, encode_app_data
from controlpanel.control import ControlSurface, export_filename
from controlpanel.exceptions import EmptyNameError, ImportParseError, InvalidSettingKeyError
from controlpanel.models import LinkState
from controlpanel.results import ExportResult


class TestLinkOperations:
    """Tests for link_program and unlink_program."""

    def test_link_program(self, panel, notifier):
        """Test a successful link is reported as success."""
        result = panel.link_program("Bot")

        assert result.ok is True
        assert result.error is None
        assert notifier.messages == [('Program "Bot" linked successfully!', "success")]
        assert panel.store.link_state == LinkState(linked=True, name="Bot")

    @pytest.mark.parametrize("name", ["", "   "])
    def test_link_program_blank(self, panel, notifier, name):
        """Test a blank name yields one error notification and one error entry."""
        before = len(panel.store.logs)

        result = panel.link_program(name)

        assert result.ok is False
        assert isinstance(result.error, EmptyNameError)
        assert notifier.messages == [("Enter a program name", "error")]
        assert len(panel.store.logs) == before + 1
        assert panel.store.logs[0].status == "error"
        assert panel.store.link_state.linked is False

    def test_unlink_program(self, panel, notifier):
        """Test unlink is always reported as info."""
        panel.link_program("Bot")

        panel.unlink_program()
        result = panel.unlink_program()

        assert result.ok is True
        assert notifier.messages[-2:] == [
            ("Program unlinked", "info"),
            ("Program unlinked", "info"),
        ]
        assert panel.store.link_state == LinkState()


class TestSetSetting:
    """Tests for set_setting."""

    def test_success_is_not_notified(self, panel, notifier):
        """Test that a successful toggle only returns a result."""
        result = panel.set_setting("darkMode", False)

        assert result.ok is True
        assert result.message == 'Setting "darkMode" changed to off'
        assert notifier.messages == []
        assert panel.store.settings["darkMode"] is False

    def test_unknown_key(self, panel, notifier):
        """Test that an unknown key is reported and not added."""
        result = panel.set_setting("volume", True)

        assert result.ok is False
        assert isinstance(result.error, InvalidSettingKeyError)
        assert notifier.messages == [('Unknown setting "volume"', "error")]
        assert "volume" not in panel.store.settings


class TestExport:
    """Tests for export_config."""

    def test_export_filename(self):
        """Test the export file naming scheme."""
        assert export_filename(date(2025, 1, 31)) == "control-panel-config-2025-01-31.json"

    def test_export_writes_file(self, panel, notifier, tmp_test_dir):
        """Test that export downloads the blob and records the action."""
        panel.link_program("Bot")
        before = panel.store.snapshot()

        result = panel.export_config()

        assert isinstance(result, ExportResult)
        assert result.ok is True
        assert result.filename == "control-panel-config-2025-01-31.json"
        written = tmp_test_dir / "exports" / result.filename
        assert written.read_bytes() == result.data
        assert decode_app_data(result.data) == before
        assert notifier.messages[-1] == ("Configuration exported!", "success")
        assert panel.store.logs[0].action == "Configuration exported to file"

    def test_export_requires_transfer(self, store, notifier):
        """Test that exporting without a transfer collaborator is an error."""
        panel = ControlSurface(store, notifier)

        with pytest.raises(RuntimeError):
            panel.export_config()


class TestImport:
    """Tests for import_config and import_file."""

    def test_import_config(self, panel, notifier, sample_app_data):
        """Test a successful import."""
        result = panel.import_config(encode_app_data(sample_app_data, indent=2))

        assert result.ok is True
        assert notifier.messages == [("Configuration imported!", "success")]
        assert panel.store.link_state == sample_app_data.link_state

    def test_import_config_rejected(self, panel, notifier):
        """Test a rejected import is reported and leaves state unchanged."""
        before = panel.store.snapshot()

        result = panel.import_config(b"{ nope")

        assert result.ok is False
        assert isinstance(result.error, ImportParseError)
        assert notifier.messages == [("Failed to read file", "error")]
        assert panel.store.snapshot().settings == before.settings
        assert panel.store.logs[1:] == before.logs

    @pytest.mark.parametrize(
        "blob",
        [
            pytest.param(b"[" * 200_000, id="deep-nesting"),
            pytest.param(b'{"programLinked": ' + b"1" * 5000 + b"}", id="huge-integer"),
        ],
    )
    def test_import_config_pathological_json(self, panel, notifier, blob):
        """Test that parser limits are reported as a failed import, not raised."""
        before = panel.store.snapshot()

        result = panel.import_config(blob)

        assert result.ok is False
        assert isinstance(result.error, ImportParseError)
        assert notifier.messages == [("Failed to read file", "error")]
        assert panel.store.logs[0].action == "Configuration import failed"
        assert panel.store.logs[1:] == before.logs

    def test_export_then_import_file(self, panel, make_store, backend, notifier):
        """Test that an exported file imports unmodified on another store."""
        panel.link_program("Bot")
        panel.set_setting("autoSync", True)
        exported = panel.export_config()
        path = panel.transfer.last_path

        backend.delete("control-panel-data")
        other = ControlSurface(make_store(), notifier, panel.transfer)
        result = other.import_file(path)

        assert result.ok is True
        snapshot = other.store.snapshot()
        assert snapshot.link_state == LinkState(linked=True, name="Bot")
        assert snapshot.settings["autoSync"] is True
        assert snapshot.logs[1:] == decode_app_data(exported.data).logs

    def test_import_missing_file(self, panel, notifier, tmp_test_dir):
        """Test that an unreadable file is reported as a failed import."""
        before = len(panel.store.logs)

        result = panel.import_file(tmp_test_dir / "missing.json")

        assert result.ok is False
        assert isinstance(result.error, ImportParseError)
        assert notifier.messages == [("Failed to read file", "error")]
        assert len(panel.store.logs) == before + 1
        assert panel.store.logs[0].action == "Configuration import failed"
