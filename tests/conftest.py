"""
Pytest configuration and shared fixtures for control panel tests.

This module provides reusable fixtures and test utilities used across
the test suite.
"""

from __future__ import annotations

from datetime import date
import itertools
from pathlib import Path
from typing import Any

import pytest
import yaml

from controlpanel.control import ControlSurface, DirectoryFileTransfer, RecordingNotifier
from controlpanel.models import AppData, LinkState, LogEntry, default_settings
from controlpanel.storage import MemoryKeyValueStore
from controlpanel.store import StateStore

FIXED_TIME = "12:00:00"


@pytest.fixture
def tmp_test_dir(tmp_path: Path) -> Path:
    """
    Provide a temporary directory for test artifacts.

    Automatically cleaned up after test completion.
    """
    return tmp_path


@pytest.fixture
def id_factory():
    """Deterministic log entry ids: "id-1", "id-2", ..."""
    counter = itertools.count(1)
    return lambda: f"id-{next(counter)}"


@pytest.fixture
def backend() -> MemoryKeyValueStore:
    """Provide an empty in-memory durable store."""
    return MemoryKeyValueStore()


@pytest.fixture
def make_store(backend: MemoryKeyValueStore, id_factory):
    """
    Factory fixture for state stores sharing the same backend.

    Usage:
        store = make_store()          # loaded
        raw = make_store(load=False)  # constructed only
    """

    def _make(load: bool = True) -> StateStore:
        store = StateStore(backend, clock=lambda: FIXED_TIME, id_factory=id_factory)
        if load:
            store.load()
        return store

    return _make


@pytest.fixture
def store(make_store) -> StateStore:
    """Provide a loaded state store on a fresh backend."""
    return make_store()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def panel(store: StateStore, notifier: RecordingNotifier, tmp_test_dir: Path) -> ControlSurface:
    """Provide a control surface exporting into a temporary directory."""
    return ControlSurface(
        store,
        notifier,
        DirectoryFileTransfer(tmp_test_dir / "exports"),
        today=lambda: date(2025, 1, 31),
    )


@pytest.fixture
def sample_app_data() -> AppData:
    """
    Provide a linked aggregate with non-default settings and two log entries.
    """
    settings = default_settings()
    settings["autoSync"] = True
    settings["darkMode"] = False
    return AppData(
        link_state=LinkState(linked=True, name="Bot"),
        settings=settings,
        logs=(
            LogEntry(id="b", timestamp="10:00:01", action='Program "Bot" linked', status="success"),
            LogEntry(id="a", timestamp="10:00:00", action="Application started", status="success"),
        ),
    )


@pytest.fixture
def sample_document() -> dict[str, Any]:
    """Provide the wire document matching sample_app_data."""
    return {
        "programLinked": True,
        "programName": "Bot",
        "settings": {
            "notifications": True,
            "autoSync": True,
            "darkMode": False,
            "soundEffects": True,
            "analytics": False,
        },
        "logs": [
            {"id": "b", "timestamp": "10:00:01", "action": 'Program "Bot" linked', "status": "success"},
            {"id": "a", "timestamp": "10:00:00", "action": "Application started", "status": "success"},
        ],
    }


@pytest.fixture
def create_yaml_file(tmp_test_dir: Path):
    """
    Factory fixture for creating temporary YAML files.

    Usage:
        yaml_path = create_yaml_file("config.yaml", {"storage": {"key": "k"}})
    """

    def _create(filename: str, data: Any) -> Path:
        path = tmp_test_dir / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            yaml.dump(data, f)
        return path

    return _create
