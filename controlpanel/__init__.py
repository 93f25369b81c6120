"""
Control Panel - program link, settings and activity log

A small client-side state store behind an interactive control panel. It
tracks whether an external program is linked, five boolean settings and a
bounded activity log, keeps them durable in a local key-value store and
moves them between installations as a portable JSON file.

Quick Start
-----------
Link a program:

    $ ctlpanel link "Bot"

Export and re-import the configuration:

    $ ctlpanel export --output-dir ./backup
    $ ctlpanel import ./backup/control-panel-config-2025-01-31.json

For full CLI documentation:

    $ ctlpanel --help

Package Structure
-----------------
cli : module
    Command-line interface with argparse.
control : module
    Control surface operations and collaborator protocols.
store : module
    StateStore, the owner of the persisted aggregate.
codec : module
    JSON encoding and strict validation of the aggregate.
activity, settings, link : modules
    The three parts of the aggregate.
storage : package
    Durable key-value backends.
config : package
    YAML configuration loading and merging.

Public API
----------
    from controlpanel.store import StateStore
    from controlpanel.control import ControlSurface
    from controlpanel.storage import FileKeyValueStore
    from controlpanel.config import load_effective_config
"""

__version__ = "0.1.0"
__license__ = "Apache-2.0"
__description__ = "Control panel state store with bounded activity log"

from controlpanel.config import load_effective_config
from controlpanel.control import ControlSurface
from controlpanel.models import AppData, LinkState, LogEntry
from controlpanel.storage import FileKeyValueStore, MemoryKeyValueStore
from controlpanel.store import StateStore

__all__ = [
    "__version__",
    "__license__",
    "__description__",
    "load_effective_config",
    "ControlSurface",
    "StateStore",
    "FileKeyValueStore",
    "MemoryKeyValueStore",
    "AppData",
    "LinkState",
    "LogEntry",
]
