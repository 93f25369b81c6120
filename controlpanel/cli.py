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

"""Command-line interface for the control panel.

This module provides the ctlpanel entry point. Each invocation loads the
persisted state, runs one control surface operation and exits; the state
store saves after every mutation, so nothing needs flushing at exit.

Commands:

    status: Show the link state and settings
    link: Link a program by name
    unlink: Unlink the current program
    set: Turn a setting on or off
    export: Export the configuration to a JSON file
    import: Import a previously exported configuration file
    logs: Show the activity log, newest first

Example:
    Link a program and turn on auto sync:
        ```bash
        $ ctlpanel link "Bot"
        $ ctlpanel set autoSync on
        ```

    Move the configuration to another machine:
        ```bash
        $ ctlpanel export --output-dir ./backup
        $ ctlpanel import ./backup/control-panel-config-2025-01-31.json
        ```

Exit Codes:

- 0: Success
- 1: Error (rejected operation, configuration or storage failure)

"""

from __future__ import annotations

import argparse
from importlib.metadata import version
from pathlib import Path
import sys

from controlpanel.config import load_effective_config
from controlpanel.control import (
    ConsoleNotifier,
    ControlSurface,
    DirectoryFileTransfer,
)
from controlpanel.exceptions import ControlPanelError
from controlpanel.logging import get_global_logger, get_logger, set_global_logger
from controlpanel.models import SETTING_KEYS
from controlpanel.storage import FileKeyValueStore
from controlpanel.store import StateStore

_ON_VALUES = {"on", "true", "yes", "1"}
_OFF_VALUES = {"off", "false", "no", "0"}


def _parse_switch(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _ON_VALUES:
        return True
    if lowered in _OFF_VALUES:
        return False
    raise argparse.ArgumentTypeError(f"expected on or off, got {value!r}")


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a whole number, got {value!r}") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def _open_panel(args: argparse.Namespace) -> ControlSurface:
    """Load config and state, and build the surface."""
    config = load_effective_config(args.config)
    storage_dir = Path(config["storage"]["directory"])
    export_dir = Path(getattr(args, "output_dir", None) or config["export"]["directory"])

    store = StateStore(FileKeyValueStore(storage_dir), key=config["storage"]["key"])
    store.load()
    return ControlSurface(store, ConsoleNotifier(), DirectoryFileTransfer(export_dir))


def cmd_status(args: argparse.Namespace) -> int:
    """Handler for 'ctlpanel status'."""
    panel = _open_panel(args)
    state = panel.store.link_state
    settings = panel.store.settings

    print("=" * 70)
    print("CONTROL PANEL STATUS")
    print("=" * 70)
    if state.linked:
        print(f"Program:     {state.name} (linked)")
    else:
        print("Program:     not linked")
    print()
    print("Settings:")
    for key in SETTING_KEYS:
        print(f"  {key:<14} {'on' if settings[key] else 'off'}")
    print()
    print(f"Log entries: {len(panel.store.logs)}")
    print("=" * 70)
    return 0


def cmd_link(args: argparse.Namespace) -> int:
    """Handler for 'ctlpanel link'."""
    result = _open_panel(args).link_program(args.name)
    return 0 if result.ok else 1


def cmd_unlink(args: argparse.Namespace) -> int:
    """Handler for 'ctlpanel unlink'."""
    result = _open_panel(args).unlink_program()
    return 0 if result.ok else 1


def cmd_set(args: argparse.Namespace) -> int:
    """Handler for 'ctlpanel set'.

    A successful toggle is not notified by the control surface, so the
    CLI prints the confirmation itself.
    """
    result = _open_panel(args).set_setting(args.key, args.value)
    if result.ok:
        print(result.message)
    return 0 if result.ok else 1


def cmd_export(args: argparse.Namespace) -> int:
    """Handler for 'ctlpanel export'."""
    logger = get_global_logger()
    logger.step(1, 2, "Loading saved state...")
    panel = _open_panel(args)

    logger.step(2, 2, "Writing export file...")
    result = panel.export_config()
    if isinstance(panel.transfer, DirectoryFileTransfer):
        print(f"Written to: {panel.transfer.last_path}")
    return 0 if result.ok else 1


def cmd_import(args: argparse.Namespace) -> int:
    """Handler for 'ctlpanel import'."""
    logger = get_global_logger()
    logger.step(1, 2, "Loading saved state...")
    panel = _open_panel(args)

    logger.step(2, 2, f"Importing {args.file}...")
    result = panel.import_file(Path(args.file))
    return 0 if result.ok else 1


def cmd_logs(args: argparse.Namespace) -> int:
    """Handler for 'ctlpanel logs'."""
    panel = _open_panel(args)
    entries = panel.store.logs
    if args.limit is not None:
        entries = entries[: args.limit]

    print(f"Activity log ({len(panel.store.logs)} entries)")
    for entry in entries:
        print(f"  {entry.timestamp:<10} [{entry.status.upper():<7}] {entry.action}")
    return 0


def _add_common_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show progress and high-level status updates",
    )
    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Show detailed debugging output (implies --verbose)",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the ctlpanel argument parser."""
    parser = argparse.ArgumentParser(
        prog="ctlpanel",
        description="Control panel - program link, settings and activity log",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"ctlpanel {version('controlpanel')}",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML config file (default: $CONTROL_PANEL_HOME/config.yaml if present)",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        help="Available commands",
        required=True,
    )

    parser_status = subparsers.add_parser(
        "status", help="Show the link state and settings"
    )
    _add_common_flags(parser_status)
    parser_status.set_defaults(func=cmd_status)

    parser_link = subparsers.add_parser("link", help="Link a program by name")
    parser_link.add_argument("name", help="Name of the program to link")
    _add_common_flags(parser_link)
    parser_link.set_defaults(func=cmd_link)

    parser_unlink = subparsers.add_parser("unlink", help="Unlink the current program")
    _add_common_flags(parser_unlink)
    parser_unlink.set_defaults(func=cmd_unlink)

    parser_set = subparsers.add_parser(
        "set",
        help="Turn a setting on or off",
        description=f"Known settings: {', '.join(SETTING_KEYS)}",
    )
    parser_set.add_argument("key", help="Setting name")
    parser_set.add_argument("value", type=_parse_switch, help="on or off")
    _add_common_flags(parser_set)
    parser_set.set_defaults(func=cmd_set)

    parser_export = subparsers.add_parser(
        "export", help="Export the configuration to a JSON file"
    )
    parser_export.add_argument(
        "--output-dir",
        default=None,
        help="Directory for the export file (default: from config or .)",
    )
    _add_common_flags(parser_export)
    parser_export.set_defaults(func=cmd_export)

    parser_import = subparsers.add_parser(
        "import", help="Import a previously exported configuration file"
    )
    parser_import.add_argument("file", help="Path to the exported JSON file")
    _add_common_flags(parser_import)
    parser_import.set_defaults(func=cmd_import)

    parser_logs = subparsers.add_parser("logs", help="Show the activity log")
    parser_logs.add_argument(
        "-n",
        "--limit",
        type=_positive_int,
        default=None,
        help="Show only the N newest entries",
    )
    _add_common_flags(parser_logs)
    parser_logs.set_defaults(func=cmd_logs)

    return parser


def run(argv: list[str] | None = None) -> int:
    """Parse argv, dispatch to the command handler and return the exit code."""
    args = build_parser().parse_args(argv)
    set_global_logger(get_logger(verbose=args.verbose, debug=args.debug))
    try:
        return args.func(args)
    except ControlPanelError as err:
        print(f"Error: {err}")
        if args.debug:
            raise
        return 1


def main() -> None:
    """Main entry point, registered as the 'ctlpanel' console script."""
    sys.exit(run())


if __name__ == "__main__":
    main()
