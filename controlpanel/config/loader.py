"""
Configuration loading and merging for the control panel.

The effective configuration is built from three layers, later layers
overriding earlier ones:

Configuration Layers
--------------------
1. **Built-in defaults** (DEFAULT_CONFIG)
2. **Config file** (YAML)
   - The path given with --config, or
   - $CONTROL_PANEL_HOME/config.yaml (else ~/.controlpanel/config.yaml)
     when it exists
3. **Environment overrides**
   - CONTROL_PANEL_HOME        -> storage.directory
   - CONTROL_PANEL_STORAGE_KEY -> storage.key
   - CONTROL_PANEL_EXPORT_DIR  -> export.directory
   A .env file in the working directory is loaded first (python-dotenv);
   variables already set in the process environment win.

Merge Behavior
--------------
  - **Dicts**: Recursively merged (keys from overlay override base)
  - **Lists/Scalars**: Replaced

Path Resolution
---------------
Relative storage.directory and export.directory values from a config file
are resolved against the config file's directory; "~" is expanded
everywhere.

Error Handling
--------------
- ConfigError: YAML parse errors, non-mapping documents, values of the
  wrong type, or an explicit --config path that does not exist
- All errors are chained with "from err"

Examples
--------
    >>> from controlpanel.config import load_effective_config
    >>> cfg = load_effective_config()
    >>> cfg["storage"]["key"]
    'control-panel-data'
"""

from __future__ import annotations

from collections.abc import Mapping
import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
import yaml

from controlpanel.exceptions import ConfigError
from controlpanel.logging import get_global_logger

DEFAULT_HOME = Path("~/.controlpanel")

DEFAULT_CONFIG: dict[str, Any] = {
    "storage": {
        "directory": str(DEFAULT_HOME),
        "key": "control-panel-data",
    },
    "export": {
        "directory": ".",
    },
}

_ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "CONTROL_PANEL_HOME": ("storage", "directory"),
    "CONTROL_PANEL_STORAGE_KEY": ("storage", "key"),
    "CONTROL_PANEL_EXPORT_DIR": ("export", "directory"),
}

_PATH_FIELDS: tuple[tuple[str, str], ...] = (
    ("storage", "directory"),
    ("export", "directory"),
)


# -------------------------------
# YAML helpers
# -------------------------------


def _load_yaml_file(p: Path) -> dict[str, Any]:
    """
    Load a YAML config file and return its top-level mapping.

    An empty file is treated as an empty mapping.

    Raises:
      ConfigError - file unreadable, invalid YAML, or not a mapping
    """
    try:
        with p.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as err:
        raise ConfigError(f"Cannot read config file {p}: {err}") from err
    except yaml.YAMLError as err:
        raise ConfigError(f"Error parsing YAML: {p}: {err}") from err
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"top-level YAML must be a mapping (dict): {p}")
    return data


# -------------------------------
# Merge logic
# -------------------------------


def _deep_merge_dicts(base: Mapping[str, Any], overlay: Mapping[str, Any]) -> dict[str, Any]:
    """
    Deep-merge two dicts with "overlay wins".

    Rules:
      - dict + dict -> deep merge
      - everything else -> overlay overwrites base

    This function does not mutate inputs; returns a new dict.
    """
    result: dict[str, Any] = dict(base)
    for k, v in overlay.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = _deep_merge_dicts(result[k], v)
        else:
            result[k] = v
    return result


# -------------------------------
# Validation and paths
# -------------------------------


def _validate(cfg: dict[str, Any]) -> None:
    """Check that every known field is a non-empty string."""
    for section, key in (("storage", "directory"), ("storage", "key"), ("export", "directory")):
        block = cfg.get(section)
        if not isinstance(block, dict):
            raise ConfigError(f"'{section}' must be a mapping")
        value = block.get(key)
        if not isinstance(value, str) or not value.strip():
            raise ConfigError(f"'{section}.{key}' must be a non-empty string")


def _resolve_paths(cfg: dict[str, Any], base_dir: Path | None) -> None:
    """
    Expand "~" and resolve relative directories against base_dir.

    Modifies cfg in place. With no base_dir, relative paths are left
    relative to the working directory.
    """
    for section, key in _PATH_FIELDS:
        p = Path(cfg[section][key]).expanduser()
        if base_dir is not None and not p.is_absolute():
            p = base_dir / p
        cfg[section][key] = str(p)


def _default_config_path(environ: Mapping[str, str]) -> Path:
    home = environ.get("CONTROL_PANEL_HOME") or str(DEFAULT_HOME)
    return Path(home).expanduser() / "config.yaml"


def _env_overlay(environ: Mapping[str, str]) -> dict[str, Any]:
    overlay: dict[str, Any] = {}
    for var, (section, key) in _ENV_OVERRIDES.items():
        value = environ.get(var)
        if value:
            overlay.setdefault(section, {})[key] = value
    return overlay


# -------------------------------
# Public API
# -------------------------------


def load_effective_config(
    config_path: Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    use_dotenv: bool = True,
) -> dict[str, Any]:
    """
    Load and merge the effective control panel configuration.

    Steps
      1) Load .env into the process environment (unless use_dotenv=False).
      2) Start from DEFAULT_CONFIG.
      3) Merge the config file (explicit path, or the default one if it
         exists); resolve its relative paths against its directory.
      4) Merge environment overrides.
      5) Validate field types and expand "~".

    Args:
      config_path: Explicit config file. Must exist when given.
      environ: Environment mapping (defaults to os.environ). Tests pass a
        plain dict to stay isolated from the real environment.
      use_dotenv: Whether to load a .env file first.

    Returns
      A dict with "storage" and "export" sections.

    Raises
      ConfigError on a missing explicit config file, invalid YAML or
      invalid values.
    """
    logger = get_global_logger()

    if use_dotenv:
        load_dotenv(override=False)
    env = os.environ if environ is None else environ

    merged: dict[str, Any] = {k: dict(v) for k, v in DEFAULT_CONFIG.items()}

    if config_path is not None:
        config_path = config_path.expanduser()
        if not config_path.exists():
            raise ConfigError(f"Config file not found: {config_path}")
    else:
        candidate = _default_config_path(env)
        config_path = candidate if candidate.exists() else None

    if config_path is not None:
        config_path = config_path.resolve()
        logger.verbose("CONFIG", f"Loading: {config_path}")
        file_cfg = _load_yaml_file(config_path)
        merged = _deep_merge_dicts(merged, file_cfg)
        _validate(merged)
        _resolve_paths(merged, config_path.parent)
    else:
        logger.verbose("CONFIG", "No config file found, using defaults")

    overlay = _env_overlay(env)
    if overlay:
        logger.verbose("CONFIG", f"Environment overrides: {', '.join(sorted(overlay))}")
        merged = _deep_merge_dicts(merged, overlay)

    _validate(merged)
    _resolve_paths(merged, None)

    logger.debug("CONFIG", f"Effective config: {merged}")
    return merged
