#  Copyright (c) 2025 Tom Villani, Ph.D.

"""Configuration file discovery and loading for the blogmd CLI.

This module handles automatic discovery of configuration files, loading
configs from TOML, YAML or JSON, and turning them into converter options.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import-not-found,unused-ignore]
from typing import Any, Dict, Optional

import yaml

from blogmd.constants import DEFAULT_EXPORT_IMAGES_PREFIX, DEFAULT_EXPORT_IMAGES_TARGET

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "BLOGMD_CONFIG"
DEDICATED_CONFIG_FILENAMES = [".blogmd.toml", ".blogmd.yaml", ".blogmd.yml", ".blogmd.json"]

DEFAULT_CONFIG: Dict[str, Any] = {
    "log_level": "WARNING",
    "export_images_prefix": DEFAULT_EXPORT_IMAGES_PREFIX,
    "export_images_target": DEFAULT_EXPORT_IMAGES_TARGET,
    "rewrite_images": False,
    "bullet_marker": "-",
    "emphasis_symbol": "_",
    "parse_frontmatter": False,
    "render_frontmatter": False,
    "indent": None,
}


def _load_pyproject_section(pyproject_path: Path) -> Dict[str, Any]:
    """Load the [tool.blogmd] table from a pyproject.toml file.

    Returns
    -------
    dict
        The table, or an empty dict if the file has none

    Raises
    ------
    argparse.ArgumentTypeError
        If pyproject.toml cannot be parsed or the section is not a table

    """
    try:
        with open(pyproject_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise argparse.ArgumentTypeError(f"Invalid TOML in pyproject.toml {pyproject_path}: {e}") from e
    except OSError as e:
        raise argparse.ArgumentTypeError(f"Error reading pyproject.toml {pyproject_path}: {e}") from e

    config = data.get("tool", {}).get("blogmd", {})
    if not isinstance(config, dict):
        raise argparse.ArgumentTypeError(
            f"[tool.blogmd] section in {pyproject_path} must be a table, got {type(config).__name__}"
        )
    return config


def find_config_in_parents(start_dir: Optional[Path] = None) -> Optional[Path]:
    """Find a configuration file by searching from ``start_dir`` up to the root.

    In each directory the dedicated files (``.blogmd.toml``, ``.blogmd.yaml``,
    ``.blogmd.yml``, ``.blogmd.json``) are checked first, then a
    ``pyproject.toml`` that has a ``[tool.blogmd]`` section.

    Parameters
    ----------
    start_dir : Path, optional
        Starting directory, defaults to the current working directory

    Returns
    -------
    Path or None
        First config file found

    """
    current = (start_dir or Path.cwd()).resolve()

    while True:
        for filename in DEDICATED_CONFIG_FILENAMES:
            config_path = current / filename
            if config_path.is_file():
                return config_path

        pyproject_path = current / "pyproject.toml"
        if pyproject_path.is_file():
            try:
                if _load_pyproject_section(pyproject_path):
                    return pyproject_path
            except argparse.ArgumentTypeError as e:
                logger.debug("Skipping unreadable %s: %s", pyproject_path, e)

        parent = current.parent
        if parent == current:
            return None
        current = parent


def load_config_file(config_path: Path | str) -> Dict[str, Any]:
    """Load configuration from a TOML, YAML, JSON or pyproject.toml file.

    Raises
    ------
    argparse.ArgumentTypeError
        If the file cannot be read, parsed, or has an unsupported format

    Examples
    --------
    >>> config = load_config_file(".blogmd.toml")
    >>> config.get("bullet_marker")
    '*'

    """
    config_path = Path(config_path)

    if not config_path.is_file():
        raise argparse.ArgumentTypeError(f"Configuration file does not exist: {config_path}")

    filename = config_path.name.lower()
    ext = config_path.suffix.lower()

    if filename == "pyproject.toml":
        return _load_pyproject_section(config_path)

    try:
        if ext == ".toml":
            with open(config_path, "rb") as f:
                config = tomllib.load(f)
        elif ext in (".yaml", ".yml"):
            with open(config_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f)
        elif ext == ".json":
            with open(config_path, "r", encoding="utf-8") as f:
                config = json.load(f)
        else:
            raise argparse.ArgumentTypeError(f"Unsupported config file format: {ext}. Use .toml, .yaml or .json")
    except (tomllib.TOMLDecodeError, yaml.YAMLError, json.JSONDecodeError) as e:
        raise argparse.ArgumentTypeError(f"Invalid config file {config_path}: {e}") from e
    except OSError as e:
        raise argparse.ArgumentTypeError(f"Error reading config file {config_path}: {e}") from e

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise argparse.ArgumentTypeError(f"Config file {config_path} must contain a mapping, got {type(config).__name__}")
    return config


def load_config_with_priority(explicit_path: Optional[str] = None, env_var_path: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration with proper priority handling.

    Priority order (highest to lowest):
    1. Explicit config file path (``--config``)
    2. ``BLOGMD_CONFIG`` environment variable
    3. Auto-discovered config file (cwd upward)

    Returns
    -------
    dict
        ``DEFAULT_CONFIG`` updated with the loaded file's known keys

    Raises
    ------
    argparse.ArgumentTypeError
        If a config file is specified but cannot be loaded

    """
    if explicit_path:
        loaded = load_config_file(explicit_path)
    elif env_var_path:
        loaded = load_config_file(env_var_path)
    else:
        discovered = find_config_in_parents()
        loaded = load_config_file(discovered) if discovered else {}

    config = dict(DEFAULT_CONFIG)
    for key, value in loaded.items():
        if key not in DEFAULT_CONFIG:
            logger.warning("Ignoring unknown configuration key '%s'", key)
            continue
        config[key] = value
    return config
