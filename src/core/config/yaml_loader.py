# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""YAML loader used by the prompt catalog.

Catalog files are plain mappings. A directory of catalog files is loaded
into one dictionary keyed by file stem, and a deployment may overlay a
single override file on top of it.

Example:
    >>> from pathlib import Path
    >>> from src.core.config.yaml_loader import load_yaml_directory
    >>> catalogs = load_yaml_directory(Path("config/prompts"))
    >>> catalogs["chat"]["classifier"]["system"]
"""

from pathlib import Path
from typing import Any

import yaml

_YAML_SUFFIXES = (".yaml", ".yml")


class YAMLLoadError(Exception):
    """Raised when a YAML file cannot be read or is not a mapping."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load YAML file '{path}': {reason}")


def load_yaml(path: Path) -> dict[str, Any]:
    """Load a single YAML file.

    Args:
        path: Path to the YAML file.

    Returns:
        The parsed mapping. An empty file yields an empty dict.

    Raises:
        YAMLLoadError: If the file is missing, unreadable, not valid YAML,
            or its root is not a mapping.
    """
    if not path.is_file():
        reason = "Path is not a file" if path.exists() else "File does not exist"
        raise YAMLLoadError(path, reason)

    try:
        with path.open(encoding="utf-8") as handle:
            parsed = yaml.safe_load(handle)
    except OSError as e:
        raise YAMLLoadError(path, f"Cannot read file: {e}") from e
    except yaml.YAMLError as e:
        raise YAMLLoadError(path, f"Invalid YAML syntax: {e}") from e

    if parsed is None:
        return {}

    if not isinstance(parsed, dict):
        raise YAMLLoadError(
            path, f"YAML root must be a mapping, got {type(parsed).__name__}"
        )

    return parsed


def load_yaml_directory(path: Path) -> dict[str, dict[str, Any]]:
    """Load every .yaml/.yml file of a directory, keyed by file stem.

    Files are read in name order, so when both ``chat.yaml`` and ``chat.yml``
    exist the ``.yml`` one wins.

    Raises:
        YAMLLoadError: If the path is not a directory or any file fails.
    """
    if not path.is_dir():
        reason = "Path is not a directory" if path.exists() else "Directory does not exist"
        raise YAMLLoadError(path, reason)

    files = sorted(
        (p for p in path.iterdir() if p.is_file() and p.suffix in _YAML_SUFFIXES),
        key=lambda p: (p.suffix != ".yaml", p.name),
    )
    return {f.stem: load_yaml(f) for f in files}


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence.

    Nested mappings are merged recursively; any other value in ``override``
    replaces the one in ``base``. Neither input is modified.

    Example:
        >>> deep_merge({"a": 1, "b": {"c": 2, "d": 3}}, {"b": {"c": 10}})
        {'a': 1, 'b': {'c': 10, 'd': 3}}
    """
    merged: dict[str, Any] = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def load_yaml_with_override(
    directory: Path,
    override_file: Path | None = None,
) -> dict[str, dict[str, Any]]:
    """Load a catalog directory and overlay an optional override file.

    The override file has the same shape as the merged directory: its top
    level keys are catalog names (file stems).

    Args:
        directory: Directory of catalog files.
        override_file: Optional YAML file deep-merged over the catalogs.

    Returns:
        Catalogs keyed by file stem.

    Raises:
        YAMLLoadError: If any file fails to load.
    """
    catalogs = load_yaml_directory(directory)
    if override_file is None:
        return catalogs
    return deep_merge(catalogs, load_yaml(override_file))
