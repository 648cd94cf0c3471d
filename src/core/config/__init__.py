# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Configuration package for StudyPilot.

This package provides centralized configuration management:
- Settings: Pydantic-based settings loaded from environment variables
- YAML loader: Utilities for loading the prompt catalog and overrides

Example:
    >>> from src.core.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.environment)
    'development'

    >>> from src.core.config import load_yaml
    >>> catalog = load_yaml(Path("config/prompts/chat.yaml"))
"""

from src.core.config.settings import (
    DatabaseSettings,
    LLMSettings,
    PlanSettings,
    RedisSettings,
    Settings,
    WorkerSettings,
    clear_settings_cache,
    get_settings,
)
from src.core.config.yaml_loader import (
    YAMLLoadError,
    deep_merge,
    load_yaml,
    load_yaml_directory,
    load_yaml_with_override,
)

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    "clear_settings_cache",
    # Subsettings
    "DatabaseSettings",
    "RedisSettings",
    "LLMSettings",
    "PlanSettings",
    "WorkerSettings",
    # YAML utilities
    "load_yaml",
    "load_yaml_directory",
    "load_yaml_with_override",
    "deep_merge",
    "YAMLLoadError",
]
