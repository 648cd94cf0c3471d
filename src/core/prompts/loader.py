# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Prompt catalog loader for StudyPilot.

Catalog files are loaded from the config/prompts directory, optionally
deep-merged with a deployment override file, and validated against the
PromptCatalog model. The validated catalog is cached per process.
"""

from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from src.core.config.settings import get_settings
from src.core.config.yaml_loader import YAMLLoadError, load_yaml_with_override
from src.core.prompts.models import PromptCatalog
from src.utils.logging import get_logger

logger = get_logger(__name__)

_catalog: Optional[PromptCatalog] = None


class PromptLoadError(Exception):
    """Raised when the prompt catalog fails to load or validate."""

    pass


def load_prompt_catalog(
    prompts_dir: Optional[Path] = None,
    override_file: Optional[Path] = None,
) -> PromptCatalog:
    """Load and validate the prompt catalog.

    Args:
        prompts_dir: Directory of catalog files (defaults to settings.prompts_dir).
        override_file: Optional YAML file deep-merged over the catalog
            (defaults to settings.prompts_override_file).

    Returns:
        Validated PromptCatalog.

    Raises:
        PromptLoadError: If a file fails to load or the catalog is invalid.
    """
    if prompts_dir is None or override_file is None:
        settings = get_settings()
        prompts_dir = prompts_dir or settings.prompts_dir
        override_file = override_file or settings.prompts_override_file

    try:
        data = load_yaml_with_override(prompts_dir, override_file)
    except YAMLLoadError as e:
        raise PromptLoadError(f"Failed to load prompt catalog: {e}") from e

    try:
        catalog = PromptCatalog.model_validate(data)
    except ValidationError as e:
        raise PromptLoadError(f"Invalid prompt catalog in '{prompts_dir}': {e}") from e

    logger.debug(
        "prompt_catalog_loaded",
        path=str(prompts_dir),
        files=sorted(data.keys()),
        override=str(override_file) if override_file else None,
    )
    return catalog


def get_prompt_catalog() -> PromptCatalog:
    """Get the process-wide prompt catalog, loading it on first use."""
    global _catalog
    if _catalog is None:
        _catalog = load_prompt_catalog()
    return _catalog


def reset_prompt_catalog() -> None:
    """Drop the cached catalog. Useful for testing."""
    global _catalog
    _catalog = None
