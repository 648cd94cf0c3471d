# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tool loader and registry factory.

Tool classes are imported from the class_path of their manifest entry,
so adding a tool only requires updating manifest.py.

Usage:
    from src.tools import get_default_tool_registry

    registry = get_default_tool_registry()
    responder = ConversationalResponder(db_manager.get_session, llm, registry)
"""

import importlib
import logging
from typing import Iterable, Optional

from src.core.prompts import PromptCatalog
from src.core.tools import BaseTool, ToolRegistry
from src.tools.manifest import TOOL_MANIFEST

logger = logging.getLogger(__name__)


def load_tool_class(class_path: str) -> type[BaseTool]:
    """Dynamically load a tool class from its path.

    Args:
        class_path: Class path in the format "module.path:ClassName".

    Returns:
        The tool class (not an instance).

    Raises:
        ImportError: If the module cannot be imported.
        AttributeError: If the class doesn't exist in the module.
    """
    module_path, class_name = class_path.rsplit(":", 1)
    module = importlib.import_module(module_path)
    return getattr(module, class_name)


def create_registry(
    tool_names: Iterable[str],
    prompts: Optional[PromptCatalog] = None,
) -> ToolRegistry:
    """Create a registry holding the named tools.

    Args:
        tool_names: Manifest names, registered in the given order.
        prompts: Prompt catalog the tools read their descriptions from.

    Returns:
        ToolRegistry with the named tools.

    Raises:
        ValueError: If a name is not in the manifest or its class cannot be loaded.
    """
    registry = ToolRegistry()

    for tool_name in tool_names:
        tool_info = TOOL_MANIFEST.get(tool_name)
        if tool_info is None:
            raise ValueError(
                f"Unknown tool '{tool_name}'. "
                f"Available tools: {list(TOOL_MANIFEST.keys())}"
            )

        try:
            tool_class = load_tool_class(tool_info["class_path"])
        except (ImportError, AttributeError) as e:
            logger.error(
                "Failed to load tool '%s' from '%s': %s",
                tool_name,
                tool_info["class_path"],
                e,
            )
            raise ValueError(f"Failed to load tool '{tool_name}': {e}") from e

        registry.register(tool_class(prompts=prompts))
        logger.debug("Registered tool: %s (category=%s)", tool_name, tool_info["category"])

    return registry


def get_default_tool_registry(prompts: Optional[PromptCatalog] = None) -> ToolRegistry:
    """Get a registry with every tool of the manifest registered.

    Raises:
        ValueError: If any tool cannot be loaded.
    """
    registry = create_registry(TOOL_MANIFEST.keys(), prompts=prompts)
    logger.info("Default tool registry created with %d tools", len(registry))
    return registry
