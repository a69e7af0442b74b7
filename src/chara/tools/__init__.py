"""Registry of the agno toolkits chara can hand to an agent.

Tools are registered by string name and instantiated on demand.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from chara.logging_config import get_logger
from chara.tools_metadata import TOOL_REGISTRY

from .grep import grep_tools

if TYPE_CHECKING:
    from agno.tools import Toolkit

__all__ = ["TOOL_REGISTRY", "get_tool_by_name", "grep_tools"]

logger = get_logger(__name__)


def get_tool_by_name(tool_name: str, **kwargs: Any) -> Toolkit:  # noqa: ANN401
    """Get a tool instance by its registered name.

    Args:
        tool_name: The registered name of the tool
        **kwargs: Constructor arguments for the toolkit (e.g. ``base_dir``)

    Returns:
        An instance of the requested tool

    Raises:
        ValueError: If the tool name is not registered

    """
    if tool_name not in TOOL_REGISTRY:
        available = ", ".join(sorted(TOOL_REGISTRY.keys()))
        msg = f"Unknown tool: {tool_name}. Available tools: {available}"
        raise ValueError(msg)

    try:
        tool_class = TOOL_REGISTRY[tool_name]()
        return tool_class(**kwargs)
    except ImportError as e:
        logger.warning("Could not import tool", tool=tool_name, error=str(e))
        raise
