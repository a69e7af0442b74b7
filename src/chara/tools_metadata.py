"""Tool metadata and registration."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

    from agno.tools import Toolkit


class ToolCategory(str, Enum):
    """Tool categories for organization."""

    DEVELOPMENT = "development"


class ToolStatus(str, Enum):
    """Tool availability status."""

    AVAILABLE = "available"


@dataclass
class ConfigField:
    """Definition of a configuration field."""

    name: str  # Constructor argument name (e.g., "base_dir")
    label: str  # Display label (e.g., "Base Directory")
    type: str = "text"  # Field type: text, number, boolean
    required: bool = True
    default: Any = None
    description: str | None = None


@dataclass
class ToolMetadata:
    """Complete metadata for a tool."""

    name: str  # Internal tool name (e.g., "grep")
    display_name: str
    description: str
    category: ToolCategory
    status: ToolStatus = ToolStatus.AVAILABLE
    config_fields: list[ConfigField] | None = None
    dependencies: list[str] | None = None  # Required pip packages
    factory: Callable[[], type[Toolkit]] | None = None


# Global registries: metadata for listing, factories for loading
TOOL_METADATA: dict[str, ToolMetadata] = {}
TOOL_REGISTRY: dict[str, Callable[[], type[Toolkit]]] = {}


def register_tool_with_metadata(
    name: str,
    display_name: str,
    description: str,
    category: ToolCategory,
    status: ToolStatus = ToolStatus.AVAILABLE,
    config_fields: list[ConfigField] | None = None,
    dependencies: list[str] | None = None,
) -> Callable[[Callable[[], type[Toolkit]]], Callable[[], type[Toolkit]]]:
    """Register a tool factory together with its metadata.

    Args:
        name: Internal tool name
        display_name: Display name
        description: Tool description
        category: Tool category
        status: Availability status
        config_fields: Configuration field definitions
        dependencies: Required pip packages

    Returns:
        Decorator function

    """

    def decorator(func: Callable[[], type[Toolkit]]) -> Callable[[], type[Toolkit]]:
        TOOL_METADATA[name] = ToolMetadata(
            name=name,
            display_name=display_name,
            description=description,
            category=category,
            status=status,
            config_fields=config_fields,
            dependencies=dependencies,
            factory=func,
        )
        TOOL_REGISTRY[name] = func
        return func

    return decorator


def get_tool_metadata(name: str) -> ToolMetadata | None:
    """Get metadata for a tool by name."""
    return TOOL_METADATA.get(name)


def get_all_tool_metadata() -> dict[str, ToolMetadata]:
    """Get all tool metadata."""
    return TOOL_METADATA.copy()
