"""Grep tool configuration."""

from __future__ import annotations

from typing import TYPE_CHECKING

from chara.tools_metadata import (
    ConfigField,
    ToolCategory,
    ToolStatus,
    register_tool_with_metadata,
)

if TYPE_CHECKING:
    from chara.custom_tools.grep import GrepTools


@register_tool_with_metadata(
    name="grep",
    display_name="Grep",
    description="Regex or literal search across files with context lines, match spans and gitignore-aware file discovery.",
    category=ToolCategory.DEVELOPMENT,
    status=ToolStatus.AVAILABLE,
    config_fields=[
        ConfigField(
            name="base_dir",
            label="Base Directory",
            type="text",
            required=False,
            default=None,
            description="Directory relative search paths resolve against. Defaults to current directory.",
        ),
    ],
    dependencies=[],
)
def grep_tools() -> type[GrepTools]:
    """Return the grep toolkit for LLM agents."""
    from chara.custom_tools.grep import GrepTools  # noqa: PLC0415

    return GrepTools
