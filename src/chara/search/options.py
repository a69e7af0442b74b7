"""Immutable options for a single search invocation."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class SearchOptions(BaseModel):
    """Everything one grep invocation needs to know.

    Field names are snake_case; the camelCase names of the tool's wire
    contract (``ignoreCase``, ``maxCount``, ...) are accepted as aliases.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="forbid",
    )

    pattern: str = Field(description="Pattern to search for (regular expression unless fixed_strings)")
    paths: tuple[str, ...] = Field(
        default=(".",),
        description="Files, directories or glob patterns to search",
    )
    ignore_case: bool = Field(default=False, description="Case-insensitive matching")
    fixed_strings: bool = Field(default=False, description="Treat pattern as literal text, not regex")
    invert_match: bool = Field(default=False, description="Select non-matching lines")
    line_number: bool = Field(default=True, description="Report 1-based line numbers")
    before_context: int = Field(default=0, ge=0, description="Lines of context before each match")
    after_context: int = Field(default=0, ge=0, description="Lines of context after each match")
    context: int | None = Field(default=None, ge=0, description="Context before and after (overrides both)")
    max_count: int = Field(default=0, ge=0, description="Stop after N matches (0 = no limit)")
    file_pattern: str | None = Field(default=None, description="Glob filter on file names, e.g. '*.py'")
    recursive: bool = Field(default=True, description="Descend into subdirectories")
    use_ignore_rules: bool = Field(default=True, description="Skip files ignored by git")
    fallback_to_current_dir: bool = Field(
        default=False,
        description="Retry from the base directory when the given paths yield no matches",
    )

    @field_validator("paths", mode="before")
    @classmethod
    def _normalize_paths(cls, value: Any) -> Any:  # noqa: ANN401
        if value is None:
            return (".",)
        if isinstance(value, str):
            return (value,)
        if isinstance(value, list | tuple) and not value:
            return (".",)
        return value

    @field_validator("file_pattern")
    @classmethod
    def _blank_file_pattern_is_none(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            return None
        return value

    @property
    def effective_before(self) -> int:
        return self.context if self.context is not None else self.before_context

    @property
    def effective_after(self) -> int:
        return self.context if self.context is not None else self.after_context

    @property
    def wants_context(self) -> bool:
        return self.effective_before > 0 or self.effective_after > 0

    @classmethod
    def from_request(cls, request: Mapping[str, Any]) -> SearchOptions:
        """Build options from a loosely typed request mapping (camelCase or snake_case keys)."""
        return cls.model_validate(dict(request))
