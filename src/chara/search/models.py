"""Result types produced by the search engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorKind(Enum):
    """Categories of search failures."""

    INVALID_PATTERN = "invalid_pattern"
    INVALID_OPTIONS = "invalid_options"
    PATH_UNREADABLE = "path_unreadable"


@dataclass(frozen=True)
class MatchSpan:
    """Character offsets of one match occurrence within a line."""

    start: int
    end: int

    def to_dict(self) -> dict[str, int]:
        return {"start": self.start, "end": self.end}


@dataclass(frozen=True)
class ContextLine:
    """A line shown around a match, without match spans of its own."""

    file: str
    line: str
    line_num: int | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"file": self.file, "line": self.line}
        if self.line_num is not None:
            data["line_num"] = self.line_num
        data["matches"] = []
        return data


@dataclass(frozen=True)
class MatchRecord:
    """One qualifying line, with optional surrounding context."""

    file: str
    line: str
    line_num: int | None = None
    matches: tuple[MatchSpan, ...] = ()
    before_context: tuple[ContextLine, ...] = ()
    after_context: tuple[ContextLine, ...] = ()

    @property
    def has_context(self) -> bool:
        return bool(self.before_context or self.after_context)

    def match_dict(self) -> dict[str, Any]:
        """Serialize the matching line itself."""
        data: dict[str, Any] = {"file": self.file, "line": self.line}
        if self.line_num is not None:
            data["line_num"] = self.line_num
        data["matches"] = [span.to_dict() for span in self.matches]
        return data

    def to_dict(self) -> dict[str, Any]:
        """Serialize as a bare match, or nested under ``match`` when context is present."""
        if not self.has_context:
            return self.match_dict()
        return {
            "match": self.match_dict(),
            "before_context": [line.to_dict() for line in self.before_context],
            "after_context": [line.to_dict() for line in self.after_context],
        }


@dataclass
class FileScan:
    """Records produced by scanning a single file."""

    path: str
    records: list[MatchRecord] = field(default_factory=list)
    timed_out: bool = False


@dataclass(frozen=True)
class SearchResult:
    """Aggregated, ordered and capped records of one search."""

    records: tuple[MatchRecord, ...]
    files_scanned: int = 0
    files_skipped: int = 0
    files_timed_out: int = 0
    capped: bool = False

    @property
    def total(self) -> int:
        return len(self.records)


@dataclass(frozen=True)
class SearchSuccess:
    """A completed search. An empty result is still a success."""

    result: SearchResult


@dataclass(frozen=True)
class SearchFailure:
    """A search that could not run."""

    kind: ErrorKind
    message: str


SearchOutcome = SearchSuccess | SearchFailure
