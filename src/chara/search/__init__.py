"""Pattern-search engine behind the grep tool.

Pipeline: ``paths.resolve_files`` expands inputs into files,
``scanner.scan_file`` collects matching lines from each with a matcher from
``pattern.compile_pattern``, and ``aggregate`` merges, caps and renders the
records. ``engine.search`` wires the stages together.
"""

from __future__ import annotations

from .aggregate import Aggregator, format_failure, format_result
from .engine import render_outcome, run_grep, search
from .models import (
    ContextLine,
    ErrorKind,
    FileScan,
    MatchRecord,
    MatchSpan,
    SearchFailure,
    SearchOutcome,
    SearchResult,
    SearchSuccess,
)
from .options import SearchOptions
from .pattern import CompiledPattern, InvalidPatternError, compile_pattern

__all__ = [
    "Aggregator",
    "CompiledPattern",
    "ContextLine",
    "ErrorKind",
    "FileScan",
    "InvalidPatternError",
    "MatchRecord",
    "MatchSpan",
    "SearchFailure",
    "SearchOptions",
    "SearchOutcome",
    "SearchResult",
    "SearchSuccess",
    "compile_pattern",
    "format_failure",
    "format_result",
    "render_outcome",
    "run_grep",
    "search",
]
