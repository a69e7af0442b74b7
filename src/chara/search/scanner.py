"""Scan file content line by line for pattern matches."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from chara.logging_config import get_logger
from chara.search.models import ContextLine, FileScan, MatchRecord

if TYPE_CHECKING:
    import threading
    from pathlib import Path

    from chara.search.options import SearchOptions
    from chara.search.pattern import CompiledPattern

logger = get_logger(__name__)


def _context_lines(
    lines: list[str],
    start: int,
    stop: int,
    display_path: str,
    line_number: bool,
) -> tuple[ContextLine, ...]:
    """Build context entries for ``lines[start:stop]``."""
    return tuple(
        ContextLine(file=display_path, line=lines[i], line_num=i + 1 if line_number else None)
        for i in range(start, stop)
    )


def scan_text(
    text: str,
    display_path: str,
    compiled: CompiledPattern,
    options: SearchOptions,
    *,
    limit: int = 0,
    deadline: float | None = None,
    cancel: threading.Event | None = None,
) -> FileScan:
    """Scan already-decoded text and collect qualifying lines.

    Args:
        text: Full file content.
        display_path: Path reported in every record.
        compiled: Matcher built from the options.
        options: Invert, line-number and context settings.
        limit: Stop after this many records (0 = unlimited).
        deadline: ``time.monotonic()`` value after which scanning stops.
        cancel: Event that stops scanning when set by another thread.

    Returns:
        The file's records in line order.

    """
    scan = FileScan(path=display_path)
    if not text:
        return scan

    lines = text.split("\n")
    before = options.effective_before
    after = options.effective_after
    invert = options.invert_match
    line_number = options.line_number

    for idx, line in enumerate(lines):
        if cancel is not None and cancel.is_set():
            break
        if deadline is not None and time.monotonic() > deadline:
            scan.timed_out = True
            logger.warning("File scan exceeded time budget", path=display_path, lines_scanned=idx)
            break
        if not compiled.matches(line, invert=invert):
            continue

        spans = () if invert else compiled.spans(line)
        record = MatchRecord(
            file=display_path,
            line=line,
            line_num=idx + 1 if line_number else None,
            matches=spans,
            before_context=_context_lines(lines, max(0, idx - before), idx, display_path, line_number),
            after_context=_context_lines(lines, idx + 1, min(len(lines), idx + after + 1), display_path, line_number),
        )
        scan.records.append(record)
        if limit > 0 and len(scan.records) >= limit:
            break

    return scan


def scan_file(
    path: Path,
    compiled: CompiledPattern,
    options: SearchOptions,
    *,
    display_path: str | None = None,
    limit: int = 0,
    deadline: float | None = None,
    cancel: threading.Event | None = None,
) -> FileScan:
    """Read ``path`` and scan it.

    Content is decoded as UTF-8 with replacement characters, so binary files
    are scanned as text. ``OSError`` from reading propagates to the caller.
    """
    text = path.read_bytes().decode("utf-8", errors="replace")
    return scan_text(
        text,
        display_path or str(path),
        compiled,
        options,
        limit=limit,
        deadline=deadline,
        cancel=cancel,
    )
