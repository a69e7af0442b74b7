"""Merge per-file scans and render the tool response."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from chara.constants import DEFAULT_DISPLAY_LIMIT, NO_MATCHES_MESSAGE
from chara.search.models import SearchResult

if TYPE_CHECKING:
    from chara.search.models import FileScan, MatchRecord, SearchFailure


class Aggregator:
    """Accumulate records in file-enumeration order up to a global cap."""

    def __init__(self, max_count: int = 0) -> None:
        self.max_count = max_count
        self.records: list[MatchRecord] = []
        self.capped = False
        self.timed_out = 0

    @property
    def full(self) -> bool:
        return self.max_count > 0 and len(self.records) >= self.max_count

    @property
    def remaining(self) -> int:
        """Records still accepted, or 0 when unlimited."""
        if self.max_count <= 0:
            return 0
        return max(self.max_count - len(self.records), 0)

    def add(self, scan: FileScan) -> bool:
        """Append a file's records. Returns False once the cap has been reached."""
        if scan.timed_out:
            self.timed_out += 1
        for record in scan.records:
            if self.full:
                self.capped = True
                break
            self.records.append(record)
        if self.full:
            self.capped = True
            return False
        return True

    def result(self, files_scanned: int = 0, files_skipped: int = 0) -> SearchResult:
        return SearchResult(
            records=tuple(self.records),
            files_scanned=files_scanned,
            files_skipped=files_skipped,
            files_timed_out=self.timed_out,
            capped=self.capped,
        )


def format_result(result: SearchResult, *, display_limit: int = DEFAULT_DISPLAY_LIMIT) -> str:
    """Render a search result as the tool's textual response.

    Returns ``"No matches found"`` for an empty result, otherwise a JSON list
    of match entries. When there are more records than ``display_limit``,
    only the first ``display_limit`` are rendered behind a notice stating
    the total. Files whose scan ran out of time are reported in a trailing
    note, since their results may be incomplete.
    """
    if not result.records:
        text = NO_MATCHES_MESSAGE
    else:
        shown = result.records[:display_limit]
        text = json.dumps([record.to_dict() for record in shown], indent=2, ensure_ascii=False)
        if result.total > display_limit:
            text = f"Found {result.total} matches, showing first {display_limit}:\n\n{text}"

    if result.files_timed_out:
        text += (
            f"\n\nNote: {result.files_timed_out} file(s) exceeded the scan time budget"
            " and were only partially searched."
        )
    return text


def format_failure(failure: SearchFailure) -> str:
    return f"Error: {failure.message}"
