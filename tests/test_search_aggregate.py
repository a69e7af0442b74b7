"""Tests for result aggregation and formatting."""

from __future__ import annotations

import json

from chara.search.aggregate import Aggregator, format_failure, format_result
from chara.search.models import (
    ContextLine,
    ErrorKind,
    FileScan,
    MatchRecord,
    MatchSpan,
    SearchFailure,
    SearchResult,
)


def _records(path: str, count: int) -> list[MatchRecord]:
    return [MatchRecord(file=path, line=f"match line {i}", line_num=i + 1) for i in range(count)]


class TestAggregator:
    """Tests for Aggregator."""

    def test_unlimited_keeps_everything(self) -> None:
        """With no cap, all records are kept in file order."""
        aggregator = Aggregator()
        assert aggregator.add(FileScan("a.txt", _records("a.txt", 3)))
        assert aggregator.add(FileScan("b.txt", _records("b.txt", 2)))
        result = aggregator.result(files_scanned=2)
        assert [r.file for r in result.records] == ["a.txt"] * 3 + ["b.txt"] * 2
        assert not result.capped

    def test_cap_across_files(self) -> None:
        """The global cap cuts inside the file that crosses it."""
        aggregator = Aggregator(max_count=4)
        assert aggregator.add(FileScan("a.txt", _records("a.txt", 3)))
        assert not aggregator.add(FileScan("b.txt", _records("b.txt", 3)))
        result = aggregator.result()
        assert result.total == 4
        assert result.capped
        assert [r.file for r in result.records] == ["a.txt", "a.txt", "a.txt", "b.txt"]

    def test_remaining(self) -> None:
        """remaining reports how many records may still be added."""
        aggregator = Aggregator(max_count=5)
        aggregator.add(FileScan("a.txt", _records("a.txt", 2)))
        assert aggregator.remaining == 3
        assert Aggregator().remaining == 0

    def test_counts_timed_out_scans(self) -> None:
        """Scans stopped by the time budget are counted in the result."""
        aggregator = Aggregator()
        aggregator.add(FileScan("slow.txt", _records("slow.txt", 1), timed_out=True))
        aggregator.add(FileScan("fast.txt", _records("fast.txt", 1)))
        assert aggregator.result().files_timed_out == 1


class TestFormatResult:
    """Tests for format_result and format_failure."""

    def test_no_matches(self) -> None:
        """An empty result renders the sentinel."""
        assert format_result(SearchResult(records=())) == "No matches found"

    def test_simple_records(self) -> None:
        """Records without context serialize flat."""
        record = MatchRecord(file="a.txt", line="test match test", line_num=1, matches=(MatchSpan(0, 4),))
        parsed = json.loads(format_result(SearchResult(records=(record,))))
        assert parsed == [
            {"file": "a.txt", "line": "test match test", "line_num": 1, "matches": [{"start": 0, "end": 4}]},
        ]

    def test_line_number_omitted(self) -> None:
        """line_num is absent when line numbers are off."""
        record = MatchRecord(file="a.txt", line="x")
        parsed = json.loads(format_result(SearchResult(records=(record,))))
        assert "line_num" not in parsed[0]

    def test_context_nests_under_match(self) -> None:
        """Records with context serialize as match/before_context/after_context."""
        record = MatchRecord(
            file="a.txt",
            line="match line",
            line_num=3,
            matches=(MatchSpan(0, 5),),
            before_context=(ContextLine(file="a.txt", line="line2", line_num=2),),
            after_context=(ContextLine(file="a.txt", line="line4", line_num=4),),
        )
        parsed = json.loads(format_result(SearchResult(records=(record,))))
        assert parsed[0]["match"]["line"] == "match line"
        assert parsed[0]["before_context"] == [{"file": "a.txt", "line": "line2", "line_num": 2, "matches": []}]
        assert parsed[0]["after_context"][0]["line"] == "line4"

    def test_display_limit_notice(self) -> None:
        """More records than the display limit adds a notice with the true total."""
        result = SearchResult(records=tuple(_records("many.txt", 100)))
        output = format_result(result, display_limit=50)
        assert output.startswith("Found 100 matches, showing first 50:\n\n")
        parsed = json.loads(output.split("\n\n", 1)[1])
        assert len(parsed) == 50
        assert parsed[-1]["line"] == "match line 49"

    def test_exactly_at_limit_has_no_notice(self) -> None:
        """A result of exactly display_limit records is rendered plainly."""
        output = format_result(SearchResult(records=tuple(_records("a.txt", 50))), display_limit=50)
        assert len(json.loads(output)) == 50

    def test_unicode_kept_readable(self) -> None:
        """Non-ASCII text is not escaped."""
        record = MatchRecord(file="u.txt", line="测试 content", line_num=1)
        assert "测试 content" in format_result(SearchResult(records=(record,)))

    def test_timed_out_note(self) -> None:
        """Partially searched files are announced after the records."""
        result = SearchResult(records=tuple(_records("slow.txt", 2)), files_timed_out=1)
        payload, note = format_result(result).rsplit("\n\n", 1)
        assert len(json.loads(payload)) == 2
        assert note == "Note: 1 file(s) exceeded the scan time budget and were only partially searched."

    def test_timed_out_note_without_matches(self) -> None:
        """The note is added even when nothing matched."""
        output = format_result(SearchResult(records=(), files_timed_out=2))
        assert output.startswith("No matches found\n\nNote: 2 file(s) exceeded")

    def test_failure(self) -> None:
        """Failures render as an error line."""
        failure = SearchFailure(ErrorKind.INVALID_PATTERN, "Invalid regular expression: [invalid")
        assert format_failure(failure) == "Error: Invalid regular expression: [invalid"
