"""Tests for the line scanner."""

from __future__ import annotations

import threading
import time
from typing import TYPE_CHECKING

import pytest

from chara.search.models import MatchSpan
from chara.search.options import SearchOptions
from chara.search.pattern import compile_pattern
from chara.search.scanner import scan_file, scan_text

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path


def _scan(text: str, pattern: str, **overrides: object) -> list:
    options = SearchOptions(pattern=pattern, **overrides)
    compiled = compile_pattern(pattern, fixed_strings=options.fixed_strings, ignore_case=options.ignore_case)
    return scan_text(text, "f.txt", compiled, options, limit=options.max_count).records


class TestScanText:
    """Tests for scan_text."""

    def test_hello_world(self) -> None:
        """Two matching lines with their 1-based numbers."""
        records = _scan("Hello World\nThis is a test\nWorld peace", "World")
        assert [(r.line, r.line_num) for r in records] == [("Hello World", 1), ("World peace", 3)]
        assert records[0].matches == (MatchSpan(6, 11),)

    def test_empty_text(self) -> None:
        """Empty content yields no records."""
        assert _scan("", "anything") == []

    def test_no_line_numbers(self) -> None:
        """Line numbers are omitted when disabled."""
        records = _scan("first match\nsecond match", "match", line_number=False)
        assert all(r.line_num is None for r in records)

    def test_invert_is_complement(self) -> None:
        """Inverted and normal scans partition the lines of a file."""
        text = "alpha\nbeta\ngamma\ndelta\nalphabet"
        normal = {r.line_num for r in _scan(text, "alpha|gamma")}
        inverted = {r.line_num for r in _scan(text, "alpha|gamma", invert_match=True)}
        assert normal.isdisjoint(inverted)
        assert normal | inverted == set(range(1, 6))

    def test_inverted_records_have_no_spans(self) -> None:
        """Inverted matches carry no spans."""
        records = _scan("include this\nexclude this line", "exclude", invert_match=True)
        assert [r.line for r in records] == ["include this"]
        assert records[0].matches == ()

    def test_context_clipped_at_file_start(self) -> None:
        """Requesting more before-context than exists is not an error."""
        records = _scan("match\nline2\nline3", "match", before_context=5, after_context=1)
        assert records[0].before_context == ()
        assert [c.line for c in records[0].after_context] == ["line2"]

    def test_context_clipped_at_file_end(self) -> None:
        """After-context stops at the last line."""
        records = _scan("line1\nline2\nmatch", "match", before_context=1, after_context=5)
        assert [c.line for c in records[0].before_context] == ["line2"]
        assert records[0].after_context == ()

    def test_context_overrides_before_and_after(self) -> None:
        """The combined context count wins over the separate ones."""
        text = "line1\nline2\nline3\nmatch line\nline5\nline6\nline7"
        records = _scan(text, "match", context=2, before_context=0, after_context=0)
        assert [c.line for c in records[0].before_context] == ["line2", "line3"]
        assert [c.line for c in records[0].after_context] == ["line5", "line6"]
        assert [c.line_num for c in records[0].after_context] == [5, 6]

    def test_limit_is_exact(self) -> None:
        """The cap returns exactly K records."""
        text = "\n".join(f"match{i}" for i in range(1, 6))
        records = _scan(text, "match", max_count=3)
        assert [r.line for r in records] == ["match1", "match2", "match3"]

    def test_inserted_literals_round_trip(self) -> None:
        """N inserted literal lines come back as N records at the insertion lines."""
        lines = [f"filler {i}" for i in range(40)]
        inserted_at = [3, 17, 18, 39]
        for idx in inserted_at:
            lines[idx] = "needle.here"
        records = _scan("\n".join(lines), "needle.here", fixed_strings=True)
        assert [r.line_num for r in records] == [idx + 1 for idx in inserted_at]

    def test_no_newline_normalization(self) -> None:
        """Carriage returns stay part of the line."""
        records = _scan("one\r\ntwo\r\n", "two")
        assert records[0].line == "two\r"

    def test_expired_deadline_stops_scan(self) -> None:
        """A passed deadline marks the scan as timed out."""
        options = SearchOptions(pattern="x")
        scan = scan_text("x\nx\nx", "f.txt", compile_pattern("x"), options, deadline=time.monotonic() - 1)
        assert scan.timed_out
        assert scan.records == []

    def test_cancel_event_stops_scan(self) -> None:
        """A set cancel event stops scanning before the first line."""
        cancel = threading.Event()
        cancel.set()
        options = SearchOptions(pattern="x")
        scan = scan_text("x\nx", "f.txt", compile_pattern("x"), options, cancel=cancel)
        assert scan.records == []
        assert not scan.timed_out


class TestScanFile:
    """Tests for scan_file."""

    def test_binary_content_scanned_as_text(self, make_file: Callable[[str, str], Path]) -> None:
        """Binary bytes are decoded best-effort and still searched."""
        path = make_file("binary.bin", "\x00\x01\x02test\x03\x04")
        options = SearchOptions(pattern="test")
        scan = scan_file(path, compile_pattern("test"), options)
        assert len(scan.records) == 1
        assert "test" in scan.records[0].line

    def test_invalid_utf8_is_replaced(self, tmp_path: Path) -> None:
        """Undecodable bytes do not abort the scan."""
        path = tmp_path / "latin1.txt"
        path.write_bytes(b"caf\xe9 needle\n")
        scan = scan_file(path, compile_pattern("needle"), SearchOptions(pattern="needle"))
        assert scan.records[0].line == "caf\ufffd needle"

    def test_display_path(self, make_file: Callable[[str, str], Path]) -> None:
        """Records carry the display path, not the absolute path."""
        path = make_file("a.txt", "hit")
        scan = scan_file(path, compile_pattern("hit"), SearchOptions(pattern="hit"), display_path="a.txt")
        assert scan.records[0].file == "a.txt"

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        """Read errors propagate so the engine can skip the file."""
        with pytest.raises(OSError):  # noqa: PT011
            scan_file(tmp_path / "gone.txt", compile_pattern("x"), SearchOptions(pattern="x"))
