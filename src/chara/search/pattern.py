"""Compile user patterns into stateless line matchers."""

from __future__ import annotations

import re
from dataclasses import dataclass

from chara.search.models import MatchSpan


class InvalidPatternError(ValueError):
    """Raised when a pattern is not a valid regular expression."""

    def __init__(self, pattern: str, detail: str) -> None:
        self.pattern = pattern
        self.detail = detail
        super().__init__(f"Invalid regular expression: {pattern} ({detail})")


@dataclass(frozen=True)
class CompiledPattern:
    """A compiled matcher.

    Every call runs a fresh search over the whole line, so no scan position
    leaks between lines or between ``matches`` and ``spans`` on the same line.
    """

    regex: re.Pattern[str]

    def matches(self, line: str, *, invert: bool = False) -> bool:
        """Return whether ``line`` qualifies, honoring invert-match."""
        return (self.regex.search(line) is not None) != invert

    def spans(self, line: str) -> tuple[MatchSpan, ...]:
        """Return all non-overlapping match spans in ``line``, left to right."""
        found: list[MatchSpan] = []
        pos = 0
        end = len(line)
        while pos <= end:
            match = self.regex.search(line, pos)
            if match is None:
                break
            found.append(MatchSpan(match.start(), match.end()))
            # Step past zero-width matches so the loop always advances
            pos = match.end() + 1 if match.end() == match.start() else match.end()
        return tuple(found)


def compile_pattern(pattern: str, *, fixed_strings: bool = False, ignore_case: bool = False) -> CompiledPattern:
    """Compile ``pattern`` into a CompiledPattern.

    Args:
        pattern: Regex source, or literal text when ``fixed_strings`` is set.
        fixed_strings: Escape every regex metacharacter before compiling.
        ignore_case: Compile with ``re.IGNORECASE``.

    Raises:
        InvalidPatternError: If the (unescaped) pattern does not compile.

    """
    source = re.escape(pattern) if fixed_strings else pattern
    flags = re.IGNORECASE if ignore_case else 0
    try:
        return CompiledPattern(re.compile(source, flags))
    except re.error as e:
        raise InvalidPatternError(pattern, str(e)) from None
