"""Grep tool for LLM coding agents.

Wraps the search engine in an agno Toolkit. Responses are plain strings the
model can read directly: ``"No matches found"``, a JSON list of matches
(with a ``Found N matches, showing first M:`` notice when the list is cut
short), or an ``Error: ...`` line.
"""

from __future__ import annotations

from pathlib import Path

from agno.tools import Toolkit

from chara.config import SearchConfig
from chara.logging_config import get_logger
from chara.search import run_grep

logger = get_logger(__name__)


class GrepTools(Toolkit):
    """Search file contents with grep-like options.

    Respects .gitignore and always skips common build and cache directories
    (.git/, node_modules/, dist/, __pycache__/, ...).
    """

    def __init__(self, base_dir: str | None = None, config: SearchConfig | None = None) -> None:
        self.base_dir = Path(base_dir).resolve() if base_dir else Path.cwd().resolve()
        self.config = config or SearchConfig()
        super().__init__(name="grep", tools=[self.grep])

    def grep(  # noqa: PLR0913
        self,
        pattern: str,
        paths: str | list[str] | None = None,
        ignore_case: bool = False,
        fixed_strings: bool = False,
        invert_match: bool = False,
        line_number: bool = True,
        before_context: int = 0,
        after_context: int = 0,
        context: int | None = None,
        max_count: int = 0,
        file_pattern: str | None = None,
        recursive: bool = True,
        use_ignore_rules: bool = True,
        fallback_to_current_dir: bool = False,
    ) -> str:
        """Search for patterns in files using grep-like functionality.

        Args:
            pattern: Pattern to search for (supports regular expressions).
            paths: File paths, directory paths, or glob patterns to search in, e.g. 'src/',
                '**/*.py', ['src/', 'tests/']. Defaults to the working directory.
            ignore_case: Case-insensitive matching (also applies to file_pattern).
            fixed_strings: Treat pattern as literal text, not regex.
            invert_match: Select non-matching lines.
            line_number: Include 1-based line numbers.
            before_context: Number of lines before each match to show.
            after_context: Number of lines after each match to show.
            context: Number of context lines around each match (overrides before/after).
            max_count: Stop after N matches (0 = no limit).
            file_pattern: Glob pattern to filter file names (e.g., '*.txt', '*.{js,ts}').
            recursive: Search subdirectories of directory paths.
            use_ignore_rules: Skip files ignored by .gitignore.
            fallback_to_current_dir: If nothing matches in the given paths, search the working directory.

        Returns:
            "No matches found", a JSON list of matches with their character spans,
            or an error message for an invalid pattern.

        """
        request = {
            "pattern": pattern,
            "paths": paths,
            "ignore_case": ignore_case,
            "fixed_strings": fixed_strings,
            "invert_match": invert_match,
            "line_number": line_number,
            "before_context": before_context,
            "after_context": after_context,
            "context": context,
            "max_count": max_count,
            "file_pattern": file_pattern,
            "recursive": recursive,
            "use_ignore_rules": use_ignore_rules,
            "fallback_to_current_dir": fallback_to_current_dir,
        }
        logger.debug("grep tool called", pattern=pattern, paths=paths)
        return run_grep(request, base_dir=self.base_dir, config=self.config)
