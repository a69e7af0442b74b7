"""Run a search end to end: compile, enumerate, scan, aggregate."""

from __future__ import annotations

import threading
import time
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from chara.config import SearchConfig
from chara.logging_config import get_logger
from chara.search.aggregate import Aggregator, format_failure, format_result
from chara.search.models import ErrorKind, SearchFailure, SearchResult, SearchSuccess
from chara.search.options import SearchOptions
from chara.search.paths import resolve_files, should_fallback_to_base
from chara.search.pattern import InvalidPatternError, compile_pattern
from chara.search.scanner import scan_file

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence

    from chara.search.models import FileScan, SearchOutcome
    from chara.search.pattern import CompiledPattern

logger = get_logger(__name__)


def _display_path(path: Path, base_dir: Path) -> str:
    """Make a path relative to base_dir for output when it lies inside it."""
    try:
        return str(path.relative_to(base_dir))
    except ValueError:
        return str(path)


def _scan_files(
    files: list[Path],
    compiled: CompiledPattern,
    options: SearchOptions,
    base_dir: Path,
    config: SearchConfig,
) -> SearchResult:
    """Scan files and merge their records in enumeration order.

    With more than one worker, files are scanned concurrently but consumed
    in order, so the result is identical to a sequential scan. Reaching the
    global cap stops in-flight scans and cancels queued ones. Sequential
    scans only read as many records from each file as the cap still allows.
    """
    aggregator = Aggregator(options.max_count)
    cancel = threading.Event()
    budget = config.file_time_budget_seconds
    scanned = 0
    skipped = 0

    def _scan(path: Path, limit: int) -> FileScan:
        deadline = time.monotonic() + budget if budget else None
        return scan_file(
            path,
            compiled,
            options,
            display_path=_display_path(path, base_dir),
            limit=limit,
            deadline=deadline,
            cancel=cancel,
        )

    def _consume(path: Path, run: Callable[[], FileScan]) -> bool:
        nonlocal scanned, skipped
        try:
            scan = run()
        except OSError as e:
            skipped += 1
            logger.debug("Skipping unreadable file", path=str(path), kind=ErrorKind.PATH_UNREADABLE.value, error=str(e))
            return True
        scanned += 1
        return aggregator.add(scan)

    if config.max_workers > 1 and len(files) > 1:
        with ThreadPoolExecutor(max_workers=min(config.max_workers, len(files))) as executor:
            futures = [executor.submit(_scan, path, options.max_count) for path in files]
            for path, future in zip(files, futures, strict=True):
                if not _consume(path, future.result):
                    cancel.set()
                    for pending in futures:
                        pending.cancel()
                    break
    else:
        for path in files:
            if not _consume(path, partial(_scan, path, aggregator.remaining)):
                break

    return aggregator.result(files_scanned=scanned, files_skipped=skipped)


def _search_paths(
    paths: Sequence[str],
    compiled: CompiledPattern,
    options: SearchOptions,
    base_dir: Path,
    config: SearchConfig,
) -> SearchResult:
    files = resolve_files(
        paths,
        base_dir=base_dir,
        recursive=options.recursive,
        file_pattern=options.file_pattern,
        ignore_case=options.ignore_case,
        use_ignore_rules=options.use_ignore_rules,
        extra_ignored_dirs=config.extra_ignored_dirs,
    )
    result = _scan_files(files, compiled, options, base_dir, config)
    logger.debug(
        "Search finished",
        paths=list(paths),
        files=len(files),
        matches=result.total,
        skipped=result.files_skipped,
        timed_out=result.files_timed_out,
        capped=result.capped,
    )
    return result


def search(
    options: SearchOptions,
    *,
    base_dir: Path | None = None,
    config: SearchConfig | None = None,
) -> SearchOutcome:
    """Search the files named by ``options``.

    Args:
        options: What to search for and where.
        base_dir: Directory relative paths resolve against. Defaults to the working directory.
        config: Engine settings. Defaults to ``SearchConfig()``.

    Returns:
        ``SearchSuccess`` (possibly with no records) or ``SearchFailure`` when
        the pattern does not compile. Unreadable paths never fail the search.

    """
    base = (base_dir or Path.cwd()).resolve()
    config = config or SearchConfig()

    try:
        compiled = compile_pattern(options.pattern, fixed_strings=options.fixed_strings, ignore_case=options.ignore_case)
    except InvalidPatternError as e:
        logger.debug("Rejected pattern", pattern=options.pattern, error=e.detail)
        return SearchFailure(ErrorKind.INVALID_PATTERN, str(e))

    result = _search_paths(options.paths, compiled, options, base, config)
    if (
        not result.records
        and options.fallback_to_current_dir
        and should_fallback_to_base(options.paths, base)
    ):
        logger.debug("No matches in given paths, retrying from base directory", base_dir=str(base))
        result = _search_paths((".",), compiled, options, base, config)

    return SearchSuccess(result)


def _describe_validation_error(error: ValidationError) -> str:
    parts = []
    for err in error.errors():
        location = ".".join(str(loc) for loc in err["loc"]) or "request"
        parts.append(f"{location}: {err['msg']}")
    return "; ".join(parts)


def render_outcome(outcome: SearchOutcome, *, display_limit: int) -> str:
    """Render either side of a SearchOutcome as the tool response."""
    if isinstance(outcome, SearchFailure):
        return format_failure(outcome)
    return format_result(outcome.result, display_limit=display_limit)


def run_grep(
    request: Mapping[str, Any],
    *,
    base_dir: Path | None = None,
    config: SearchConfig | None = None,
) -> str:
    """Execute a grep request given as a mapping and return the textual response."""
    config = config or SearchConfig()
    try:
        options = SearchOptions.from_request(request)
    except ValidationError as e:
        failure = SearchFailure(ErrorKind.INVALID_OPTIONS, f"Invalid options: {_describe_validation_error(e)}")
        return format_failure(failure)

    outcome = search(options, base_dir=base_dir, config=config)
    return render_outcome(outcome, display_limit=config.display_limit)
