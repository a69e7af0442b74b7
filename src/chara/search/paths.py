"""Expand user-supplied paths into the list of files to scan.

Inputs may be files, directories or glob expressions (``*``, ``?``, ``[...]``,
``**`` and ``{a,b}`` alternatives). Directory and glob expansion always skips
hidden entries and the infrastructure directories in ``ALWAYS_IGNORED_DIRS``
(VCS metadata, dependency trees, build output, caches) without descending into
them, and can additionally drop files that git ignores. Explicitly named files
are taken as-is.
"""

from __future__ import annotations

import fnmatch
import os
import re
import subprocess
from pathlib import Path
from typing import TYPE_CHECKING

from chara.constants import ALWAYS_IGNORED_DIRS
from chara.logging_config import get_logger

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

logger = get_logger(__name__)

_GLOB_CHARS = ("*", "?", "[", "{")
_BRACE_RE = re.compile(r"\{([^{}]*)\}")
_GIT_CHECK_IGNORE_TIMEOUT = 5


def is_glob(path: str) -> bool:
    """Return whether ``path`` contains glob wildcards or brace alternatives."""
    return any(char in path for char in _GLOB_CHARS)


def expand_braces(pattern: str) -> list[str]:
    """Expand ``{a,b}`` alternatives, e.g. ``*.{js,ts}`` -> ``["*.js", "*.ts"]``."""
    match = _BRACE_RE.search(pattern)
    if match is None:
        return [pattern]
    head, tail = pattern[: match.start()], pattern[match.end() :]
    expanded: list[str] = []
    for option in match.group(1).split(","):
        expanded.extend(expand_braces(f"{head}{option}{tail}"))
    return expanded


def name_matches(name: str, file_pattern: str, *, ignore_case: bool = False) -> bool:
    """Check a file name against a glob filter with brace alternatives."""
    if ignore_case:
        name = name.lower()
        file_pattern = file_pattern.lower()
    return any(fnmatch.fnmatchcase(name, pat) for pat in expand_braces(file_pattern))


def _parts_match(parts: Sequence[str], pattern_parts: Sequence[str]) -> bool:
    """Match path components against glob components, where ``**`` spans any number of them."""
    if not pattern_parts:
        return not parts
    head, rest = pattern_parts[0], pattern_parts[1:]
    if head == "**":
        return any(_parts_match(parts[i:], rest) for i in range(len(parts) + 1))
    return bool(parts) and fnmatch.fnmatchcase(parts[0], head) and _parts_match(parts[1:], rest)


def _walk(
    root: Path,
    ignored_dirs: frozenset[str],
    *,
    max_depth: int | None = None,
    pattern_parts: Sequence[str] | None = None,
) -> list[Path]:
    """List files under ``root`` in deterministic order.

    Hidden and ignored directories are pruned before ``os.walk`` descends, and
    symlinked directories are never followed. ``max_depth`` counts directory
    levels including ``root`` (1 lists only its immediate files). With
    ``pattern_parts``, only files whose path relative to ``root`` matches are kept.
    """

    def _on_error(error: OSError) -> None:
        logger.debug("Skipping unreadable directory", path=error.filename, error=error.strerror)

    files: list[Path] = []
    for current, dirnames, filenames in os.walk(root, onerror=_on_error):
        current_path = Path(current)
        rel_dir = current_path.relative_to(root).parts
        if max_depth is not None and len(rel_dir) + 1 >= max_depth:
            dirnames[:] = []
        else:
            dirnames[:] = sorted(d for d in dirnames if not d.startswith(".") and d not in ignored_dirs)
        for name in sorted(filenames):
            if name.startswith("."):
                continue
            if pattern_parts is not None and not _parts_match((*rel_dir, name), pattern_parts):
                continue
            files.append(current_path / name)
    return files


def _split_glob(pattern: str, base_dir: Path) -> tuple[Path, tuple[str, ...]]:
    """Split a glob into its literal directory prefix and the wildcard components."""
    parts = Path(pattern).parts
    prefix: list[str] = []
    for part in parts:
        if is_glob(part):
            break
        prefix.append(part)
    root = base_dir.joinpath(*prefix) if prefix else base_dir
    return root, parts[len(prefix) :]


def _expand_glob(pattern: str, base_dir: Path, ignored_dirs: frozenset[str]) -> list[tuple[Path, list[Path]]]:
    """Expand a glob into ``(root, files)`` groups, one per brace alternative."""
    groups: list[tuple[Path, list[Path]]] = []
    for alternative in expand_braces(pattern):
        root, pattern_parts = _split_glob(alternative, base_dir)
        if not pattern_parts:
            # A brace alternative without wildcards names a single file
            target = _resolve_input(alternative, base_dir)
            if target.is_file():
                groups.append((target.parent, [target]))
            continue
        if not root.is_dir():
            logger.debug("Skipping glob with missing root", pattern=alternative, root=str(root))
            continue
        max_depth = None if "**" in pattern_parts else len(pattern_parts)
        files = _walk(root, ignored_dirs, max_depth=max_depth, pattern_parts=pattern_parts)
        groups.append((root, files))
    return groups


def _in_git_work_tree(root: Path) -> bool:
    current = root.resolve()
    return any((parent / ".git").exists() for parent in (current, *current.parents))


def _drop_gitignored(files: list[Path], root: Path) -> list[Path]:
    """Remove files git ignores, asking ``git check-ignore`` once for the whole batch.

    Outside a git work tree, or when git cannot answer, ``files`` is returned unchanged.
    """
    if not files or not _in_git_work_tree(root):
        return files

    root_resolved = root.resolve()
    by_token: dict[str, list[Path]] = {}
    for candidate in files:
        try:
            token = candidate.resolve().relative_to(root_resolved).as_posix()
        except ValueError:
            token = str(candidate)
        by_token.setdefault(token, []).append(candidate)

    try:
        result = subprocess.run(
            ["git", "check-ignore", "--stdin", "-z"],
            check=False,
            cwd=str(root),
            input=("\0".join(by_token) + "\0").encode("utf-8"),
            capture_output=True,
            timeout=_GIT_CHECK_IGNORE_TIMEOUT,
        )
    except (subprocess.TimeoutExpired, OSError) as e:
        logger.warning("git check-ignore failed, ignore rules not applied", root=str(root), error=str(e))
        return files

    # Exit status 1 means nothing matched; anything above it is a git error
    if result.returncode not in (0, 1):
        logger.warning(
            "git check-ignore failed, ignore rules not applied",
            root=str(root),
            returncode=result.returncode,
            stderr=result.stderr.decode("utf-8", errors="replace").strip(),
        )
        return files

    ignored: set[Path] = set()
    for token in result.stdout.decode("utf-8", errors="replace").split("\0"):
        if token:
            ignored.update(by_token.get(token, []))
    if ignored:
        logger.debug("Dropped gitignored files", root=str(root), count=len(ignored))
    return [f for f in files if f not in ignored]


def _resolve_input(path: str, base_dir: Path) -> Path:
    candidate = Path(path).expanduser()
    if not candidate.is_absolute():
        candidate = base_dir / candidate
    return candidate


def resolve_files(
    paths: Sequence[str],
    *,
    base_dir: Path,
    recursive: bool = True,
    file_pattern: str | None = None,
    ignore_case: bool = False,
    use_ignore_rules: bool = True,
    extra_ignored_dirs: Iterable[str] = (),
) -> list[Path]:
    """Expand ``paths`` into a de-duplicated, ordered list of absolute file paths.

    Args:
        paths: Files, directories or glob expressions; relative ones resolve against ``base_dir``.
        base_dir: Directory relative inputs and globs are rooted at.
        recursive: Walk whole subtrees for directory inputs instead of immediate children.
        file_pattern: Keep only files whose name matches this glob.
        ignore_case: Match ``file_pattern`` case-insensitively.
        use_ignore_rules: Drop files ignored by git from directory and glob expansions.
        extra_ignored_dirs: Directory names to exclude on top of ``ALWAYS_IGNORED_DIRS``.

    Returns:
        Files in input order, each input's expansion sorted. Unreadable or
        missing inputs are skipped.

    """
    ignored_dirs = ALWAYS_IGNORED_DIRS | frozenset(extra_ignored_dirs)
    files: list[Path] = []
    seen: set[Path] = set()

    def _add(candidates: Iterable[Path]) -> None:
        for candidate in candidates:
            if file_pattern and not name_matches(candidate.name, file_pattern, ignore_case=ignore_case):
                continue
            try:
                key = candidate.resolve()
            except OSError:
                continue
            if key in seen:
                continue
            seen.add(key)
            files.append(candidate.absolute())

    for raw in paths:
        if is_glob(raw):
            groups = _expand_glob(raw, base_dir, ignored_dirs)
        else:
            target = _resolve_input(raw, base_dir)
            if target.is_file():
                _add([target])
                continue
            if not target.is_dir():
                logger.debug("Skipping missing path", path=raw)
                continue
            groups = [(target, _walk(target, ignored_dirs, max_depth=None if recursive else 1))]

        for root, expanded in groups:
            _add(_drop_gitignored(expanded, root) if use_ignore_rules else expanded)

    return files


def should_fallback_to_base(paths: Sequence[str], base_dir: Path) -> bool:
    """Whether a no-match search over ``paths`` is worth retrying from ``base_dir``.

    A retry is pointless when every input is a glob or already the base directory.
    """
    base_resolved = base_dir.resolve()
    for raw in paths:
        if is_glob(raw) or raw in {".", "./"}:
            continue
        if _resolve_input(raw, base_dir).resolve() == base_resolved:
            continue
        return True
    return False
