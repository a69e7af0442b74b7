"""Test configuration and fixtures for chara tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from chara.config import SearchConfig

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

__all__ = ["make_file", "sequential_config"]


@pytest.fixture
def make_file(tmp_path: Path) -> Callable[[str, str], Path]:
    """Return a helper that writes a file under tmp_path, creating parent directories."""

    def _make(relative: str, content: str) -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _make


@pytest.fixture
def sequential_config() -> SearchConfig:
    """Engine configuration that scans files one at a time."""
    return SearchConfig(max_workers=1)
