"""Search engine configuration loaded from YAML."""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field

from chara.constants import (
    CONFIG_PATH,
    DEFAULT_DISPLAY_LIMIT,
    DEFAULT_FILE_TIME_BUDGET_SECONDS,
    DEFAULT_MAX_WORKERS,
)
from chara.logging_config import get_logger

logger = get_logger(__name__)


class SearchConfig(BaseModel):
    """Process-wide settings for the search engine and grep tool."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    display_limit: int = Field(
        default=DEFAULT_DISPLAY_LIMIT,
        ge=1,
        description="Maximum number of match entries rendered in one response",
    )
    max_workers: int = Field(
        default=DEFAULT_MAX_WORKERS,
        ge=1,
        description="Worker threads used to scan files; 1 scans sequentially",
    )
    file_time_budget_seconds: float | None = Field(
        default=DEFAULT_FILE_TIME_BUDGET_SECONDS,
        gt=0,
        description="Wall-clock budget for scanning a single file; None disables it",
    )
    extra_ignored_dirs: list[str] = Field(
        default_factory=list,
        description="Directory names excluded in addition to the built-in list",
    )

    @classmethod
    def from_yaml(cls, config_path: Path | None = None) -> SearchConfig:
        """Create a SearchConfig from YAML.

        An explicitly given path must exist. When falling back to the default
        location, a missing file yields the defaults.

        Raises:
            FileNotFoundError: If ``config_path`` is given and does not exist.
            yaml.YAMLError: If the file is not valid YAML.
            ValueError: If the document is not a mapping or fails validation.

        """
        path = config_path or CONFIG_PATH

        if not path.exists():
            if config_path is not None:
                msg = f"Configuration file not found: {path}"
                raise FileNotFoundError(msg)
            return cls()

        with path.open() as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            msg = f"Configuration file {path} must contain a mapping, got {type(data).__name__}"
            raise ValueError(msg)  # noqa: TRY004

        # The search settings may live at the top level or under a "search" key
        if isinstance(data.get("search"), dict):
            data = data["search"]
        if data.get("extra_ignored_dirs") is None:
            data["extra_ignored_dirs"] = []

        config = cls(**data)
        logger.debug("Loaded search configuration", path=str(path))
        return config
