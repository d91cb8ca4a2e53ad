from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from fuzzy_browse.catalog import default_catalog_path
from fuzzy_browse.scoring import DEFAULT_SCORE_MODEL, ScoreModel

DEFAULT_MAX_RESULTS = 200
ENV_PREFIX = "FUZZY_BROWSE_"


def env_var(option_name: str) -> str:
    return f"{ENV_PREFIX}{option_name.upper()}"


@dataclass(frozen=True)
class BrowseSettings:
    catalog_path: Path = field(default_factory=default_catalog_path)
    max_results: int = DEFAULT_MAX_RESULTS
    workers: int = 1
    score_model: ScoreModel = DEFAULT_SCORE_MODEL


LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def resolve_log_level(verbosity: int) -> int:
    if verbosity <= 0:
        return logging.WARNING
    if verbosity == 1:
        return logging.INFO
    return logging.DEBUG


def configure_logging(
    verbosity: int = 0, *, log_file: Path | None = None, interactive: bool = False
) -> None:
    """Route log records to ``log_file``, or stderr outside the TUI.

    The TUI owns the terminal, so without a log file its records are dropped.
    """
    handler: logging.Handler
    if log_file is not None:
        handler = logging.FileHandler(log_file, encoding="utf-8")
    elif interactive:
        handler = logging.NullHandler()
    else:
        handler = logging.StreamHandler()
    logging.basicConfig(
        level=resolve_log_level(verbosity),
        format=LOG_FORMAT,
        handlers=[handler],
        force=True,
    )
