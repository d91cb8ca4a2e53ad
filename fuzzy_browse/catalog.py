from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Any

from fuzzy_browse.exceptions import CatalogError
from fuzzy_browse.models import Workflow, Workflows

logger = logging.getLogger(__name__)

CATALOG_FILE_NAME = "workflows.json"


def default_catalog_path() -> Path:
    return Path.home() / ".local" / "share" / "fuzzy-browse" / CATALOG_FILE_NAME


def _required_text(entry: dict[str, Any], name: str, position: int) -> str:
    value = entry.get(name)
    if not isinstance(value, str) or not value:
        raise CatalogError(f"entry {position}: {name!r} must be a non-empty string")
    return value


def parse_workflow(entry: Any, position: int) -> Workflow:
    if not isinstance(entry, dict):
        raise CatalogError(f"entry {position}: expected an object")

    stars = entry.get("stars") or 0
    if isinstance(stars, bool) or not isinstance(stars, int):
        raise CatalogError(f"entry {position}: 'stars' must be an integer")
    topics = entry.get("topics") or []
    if not isinstance(topics, list):
        raise CatalogError(f"entry {position}: 'topics' must be a list")

    return Workflow(
        name=_required_text(entry, "name", position),
        owner=_required_text(entry, "owner", position),
        description=str(entry.get("description") or ""),
        stars=stars,
        topics=tuple(str(topic) for topic in topics),
        url=str(entry.get("url") or ""),
    )


def parse_workflows(payload: Any) -> Workflows:
    if not isinstance(payload, list):
        raise CatalogError("catalog must be a JSON array of workflows")
    return Workflows(
        parse_workflow(entry, position) for position, entry in enumerate(payload)
    )


def load_workflows(path: Path) -> Workflows:
    start = time.perf_counter()
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise CatalogError(f"catalog not found: {path}") from exc
    except OSError as exc:
        raise CatalogError(f"couldn't read catalog ({path}): {exc}") from exc
    except json.JSONDecodeError as exc:
        raise CatalogError(f"couldn't parse catalog JSON ({path}): {exc}") from exc

    workflows = parse_workflows(payload)
    logger.debug(
        "loaded %d workflows from %s in %.2f ms",
        len(workflows),
        path,
        (time.perf_counter() - start) * 1000,
    )
    return workflows
