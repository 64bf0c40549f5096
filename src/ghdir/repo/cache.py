"""Freshness cache — ETags of previously downloaded folders.

Stored as a flat JSON object at ``<config dir>/cache.json``. Caching only
saves bandwidth, so every read or write failure degrades to "no cache".
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from ghdir.core import paths
from ghdir.core.models import RepositoryCoordinates

logger = logging.getLogger(__name__)


def key_for(coords: RepositoryCoordinates) -> str:
    return coords.cache_key


def load(path: Path | None = None) -> dict[str, str]:
    """Return the stored key → ETag mapping, or ``{}`` if unavailable."""
    path = path or paths.cache_path()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.debug("Ignoring unreadable cache %s: %s", path, exc)
        return {}

    if not isinstance(data, dict):
        logger.debug("Ignoring cache %s: not a JSON object", path)
        return {}
    return {k: v for k, v in data.items() if isinstance(k, str) and isinstance(v, str)}


def save(cache: dict[str, str], path: Path | None = None) -> bool:
    """Persist *cache*. Returns False instead of raising when it can't."""
    path = path or paths.cache_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(cache, indent=2, sort_keys=True), encoding="utf-8")
    except (OSError, TypeError, ValueError) as exc:
        logger.debug("Could not persist cache %s: %s", path, exc)
        return False
    return True
