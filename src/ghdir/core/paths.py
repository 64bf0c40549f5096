"""Per-user locations."""

from __future__ import annotations

import os
from pathlib import Path

import click

APP_NAME = "ghdir"
CACHE_FILE = "cache.json"


def config_dir() -> Path:
    """``$GHDIR_HOME`` when set, else the platform's per-user config dir."""
    home = os.environ.get("GHDIR_HOME", "").strip()
    if home:
        return Path(home).expanduser()
    return Path(click.get_app_dir(APP_NAME))


def cache_path() -> Path:
    return config_dir() / CACHE_FILE
