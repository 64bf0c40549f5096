"""Runtime environment helpers and settings."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from ghdir.core import paths

DEFAULT_TIMEOUT = 30.0
DEFAULT_LARGE_DOWNLOAD_BYTES = 2 * 1024 * 1024 * 1024  # 2 GiB

_USER_ENV_LOADED = False


@dataclass(frozen=True)
class Settings:
    """Tunables read from the environment."""

    timeout: float = DEFAULT_TIMEOUT
    large_download_bytes: int = DEFAULT_LARGE_DOWNLOAD_BYTES
    github_token: str = ""

    @classmethod
    def from_env(cls) -> Settings:
        return cls(
            timeout=_float_env("GHDIR_TIMEOUT", DEFAULT_TIMEOUT),
            large_download_bytes=_int_env(
                "GHDIR_LARGE_DOWNLOAD_BYTES", DEFAULT_LARGE_DOWNLOAD_BYTES
            ),
            github_token=os.environ.get("GITHUB_TOKEN", "").strip(),
        )


def load_user_env() -> None:
    """Load user-level ghdir env files without overriding existing vars."""
    global _USER_ENV_LOADED
    if _USER_ENV_LOADED:
        return

    for env_file in _candidate_env_files():
        _load_env_file(env_file)

    _USER_ENV_LOADED = True


def _candidate_env_files() -> list[Path]:
    files: list[Path] = []
    env_override = os.environ.get("GHDIR_ENV_FILE", "").strip()
    if env_override:
        files.append(Path(env_override).expanduser())

    files.append(paths.config_dir() / ".env")
    files.append(Path.home() / ".config" / paths.APP_NAME / "env")
    return files


def _load_env_file(path: Path) -> None:
    if not path.is_file():
        return

    for raw_line in path.read_text().splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[len("export ") :].strip()
        if "=" not in line:
            continue

        key, value = line.split("=", 1)
        key = key.strip()
        if not key or key in os.environ:
            continue

        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
            value = value[1:-1]
        os.environ[key] = value


def _float_env(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    try:
        return float(raw) if raw else default
    except ValueError:
        return default


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    try:
        return int(raw) if raw else default
    except ValueError:
        return default
