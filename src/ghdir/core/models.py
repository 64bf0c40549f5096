"""Data shapes passed between the resolver, fetcher, extractor and CLI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

GITHUB_HOST = "https://github.com"
DEFAULT_BRANCH = "main"


# ── Coordinates ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class RepositoryCoordinates:
    """Where a folder lives: owner/repository, branch, folder inside it."""

    owner: str
    repository: str
    branch: str = DEFAULT_BRANCH
    subfolder: str = ""  # "a/b/c", no leading or trailing slash

    @property
    def cache_key(self) -> str:
        return "/".join((self.owner, self.repository, self.branch, self.subfolder))

    @property
    def archive_url(self) -> str:
        return (
            f"{GITHUB_HOST}/{self.owner}/{self.repository}"
            f"/archive/refs/heads/{self.branch}.tar.gz"
        )

    @property
    def target_name(self) -> str:
        """Name of the top-level output entry, shown to the user."""
        if not self.subfolder:
            return "."
        return self.subfolder.rsplit("/", 1)[-1]


# ── Fetch phase ─────────────────────────────────────────────────────


@dataclass
class ArchiveHead:
    """Outcome of the metadata check on the snapshot archive."""

    status: Literal["fresh", "not_modified"]
    content_length: int | None = None

    @property
    def not_modified(self) -> bool:
        return self.status == "not_modified"


# ── Extract phase ───────────────────────────────────────────────────


@dataclass
class ExtractionResult:
    """Counts of what the extractor wrote to disk."""

    files: int = 0
    directories: int = 0
    skipped: int = 0

    @property
    def total(self) -> int:
        """Materialized filesystem objects (files + directories)."""
        return self.files + self.directories


# ── Orchestration ───────────────────────────────────────────────────


Stage = Literal[
    "resolving",
    "checking",
    "up_to_date",
    "downloading",
    "extracting",
    "caching",
    "done",
    "failed",
]


@dataclass
class FetchEvent:
    """Progress report emitted on each pipeline transition."""

    stage: Stage
    detail: str = ""


@dataclass
class FetchResult:
    """Summary of one fetch_folder run."""

    status: Literal["extracted", "up_to_date", "aborted"]
    coordinates: RepositoryCoordinates
    extraction: ExtractionResult | None = None
    etag: str = ""
    cached: bool = False
