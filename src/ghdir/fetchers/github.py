"""Resolve GitHub browsing URLs and download branch snapshot archives.

Two-phase conditional retrieval: a HEAD request to learn whether the
archive changed since the stored ETag (and how big it is), then a
streamed GET whose body is handed to the extractor without buffering.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Literal
from urllib.parse import urlsplit

import httpx

from ghdir import __version__
from ghdir.core.env import Settings
from ghdir.core.errors import FetchError, InvalidURL
from ghdir.core.models import DEFAULT_BRANCH, ArchiveHead, RepositoryCoordinates

logger = logging.getLogger(__name__)

_BRANCH_MARKER = "tree"
_CHUNK_SIZE = 64 * 1024


def parse_url(raw: str) -> RepositoryCoordinates:
    """Parse a GitHub browsing URL into coordinates.

    Supports:
      https://github.com/user/repo
      https://github.com/user/repo/tree/branch/path/to/folder
      github.com/user/repo/tree/branch
      user/repo
    """
    parts = _path_segments(raw)
    if len(parts) < 2:
        raise InvalidURL(f"Not a GitHub repository URL: {raw!r}")

    owner, repo = parts[0], parts[1]
    if repo.endswith(".git"):
        repo = repo[: -len(".git")]
    if not repo:
        raise InvalidURL(f"Not a GitHub repository URL: {raw!r}")

    for i in range(2, len(parts) - 1):
        if parts[i] == _BRANCH_MARKER:
            return RepositoryCoordinates(
                owner=owner,
                repository=repo,
                branch=parts[i + 1],
                subfolder="/".join(parts[i + 2 :]),
            )

    return RepositoryCoordinates(owner=owner, repository=repo, branch=DEFAULT_BRANCH)


def _path_segments(raw: str) -> list[str]:
    split = urlsplit(raw.strip())
    parts = [p for p in split.path.split("/") if p]
    # "github.com/user/repo" without a scheme lands entirely in the path
    if not split.netloc and parts and "." in parts[0]:
        parts = parts[1:]
    return parts


# ── HTTP ────────────────────────────────────────────────────────────


def new_client(settings: Settings | None = None) -> httpx.Client:
    """Build the HTTP client used for both phases."""
    settings = settings or Settings.from_env()
    headers = {"User-Agent": f"ghdir/{__version__}"}
    if settings.github_token:
        headers["Authorization"] = f"Bearer {settings.github_token}"
    return httpx.Client(
        timeout=settings.timeout, follow_redirects=True, headers=headers
    )


def _conditional(etag: str | None) -> dict[str, str]:
    return {"If-None-Match": etag} if etag else {}


def _content_length(response: httpx.Response) -> int | None:
    raw = response.headers.get("content-length")
    try:
        return int(raw) if raw is not None else None
    except ValueError:
        return None


def check(
    client: httpx.Client, coords: RepositoryCoordinates, etag: str | None = None
) -> ArchiveHead:
    """Issue a HEAD for the snapshot archive carrying the stored ETag."""
    url = coords.archive_url
    logger.debug("HEAD %s (If-None-Match: %s)", url, etag or "-")
    try:
        resp = client.head(url, headers=_conditional(etag))
    except httpx.HTTPError as exc:
        raise FetchError(f"Cannot reach {url}: {exc}") from exc

    if resp.status_code == httpx.codes.NOT_MODIFIED:
        return ArchiveHead(status="not_modified")
    if resp.status_code != httpx.codes.OK:
        raise FetchError(
            f"Cannot access repository archive {url} (HTTP {resp.status_code})",
            status_code=resp.status_code,
        )
    return ArchiveHead(status="fresh", content_length=_content_length(resp))


@dataclass
class ArchiveDownload:
    """An open GET response for the snapshot archive."""

    status: Literal["ok", "not_modified"]
    etag: str = ""
    content_length: int | None = None
    chunks: Iterator[bytes] = field(default_factory=lambda: iter(()))

    @property
    def not_modified(self) -> bool:
        return self.status == "not_modified"


@contextmanager
def open_archive(
    client: httpx.Client, coords: RepositoryCoordinates, etag: str | None = None
) -> Iterator[ArchiveDownload]:
    """Stream the snapshot archive with a conditional GET.

    Transport failures while the body is being consumed inside the
    ``with`` block are raised as FetchError too.
    """
    url = coords.archive_url
    logger.debug("GET %s (If-None-Match: %s)", url, etag or "-")
    try:
        with client.stream("GET", url, headers=_conditional(etag)) as resp:
            if resp.status_code == httpx.codes.NOT_MODIFIED:
                yield ArchiveDownload(status="not_modified")
                return
            if resp.status_code != httpx.codes.OK:
                raise FetchError(
                    f"Cannot download repository archive {url} (HTTP {resp.status_code})",
                    status_code=resp.status_code,
                )
            yield ArchiveDownload(
                status="ok",
                etag=resp.headers.get("etag", ""),
                content_length=_content_length(resp),
                chunks=resp.iter_bytes(_CHUNK_SIZE),
            )
    except httpx.HTTPError as exc:
        raise FetchError(f"Download of {url} failed: {exc}") from exc
