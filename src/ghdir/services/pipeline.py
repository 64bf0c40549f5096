"""Fetch one folder: resolve → check → download → extract → cache.

Each stage's output feeds the next; the first GhdirError aborts the run.
Progress is reported as FetchEvent values so the caller decides how to
render it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

import httpx

from ghdir.core.env import Settings
from ghdir.core.errors import GhdirError
from ghdir.core.models import FetchEvent, FetchResult, RepositoryCoordinates
from ghdir.fetchers import github
from ghdir.repo import cache as freshness
from ghdir.services.extract import StreamReader, extract

logger = logging.getLogger(__name__)


def fetch_folder(
    source: str | RepositoryCoordinates,
    dest: Path,
    *,
    settings: Settings | None = None,
    client: httpx.Client | None = None,
    cache_path: Path | None = None,
    use_cache: bool = True,
    confirm: Callable[[int], bool] | None = None,
    on_event: Callable[[FetchEvent], None] | None = None,
    on_download: Callable[[int | None], Callable[[int], None]] | None = None,
) -> FetchResult:
    """Download the folder named by *source* into *dest*.

    *source* is a browsing URL or coordinates the caller already resolved.

    *confirm* is asked (with the declared size) before downloading an
    archive larger than the configured threshold; returning False aborts.
    *on_download* receives the declared length and returns a callback fed
    with the number of bytes read per chunk.
    """
    settings = settings or Settings.from_env()
    emit = on_event or (lambda _e: None)

    try:
        if isinstance(source, RepositoryCoordinates):
            coords = source
        else:
            emit(FetchEvent("resolving", source))
            coords = github.parse_url(source)

        store = freshness.load(cache_path)
        key = freshness.key_for(coords)
        etag = store.get(key) if use_cache else None

        owns_client = client is None
        client = client or github.new_client(settings)
        try:
            emit(FetchEvent("checking", coords.archive_url))
            head = github.check(client, coords, etag)
            if head.not_modified:
                emit(FetchEvent("up_to_date", key))
                return FetchResult(status="up_to_date", coordinates=coords)

            size = head.content_length
            if size is not None and size > settings.large_download_bytes:
                logger.debug("Archive is %d bytes, asking for confirmation", size)
                if confirm is None or not confirm(size):
                    return FetchResult(status="aborted", coordinates=coords)

            emit(FetchEvent("downloading", coords.archive_url))
            with github.open_archive(client, coords, etag) as download:
                if download.not_modified:
                    emit(FetchEvent("up_to_date", key))
                    return FetchResult(status="up_to_date", coordinates=coords)

                progress = on_download(download.content_length) if on_download else None
                emit(FetchEvent("extracting", coords.subfolder or "."))
                extraction = extract(
                    StreamReader(download.chunks, on_bytes=progress),
                    coords.subfolder,
                    dest,
                )
                new_etag = download.etag
        finally:
            if owns_client:
                client.close()
    except GhdirError as exc:
        emit(FetchEvent("failed", str(exc)))
        raise

    cached = False
    if new_etag:
        emit(FetchEvent("caching", key))
        store[key] = new_etag
        cached = freshness.save(store, cache_path)

    emit(FetchEvent("done", str(extraction.total)))
    return FetchResult(
        status="extracted",
        coordinates=coords,
        extraction=extraction,
        etag=new_etag,
        cached=cached,
    )
