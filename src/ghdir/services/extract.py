"""Selective extraction of one subtree from a streamed ``.tar.gz``.

The archive is read in tarfile's stream mode, so entries are visited
strictly in file order and the download is never held in memory.
Snapshot archives wrap everything in a ``<repo>-<branch>/`` directory.
"""

from __future__ import annotations

import io
import logging
import os
import shutil
import tarfile
import zlib
from collections.abc import Callable, Iterable, Iterator
from pathlib import Path
from typing import IO

from ghdir.core.errors import ExtractionError
from ghdir.core.models import ExtractionResult

logger = logging.getLogger(__name__)


def strip_depth(subfolder: str) -> int:
    """Leading path segments removed from every entry.

    One for the wrapper directory plus every subfolder segment but the
    last, which stays as the top-level output directory.
    """
    if not subfolder:
        return 1
    return 1 + subfolder.count("/")


def _segments(name: str) -> list[str]:
    return [p for p in name.split("/") if p and p != "."]


class StreamReader(io.RawIOBase):
    """Readable file object over an iterator of byte chunks."""

    def __init__(
        self,
        chunks: Iterable[bytes],
        on_bytes: Callable[[int], None] | None = None,
    ):
        self._chunks: Iterator[bytes] = iter(chunks)
        self._pending = b""
        self._on_bytes = on_bytes

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        while not self._pending:
            try:
                self._pending = next(self._chunks)
            except StopIteration:
                return 0
            if self._on_bytes and self._pending:
                self._on_bytes(len(self._pending))
        n = min(len(buffer), len(self._pending))
        buffer[:n] = self._pending[:n]
        self._pending = self._pending[n:]
        return n


def extract(fileobj: IO[bytes], subfolder: str, dest: Path) -> ExtractionResult:
    """Write the entries under *subfolder* into *dest*.

    Entries outside the subtree, and the wrapper/ancestor directories
    themselves, are skipped. Whatever was written before a failure stays
    on disk.
    """
    wanted = _segments(subfolder)
    depth = strip_depth(subfolder)
    result = ExtractionResult()

    try:
        with tarfile.open(fileobj=fileobj, mode="r|gz") as tar:
            for member in tar:
                parts = _segments(member.name)
                if parts[1 : 1 + len(wanted)] != wanted or len(parts) <= depth:
                    continue
                target = dest.joinpath(*_safe_tail(member.name, parts[depth:]))

                if member.isdir():
                    _mkdir(target)
                    result.directories += 1
                elif member.isfile():
                    _mkdir(target.parent)
                    _write_file(tar.extractfile(member), target, member.mode)
                    result.files += 1
                else:
                    logger.debug("Skipping %s (unsupported entry type)", member.name)
                    result.skipped += 1
    except (tarfile.TarError, zlib.error, EOFError) as exc:
        raise ExtractionError(f"Malformed archive: {exc}") from exc

    if result.total == 0:
        logger.warning("No entries matched %r in the archive", subfolder or "/")
    return result


def _safe_tail(name: str, tail: list[str]) -> list[str]:
    if name.startswith("/") or ".." in tail:
        raise ExtractionError(f"Refusing to extract unsafe path: {name}")
    return tail


def _mkdir(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ExtractionError(f"Cannot create directory {path}: {exc}") from exc


def _write_file(source: IO[bytes] | None, target: Path, mode: int) -> None:
    try:
        fd = os.open(target, os.O_CREAT | os.O_WRONLY | os.O_TRUNC, mode & 0o7777)
        with os.fdopen(fd, "wb") as out:
            if source is not None:
                shutil.copyfileobj(source, out)
    except OSError as exc:
        raise ExtractionError(f"Cannot write file {target}: {exc}") from exc
