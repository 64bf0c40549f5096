"""Terminal presentation — styled messages, download bar, confirmation."""

from __future__ import annotations

import contextlib
import sys
from collections.abc import Callable, Iterator

import click

_MIB = 1024 * 1024


def title(text: str) -> None:
    click.secho(f" {text} ", bold=True, fg="cyan")


def info(text: str) -> None:
    click.echo(text)


def success(text: str) -> None:
    click.secho(text, bold=True, fg="green")


def warning(text: str) -> None:
    click.secho(text, bold=True, fg="yellow", err=True)


def confirm_large(size: int) -> bool:
    """Ask before pulling a very large archive."""
    warning(
        f"Warning: the archive is large ({size // _MIB} MB). "
        "This may take a long time and use a lot of bandwidth."
    )
    return click.confirm("Continue?", default=False)


class DownloadProgress:
    """Byte-counting wrapper around ``click.progressbar``.

    Opened lazily once the GET response reveals the declared length.
    Without a length no bar is drawn; only the byte count is kept.
    """

    def __init__(self) -> None:
        self._stack = contextlib.ExitStack()
        self._bar = None
        self.received = 0

    def start(self, total: int | None) -> Callable[[int], None]:
        if total is None:
            return self._count
        self._bar = self._stack.enter_context(
            click.progressbar(length=total, label="Downloading", file=sys.stderr)
        )
        return self._advance

    def _count(self, n: int) -> None:
        self.received += n

    def _advance(self, n: int) -> None:
        self.received += n
        self._bar.update(n)

    def close(self) -> None:
        self._stack.close()


@contextlib.contextmanager
def download_progress() -> Iterator[DownloadProgress]:
    progress = DownloadProgress()
    try:
        yield progress
    finally:
        progress.close()
