"""CLI entry point — ``ghdir URL``."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from ghdir import __version__
from ghdir.cli import ui
from ghdir.core.env import Settings, load_user_env
from ghdir.core.errors import GhdirError
from ghdir.core.models import FetchEvent

load_user_env()

_STAGE_MESSAGES = {
    "checking": "Checking repository…",
    "downloading": "Downloading archive…",
    "extracting": "Extracting files…",
}


def _on_event(ev: FetchEvent) -> None:
    message = _STAGE_MESSAGES.get(ev.stage)
    if message:
        ui.info(message)


@click.command()
@click.argument("url")
@click.option(
    "--dest", default=".",
    type=click.Path(file_okay=False, resolve_path=True),
    help="Directory to extract into (defaults to the current directory).",
)
@click.option("--force", is_flag=True, help="Ignore the cached ETag and download again.")
@click.option("-y", "--yes", is_flag=True, help="Do not ask before large downloads.")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.version_option(__version__, prog_name="ghdir")
def cli(url: str, dest: str, force: bool, yes: bool, verbose: bool) -> None:
    """Download a single folder from a GitHub repository.

    URL is a GitHub browsing URL:

    \b
      https://github.com/user/repo
      https://github.com/user/repo/tree/branch/path/to/folder
    """
    from ghdir.fetchers import github
    from ghdir.services import pipeline

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        coords = github.parse_url(url)
    except GhdirError as exc:
        raise click.ClickException(str(exc)) from exc

    ui.title("ghdir • fetch a folder from GitHub")
    ui.info(f" {coords.owner}/{coords.repository} • {coords.branch}")
    if coords.subfolder:
        ui.info(f" Folder: {coords.subfolder}")

    dest_path = Path(dest)
    try:
        with ui.download_progress() as progress:
            result = pipeline.fetch_folder(
                coords,
                dest_path,
                settings=Settings.from_env(),
                use_cache=not force,
                confirm=(lambda _size: True) if yes else ui.confirm_large,
                on_event=_on_event,
                on_download=progress.start,
            )
    except GhdirError as exc:
        raise click.ClickException(str(exc)) from exc

    if result.status == "up_to_date":
        ui.success("Folder is up to date. No changes.")
        return
    if result.status == "aborted":
        ui.info("Aborted.")
        return

    coords = result.coordinates
    total = result.extraction.total if result.extraction else 0
    ui.success(f"Done! Fetched {total} files/folders")
    shown = dest_path / coords.target_name if coords.subfolder else dest_path
    ui.success(f" → {shown}")


def main() -> None:
    cli()
