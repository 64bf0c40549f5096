"""Error kinds raised by the fetch pipeline.

Every error is fatal for one invocation; the CLI turns them into a
non-zero exit.
"""

from __future__ import annotations


class GhdirError(Exception):
    """Base class for all ghdir errors."""


class InvalidURL(GhdirError):
    """Raised when a URL does not name an owner and a repository."""


class FetchError(GhdirError):
    """Raised when the archive cannot be checked or downloaded."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ExtractionError(GhdirError):
    """Raised when the archive is malformed or an entry cannot be written."""
