"""Error taxonomy. Every expected failure derives from DegitError."""

from __future__ import annotations


class DegitError(Exception):
    """Base class for all expected degit failures."""


class ParseError(DegitError):
    """The source string does not match any recognised shape."""


class DestinationError(DegitError):
    """The destination directory failed pre-flight validation."""


class ConfigError(DegitError):
    """The user settings file or an override value is malformed."""


class RefFetchError(DegitError):
    """The remote reference list could not be queried or parsed."""


class RefNotFoundError(DegitError):
    """The reference list was fetched but nothing matched the requested ref."""


class DownloadError(DegitError):
    """The archive request failed or returned a non-success status."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RepositoryNotFoundError(DownloadError):
    """The host refused the archive as missing or private."""


class ExtractionError(DegitError):
    """An archive entry was malformed or could not be written."""
