"""Error taxonomy for apiver runs."""

from __future__ import annotations


class ApiverError(RuntimeError):
    """Base class for errors raised by apiver."""


class ConfigError(ApiverError):
    """Raised when the configuration file cannot be parsed."""


class SourceUnavailable(ApiverError):
    """Raised when the revision source cannot be reached or listed."""


class CloneError(SourceUnavailable):
    """Raised when the repository cannot be cloned."""


class FetchError(SourceUnavailable):
    """Raised when remote state cannot be refreshed before a run."""


class RevisionError(ApiverError):
    """Recoverable failure scoped to a single revision."""


class CheckoutError(RevisionError):
    """Raised when a revision cannot be materialized into the working directory."""


class ExtractionError(RevisionError):
    """Raised when a signature cannot be extracted from the working directory."""


class RevertError(ApiverError):
    """Raised when the working directory cannot be restored; aborts the run."""


__all__ = [
    "ApiverError",
    "CheckoutError",
    "CloneError",
    "ConfigError",
    "ExtractionError",
    "FetchError",
    "RevertError",
    "RevisionError",
    "SourceUnavailable",
]
