"""Exception types raised by loaderkit.

All errors derive from ``ValueError`` so callers that already guard loader
option handling with ``except ValueError`` keep working.
"""

from __future__ import annotations


class LoaderKitError(ValueError):
    """Base class for every error raised by this package."""


class UnsupportedAlgorithm(LoaderKitError):
    """The requested digest algorithm is not provided by ``hashlib``."""


class InvalidEncoding(LoaderKitError):
    """The requested digest encoding is unknown or its alphabet is unusable."""


class InvalidContent(LoaderKitError):
    """A content-dependent token was requested but no content was supplied."""


class InvalidParameters(LoaderKitError):
    """Arguments passed to a helper have an unsupported type or value."""


__all__ = [
    "LoaderKitError",
    "UnsupportedAlgorithm",
    "InvalidEncoding",
    "InvalidContent",
    "InvalidParameters",
]
