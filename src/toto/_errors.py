"""Toto error hierarchy.

All toto-specific errors inherit from TotoError for easy catching.
Unmatched request paths surface as chirp's ``NotFound``, re-exported
here as ``RouteNotFound``.
"""

from chirp.errors import NotFound as RouteNotFound


class TotoError(Exception):
    """Base error for all toto operations."""


class ConfigurationError(TotoError):
    """Invalid menu or configuration.  Always fatal at startup."""


class TemplateMissing(TotoError):
    """No template exists at a conventional location.

    Raised by strict resolver lookups and caught by the resolver itself,
    which falls back to a scaffold page.
    """


__all__ = [
    "ConfigurationError",
    "RouteNotFound",
    "TemplateMissing",
    "TotoError",
]
