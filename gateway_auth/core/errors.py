"""Exception types raised by the core."""

from __future__ import annotations


class ConfigurationError(ValueError):
    """Authorizer configuration is missing, ambiguous or malformed."""


class InvalidAccessError(AttributeError):
    """A resource was read that the selected authorizer mode never created."""
