"""
Exception hierarchy shared by the showcase model, codec and transport.
"""

from __future__ import annotations

from typing import Optional

__all__ = [
    "ConfigError",
    "ConstructionError",
    "DecodeError",
    "ShowcaseError",
    "TransportError",
]


class ShowcaseError(Exception):
    """Base class for every error raised by this package."""


class ConstructionError(ShowcaseError, ValueError):
    """Raised when a model object is built without a required field."""


class DecodeError(ShowcaseError):
    """
    Raised when a JSON document cannot be turned into a model object.

    ``path`` points at the offending node (``$.form.fields[1]``) and
    ``kind`` holds the component discriminator when one was known.
    """

    def __init__(self, message: str, path: str = "$", kind: Optional[str] = None) -> None:
        self.message = message
        self.path = path
        self.kind = kind
        location = f"{path} ({kind})" if kind else path
        super().__init__(f"{location}: {message}")


class TransportError(ShowcaseError):
    """Raised when the showcase endpoint cannot be reached or answers with an error."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class ConfigError(ShowcaseError):
    """Raised when the supplied configuration is invalid; ``key`` names the setting."""

    def __init__(self, message: str, key: Optional[str] = None) -> None:
        self.key = key
        super().__init__(message)
