"""Error taxonomy shared by the store, the range query and the resolver."""

from __future__ import annotations

from typing import Any, Optional


class StatsError(Exception):
    """Base class for every error raised by gmail_stats."""


class ValidationError(StatsError):
    """Input was rejected before any I/O took place."""

    def __init__(self, message: str, *, field: Optional[str] = None, value: Any = None) -> None:
        super().__init__(message)
        self.field = field
        self.value = value


class InvalidInputError(ValidationError):
    """A lookup key has the wrong type."""


class NotFoundError(StatsError):
    """No stored record matches the requested key or range."""

    def __init__(self, message: str, *, key: Any = None) -> None:
        super().__init__(message)
        self.key = key


class UpstreamError(StatsError):
    """The backing store, the Gmail API or the domain resolver failed."""


__all__ = [
    "StatsError",
    "ValidationError",
    "InvalidInputError",
    "NotFoundError",
    "UpstreamError",
]
