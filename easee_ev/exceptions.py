"""Exceptions raised by the Easee cloud client."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ErrorResponse:
    """Snapshot of a failed HTTP response kept for diagnostics."""

    status: int
    headers: dict[str, str] = field(default_factory=dict)
    body: Any = None


class EaseeError(Exception):
    """Base exception for the Easee cloud client."""

    retryable = False


class RequestFailed(EaseeError):
    """Raised when a request returns a non-2xx status or cannot be sent."""

    def __init__(self, message: str, response: ErrorResponse | None = None) -> None:
        super().__init__(message)
        self.response = response

    @property
    def status(self) -> int | None:
        return self.response.status if self.response is not None else None


class RateLimitExceeded(RequestFailed):
    """Raised when the API answers 429; callers may back off and retry."""

    retryable = True


class Forbidden(EaseeError):
    """Raised when access to the charger is denied."""


class InvalidCredentials(EaseeError):
    """Raised when the login endpoint rejects the user name or password."""


class TokenCacheError(EaseeError):
    """Raised when the cached token pair is missing or malformed."""
