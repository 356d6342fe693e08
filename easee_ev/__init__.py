"""Async client for the Easee EV charger cloud API."""

from __future__ import annotations

from .api import EaseeClient, RequestExecutor
from .auth import Authenticator, Credentials, TokenPair
from .exceptions import (
    EaseeError,
    ErrorResponse,
    Forbidden,
    InvalidCredentials,
    RateLimitExceeded,
    RequestFailed,
    TokenCacheError,
)
from .models import (
    Charger,
    ChargerOpMode,
    Configuration,
    MeterReading,
    Site,
    State,
)
from .storage import Encryptor, MemoryTokenStore, NullEncryptor, TokenStore
from .transport import Response, Transport

__all__ = [
    "Authenticator",
    "Charger",
    "ChargerOpMode",
    "Configuration",
    "Credentials",
    "EaseeClient",
    "EaseeError",
    "Encryptor",
    "ErrorResponse",
    "Forbidden",
    "InvalidCredentials",
    "MemoryTokenStore",
    "MeterReading",
    "NullEncryptor",
    "RateLimitExceeded",
    "RequestExecutor",
    "RequestFailed",
    "Response",
    "Site",
    "State",
    "TokenCacheError",
    "TokenPair",
    "TokenStore",
    "Transport",
]

__version__ = "0.4.0"
