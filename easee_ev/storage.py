"""Token storage and encryption collaborators used by the authenticator."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from datetime import timedelta
from typing import Protocol, runtime_checkable

_LOGGER = logging.getLogger(__name__)


@runtime_checkable
class TokenStore(Protocol):
    """Key/value cache holding the encrypted token pair.

    ``async_fetch`` must behave as an atomic fetch-or-compute: when the key is
    missing, ``on_miss`` is awaited once and its result stored with no expiry.
    """

    async def async_fetch(
        self, key: str, on_miss: Callable[[], Awaitable[str]]
    ) -> str: ...

    async def async_read(self, key: str) -> str | None: ...

    async def async_write(
        self, key: str, value: str, expires_in: timedelta | float | None = None
    ) -> None: ...

    async def async_delete(self, key: str) -> None: ...


@runtime_checkable
class Encryptor(Protocol):
    """Turns plaintext token JSON into an opaque blob and back."""

    def encrypt(self, plaintext: str, *, deterministic: bool = False) -> str: ...

    def decrypt(self, blob: str) -> str: ...


class NullEncryptor:
    """Encryptor that passes values through unchanged."""

    def encrypt(self, plaintext: str, *, deterministic: bool = False) -> str:
        return plaintext

    def decrypt(self, blob: str) -> str:
        return blob

    def __repr__(self) -> str:
        return "NullEncryptor()"


def _ttl_seconds(expires_in: timedelta | float | None) -> float | None:
    if expires_in is None:
        return None
    if isinstance(expires_in, timedelta):
        return expires_in.total_seconds()
    return float(expires_in)


class MemoryTokenStore:
    """In-process token store with optional per-entry expiry.

    A single lock serialises access so that concurrent cache misses result in
    one ``on_miss`` call; later callers observe the value it produced.
    """

    def __init__(self) -> None:
        self._entries: dict[str, tuple[str, float | None]] = {}
        self._lock = asyncio.Lock()

    def _get(self, key: str) -> str | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and time.monotonic() >= expires_at:
            _LOGGER.debug("Token store entry %s expired", key)
            self._entries.pop(key, None)
            return None
        return value

    def _set(self, key: str, value: str, expires_in: timedelta | float | None) -> None:
        ttl = _ttl_seconds(expires_in)
        expires_at = time.monotonic() + ttl if ttl is not None else None
        self._entries[key] = (value, expires_at)

    async def async_fetch(
        self, key: str, on_miss: Callable[[], Awaitable[str]]
    ) -> str:
        async with self._lock:
            value = self._get(key)
            if value is not None:
                return value
            # Nothing is stored when on_miss raises
            value = await on_miss()
            self._set(key, value, None)
            return value

    async def async_read(self, key: str) -> str | None:
        async with self._lock:
            return self._get(key)

    async def async_write(
        self, key: str, value: str, expires_in: timedelta | float | None = None
    ) -> None:
        async with self._lock:
            self._set(key, value, expires_in)

    async def async_delete(self, key: str) -> None:
        async with self._lock:
            self._entries.pop(key, None)

    def __repr__(self) -> str:
        return f"<MemoryTokenStore entries={len(self._entries)}>"
