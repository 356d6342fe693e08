"""Access token lifecycle: login, cache, refresh."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any

from .const import (
    LOGIN_PATH,
    REFRESH_TOKEN_PATH,
    REFRESHED_TOKENS_TTL,
    TOKENS_CACHE_KEY,
)
from .exceptions import RequestFailed, TokenCacheError
from .storage import Encryptor, NullEncryptor, TokenStore
from .transport import Response, Transport, raise_for_response

_LOGGER = logging.getLogger(__name__)

FILTERED = "[FILTERED]"


@dataclass(frozen=True)
class Credentials:
    """Account user name and password; never rendered in repr."""

    user_name: str = field(repr=False)
    password: str = field(repr=False)

    def __repr__(self) -> str:
        return f"Credentials(user_name={FILTERED!r}, password={FILTERED!r})"


@dataclass(frozen=True)
class TokenPair:
    """Access token plus the refresh token, when the API issued one."""

    access_token: str = field(repr=False)
    refresh_token: str | None = field(default=None, repr=False)

    @classmethod
    def from_response(cls, response: Response) -> TokenPair:
        """Build a pair from a login or refresh response body."""

        body = response.body
        token = body.get("accessToken") if isinstance(body, dict) else None
        if not token:
            raise RequestFailed(
                "Token response did not contain an access token",
                response.snapshot(),
            )
        refresh = body.get("refreshToken")
        return cls(access_token=str(token), refresh_token=str(refresh) if refresh else None)

    @classmethod
    def from_json(cls, text: str) -> TokenPair:
        """Parse a cached pair; the access token is mandatory."""

        try:
            data: Any = json.loads(text)
        except (TypeError, json.JSONDecodeError) as err:
            raise TokenCacheError("Cached token pair is not valid JSON") from err
        if not isinstance(data, dict) or not data.get("accessToken"):
            raise TokenCacheError("Cached token pair has no access token")
        refresh = data.get("refreshToken")
        return cls(access_token=data["accessToken"], refresh_token=refresh or None)

    def to_json(self) -> str:
        data = {"accessToken": self.access_token}
        if self.refresh_token is not None:
            data["refreshToken"] = self.refresh_token
        return json.dumps(data, separators=(",", ":"))


class Authenticator:
    """Obtains, caches and refreshes the bearer token pair.

    All token state lives in the token store under ``cache_key``; the pair is
    always written through the encryptor and replaced as a whole.
    """

    def __init__(
        self,
        transport: Transport,
        credentials: Credentials,
        *,
        token_store: TokenStore,
        encryptor: Encryptor | None = None,
        cache_key: str = TOKENS_CACHE_KEY,
    ) -> None:
        self._transport = transport
        self._credentials = credentials
        self._store = token_store
        self._encryptor = encryptor or NullEncryptor()
        self._cache_key = cache_key

    @property
    def cache_key(self) -> str:
        return self._cache_key

    @property
    def token_store(self) -> TokenStore:
        return self._store

    @property
    def encryptor(self) -> Encryptor:
        return self._encryptor

    def _encrypt(self, pair: TokenPair) -> str:
        return self._encryptor.encrypt(pair.to_json(), deterministic=True)

    def _decrypt(self, blob: str) -> TokenPair:
        return TokenPair.from_json(self._encryptor.decrypt(blob))

    async def async_login(self) -> TokenPair:
        """Log in with the account credentials; the result is not cached."""

        _LOGGER.debug("Logging in to Easee cloud")
        response = await self._transport.async_request(
            "POST",
            LOGIN_PATH,
            json_data={
                "userName": self._credentials.user_name,
                "password": self._credentials.password,
            },
            log_body=False,
        )
        raise_for_response(response, login=True)
        return TokenPair.from_response(response)

    async def _async_login_blob(self) -> str:
        _LOGGER.debug("No cached Easee tokens under %s", self._cache_key)
        return self._encrypt(await self.async_login())

    async def async_access_token(self) -> str:
        """Return the cached access token, logging in on a cache miss."""

        blob = await self._store.async_fetch(self._cache_key, self._async_login_blob)
        return self._decrypt(blob).access_token

    async def async_force_refresh(self) -> TokenPair:
        """Exchange the cached pair for a new one and store it with a bounded TTL.

        Any failure of the refresh call surfaces as RequestFailed; the store is
        only written after a successful refresh.
        """

        blob = await self._store.async_read(self._cache_key)
        if blob is None:
            raise TokenCacheError("No cached token pair to refresh")
        current = self._decrypt(blob)
        if current.refresh_token is None:
            raise TokenCacheError("Cached token pair has no refresh token")

        _LOGGER.debug("Refreshing Easee access token")
        response = await self._transport.async_request(
            "POST",
            REFRESH_TOKEN_PATH,
            json_data={
                "accessToken": current.access_token,
                "refreshToken": current.refresh_token,
            },
            log_body=False,
        )
        if not response.ok:
            _LOGGER.warning("Easee token refresh failed with status %s", response.status)
            raise RequestFailed(
                f"Request returned status {response.status}", response.snapshot()
            )
        pair = TokenPair.from_response(response)
        await self._store.async_write(
            self._cache_key, self._encrypt(pair), expires_in=REFRESHED_TOKENS_TTL
        )
        return pair

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(credentials={self._credentials!r}, "
            f"token_store={self._store!r}, encryptor={self._encryptor!r})"
        )
