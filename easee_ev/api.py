from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

import aiohttp

from .auth import FILTERED, Authenticator, Credentials, TokenPair
from .const import (
    BASE_URL,
    CHARGER_COMMAND_PATH,
    CHARGER_CONFIG_PATH,
    CHARGER_PAIR_PATH,
    CHARGER_SITE_PATH,
    CHARGER_STATE_PATH,
    CHARGER_UNPAIR_PATH,
    CHARGERS_PATH,
    CMD_PAUSE_CHARGING,
    CMD_POLL_LIFETIME_ENERGY,
    CMD_RESUME_CHARGING,
    DEFAULT_API_TIMEOUT,
    TOKENS_CACHE_KEY,
)
from .exceptions import RequestFailed
from .models import Charger, Configuration, Site, State
from .storage import Encryptor, MemoryTokenStore, NullEncryptor, TokenStore
from .transport import Response, Transport, is_gateway_forbidden, raise_for_response

_LOGGER = logging.getLogger(__name__)


class RequestExecutor:
    """Runs authenticated requests with a single refresh-and-retry on 401."""

    def __init__(self, transport: Transport, authenticator: Authenticator) -> None:
        self._transport = transport
        self._auth = authenticator

    async def async_request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json_data: Any | None = None,
    ) -> Response:
        """Return the 2xx response or raise the matching client exception.

        A 401 refreshes the token pair once and repeats the request; a second
        401 is final. Refresh failures propagate unchanged.
        """

        for attempt in range(2):
            token = await self._auth.async_access_token()
            response = await self._transport.async_request(
                method, path, token=token, params=params, json_data=json_data
            )
            if response.status != HTTPStatus.UNAUTHORIZED or is_gateway_forbidden(
                response
            ):
                break
            if attempt == 0:
                _LOGGER.debug("%s %s returned 401; refreshing token", method, path)
                await self._auth.async_force_refresh()
                continue
            _LOGGER.warning(
                "%s %s still unauthorized after token refresh", method, path
            )
        raise_for_response(response)
        return response


class EaseeClient:
    """Client for the Easee cloud API.

    Tokens are cached in ``token_store`` under ``cache_key`` and encrypted with
    ``encryptor``; both default to in-memory/no-op implementations.
    """

    def __init__(
        self,
        user_name: str,
        password: str,
        *,
        token_store: TokenStore | None = None,
        encryptor: Encryptor | None = None,
        session: aiohttp.ClientSession | None = None,
        base_url: str = BASE_URL,
        timeout: int = DEFAULT_API_TIMEOUT,
        cache_key: str = TOKENS_CACHE_KEY,
    ) -> None:
        self._transport = Transport(session, base_url=base_url, timeout=timeout)
        self._auth = Authenticator(
            self._transport,
            Credentials(user_name, password),
            token_store=token_store if token_store is not None else MemoryTokenStore(),
            encryptor=encryptor if encryptor is not None else NullEncryptor(),
            cache_key=cache_key,
        )
        self._executor = RequestExecutor(self._transport, self._auth)

    async def __aenter__(self) -> EaseeClient:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.async_close()

    async def async_close(self) -> None:
        """Close the HTTP session if this client created it."""

        await self._transport.async_close()

    @property
    def authenticator(self) -> Authenticator:
        return self._auth

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        response = await self._executor.async_request("GET", path, params=params)
        return response.body

    async def _get_object(self, path: str) -> dict[str, Any]:
        response = await self._executor.async_request("GET", path)
        if not isinstance(response.body, dict):
            raise RequestFailed(
                f"Expected a JSON object from {path}", response.snapshot()
            )
        return response.body

    async def _post(
        self,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json_data: Any | None = None,
    ) -> Any:
        response = await self._executor.async_request(
            "POST", path, params=params, json_data=json_data
        )
        return response.body

    async def async_login(self) -> TokenPair:
        """Log in and return a fresh token pair without touching the cache."""

        return await self._auth.async_login()

    async def chargers(self) -> list[Charger]:
        data = await self._get(CHARGERS_PATH)
        return [Charger(item) for item in data or []]

    async def state(self, charger_id: str) -> State:
        data = await self._get_object(CHARGER_STATE_PATH.format(charger_id=charger_id))
        return State(data)

    async def configuration(self, charger_id: str) -> Configuration:
        data = await self._get_object(CHARGER_CONFIG_PATH.format(charger_id=charger_id))
        return Configuration(data)

    async def site(self, charger_id: str) -> Site:
        data = await self._get_object(CHARGER_SITE_PATH.format(charger_id=charger_id))
        return Site(data)

    async def pair(self, charger_id: str, pin_code: str) -> Any:
        return await self._post(
            CHARGER_PAIR_PATH.format(charger_id=charger_id),
            params={"pinCode": pin_code},
        )

    async def unpair(self, charger_id: str, pin_code: str) -> Any:
        return await self._post(
            CHARGER_UNPAIR_PATH.format(charger_id=charger_id),
            params={"pinCode": pin_code},
        )

    async def _command(self, charger_id: str, command: str) -> Any:
        return await self._post(
            CHARGER_COMMAND_PATH.format(charger_id=charger_id, command=command)
        )

    async def pause_charging(self, charger_id: str) -> Any:
        return await self._command(charger_id, CMD_PAUSE_CHARGING)

    async def resume_charging(self, charger_id: str) -> Any:
        return await self._command(charger_id, CMD_RESUME_CHARGING)

    async def poll_lifetime_energy(self, charger_id: str) -> Any:
        """Ask the charger to report its lifetime energy counter."""

        return await self._command(charger_id, CMD_POLL_LIFETIME_ENERGY)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(user_name={FILTERED!r}, password={FILTERED!r}, "
            f"token_store={self._auth.token_store!r}, "
            f"encryptor={self._auth.encryptor!r})"
        )
