"""HTTP transport and response classification for the Easee cloud API."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any

import aiohttp
import async_timeout
from yarl import URL

from .const import (
    BASE_URL,
    DEFAULT_API_TIMEOUT,
    GATEWAY_ERROR_HEADER,
    GATEWAY_FORBIDDEN,
    INVALID_CREDENTIALS_ERROR_CODES,
    MAX_LOGGED_BODY_LEN,
)
from .exceptions import (
    ErrorResponse,
    Forbidden,
    InvalidCredentials,
    RateLimitExceeded,
    RequestFailed,
)

_LOGGER = logging.getLogger(__name__)

_SENSITIVE_HEADERS = {"authorization", "cookie"}


@dataclass(frozen=True)
class Response:
    """Decoded HTTP response; ``body`` is parsed JSON, raw text or None."""

    status: int
    headers: dict[str, str] = field(default_factory=dict)
    body: Any = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def snapshot(self) -> ErrorResponse:
        return ErrorResponse(status=self.status, headers=dict(self.headers), body=self.body)


def _redact_headers(headers: dict[str, str]) -> dict[str, str]:
    """Return a copy of headers with sensitive values masked."""

    return {
        key: "[redacted]" if key.lower() in _SENSITIVE_HEADERS else value
        for key, value in headers.items()
    }


def _truncate(text: str, limit: int = MAX_LOGGED_BODY_LEN) -> str:
    text = text.replace("\n", " ").replace("\r", " ")
    return text if len(text) <= limit else f"{text[:limit]}…"


def _decode_body(text: str, content_type: str) -> Any:
    if not text.strip():
        return None
    if "json" not in content_type:
        return text
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        _LOGGER.debug("Response declared JSON but did not parse: %s", _truncate(text))
        return text


def _header(headers: dict[str, str], name: str) -> str | None:
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value
    return None


def is_gateway_forbidden(response: Response) -> bool:
    """Return True when the API gateway rejected the call as forbidden."""

    return _header(response.headers, GATEWAY_ERROR_HEADER) == GATEWAY_FORBIDDEN


def _error_code(body: Any) -> Any:
    if isinstance(body, dict):
        return body.get("errorCode")
    return None


def raise_for_response(response: Response, *, login: bool = False) -> None:
    """Map a non-2xx response onto the client's exception taxonomy.

    ``login`` enables the bad-credentials mapping, which only applies to the
    login endpoint.
    """

    if is_gateway_forbidden(response) or response.status == HTTPStatus.FORBIDDEN:
        raise Forbidden("Access denied to charger")
    if response.ok:
        return
    if response.status == HTTPStatus.TOO_MANY_REQUESTS:
        raise RateLimitExceeded("Rate limit exceeded", response.snapshot())
    if (
        login
        and response.status == HTTPStatus.BAD_REQUEST
        and _error_code(response.body) in INVALID_CREDENTIALS_ERROR_CODES
    ):
        raise InvalidCredentials("Invalid username or password")
    raise RequestFailed(
        f"Request returned status {response.status}", response.snapshot()
    )


class Transport:
    """Performs requests against the API and decodes the responses.

    The aiohttp session is created on first use unless one is supplied; a
    supplied session is never closed by the transport.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession | None = None,
        *,
        base_url: str = BASE_URL,
        timeout: int = DEFAULT_API_TIMEOUT,
    ) -> None:
        self._session = session
        self._session_owner = session is None
        self._base_url = base_url.rstrip("/")
        self._timeout = int(timeout)

    @property
    def base_url(self) -> str:
        return self._base_url

    def url(self, path: str, params: dict[str, Any] | None = None) -> URL:
        url = URL(f"{self._base_url}/{path.lstrip('/')}")
        if params:
            url = url.with_query({k: str(v) for k, v in params.items()})
        return url

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession()
            self._session_owner = True
        return self._session

    async def async_close(self) -> None:
        if self._session is not None and self._session_owner:
            await self._session.close()
            self._session = None

    async def async_request(
        self,
        method: str,
        path: str,
        *,
        token: str | None = None,
        params: dict[str, Any] | None = None,
        json_data: Any | None = None,
        log_body: bool = True,
    ) -> Response:
        """Send a request and return the decoded response, whatever its status.

        Connection failures and timeouts raise RequestFailed without a response.
        Pass ``log_body=False`` for calls whose payloads carry tokens.
        """

        url = self.url(path, params)
        headers = {"Accept": "application/json"}
        if token is not None:
            headers["Authorization"] = f"Bearer {token}"
        req_kwargs: dict[str, Any] = {"headers": headers}
        if json_data is not None:
            req_kwargs["json"] = json_data

        _LOGGER.debug(
            "Easee request %s %s headers=%s", method, url, _redact_headers(headers)
        )
        try:
            async with async_timeout.timeout(self._timeout):
                async with self._get_session().request(
                    method, url, **req_kwargs
                ) as resp:
                    text = await resp.text()
                    resp_headers = dict(resp.headers)
                    status = resp.status
        except aiohttp.ClientError as err:
            _LOGGER.debug("Easee request %s %s failed: %s", method, url, err)
            raise RequestFailed(f"Request to {url.path} failed: {err}") from err
        except TimeoutError as err:
            _LOGGER.debug("Easee request %s %s timed out", method, url)
            raise RequestFailed(f"Request to {url.path} timed out") from err

        body = _decode_body(text, _header(resp_headers, "Content-Type") or "")
        _LOGGER.debug(
            "Easee response %s %s status=%s body=%s",
            method,
            url,
            status,
            _truncate(text) if log_body else "[redacted]",
        )
        return Response(status=status, headers=resp_headers, body=body)
