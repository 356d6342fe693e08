"""Shared pytest fixtures for the Easee client tests."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from easee_ev import EaseeClient, MemoryTokenStore

from .common import FakeSession

USER_NAME = "easee"
PASSWORD = "money"


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def token_store() -> MemoryTokenStore:
    return MemoryTokenStore()


@pytest.fixture
def make_client(
    session: FakeSession, token_store: MemoryTokenStore
) -> Callable[..., EaseeClient]:
    """Return a factory building clients wired to the fake session and store."""

    def _make(**kwargs: Any) -> EaseeClient:
        kwargs.setdefault("token_store", token_store)
        kwargs.setdefault("session", session)
        return EaseeClient(USER_NAME, PASSWORD, **kwargs)

    return _make
