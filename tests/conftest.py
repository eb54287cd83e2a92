"""Shared fixtures: route provider requests to canned responses."""

from typing import Dict, Union
from unittest.mock import AsyncMock

import pytest

from anisource.core.exceptions import NetworkError
from anisource.plugins.base import BaseProvider, FetchResult


Response = Union[str, int, Exception]


def install_routes(provider: BaseProvider, routes: Dict[str, Response]) -> AsyncMock:
    """
    Replace ``provider._fetch`` with a mock serving ``routes``.

    A string is a 200 body, an int a bare status code and an exception is
    raised. Unknown URLs fail like an unreachable host.
    """

    async def fetch(url, headers=None, timeout=None):
        if url not in routes:
            raise NetworkError(f"Unexpected request to {url}", url=url)
        response = routes[url]
        if isinstance(response, Exception):
            raise response
        if isinstance(response, int):
            return FetchResult(response, "", url)
        return FetchResult(200, response, url)

    mock = AsyncMock(side_effect=fetch)
    provider._fetch = mock
    return mock


@pytest.fixture
def routes():
    return install_routes


class FakeClock:
    """Manually advanced time source."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
