"""Fixtures for market data tests: in-memory transport and stream collaborators."""

import asyncio

import pytest

from papertrade.errors import UpstreamError
from papertrade.market.subscriptions import MarketStream
from papertrade.market.transport import MarketTransport


class FakeTransport(MarketTransport):
    """MarketTransport returning canned payloads and counting calls."""

    def __init__(self, markets=None, details=None, history=None, news=None, error=None):
        self.markets = markets if markets is not None else []
        self.details = details or {}
        self.history = history if history is not None else []
        self.news = news if news is not None else {"articles": []}
        self.error = error
        self.calls: list[tuple] = []
        self.closed = False

    async def fetch_markets(self):
        self.calls.append(("markets",))
        if self.error:
            raise self.error
        return self.markets

    async def fetch_market_details(self, market_id):
        self.calls.append(("details", market_id))
        if self.error:
            raise self.error
        if market_id not in self.details:
            raise UpstreamError(404, "not found")
        return self.details[market_id]

    async def fetch_market_history(self, market_id, timeframe):
        self.calls.append(("history", market_id, timeframe))
        if self.error:
            raise self.error
        return self.history

    async def fetch_news(self, query):
        self.calls.append(("news", query))
        if self.error:
            raise self.error
        return self.news

    async def close(self):
        self.closed = True


class FakeStream(MarketStream):
    """MarketStream fed by the test through push()."""

    def __init__(self):
        self.sent: list[dict] = []
        self.close_count = 0
        self._queue: asyncio.Queue = asyncio.Queue()

    async def send(self, message):
        self.sent.append(message)

    async def push(self, message):
        await self._queue.put(message)

    async def messages(self):
        while True:
            yield await self._queue.get()

    async def close(self):
        self.close_count += 1


@pytest.fixture
def fake_stream():
    return FakeStream()


@pytest.fixture
def make_transport():
    """Factory fixture: make_transport(markets=..., details=..., ...) -> FakeTransport."""
    return FakeTransport
