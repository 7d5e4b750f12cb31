"""Transport collaborator for live market data."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

from ..errors import UpstreamError

logger = logging.getLogger(__name__)


class MarketTransport(ABC):
    """Raw access to an external market API.

    Implementations return the foreign JSON schema untouched; normalization
    into Market/HistoryPoint/NewsItem belongs to LiveMarketDataProvider. Every
    method raises UpstreamError(status) on a non-success response or network
    failure.
    """

    @abstractmethod
    async def fetch_markets(self) -> Any:
        """Raw market list."""

    @abstractmethod
    async def fetch_market_details(self, market_id: str) -> Any:
        """Raw single market."""

    @abstractmethod
    async def fetch_market_history(self, market_id: str, timeframe: str) -> Any:
        """Raw list of timestamped price points."""

    @abstractmethod
    async def fetch_news(self, query: str) -> Any:
        """Raw news search response."""

    async def close(self) -> None:
        """Release connections. Safe to call multiple times."""


class HttpMarketTransport(MarketTransport):
    """MarketTransport over HTTP using httpx.

    The market API is called with a bearer token; the news API takes its key as
    an ``apiKey`` query parameter.
    """

    def __init__(
        self,
        api_url: str,
        api_key: str = "",
        news_url: str = "https://newsapi.org/v2",
        news_key: str = "",
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_url = api_url.rstrip("/")
        self._news_url = news_url.rstrip("/")
        self._news_key = news_key
        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        self._headers = headers
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def fetch_markets(self) -> Any:
        return await self._get(f"{self._api_url}/markets", headers=self._headers)

    async def fetch_market_details(self, market_id: str) -> Any:
        return await self._get(f"{self._api_url}/markets/{market_id}", headers=self._headers)

    async def fetch_market_history(self, market_id: str, timeframe: str) -> Any:
        return await self._get(
            f"{self._api_url}/markets/{market_id}/history",
            params={"timeframe": timeframe},
            headers=self._headers,
        )

    async def fetch_news(self, query: str) -> Any:
        return await self._get(
            f"{self._news_url}/everything",
            params={"q": query, "sortBy": "publishedAt", "apiKey": self._news_key},
        )

    async def close(self) -> None:
        await self._client.aclose()

    # --- Internal ---

    async def _get(
        self,
        url: str,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        try:
            response = await self._client.get(url, params=params, headers=headers)
        except httpx.HTTPError as e:
            logger.error("Request to %s failed: %s", url, e)
            raise UpstreamError(None, f"request to {url} failed: {e}") from e

        if not response.is_success:
            logger.warning("Request to %s returned %d", url, response.status_code)
            raise UpstreamError(response.status_code, f"request to {url} failed")

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError(response.status_code, f"invalid JSON from {url}") from e
