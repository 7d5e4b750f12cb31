"""Abstract interface for market data providers."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..errors import ValidationError
from .models import HistoryPoint, Market, NewsItem
from .seed_markets import TIMEFRAME_DAYS


def timeframe_days(timeframe: str) -> int:
    """Number of days covered by a history timeframe ("24h", "7d", "30d", "all")."""
    try:
        return TIMEFRAME_DAYS[timeframe]
    except KeyError:
        raise ValidationError(f"Unknown timeframe: {timeframe!r}") from None


class MarketDataProvider(ABC):
    """Contract for market data providers.

    Two variants exist: SimulatedMarketDataProvider (synthetic catalog) and
    LiveMarketDataProvider (rate-limited external transport). The variant is
    chosen once, by create_market_data_provider(), and never changes for the
    lifetime of the instance.

    Every call returns fresh immutable snapshots rather than aliasing any
    internal state.

    Lifecycle:
        provider = create_market_data_provider()
        markets = await provider.get_markets()
        market = await provider.get_market_details(markets[0].id)
        history = await provider.get_market_history(market.id, "7d")
        # ... app shutting down ...
        await provider.close()
    """

    @abstractmethod
    async def get_markets(self) -> list[Market]:
        """Return the current market catalog."""

    @abstractmethod
    async def get_market_details(self, market_id: str) -> Market:
        """Return one market.

        Raises NotFoundError when the id does not resolve and UpstreamError on
        any other live transport failure.
        """

    @abstractmethod
    async def get_market_history(self, market_id: str, timeframe: str = "30d") -> list[HistoryPoint]:
        """Return the odds history for a market, oldest first.

        ``timeframe`` is one of "24h", "7d", "30d" or "all"; anything else
        raises ValidationError.
        """

    @abstractmethod
    async def get_news(self, category: str = "all") -> list[NewsItem]:
        """Return market-related news, optionally filtered by category."""

    async def close(self) -> None:
        """Release resources. Safe to call multiple times."""
