"""Factories that bind market components to the configured mode."""

from __future__ import annotations

import logging

from ..config import Settings
from .interface import MarketDataProvider
from .rate_limiter import RateLimiter
from .subscriptions import (
    LiveSubscriptionDispatcher,
    MarketStream,
    SimulatedSubscriptionDispatcher,
    SubscriptionDispatcher,
)

logger = logging.getLogger(__name__)


def create_market_data_provider(
    settings: Settings | None = None,
    rate_limiter: RateLimiter | None = None,
) -> MarketDataProvider:
    """Create the market data provider for the configured mode.

    - PAPERTRADE_MODE=live|real → LiveMarketDataProvider over HTTP
    - Otherwise → SimulatedMarketDataProvider (random-walk simulation)

    The mode is read once here; the returned provider never switches.
    """
    settings = settings or Settings.from_env()

    if settings.is_live:
        from .live_client import LiveMarketDataProvider
        from .transport import HttpMarketTransport

        logger.info("Market data provider: live API at %s", settings.polymarket_api_url)
        transport = HttpMarketTransport(
            api_url=settings.polymarket_api_url,
            api_key=settings.polymarket_api_key,
            news_url=settings.news_api_url,
            news_key=settings.news_api_key,
        )
        return LiveMarketDataProvider(
            transport=transport,
            rate_limiter=rate_limiter,
            max_calls=settings.rate_limit_calls,
            window_ms=settings.rate_limit_window_ms,
        )
    else:
        from .simulator import SimulatedMarketDataProvider

        logger.info("Market data provider: simulator")
        return SimulatedMarketDataProvider()


def create_subscription_dispatcher(
    settings: Settings | None = None,
    stream: MarketStream | None = None,
) -> SubscriptionDispatcher:
    """Create the subscription dispatcher for the configured mode.

    Live mode relays ``stream``, which is required there. Simulated mode
    synthesizes updates every ``settings.update_interval`` seconds.
    """
    settings = settings or Settings.from_env()

    if settings.is_live:
        if stream is None:
            raise ValueError("Live mode requires a MarketStream")
        logger.info("Subscription dispatcher: live stream")
        return LiveSubscriptionDispatcher(stream)
    else:
        logger.info("Subscription dispatcher: simulator, %.1fs interval", settings.update_interval)
        return SimulatedSubscriptionDispatcher(update_interval=settings.update_interval)
