"""Market data subsystem for papertrade.

Public API:
    Market, HistoryPoint, PricePoint, MarketUpdate, NewsItem - Immutable snapshots
    PriceSimulator            - Bounded random-walk price/history generator
    RateLimiter               - Thread-safe sliding-window call limiter
    MarketDataProvider        - Abstract interface for data providers
    SubscriptionDispatcher    - Abstract interface for update dispatchers
    Subscription              - Cancellation handle returned by subscribe()
    MarketStream              - Contract for the live stream collaborator
    MarketTransport           - Contract for the live HTTP collaborator
    create_market_data_provider    - Factory that selects simulated or live data
    create_subscription_dispatcher - Factory that selects simulated or live updates
    create_market_router      - FastAPI router factory for REST + SSE endpoints
"""

from .factory import create_market_data_provider, create_subscription_dispatcher
from .interface import MarketDataProvider
from .models import HistoryPoint, Market, MarketUpdate, NewsItem, PricePoint
from .rate_limiter import RateLimiter
from .simulator import PriceSimulator
from .stream import create_market_router
from .subscriptions import MarketStream, Subscription, SubscriptionDispatcher
from .transport import MarketTransport

__all__ = [
    "HistoryPoint",
    "Market",
    "MarketUpdate",
    "NewsItem",
    "PricePoint",
    "PriceSimulator",
    "RateLimiter",
    "MarketDataProvider",
    "SubscriptionDispatcher",
    "Subscription",
    "MarketStream",
    "MarketTransport",
    "create_market_data_provider",
    "create_subscription_dispatcher",
    "create_market_router",
]
