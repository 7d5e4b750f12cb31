"""Live market data provider backed by an external transport."""

from __future__ import annotations

import json
import logging
from datetime import date, datetime
from typing import Any

from ..errors import NotFoundError, UpstreamError
from .interface import MarketDataProvider, timeframe_days
from .models import HistoryPoint, Market, NewsItem, parse_timestamp, probability_to_odds
from .rate_limiter import RateLimiter
from .seed_markets import CATEGORY_MAP, DEFAULT_CATEGORY
from .transport import MarketTransport

logger = logging.getLogger(__name__)

MARKET_RESOURCE = "polymarket"
NEWS_RESOURCE = "news"
DEFAULT_ODDS = 50.0  # used when a market carries no outcome price


def normalize_category(raw: Any) -> str:
    """Map a foreign category onto the display table; unknown values become 'Other'."""
    if not isinstance(raw, str):
        return DEFAULT_CATEGORY
    return CATEGORY_MAP.get(raw.strip().lower(), DEFAULT_CATEGORY)


def _parse_outcome_prices(raw: Any) -> list[float]:
    """outcomePrices arrives either as a list or as a JSON-encoded string."""
    if raw is None:
        return []
    if isinstance(raw, str):
        raw = json.loads(raw)
    return [float(p) for p in raw]


def _parse_date(raw: Any) -> date | None:
    if not raw:
        return None
    return datetime.fromisoformat(str(raw).replace("Z", "+00:00")).date()


def _price_to_odds(raw: Any) -> float:
    """Upstream [0, 1] price as odds; out-of-range or NaN prices raise ValueError."""
    price = float(raw)
    if not 0.0 <= price <= 1.0:
        raise ValueError(f"price out of range: {raw!r}")
    return probability_to_odds(price)


def parse_market(data: dict[str, Any]) -> Market:
    """Map one foreign market record into a Market.

    Prices are [0, 1] probabilities upstream and become [0, 100] odds here.
    Raises KeyError/TypeError/ValueError on malformed records.
    """
    prices = _parse_outcome_prices(data.get("outcomePrices"))
    odds = _price_to_odds(prices[0]) if prices else DEFAULT_ODDS
    return Market(
        id=str(data["id"]),
        title=data.get("question") or data.get("title") or "",
        category=normalize_category(data.get("category")),
        odds=odds,
        change_24h=float(data.get("change24h") or 0.0),
        volume=float(data.get("volume") or 0.0),
        resolve_date=_parse_date(data.get("endDate")),
        description=data.get("description") or "",
    )


def parse_history_point(point: dict[str, Any]) -> HistoryPoint:
    timestamp = point["timestamp"] if "timestamp" in point else point["t"]
    price = point["price"] if "price" in point else point["p"]
    return HistoryPoint(date=parse_timestamp(timestamp).date(), odds=_price_to_odds(price))


def _unwrap_list(payload: Any, key: str) -> list:
    """Some endpoints wrap their list in an envelope such as {"data": [...]}."""
    if isinstance(payload, dict):
        payload = payload.get(key)
    if not isinstance(payload, list):
        raise UpstreamError(None, f"expected a list under {key!r}")
    return payload


class LiveMarketDataProvider(MarketDataProvider):
    """MarketDataProvider backed by a MarketTransport.

    Every call passes through the RateLimiter before the transport is touched,
    so a RateLimitExceeded never leaves a partial request behind. Transport
    failures propagate to the caller; there is no fallback to simulated data.

    Rate limits default to 100 calls per rolling 60s per resource.
    """

    def __init__(
        self,
        transport: MarketTransport,
        rate_limiter: RateLimiter | None = None,
        max_calls: int = 100,
        window_ms: float = 60_000.0,
    ) -> None:
        self._transport = transport
        self._limiter = rate_limiter or RateLimiter()
        self._max_calls = max_calls
        self._window_ms = window_ms

    @property
    def rate_limiter(self) -> RateLimiter:
        return self._limiter

    async def get_markets(self) -> list[Market]:
        self._gate(MARKET_RESOURCE)
        records = _unwrap_list(await self._transport.fetch_markets(), "data")

        markets: list[Market] = []
        for record in records:
            try:
                markets.append(parse_market(record))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.warning("Skipping malformed market %s: %s", _record_id(record), e)
        logger.debug("Live: fetched %d/%d markets", len(markets), len(records))
        return markets

    async def get_market_details(self, market_id: str) -> Market:
        self._gate(MARKET_RESOURCE)
        try:
            record = await self._transport.fetch_market_details(market_id)
        except UpstreamError as e:
            if e.status is not None and 400 <= e.status < 500:
                raise NotFoundError(str(market_id)) from e
            raise

        try:
            return parse_market(record)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise UpstreamError(None, f"malformed market {market_id}: {e}") from e

    async def get_market_history(self, market_id: str, timeframe: str = "30d") -> list[HistoryPoint]:
        timeframe_days(timeframe)  # validate before spending a call
        self._gate(MARKET_RESOURCE)
        points = _unwrap_list(await self._transport.fetch_market_history(market_id, timeframe), "history")

        try:
            history = [parse_history_point(p) for p in points]
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise UpstreamError(None, f"malformed history for {market_id}: {e}") from e
        return sorted(history, key=lambda p: p.date)

    async def get_news(self, category: str = "all") -> list[NewsItem]:
        self._gate(NEWS_RESOURCE)
        query = "prediction markets" if category == "all" else category
        articles = _unwrap_list(await self._transport.fetch_news(query), "articles")

        items: list[NewsItem] = []
        for article in articles[:10]:
            try:
                items.append(
                    NewsItem(
                        id=article["url"],
                        headline=article["title"],
                        summary=article.get("description") or "",
                        timestamp=parse_timestamp(article["publishedAt"]),
                        source=(article.get("source") or {}).get("name", ""),
                        category=category,
                    )
                )
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.warning("Skipping malformed article: %s", e)
        return items

    async def close(self) -> None:
        await self._transport.close()

    # --- Internal ---

    def _gate(self, resource: str) -> None:
        self._limiter.check_limit(resource, self._max_calls, self._window_ms)


def _record_id(record: Any) -> str:
    return str(record.get("id", "???")) if isinstance(record, dict) else "???"
