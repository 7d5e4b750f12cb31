"""Random-walk price simulator and the simulated market data provider."""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, timezone

import numpy as np

from ..errors import NotFoundError, ValidationError
from .interface import MarketDataProvider, timeframe_days
from .models import HistoryPoint, Market, NewsItem, PricePoint, probability_to_odds
from .seed_markets import MOCK_NEWS, SEED_MARKETS

logger = logging.getLogger(__name__)


class PriceSimulator:
    """Bounded random-walk generator for prediction-market prices.

    All probabilities it produces stay inside [MIN_PRICE, MAX_PRICE] so that no
    simulated market ever reaches a degenerate 0 or 1. The one deliberate
    exception is the anchor of generate_history(), which is the caller's own
    price.

    Pass a seeded ``numpy.random.Generator`` to make paths reproducible.
    """

    MIN_PRICE = 0.01
    MAX_PRICE = 0.99
    MAX_DAILY_MOVE = 0.05  # largest absolute step of the history walk
    MAX_TICK_MOVE = 2.0  # largest step of step_odds(), in percentage points

    def __init__(self, rng: np.random.Generator | None = None) -> None:
        self._rng = rng if rng is not None else np.random.default_rng()

    # --- Public API ---

    def generate_history(
        self,
        seed_price: float,
        days: int = 30,
        end: datetime | None = None,
    ) -> list[PricePoint]:
        """Random walk of ``days + 1`` daily points ending exactly at ``seed_price``.

        The walk starts from ``seed_price`` and perturbs the previous value by a
        uniform delta in [-MAX_DAILY_MOVE, MAX_DAILY_MOVE), re-clamping every
        step. The final point is then overwritten with ``seed_price`` so the
        path is anchored to the caller's current price.
        """
        if days < 1:
            raise ValidationError(f"days must be >= 1, got {days}")
        if not 0.0 <= seed_price <= 1.0:
            raise ValidationError(f"seed_price must be a probability, got {seed_price}")

        end = end or datetime.now(timezone.utc)
        deltas = self._rng.uniform(-self.MAX_DAILY_MOVE, self.MAX_DAILY_MOVE, size=days + 1)

        history: list[PricePoint] = []
        price = seed_price
        for offset, delta in zip(range(days, -1, -1), deltas):
            price = self._clamp(price + float(delta))
            history.append(PricePoint(timestamp=end - timedelta(days=offset), value=price))

        history[-1] = PricePoint(timestamp=history[-1].timestamp, value=seed_price)
        return history

    def generate_market_set(self, history_days: int = 30) -> list[Market]:
        """Build the simulated catalog with freshly sampled histories."""
        today = date.today()
        return [self._build_market(seed, history_days, today) for seed in SEED_MARKETS]

    def step_odds(self, odds: float) -> float:
        """One random-walk step in the odds (percentage) domain, clamped to [1, 99]."""
        step = float(self._rng.uniform(-self.MAX_TICK_MOVE, self.MAX_TICK_MOVE))
        return probability_to_odds(self._clamp((odds + step) / 100))

    # --- Internals ---

    def _clamp(self, price: float) -> float:
        return min(self.MAX_PRICE, max(self.MIN_PRICE, price))

    def _trend(self, trend: dict, n: int) -> np.ndarray:
        """Base trend plus non-negative noise, in percentage points."""
        i = np.arange(n, dtype=float)
        kind = trend["kind"]
        if kind == "sin":
            base = trend["base"] + np.sin(i / trend["period"]) * trend["amplitude"]
        elif kind == "cos":
            base = trend["base"] + np.cos(i / trend["period"]) * trend["amplitude"]
        elif kind == "linear":
            base = trend["base"] + i * trend["amplitude"]
        else:
            raise ValueError(f"Unknown trend kind: {kind}")
        return base + self._rng.uniform(0.0, trend["noise"], size=n)

    def _build_market(self, seed: dict, history_days: int, today: date) -> Market:
        probabilities = np.clip(self._trend(seed["trend"], history_days) / 100, self.MIN_PRICE, self.MAX_PRICE)
        start = today - timedelta(days=history_days - 1)
        history = tuple(
            HistoryPoint(date=start + timedelta(days=i), odds=probability_to_odds(float(p)))
            for i, p in enumerate(probabilities)
        )
        return Market(
            id=seed["id"],
            title=seed["title"],
            category=seed["category"],
            odds=seed["odds"],
            change_24h=seed["change_24h"],
            volume=seed["volume"],
            resolve_date=seed["resolve_date"],
            description=seed["description"],
            history=history,
        )


class SimulatedMarketDataProvider(MarketDataProvider):
    """MarketDataProvider backed by the PriceSimulator catalog.

    Each call regenerates its data, so nothing returned is shared between
    calls.
    """

    def __init__(self, simulator: PriceSimulator | None = None) -> None:
        self._sim = simulator or PriceSimulator()

    @property
    def simulator(self) -> PriceSimulator:
        return self._sim

    async def get_markets(self) -> list[Market]:
        return self._sim.generate_market_set()

    async def get_market_details(self, market_id: str) -> Market:
        for market in self._sim.generate_market_set():
            if market.id == str(market_id):
                return market
        raise NotFoundError(str(market_id))

    async def get_market_history(self, market_id: str, timeframe: str = "30d") -> list[HistoryPoint]:
        days = timeframe_days(timeframe)
        market = await self.get_market_details(market_id)
        path = self._sim.generate_history(market.probability, days)
        logger.debug("Simulated %d history points for market %s", len(path), market_id)
        return [HistoryPoint(date=p.timestamp.date(), odds=probability_to_odds(p.value)) for p in path]

    async def get_news(self, category: str = "all") -> list[NewsItem]:
        now = datetime.now(timezone.utc)
        items = [
            NewsItem(
                id=raw["id"],
                headline=raw["headline"],
                summary=raw["summary"],
                timestamp=now - timedelta(minutes=raw["minutes_ago"]),
                source=raw["source"],
                category=raw["category"],
            )
            for raw in MOCK_NEWS
        ]
        if category == "all":
            return items
        return [item for item in items if item.category.lower() == category.lower()]
