"""Data models for market data."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any

from ..errors import ValidationError


def probability_to_odds(price: float) -> float:
    """Convert a [0, 1] probability to the [0, 100] odds convention."""
    return price * 100


def odds_to_probability(odds: float) -> float:
    return odds / 100


def parse_timestamp(raw: Any) -> datetime:
    """Accept Unix seconds, Unix milliseconds or an ISO-8601 string (naive means UTC)."""
    if isinstance(raw, str):
        try:
            raw = float(raw)
        except ValueError:
            pass
    if isinstance(raw, (int, float)):
        seconds = raw / 1000.0 if raw > 1e11 else float(raw)
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    parsed = datetime.fromisoformat(str(raw).replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True, slots=True)
class HistoryPoint:
    """One point of a market's odds history (percentage convention)."""

    date: date
    odds: float

    def to_dict(self) -> dict:
        return {"date": self.date.isoformat(), "odds": round(self.odds, 2)}


@dataclass(frozen=True, slots=True)
class PricePoint:
    """One point of a simulated price path (probability convention)."""

    timestamp: datetime
    value: float


@dataclass(frozen=True, slots=True)
class Market:
    """Immutable snapshot of a prediction market.

    ``odds`` is the YES probability as a percentage in [0, 100]. ``history`` is
    ordered oldest to newest and is sampled independently of ``odds``.
    """

    id: str
    title: str
    category: str
    odds: float
    change_24h: float = 0.0
    volume: float = 0.0
    resolve_date: date | None = None
    description: str = ""
    history: tuple[HistoryPoint, ...] = ()

    @property
    def probability(self) -> float:
        """Current YES price in [0, 1]."""
        return odds_to_probability(self.odds)

    def to_dict(self) -> dict:
        """Serialize for JSON transmission."""
        return {
            "id": self.id,
            "title": self.title,
            "category": self.category,
            "odds": round(self.odds, 2),
            "change24h": self.change_24h,
            "volume": self.volume,
            "resolveDate": self.resolve_date.isoformat() if self.resolve_date else None,
            "description": self.description,
            "history": [point.to_dict() for point in self.history],
        }


@dataclass(frozen=True, slots=True)
class MarketUpdate:
    """A single delivery to a market subscriber."""

    market_id: str
    odds: float
    change_24h: float
    timestamp: float = field(default_factory=time.time)  # Unix seconds

    @classmethod
    def from_stream(cls, message: Any) -> MarketUpdate:
        """Parse an inbound live stream message ``{marketId, payload}``.

        The payload carries the YES price as a probability under ``price`` (or
        already-converted ``odds``), plus optional ``change24h`` and
        ``timestamp`` (Unix seconds or milliseconds, or ISO-8601). Raises ValidationError on anything malformed.
        """
        if not isinstance(message, dict) or "marketId" not in message:
            raise ValidationError(f"Stream message without marketId: {message!r}")
        payload = message.get("payload")
        if not isinstance(payload, dict):
            raise ValidationError(f"Stream message without payload: {message!r}")

        try:
            if "price" in payload:
                odds = probability_to_odds(float(payload["price"]))
            else:
                odds = float(payload["odds"])
            change = float(payload.get("change24h") or 0.0)
            raw_timestamp = payload.get("timestamp")
            timestamp = parse_timestamp(raw_timestamp).timestamp() if raw_timestamp else time.time()
        except (KeyError, TypeError, ValueError, OverflowError, OSError) as e:
            raise ValidationError(f"Malformed stream payload: {payload!r}") from e

        if not 0 <= odds <= 100:
            raise ValidationError(f"Odds out of range: {odds}")

        return cls(market_id=str(message["marketId"]), odds=odds, change_24h=change, timestamp=timestamp)

    def to_dict(self) -> dict:
        """Serialize for JSON / SSE transmission."""
        return {
            "marketId": self.market_id,
            "odds": round(self.odds, 2),
            "change24h": round(self.change_24h, 2),
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True, slots=True)
class NewsItem:
    """A market-related news article."""

    id: str
    headline: str
    summary: str
    timestamp: datetime
    source: str
    category: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "headline": self.headline,
            "summary": self.summary,
            "timestamp": self.timestamp.isoformat(),
            "source": self.source,
            "category": self.category,
        }
