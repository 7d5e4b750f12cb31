"""Portfolio data models."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any

from ..errors import ValidationError


class PositionType(str, enum.Enum):
    YES = "YES"
    NO = "NO"


class PositionStatus(str, enum.Enum):
    OPEN = "open"
    CLOSED = "closed"


@dataclass(slots=True)
class Position:
    """A caller-held stake on a market.

    ``amount`` and ``shares`` are fixed at entry; only ``status`` changes
    afterwards, when a trading action closes the position. ``market_id`` is a
    weak reference resolved against the current market list at valuation time.
    """

    market_id: str
    type: PositionType
    entry_price: float
    shares: float
    amount: float
    status: PositionStatus = PositionStatus.OPEN

    def __post_init__(self) -> None:
        self.type = PositionType(self.type)
        self.status = PositionStatus(self.status)
        if not 0.0 <= self.entry_price <= 1.0:
            raise ValidationError(f"entry_price must be in [0, 1], got {self.entry_price}")
        if self.shares <= 0:
            raise ValidationError(f"shares must be positive, got {self.shares}")
        if self.amount <= 0:
            raise ValidationError(f"amount must be positive, got {self.amount}")

    @property
    def is_open(self) -> bool:
        return self.status is PositionStatus.OPEN

    def close(self) -> None:
        self.status = PositionStatus.CLOSED


@dataclass(slots=True)
class Portfolio:
    """Uninvested cash plus an append-only, chronological list of positions."""

    balance: float
    positions: list[Position] = field(default_factory=list)
    history: list[Any] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class PnL:
    pnl: float
    pnl_percent: float
    current_value: float


@dataclass(frozen=True, slots=True)
class PortfolioMetrics:
    """Derived valuation of a portfolio; recomputed on every call, never stored."""

    total_value: float
    total_pnl: float
    total_return: float
    open_positions: int
    available_balance: float

    def to_dict(self) -> dict:
        return {
            "totalValue": self.total_value,
            "totalPnL": self.total_pnl,
            "totalReturn": self.total_return,
            "openPositions": self.open_positions,
            "availableBalance": self.available_balance,
        }


@dataclass(frozen=True, slots=True)
class MarketStats:
    high: float = 0.0
    low: float = 0.0
    average: float = 0.0
    volatility: float = 0.0
