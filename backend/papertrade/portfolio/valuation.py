"""Portfolio valuation: PnL, aggregate metrics and price-series statistics."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Any

import numpy as np

from ..errors import ValidationError
from ..market.models import HistoryPoint, Market, PricePoint, odds_to_probability
from .models import MarketStats, PnL, Portfolio, PortfolioMetrics, Position, PositionType

logger = logging.getLogger(__name__)

# Returns are measured against the original capital base, not current cash.
INITIAL_BALANCE = 10_000.0


def calculate_pnl(position: Position, current_price: float) -> PnL:
    """Value a position at ``current_price`` (YES probability in [0, 1]).

    YES positions are worth ``shares * price``; NO positions are valued at the
    complement ``1 - price``.
    """
    price = current_price if position.type is PositionType.YES else 1 - current_price
    current_value = position.shares * price
    pnl = current_value - position.amount
    return PnL(pnl=pnl, pnl_percent=pnl / position.amount * 100, current_value=current_value)


def calculate_portfolio_metrics(portfolio: Portfolio, markets: Iterable[Market]) -> PortfolioMetrics:
    """Aggregate valuation of every open position against current markets.

    Positions whose market id no longer resolves (delisted or unknown) still
    count as open but contribute nothing to value or PnL.
    """
    by_id = {market.id: market for market in markets}

    total_value = portfolio.balance
    total_pnl = 0.0
    open_positions = 0

    for position in portfolio.positions:
        if not position.is_open:
            continue
        open_positions += 1
        market = by_id.get(position.market_id)
        if market is None:
            logger.debug("Skipping position on unknown market %s", position.market_id)
            continue
        result = calculate_pnl(position, odds_to_probability(market.odds))
        total_value += result.current_value
        total_pnl += result.pnl

    return PortfolioMetrics(
        total_value=total_value,
        total_pnl=total_pnl,
        total_return=(total_value - INITIAL_BALANCE) / INITIAL_BALANCE * 100,
        open_positions=open_positions,
        available_balance=portfolio.balance,
    )


def _point_value(point: Any) -> float:
    if isinstance(point, PricePoint):
        return point.value
    if isinstance(point, HistoryPoint):
        return point.odds
    return float(point)


def calculate_market_stats(history: Sequence[Any]) -> MarketStats:
    """High, low, mean and population standard deviation of a price series.

    Accepts PricePoint, HistoryPoint or plain numbers. An empty series gives
    all zeros.
    """
    if not history:
        return MarketStats()

    values = np.array([_point_value(p) for p in history], dtype=float)
    return MarketStats(
        high=float(values.max()),
        low=float(values.min()),
        average=float(values.mean()),
        volatility=float(values.std(ddof=0)),
    )


def calculate_moving_average(series: Sequence[float], period: int = 7) -> list[float | None]:
    """Trailing simple moving average, aligned with ``series``.

    The first ``period - 1`` entries are None (not enough points yet).
    """
    if period < 1:
        raise ValidationError(f"period must be >= 1, got {period}")

    n = len(series)
    if n < period:
        return [None] * n

    values = np.asarray(series, dtype=float)
    window = np.convolve(values, np.ones(period) / period, mode="valid")
    return [None] * (period - 1) + [float(v) for v in window]


def calculate_implied_probability(price: float) -> float:
    """Market price (0-1) as an implied probability percentage."""
    return price * 100


def calculate_potential_payout(amount: float, price: float, position_type: PositionType | str) -> float:
    """Payout if the position resolves in its favor: shares bought at ``price`` pay 1 each."""
    if not 0.0 < price < 1.0:
        raise ValidationError(f"price must be in (0, 1), got {price}")
    if PositionType(position_type) is PositionType.YES:
        return amount / price
    return amount / (1 - price)
