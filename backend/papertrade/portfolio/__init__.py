"""Portfolio valuation for papertrade.

Public API:
    Position, Portfolio       - Caller-held trading state
    PnL, PortfolioMetrics, MarketStats - Derived valuation results
    calculate_pnl             - Value one position at a price
    calculate_portfolio_metrics - Aggregate value, PnL and return
    calculate_market_stats    - High/low/mean/volatility of a price series
    calculate_moving_average  - Trailing simple moving average
    validate_trade_amount     - Stake checks for trading actions
"""

from .models import MarketStats, PnL, Portfolio, PortfolioMetrics, Position, PositionStatus, PositionType
from .validation import validate_trade_amount
from .valuation import (
    INITIAL_BALANCE,
    calculate_implied_probability,
    calculate_market_stats,
    calculate_moving_average,
    calculate_pnl,
    calculate_portfolio_metrics,
    calculate_potential_payout,
)

__all__ = [
    "INITIAL_BALANCE",
    "MarketStats",
    "PnL",
    "Portfolio",
    "PortfolioMetrics",
    "Position",
    "PositionStatus",
    "PositionType",
    "calculate_implied_probability",
    "calculate_market_stats",
    "calculate_moving_average",
    "calculate_pnl",
    "calculate_portfolio_metrics",
    "calculate_potential_payout",
    "validate_trade_amount",
]
