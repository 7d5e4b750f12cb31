"""Trade input validation used by trading actions before they create a Position."""

from __future__ import annotations

from ..errors import ValidationError

MAX_POSITION_SIZE = 0.2  # max fraction of the balance committed to one position


def validate_trade_amount(amount: float, balance: float, max_position_size: float = MAX_POSITION_SIZE) -> None:
    """Raise ValidationError unless ``amount`` is a permissible stake for ``balance``."""
    if amount <= 0:
        raise ValidationError("Amount must be greater than 0")
    if amount > balance:
        raise ValidationError("Insufficient balance")
    if amount > balance * max_position_size:
        raise ValidationError(f"Maximum position size is {max_position_size * 100:.0f}% of balance")
