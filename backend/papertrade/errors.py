"""Error taxonomy shared by the market and portfolio subsystems."""

from __future__ import annotations


class PaperTradeError(Exception):
    """Base class for every error raised by papertrade."""


class NotFoundError(PaperTradeError):
    """A requested market id does not resolve."""

    def __init__(self, market_id: str) -> None:
        super().__init__(f"Market not found: {market_id}")
        self.market_id = market_id


class UpstreamError(PaperTradeError):
    """The live transport failed: non-success response, network fault or bad payload.

    ``status`` is the HTTP status code when one was received, otherwise None.
    """

    def __init__(self, status: int | None, message: str = "") -> None:
        detail = message or "upstream request failed"
        super().__init__(f"{detail} (status={status})" if status is not None else detail)
        self.status = status


class RateLimitExceeded(PaperTradeError):
    """The sliding-window call cap for a resource has been reached."""

    def __init__(self, resource: str) -> None:
        super().__init__(f"Rate limit exceeded for {resource}")
        self.resource = resource


class ValidationError(PaperTradeError):
    """Malformed or out-of-range input."""
