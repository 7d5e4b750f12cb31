"""HTTP surface: market REST endpoints and an SSE stream of subscription updates."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import AsyncGenerator

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import StreamingResponse

from ..errors import NotFoundError, PaperTradeError, RateLimitExceeded, UpstreamError, ValidationError
from .interface import MarketDataProvider
from .models import MarketUpdate
from .subscriptions import SubscriptionDispatcher

logger = logging.getLogger(__name__)


def _http_error(error: PaperTradeError) -> HTTPException:
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, RateLimitExceeded):
        return HTTPException(status_code=429, detail=str(error))
    if isinstance(error, ValidationError):
        return HTTPException(status_code=422, detail=str(error))
    if isinstance(error, UpstreamError):
        return HTTPException(status_code=502, detail=str(error))
    return HTTPException(status_code=500, detail=str(error))


def create_market_router(provider: MarketDataProvider, dispatcher: SubscriptionDispatcher) -> APIRouter:
    """Create the market router bound to a provider and a dispatcher.

    This factory pattern lets us inject both collaborators without globals.
    """
    router = APIRouter(prefix="/api", tags=["markets"])

    @router.get("/markets")
    async def list_markets() -> list[dict]:
        try:
            markets = await provider.get_markets()
        except PaperTradeError as e:
            raise _http_error(e) from e
        return [market.to_dict() for market in markets]

    @router.get("/markets/{market_id}")
    async def market_details(market_id: str) -> dict:
        try:
            market = await provider.get_market_details(market_id)
        except PaperTradeError as e:
            raise _http_error(e) from e
        return market.to_dict()

    @router.get("/markets/{market_id}/history")
    async def market_history(market_id: str, timeframe: str = "30d") -> list[dict]:
        try:
            history = await provider.get_market_history(market_id, timeframe)
        except PaperTradeError as e:
            raise _http_error(e) from e
        return [point.to_dict() for point in history]

    @router.get("/news")
    async def news(category: str = "all") -> list[dict]:
        try:
            items = await provider.get_news(category)
        except PaperTradeError as e:
            raise _http_error(e) from e
        return [item.to_dict() for item in items]

    @router.get("/stream/markets/{market_id}")
    async def stream_market(market_id: str, request: Request) -> StreamingResponse:
        """SSE endpoint relaying one market's updates.

        Each update is sent as:

            data: {"marketId": "3", "odds": 77.4, "change24h": -0.6, "timestamp": ...}

        Includes a retry directive so the browser auto-reconnects on
        disconnection (EventSource built-in behavior).
        """
        return StreamingResponse(
            _generate_events(dispatcher, market_id, request),
            media_type="text/event-stream",
            headers={
                "Cache-Control": "no-cache",
                "Connection": "keep-alive",
                "X-Accel-Buffering": "no",  # Disable nginx buffering if proxied
            },
        )

    return router


async def _generate_events(
    dispatcher: SubscriptionDispatcher,
    market_id: str,
    request: Request,
    poll_interval: float = 0.5,
) -> AsyncGenerator[str, None]:
    """Async generator that yields SSE-formatted market updates.

    Holds one subscription for the life of the connection and cancels it when
    the client disconnects (detected via request.is_disconnected()).
    """
    yield "retry: 1000\n\n"

    queue: asyncio.Queue[MarketUpdate] = asyncio.Queue()
    subscription = await dispatcher.subscribe(market_id, queue.put_nowait)
    client_ip = request.client.host if request.client else "unknown"
    logger.info("SSE client %s subscribed to market %s", client_ip, market_id)

    try:
        while True:
            if await request.is_disconnected():
                logger.info("SSE client disconnected: %s", client_ip)
                break
            try:
                update = await asyncio.wait_for(queue.get(), poll_interval)
            except asyncio.TimeoutError:
                continue
            yield f"data: {json.dumps(update.to_dict())}\n\n"
    except asyncio.CancelledError:
        logger.info("SSE stream cancelled for: %s", client_ip)
    finally:
        subscription.cancel()
