"""Recurring delivery of market updates to subscribed listeners."""

from __future__ import annotations

import asyncio
import inspect
import logging
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Callable
from typing import Any

from ..errors import ValidationError
from .models import MarketUpdate
from .seed_markets import SEED_MARKETS
from .simulator import PriceSimulator

logger = logging.getLogger(__name__)

# A listener may be a plain function or a coroutine function.
Listener = Callable[[MarketUpdate], Any]


class Subscription:
    """Cancellation handle for one listener on one market.

    cancel() is idempotent. It stops deliveries no later than the next
    scheduled attempt; a delivery that has already started runs to completion.
    """

    def __init__(
        self,
        market_id: str,
        listener: Listener,
        on_cancel: Callable[[Subscription], None],
    ) -> None:
        self.market_id = market_id
        self._listener = listener
        self._on_cancel = on_cancel
        self._cancelled = asyncio.Event()

    @property
    def active(self) -> bool:
        return not self._cancelled.is_set()

    def cancel(self) -> None:
        if self._cancelled.is_set():
            return
        self._cancelled.set()
        self._on_cancel(self)
        logger.info("Subscription to market %s cancelled", self.market_id)

    async def deliver(self, update: MarketUpdate) -> None:
        """Hand one update to the listener. Listener errors are logged and dropped."""
        if not self.active:
            return
        try:
            result = self._listener(update)
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.exception("Listener for market %s failed on update", self.market_id)

    async def wait_cancelled(self, timeout: float) -> bool:
        """Sleep up to ``timeout`` seconds; True if cancelled meanwhile."""
        try:
            await asyncio.wait_for(self._cancelled.wait(), timeout)
        except asyncio.TimeoutError:
            return False
        return True


class MarketStream(ABC):
    """Contract for the live stream collaborator.

    The implementation owns the connection lifecycle (open, retry, close).
    messages() yields inbound ``{"marketId": ..., "payload": {...}}`` dicts in
    arrival order and may be called again after close() to reopen.
    """

    @abstractmethod
    async def send(self, message: dict) -> None:
        """Send a control message (e.g. a subscribe request)."""

    @abstractmethod
    def messages(self) -> AsyncIterator[dict]:
        """Async iterator over inbound messages."""

    @abstractmethod
    async def close(self) -> None:
        """Close the connection. Safe to call multiple times."""


class SubscriptionDispatcher(ABC):
    """Contract for subscription dispatchers.

    Lifecycle:
        dispatcher = create_subscription_dispatcher()
        sub = await dispatcher.subscribe("3", on_update)
        # ... updates arrive on on_update ...
        sub.cancel()
        # ... app shutting down ...
        await dispatcher.close()
    """

    @abstractmethod
    async def subscribe(self, market_id: str, on_update: Listener) -> Subscription:
        """Register a listener and return immediately with its handle.

        Must be awaited from a running event loop; deliveries happen on
        background tasks.
        """

    @abstractmethod
    async def close(self) -> None:
        """Cancel every subscription and release resources. Idempotent."""

    @property
    @abstractmethod
    def active_count(self) -> int:
        """Number of subscriptions still receiving updates."""


class SimulatedSubscriptionDispatcher(SubscriptionDispatcher):
    """Each subscription gets a private task firing every ``update_interval`` seconds.

    Odds start from the market's catalog value (50 for unknown ids) and walk
    with PriceSimulator.step_odds(); change_24h is the move in percentage
    points since the subscription started.
    """

    DEFAULT_ODDS = 50.0

    def __init__(self, simulator: PriceSimulator | None = None, update_interval: float = 5.0) -> None:
        self._sim = simulator or PriceSimulator()
        self._interval = update_interval
        self._tasks: dict[Subscription, asyncio.Task] = {}
        self._seed_odds = {seed["id"]: seed["odds"] for seed in SEED_MARKETS}

    async def subscribe(self, market_id: str, on_update: Listener) -> Subscription:
        sub = Subscription(str(market_id), on_update, self._release)
        self._tasks[sub] = asyncio.create_task(self._run(sub), name=f"sim-subscription-{market_id}")
        logger.info("Simulated subscription to market %s (every %.1fs)", market_id, self._interval)
        return sub

    async def close(self) -> None:
        tasks = list(self._tasks.items())
        for sub, task in tasks:
            sub.cancel()
            if not task.done():
                task.cancel()
        for _, task in tasks:
            try:
                await task
            except asyncio.CancelledError:
                pass
        logger.info("Simulated dispatcher closed")

    @property
    def active_count(self) -> int:
        return len(self._tasks)

    # --- Internal ---

    def _release(self, sub: Subscription) -> None:
        # The task notices the cancelled event on its next wait and exits.
        self._tasks.pop(sub, None)

    async def _run(self, sub: Subscription) -> None:
        start = odds = self._seed_odds.get(sub.market_id, self.DEFAULT_ODDS)
        while not await sub.wait_cancelled(self._interval):
            try:
                odds = self._sim.step_odds(odds)
                update = MarketUpdate(market_id=sub.market_id, odds=odds, change_24h=odds - start)
            except Exception:
                logger.exception("Simulated update for market %s failed", sub.market_id)
                continue
            await sub.deliver(update)


class LiveSubscriptionDispatcher(SubscriptionDispatcher):
    """Relays a shared MarketStream to per-market listeners.

    One reader task serves every subscription. It starts with the first
    subscribe and is torn down, closing the stream, only when the last
    subscription is cancelled.
    """

    def __init__(self, stream: MarketStream) -> None:
        self._stream = stream
        self._listeners: dict[str, list[Subscription]] = {}
        self._reader: asyncio.Task | None = None
        self._shutdown: asyncio.Task | None = None
        self._delivering = False

    async def subscribe(self, market_id: str, on_update: Listener) -> Subscription:
        if self._shutdown is not None:
            await self._shutdown

        market_id = str(market_id)
        sub = Subscription(market_id, on_update, self._release)
        self._listeners.setdefault(market_id, []).append(sub)

        if self._reader is None or self._reader.done():
            self._reader = asyncio.create_task(self._read_loop(), name="market-stream-reader")
            logger.info("Market stream reader started")

        try:
            await self._stream.send({"type": "subscribe", "marketId": market_id})
        except Exception:
            sub.cancel()
            raise
        logger.info("Live subscription to market %s", market_id)
        return sub

    async def close(self) -> None:
        for subs in list(self._listeners.values()):
            for sub in list(subs):
                sub.cancel()
        if self._shutdown is not None:
            await self._shutdown
        logger.info("Live dispatcher closed")

    @property
    def active_count(self) -> int:
        return sum(len(subs) for subs in self._listeners.values())

    # --- Internal ---

    def _release(self, sub: Subscription) -> None:
        subs = self._listeners.get(sub.market_id, [])
        if sub in subs:
            subs.remove(sub)
        if not subs:
            self._listeners.pop(sub.market_id, None)

        if self._listeners or self._reader is None:
            return

        reader, self._reader = self._reader, None
        self._shutdown = asyncio.create_task(self._teardown(reader), name="market-stream-teardown")

    async def _teardown(self, reader: asyncio.Task) -> None:
        # A reader mid-delivery finishes that delivery and exits on its own once
        # it sees no listeners; only an idle reader is cancelled.
        if not self._delivering:
            reader.cancel()
        try:
            await reader
        except asyncio.CancelledError:
            pass
        finally:
            await self._stream.close()
            if self._shutdown is asyncio.current_task():
                self._shutdown = None
            logger.info("Last subscription cancelled; market stream closed")

    async def _read_loop(self) -> None:
        try:
            async for message in self._stream.messages():
                self._delivering = True
                try:
                    await self._dispatch(message)
                finally:
                    self._delivering = False
                if not self._listeners:
                    break
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Market stream failed")

    async def _dispatch(self, message: Any) -> None:
        try:
            update = MarketUpdate.from_stream(message)
        except ValidationError as e:
            logger.warning("Dropping stream message: %s", e)
            return
        for sub in list(self._listeners.get(update.market_id, ())):
            await sub.deliver(update)
