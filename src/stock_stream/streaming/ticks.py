"""Price models and the paced, bounded tick generator behind SubscribePrice."""
import asyncio
import random
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone

from stock_stream.schemas import PriceTick
from stock_stream.streaming.exceptions import NotFoundError, StreamCancelledError


class PriceModel(ABC):
    """Policy deciding the price of the next tick for a symbol."""

    @abstractmethod
    async def price_for(self, symbol: str) -> float:
        """Return the price to publish for symbol."""


class SyntheticUniformPriceModel(PriceModel):
    """Simulated prices drawn uniformly from [low, high)."""

    def __init__(
        self,
        low: float = 0.0,
        high: float = 200.0,
        rng: random.Random | None = None,
    ) -> None:
        if high <= low:
            raise ValueError(f"Price range is empty: [{low}, {high})")
        self._low = low
        self._high = high
        self._rng = rng or random.Random()

    async def price_for(self, symbol: str) -> float:
        return self._low + (self._high - self._low) * self._rng.random()


class ExternalFeedPriceModel(PriceModel):
    """Prices read from an external feed, e.g. the stock store or a live quote source."""

    def __init__(self, fetch: Callable[[str], Awaitable[float | None]]) -> None:
        self._fetch = fetch

    async def price_for(self, symbol: str) -> float:
        price = await self._fetch(symbol)
        if price is None:
            raise NotFoundError(symbol)
        return price


class TickGenerator:
    """Bounded sequence of PriceTicks for one symbol, paced by tick_interval.

    The first tick is produced immediately, every following one after a pacing
    wait on stop_event. Setting stop_event cancels the generator at the next
    pacing boundary (StreamCancelledError). The sequence ends after tick_count
    ticks or once max_duration seconds have passed since the first tick,
    whichever comes first. A generator is single-use.
    """

    def __init__(
        self,
        symbol: str,
        price_model: PriceModel,
        *,
        tick_count: int = 10,
        tick_interval: float = 1.0,
        max_duration: float | None = None,
        stop_event: asyncio.Event | None = None,
    ) -> None:
        if tick_count < 0:
            raise ValueError("tick_count must be >= 0")
        if tick_interval < 0:
            raise ValueError("tick_interval must be >= 0")
        self._symbol = symbol
        self._price_model = price_model
        self._tick_count = tick_count
        self._tick_interval = tick_interval
        self._max_duration = max_duration
        self._stop_event = stop_event or asyncio.Event()
        self._emitted = 0
        self._started_at: float | None = None
        self._exhausted = False

    @property
    def emitted(self) -> int:
        return self._emitted

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    async def next(self) -> PriceTick | None:
        """Return the next tick, or None at end of stream."""
        if self._exhausted or self._emitted >= self._tick_count:
            self._exhausted = True
            return None
        loop = asyncio.get_running_loop()
        if self._started_at is None:
            self._started_at = loop.time()
            self._raise_if_cancelled()
        else:
            await self._pace()
            if self._max_duration is not None and (
                loop.time() - self._started_at >= self._max_duration
            ):
                self._exhausted = True
                return None
        price = await self._price_model.price_for(self._symbol)
        self._raise_if_cancelled()
        self._emitted += 1
        return PriceTick(
            symbol=self._symbol,
            price=price,
            timestamp=datetime.now(timezone.utc),
        )

    async def aclose(self) -> None:
        """Release the generator; later next() calls return None."""
        self._exhausted = True

    def __aiter__(self) -> "TickGenerator":
        return self

    async def __anext__(self) -> PriceTick:
        tick = await self.next()
        if tick is None:
            raise StopAsyncIteration
        return tick

    async def _pace(self) -> None:
        self._raise_if_cancelled()
        if self._tick_interval <= 0:
            await asyncio.sleep(0)
        else:
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self._tick_interval)
            except asyncio.TimeoutError:
                return
        self._raise_if_cancelled()

    def _raise_if_cancelled(self) -> None:
        if self._stop_event.is_set():
            self._exhausted = True
            raise StreamCancelledError(f"Price stream for {self._symbol} cancelled")
