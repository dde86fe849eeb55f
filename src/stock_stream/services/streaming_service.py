"""Streaming service: unary price lookup and per-call streaming sessions.

Every call gets its own session, tick generator and stop event. The only
shared collaborators are the read-only stock store and the price model.
"""
import asyncio
import logging
from collections.abc import Callable

from stock_stream.schemas import Order, OrderSummary, PriceResponse
from stock_stream.stores import StockStoreABC
from stock_stream.streaming import (BulkOrderSession, InboundStream,
                                    InvalidArgumentError, NotFoundError,
                                    OutboundStream, PriceModel,
                                    PriceStreamSession, TickGenerator)

logger = logging.getLogger(__name__)


def keep_symbol(symbol: str | None) -> str:
    """Pass a requested symbol through unchanged (None becomes "")."""
    return symbol or ""


def normalize_symbol(symbol: str | None) -> str:
    """Strip and upper-case a stock symbol. Opt-in via symbol_normalizer."""
    return (symbol or "").strip().upper()


class StreamingService:
    """Entry points for GetPrice, SubscribePrice and PlaceBulkOrder."""

    def __init__(
        self,
        store: StockStoreABC,
        price_model: PriceModel,
        *,
        tick_count: int = 10,
        tick_interval: float = 1.0,
        max_duration: float | None = None,
        partial_summary_on_error: bool = False,
        symbol_normalizer: Callable[[str | None], str] = keep_symbol,
    ) -> None:
        """Initialize with the stock store and the tick policy.

        Args:
            store: Read-only stock store used by GetPrice.
            price_model: Price policy for SubscribePrice ticks.
            tick_count: Ticks per subscription.
            tick_interval: Seconds between ticks.
            max_duration: Optional cap on a subscription's length in seconds.
            partial_summary_on_error: Send a PartialOrderSummary when a bulk order
                stream is aborted by the client.
            symbol_normalizer: Applied to every requested symbol. Defaults to
                keep_symbol, so lookups and responses use the symbol as sent.
        """
        self._store = store
        self._price_model = price_model
        self._tick_count = tick_count
        self._tick_interval = tick_interval
        self._max_duration = max_duration
        self._partial_summary_on_error = partial_summary_on_error
        self._normalize = symbol_normalizer

    async def get_price(self, symbol: str) -> PriceResponse:
        """Look up the stored price for symbol.

        Raises:
            InvalidArgumentError: symbol is blank.
            NotFoundError: the store has no record for symbol.
        """
        norm = self._normalize(symbol)
        if not norm.strip():
            raise InvalidArgumentError("Stock symbol is required")
        record = await asyncio.to_thread(self._store.get, norm)
        if record is None:
            raise NotFoundError(norm)
        return PriceResponse.from_record(record)

    def create_tick_generator(self, symbol: str, stop_event: asyncio.Event) -> TickGenerator:
        """New tick generator for one subscription, bound to its stop event."""
        return TickGenerator(
            symbol,
            self._price_model,
            tick_count=self._tick_count,
            tick_interval=self._tick_interval,
            max_duration=self._max_duration,
            stop_event=stop_event,
        )

    def create_price_session(
        self,
        symbol: str,
        outbound: OutboundStream[PriceResponse],
        stop_event: asyncio.Event | None = None,
    ) -> PriceStreamSession:
        """New, independent SubscribePrice session for one call."""
        return PriceStreamSession(
            self._normalize(symbol),
            self.create_tick_generator,
            outbound,
            stop_event=stop_event,
        )

    async def subscribe_price(
        self,
        symbol: str,
        outbound: OutboundStream[PriceResponse],
        stop_event: asyncio.Event | None = None,
    ) -> int:
        """Run a SubscribePrice call to completion. Returns the number of ticks sent."""
        session = self.create_price_session(symbol, outbound, stop_event)
        return await session.run()

    def create_bulk_order_session(
        self,
        inbound: InboundStream[Order],
        outbound: OutboundStream[OrderSummary],
    ) -> BulkOrderSession:
        """New, independent PlaceBulkOrder session for one call."""
        return BulkOrderSession(
            inbound,
            outbound,
            partial_summary_on_error=self._partial_summary_on_error,
        )

    async def place_bulk_order(
        self,
        inbound: InboundStream[Order],
        outbound: OutboundStream[OrderSummary],
    ) -> OrderSummary | None:
        """Run a PlaceBulkOrder call. Returns the summary, or None if the client aborted."""
        session = self.create_bulk_order_session(inbound, outbound)
        return await session.run()

    def close(self) -> None:
        """Release the stock store."""
        try:
            self._store.close()
        except Exception as exc:  # pylint: disable=broad-except
            logger.warning("Error closing stock store %s: %s", type(self._store).__name__, exc)
