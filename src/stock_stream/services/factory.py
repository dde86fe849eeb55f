"""Factories building the stock store, price model and StreamingService from Settings."""
import asyncio
from collections.abc import Awaitable, Callable

from stock_stream.config import PriceModelName, Settings, StockStoreName
from stock_stream.db.sessions import create_db_engine
from stock_stream.stores import InMemoryStockStore, SqlStockStore, StockStoreABC
from stock_stream.streaming import (ExternalFeedPriceModel, PriceModel,
                                    SyntheticUniformPriceModel)
from stock_stream.services.streaming_service import StreamingService


def create_stock_store(settings: Settings) -> StockStoreABC:
    """Stock store selected by settings.stock_store."""
    if settings.stock_store is StockStoreName.SQL:
        return SqlStockStore(create_db_engine(settings.database_url))
    return InMemoryStockStore.with_defaults()


def store_price_feed(store: StockStoreABC) -> Callable[[str], Awaitable[float | None]]:
    """Async price feed reading the stock store in a worker thread."""

    async def fetch(symbol: str) -> float | None:
        record = await asyncio.to_thread(store.get, symbol)
        return record.price if record is not None else None

    return fetch


def create_price_model(settings: Settings, store: StockStoreABC) -> PriceModel:
    """Price model selected by settings.price_model."""
    if settings.price_model is PriceModelName.EXTERNAL_FEED:
        return ExternalFeedPriceModel(store_price_feed(store))
    low, high = settings.price_range
    return SyntheticUniformPriceModel(low, high)


def create_streaming_service(
    settings: Settings,
    store: StockStoreABC | None = None,
) -> StreamingService:
    """Create a StreamingService wired from settings.

    Args:
        settings: Runtime settings (tick policy, price model, store).
        store: Optional store to use instead of the one settings selects.

    Returns:
        A configured StreamingService instance.
    """
    store = store if store is not None else create_stock_store(settings)
    return StreamingService(
        store,
        create_price_model(settings, store),
        tick_count=settings.tick_count,
        tick_interval=settings.tick_interval,
        max_duration=settings.max_duration,
        partial_summary_on_error=settings.partial_summary_on_error,
    )
