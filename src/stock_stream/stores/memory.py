"""In-memory stock store."""
from collections.abc import Iterable
from datetime import datetime, timezone

from stock_stream.schemas import PriceRecord
from stock_stream.stores.stock_store_abc import StockStoreABC

DEFAULT_PRICES = {
    "AAPL": 150.5,
    "GOOGL": 2700.0,
    "TSLA": 700.0,
    "MSFT": 410.25,
    "AMZN": 178.4,
}


class InMemoryStockStore(StockStoreABC):
    """Stock store backed by a dict keyed by symbol."""

    def __init__(self, records: Iterable[PriceRecord] = ()) -> None:
        self._records = {r.symbol: r for r in records}

    @classmethod
    def with_defaults(cls) -> "InMemoryStockStore":
        """Store seeded with a handful of well-known symbols."""
        now = datetime.now(timezone.utc)
        return cls(
            PriceRecord(symbol=s, price=p, last_updated=now)
            for s, p in DEFAULT_PRICES.items()
        )

    def get(self, symbol: str) -> PriceRecord | None:
        return self._records.get(symbol)

    def __len__(self) -> int:
        return len(self._records)
