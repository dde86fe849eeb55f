"""Abstract base class for stock stores."""
from abc import ABC, abstractmethod

from stock_stream.schemas import PriceRecord


class StockStoreABC(ABC):
    """Read-only lookup of reference prices by symbol.

    Lookups are synchronous and side-effect free, so one store may be shared
    by every concurrent call without locking. Async callers should run get()
    in a worker thread (asyncio.to_thread).
    """

    @abstractmethod
    def get(self, symbol: str) -> PriceRecord | None:
        """Return the record for symbol, or None when the symbol is unknown.

        Args:
            symbol: Normalized stock symbol (e.g. "AAPL").
        """

    def close(self) -> None:
        """Release resources (connections). Override if needed."""
