"""Stock stores: read-only price lookup by symbol.

- InMemoryStockStore: dict-backed, seeded with defaults for local runs and tests
- SqlStockStore: SQLModel `stock` table (SQLite by default, any SQLAlchemy URL)
"""
from stock_stream.stores.memory import InMemoryStockStore
from stock_stream.stores.sql import SqlStockStore
from stock_stream.stores.stock_store_abc import StockStoreABC

__all__ = ["InMemoryStockStore", "SqlStockStore", "StockStoreABC"]
