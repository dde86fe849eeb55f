"""CLI entry point seeding the stock table.

Usage:
  stock-seed-db                  # default symbols into DATABASE_URL
  stock-seed-db AAPL=150.5 TSLA=700
"""
import sys
from datetime import datetime, timezone

from stock_stream.db.sessions import create_db_engine
from stock_stream.schemas import PriceRecord
from stock_stream.stores.memory import DEFAULT_PRICES
from stock_stream.stores.sql import SqlStockStore


def _parse_prices(args: list[str]) -> dict[str, float]:
    prices: dict[str, float] = {}
    for arg in args:
        symbol, sep, price = arg.partition("=")
        if not sep or not symbol.strip():
            raise ValueError(f"Expected SYMBOL=PRICE, got {arg!r}")
        prices[symbol.strip().upper()] = float(price)
    return prices


def seed() -> None:
    """Insert or update stock prices. Pass SYMBOL=PRICE pairs to override the defaults."""
    try:
        prices = _parse_prices(sys.argv[1:]) or DEFAULT_PRICES
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)
    now = datetime.now(timezone.utc)
    store = SqlStockStore(create_db_engine())
    try:
        count = store.seed(
            PriceRecord(symbol=s, price=p, last_updated=now) for s, p in prices.items()
        )
    finally:
        store.close()
    print(f"Seeded {count} stocks")
