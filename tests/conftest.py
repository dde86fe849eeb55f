"""Shared fixtures."""

import random
from datetime import datetime, timezone

import pytest

from stock_stream.db import OrderSide
from stock_stream.schemas import Order, PriceRecord
from stock_stream.services import StreamingService
from stock_stream.stores import InMemoryStockStore
from stock_stream.streaming import SyntheticUniformPriceModel

AAPL_UPDATED = datetime(2024, 1, 2, 15, 30, tzinfo=timezone.utc)


@pytest.fixture
def store() -> InMemoryStockStore:
    return InMemoryStockStore(
        [
            PriceRecord(symbol="AAPL", price=150.5, last_updated=AAPL_UPDATED),
            PriceRecord(symbol="TSLA", price=700.0),
        ]
    )


@pytest.fixture
def price_model() -> SyntheticUniformPriceModel:
    return SyntheticUniformPriceModel(0.0, 200.0, rng=random.Random(42))


@pytest.fixture
def service(store, price_model) -> StreamingService:
    return StreamingService(store, price_model, tick_count=5, tick_interval=0)


@pytest.fixture
def sample_orders() -> list[Order]:
    return [
        Order(order_id="1", symbol="AAPL", side=OrderSide.BUY, price=150.5, quantity=10),
        Order(order_id="2", symbol="GOOGL", side=OrderSide.SELL, price=2700.0, quantity=5),
        Order(order_id="3", symbol="TSLA", side=OrderSide.BUY, price=700.0, quantity=8),
    ]
