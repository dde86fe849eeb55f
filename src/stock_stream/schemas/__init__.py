"""Pydantic schemas for wire messages and runtime values. Not persisted to DB."""
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from stock_stream.db import OrderSide

UINT32_MAX = 2**32 - 1


class StockRequest(BaseModel):
    """Request carrying a single stock symbol (GetPrice, SubscribePrice)."""

    symbol: str


class PriceRecord(BaseModel):
    """Stored reference price for a symbol. Read-only to the streaming core."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    price: float
    last_updated: datetime | None = None


class PriceTick(BaseModel):
    """One discrete price update produced by a TickGenerator."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    price: float
    timestamp: datetime


class PriceResponse(BaseModel):
    """Price message sent to clients (unary lookup and each streamed tick)."""

    symbol: str
    price: float
    timestamp: datetime | None = None  # absent when the stored record was never updated

    @classmethod
    def from_tick(cls, tick: PriceTick) -> "PriceResponse":
        return cls(symbol=tick.symbol, price=tick.price, timestamp=tick.timestamp)

    @classmethod
    def from_record(cls, record: PriceRecord) -> "PriceResponse":
        return cls(symbol=record.symbol, price=record.price, timestamp=record.last_updated)


class Order(BaseModel):
    """A single order inside a bulk order upload."""

    order_id: str
    symbol: str
    side: OrderSide
    price: float
    quantity: int = Field(ge=0, le=UINT32_MAX)


class OrderSummary(BaseModel):
    """Aggregate of every order received in one bulk order call."""

    model_config = ConfigDict(frozen=True)

    total_orders: int = 0
    success_count: int = 0
    total_amount: float = 0.0


class PartialOrderSummary(OrderSummary):
    """Summary sent on client abort when partial summaries are enabled."""

    partial: Literal[True] = True
    error: str


__all__ = [
    "Order",
    "OrderSide",
    "OrderSummary",
    "PartialOrderSummary",
    "PriceRecord",
    "PriceResponse",
    "PriceTick",
    "StockRequest",
]
