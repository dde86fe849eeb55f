"""Database models for the stock trading stream service.

Only stock reference prices are persisted. Orders are folded into a summary
per call and never stored.
"""
from datetime import datetime
from enum import Enum

from sqlmodel import Field, SQLModel


class OrderSide(str, Enum):
    """Side of an order."""

    BUY = "BUY"
    SELL = "SELL"


class Stock(SQLModel, table=True):
    """Reference price for a tradable symbol."""

    id: int | None = Field(default=None, primary_key=True)
    stock_symbol: str = Field(unique=True, index=True)
    price: float
    last_updated: datetime | None = None
