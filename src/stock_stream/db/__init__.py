"""Database package: models and session management."""
from stock_stream.db.models import OrderSide, Stock

__all__ = ["OrderSide", "Stock"]
