"""Service utilities: WebSocket call handling."""
from stock_stream.services.utils.stream_handler import (
    close_with_error,
    handle_bulk_order_websocket,
    handle_price_websocket,
)

__all__ = [
    "close_with_error",
    "handle_bulk_order_websocket",
    "handle_price_websocket",
]
