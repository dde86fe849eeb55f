"""API routers.

Includes routes for:
- GET /stocks/{symbol} - stored price lookup
- WS /stocks/stream?symbol=... - server-streaming price ticks
- WS /orders/bulk - client-streaming bulk orders with one summary reply
"""
from stock_stream.routers.orders import router as orders_router
from stock_stream.routers.stocks import router as stocks_router

__all__ = ["orders_router", "stocks_router"]
