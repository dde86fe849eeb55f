"""Order routes: the client-streaming bulk order upload."""
from fastapi import APIRouter, WebSocket

from stock_stream.dependencies import StreamingServiceWs
from stock_stream.services.utils import handle_bulk_order_websocket

router = APIRouter(prefix="/orders", tags=["orders"])


@router.websocket("/bulk")
async def place_bulk_order(websocket: WebSocket, service: StreamingServiceWs) -> None:
    """Receive a stream of orders and reply with one OrderSummary.

    Send {"type": "order", "order_id", "symbol", "side", "price", "quantity"}
    frames, then {"type": "complete"}. The server answers with a single
    OrderSummary JSON and closes with code 1000. Disconnecting before
    "complete" aborts the call and no summary is sent.
    """
    await handle_bulk_order_websocket(websocket, service)
