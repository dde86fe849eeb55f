"""Stock price routes: unary lookup and the server-streaming price subscription."""
import logging

from fastapi import APIRouter, WebSocket

from stock_stream.dependencies import StreamingServiceDep, StreamingServiceWs
from stock_stream.schemas import PriceResponse, StockRequest
from stock_stream.services.utils import handle_price_websocket
from stock_stream.streaming import StreamError, StreamErrorMapper

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/stocks", tags=["stocks"])

_error_mapper = StreamErrorMapper(resource_name="Stock")


@router.websocket("/stream")
async def subscribe_price(websocket: WebSocket, service: StreamingServiceWs) -> None:
    """Stream price ticks for one symbol over WebSocket.

    Pass the symbol as query param: /stocks/stream?symbol=AAPL
    Each message is a PriceResponse JSON; the server closes with code 1000
    after the last tick. A missing symbol closes with code 4000.
    """
    request = StockRequest(symbol=websocket.query_params.get("symbol") or "")
    await handle_price_websocket(websocket, service, request.symbol)


@router.get("/{symbol}", response_model=PriceResponse)
async def get_price(symbol: str, service: StreamingServiceDep) -> PriceResponse:
    """Get the stored price for a stock symbol.

    Args:
        symbol: Stock ticker (e.g., "AAPL", "TSLA").

    Returns:
        The stored price and its last update time (null if never updated).
    """
    try:
        return await service.get_price(symbol)
    except StreamError as e:
        _error_mapper.raise_http(e)
