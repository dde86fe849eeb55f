"""WebSocket call handling: bind streaming sessions to a FastAPI WebSocket."""
import asyncio
import logging

from fastapi import WebSocket
from fastapi.websockets import WebSocketState

from stock_stream.services.streaming_service import StreamingService
from stock_stream.streaming import StreamCancelledError, StreamErrorMapper
from stock_stream.streaming.transport import (WebSocketOrderInbound,
                                              WebSocketOutbound,
                                              watch_disconnect)

logger = logging.getLogger(__name__)

_error_mapper = StreamErrorMapper()


async def close_with_error(websocket: WebSocket, exc: BaseException) -> None:
    """Close the WebSocket with the close code mapped from exc, if still open."""
    if websocket.application_state == WebSocketState.DISCONNECTED:
        return
    code, reason = _error_mapper.to_ws_close(exc)
    try:
        await websocket.close(code=code, reason=reason)
    except Exception as close_exc:  # pylint: disable=broad-except
        logger.debug("WebSocket already closed: %s", close_exc)


async def handle_price_websocket(
    websocket: WebSocket,
    service: StreamingService,
    symbol: str,
) -> None:
    """Accept WebSocket and run one SubscribePrice session over it.

    Uses a per-connection stop_event, set when the client disconnects, so the
    session stops at its next pacing boundary without touching other clients.
    """
    await websocket.accept()
    stop_event = asyncio.Event()
    session = service.create_price_session(
        symbol, WebSocketOutbound(websocket, stop_event), stop_event
    )
    watcher = asyncio.create_task(watch_disconnect(websocket, stop_event))
    try:
        await session.run()
    except StreamCancelledError:
        logger.debug("Price stream client disconnected")
    except Exception as exc:  # pylint: disable=broad-except
        if session.symbol is None:
            logger.info("Price stream rejected: %s", exc)
        else:
            logger.exception("Price stream error: %s", exc)
        await close_with_error(websocket, exc)
    finally:
        stop_event.set()
        watcher.cancel()
        await asyncio.gather(watcher, return_exceptions=True)


async def handle_bulk_order_websocket(
    websocket: WebSocket,
    service: StreamingService,
) -> None:
    """Accept WebSocket and run one PlaceBulkOrder session over it."""
    await websocket.accept()
    session = service.create_bulk_order_session(
        WebSocketOrderInbound(websocket), WebSocketOutbound(websocket)
    )
    try:
        summary = await session.run()
    except StreamCancelledError:
        logger.debug("Bulk order client disconnected before the summary")
        return
    except Exception as exc:  # pylint: disable=broad-except
        logger.exception("Bulk order stream error: %s", exc)
        await close_with_error(websocket, exc)
        return
    if summary is None and session.error is not None:
        await close_with_error(websocket, session.error)
