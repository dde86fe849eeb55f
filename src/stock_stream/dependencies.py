"""FastAPI dependency injection: app.state.container holds singletons; Depends() resolves them."""
from typing import Annotated

from fastapi import Depends, Request, WebSocket

from stock_stream.services import StreamingService


def get_streaming_service(request: Request) -> StreamingService:
    """Resolve the StreamingService from the app container (created at startup)."""
    return request.app.state.container.streaming_service()


def get_streaming_service_ws(websocket: WebSocket) -> StreamingService:
    """Resolve the StreamingService for WebSocket routes."""
    return websocket.scope["app"].state.container.streaming_service()


# Type aliases for route injection
StreamingServiceDep = Annotated[StreamingService, Depends(get_streaming_service)]
StreamingServiceWs = Annotated[StreamingService, Depends(get_streaming_service_ws)]
