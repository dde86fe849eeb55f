"""Duplex stream abstraction the streaming sessions sit on.

Sessions only see OutboundStream (send/close) and InboundStream (async
iteration that ends on normal close and raises on abort). Two bindings are
provided: MemoryStream for in-process use and tests, and WebSocket adapters
for the FastAPI routes.
"""
import asyncio
import json
import logging
from collections.abc import AsyncIterator
from typing import Any, Generic, Protocol, TypeVar

from fastapi import WebSocket, WebSocketDisconnect
from pydantic import BaseModel, ValidationError

from stock_stream.schemas import Order
from stock_stream.streaming.exceptions import (InvalidArgumentError,
                                               StreamCancelledError,
                                               TransportError)

logger = logging.getLogger(__name__)

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)


class OutboundStream(Protocol[M]):
    """Write side of a call: messages to the client, then a completion signal."""

    async def send(self, message: M) -> None:
        """Send one message. Raises StreamCancelledError if the peer is gone."""
        ...

    async def close(self) -> None:
        """Signal normal completion of the outbound stream."""
        ...


class InboundStream(Protocol[T]):
    """Read side of a call. Iteration stops on normal close and raises on abort."""

    def __aiter__(self) -> AsyncIterator[T]: ...


_END = object()


class MemoryStream(Generic[T]):
    """In-process ordered stream usable as either end of a call.

    Producers call send()/close()/abort(); the consumer iterates. Sending
    after close() raises TransportError, like writing to a closed socket.
    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue[Any] = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def send(self, message: T) -> None:
        if self._closed:
            raise TransportError("Stream is closed")
        await self._queue.put(message)

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self._queue.put(_END)

    async def abort(self, exc: BaseException) -> None:
        """Terminate the stream with an error; the consumer sees it raised."""
        if self._closed:
            return
        self._closed = True
        await self._queue.put(exc)

    async def __aiter__(self) -> AsyncIterator[T]:
        while True:
            item = await self._queue.get()
            if item is _END:
                return
            if isinstance(item, BaseException):
                raise item
            yield item

    def drain(self) -> list[T]:
        """Return everything queued so far without waiting (stops at close/abort)."""
        items: list[T] = []
        while not self._queue.empty():
            item = self._queue.get_nowait()
            if item is _END or isinstance(item, BaseException):
                break
            items.append(item)
        return items


class WebSocketOutbound(Generic[M]):
    """OutboundStream writing pydantic models as JSON text frames."""

    def __init__(self, websocket: WebSocket, stop_event: asyncio.Event | None = None) -> None:
        self._websocket = websocket
        self._stop_event = stop_event

    async def send(self, message: M) -> None:
        try:
            await self._websocket.send_json(message.model_dump(mode="json"))
        except WebSocketDisconnect as exc:
            if self._stop_event is not None:
                self._stop_event.set()
            raise StreamCancelledError("Client disconnected") from exc

    async def close(self) -> None:
        await self._websocket.close(code=1000)


class WebSocketOrderInbound:
    """InboundStream of Orders read from JSON frames.

    Frames are {"type": "order", ...order fields} and a final {"type": "complete"}
    marking the end of the client's stream. A disconnect before "complete" is a
    client abort.
    """

    def __init__(self, websocket: WebSocket) -> None:
        self._websocket = websocket

    async def __aiter__(self) -> AsyncIterator[Order]:
        while True:
            try:
                frame = await self._websocket.receive_json()
            except WebSocketDisconnect as exc:
                raise StreamCancelledError("Client aborted the order stream") from exc
            except json.JSONDecodeError as exc:
                raise InvalidArgumentError(f"Malformed order message: {exc}") from exc
            if not isinstance(frame, dict):
                raise InvalidArgumentError("Order message must be a JSON object")
            kind = frame.get("type")
            if kind == "complete":
                return
            if kind != "order":
                raise InvalidArgumentError(f"Unknown message type: {kind!r}")
            try:
                order = Order.model_validate(frame)
            except ValidationError as exc:
                raise InvalidArgumentError(
                    f"Malformed order: {exc.errors()[0]['msg']}"
                ) from exc
            yield order


async def watch_disconnect(websocket: WebSocket, stop_event: asyncio.Event) -> None:
    """Set stop_event once the client disconnects. Other client frames are ignored."""
    while not stop_event.is_set():
        message = await websocket.receive()
        if message["type"] == "websocket.disconnect":
            logger.debug("Client disconnect observed")
            stop_event.set()
            return
