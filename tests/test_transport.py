"""Tests for the in-process MemoryStream."""

import pytest

from stock_stream.streaming import MemoryStream, StreamCancelledError, TransportError


@pytest.mark.asyncio
async def test_preserves_order_and_ends_on_close():
    stream = MemoryStream[int]()
    for i in range(5):
        await stream.send(i)
    await stream.close()
    assert [i async for i in stream] == [0, 1, 2, 3, 4]


@pytest.mark.asyncio
async def test_send_after_close_fails():
    stream = MemoryStream[int]()
    await stream.close()
    with pytest.raises(TransportError):
        await stream.send(1)


@pytest.mark.asyncio
async def test_abort_raises_to_consumer():
    stream = MemoryStream[int]()
    await stream.send(1)
    await stream.abort(StreamCancelledError("client aborted"))
    received = []
    with pytest.raises(StreamCancelledError):
        async for item in stream:
            received.append(item)
    assert received == [1]
    assert stream.closed
