"""Tests for BulkOrderSession."""

import asyncio

import pytest

from stock_stream.schemas import Order, OrderSummary, PartialOrderSummary
from stock_stream.streaming import (BulkOrderSession, InvalidArgumentError,
                                    MemoryStream, StreamCancelledError,
                                    StreamErrorCode, StreamState,
                                    TransportError)


async def _inbound(orders, *, error: Exception | None = None) -> MemoryStream[Order]:
    stream = MemoryStream[Order]()
    for order in orders:
        await stream.send(order)
    if error is None:
        await stream.close()
    else:
        await stream.abort(error)
    return stream


class BrokenOutbound:
    async def send(self, message):
        raise OSError("broken pipe")

    async def close(self):
        raise AssertionError("close after failed send")


@pytest.mark.asyncio
async def test_emits_single_summary_on_close(sample_orders):
    outbound = MemoryStream[OrderSummary]()
    session = BulkOrderSession(await _inbound(sample_orders), outbound)

    summary = await session.run()

    assert summary == OrderSummary(total_orders=3, success_count=3, total_amount=20605.0)
    assert outbound.drain() == [summary]
    assert outbound.closed
    assert session.state is StreamState.COMPLETED
    assert session.error is None


@pytest.mark.asyncio
async def test_empty_stream_emits_zero_summary():
    outbound = MemoryStream[OrderSummary]()
    summary = await BulkOrderSession(await _inbound([]), outbound).run()
    assert summary == OrderSummary()
    assert outbound.drain() == [OrderSummary()]


@pytest.mark.asyncio
async def test_client_abort_emits_nothing(sample_orders):
    abort = StreamCancelledError("client aborted")
    outbound = MemoryStream[OrderSummary]()
    session = BulkOrderSession(await _inbound(sample_orders[:2], error=abort), outbound)

    assert await session.run() is None

    assert outbound.drain() == []
    assert not outbound.closed
    assert session.state is StreamState.FAILED
    assert session.outcome.reason is StreamErrorCode.CANCELLED
    assert session.error is abort
    assert session.summary.total_orders == 2


@pytest.mark.asyncio
async def test_malformed_message_fails_call(sample_orders):
    outbound = MemoryStream[OrderSummary]()
    error = InvalidArgumentError("Malformed order")
    session = BulkOrderSession(await _inbound(sample_orders[:1], error=error), outbound)

    assert await session.run() is None
    assert session.outcome.reason is StreamErrorCode.INVALID_ARGUMENT
    assert outbound.drain() == []


@pytest.mark.asyncio
async def test_partial_summary_when_enabled(sample_orders):
    outbound = MemoryStream[OrderSummary]()
    session = BulkOrderSession(
        await _inbound(sample_orders[:2], error=StreamCancelledError("client aborted")),
        outbound,
        partial_summary_on_error=True,
    )

    assert await session.run() is None

    (partial,) = outbound.drain()
    assert isinstance(partial, PartialOrderSummary)
    assert partial.partial is True
    assert partial.total_orders == 2
    assert partial.total_amount == 150.5 * 10 + 2700.0 * 5
    assert partial.error == "client aborted"
    assert outbound.closed
    assert session.state is StreamState.FAILED


@pytest.mark.asyncio
async def test_partial_summary_to_gone_peer_is_dropped(sample_orders):
    session = BulkOrderSession(
        await _inbound(sample_orders, error=StreamCancelledError("gone")),
        BrokenOutbound(),
        partial_summary_on_error=True,
    )
    assert await session.run() is None
    assert session.outcome.reason is StreamErrorCode.CANCELLED


@pytest.mark.asyncio
async def test_summary_write_failure(sample_orders):
    session = BulkOrderSession(await _inbound(sample_orders), BrokenOutbound())

    with pytest.raises(TransportError):
        await session.run()
    assert session.state is StreamState.FAILED
    assert session.outcome.reason is StreamErrorCode.TRANSPORT


@pytest.mark.asyncio
async def test_task_cancellation_while_receiving(sample_orders):
    inbound = MemoryStream[Order]()
    await inbound.send(sample_orders[0])
    outbound = MemoryStream[OrderSummary]()
    session = BulkOrderSession(inbound, outbound)

    task = asyncio.create_task(session.run())
    await asyncio.sleep(0.01)
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task
    assert session.outcome.reason is StreamErrorCode.CANCELLED
    assert outbound.drain() == []


@pytest.mark.asyncio
async def test_sessions_keep_separate_totals(sample_orders):
    first_out = MemoryStream[OrderSummary]()
    second_out = MemoryStream[OrderSummary]()
    first = BulkOrderSession(await _inbound(sample_orders), first_out)
    second = BulkOrderSession(await _inbound(sample_orders[:1]), second_out)

    a, b = await asyncio.gather(first.run(), second.run())

    assert a.total_orders == 3
    assert b.total_orders == 1
    assert b.total_amount == 1505.0
