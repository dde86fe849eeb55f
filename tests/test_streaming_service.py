"""Tests for StreamingService and its factories."""

import asyncio

import pytest

from stock_stream.config import PriceModelName, Settings, StockStoreName
from stock_stream.schemas import Order, OrderSummary, PartialOrderSummary, PriceResponse
from stock_stream.services import (StreamingService, create_streaming_service,
                                   normalize_symbol)
from stock_stream.services.factory import create_price_model, create_stock_store
from stock_stream.stores import InMemoryStockStore, SqlStockStore
from stock_stream.streaming import (ExternalFeedPriceModel,
                                    InvalidArgumentError, MemoryStream,
                                    NotFoundError, StreamCancelledError,
                                    StreamState, SyntheticUniformPriceModel)


class TestGetPrice:
    @pytest.mark.asyncio
    async def test_known_symbol(self, service, store):
        response = await service.get_price("AAPL")
        expected = PriceResponse(
            symbol="AAPL", price=150.5, timestamp=store.get("AAPL").last_updated
        )
        assert response == expected
        assert response.timestamp is not None

    @pytest.mark.asyncio
    async def test_symbol_is_looked_up_as_sent(self, service):
        with pytest.raises(NotFoundError, match="Stock aapl is not available in system"):
            await service.get_price("aapl")

    @pytest.mark.asyncio
    async def test_opt_in_normalizer(self, store, price_model):
        service = StreamingService(store, price_model, symbol_normalizer=normalize_symbol)
        response = await service.get_price("  aapl ")
        assert response.symbol == "AAPL"

    @pytest.mark.asyncio
    async def test_missing_last_updated(self, service):
        response = await service.get_price("TSLA")
        assert response.timestamp is None

    @pytest.mark.asyncio
    async def test_unknown_symbol(self, service):
        with pytest.raises(NotFoundError, match="Stock XYZ is not available in system"):
            await service.get_price("XYZ")

    @pytest.mark.asyncio
    async def test_blank_symbol(self, service):
        with pytest.raises(InvalidArgumentError):
            await service.get_price("  ")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "symbol", ["AAPL", "TSLA", "GOOGL", "MSFT", "X", "aapl", "AAPL ", " TSLA"]
    )
    async def test_not_found_iff_store_has_no_record(self, service, store, symbol):
        if store.get(symbol) is None:
            with pytest.raises(NotFoundError):
                await service.get_price(symbol)
        else:
            assert (await service.get_price(symbol)).symbol == symbol


class TestSubscribePrice:
    @pytest.mark.asyncio
    async def test_emits_configured_tick_count(self, service):
        outbound = MemoryStream[PriceResponse]()
        sent = await service.subscribe_price("AAPL", outbound)
        assert sent == 5
        messages = outbound.drain()
        assert len(messages) == 5
        assert {m.symbol for m in messages} == {"AAPL"}
        assert outbound.closed

    @pytest.mark.asyncio
    async def test_ticks_echo_symbol_as_sent(self, service):
        outbound = MemoryStream[PriceResponse]()
        await service.subscribe_price("aapl", outbound)
        assert {m.symbol for m in outbound.drain()} == {"aapl"}

    @pytest.mark.asyncio
    async def test_sessions_are_independent(self, service):
        a = service.create_price_session("AAPL", MemoryStream())
        b = service.create_price_session("AAPL", MemoryStream())
        assert a is not b
        await a.run()
        assert a.state is StreamState.CLOSED
        assert b.state is StreamState.OPEN

    @pytest.mark.asyncio
    async def test_preset_stop_event_cancels(self, service):
        stop = asyncio.Event()
        stop.set()
        outbound = MemoryStream[PriceResponse]()
        with pytest.raises(StreamCancelledError):
            await service.subscribe_price("AAPL", outbound, stop)
        assert outbound.drain() == []


class TestPlaceBulkOrder:
    @pytest.mark.asyncio
    async def test_sample_scenario(self, service, sample_orders):
        inbound = MemoryStream[Order]()
        for order in sample_orders:
            await inbound.send(order)
        await inbound.close()
        outbound = MemoryStream[OrderSummary]()

        summary = await service.place_bulk_order(inbound, outbound)

        assert summary.total_orders == 3
        assert summary.success_count == 3
        assert summary.total_amount == 20605.0
        assert outbound.drain() == [summary]

    @pytest.mark.asyncio
    async def test_partial_policy_is_passed_to_sessions(self, store, price_model, sample_orders):
        service = StreamingService(store, price_model, partial_summary_on_error=True)
        inbound = MemoryStream[Order]()
        await inbound.send(sample_orders[0])
        await inbound.abort(StreamCancelledError("client aborted"))
        outbound = MemoryStream[OrderSummary]()

        assert await service.place_bulk_order(inbound, outbound) is None
        (partial,) = outbound.drain()
        assert isinstance(partial, PartialOrderSummary)
        assert partial.total_orders == 1


class TestFactory:
    def test_default_store_is_memory(self):
        store = create_stock_store(Settings())
        assert isinstance(store, InMemoryStockStore)
        assert store.get("AAPL") is not None

    def test_sql_store(self):
        store = create_stock_store(Settings(stock_store=StockStoreName.SQL, database_url="sqlite://"))
        try:
            assert isinstance(store, SqlStockStore)
            assert store.get("AAPL") is None
        finally:
            store.close()

    def test_price_model_selection(self, store):
        assert isinstance(create_price_model(Settings(), store), SyntheticUniformPriceModel)
        external = Settings(price_model=PriceModelName.EXTERNAL_FEED)
        assert isinstance(create_price_model(external, store), ExternalFeedPriceModel)

    @pytest.mark.asyncio
    async def test_external_feed_streams_stored_price(self, store):
        settings = Settings(
            price_model=PriceModelName.EXTERNAL_FEED, tick_count=2, tick_interval=0
        )
        service = create_streaming_service(settings, store)
        outbound = MemoryStream[PriceResponse]()

        assert await service.subscribe_price("AAPL", outbound) == 2
        assert [m.price for m in outbound.drain()] == [150.5, 150.5]

        with pytest.raises(NotFoundError):
            await service.subscribe_price("XYZ", MemoryStream())
