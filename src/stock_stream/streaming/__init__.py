"""Streaming protocol engine: tick generation, per-call sessions and transport."""
from stock_stream.streaming.aggregator import OrderAggregator
from stock_stream.streaming.error_mapper import StreamErrorMapper
from stock_stream.streaming.exceptions import (IllegalStateTransition,
                                               InvalidArgumentError,
                                               NotFoundError,
                                               StreamCancelledError,
                                               StreamError, StreamErrorCode,
                                               TransportError)
from stock_stream.streaming.order_session import BulkOrderSession
from stock_stream.streaming.price_session import PriceStreamSession
from stock_stream.streaming.state import StreamOutcome, StreamState
from stock_stream.streaming.ticks import (ExternalFeedPriceModel, PriceModel,
                                          SyntheticUniformPriceModel,
                                          TickGenerator)
from stock_stream.streaming.transport import (InboundStream, MemoryStream,
                                              OutboundStream)

__all__ = [
    "BulkOrderSession",
    "ExternalFeedPriceModel",
    "IllegalStateTransition",
    "InboundStream",
    "InvalidArgumentError",
    "MemoryStream",
    "NotFoundError",
    "OrderAggregator",
    "OutboundStream",
    "PriceModel",
    "PriceStreamSession",
    "StreamCancelledError",
    "StreamError",
    "StreamErrorCode",
    "StreamErrorMapper",
    "StreamOutcome",
    "StreamState",
    "SyntheticUniformPriceModel",
    "TickGenerator",
    "TransportError",
]
