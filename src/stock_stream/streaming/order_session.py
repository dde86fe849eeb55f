"""Client-streaming session: folds inbound orders into one summary."""
import asyncio
import logging

from stock_stream.schemas import Order, OrderSummary, PartialOrderSummary
from stock_stream.streaming.aggregator import OrderAggregator
from stock_stream.streaming.exceptions import (StreamCancelledError,
                                               StreamErrorCode,
                                               TransportError, error_code)
from stock_stream.streaming.state import (StreamLifecycle, StreamOutcome,
                                          StreamState)
from stock_stream.streaming.transport import InboundStream, OutboundStream

logger = logging.getLogger(__name__)


class BulkOrderSession:
    """Drives one PlaceBulkOrder call: OPEN -> RECEIVING -> COMPLETED | FAILED.

    Orders are folded as they arrive and never acknowledged one by one. On
    normal close of the inbound stream exactly one OrderSummary is sent. On an
    inbound error nothing is sent, unless partial_summary_on_error is enabled,
    in which case a PartialOrderSummary carrying the error is attempted.
    """

    def __init__(
        self,
        inbound: InboundStream[Order],
        outbound: OutboundStream[OrderSummary],
        *,
        aggregator: OrderAggregator | None = None,
        partial_summary_on_error: bool = False,
    ) -> None:
        self._inbound = inbound
        self._outbound = outbound
        self._aggregator = aggregator or OrderAggregator()
        self._partial_summary_on_error = partial_summary_on_error
        self._lifecycle = StreamLifecycle("bulk-order")
        self._summary = self._aggregator.empty()
        self._error: Exception | None = None

    @property
    def state(self) -> StreamState:
        return self._lifecycle.state

    @property
    def outcome(self) -> StreamOutcome | None:
        return self._lifecycle.outcome

    @property
    def error(self) -> Exception | None:
        """Inbound error that failed the call, if any."""
        return self._error

    @property
    def summary(self) -> OrderSummary:
        """Running summary (final once the session is COMPLETED)."""
        return self._summary

    async def run(self) -> OrderSummary | None:
        """Receive orders until the client closes its stream.

        Returns the emitted summary, or None when the inbound stream failed.

        Raises:
            TransportError: the summary could not be written.
        """
        self._lifecycle.move_to(StreamState.RECEIVING)
        try:
            async for order in self._inbound:
                self._summary = self._aggregator.apply(self._summary, order)
                logger.debug("Received order %s: %s", order.order_id, order)
        except asyncio.CancelledError:
            self._lifecycle.fail(StreamErrorCode.CANCELLED)
            raise
        except Exception as exc:  # pylint: disable=broad-except
            self._lifecycle.fail(error_code(exc))
            self._error = exc
            logger.warning(
                "Server unable to process bulk order after %d orders: %s",
                self._summary.total_orders,
                exc,
            )
            if self._partial_summary_on_error:
                await self._send_partial(exc)
            return None

        try:
            await self._outbound.send(self._summary)
            await self._outbound.close()
        except Exception as exc:
            cancelled = isinstance(exc, StreamCancelledError)
            self._lifecycle.fail(
                StreamErrorCode.CANCELLED if cancelled else StreamErrorCode.TRANSPORT
            )
            if cancelled:
                raise
            raise TransportError("Failed to send order summary") from exc
        self._lifecycle.move_to(StreamState.COMPLETED)
        logger.info(
            "Bulk order completed: total=%d success=%d amount=%.2f",
            self._summary.total_orders,
            self._summary.success_count,
            self._summary.total_amount,
        )
        return self._summary

    async def _send_partial(self, exc: Exception) -> None:
        partial = PartialOrderSummary(**self._summary.model_dump(), error=str(exc))
        try:
            await self._outbound.send(partial)
            await self._outbound.close()
        except Exception as send_exc:  # pylint: disable=broad-except
            # Peer already gone (client abort); the failure is logged above
            logger.debug("Partial summary not delivered: %s", send_exc)
