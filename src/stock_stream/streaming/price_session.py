"""Server-streaming session: pushes paced price ticks for one symbol."""
import asyncio
import logging
from collections.abc import Callable

from stock_stream.schemas import PriceResponse
from stock_stream.streaming.exceptions import (InvalidArgumentError,
                                               StreamCancelledError,
                                               StreamErrorCode,
                                               TransportError, error_code)
from stock_stream.streaming.state import (StreamLifecycle, StreamOutcome,
                                          StreamState)
from stock_stream.streaming.ticks import TickGenerator
from stock_stream.streaming.transport import OutboundStream

logger = logging.getLogger(__name__)

GeneratorFactory = Callable[[str, asyncio.Event], TickGenerator]


class PriceStreamSession:
    """Drives one SubscribePrice call: OPEN -> STREAMING -> CLOSED | FAILED.

    The session owns its tick generator and stop event; nothing is shared with
    other calls. Once the stop event is set, no further message is written.
    """

    def __init__(
        self,
        symbol: str,
        generator_factory: GeneratorFactory,
        outbound: OutboundStream[PriceResponse],
        *,
        stop_event: asyncio.Event | None = None,
    ) -> None:
        """Initialize the session.

        Args:
            symbol: Requested symbol, validated when the session runs.
            generator_factory: Builds the TickGenerator for (symbol, stop_event).
            outbound: Stream the PriceResponses are written to.
            stop_event: Cancellation signal (client disconnect or explicit cancel).
        """
        self._requested_symbol = symbol
        self._generator_factory = generator_factory
        self._outbound = outbound
        self._stop_event = stop_event or asyncio.Event()
        self._lifecycle = StreamLifecycle("price-stream")
        self._symbol: str | None = None
        self._emitted = 0

    @property
    def state(self) -> StreamState:
        return self._lifecycle.state

    @property
    def outcome(self) -> StreamOutcome | None:
        return self._lifecycle.outcome

    @property
    def emitted(self) -> int:
        return self._emitted

    @property
    def symbol(self) -> str | None:
        return self._symbol

    def cancel(self) -> None:
        """Request cancellation; observed at the next pacing boundary."""
        self._stop_event.set()

    async def run(self) -> int:
        """Stream ticks until the generator ends. Returns the number of ticks sent.

        Raises:
            InvalidArgumentError: symbol is blank; nothing is sent.
            StreamCancelledError: the stop event fired; no message follows it.
            TransportError: a write failed; generation stops, no retry.
        """
        symbol = self._requested_symbol or ""
        if not symbol.strip():
            self._lifecycle.fail(StreamErrorCode.INVALID_ARGUMENT)
            raise InvalidArgumentError("Stock symbol is required")
        self._symbol = symbol
        self._lifecycle.move_to(StreamState.STREAMING)
        generator = self._generator_factory(symbol, self._stop_event)
        logger.info("Price stream started for %s", symbol)
        try:
            async for tick in generator:
                await self._send(PriceResponse.from_tick(tick))
            try:
                await self._outbound.close()
            except Exception as exc:
                raise TransportError(f"Failed to complete price stream for {symbol}") from exc
        except StreamCancelledError:
            self._lifecycle.fail(StreamErrorCode.CANCELLED)
            logger.info("Price stream for %s cancelled after %d ticks", symbol, self._emitted)
            raise
        except asyncio.CancelledError:
            self._lifecycle.fail(StreamErrorCode.CANCELLED)
            raise
        except Exception as exc:
            self._lifecycle.fail(error_code(exc))
            logger.warning("Price stream for %s failed: %s", symbol, exc)
            raise
        finally:
            await generator.aclose()
        self._lifecycle.move_to(StreamState.CLOSED)
        logger.info("Price stream for %s completed (%d ticks)", symbol, self._emitted)
        return self._emitted

    async def _send(self, response: PriceResponse) -> None:
        if self._stop_event.is_set():
            raise StreamCancelledError(f"Price stream for {response.symbol} cancelled")
        try:
            await self._outbound.send(response)
        except StreamCancelledError:
            self._stop_event.set()
            raise
        except Exception as exc:
            raise TransportError(f"Failed to send price update for {response.symbol}") from exc
        self._emitted += 1
        logger.debug("Sent %s @ %.4f", response.symbol, response.price)
