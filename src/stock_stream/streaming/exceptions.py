"""Call-scoped errors raised by streaming sessions and the streaming service."""
from enum import Enum


class StreamErrorCode(str, Enum):
    """Terminal reason of a failed call."""

    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    NOT_FOUND = "NOT_FOUND"
    CANCELLED = "CANCELLED"
    TRANSPORT = "TRANSPORT"
    INTERNAL = "INTERNAL"


class StreamError(Exception):
    """Base class for errors that terminate a single call."""

    code: StreamErrorCode = StreamErrorCode.INTERNAL


class InvalidArgumentError(StreamError, ValueError):
    """Malformed or empty request field, e.g. a blank symbol."""

    code = StreamErrorCode.INVALID_ARGUMENT


class NotFoundError(StreamError, LookupError):
    """No stock record matches the requested symbol."""

    code = StreamErrorCode.NOT_FOUND

    def __init__(self, symbol: str) -> None:
        super().__init__(f"Stock {symbol} is not available in system")
        self.symbol = symbol


class StreamCancelledError(StreamError):
    """The caller or the transport cancelled an in-progress stream."""

    code = StreamErrorCode.CANCELLED


class TransportError(StreamError):
    """Read or write failure on the underlying stream. Not retried."""

    code = StreamErrorCode.TRANSPORT


class IllegalStateTransition(RuntimeError):
    """A session was asked to leave a terminal state or make an unknown move."""


def error_code(exc: BaseException) -> StreamErrorCode:
    """Return the StreamErrorCode for any exception (INTERNAL when unknown)."""
    if isinstance(exc, StreamError):
        return exc.code
    return StreamErrorCode.INTERNAL
