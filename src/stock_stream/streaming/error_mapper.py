"""Maps call-scoped stream errors to HTTP responses and WebSocket close frames."""
from dataclasses import dataclass

from fastapi import HTTPException

from stock_stream.streaming.exceptions import StreamErrorCode, error_code

_HTTP_STATUS: dict[StreamErrorCode, int] = {
    StreamErrorCode.INVALID_ARGUMENT: 400,
    StreamErrorCode.NOT_FOUND: 404,
    StreamErrorCode.CANCELLED: 499,
    StreamErrorCode.TRANSPORT: 502,
    StreamErrorCode.INTERNAL: 500,
}

_WS_CLOSE_CODE: dict[StreamErrorCode, int] = {
    StreamErrorCode.INVALID_ARGUMENT: 4000,
    StreamErrorCode.NOT_FOUND: 4004,
    StreamErrorCode.CANCELLED: 1001,
    StreamErrorCode.TRANSPORT: 1011,
    StreamErrorCode.INTERNAL: 1011,
}

# WebSocket close reasons must fit in a 125 byte control frame
_MAX_REASON_BYTES = 120


@dataclass(frozen=True)
class StreamErrorMapper:
    """Maps stream exceptions to HTTP (status_code, detail) and WebSocket (code, reason).

    Unknown exceptions are treated as INTERNAL and never leak their message.
    """

    resource_name: str = "Stock"

    def to_http(self, exc: Exception) -> tuple[int, str]:
        """Map an exception to (status_code, detail) for HTTP responses."""
        code = error_code(exc)
        if code is StreamErrorCode.INTERNAL:
            return (500, "Internal server error")
        detail = str(exc) or f"{self.resource_name} request failed"
        return (_HTTP_STATUS[code], detail)

    def to_ws_close(self, exc: BaseException) -> tuple[int, str]:
        """Map an exception to (close_code, reason) for a WebSocket close frame."""
        code = error_code(exc)
        reason = "Stream error" if code is StreamErrorCode.INTERNAL else str(exc) or code.value
        return (_WS_CLOSE_CODE[code], _truncate(reason))

    def raise_http(self, exc: Exception) -> None:
        """Map exception to HTTP and raise HTTPException. Never returns."""
        status_code, detail = self.to_http(exc)
        raise HTTPException(status_code=status_code, detail=detail) from exc


def _truncate(reason: str) -> str:
    encoded = reason.encode("utf-8")
    if len(encoded) <= _MAX_REASON_BYTES:
        return reason
    return encoded[:_MAX_REASON_BYTES].decode("utf-8", errors="ignore")
