"""Tests for StreamErrorMapper."""

import pytest
from fastapi import HTTPException

from stock_stream.streaming import (InvalidArgumentError, NotFoundError,
                                    StreamCancelledError, StreamErrorMapper,
                                    TransportError)

mapper = StreamErrorMapper()


@pytest.mark.parametrize(
    ("exc", "status", "close_code"),
    [
        (InvalidArgumentError("Stock symbol is required"), 400, 4000),
        (NotFoundError("XYZ"), 404, 4004),
        (StreamCancelledError("Client disconnected"), 499, 1001),
        (TransportError("write failed"), 502, 1011),
    ],
)
def test_known_errors(exc, status, close_code):
    assert mapper.to_http(exc) == (status, str(exc))
    assert mapper.to_ws_close(exc) == (close_code, str(exc))


def test_unknown_error_hides_message():
    exc = RuntimeError("secret internals")
    assert mapper.to_http(exc) == (500, "Internal server error")
    assert mapper.to_ws_close(exc) == (1011, "Stream error")


def test_raise_http():
    with pytest.raises(HTTPException) as exc_info:
        mapper.raise_http(NotFoundError("XYZ"))
    assert exc_info.value.status_code == 404
    assert exc_info.value.detail == "Stock XYZ is not available in system"


def test_close_reason_fits_control_frame():
    code, reason = mapper.to_ws_close(InvalidArgumentError("é" * 200))
    assert code == 4000
    assert len(reason.encode("utf-8")) <= 123
