"""Service layer: stock lookups and streaming call orchestration."""
from stock_stream.services.factory import create_streaming_service
from stock_stream.services.streaming_service import (StreamingService,
                                                     keep_symbol,
                                                     normalize_symbol)

__all__ = ["StreamingService", "create_streaming_service", "keep_symbol", "normalize_symbol"]
