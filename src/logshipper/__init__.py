"""Buffered log shipping to the Datadog HTTP intake API.

This package provides:
- `DataDogLogger`: an in-memory line buffer with a `write`/`sync` surface.
- Batch encoding with line-count and byte-size limits, gzip compressed.
- An HTTP transport with capped exponential backoff.
- Optional adapters: a `logging.Handler` and an asyncio periodic flusher.
"""

from .endpoint import DEFAULT_INTAKE_URL, LEGACY_INTAKE_URL, build_endpoint
from .errors import (
    APIResponseError,
    CompressionError,
    InvalidURL,
    LogShipperError,
    SerializationError,
    TransportError,
)
from .flusher import PeriodicFlusher
from .handler import DataDogHandler
from .models import LogLine, Options, Payload
from .shipper import DataDogLogger

__all__ = [
    "APIResponseError",
    "CompressionError",
    "DEFAULT_INTAKE_URL",
    "DataDogHandler",
    "DataDogLogger",
    "InvalidURL",
    "LEGACY_INTAKE_URL",
    "LogLine",
    "LogShipperError",
    "Options",
    "Payload",
    "PeriodicFlusher",
    "SerializationError",
    "TransportError",
    "build_endpoint",
]
