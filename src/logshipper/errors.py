"""Error types raised by the log shipper.

Every error surfaces synchronously to the caller of `write`/`sync`; the
component that raises it also logs a diagnostic first.
"""

from __future__ import annotations


class LogShipperError(RuntimeError):
    """Base class for all log shipper errors."""


class InvalidURL(LogShipperError):
    """The intake base URL could not be parsed (raised at construction)."""


class SerializationError(LogShipperError):
    """A batch could not be converted to the JSON wire format."""


class CompressionError(LogShipperError):
    """The gzip compressor failed."""


class TransportError(LogShipperError):
    """Network failure or cancellation; retries (if any) are already exhausted."""


class APIResponseError(LogShipperError):
    """Terminal non-2xx response returned by the intake API."""

    def __init__(self, *, status_code: int, body: str | None = None):
        """Create an error capturing the HTTP status code and response text (if any)."""
        self.status_code = status_code
        self.body = body
        super().__init__(f"error writing logs, bad response from API: HTTP {status_code}")
