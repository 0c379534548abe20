"""Buffered Datadog log shipper: write lines, then sync them to the intake API.

`DataDogLogger` owns the line buffer, the intake URL, the API key and the
transport. Writers may call `write` from any thread. `sync` drains a
point-in-time snapshot of the buffer, chunks it by line count, encodes each
chunk and posts the payloads in order, aborting on the first error.

Lines that were not posted when a sync pass fails are put back at the front of
the buffer (`requeue_on_failure=True`, the default) so the next pass retries
them. Chunks that cannot be encoded are dropped since they can never succeed.
With `requeue_on_failure=False` every unsent line of the failed pass is
discarded instead.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence
from typing import TYPE_CHECKING

import requests

from .buffer import LineBuffer
from .encoder import MAX_LOG_LINES, MAX_UNCOMPRESSED_BODY_SIZE, chunk_lines, encode_batch
from .endpoint import build_endpoint
from .errors import CompressionError, SerializationError
from .models import LogLine, Options
from .transport import HttpTransport

if TYPE_CHECKING:
    from config import ShipperConfig

logger = logging.getLogger(__name__)


class DataDogLogger:
    """A writer that buffers log lines in memory and ships them on `sync()`.

    Members:
    - Intake URL: `url` (built once from `options`)
    - API key: `api_key`
    - Options: `options`
    - Transport: `transport`
    - Buffer: `_buffer` (guarded by its own lock, never held across I/O)
    - Sync lock: `_sync_lock` (serializes whole sync passes)
    """

    def __init__(
        self,
        api_key: str,
        options: Options | None = None,
        *,
        transport: HttpTransport | None = None,
        session: requests.Session | None = None,
        cancel_event: threading.Event | None = None,
        max_log_lines: int = MAX_LOG_LINES,
        max_body_size: int = MAX_UNCOMPRESSED_BODY_SIZE,
        compress: bool = True,
        requeue_on_failure: bool = True,
        max_attempt: int = 5,
        retry_wait_min: float = 1.0,
        retry_wait_max: float = 10.0,
        backoff_multiplier: float = 2.0,
        timeout: float = 30.0,
    ):
        """Create a logger for one destination.

        Raises `InvalidURL` when `options.host` is not a usable URL. The API key
        is not validated here; the intake API rejects a bad key on first sync.
        """
        if max_log_lines <= 0:
            raise ValueError(f"max_log_lines must be > 0. Got: {max_log_lines}")

        self.options = options or Options()
        self.api_key = api_key
        self.url = build_endpoint(self.options.host, self.options)

        self.max_log_lines = max_log_lines
        self.max_body_size = max_body_size
        self.compress = compress
        self.requeue_on_failure = requeue_on_failure

        self.transport = transport or HttpTransport(
            self.url,
            api_key,
            session=session,
            max_attempt=max_attempt,
            retry_wait_min=retry_wait_min,
            retry_wait_max=retry_wait_max,
            backoff_multiplier=backoff_multiplier,
            timeout=timeout,
            cancel_event=cancel_event,
        )

        self._buffer = LineBuffer()
        self._sync_lock = threading.Lock()

    @classmethod
    def from_config(
        cls,
        config: ShipperConfig,
        *,
        session: requests.Session | None = None,
        cancel_event: threading.Event | None = None,
    ) -> DataDogLogger:
        """Create a logger from a loaded `ShipperConfig`."""
        options = Options(
            host=config.host,
            source=config.source,
            service=config.service,
            hostname=config.hostname,
            tags=config.tags,
        )
        return cls(
            config.api_key,
            options,
            session=session,
            cancel_event=cancel_event,
            max_log_lines=config.max_log_lines,
            max_body_size=config.max_body_size,
            compress=config.compress,
            requeue_on_failure=config.requeue_on_failure,
            max_attempt=config.max_attempt,
            retry_wait_min=config.retry_wait_min,
            retry_wait_max=config.retry_wait_max,
            backoff_multiplier=config.backoff_multiplier,
            timeout=config.timeout,
        )

    @property
    def lines(self) -> list[LogLine]:
        """Point-in-time copy of the buffered lines."""
        return self._buffer.snapshot()

    def write(self, data: bytes | str) -> int:
        """Buffer `data` as one log line and return the number of bytes accepted."""
        return self._buffer.write(data)

    def sync(self) -> None:
        """Post all buffered lines to the intake API.

        Raises the first `SerializationError`, `CompressionError`,
        `TransportError` or `APIResponseError` encountered.
        """
        with self._sync_lock:
            lines = self._buffer.snapshot_and_clear()
            if not lines:
                return

            position = 0
            try:
                for chunk in chunk_lines(lines, self.max_log_lines):
                    try:
                        payloads = encode_batch(chunk, max_body_size=self.max_body_size, compress_body=self.compress)
                    except (SerializationError, CompressionError):
                        logger.error("dropping %d log lines that could not be encoded", len(chunk))
                        position += len(chunk)
                        raise

                    for payload in payloads:
                        self.transport.post(payload)
                        position += payload.line_count
            except BaseException:
                self._recover(lines[position:])
                raise

            logger.debug("synced %d log lines to %s", len(lines), self.url)

    def _recover(self, unsent: Sequence[LogLine]) -> None:
        """Requeue (or discard) the lines a failed sync pass did not post."""
        if not unsent:
            return
        if self.requeue_on_failure:
            self._buffer.requeue(unsent)
            logger.warning("re-queued %d unsent log lines for the next sync", len(unsent))
        else:
            logger.warning("discarding %d unsent log lines", len(unsent))

    def close(self) -> None:
        """Sync remaining lines, then close the transport."""
        try:
            self.sync()
        finally:
            self.transport.close()

    def __enter__(self) -> DataDogLogger:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
