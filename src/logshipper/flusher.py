"""Async background flusher that periodically syncs a `DataDogLogger`."""

from __future__ import annotations

import asyncio
import logging
from contextlib import suppress
from datetime import datetime, timezone
from typing import Any

from .shipper import DataDogLogger

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(tz=timezone.utc)


class PeriodicFlusher:
    """Calls `sync()` every `interval` seconds in a worker thread.

    The sync runs via `asyncio.to_thread` so network I/O never blocks the
    event loop. A failed sync is counted and the loop keeps going.
    """

    def __init__(self, shipper: DataDogLogger, *, interval: float = 5.0) -> None:
        """Create a flusher; the background task starts on `start()`."""
        if interval <= 0:
            raise ValueError(f"interval must be > 0. Got: {interval}")
        self._shipper = shipper
        self.interval = interval
        self._worker: asyncio.Task[None] | None = None
        self._closed = False

        self._sync_failures = 0
        self._first_failure_at: datetime | None = None
        self._last_failure_at: datetime | None = None

    def start(self) -> None:
        """Start the background task if it hasn't been started yet."""
        if self._closed:
            raise RuntimeError("flusher is closed")
        if self._worker is not None and not self._worker.done():
            return
        self._worker = asyncio.get_running_loop().create_task(self._run_worker(), name="log-flusher")

    async def flush(self) -> bool:
        """Sync once now. Returns False (and records the failure) if the sync raised."""
        try:
            await asyncio.to_thread(self._shipper.sync)
        except Exception as exc:  # noqa: BLE001 - keep flushing on the next tick
            now = utc_now()
            self._sync_failures += 1
            self._first_failure_at = self._first_failure_at or now
            self._last_failure_at = now
            logger.error("periodic log sync failed: %s", exc)
            return False
        return True

    async def _run_worker(self) -> None:
        """Background loop: sleep, then sync."""
        while True:
            await asyncio.sleep(self.interval)
            await self.flush()

    async def aclose(self) -> None:
        """Stop the loop and perform a final flush.

        Safe to call multiple times.
        """
        if self._closed:
            return
        self._closed = True
        if self._worker is not None:
            self._worker.cancel()
            with suppress(asyncio.CancelledError):
                await self._worker
        await self.flush()

    def degraded_status(self) -> dict[str, Any]:
        """Return a minimal degraded-status snapshot."""
        return {
            "sync_failures": self._sync_failures,
            "first_failure_at": self._first_failure_at,
            "last_failure_at": self._last_failure_at,
        }
