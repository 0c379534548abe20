"""`logging` integration: a handler that feeds formatted records into a `DataDogLogger`."""

from __future__ import annotations

import logging

from .shipper import DataDogLogger


def _not_own_diagnostic(record: logging.LogRecord) -> bool:
    """Drop records from `logshipper.*`; shipping them would feed failures back into the buffer."""
    return record.name != "logshipper" and not record.name.startswith("logshipper.")


class DataDogHandler(logging.Handler):
    """Buffers formatted records in a `DataDogLogger`; `flush()` ships them.

    The shipper's own diagnostics are filtered out so that a failing intake
    does not grow the buffer with its own error messages.
    """

    def __init__(self, shipper: DataDogLogger, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self.shipper = shipper
        self.addFilter(_not_own_diagnostic)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.shipper.write(self.format(record))
        except Exception:  # noqa: BLE001 - logging must not raise into callers
            self.handleError(record)

    def flush(self) -> None:
        """Sync buffered lines; failures are reported via `handleError`."""
        self.acquire()
        try:
            self.shipper.sync()
        except Exception:  # noqa: BLE001 - logging must not raise into callers
            self.handleError(_flush_record(self.name))
        finally:
            self.release()

    def close(self) -> None:
        try:
            self.flush()
        finally:
            super().close()


def _flush_record(name: str | None) -> logging.LogRecord:
    """A placeholder record for `handleError` when a flush (not an emit) fails."""
    return logging.LogRecord(name or __name__, logging.ERROR, __file__, 0, "flush failed", None, None)
