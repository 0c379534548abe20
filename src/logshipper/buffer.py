"""Thread-safe line buffer."""

from __future__ import annotations

import threading
from collections.abc import Iterable

from .models import LogLine


class LineBuffer:
    """Ordered collection of pending log lines.

    Every operation takes the lock for the duration of the call only; callers
    must never hold it across network I/O.
    """

    def __init__(self) -> None:
        """Create an empty buffer."""
        self._lock = threading.Lock()
        self._lines: list[LogLine] = []

    def write(self, data: bytes | str) -> int:
        """Append `data` as one line and return the number of bytes accepted (UTF-8 for `str`).

        Bytes are decoded as UTF-8; invalid sequences become U+FFFD so that a
        bad line can never poison later serialization.
        """
        if isinstance(data, (bytes, bytearray, memoryview)):
            raw = bytes(data)
            accepted = len(raw)
            message = raw.decode("utf-8", errors="replace")
        else:
            message = str(data)
            accepted = len(message.encode("utf-8", errors="surrogatepass"))
        line = LogLine(message=message)
        with self._lock:
            self._lines.append(line)
        return accepted

    def snapshot_and_clear(self) -> list[LogLine]:
        """Return all buffered lines and reset the buffer, atomically."""
        with self._lock:
            lines = self._lines
            self._lines = []
        return lines

    def requeue(self, lines: Iterable[LogLine]) -> None:
        """Put `lines` back at the front, ahead of lines written since the snapshot."""
        lines = list(lines)
        if not lines:
            return
        with self._lock:
            self._lines[:0] = lines

    def snapshot(self) -> list[LogLine]:
        """Return a point-in-time copy without clearing."""
        with self._lock:
            return list(self._lines)

    def __len__(self) -> int:
        with self._lock:
            return len(self._lines)
