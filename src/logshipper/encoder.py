"""Batch encoding: line-count chunking, JSON serialization, size bisection and gzip.

The intake API rejects requests that are too large in either dimension, so
every payload is bounded by `MAX_LOG_LINES` records and (before compression)
by `MAX_UNCOMPRESSED_BODY_SIZE` bytes. Splitting preserves line coverage and
relative order across the returned payloads.
"""

from __future__ import annotations

import gzip
import json
import logging
import zlib
from collections.abc import Iterator, Sequence
from typing import Final

from .errors import CompressionError, SerializationError
from .models import LogLine, Payload

logger = logging.getLogger(__name__)

MAX_LOG_LINES: Final[int] = 1000
MAX_UNCOMPRESSED_BODY_SIZE: Final[int] = 5 * 1024 * 1024


def chunk_lines(lines: Sequence[LogLine], max_lines: int = MAX_LOG_LINES) -> Iterator[Sequence[LogLine]]:
    """Yield consecutive slices of at most `max_lines` lines."""
    if max_lines <= 0:
        raise ValueError(f"max_lines must be > 0. Got: {max_lines}")
    for start in range(0, len(lines), max_lines):
        yield lines[start : start + max_lines]


def serialize(lines: Sequence[LogLine]) -> bytes:
    """Serialize lines as a compact UTF-8 JSON array of `{"message": ...}` objects."""
    try:
        text = json.dumps(
            [{"message": line.message} for line in lines],
            ensure_ascii=False,
            separators=(",", ":"),
        )
        return text.encode("utf-8")
    except (TypeError, ValueError) as exc:
        logger.error("error serializing logs: %s", exc)
        raise SerializationError(f"error serializing logs: {exc}") from exc


def compress(body: bytes) -> bytes:
    """Gzip `body`."""
    try:
        return gzip.compress(body)
    except (OSError, zlib.error) as exc:
        logger.error("error compressing logs: %s", exc)
        raise CompressionError(f"error compressing logs: {exc}") from exc


def encode_batch(
    lines: Sequence[LogLine],
    *,
    max_body_size: int = MAX_UNCOMPRESSED_BODY_SIZE,
    compress_body: bool = True,
) -> list[Payload]:
    """Encode `lines` into one or more payloads, bisecting while the JSON is too large.

    A single line that alone exceeds `max_body_size` cannot be split further and
    is attempted as-is.
    """
    if not lines:
        return []

    body = serialize(lines)
    if len(body) > max_body_size:
        if len(lines) > 1:
            half = len(lines) // 2
            return encode_batch(lines[:half], max_body_size=max_body_size, compress_body=compress_body) + encode_batch(
                lines[half:], max_body_size=max_body_size, compress_body=compress_body
            )
        logger.warning(
            "single log line exceeds max body size (%d bytes > %d); sending as-is",
            len(body),
            max_body_size,
        )

    if compress_body:
        body = compress(body)
    return [Payload(body=body, compressed=compress_body, line_count=len(lines))]


def encode(
    lines: Sequence[LogLine],
    *,
    max_lines: int = MAX_LOG_LINES,
    max_body_size: int = MAX_UNCOMPRESSED_BODY_SIZE,
    compress_body: bool = True,
) -> list[Payload]:
    """Chunk `lines` by `max_lines`, then encode each chunk, keeping order."""
    payloads: list[Payload] = []
    for chunk in chunk_lines(lines, max_lines):
        payloads.extend(encode_batch(chunk, max_body_size=max_body_size, compress_body=compress_body))
    return payloads
