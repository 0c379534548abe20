from __future__ import annotations

import gzip
import json

import pytest

from logshipper import CompressionError, LogLine, SerializationError
from logshipper.encoder import MAX_LOG_LINES, chunk_lines, encode, encode_batch, serialize


def _lines(*messages: str) -> list[LogLine]:
    return [LogLine(message=m) for m in messages]


def _decoded(payload) -> list[str]:
    body = gzip.decompress(payload.body) if payload.compressed else payload.body
    return [item["message"] for item in json.loads(body)]


def test_serialize_wire_format():
    assert serialize(_lines("a", 'quote " and ünicode')) == '[{"message":"a"},{"message":"quote \\" and ünicode"}]'.encode()


def test_serialize_rejects_unencodable_text():
    with pytest.raises(SerializationError):
        serialize([LogLine.model_construct(message="lone surrogate \ud800")])


def test_encode_batch_single_compressed_payload():
    payloads = encode_batch(_lines("one", "two"))
    assert len(payloads) == 1
    assert payloads[0].compressed is True
    assert payloads[0].line_count == 2
    assert _decoded(payloads[0]) == ["one", "two"]


def test_encode_batch_uncompressed():
    payloads = encode_batch(_lines("one"), compress_body=False)
    assert payloads[0].compressed is False
    assert payloads[0].body == b'[{"message":"one"}]'


def test_encode_batch_empty():
    assert encode_batch([]) == []


def test_oversized_batch_is_bisected_preserving_order():
    messages = [f"message-{i:03d}-" + "x" * 100 for i in range(37)]
    payloads = encode_batch(_lines(*messages), max_body_size=1024)

    assert len(payloads) >= 2
    assert all(len(gzip.decompress(p.body)) <= 1024 for p in payloads)
    assert sum(p.line_count for p in payloads) == len(messages)
    assert [m for p in payloads for m in _decoded(p)] == messages


def test_single_oversized_line_is_sent_as_is(caplog: pytest.LogCaptureFixture):
    big = "y" * 2048
    payloads = encode_batch(_lines(big), max_body_size=1024)

    assert len(payloads) == 1
    assert _decoded(payloads[0]) == [big]
    assert "exceeds max body size" in caplog.text


def test_compression_failure(monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture):
    def broken(_body: bytes) -> bytes:
        raise OSError("disk on fire")

    monkeypatch.setattr("logshipper.encoder.gzip.compress", broken)
    with pytest.raises(CompressionError):
        encode_batch(_lines("one"))
    assert "error compressing logs" in caplog.text


def test_chunk_lines_bounds_line_count():
    lines = _lines(*[str(i) for i in range(2500)])
    chunks = list(chunk_lines(lines, MAX_LOG_LINES))
    assert [len(c) for c in chunks] == [1000, 1000, 500]


def test_chunk_lines_rejects_non_positive():
    with pytest.raises(ValueError):
        list(chunk_lines(_lines("a"), 0))


def test_encode_chunks_then_splits():
    messages = [str(i) for i in range(25)]
    payloads = encode(_lines(*messages), max_lines=10)
    assert [p.line_count for p in payloads] == [10, 10, 5]
    assert [m for p in payloads for m in _decoded(p)] == messages
