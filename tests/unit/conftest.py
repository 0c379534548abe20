from __future__ import annotations

import pytest


@pytest.fixture(autouse=True)
def _no_threads_in_unit_tests(monkeypatch: pytest.MonkeyPatch):
    """Run `asyncio.to_thread` inline for unit tests.

    The flusher uses `asyncio.to_thread` to keep blocking HTTP calls off the
    event loop. In unit tests, this can create threadpool workers that keep the
    Python process alive longer than expected under some runtimes.
    """

    async def _to_thread(func, /, *args, **kwargs):  # noqa: ANN001, D401
        return func(*args, **kwargs)

    monkeypatch.setattr("logshipper.flusher.asyncio.to_thread", _to_thread)
    yield


@pytest.fixture(autouse=True)
def backoff_sleeps(monkeypatch: pytest.MonkeyPatch) -> list[float]:
    """Record retry waits instead of sleeping; jitter is disabled."""
    slept: list[float] = []

    def fake_sleep(seconds: float) -> None:
        slept.append(seconds)

    monkeypatch.setattr("logshipper.transport.time.sleep", fake_sleep)
    monkeypatch.setattr("logshipper.transport.random.uniform", lambda _a, _b: 0.0)
    return slept

