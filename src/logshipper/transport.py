"""HTTP transport that posts encoded payloads to the intake endpoint.

Requests are sent through a `requests.Session`. Connection errors, HTTP 429
and 5xx responses are retried with exponential backoff; each wait is capped
at `retry_wait_max` seconds. Whatever is still failing after the last
attempt is raised as a typed error, after an error diagnostic is logged.
"""

from __future__ import annotations

import logging
import random
import threading
import time

import requests

from .errors import APIResponseError, TransportError
from .models import Payload

logger = logging.getLogger(__name__)

API_KEY_HEADER = "DD-API-KEY"


class HttpTransport:
    """Posts payloads to one intake URL with a static credential header."""

    def __init__(
        self,
        url: str,
        api_key: str,
        *,
        session: requests.Session | None = None,
        max_attempt: int = 5,
        retry_wait_min: float = 1.0,
        retry_wait_max: float = 10.0,
        backoff_multiplier: float = 2.0,
        timeout: float = 30.0,
        cancel_event: threading.Event | None = None,
    ):
        """Create a transport; a session is created (and owned) when none is given."""
        if max_attempt <= 0:
            raise ValueError(f"max_attempt must be > 0. Got: {max_attempt}")
        self.url = url
        self.api_key = api_key
        self.max_attempt = max_attempt
        self.retry_wait_min = retry_wait_min
        self.retry_wait_max = retry_wait_max
        self.backoff_multiplier = backoff_multiplier
        self.timeout = timeout
        self.cancel_event = cancel_event

        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()

    def _headers(self, payload: Payload) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            API_KEY_HEADER: self.api_key,
        }
        if payload.compressed:
            headers["Content-Encoding"] = "gzip"
        return headers

    def post(self, payload: Payload) -> None:
        """Post one payload.

        Raises:
        - `APIResponseError` for a terminal non-2xx response
        - `TransportError` for network, request-construction and cancellation failures
        """
        try:
            self._send_with_retries(payload.body, self._headers(payload))
        except APIResponseError as exc:
            logger.error("error writing logs: %d status code returned", exc.status_code)
            raise
        except TransportError as exc:
            logger.error("error writing logs: %s", exc)
            raise
        except Exception as exc:
            # network errors and anything the session raises while building the request
            logger.error("error writing logs: %s", exc)
            raise TransportError(f"error writing logs: {exc}") from exc

    def _send_request(self, body: bytes, headers: dict[str, str]) -> None:
        """Send the request once; raise `APIResponseError` for non-2xx responses."""
        resp = self.session.post(self.url, data=body, headers=headers, timeout=self.timeout)
        try:
            if 200 <= resp.status_code < 300:
                return
            text: str | None
            try:
                text = resp.text
            except Exception:  # noqa: BLE001 - best-effort body capture
                text = None
            raise APIResponseError(status_code=resp.status_code, body=text)
        finally:
            close = getattr(resp, "close", None)
            if close is not None:
                close()

    def _send_with_retries(self, body: bytes, headers: dict[str, str]) -> None:
        """Send with capped exponential backoff between retryable failures."""
        attempt = 0

        while True:
            self._raise_if_cancelled()
            try:
                return self._send_request(body, headers)
            except Exception as exc:  # noqa: BLE001 - classify and retry/raise
                attempt += 1
                if not _is_retryable_error(exc):
                    raise
                if attempt >= self.max_attempt:
                    raise

                delay = self.backoff_delay(attempt)
                logger.debug("retrying log post in %.2fs (attempt %d/%d): %s", delay, attempt, self.max_attempt, exc)
                self._wait(delay)

    def backoff_delay(self, attempt: int) -> float:
        """Return the wait before retry number `attempt` (1-based), capped at `retry_wait_max`."""
        delay = min(self.retry_wait_max, self.retry_wait_min * (self.backoff_multiplier ** (attempt - 1)))
        delay += random.uniform(0.0, delay * 0.1)  # small jitter
        return min(delay, self.retry_wait_max)

    def _raise_if_cancelled(self) -> None:
        if self.cancel_event is not None and self.cancel_event.is_set():
            raise TransportError("error writing logs: request cancelled")

    def _wait(self, delay: float) -> None:
        if self.cancel_event is None:
            time.sleep(delay)
            return
        if self.cancel_event.wait(delay):
            raise TransportError("error writing logs: request cancelled")

    def close(self) -> None:
        """Close the underlying session if this transport created it."""
        if self._owns_session:
            self.session.close()


def _is_retryable_error(exc: BaseException) -> bool:
    """Return True if the error is transient."""
    if isinstance(exc, APIResponseError):
        # Retry 429 and all 5xx.
        return exc.status_code == 429 or exc.status_code >= 500

    # Network/transport errors.
    return isinstance(exc, requests.RequestException)
