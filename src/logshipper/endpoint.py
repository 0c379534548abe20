"""Intake URL construction.

The destination options are encoded once into the query string; the
resulting URL never changes for the lifetime of a logger.
"""

from __future__ import annotations

from typing import Final
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from .errors import InvalidURL
from .models import Options

# Newest intake path. The older `/v1/input` path is kept for callers that
# still need it; pass it as `Options.host`.
DEFAULT_INTAKE_URL: Final[str] = "https://http-intake.logs.datadoghq.com/v2/logs"
LEGACY_INTAKE_URL: Final[str] = "https://http-intake.logs.datadoghq.com/v1/input"


def _option_params(options: Options) -> dict[str, str]:
    """Return query parameters for the non-empty option fields only."""
    params: dict[str, str] = {}
    if options.source:
        params["ddsource"] = options.source
    if options.tags:
        params["ddtags"] = ",".join(options.tags)
    if options.hostname:
        params["hostname"] = options.hostname
    if options.service:
        params["service"] = options.service
    return params


def build_endpoint(base: str | None, options: Options) -> str:
    """Build the intake URL for `base` with `options` as sorted query parameters.

    Query parameters already present on `base` are kept unless an option of the
    same name replaces them. Raises `InvalidURL` when `base` cannot be parsed.
    """
    raw = base or DEFAULT_INTAKE_URL
    try:
        parts = urlsplit(raw.strip())
    except ValueError as exc:
        raise InvalidURL(f"invalid intake URL {raw!r}: {exc}") from exc
    if parts.scheme not in {"http", "https"} or not parts.netloc:
        raise InvalidURL(f"invalid intake URL {raw!r}: expected an http(s) URL with a host")

    query = dict(parse_qsl(parts.query, keep_blank_values=True))
    query.update(_option_params(options))
    encoded = urlencode(sorted(query.items()))
    return urlunsplit((parts.scheme, parts.netloc, parts.path, encoded, parts.fragment))
