"""Configuration loading and validation.

This module is responsible for:

- Loading `.env` into the process environment (without overriding existing vars).
- Converting environment variables into strongly-typed Pydantic models.
- Validating values and providing actionable error messages.
"""

import os
from typing import TypeVar

import dotenv
from pydantic import BaseModel, Field, field_validator

_T = TypeVar("_T", int, float)


def _get_required_env(name: str) -> str:
    """Read a required env var or raise a helpful error."""
    value = os.getenv(name, "").strip()
    if not value:
        raise ValueError(f"{name} is required. Please set it in your .env file.")
    if value.startswith("your_") and value.endswith("_here"):
        raise ValueError(f"{name} is required. Please replace the placeholder value in your .env file.")
    return value


def _get_optional_env(name: str) -> str | None:
    """Read an optional string env var; empty means unset."""
    value = os.getenv(name, "").strip()
    return value or None


def _get_env_bool(name: str, default: bool) -> bool:
    """Read a boolean env var with a default."""
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    normalized = raw.strip().lower()
    if normalized in {"true", "1", "yes", "y", "on"}:
        return True
    if normalized in {"false", "0", "no", "n", "off"}:
        return False
    raise ValueError(f"{name} must be a boolean (true/false). Got: {raw!r}")


def _get_env_number(name: str, default: _T, cast: type[_T]) -> _T:
    """Read an int/float env var with a default."""
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return cast(raw)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name} must be a {cast.__name__}. Got: {raw!r}") from exc


class ShipperConfig(BaseModel):
    """Configuration for shipping logs to the Datadog intake API."""

    api_key: str = Field(..., description="Datadog API key")
    host: str | None = Field(default=None, description="Intake URL override")
    source: str | None = Field(default=None, description="ddsource tag")
    service: str | None = Field(default=None, description="service tag")
    hostname: str | None = Field(default=None, description="hostname tag")
    tags: tuple[str, ...] = Field(default=(), description="Free-form tags")

    # Optional tuning knobs
    compress: bool = Field(default=True, description="Gzip request bodies")
    requeue_on_failure: bool = Field(default=True, description="Keep unsent lines after a failed sync")
    max_attempt: int = Field(default=5, description="Max attempts per request")
    retry_wait_min: float = Field(default=1.0, description="Initial retry delay (seconds)")
    retry_wait_max: float = Field(default=10.0, description="Max delay between retries (seconds)")
    backoff_multiplier: float = Field(default=2.0, description="Exponential backoff multiplier")
    timeout: float = Field(default=30.0, description="Per-request timeout (seconds)")
    max_log_lines: int = Field(default=1000, description="Max log lines per request")
    max_body_size: int = Field(default=5 * 1024 * 1024, description="Max uncompressed body size (bytes)")
    flush_interval: float = Field(default=5.0, description="Periodic flush interval (seconds)")

    @field_validator("tags", mode="before")
    def split_tags(cls, v):
        """Accept `DD_TAGS`-style comma-separated strings."""
        if v is None:
            return ()
        if isinstance(v, str):
            return tuple(t.strip() for t in v.split(",") if t.strip())
        return tuple(v)

    @field_validator("max_attempt", "max_log_lines", "max_body_size")
    def validate_positive_int(cls, v: int) -> int:
        """Limits and attempt counts must be positive."""
        if v <= 0:
            raise ValueError(f"must be > 0. Got: {v}")
        return v

    @field_validator("retry_wait_min", "retry_wait_max", "timeout", "flush_interval")
    def validate_positive_float(cls, v: float) -> float:
        """Durations must be positive."""
        if v <= 0:
            raise ValueError(f"must be > 0. Got: {v}")
        return v


class Config(BaseModel):
    """Top-level application configuration."""

    shipper: ShipperConfig = Field(..., description="Log shipper configuration")


def load_config() -> Config:
    """Load application configuration from environment variables.

    Notes:
    - Calls `dotenv.load_dotenv()` so local `.env` values are visible to the process.
    - Raises `ValueError` with actionable messages when required configuration is
      missing or still contains placeholder values.
    """
    # Load variables from `.env` into the process environment (without overriding
    # already-set env vars).
    dotenv.load_dotenv()

    shipper = ShipperConfig(
        api_key=_get_required_env("DD_API_KEY"),
        host=_get_optional_env("DD_LOGS_HOST"),
        source=_get_optional_env("DD_SOURCE"),
        service=_get_optional_env("DD_SERVICE"),
        hostname=_get_optional_env("DD_HOSTNAME"),
        tags=os.getenv("DD_TAGS", ""),
        compress=_get_env_bool("DD_COMPRESS", True),
        requeue_on_failure=_get_env_bool("DD_REQUEUE_ON_FAILURE", True),
        max_attempt=_get_env_number("DD_MAX_ATTEMPT", 5, int),
        retry_wait_min=_get_env_number("DD_RETRY_WAIT_MIN", 1.0, float),
        retry_wait_max=_get_env_number("DD_RETRY_WAIT_MAX", 10.0, float),
        backoff_multiplier=_get_env_number("DD_BACKOFF_MULTIPLIER", 2.0, float),
        timeout=_get_env_number("DD_TIMEOUT", 30.0, float),
        max_log_lines=_get_env_number("DD_MAX_LOG_LINES", 1000, int),
        max_body_size=_get_env_number("DD_MAX_BODY_SIZE", 5 * 1024 * 1024, int),
        flush_interval=_get_env_number("DD_FLUSH_INTERVAL", 5.0, float),
    )
    return Config(shipper=shipper)
