"""Data models shared by the buffer, encoder and transport."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _Model(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class LogLine(_Model):
    """One buffered log record. The intake service stamps the ingest time."""

    message: str


class Options(_Model):
    """Destination options encoded once into the intake URL query string."""

    host: str | None = Field(default=None, description="Intake URL override")
    source: str | None = Field(default=None, description="ddsource tag")
    service: str | None = Field(default=None, description="service tag")
    hostname: str | None = Field(default=None, description="hostname tag")
    tags: tuple[str, ...] = Field(default=(), description="Free-form tags, e.g. env:prod")

    @field_validator("tags", mode="before")
    def split_tags(cls, v):
        """Accept a comma-separated string as well as any sequence of tags."""
        if v is None:
            return ()
        if isinstance(v, str):
            return tuple(t.strip() for t in v.split(",") if t.strip())
        return tuple(v)


class Payload(_Model):
    """A wire-ready request body and the number of lines it carries."""

    body: bytes
    compressed: bool
    line_count: int
