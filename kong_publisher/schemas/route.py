"""Pydantic schemas for route descriptors and Kong payloads."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Columns accepted by --sort (``method`` maps onto ``methods``)
SORT_FIELDS = ("host", "method", "uri", "name", "action", "middleware")


# ── Route table ───────────────────────────────


class RouteDescriptor(BaseModel):
    """One registered HTTP endpoint of the host application."""

    model_config = ConfigDict(frozen=True)

    host: str | None = None
    methods: tuple[str, ...] = ()
    uri: str
    name: str | None = None
    action: str = "Closure"
    middleware: tuple[str, ...] = ()

    def field(self, key: str) -> str | None:
        """Return a column as a string, joining multi-valued fields with commas."""
        if key == "method":
            return ",".join(self.methods)
        if key == "middleware":
            return ",".join(self.middleware)
        if key not in SORT_FIELDS:
            raise KeyError(key)
        return getattr(self, key)


class RouteQuery(BaseModel):
    """Filter and ordering options for the route table."""

    method: str | None = None
    name: str | None = None
    path: str | None = None
    sort: str = "uri"
    reverse: bool = False

    @field_validator("sort")
    @classmethod
    def _known_column(cls, value: str) -> str:
        if value not in SORT_FIELDS:
            raise ValueError(f"cannot sort by {value!r}, expected one of {', '.join(SORT_FIELDS)}")
        return value


# ── Kong ──────────────────────────────────────


class GatewayPayload(BaseModel):
    """Body of a ``PUT /apis`` registration."""

    name: str
    uris: str
    methods: str
    upstream_url: str


class PublishResult(BaseModel):
    """What a publish run sent and skipped."""

    invalid: list[RouteDescriptor] = Field(default_factory=list)
    published: list[GatewayPayload] = Field(default_factory=list)
    responses: list[dict[str, Any]] = Field(default_factory=list)
