"""Probe result entities."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class RowEntity:
    """Last row read back from a relational ``items`` table."""

    id: int
    name: str


@dataclass(frozen=True)
class HttpResultEntity:
    """Outcome of an outbound GET."""

    status: int
    body_len: int


@dataclass(frozen=True)
class ProbeResult:
    """Result of one write-then-read-back against a single backend.

    Attributes:
        source: Backend name (redis, mongo, postgres, mysql, http)
        value: The read-back value reported by aggregate endpoints
        fields: Full payload reported by single-kind endpoints
    """

    source: str
    value: Any
    fields: dict[str, Any] = field(default_factory=dict)

    def to_response(self) -> dict[str, Any]:
        return {"source": self.source, **self.fields}
