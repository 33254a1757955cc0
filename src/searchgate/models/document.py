"""Document models — Typed views over raw cluster responses."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

Document = dict[str, Any]
"""A document as sent to the cluster: field name to JSON-like value."""


class Hit(BaseModel):
    """A single document record returned by a query."""

    id: str = Field(description="Internal cluster identifier (``_id``)")
    index: str = Field(default="", description="Index the hit was read from")
    score: float | None = Field(default=None, description="Relevance score, if the query scored")
    source: dict[str, Any] = Field(default_factory=dict, description="Stored document fields")

    @classmethod
    def from_raw(cls, raw: dict[str, Any]) -> Hit:
        """Build a Hit from a raw ``hits.hits[]`` entry."""
        return cls(
            id=str(raw.get("_id", "")),
            index=raw.get("_index", ""),
            score=raw.get("_score"),
            source=raw.get("_source") or {},
        )


class IndexCreated(BaseModel):
    """Acknowledgement returned by an index creation."""

    index: str
    acknowledged: bool = False
    shards_acknowledged: bool = False


class IndexedDocument(BaseModel):
    """Outcome of a single-document insert."""

    index: str
    id: str
    result: str = Field(default="", description="Cluster result: 'created' or 'updated'")
    version: int | None = None
