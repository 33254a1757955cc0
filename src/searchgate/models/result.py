"""Result models — Tagged outcomes for gateway operations.

Lookups return a ``Found`` or ``NotFound`` variant instead of a
placeholder string, discriminated by ``status``.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field

from searchgate.models.document import Hit


class ConnectionStatus(BaseModel):
    """Result of a connectivity check."""

    connected: bool = Field(description="Whether the cluster answered the ping")
    message: str = Field(description="Human-readable outcome")
    latency_ms: int = Field(default=0, description="Round-trip time of the check in ms")
    cluster_name: str | None = Field(default=None, description="Cluster name reported by the node")
    version: str | None = Field(default=None, description="Cluster version reported by the node")


class DocumentPage(BaseModel):
    """One page of an index listing."""

    status: Literal["found"] = "found"
    total: int = Field(description="Total number of documents matching the query")
    documents: list[Hit] = Field(default_factory=list)
    page: int = Field(description="Requested page (1-based)")
    page_size: int = Field(description="Requested page size")


class NoDocuments(BaseModel):
    """Listing response carried no hits."""

    status: Literal["not_found"] = "not_found"
    message: str = "No documents found"


class DocumentFound(BaseModel):
    """Lookup by identifier matched a document."""

    status: Literal["found"] = "found"
    document: Hit


class DocumentNotFound(BaseModel):
    """Lookup by identifier matched nothing."""

    status: Literal["not_found"] = "not_found"
    message: str = "Document not found"


ListingResult = Annotated[DocumentPage | NoDocuments, Field(discriminator="status")]
LookupResult = Annotated[DocumentFound | DocumentNotFound, Field(discriminator="status")]


class BulkItemError(BaseModel):
    """One item of a bulk request that the cluster rejected."""

    position: int = Field(description="Zero-based position of the item in the bulk request")
    action: str = Field(description="Bulk action: create or update")
    id: str | None = Field(default=None, description="Target ``_id``, if any")
    status: int | None = Field(default=None, description="HTTP status reported for the item")
    error_type: str | None = Field(default=None, description="Cluster error type")
    reason: str | None = Field(default=None, description="Cluster error reason")

    @classmethod
    def from_item(cls, position: int, item: dict[str, Any]) -> BulkItemError:
        action, outcome = next(iter(item.items()))
        error = outcome.get("error") or {}
        if isinstance(error, str):
            error = {"reason": error}
        return cls(
            position=position,
            action=action,
            id=outcome.get("_id"),
            status=outcome.get("status"),
            error_type=error.get("type"),
            reason=error.get("reason"),
        )


class BulkUpsertResult(BaseModel):
    """Outcome of a successful bulk upsert."""

    message: str = "Bulk operation successful"
    created: list[str] = Field(default_factory=list, description="Document ids sent as creates")
    updated: list[str] = Field(default_factory=list, description="Document ids sent as updates")
