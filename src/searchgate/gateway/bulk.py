"""Bulk upsert planning — Decide create vs update for a batch of documents.

A document whose id already exists in the index becomes a partial
``update`` addressed at the existing ``_id``; anything else becomes a
``create`` keyed by the document id. The planner is pure: the gateway
resolves existing ids first and hands them in.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from searchgate.gateway.exceptions import RequestFailure
from searchgate.models.document import Document
from searchgate.models.result import BulkItemError


@dataclass
class UpsertPlan:
    """Bulk operations ready to send, plus the ids routed to each action."""

    operations: list[dict[str, Any]] = field(default_factory=list)
    created: list[str] = field(default_factory=list)
    updated: list[str] = field(default_factory=list)


def document_id(document: Document, id_field: str) -> Any:
    """Return the reconciliation id of ``document``.

    Raises:
        RequestFailure: If the document has no usable id.
    """
    if not isinstance(document, dict):
        raise RequestFailure(f"Documents must be objects, got {type(document).__name__}")
    value = document.get(id_field)
    if value is None or value == "":
        raise RequestFailure(f"Document is missing required field '{id_field}'")
    return value


def existence_query(id_field: str, doc_id: Any) -> dict[str, Any]:
    """Exact-match query for a single document id."""
    return {"bool": {"must": {"term": {id_field: doc_id}}}}


def existence_searches(index: str, id_field: str, ids: list[Any]) -> list[dict[str, Any]]:
    """Multi-search body with one single-hit exact-match search per id.

    Each search is the single-id lookup limited to its first hit, so ids
    stored on several documents cannot crowd other ids out of the results.
    A missing index answers with no hits and leaves creation to the bulk
    request.
    """
    searches: list[dict[str, Any]] = []
    for doc_id in ids:
        searches.append({"index": index, "ignore_unavailable": True})
        searches.append({"query": existence_query(id_field, doc_id), "size": 1})
    return searches


def first_hits_by_id(ids: list[Any], responses: list[dict[str, Any]]) -> dict[str, str]:
    """Map each id to the ``_id`` of the first hit of its search.

    ``responses`` are the multi-search responses, in the order of ``ids``.
    """
    existing: dict[str, str] = {}
    for doc_id, response in zip(ids, responses, strict=True):
        hits = (response.get("hits") or {}).get("hits") or []
        if hits:
            existing.setdefault(str(doc_id), str(hits[0]["_id"]))
    return existing


def chunked(items: list[Any], size: int) -> Iterator[list[Any]]:
    for start in range(0, len(items), size):
        yield items[start : start + size]


def plan_upsert(
    index: str,
    documents: list[Document],
    existing: dict[str, str],
    id_field: str,
) -> UpsertPlan:
    """Build the bulk body for ``documents``.

    Args:
        index: Target index.
        documents: Documents to write, in order.
        existing: Document id (as string) to existing ``_id``.
        id_field: Field holding the document id.

    Returns:
        The plan. A repeated id inside the batch is sent as an update
        against the ``_id`` picked for its first occurrence.
    """
    plan = UpsertPlan()
    targets = dict(existing)
    for document in documents:
        key = str(document_id(document, id_field))
        target = targets.get(key)
        if target is None:
            targets[key] = key
            plan.operations.append({"create": {"_index": index, "_id": key}})
            plan.operations.append(document)
            plan.created.append(key)
        else:
            plan.operations.append({"update": {"_index": index, "_id": target}})
            plan.operations.append({"doc": document})
            plan.updated.append(key)
    return plan


def rejected_items(items: list[dict[str, Any]]) -> list[BulkItemError]:
    """Return the items of a bulk response that carry an error."""
    return [
        BulkItemError.from_item(position, item)
        for position, item in enumerate(items)
        if any(isinstance(outcome, dict) and outcome.get("error") for outcome in item.values())
    ]
