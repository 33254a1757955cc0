"""Document endpoints — Insert, bulk upsert, listing and lookup by id.

Lookups that match nothing answer 404 with the ``not_found`` variant;
gateway errors are mapped by ``searchgate.api.errors``.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from searchgate.api.deps import get_gateway
from searchgate.gateway import SearchGateway
from searchgate.models.document import Hit, IndexedDocument
from searchgate.models.result import BulkUpsertResult, DocumentNotFound, DocumentPage, NoDocuments

router = APIRouter()


class BulkUpsertRequest(BaseModel):
    """Documents to create or update; each must carry an id."""

    documents: list[dict[str, Any]] = Field(description="Documents to upsert, in order")


@router.post(
    "/indices/{index}/documents",
    response_model=IndexedDocument,
    status_code=201,
    summary="Insert Document",
)
async def insert_document(
    index: str,
    document: dict[str, Any],
    gateway: SearchGateway = Depends(get_gateway),
) -> IndexedDocument:
    return await gateway.insert_document(index, document)


@router.post(
    "/indices/{index}/documents/_bulk_upsert",
    response_model=BulkUpsertResult,
    summary="Bulk Upsert",
    description=(
        "Create documents whose id is not yet in the index and partially "
        "update the ones that are, in a single bulk request. Answers 409 "
        "with the rejected items when the cluster refuses some of them."
    ),
)
async def bulk_upsert(
    index: str,
    request: BulkUpsertRequest,
    gateway: SearchGateway = Depends(get_gateway),
) -> BulkUpsertResult:
    return await gateway.bulk_upsert(index, request.documents)


@router.get(
    "/indices/{index}/documents",
    response_model=DocumentPage,
    summary="List Documents",
    responses={404: {"model": NoDocuments}},
)
async def list_documents(
    index: str,
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=10, ge=1, le=1000),
    gateway: SearchGateway = Depends(get_gateway),
) -> DocumentPage | JSONResponse:
    result = await gateway.list_documents(index, page=page, page_size=page_size)
    if isinstance(result, NoDocuments):
        return JSONResponse(status_code=404, content=result.model_dump())
    return result


@router.get(
    "/indices/{index}/documents/{doc_id}",
    response_model=Hit,
    summary="Get Document",
    responses={404: {"model": DocumentNotFound}},
)
async def get_document(
    index: str,
    doc_id: str,
    gateway: SearchGateway = Depends(get_gateway),
) -> Hit | JSONResponse:
    result = await gateway.get_document(index, doc_id)
    if isinstance(result, DocumentNotFound):
        return JSONResponse(status_code=404, content=result.model_dump())
    return result.document
