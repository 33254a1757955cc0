"""Index endpoints — Index creation with default or overridden settings."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends
from pydantic import BaseModel, Field

from searchgate.api.deps import get_gateway
from searchgate.gateway import SearchGateway
from searchgate.models.document import IndexCreated

router = APIRouter()


class CreateIndexRequest(BaseModel):
    """Optional overrides for a new index."""

    settings: dict[str, Any] | None = Field(default=None, description="Settings merged over the defaults")
    mappings: dict[str, Any] | None = Field(default=None, description="Mapping used instead of the default")


@router.put(
    "/indices/{index}",
    response_model=IndexCreated,
    status_code=201,
    summary="Create Index",
    description=(
        "Create an index. Without a body the configured defaults apply "
        "(1 shard, 0 replicas, `title` and `content` as text)."
    ),
)
async def create_index(
    index: str,
    request: CreateIndexRequest | None = Body(default=None),
    gateway: SearchGateway = Depends(get_gateway),
) -> IndexCreated:
    request = request or CreateIndexRequest()
    return await gateway.create_index(index, index_settings=request.settings, mappings=request.mappings)
