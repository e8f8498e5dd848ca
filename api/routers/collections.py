"""
Collections Router - manage collections and the sets they hold
"""

import logging
from typing import Any, Callable, Dict

from fastapi import APIRouter, Depends

from api.dependencies import confirmation_gate, get_workspace
from api.schemas.collections import (
    CollectionSetResponse,
    CollectionSummary,
    CreateCollectionRequest,
    RemoveSetResponse,
    RenameCollectionRequest,
    SetActiveRequest,
    SetItem,
    SetListResponse,
    SummaryResponse,
)
from brick_collector.state.workspace import Workspace
from brick_collector.stats import summarize_collection

router = APIRouter()
logger = logging.getLogger(__name__)


def _collection_set(ws: Workspace) -> CollectionSetResponse:
    store = ws.collections
    return CollectionSetResponse(
        active_index=store.active_index,
        collections=[
            CollectionSummary(
                id=c.id,
                index=i,
                name=c.name,
                set_count=len(c.sets),
                total_parts=store.total_parts(i),
                active=i == store.active_index,
            )
            for i, c in enumerate(store.collections)
        ],
    )


@router.get("/collections", response_model=CollectionSetResponse)
async def list_collections(ws: Workspace = Depends(get_workspace)) -> CollectionSetResponse:
    return _collection_set(ws)


@router.post("/collections", response_model=CollectionSetResponse, status_code=201)
async def create_collection(
    body: CreateCollectionRequest,
    ws: Workspace = Depends(get_workspace)
) -> CollectionSetResponse:
    """Create an empty collection; it becomes the active one."""
    ws.collections.create_collection(body.name)
    return _collection_set(ws)


@router.put("/collections/active", response_model=CollectionSetResponse)
async def set_active_collection(
    body: SetActiveRequest,
    ws: Workspace = Depends(get_workspace)
) -> CollectionSetResponse:
    ws.collections.set_active(body.index)
    return _collection_set(ws)


@router.patch("/collections/{index}", response_model=CollectionSetResponse)
async def rename_collection(
    index: int,
    body: RenameCollectionRequest,
    ws: Workspace = Depends(get_workspace)
) -> CollectionSetResponse:
    """Rename; a blank name leaves the collection unchanged."""
    ws.collections.rename_collection(index, body.name)
    return _collection_set(ws)


@router.delete("/collections/{index}", response_model=CollectionSetResponse)
async def delete_collection(
    index: int,
    confirm: Callable[[str], bool] = Depends(confirmation_gate),
    ws: Workspace = Depends(get_workspace)
) -> CollectionSetResponse:
    """Delete a collection (requires confirm=true; the last one cannot be deleted)."""
    ws.collections.delete_collection(index, confirm)
    return _collection_set(ws)


@router.get("/collections/{index}/sets", response_model=SetListResponse)
async def list_sets(index: int, ws: Workspace = Depends(get_workspace)) -> SetListResponse:
    collection = ws.collections.get(index)
    items = []
    for record in collection.sets:
        theme_id = record.get('theme_id') if isinstance(record, dict) else None
        items.append(SetItem(
            record=record,
            theme_label=ws.themes.label(theme_id) if theme_id is not None else None,
        ))
    return SetListResponse(
        index=index,
        name=collection.name,
        total_parts=ws.collections.total_parts(index),
        items=items,
    )


@router.post("/collections/{index}/sets", response_model=SetListResponse, status_code=201)
async def add_set(
    index: int,
    record: Dict[str, Any],
    ws: Workspace = Depends(get_workspace)
) -> SetListResponse:
    """Add a set record (usually one returned by /search); duplicates answer 409."""
    ws.collections.add_set(index, record)
    return await list_sets(index, ws)


@router.delete("/collections/{index}/sets/{set_num}", response_model=RemoveSetResponse)
async def remove_set(
    index: int,
    set_num: str,
    confirm: Callable[[str], bool] = Depends(confirmation_gate),
    ws: Workspace = Depends(get_workspace)
) -> RemoveSetResponse:
    """Remove a set (requires confirm=true); removed=false when it was not there."""
    removed = ws.collections.remove_set(index, set_num, confirm)
    return RemoveSetResponse(removed=removed)


@router.get("/collections/{index}/summary", response_model=SummaryResponse)
async def collection_summary(index: int, ws: Workspace = Depends(get_workspace)) -> SummaryResponse:
    collection = ws.collections.get(index)
    return SummaryResponse(**summarize_collection(collection.sets, ws.themes))


@router.get("/collections/by-id/{collection_id}/sets", response_model=SetListResponse)
async def list_sets_by_id(collection_id: str, ws: Workspace = Depends(get_workspace)) -> SetListResponse:
    """Same as /collections/{index}/sets, addressed by the stable collection id."""
    return await list_sets(ws.collections.index_of(collection_id), ws)
