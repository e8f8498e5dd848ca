"""
Transfer Router - export and import of the active collection
"""

import logging
from typing import Callable, Optional

from fastapi import APIRouter, Depends, Query, Request, Response

from api.dependencies import confirmation_gate, get_workspace
from api.schemas.collections import ImportResponse
from brick_collector.io.transfer import (
    dumps_collection,
    export_filename,
    import_as_new_collection,
    import_replace_active,
)
from brick_collector.state.workspace import Workspace

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/collections/active/export")
async def export_active(ws: Workspace = Depends(get_workspace)) -> Response:
    """Download the active collection as a JSON file named after it and today's date."""
    collection = ws.collections.active
    filename = export_filename(collection.name)
    return Response(
        content=dumps_collection(collection.sets),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/collections/active/import", response_model=ImportResponse)
async def import_file(
    request: Request,
    mode: str = Query("replace", pattern="^(replace|new)$", description="replace the active collection or add a new one"),
    filename: Optional[str] = Query(None, description="Source file name (names the new collection)"),
    strict: bool = Query(False, description="Validate every record"),
    confirm: Callable[[str], bool] = Depends(confirmation_gate),
    ws: Workspace = Depends(get_workspace)
) -> ImportResponse:
    """
    Import a JSON array of sets from the raw request body.

    mode=replace needs confirm=true; mode=new appends a collection and makes
    it active. Non-array, non-UTF-8 or unparsable bodies answer 400 and change nothing.
    """
    payload = await request.body()
    store = ws.collections
    if mode == "new":
        import_as_new_collection(store, payload, filename=filename, strict=strict)
    else:
        import_replace_active(store, payload, confirm, strict=strict)
    return ImportResponse(index=store.active_index, name=store.active.name, set_count=len(store.active.sets))
