"""
Search Router - query the Rebrickable set database
"""

import logging
from fastapi import APIRouter, Depends, Query

from api.dependencies import get_workspace
from api.schemas.search import SearchResponse
from brick_collector.state.workspace import Workspace

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/search", response_model=SearchResponse)
async def search_sets(
    q: str = Query(..., description="Set number or name, e.g. 10265"),
    ws: Workspace = Depends(get_workspace)
) -> SearchResponse:
    """
    Search sets by text.

    Results are flagged with in_collection for the active collection. When a
    newer search superseded this one it reports applied=false with no results;
    the newer request carries its own.
    """
    applied = await ws.search.run(q)
    return SearchResponse(
        query=q,
        applied=applied,
        results=ws.annotate_results(ws.search.results) if applied else [],
    )
