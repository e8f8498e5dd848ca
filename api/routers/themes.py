"""
Themes Router - resolved theme names
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from api.dependencies import get_workspace
from brick_collector.state.workspace import Workspace

router = APIRouter()


@router.get("/themes")
async def list_themes(ws: Workspace = Depends(get_workspace)) -> Dict[str, str]:
    """All resolved theme names keyed by theme id."""
    return ws.themes.names


@router.get("/themes/{theme_id}")
async def theme_label(theme_id: str, ws: Workspace = Depends(get_workspace)) -> Dict[str, Any]:
    return {
        "theme_id": theme_id,
        "label": ws.themes.label(theme_id),
        "resolved": ws.themes.get(theme_id) is not None,
    }


@router.post("/themes/refresh")
async def refresh_themes(ws: Workspace = Depends(get_workspace)) -> Dict[str, Any]:
    """Schedule lookups for unresolved themes of the active collection."""
    tasks = ws.themes.reconcile(ws.collections.active_sets)
    return {"scheduled": len(tasks)}
