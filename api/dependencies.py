"""
API Dependencies - Workspace lifecycle and FastAPI dependency injection

One Workspace (collection store, theme cache, search session) is shared by
all requests. It is created lazily or during startup.
"""

import logging
from contextlib import asynccontextmanager
from typing import Callable, Optional

from fastapi import Query

from brick_collector.exceptions import ConfirmationDeclined
from brick_collector.settings import get_settings
from brick_collector.state.workspace import Workspace

logger = logging.getLogger(__name__)


class AppState:
    """
    Global application state - holds the workspace.

    Singleton pattern: one instance shared across all requests.
    """

    def __init__(self):
        self.workspace: Optional[Workspace] = None

    def initialize(self) -> Workspace:
        if self.workspace is None:
            logger.info("Creating workspace...")
            self.workspace = Workspace.from_settings(get_settings())
            logger.info(f"Workspace ready: {len(self.workspace.collections)} collection(s)")
        return self.workspace

    def is_ready(self) -> bool:
        return self.workspace is not None

    def get_status(self) -> dict:
        ws = self.workspace
        return {
            "initialized": ws is not None,
            "collections": len(ws.collections) if ws else 0,
            "active_index": ws.collections.active_index if ws else None,
            "themes_cached": len(ws.themes.names) if ws else 0,
            "theme_lookups_in_flight": len(ws.themes.in_flight) if ws else 0,
        }


# Global singleton instance
app_state = AppState()


def get_app_state() -> AppState:
    return app_state


def get_workspace() -> Workspace:
    """
    FastAPI dependency to access the workspace.

    Usage in routers:
        @router.get("/example")
        async def example(ws: Workspace = Depends(get_workspace)):
            ...
    """
    return app_state.initialize()


def confirmation_gate(
    confirm: bool = Query(False, description="Confirm a destructive action")
) -> Callable[[str], bool]:
    """Confirmation callable for the store: raises unless confirm=true was sent."""
    def gate(message: str) -> bool:
        if not confirm:
            raise ConfirmationDeclined(f"{message} (repeat the request with confirm=true)")
        return True
    return gate


@asynccontextmanager
async def lifespan_handler(app):
    """
    FastAPI lifespan context manager for startup/shutdown.

    Usage in main.py:
        app = FastAPI(lifespan=lifespan_handler)
    """
    logger.info("FastAPI starting up...")
    ws = app_state.initialize()
    # Fill theme names for whatever was persisted before this run
    ws.refresh_themes()

    yield

    logger.info("FastAPI shutting down...")
    await ws.themes.drain()
    logger.info("Shutdown complete")
