"""
Workspace - wires the collection store, theme cache and search together

One instance owns the whole application state. Every committed collection
mutation triggers a theme reconciliation over the active collection.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from brick_collector.adapters.rebrickable.client import Rebrickable_APIClient
from brick_collector.adapters.rebrickable.rebrickable import Rebrickable_API
from brick_collector.exceptions import SearchError
from brick_collector.repositories.base import BaseStore
from brick_collector.repositories.local import LocalFileStore
from brick_collector.settings import Settings, get_settings
from brick_collector.state.collection_store import CollectionStore
from brick_collector.state.search_session import SearchFn, SearchSession
from brick_collector.state.theme_cache import ThemeNameCache, ThemeResolver

logger = logging.getLogger(__name__)


class Workspace:

    def __init__(self, store: BaseStore, search: SearchFn, resolver: ThemeResolver):
        self.store = store
        self.collections = CollectionStore(store)
        self.themes = ThemeNameCache(store, resolver)
        self.search_sets = search
        self.search = SearchSession(search)
        self.collections.subscribe(self._on_change)

    @classmethod
    def from_settings(cls, cfg: Optional[Settings] = None,
                      storage_path: Optional[Path] = None) -> "Workspace":
        """Build a workspace on the local file store with the Rebrickable API."""
        cfg = cfg or get_settings()
        store = LocalFileStore(storage_path or cfg.storage_path)
        api = _LazyRebrickable(cfg)
        return cls(store, search=api.search_sets, resolver=api.get_theme_name)

    def _on_change(self, collections: CollectionStore) -> None:
        self.themes.reconcile(collections.active_sets)

    def refresh_themes(self) -> None:
        """Schedule lookups for the active collection without a mutation."""
        self.themes.reconcile(self.collections.active_sets)

    def annotate_results(self, results: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Copy search results, flagging the ones already in the active collection."""
        return [
            {**record, 'in_collection': self.collections.contains(str(record.get('set_num')))}
            for record in results
        ]


class _LazyRebrickable:
    """Creates the API client on first use so a missing key only fails remote calls."""

    def __init__(self, cfg: Settings):
        self._cfg = cfg
        self._api: Optional[Rebrickable_API] = None

    def _get(self) -> Rebrickable_API:
        if self._api is None:
            try:
                client = Rebrickable_APIClient(cfg=self._cfg)
            except ValidationError as e:
                raise SearchError("Rebrickable API key is not configured (set REBRICKABLE_API_KEY)") from e
            self._api = Rebrickable_API(client)
        return self._api

    def search_sets(self, query: str) -> List[Dict[str, Any]]:
        return self._get().search_sets(query)

    def get_theme_name(self, theme_id: str) -> str:
        return self._get().get_theme_name(theme_id)
