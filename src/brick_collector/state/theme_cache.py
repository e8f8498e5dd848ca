"""
Theme Name Cache - best-effort enrichment of theme ids with display names

Lookups run as independent asyncio tasks so callers never wait on the
network. Each lookup's blocking HTTP call runs in a worker thread; the
resulting name is merged back on the event loop, so the cache is only ever
mutated from one thread.
"""

import asyncio
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Set

from brick_collector.repositories.base import BaseStore

logger = logging.getLogger(__name__)

THEME_NAMES_KEY = "lego-theme-names"

ThemeResolver = Callable[[str], str]


def theme_key(theme_id: Any) -> Optional[str]:
    """Normalise a theme id to the string used as cache key (None if unusable)."""
    if theme_id is None or isinstance(theme_id, bool):
        return None
    if isinstance(theme_id, float) and theme_id.is_integer():
        theme_id = int(theme_id)
    key = str(theme_id).strip()
    return key or None


def distinct_theme_ids(sets: Iterable[Any]) -> List[str]:
    """Theme ids present in the given set records, in first-seen order."""
    seen: List[str] = []
    for record in sets:
        if not isinstance(record, dict):
            continue
        key = theme_key(record.get('theme_id'))
        if key is not None and key not in seen:
            seen.append(key)
    return seen


class ThemeNameCache:
    """
    Write-once mapping of theme id -> display name, persisted to a BaseStore.

    Args:
        store: persistent store holding the cache under THEME_NAMES_KEY
        resolver: blocking callable returning the name for one theme id
    """

    def __init__(self, store: BaseStore, resolver: ThemeResolver):
        self._store = store
        self._resolver = resolver
        self._names: Dict[str, str] = self._load()
        self._in_flight: Set[str] = set()
        # Strong references so pending tasks are not garbage collected
        self._tasks: Set[asyncio.Task] = set()

    def _load(self) -> Dict[str, str]:
        raw = self._store.get_json(THEME_NAMES_KEY, default={})
        if not isinstance(raw, dict):
            logger.warning("Stored theme names are not a mapping, starting empty")
            return {}
        return {str(k): v for k, v in raw.items() if isinstance(v, str) and v}

    @property
    def names(self) -> Dict[str, str]:
        return dict(self._names)

    @property
    def in_flight(self) -> Set[str]:
        return set(self._in_flight)

    def get(self, theme_id: Any) -> Optional[str]:
        key = theme_key(theme_id)
        return self._names.get(key) if key is not None else None

    def label(self, theme_id: Any) -> str:
        """Resolved name, or 'Theme <id>' until a lookup succeeds."""
        name = self.get(theme_id)
        if name:
            return name
        return f"Theme {theme_key(theme_id) or '?'}"

    def merge(self, theme_id: Any, name: str) -> bool:
        """
        Add one entry. Existing entries are never overwritten.

        Returns:
            True if the entry was added and persisted
        """
        key = theme_key(theme_id)
        if key is None or not name or key in self._names:
            return False
        self._names[key] = name
        self._store.set_json(THEME_NAMES_KEY, self._names)
        logger.debug(f"Theme {key} resolved to '{name}'")
        return True

    def pending_ids(self, sets: Iterable[Any]) -> List[str]:
        """Theme ids in sets that are neither resolved nor being looked up."""
        return [
            key for key in distinct_theme_ids(sets)
            if key not in self._names and key not in self._in_flight
        ]

    def reconcile(self, sets: Iterable[Any]) -> List[asyncio.Task]:
        """
        Schedule one lookup per unresolved theme id found in sets.

        Fire-and-forget: the returned tasks may be ignored. Without a running
        event loop nothing is scheduled.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop, skipping theme reconciliation")
            return []

        tasks = []
        for key in self.pending_ids(sets):
            self._in_flight.add(key)
            task = loop.create_task(self._lookup(key))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
            tasks.append(task)
        if tasks:
            logger.debug(f"Scheduled {len(tasks)} theme lookup(s)")
        return tasks

    async def resolve_missing(self, sets: Iterable[Any]) -> Dict[str, str]:
        """Run a reconciliation pass and wait for its lookups to finish."""
        tasks = self.reconcile(list(sets))
        if tasks:
            await asyncio.gather(*tasks)
        return self.names

    async def _lookup(self, key: str) -> Optional[str]:
        try:
            name = await asyncio.to_thread(self._resolver, key)
        except Exception as e:
            # Stays unresolved; the next reconciliation pass may retry it
            logger.warning(f"Theme lookup failed for {key}: {e}")
            return None
        finally:
            self._in_flight.discard(key)

        if not name:
            logger.warning(f"Theme lookup for {key} returned no name")
            return None
        self.merge(key, str(name))
        return self.get(key)

    async def drain(self) -> None:
        """Wait for every lookup scheduled so far (used on shutdown and in tests)."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))
