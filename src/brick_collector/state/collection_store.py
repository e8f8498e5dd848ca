"""
Collection Store - named collections of sets with an active pointer

Holds every collection in memory and writes the full state back to the
persistent store after each mutation. Subscribers are notified after the
write so follow-up work (theme enrichment) sees the committed state.
"""

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from brick_collector.exceptions import (
    DuplicateSetError,
    InvalidSetError,
    LastCollectionError,
    UnknownCollectionError,
)
from brick_collector.features.set_schema import num_parts, set_key
from brick_collector.repositories.base import BaseStore

logger = logging.getLogger(__name__)

COLLECTIONS_KEY = "lego-collections"
NAMES_KEY = "lego-collection-names"
ACTIVE_KEY = "lego-active-collection"
# Single-collection layout written by the first version of the app
LEGACY_COLLECTION_KEY = "lego-collection"

DEFAULT_COLLECTION_NAME = "My Collection"

Confirm = Callable[[str], bool]
Listener = Callable[["CollectionStore"], None]


@dataclass
class Collection:
    """A named, ordered list of set records. The id is stable for the process lifetime."""
    name: str
    sets: List[Dict[str, Any]] = field(default_factory=list)
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def find(self, key: str) -> Optional[Dict[str, Any]]:
        for record in self.sets:
            if set_key(record) == key:
                return record
        return None


def _fallback_name(index: int) -> str:
    return DEFAULT_COLLECTION_NAME if index == 0 else f"Collection {index + 1}"


class CollectionStore:
    """
    In-memory collection set synchronized to a BaseStore.

    State is loaded once on construction; there is always at least one
    collection and the active index is always a valid position.
    """

    def __init__(self, store: BaseStore):
        self._store = store
        self._collections: List[Collection] = []
        self._active = 0
        self._listeners: List[Listener] = []
        self._load()

    # ---- loading / persistence ----

    def _load(self) -> None:
        raw_collections = self._store.get_json(COLLECTIONS_KEY)
        raw_names = self._store.get_json(NAMES_KEY)
        raw_active = self._store.get_json(ACTIVE_KEY, default=0)

        if not isinstance(raw_collections, list) or not raw_collections:
            legacy = self._store.get_json(LEGACY_COLLECTION_KEY)
            if isinstance(legacy, list):
                logger.info(f"Adopting legacy single collection ({len(legacy)} sets)")
                raw_collections = [legacy]
            else:
                if raw_collections is not None:
                    logger.warning("Stored collections are not a non-empty list, starting fresh")
                raw_collections = [[]]

        if not isinstance(raw_names, list):
            raw_names = []

        for i, raw in enumerate(raw_collections):
            sets = list(raw) if isinstance(raw, list) else []
            name = raw_names[i] if i < len(raw_names) else None
            if not isinstance(name, str) or not name.strip():
                name = _fallback_name(i)
            self._collections.append(Collection(name=name, sets=sets))

        try:
            self._active = int(raw_active)
        except (TypeError, ValueError):
            logger.warning(f"Stored active index {raw_active!r} is not an integer, using 0")
            self._active = 0
        self._active = self._clamp(self._active)
        logger.info(f"Loaded {len(self._collections)} collection(s), active={self._active}")

    def _persist(self) -> None:
        self._store.set_json(COLLECTIONS_KEY, [c.sets for c in self._collections])
        self._store.set_json(NAMES_KEY, [c.name for c in self._collections])
        self._store.set_json(ACTIVE_KEY, str(self._active))

    def _commit(self) -> None:
        self._persist()
        for listener in list(self._listeners):
            listener(self)

    def subscribe(self, listener: Listener) -> None:
        """Register a callback run after every committed mutation."""
        self._listeners.append(listener)

    # ---- helpers ----

    def _clamp(self, index: int) -> int:
        return max(0, min(index, len(self._collections) - 1))

    def _get(self, index: int) -> Collection:
        if not 0 <= index < len(self._collections):
            raise UnknownCollectionError(f"No collection at position {index}")
        return self._collections[index]

    # ---- read access ----

    @property
    def active_index(self) -> int:
        return self._active

    @property
    def active(self) -> Collection:
        return self._collections[self._active]

    @property
    def active_sets(self) -> List[Dict[str, Any]]:
        return list(self.active.sets)

    @property
    def collections(self) -> List[Collection]:
        return list(self._collections)

    @property
    def names(self) -> List[str]:
        return [c.name for c in self._collections]

    def __len__(self) -> int:
        return len(self._collections)

    def get(self, index: int) -> Collection:
        return self._get(index)

    def index_of(self, collection_id: str) -> int:
        """Position of the collection with the given stable id."""
        for i, collection in enumerate(self._collections):
            if collection.id == collection_id:
                return i
        raise UnknownCollectionError(f"No collection with id {collection_id}")

    def contains(self, key: str, index: Optional[int] = None) -> bool:
        """Whether a set with this set_num is in the collection (active by default)."""
        target = self.active if index is None else self._get(index)
        return target.find(key) is not None

    def total_parts(self, index: Optional[int] = None) -> int:
        target = self.active if index is None else self._get(index)
        return sum(num_parts(record) for record in target.sets)

    # ---- mutations ----

    def add_set(self, index: int, record: Dict[str, Any]) -> None:
        """Append a set; rejects a set_num already present in that collection."""
        collection = self._get(index)
        key = set_key(record)
        if not key:
            raise InvalidSetError("Set record has no set_num")
        if collection.find(key) is not None:
            raise DuplicateSetError(key, collection.name)
        collection.sets.append(dict(record))
        logger.info(f"Added {key} to '{collection.name}' ({len(collection.sets)} sets)")
        self._commit()

    def remove_set(self, index: int, key: str, confirm: Confirm) -> bool:
        """
        Remove the set with this set_num after confirmation.

        Returns:
            True when a set was removed; False when it was not found or the
            user declined (the collection is left untouched in both cases)
        """
        collection = self._get(index)
        if collection.find(key) is None:
            logger.debug(f"Set {key} not in '{collection.name}', nothing to remove")
            return False
        if not confirm(f"Do you really want to remove set {key}?"):
            return False
        collection.sets = [r for r in collection.sets if set_key(r) != key]
        logger.info(f"Removed {key} from '{collection.name}'")
        self._commit()
        return True

    def create_collection(self, name: str = "") -> Collection:
        """Append an empty collection and make it active."""
        return self.append_collection(name, [])

    def append_collection(self, name: str, sets: List[Any]) -> Collection:
        """Append a collection (empty or pre-filled by an import) and make it active."""
        name = (name or "").strip() or f"Collection {len(self._collections) + 1}"
        collection = Collection(name=name, sets=list(sets))
        self._collections.append(collection)
        self._active = len(self._collections) - 1
        logger.info(f"Created collection '{name}' at position {self._active} ({len(collection.sets)} sets)")
        self._commit()
        return collection

    def rename_collection(self, index: int, name: str) -> bool:
        """Rename a collection; blank names are ignored and the old name kept."""
        collection = self._get(index)
        name = (name or "").strip()
        if not name:
            logger.debug(f"Ignoring blank name for collection {index}")
            return False
        collection.name = name
        self._commit()
        return True

    def delete_collection(self, index: int, confirm: Confirm) -> bool:
        """
        Delete a collection after confirmation.

        The last remaining collection cannot be deleted. When the removed
        position is at or before the active one, the active index moves to
        max(0, active - 1).
        """
        collection = self._get(index)
        if len(self._collections) == 1:
            raise LastCollectionError()
        if not confirm(f"Delete collection '{collection.name}' and all its sets?"):
            return False
        del self._collections[index]
        if index <= self._active:
            self._active = max(0, self._active - 1)
        self._active = self._clamp(self._active)
        logger.info(f"Deleted collection '{collection.name}', active={self._active}")
        self._commit()
        return True

    def set_active(self, index: int) -> int:
        self._active = self._clamp(index)
        self._commit()
        return self._active

    def replace_collection(self, index: int, sets: List[Any]) -> None:
        """Replace the contents of a collection wholesale (no merge, no de-dup)."""
        collection = self._get(index)
        collection.sets = list(sets)
        logger.info(f"Replaced contents of '{collection.name}' with {len(collection.sets)} records")
        self._commit()
