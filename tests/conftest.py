"""Shared fixtures: in-memory stores, sample sets and fake remote calls."""
import threading

import pytest

from brick_collector.repositories import InMemoryStore
from brick_collector.state.collection_store import CollectionStore
from brick_collector.state.workspace import Workspace


UCS_FALCON = {
    "set_num": "75192-1",
    "name": "Millennium Falcon",
    "year": 2017,
    "num_parts": 7541,
    "theme_id": 171,
    "set_img_url": "https://cdn.rebrickable.com/media/sets/75192-1.jpg",
}
MUSTANG = {
    "set_num": "10265-1",
    "name": "Ford Mustang",
    "year": 2019,
    "num_parts": 1471,
    "theme_id": 673,
    "set_img_url": "https://cdn.rebrickable.com/media/sets/10265-1.jpg",
}
CAFE_CORNER = {
    "set_num": "10182-1",
    "name": "Cafe Corner",
    "year": 2007,
    "num_parts": 2056,
    "theme_id": 155,
    "set_img_url": "https://cdn.rebrickable.com/media/sets/10182-1.jpg",
}

THEME_NAMES = {"171": "Ultimate Collector Series", "673": "Creator Expert", "155": "Modular Buildings"}


class FakeResolver:
    """Thread-safe stand-in for the theme lookup; records every call."""

    def __init__(self, names=None, fail=()):
        self.names = dict(THEME_NAMES if names is None else names)
        self.fail = set(fail)
        self.calls = []
        self._lock = threading.Lock()

    def __call__(self, theme_id):
        with self._lock:
            self.calls.append(theme_id)
        if theme_id in self.fail:
            raise ConnectionError(f"lookup of {theme_id} failed")
        return self.names[theme_id]


class FakeSearch:
    def __init__(self, catalog=None):
        self.catalog = list(catalog if catalog is not None else [UCS_FALCON, MUSTANG, CAFE_CORNER])
        self.queries = []

    def __call__(self, query):
        self.queries.append(query)
        q = query.lower()
        return [dict(r) for r in self.catalog if q in r["set_num"].lower() or q in r["name"].lower()]


def always_yes(message):
    return True


def always_no(message):
    return False


@pytest.fixture
def memory_store():
    return InMemoryStore()


@pytest.fixture
def collection_store(memory_store):
    return CollectionStore(memory_store)


@pytest.fixture
def resolver():
    return FakeResolver()


@pytest.fixture
def fake_search():
    return FakeSearch()


@pytest.fixture
def workspace(memory_store, fake_search, resolver):
    return Workspace(memory_store, search=fake_search, resolver=resolver)
