"""
Persistent store adapters - key/value storage for collection state

Mirrors the browser localStorage contract: string keys mapping to
serialized (JSON) string values. Swappable between a local file
(default) and memory (tests).
"""

from .base import BaseStore
from .local import LocalFileStore
from .memory import InMemoryStore

__all__ = ["BaseStore", "LocalFileStore", "InMemoryStore"]
