"""
Base Store - Abstract interface for the persistent key/value store

Every value is a JSON document serialized to a string. Implementations only
move strings around; encoding and decoding live in get_json/set_json so all
stores treat corrupt values the same way.
"""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, List, Optional

logger = logging.getLogger(__name__)


class BaseStore(ABC):
    """Abstract base class for key/value stores"""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """
        Read the raw string stored under key.

        Returns:
            The stored string, or None when the key is absent
        """
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """
        Store a raw string under key, replacing any previous value.
        """
        pass

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Delete key; no-op when absent."""
        pass

    @abstractmethod
    def keys(self) -> List[str]:
        """List the stored keys."""
        pass

    def get_json(self, key: str, default: Any = None) -> Any:
        """
        Decode the JSON value stored under key.

        Missing keys and values that fail to parse both yield default; the
        latter is logged since it means the stored state was corrupted.
        """
        raw = self.get_item(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except (TypeError, ValueError) as e:
            logger.warning(f"Corrupt value under '{key}', using default: {e}")
            return default

    def set_json(self, key: str, value: Any) -> None:
        """Serialize value to JSON and store it under key."""
        self.set_item(key, json.dumps(value, ensure_ascii=False))
