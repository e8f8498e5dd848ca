"""
Local File Store - File-based key/value store

All keys live in a single JSON object on disk ({key: serialized value}).
The file is read once on construction and rewritten atomically on every
change, so the last write wins.
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

from brick_collector.io.writers import atomic_write_text
from brick_collector.repositories.base import BaseStore

logger = logging.getLogger(__name__)


class LocalFileStore(BaseStore):
    """Store implementation using one local JSON file"""

    def __init__(self, path: Path):
        self.path = Path(path)
        self._items: Dict[str, str] = self._read()
        logger.info(f"LocalFileStore initialized at {self.path} ({len(self._items)} keys)")

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            logger.debug(f"No store file at {self.path}, starting empty")
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read store file {self.path}, starting empty: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Store file {self.path} is not a JSON object, starting empty")
            return {}
        # Values are expected to be strings; anything else is re-encoded
        return {
            str(k): v if isinstance(v, str) else json.dumps(v)
            for k, v in data.items()
        }

    def _flush(self) -> None:
        atomic_write_text(json.dumps(self._items, ensure_ascii=False, indent=2), self.path)

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value
        self._flush()

    def remove_item(self, key: str) -> None:
        if key in self._items:
            del self._items[key]
            self._flush()

    def keys(self) -> List[str]:
        return list(self._items)

