"""
Search session - tracks the latest remote search and its results

Every search gets a monotonic token. When a slower, older search completes
after a newer one was started, its results (or its error) are dropped so the
visible results always belong to the most recent query.
"""

import asyncio
import logging
from typing import Any, Callable, Dict, List

from brick_collector.exceptions import SearchError

logger = logging.getLogger(__name__)

SearchFn = Callable[[str], List[Dict[str, Any]]]


class SearchSession:

    def __init__(self, search: SearchFn):
        self._search = search
        self._token = 0
        self.query: str = ""
        self.results: List[Dict[str, Any]] = []
        self.is_loading: bool = False

    @property
    def token(self) -> int:
        return self._token

    async def run(self, query: str) -> bool:
        """
        Run one search in a worker thread.

        Returns:
            True if the results were applied, False if a newer search
            superseded this one

        Raises:
            SearchError: when the latest search fails (loading state is cleared)
        """
        self._token += 1
        token = self._token
        self.query = query
        self.is_loading = True

        try:
            results = await asyncio.to_thread(self._search, query)
        except SearchError:
            if token != self._token:
                logger.debug(f"Ignoring failure of superseded search '{query}'")
                return False
            self.is_loading = False
            self.results = []
            raise

        if token != self._token:
            logger.debug(f"Discarding stale results for '{query}' (token {token} < {self._token})")
            return False

        self.results = results
        self.is_loading = False
        return True
