from requests.exceptions import HTTPError, RequestException
from pydantic import ValidationError
from typing import Any, Dict, List, Optional
import logging

from brick_collector.adapters.rebrickable.client import Rebrickable_APIClient
from brick_collector.exceptions import SearchError
from brick_collector.features.set_schema import normalize_set


logger = logging.getLogger(__name__)

class Rebrickable_API():
    """Wrapper class for the Rebrickable LEGO catalog endpoints"""
    def __init__(self, client: Optional[Rebrickable_APIClient] = None):
        self._client: Rebrickable_APIClient = client or Rebrickable_APIClient()

    def search_sets(self, query: str) -> List[Dict[str, Any]]:
        """
        Search sets by number or name.

        Returns the normalised set records of the first result page; blank
        queries return an empty list without calling the API.

        Raises:
            SearchError: transport failure, HTTP error or unparsable response
        """
        query = (query or "").strip()
        if not query:
            return []

        try:
            response = self._client.get('lego/sets/', params={'search': query})
        except (RequestException, ValueError) as e:
            raise SearchError(f"Search for '{query}' failed: {e}") from e

        if not isinstance(response, dict):
            raise SearchError(f"Unexpected search response for '{query}'")

        results = []
        for record in response.get('results') or []:
            try:
                results.append(normalize_set(record))
            except ValidationError as e:
                logger.warning(f"Skipping malformed search result {record!r}: {e}")
        logger.info(f"Search '{query}' returned {len(results)} set(s)")
        return results

    def get_theme(self, theme_id: str) -> Dict[str, Any] | None:
        """Fetches a theme record ({id, parent_id, name}); None if it does not exist"""
        try:
            return self._client.get(f'lego/themes/{theme_id}/')
        except HTTPError as e:
            if e.response is not None and e.response.status_code == 404:
                logger.warning(f"Theme ID {theme_id} not found (404)")
                return None
            raise

    def get_theme_name(self, theme_id: str) -> str:
        """
        Resolve a theme id to its display name.

        Raises on transport errors and unknown ids so the caller can leave
        the id unresolved.
        """
        details = self.get_theme(theme_id)
        if not details or not details.get('name'):
            raise LookupError(f"No name for theme {theme_id}")
        return str(details['name'])
