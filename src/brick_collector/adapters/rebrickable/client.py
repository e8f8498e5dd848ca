import logging
from typing import Any, Optional

import certifi  # Provides Mozilla's CA bundle for SSL certificate verification
import requests
import urllib3
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from brick_collector.settings import RebrickableSettings, Settings, get_rebrickable_settings, get_settings

logger = logging.getLogger(__name__)


class Rebrickable_APIClient:
    def __init__(self,
                cfg: Optional[Settings] = None,
                rebrickable: Optional[RebrickableSettings] = None,
                session: Optional[requests.Session] = None,
                total_retries: int = 3,
                backoff_factor: float = 1.0,
                status_forcelist: tuple = (429, 500, 502, 503, 504)):
        """
        Initializes a requests.Session with:
            - Authorization header (Rebrickable "key" scheme)
            - JSON accept header
            - HTTPAdapter for retries on connection errors and specified HTTP status codes
        """
        self.cfg = cfg or get_settings()
        self.rebrickable: RebrickableSettings = rebrickable or get_rebrickable_settings(self.cfg)
        self.session = session or requests.Session()

        if self.cfg.verify_ssl:
            self.verify: Any = certifi.where()
        else:
            self.verify = False
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

        # Configure retries
        retry_strategy = Retry(
            total=total_retries,
            connect=total_retries,
            read=total_retries,
            backoff_factor=backoff_factor,
            status_forcelist=status_forcelist,
            allowed_methods=frozenset(["GET"]),
            raise_on_status=False
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        self.session.mount("https://", adapter)
        self.session.mount("http://", adapter)

        # Default headers
        self.session.headers.update({
            "Authorization": f"key {self.rebrickable.api_key.get_secret_value()}",
            "Accept": "application/json",
        })

    def _handle_response(self, resp: requests.Response) -> Any:
        """
            Handle API response with proper error checking and JSON parsing.

            Args:
                resp: HTTP response object

            Returns:
                Parsed JSON data

            Raises:
                requests.HTTPError: For 4xx/5xx HTTP status codes
                ValueError: If response is not valid JSON
            """
        try:
            resp.raise_for_status()

            if not resp.content:
                logger.warning(f"Empty response received for {resp.url}")
                return {}

            return resp.json()

        except requests.HTTPError:
            logger.error(f"HTTP {resp.status_code} error for {resp.url}: {resp.text[:200]}")
            raise

        except ValueError as e:
            # JSON decode error
            logger.error(f"Invalid JSON response from {resp.url}: {resp.text[:200]}...")
            raise ValueError(f"Invalid JSON response: {e}")

    def get(self, path: str, params=None) -> Any:
        """
        Perform a GET request to the Rebrickable API, returning parsed JSON.

        Uses certifi's CA bundle for SSL verification unless verify_ssl is
        turned off in settings.
        """
        api_base_url: str = str(self.rebrickable.api_base_url)
        url = f"{api_base_url.rstrip('/')}/{path.lstrip('/')}"
        resp = self.session.get(url, params=params, timeout=self.cfg.request_timeout, verify=self.verify)
        return self._handle_response(resp)
