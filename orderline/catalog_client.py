# Catalog Client - REST API client for Orderline
# Reads items, categories and suppliers from the ordering app's data API

import requests
import logging
import time
from typing import Any, Dict, List, Optional

from .catalog import (
    Catalog,
    CatalogFormatError,
    CatalogItem,
    category_from_dict,
    parse_catalog,
    supplier_from_dict,
)


logger = logging.getLogger(__name__)


class CatalogClient:
    """Read-only client for GET /api/data/<type>, cached per instance"""

    def __init__(self, base_url: str, api_key: Optional[str] = None, timeout: int = 30,
                 data_path: str = '/api/data'):
        self.base_url = base_url.rstrip('/')
        self.data_path = '/' + data_path.strip('/')
        self.api_key = api_key
        self.timeout = timeout
        self.session = requests.Session()
        self._cache: Dict[str, Any] = {}

        if api_key:
            self.session.headers.update({'Authorization': f'Bearer {api_key}'})

        self.session.headers.update({
            'Accept': 'application/json',
            'User-Agent': 'Orderline/0.1'
        })

        # Retry settings, timeouts and connection errors only
        self.max_retries = 3
        self.retry_delay = 1  # seconds

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def close(self):
        self._cache.clear()
        self.session.close()

    def invalidate(self, data_type: Optional[str] = None):
        """Drop one cached collection, or all of them"""
        if data_type is None:
            self._cache.clear()
        else:
            self._cache.pop(data_type, None)

    def _get_json(self, endpoint: str, data_type: str, default: Any) -> Any:
        for attempt in range(self.max_retries):
            try:
                response = self.session.get(endpoint, timeout=self.timeout)
            except requests.exceptions.Timeout:
                logger.warning(f"Timeout fetching {data_type}, retry {attempt + 1}/{self.max_retries}")
                time.sleep(self.retry_delay * (attempt + 1))
                continue
            except requests.exceptions.ConnectionError:
                logger.warning(f"Connection error fetching {data_type}, retry {attempt + 1}/{self.max_retries}")
                time.sleep(self.retry_delay * (attempt + 1))
                continue
            except requests.exceptions.RequestException as e:
                logger.error(f"Error fetching {data_type}: {e}")
                return default

            if response.status_code == 401:
                logger.error("Authentication failed - check API key")
                return default

            if response.status_code != 200:
                logger.error(f"Failed to fetch {data_type}: {response.status_code} {response.reason}")
                return default

            try:
                data = response.json()
            except ValueError:
                logger.error(f"Invalid JSON for {data_type}")
                return default

            return data

        logger.error(f"Giving up on {data_type} after {self.max_retries} attempts")
        return default

    def _fetch(self, data_type: str, default: Any) -> Any:
        if data_type in self._cache:
            return self._cache[data_type]

        endpoint = f"{self.base_url}{self.data_path}/{data_type}"
        missing = object()
        data = self._get_json(endpoint, data_type, missing)
        if data is missing:
            return default
        self._cache[data_type] = data
        return data

    def _fetch_records(self, data_type: str) -> List[Dict]:
        records = self._fetch(data_type, [])
        if not isinstance(records, list):
            logger.warning(f"Expected a list for {data_type}, got {type(records).__name__}")
            return []
        return [r for r in records if isinstance(r, dict)]

    def get_items(self) -> List[CatalogItem]:
        return [CatalogItem.from_dict(r) for r in self._fetch_records('items') if r.get('name')]

    def get_categories(self):
        return [category_from_dict(r) for r in self._fetch_records('categories')]

    def get_suppliers(self):
        return [supplier_from_dict(r) for r in self._fetch_records('suppliers')]

    def get_catalog(self) -> Catalog:
        return Catalog(
            items=self.get_items(),
            categories=self.get_categories(),
            suppliers=self.get_suppliers(),
        )

    def export_data(self) -> Optional[Catalog]:
        """Full catalog from GET /api/export, or None when the export fails"""
        data = self._get_json(f"{self.base_url}/api/export", 'export', None)
        if data is None:
            return None
        try:
            return parse_catalog(data)
        except CatalogFormatError as e:
            logger.error(f"Unexpected export payload: {e}")
            return None

    def import_data(self, catalog: Catalog) -> bool:
        """Replace the server's catalog via POST /api/import"""
        try:
            response = self.session.post(
                f"{self.base_url}/api/import",
                json=catalog.to_dict(),
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Error importing catalog: {e}")
            return False

        if response.status_code not in (200, 201, 204):
            logger.error(f"Failed to import catalog: {response.status_code} {response.reason}")
            return False

        self._cache.clear()
        logger.info(f"Imported {len(catalog.items)} catalog items")
        return True

    def check_health(self) -> bool:
        """Check if the data API is reachable"""
        try:
            response = self.session.get(f"{self.base_url}/api/health", timeout=5)
            return response.status_code == 200
        except requests.exceptions.RequestException:
            return False

    def get_status(self) -> Dict:
        return {
            'base_url': self.base_url,
            'connected': self.check_health(),
            'cached': sorted(self._cache),
        }


# Stub implementation for testing
class StubCatalogClient:
    """In-memory client for tests and offline use"""

    def __init__(self, catalog: Optional[Catalog] = None, *args, **kwargs):
        self.catalog = catalog or Catalog()
        self.fetch_count = 0

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def close(self):
        pass

    def invalidate(self, data_type: Optional[str] = None):
        pass

    def get_items(self) -> List[CatalogItem]:
        self.fetch_count += 1
        return list(self.catalog.items)

    def get_categories(self):
        return list(self.catalog.categories)

    def get_suppliers(self):
        return list(self.catalog.suppliers)

    def get_catalog(self) -> Catalog:
        return Catalog(
            items=self.get_items(),
            categories=self.get_categories(),
            suppliers=self.get_suppliers(),
        )

    def export_data(self) -> Catalog:
        return self.get_catalog()

    def import_data(self, catalog: Catalog) -> bool:
        self.catalog = catalog
        return True

    def check_health(self) -> bool:
        return True
