"""
NocoBase API Client - Collection record fetching

NocoBase exposes every collection through a REST list action:
    GET {base_url}/api/{collection}:list?page=N&pageSize=M

Responses are wrapped in an envelope:
    {"data": [...records...], "meta": {"count": <total>, "page": N, ...}}

Authentication:
- Bearer API key in the Authorization header
- Fixed role/locale/app/timezone headers select the "Assets" app context

Failure policy:
- No retries. A timeout, connection error or non-2xx status on ANY page
  aborts the whole fetch with NocoBaseFetchError - partial collections are
  never returned to callers.

Usage:
    from services.nocobase_client import NocoBaseClient

    client = NocoBaseClient(base_url="https://nocobase.example.org", api_key="...")

    # Every record in a collection, paging transparently
    srbs = client.fetch_all_records("SRB_Details")

    # A single list call (first page only)
    buildings = client.fetch_list("Buildings")
"""

import logging
import time
from typing import Any, Dict, List, Optional, Tuple

import requests

from config import Config

logger = logging.getLogger(__name__)


# =============================================================================
# Configuration
# =============================================================================

DEFAULT_PAGE_SIZE = 200
DEFAULT_TIMEOUT_SECONDS = 15


class NocoBaseError(Exception):
    """Base exception for NocoBase API errors."""
    pass


class NocoBaseConfigError(NocoBaseError):
    """Missing base URL or API key."""
    pass


class NocoBaseFetchError(NocoBaseError):
    """Transport errors, timeouts, non-2xx statuses and undecodable bodies."""

    def __init__(self, message: str, endpoint: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.endpoint = endpoint
        self.status_code = status_code


def build_headers(api_key: str, config=Config) -> Dict[str, str]:
    """Request headers for the NocoBase "Assets" app."""
    return {
        "Authorization": f"Bearer {api_key}",
        "Accept": "application/json",
        "X-Role": config.NOCOBASE_ROLE,
        "X-Locale": config.NOCOBASE_LOCALE,
        "X-App": config.NOCOBASE_APP,
        "X-Timezone": config.NOCOBASE_TIMEZONE,
        "X-Hostname": config.NOCOBASE_HOSTNAME,
        "X-Authentication": config.NOCOBASE_AUTHENTICATION,
    }


def _unwrap_envelope(payload: Any) -> Tuple[List[Dict], Optional[int]]:
    """
    Split a list response into (records, reported_total).

    NocoBase wraps data in {"data": [...]}; a bare JSON list is treated as
    the records themselves.
    """
    if isinstance(payload, dict):
        records = payload.get("data")
        meta = payload.get("meta") or {}
        total = meta.get("count") if isinstance(meta, dict) else None
    else:
        records = payload
        total = None

    if not isinstance(records, list):
        records = []
    if not isinstance(total, int) or isinstance(total, bool):
        total = None
    return records, total


class NocoBaseClient:
    """
    NocoBase REST client for fetching collection records.

    Features:
    - Transparent pagination until exhaustion
    - Fixed per-request timeout
    - Shared requests.Session with auth headers
    - Fail-fast: no retries, no partial results

    Example:
        with NocoBaseClient() as client:
            assets = client.fetch_all_records("Asset")
            print(f"{len(assets)} assets")
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        page_size: Optional[int] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
        config=Config,
    ):
        """
        Initialize NocoBase client.

        Args:
            base_url: NocoBase server root. Defaults to Config.NOCOBASE_BASE_URL.
            api_key: Bearer API key. Defaults to Config.NOCOBASE_API_KEY.
            page_size: Records per list request (default 200).
            timeout: Per-request timeout in seconds (default 15).
            session: Optional pre-built session (tests inject a mock here).
        """
        self.base_url = (base_url or config.NOCOBASE_BASE_URL or "").rstrip("/")
        self.api_key = api_key or config.NOCOBASE_API_KEY
        self.page_size = page_size or getattr(config, "NOCOBASE_PAGE_SIZE", None) or DEFAULT_PAGE_SIZE
        self.timeout = timeout or getattr(config, "NOCOBASE_TIMEOUT_SECONDS", None) or DEFAULT_TIMEOUT_SECONDS
        self._config = config
        self._session = session or requests.Session()

        logger.info(f"NocoBase client initialized for {self.base_url or '<unset>'}")

    # =========================================================================
    # Transport
    # =========================================================================

    def _ensure_configured(self) -> None:
        if not self.base_url:
            raise NocoBaseConfigError(
                "NocoBase base URL not found. Set NOCOBASE_BASE_URL (or BASE_URL) "
                "environment variable or pass base_url to constructor."
            )
        if not self.api_key:
            raise NocoBaseConfigError(
                "NocoBase API key not found. Set NOCOBASE_API_KEY (or API_KEY) "
                "environment variable or pass api_key to constructor."
            )

    def _get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        Issue one GET and return the decoded JSON body.

        Raises:
            NocoBaseConfigError: If base URL or API key is missing.
            NocoBaseFetchError: On timeout, connection error, non-2xx or bad JSON.
        """
        self._ensure_configured()
        url = f"{self.base_url}{endpoint}"

        try:
            response = self._session.get(
                url,
                params=params,
                headers=build_headers(self.api_key, self._config),
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.exceptions.Timeout as e:
            logger.error(f"Timeout after {self.timeout}s fetching {endpoint}: {e}")
            raise NocoBaseFetchError(
                f"Timeout after {self.timeout}s fetching {endpoint}", endpoint=endpoint
            ) from e
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            logger.error(f"HTTP {status} fetching {endpoint}: {e}")
            raise NocoBaseFetchError(
                f"Request failed with status code {status} for {endpoint}",
                endpoint=endpoint,
                status_code=status,
            ) from e
        except requests.exceptions.RequestException as e:
            logger.error(f"Error fetching {endpoint}: {e}")
            raise NocoBaseFetchError(f"Error fetching {endpoint}: {e}", endpoint=endpoint) from e

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Invalid JSON from {endpoint}: {e}")
            raise NocoBaseFetchError(
                f"Invalid JSON from {endpoint}",
                endpoint=endpoint,
                status_code=response.status_code,
            ) from e

    # =========================================================================
    # Data Fetching
    # =========================================================================

    def fetch_list(self, collection: str, page_size: Optional[int] = None) -> List[Dict]:
        """
        Fetch a single list page (no pagination).

        Args:
            collection: Collection name, e.g. "Buildings".
            page_size: Optional pageSize query param; server default if None.

        Returns:
            Records from the first page.
        """
        if not collection:
            raise ValueError("collection name must be a non-empty string")

        endpoint = f"/api/{collection}:list"
        params = {"pageSize": page_size} if page_size else None
        records, _ = _unwrap_envelope(self._get(endpoint, params=params))

        logger.info(f"Fetched {endpoint}: {len(records)} records")
        return records

    def fetch_all_records(self, collection: str) -> List[Dict]:
        """
        Fetch every record in a collection, paging until exhaustion.

        Stops when:
        - the server-reported total (meta.count) has been reached, or
        - a page returns fewer records than the page size, or
        - a page is empty.

        Args:
            collection: Collection name, e.g. "SRB_Details".

        Returns:
            All records in upstream page order.

        Raises:
            NocoBaseFetchError: If any page fails (no partial results).
        """
        if not collection:
            raise ValueError("collection name must be a non-empty string")

        endpoint = f"/api/{collection}:list"
        start_time = time.time()
        all_records: List[Dict] = []
        page = 1

        while True:
            logger.debug(f"Fetching page {page} for {collection}")
            payload = self._get(endpoint, params={"page": page, "pageSize": self.page_size})
            records, total = _unwrap_envelope(payload)

            if not records:
                break

            all_records.extend(records)
            logger.info(
                f"{collection} page {page}: {len(records)} records, "
                f"total so far: {len(all_records)}"
            )

            if total and len(all_records) >= total:
                break
            if len(records) < self.page_size:
                break
            page += 1

        duration = time.time() - start_time
        logger.info(
            f"Total {collection} records fetched: {len(all_records)} "
            f"({page} pages, {duration:.2f}s)"
        )
        return all_records

    # =========================================================================
    # Utility Methods
    # =========================================================================

    def is_configured(self) -> bool:
        return bool(self.base_url and self.api_key)

    def close(self) -> None:
        """Close the HTTP session."""
        self._session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


# =============================================================================
# Smoke Test (E2E validation)
# =============================================================================

if __name__ == "__main__":
    """
    Integration smoke test - validates the paged fetch against a live server.

    Usage:
        NOCOBASE_BASE_URL=... NOCOBASE_API_KEY=... python -m services.nocobase_client
    """
    import sys

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S"
    )

    print("=" * 60)
    print("NocoBase Client - Integration Smoke Test")
    print("=" * 60)

    try:
        with NocoBaseClient() as client:
            for name in ("Buildings", "Asset", "SRB_Details", "Instance"):
                rows = client.fetch_all_records(name)
                print(f"[OK] {name}: {len(rows)} records")
        print("[SUCCESS] Smoke test passed")
        sys.exit(0)
    except NocoBaseError as e:
        print(f"[FAIL] Smoke test failed: {e}")
        sys.exit(1)
