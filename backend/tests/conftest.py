"""
Root pytest configuration for backend tests.

Provides:
- FakeNocoBaseClient: in-memory collections with per-call counters
- Shared fixtures (fake_client, cache, app, client)
- Sample NocoBase rows
"""

import sys
import threading
from collections import Counter
from pathlib import Path

# Add backend directory to Python path so imports like
# `from services.cache import ...` and `from utils.normalize import ...` work
backend_dir = Path(__file__).parent.parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

import pytest

from config import Config
from services.cache import TTLCache
from services.nocobase_client import NocoBaseFetchError


class StubConfig(Config):
    TESTING = True
    NOCOBASE_BASE_URL = "https://nocobase.test"
    NOCOBASE_API_KEY = "test-api-key"
    CACHE_TTL_SECONDS = 300
    CACHE_MAX_SIZE = 100


class FakeNocoBaseClient:
    """
    Stand-in for NocoBaseClient backed by dicts of rows.

    Counts calls per (method, collection) so tests can assert that a cached
    report did not hit upstream again. Collections listed in `failures`
    raise NocoBaseFetchError.
    """

    def __init__(self, collections=None, failures=None):
        self.collections = collections or {}
        self.failures = set(failures or [])
        self.base_url = StubConfig.NOCOBASE_BASE_URL
        self.api_key = StubConfig.NOCOBASE_API_KEY
        self.calls = Counter()
        self.list_page_sizes = []
        self._lock = threading.Lock()

    def _record(self, method, collection):
        with self._lock:
            self.calls[(method, collection)] += 1
        if collection in self.failures:
            raise NocoBaseFetchError(
                f"Request failed with status code 502 for /api/{collection}:list",
                endpoint=f"/api/{collection}:list",
                status_code=502,
            )

    def fetch_all_records(self, collection):
        self._record("fetch_all_records", collection)
        return list(self.collections.get(collection, []))

    def fetch_list(self, collection, page_size=None):
        self._record("fetch_list", collection)
        self.list_page_sizes.append(page_size)
        rows = list(self.collections.get(collection, []))
        return rows[:page_size] if page_size else rows

    def is_configured(self):
        return bool(self.base_url and self.api_key)

    def total_calls(self):
        return sum(self.calls.values())


# =============================================================================
# Sample data
# =============================================================================

@pytest.fixture
def sample_buildings():
    return [
        {"id": 1, "Building_Name": "Computer Center"},
        {"id": 2, "Name": "Library"},
        {"id": "3", "name": "Central Workshop"},
        {"id": 4},
    ]


@pytest.fixture
def sample_assets():
    return [
        {"id": 101, "Building_Id": 1, "is_active": "Yes", "Asset_Name": "Server rack"},
        {"id": 102, "Building_Id": "1", "is_active": "Active"},
        {"id": 103, "Building_Id": 1, "is_active": 1},
        {"id": 104, "Building_Id": 1, "is_active": "1"},
        {"id": 105, "Building_Id": 1, "is_active": True},
        {"id": 106, "Building_Id": 1, "is_active": "No"},
        {"id": 107, "Building_Id": 2, "is_active": "Yes"},
        {"id": 108, "Building_Id": None, "is_active": "Yes"},
        {"id": 109, "is_active": "Inactive"},
    ]


@pytest.fixture
def sample_srb_details():
    return [
        {"id": 1, "SRB_Number": "SRB/001", "Amount": "15000000", "Asset_Code": "CPU", "Item_Description": "HPC node"},
        {"id": 2, "SRB_Number": "SRB/002", "Amount": 500000, "Asset_Code": "NET", "Item_Description": "Core switch"},
        {"id": 3, "SRB_Number": "SRB/003", "Amount": 0, "Asset_Code": "CPU", "Item_Description": "NULL"},
        {"id": 4, "Amount": "bad", "Asset_Code": "NULL"},
        {"id": 5, "SRB_Number": "SRB/005", "Amount": 2500000, "Asset_Code": "", "Item_Description": "UPS"},
        {"id": 6, "SRB_Number": "SRB/006", "Amount": 99999.5, "Asset_Code": "NET", "Item_Description": "Patch panel"},
    ]


@pytest.fixture
def sample_instances():
    return [{"id": i} for i in range(1, 8)]


@pytest.fixture
def fake_client(sample_buildings, sample_assets, sample_srb_details, sample_instances):
    return FakeNocoBaseClient({
        "Buildings": sample_buildings,
        "Asset": sample_assets,
        "SRB_Details": sample_srb_details,
        "Instance": sample_instances,
    })


@pytest.fixture
def cache():
    return TTLCache(maxsize=StubConfig.CACHE_MAX_SIZE, ttl=StubConfig.CACHE_TTL_SECONDS)


@pytest.fixture
def app(fake_client, cache):
    """Create test Flask application backed by the fake client."""
    from app import create_app

    app = create_app(config=StubConfig, client=fake_client, cache=cache)
    app.config['TESTING'] = True
    return app


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def make_fake_client():
    """Factory for FakeNocoBaseClient with custom collections or failures."""
    return FakeNocoBaseClient


@pytest.fixture
def stub_config():
    return StubConfig
