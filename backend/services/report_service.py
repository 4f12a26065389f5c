"""
Report Service - fetch, aggregate, cache

Ties the NocoBase client, the pure aggregators in stats_service and the TTL
cache together. Route handlers are thin adapters over this class; the CLI
uses it directly.

Flow for every cached report:
    cache lookup -> (miss) fetch all pages -> parse records -> aggregate -> cache set

Fetch failures propagate (NocoBaseError) - nothing is cached for a failed
fetch and no partial report is returned.

Usage:
    from services.report_service import ReportService

    service = ReportService(client=NocoBaseClient(), cache=TTLCache(ttl=300))
    summary = service.get_summary()
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional

from constants import (
    COLLECTION_ASSET,
    COLLECTION_BUILDINGS,
    COLLECTION_INSTANCE,
    COLLECTION_SRB_DETAILS,
    DEFAULT_ASSET_PAGE_SIZE,
    DEFAULT_BUILDING_NAME,
)
from models.records import AssetRecord, BuildingRecord, InstanceRecord, SRBRecord, parse_records
from services import stats_service
from services.cache import TTLCache
from services.nocobase_client import NocoBaseClient
from utils.cache_key import (
    AMOUNT_DISTRIBUTION_PREFIX,
    ASSET_CATEGORY_PREFIX,
    ASSET_LIST_PREFIX,
    BUILDING_LIST_PREFIX,
    SUMMARY_PREFIX,
    build_query_cache_key,
)

logger = logging.getLogger(__name__)

# Summary fans out to 4 independent collections
SUMMARY_FETCH_WORKERS = 4


class BuildingNotFoundError(LookupError):
    """No building matched the requested display name."""

    def __init__(self, building_name: str):
        super().__init__(f"Building not found: {building_name}")
        self.building_name = building_name


class ReportService:
    """
    Aggregated reports over the NocoBase asset collections.

    Args:
        client: NocoBase client used for every upstream fetch.
        cache: TTL cache shared by all reports (injected so tests and
            multiple app instances never share hidden global state).
        ttl: Optional per-report TTL override; cache default if None.
    """

    def __init__(self, client: NocoBaseClient, cache: TTLCache, ttl: Optional[int] = None):
        self.client = client
        self.cache = cache
        self.ttl = ttl

    # =========================================================================
    # Fetch helpers
    # =========================================================================

    def _fetch_srb_records(self) -> List[SRBRecord]:
        return parse_records(SRBRecord, self.client.fetch_all_records(COLLECTION_SRB_DETAILS))

    def _fetch_assets(self) -> List[AssetRecord]:
        return parse_records(AssetRecord, self.client.fetch_all_records(COLLECTION_ASSET))

    # =========================================================================
    # Cached reports
    # =========================================================================

    def get_summary(self) -> Dict[str, Any]:
        """Headline counts; see stats_service.summarize."""
        key = build_query_cache_key(SUMMARY_PREFIX)
        return self.cache.get_or_compute(key, self._compute_summary, ttl=self.ttl)

    def _compute_summary(self) -> Dict[str, Any]:
        # Independent collections - fetch concurrently, join before aggregating.
        # Buildings is a single list call, the rest are paged.
        with ThreadPoolExecutor(max_workers=SUMMARY_FETCH_WORKERS, thread_name_prefix="summary_fetch") as pool:
            assets_future = pool.submit(self.client.fetch_all_records, COLLECTION_ASSET)
            srb_future = pool.submit(self.client.fetch_all_records, COLLECTION_SRB_DETAILS)
            buildings_future = pool.submit(self.client.fetch_list, COLLECTION_BUILDINGS)
            instances_future = pool.submit(self.client.fetch_all_records, COLLECTION_INSTANCE)

            # .result() re-raises the first fetch failure
            assets = assets_future.result()
            srb_details = srb_future.result()
            buildings = buildings_future.result()
            instances = instances_future.result()

        return stats_service.summarize(
            assets=parse_records(AssetRecord, assets),
            srb_records=parse_records(SRBRecord, srb_details),
            buildings=parse_records(BuildingRecord, buildings),
            instances=parse_records(InstanceRecord, instances),
        )

    def get_amount_distribution(self) -> Dict[str, Any]:
        """SRB records bucketed by amount range; see stats_service.amount_distribution."""
        key = build_query_cache_key(AMOUNT_DISTRIBUTION_PREFIX)
        return self.cache.get_or_compute(
            key,
            lambda: stats_service.amount_distribution(self._fetch_srb_records()),
            ttl=self.ttl,
        )

    def get_asset_by_category(self) -> Dict[str, Any]:
        """SRB records grouped by Asset_Code; see stats_service.group_by_category."""
        key = build_query_cache_key(ASSET_CATEGORY_PREFIX)
        return self.cache.get_or_compute(
            key,
            lambda: stats_service.group_by_category(self._fetch_srb_records()),
            ttl=self.ttl,
        )

    def list_assets(
        self,
        page_size: int = DEFAULT_ASSET_PAGE_SIZE,
        building: Optional[str] = None,
        status: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """
        One page of assets (pageSize records), filtered by building id and status.

        Filters apply to the fetched page only - this is a listing endpoint,
        not a full-collection query.
        """
        key = build_query_cache_key(
            ASSET_LIST_PREFIX,
            {'pageSize': page_size, 'building': building, 'status': status},
        )

        def compute():
            assets = parse_records(AssetRecord, self.client.fetch_list(COLLECTION_ASSET, page_size=page_size))
            filtered = stats_service.filter_assets(assets, building=building, status=status)
            return [a.to_dict() for a in filtered]

        return self.cache.get_or_compute(key, compute, ttl=self.ttl)

    def list_buildings(self) -> List[Dict[str, Any]]:
        key = build_query_cache_key(BUILDING_LIST_PREFIX)
        return self.cache.get_or_compute(
            key,
            lambda: [b.to_dict() for b in parse_records(BuildingRecord, self.client.fetch_list(COLLECTION_BUILDINGS))],
            ttl=self.ttl,
        )

    # =========================================================================
    # Uncached admin diagnostics
    # =========================================================================

    def count_active_assets_in_building(self, building_name: str = DEFAULT_BUILDING_NAME) -> Dict[str, Any]:
        """
        Count active assets in a building, resolved by display name.

        Always hits upstream (admin diagnostic). Assets are only fetched once
        the building has been resolved.

        Raises:
            BuildingNotFoundError: If no building name matches.
        """
        buildings = parse_records(BuildingRecord, self.client.fetch_all_records(COLLECTION_BUILDINGS))
        building = stats_service.find_building(buildings, building_name)
        if building is None:
            logger.warning(f"Building not found: {building_name}")
            raise BuildingNotFoundError(building_name)

        count = stats_service.count_active_assets(self._fetch_assets(), building.id)
        message = f'Active assets in "{building_name}": {count}'
        logger.info(message)

        return {
            'building': building_name,
            'buildingId': building.id,
            'count': count,
            'message': message,
        }

    def cache_stats(self) -> Dict[str, Any]:
        return self.cache.stats()

    def clear_cache(self) -> None:
        self.cache.clear()
        logger.info("Report cache cleared")
