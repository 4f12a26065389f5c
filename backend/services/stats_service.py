"""
Stats Service - Pure aggregation over NocoBase records

Every function here takes already-parsed records (models.records) and
returns a JSON-ready dict. No I/O, no caching, no Flask - the report service
and CLI call these after fetching, and tests call them directly.

Aggregations:
- group_by_category: SRB records bucketed by Asset_Code
- amount_distribution: SRB records bucketed into 5 fixed amount ranges
- summarize: headline counts across assets, SRBs, buildings, instances
- find_building / count_active_assets: building-scoped active-asset count
- filter_assets: /api/assets building + status filters

Usage:
    from services.stats_service import amount_distribution

    result = amount_distribution(parse_records(SRBRecord, rows))
    print(result['ranges']['above1Cr']['count'])
"""

from typing import Any, Dict, List, Optional, Sequence

from constants import AMOUNT_RANGES, get_amount_range
from models.records import AssetRecord, BuildingRecord, SRBRecord, same_id


# =============================================================================
# CATEGORY BREAKDOWN
# =============================================================================

def group_by_category(srb_records: Sequence[SRBRecord]) -> Dict[str, Any]:
    """
    Group SRB records by normalized Asset_Code.

    Returns:
        {
            "categories": [
                {"category", "count", "totalAmount", "items": [{id, srb_number, amount, description}]},
                ...
            ],
            "totalCategories": int,
            "totalRecords": int
        }

    Categories are sorted by count descending. sorted() is stable, so equal
    counts keep the order in which each category was first seen.
    """
    buckets: Dict[str, Dict[str, Any]] = {}

    for srb in srb_records:
        bucket = buckets.get(srb.asset_code)
        if bucket is None:
            bucket = buckets[srb.asset_code] = {
                'category': srb.asset_code,
                'count': 0,
                'totalAmount': 0.0,
                'items': [],
            }
        bucket['count'] += 1
        bucket['totalAmount'] += srb.amount
        bucket['items'].append({
            'id': srb.id,
            'srb_number': srb.srb_number,
            'amount': srb.amount,
            'description': srb.item_description,
        })

    categories = sorted(buckets.values(), key=lambda b: b['count'], reverse=True)

    return {
        'categories': categories,
        'totalCategories': len(categories),
        'totalRecords': len(srb_records),
    }


# =============================================================================
# AMOUNT DISTRIBUTION
# =============================================================================

def amount_distribution(srb_records: Sequence[SRBRecord]) -> Dict[str, Any]:
    """
    Classify each SRB record into exactly one amount range.

    Ranges (see constants.get_amount_range):
        noAmount        amount == 0
        below1L         0 < amount < 1,00,000
        between1LTo10L  1,00,000 <= amount < 10,00,000
        between10LTo1Cr 10,00,000 <= amount < 1,00,00,000
        above1Cr        amount >= 1,00,00,000

    Returns:
        {
            "ranges": {<range>: {"count", "total", "items"}, ...},
            "totalRecords": int,
            "totalAmount": float   # sum of range totals
        }
    """
    ranges = {name: {'count': 0, 'total': 0.0, 'items': []} for name in AMOUNT_RANGES}

    for srb in srb_records:
        bucket = ranges[get_amount_range(srb.amount)]
        bucket['count'] += 1
        bucket['total'] += srb.amount
        bucket['items'].append({
            'id': srb.id,
            'srb_number': srb.srb_number,
            'amount': srb.amount,
            'asset_code': srb.asset_code,
            'item_description': srb.item_description,
        })

    return {
        'ranges': ranges,
        'totalRecords': len(srb_records),
        'totalAmount': sum(r['total'] for r in ranges.values()),
    }


# =============================================================================
# SUMMARY
# =============================================================================

def summarize(
    assets: Sequence[AssetRecord],
    srb_records: Sequence[SRBRecord],
    buildings: Sequence[Any],
    instances: Sequence[Any],
) -> Dict[str, Any]:
    """
    Headline dashboard counts.

    NOTE: activeAssets counts is_active == "Yes" exactly. The building-scoped
    counter (count_active_assets) accepts the wider ACTIVE_VALUES set; both
    rules are kept as-is per endpoint.
    """
    total_srb_amount = 0.0
    for srb in srb_records:
        total_srb_amount += srb.amount

    active_assets = sum(1 for a in assets if a.is_active_strict)
    total_srb_records = len(srb_records)

    return {
        'totalAssets': len(assets),
        'activeAssets': active_assets,
        'inactiveAssets': len(assets) - active_assets,
        'totalInstances': len(instances),
        'totalBuildings': len(buildings),
        'totalSRBRecords': total_srb_records,
        'totalSRBAmount': total_srb_amount,
        'avgSRBAmount': total_srb_amount / total_srb_records if total_srb_records > 0 else 0,
    }


# =============================================================================
# BUILDING-SCOPED ACTIVE ASSETS
# =============================================================================

def find_building(buildings: Sequence[BuildingRecord], name: str) -> Optional[BuildingRecord]:
    """First building whose display name matches case-insensitively, else None."""
    for building in buildings:
        if building.matches_name(name):
            return building
    return None


def count_active_assets(assets: Sequence[AssetRecord], building_id: Any) -> int:
    """
    Count assets in a building whose is_active is any accepted active encoding.

    Building ids are compared as strings - Asset.Building_Id and Buildings.id
    disagree on int vs str depending on the NocoBase field type.
    """
    return sum(1 for a in assets if a.in_building(building_id) and a.is_active_any)


# =============================================================================
# ASSET LISTING
# =============================================================================

def filter_assets(
    assets: Sequence[AssetRecord],
    building: Optional[str] = None,
    status: Optional[str] = None,
) -> List[AssetRecord]:
    """
    Apply /api/assets filters.

    Args:
        building: Building id; matched against Building_Id as strings.
        status: Exact is_active value (e.g. "Yes").
    """
    result = list(assets)
    if building:
        result = [a for a in result if same_id(a.building_id, building)]
    if status:
        result = [a for a in result if a.is_active == status]
    return result
