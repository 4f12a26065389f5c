"""
Cache key helpers.

Every cached report is keyed by "<prefix>:<sorted query string>" so two
requests with the same effective parameters always share an entry,
regardless of parameter order or empty values.

Examples:
    build_query_cache_key("stats:summary", {})
        -> "stats:summary:"
    build_query_cache_key("assets:list", {"status": "Yes", "pageSize": 50, "building": None})
        -> "assets:list:pageSize=50&status=Yes"
"""

from typing import Any, Dict, Iterable, Optional

# Prefixes for each cached report
SUMMARY_PREFIX = "stats:summary"
AMOUNT_DISTRIBUTION_PREFIX = "stats:srb-amount"
ASSET_CATEGORY_PREFIX = "stats:asset-category"
ASSET_LIST_PREFIX = "assets:list"
BUILDING_LIST_PREFIX = "buildings:list"


def _normalize_cache_value(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return ",".join(str(v) for v in value)
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def normalize_cache_params(
    params: Dict[str, Any],
    *,
    include_keys: Optional[Iterable[str]] = None,
) -> Dict[str, str]:
    """
    Normalize params for cache keys.

    - Skips empty values
    - Sorts keys for stability
    - Stringifies scalars, joins lists with commas
    """
    allowed = set(include_keys) if include_keys is not None else None
    filtered: Dict[str, str] = {}
    for key, value in params.items():
        if allowed is not None and key not in allowed:
            continue
        if value is None or value == "" or value == [] or value == ():
            continue
        filtered[key] = _normalize_cache_value(value)
    return {k: filtered[k] for k in sorted(filtered.keys())}


def build_query_cache_key(
    prefix: str,
    params: Optional[Dict[str, Any]] = None,
    *,
    include_keys: Optional[Iterable[str]] = None
) -> str:
    normalized = normalize_cache_params(params or {}, include_keys=include_keys)
    param_str = "&".join(f"{k}={v}" for k, v in normalized.items())
    return f"{prefix}:{param_str}"
