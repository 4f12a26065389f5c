from utils.cache_key import (
    ASSET_LIST_PREFIX,
    SUMMARY_PREFIX,
    build_query_cache_key,
    normalize_cache_params,
)


def test_build_query_cache_key_without_params():
    assert build_query_cache_key(SUMMARY_PREFIX) == "stats:summary:"
    assert build_query_cache_key(SUMMARY_PREFIX, {}) == "stats:summary:"


def test_build_query_cache_key_sorts_and_skips_empty():
    params = {"status": "Yes", "pageSize": 50, "building": None, "extra": ""}

    key = build_query_cache_key(ASSET_LIST_PREFIX, params)

    assert key == "assets:list:pageSize=50&status=Yes"


def test_param_order_does_not_change_key():
    a = build_query_cache_key(ASSET_LIST_PREFIX, {"building": "1", "pageSize": 10})
    b = build_query_cache_key(ASSET_LIST_PREFIX, {"pageSize": 10, "building": "1"})
    assert a == b


def test_build_query_cache_key_filters_and_csv_lists():
    params = {
        "building": ["1", "2"],
        "status": "Yes",
        "ignored": "nope",
    }

    key = build_query_cache_key("assets", params, include_keys=["building", "status", "pageSize"])

    assert key == "assets:building=1,2&status=Yes"


def test_normalize_cache_params_bools():
    assert normalize_cache_params({"active": True, "stale": False}) == {
        "active": "true",
        "stale": "false",
    }
