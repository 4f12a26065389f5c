"""
Dashboard Stats API Routes

Endpoints:
- GET /api/stats/summary - Headline asset/SRB counts
- GET /api/stats/srb-amount-distribution - SRB records by amount range
- GET /api/stats/asset-by-category - SRB records by Asset_Code

All three are cached for CACHE_TTL_SECONDS. Upstream failures propagate to
the error envelope as 500 UPSTREAM_ERROR.
"""

import time
import logging
from flask import Blueprint, jsonify

from routes import get_report_service

logger = logging.getLogger(__name__)

stats_bp = Blueprint('stats', __name__)


@stats_bp.route("/summary", methods=["GET"])
def get_summary():
    """
    Overall summary stats.

    Returns:
        {
            "totalAssets", "activeAssets", "inactiveAssets",
            "totalInstances", "totalBuildings",
            "totalSRBRecords", "totalSRBAmount", "avgSRBAmount"
        }
    """
    start = time.time()
    result = get_report_service().get_summary()
    logger.info(f"GET /api/stats/summary took: {time.time() - start:.4f}s")
    return jsonify(result)


@stats_bp.route("/srb-amount-distribution", methods=["GET"])
def get_srb_amount_distribution():
    """
    SRB counts by amount range.

    Returns:
        {
            "ranges": {
                "above1Cr":        {count, total, items},   # >= 1 crore
                "between10LTo1Cr": {count, total, items},   # 10L to <1Cr
                "between1LTo10L":  {count, total, items},   # 1L to <10L
                "below1L":         {count, total, items},   # < 1L
                "noAmount":        {count, total, items}
            },
            "totalRecords", "totalAmount"
        }
    """
    start = time.time()
    result = get_report_service().get_amount_distribution()
    logger.info(f"GET /api/stats/srb-amount-distribution took: {time.time() - start:.4f}s")
    return jsonify(result)


@stats_bp.route("/asset-by-category", methods=["GET"])
def get_asset_by_category():
    """
    SRB counts grouped by Asset_Code, largest category first.

    Returns:
        {"categories": [{category, count, totalAmount, items}], "totalCategories", "totalRecords"}
    """
    start = time.time()
    result = get_report_service().get_asset_by_category()
    logger.info(f"GET /api/stats/asset-by-category took: {time.time() - start:.4f}s")
    return jsonify(result)
