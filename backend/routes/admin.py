"""
Admin, Health, and Cache Endpoints

Endpoints:
- /admin/count-active-assets - Active assets in a named building
- /admin/cache - Report cache stats (GET) / clear (DELETE)
- /health - Liveness check (no upstream call)
"""

from datetime import datetime, timezone
from flask import Blueprint, request, jsonify

from api.params import CountActiveParams
from routes import get_report_service
from services.report_service import BuildingNotFoundError

admin_bp = Blueprint('admin', __name__)


@admin_bp.route("/admin/count-active-assets", methods=["GET"])
def count_active_assets():
    """
    Count active assets for a given building (default: Computer Center).

    Building name is matched case-insensitively. Active means any of
    "Yes", "Active", true, 1, "1".

    Example:
        GET /admin/count-active-assets?building=Computer%20Center

    Returns:
        200 {"building", "buildingId", "count", "message"}
        404 {"building", "count": 0, "message"} if no building matches
    """
    params = CountActiveParams.from_args(request.args)

    try:
        result = get_report_service().count_active_assets_in_building(params.building)
    except BuildingNotFoundError as e:
        return jsonify({
            "building": e.building_name,
            "count": 0,
            "message": str(e),
        }), 404

    return jsonify(result)


@admin_bp.route("/admin/cache", methods=["GET", "DELETE"])
def report_cache():
    """
    Report cache management endpoint.

    GET: Return cache statistics
    DELETE: Clear cache
    """
    service = get_report_service()

    if request.method == 'DELETE':
        service.clear_cache()
        return jsonify({"status": "cache cleared"})

    return jsonify(service.cache_stats())


@admin_bp.route("/health", methods=["GET"])
def health():
    """Health check endpoint."""
    return jsonify({
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    })
