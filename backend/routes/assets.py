"""
Asset and Building Listing Routes

Endpoints:
- GET /api/assets - One page of assets, optionally filtered
- GET /api/buildings - Building list
- GET /api/hello - Deployment smoke check (no upstream call)
"""

from datetime import datetime, timezone
from flask import Blueprint, request, jsonify

from api.params import AssetListParams
from routes import get_report_service

assets_bp = Blueprint('assets', __name__)


@assets_bp.route("/assets", methods=["GET"])
def list_assets():
    """
    List assets with optional filters.

    Query params (camelCase):
        - pageSize: int (default 50) - Records requested from upstream
        - building: Building id - matched against Building_Id
        - status: Exact is_active value, e.g. "Yes"

    Returns:
        List of asset records as stored upstream.

    Example:
        GET /api/assets?pageSize=100&building=3&status=Yes
    """
    params = AssetListParams.from_args(request.args)
    assets = get_report_service().list_assets(
        page_size=params.page_size,
        building=params.building,
        status=params.status,
    )
    return jsonify(assets)


@assets_bp.route("/buildings", methods=["GET"])
def list_buildings():
    """List all buildings."""
    return jsonify(get_report_service().list_buildings())


@assets_bp.route("/hello", methods=["GET"])
def hello():
    """Confirm the API is deployed and which upstream settings are present."""
    client = get_report_service().client
    return jsonify({
        "message": "Simple test API is working!",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "env": {
            "hasApiKey": bool(client.api_key),
            "hasBaseUrl": bool(client.base_url),
        },
    })
