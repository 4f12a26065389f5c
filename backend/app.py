"""
Flask Application Factory - NocoBase Asset Reporting API

Serves aggregated asset and SRB statistics for the dashboard frontend.
No database: every report is computed from NocoBase list calls and held in
an in-process TTL cache (default 5 minutes).

Architecture:
- services.nocobase_client: paged upstream fetch
- services.stats_service: pure aggregation
- services.report_service: cache + fan-out orchestration
- routes/*: thin JSON handlers
"""

import logging
import os

from flask import Flask
from flask_cors import CORS

from config import Config
from routes import REPORT_SERVICE_EXTENSION
from services.cache import TTLCache
from services.nocobase_client import NocoBaseClient
from services.report_service import ReportService

logger = logging.getLogger(__name__)


def create_app(config=Config, client=None, cache=None):
    """
    Build the Flask app.

    Args:
        config: Config class (or subclass) to load.
        client: Optional NocoBase client; built from config if None.
            Tests pass a fake here.
        cache: Optional TTLCache; a fresh one per app if None.
    """
    app = Flask(__name__)
    app.config.from_object(config)

    # Initialize CORS - allow all origins, answer OPTIONS preflight with 200
    CORS(app,
         resources={r"/*": {"origins": "*"}},
         methods=["GET", "POST", "OPTIONS", "DELETE"],
         allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
         expose_headers=["X-Request-ID"],
         supports_credentials=False,
         send_wildcard=True)  # Always send '*' instead of echoing Origin header

    # === API MIDDLEWARE ===
    from api.middleware import (
        setup_error_handlers,
        setup_request_id_middleware,
        setup_request_logging_middleware,
    )
    setup_request_id_middleware(app)
    setup_request_logging_middleware(app)
    setup_error_handlers(app)

    # Report service - one client + cache per app instance
    if client is None:
        client = NocoBaseClient(config=config)
    if cache is None:
        cache = TTLCache(maxsize=config.CACHE_MAX_SIZE, ttl=config.CACHE_TTL_SECONDS)
    app.extensions[REPORT_SERVICE_EXTENSION] = ReportService(client=client, cache=cache)

    if not client.is_configured():
        logger.warning(
            "NocoBase base URL or API key missing - report endpoints will "
            "return UPSTREAM_ERROR until NOCOBASE_BASE_URL and NOCOBASE_API_KEY are set"
        )

    # Register routes
    from routes.stats import stats_bp
    app.register_blueprint(stats_bp, url_prefix='/api/stats')

    from routes.assets import assets_bp
    app.register_blueprint(assets_bp, url_prefix='/api')

    # Admin + health live at the root (/admin/*, /health)
    from routes.admin import admin_bp
    app.register_blueprint(admin_bp)

    return app


def run_app():
    """Main entry point for local development - starts server with Flask's dev server."""
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S"
    )

    app = create_app()
    port = app.config.get("PORT", 3001)

    logger.info("=" * 60)
    logger.info(f"Backend server running on http://localhost:{port}")
    logger.info("API endpoints:")
    for rule in sorted(app.url_map.iter_rules(), key=lambda r: r.rule):
        if rule.endpoint != 'static':
            logger.info(f"   {','.join(sorted(rule.methods - {'HEAD', 'OPTIONS'}))} {rule.rule}")
    logger.info("=" * 60)

    app.run(debug=app.config.get("DEBUG", False), host="0.0.0.0", port=port, threaded=True)


if __name__ == "__main__":
    run_app()
