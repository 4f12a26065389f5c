"""
API Routes

Blueprints:
- stats.py: /api/stats/* aggregated reports
- assets.py: /api/assets, /api/buildings listings, /api/hello
- admin.py: /admin/* diagnostics and /health

Handlers are thin adapters - all fetching, caching and aggregation lives in
services.report_service. The service instance is created by the app factory
and stored on app.extensions so tests can inject fakes.
"""

from flask import current_app

REPORT_SERVICE_EXTENSION = 'report_service'


def get_report_service():
    """ReportService bound to the current app."""
    return current_app.extensions[REPORT_SERVICE_EXTENSION]
