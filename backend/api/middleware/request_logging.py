"""
Request logging middleware - one line per API/admin request.

A report answered from the TTL cache takes milliseconds; a cold report pages
through NocoBase and can take seconds. Requests at or above
REQUEST_LOG_SLOW_MS are logged at WARNING so upstream fetches stand out.
"""

import logging
import os
import time
from typing import Optional

from flask import Flask, g, request


logger = logging.getLogger("api.request")

# Only these path prefixes are logged (skips /health probes)
LOGGED_PREFIXES = ("/api", "/admin")

DEFAULT_SLOW_MS = 2000.0


def _slow_threshold_ms(raw: str) -> float:
    try:
        return float(raw)
    except ValueError:
        return DEFAULT_SLOW_MS


def _elapsed_ms() -> Optional[float]:
    start = getattr(g, "request_start", None)
    if start is None:
        return None
    return round((time.perf_counter() - start) * 1000, 2)


def setup_request_logging_middleware(app: Flask) -> None:
    """
    Set up request logging middleware on Flask app.

    Env vars:
      - REQUEST_LOG_ENABLED (default: true)
      - REQUEST_LOG_SLOW_MS (default: 2000) - WARNING threshold
    """
    if os.environ.get("REQUEST_LOG_ENABLED", "true").lower() != "true":
        return

    slow_ms = _slow_threshold_ms(os.environ.get("REQUEST_LOG_SLOW_MS", str(DEFAULT_SLOW_MS)))

    @app.before_request
    def _start_timer():
        g.request_start = time.perf_counter()

    @app.after_request
    def _log_request(response):
        if not request.path.startswith(LOGGED_PREFIXES):
            return response

        duration_ms = _elapsed_ms()
        slow = duration_ms is not None and duration_ms >= slow_ms

        logger.log(
            logging.WARNING if slow else logging.INFO,
            "api_request endpoint=%s method=%s status=%s duration_ms=%s slow=%s request_id=%s",
            request.endpoint,
            request.method,
            response.status_code,
            duration_ms,
            slow,
            getattr(g, "request_id", None),
        )
        return response
