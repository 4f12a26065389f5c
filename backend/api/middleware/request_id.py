"""
Request ID middleware - Inject X-Request-ID for request correlation.

The same id appears in the error envelope (requestId), the request log
line and the X-Request-ID response header, so a failed upstream fetch in
the logs can be matched to the response the frontend received.
"""

import uuid
from typing import Optional

from flask import Flask, g, has_request_context, request

REQUEST_ID_HEADER = 'X-Request-ID'

# Client-supplied ids longer than this are replaced
MAX_REQUEST_ID_LENGTH = 128


def _incoming_request_id() -> Optional[str]:
    request_id = (request.headers.get(REQUEST_ID_HEADER) or '').strip()
    if not request_id or len(request_id) > MAX_REQUEST_ID_LENGTH:
        return None
    return request_id


def setup_request_id_middleware(app: Flask) -> None:
    """
    Set up request ID middleware on Flask app.

    Injects X-Request-ID into:
    - Flask's g object (g.request_id)
    - Response headers (X-Request-ID)

    Args:
        app: Flask application instance
    """

    @app.before_request
    def inject_request_id():
        g.request_id = _incoming_request_id() or str(uuid.uuid4())

    @app.after_request
    def add_request_id_header(response):
        request_id = getattr(g, 'request_id', None)
        if request_id:
            response.headers[REQUEST_ID_HEADER] = request_id
        return response


def get_request_id() -> Optional[str]:
    """Current request ID, or None outside a request."""
    if not has_request_context():
        return None
    return getattr(g, 'request_id', None)
