"""
Error envelope middleware - Standardize all error responses.

Provides consistent error response format:
{
    "error": {
        "code": "UPSTREAM_ERROR",
        "message": "Timeout after 15s fetching /api/Asset:list",
        "requestId": "uuid"
    }
}

Mapping:
- werkzeug HTTPException (404 route, 405 method) -> its own status + code
- utils.normalize.ValidationError -> 400 INVALID_PARAMS
- NocoBaseError (fetch/config failure) -> 500 UPSTREAM_ERROR, message kept
- anything else -> 500 INTERNAL_ERROR, message hidden
"""

import logging
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from api.middleware.request_id import REQUEST_ID_HEADER, get_request_id
from services.nocobase_client import NocoBaseError
from utils.normalize import ValidationError


logger = logging.getLogger('api.middleware.error')


# Error codes reference
ERROR_CODES = {
    # Client errors (4xx)
    "BAD_REQUEST": 400,
    "NOT_FOUND": 404,
    "METHOD_NOT_ALLOWED": 405,
    "INVALID_PARAMS": 400,

    # Server errors (5xx)
    "UPSTREAM_ERROR": 500,
    "INTERNAL_ERROR": 500,
}


def make_error_response(
    code: str,
    message: str,
    status_code: int = None,
    field: str = None,
    details: dict = None,
):
    """
    Create a standardized error response.

    Args:
        code: Error code (e.g., "INVALID_PARAMS")
        message: Human-readable error message
        status_code: HTTP status code (defaults based on error code)
        field: Optional field name that caused the error
        details: Optional additional details dict

    Returns:
        Tuple of (response, status_code)
    """
    request_id = get_request_id()

    # Default status code based on error code
    if status_code is None:
        status_code = ERROR_CODES.get(code, 500)

    error = {
        "error": {
            "code": code,
            "message": message,
            "requestId": request_id,
        }
    }

    if field:
        error["error"]["field"] = field
    if details:
        error["error"]["details"] = details

    response = jsonify(error)
    if request_id:
        response.headers[REQUEST_ID_HEADER] = request_id

    return response, status_code


def setup_error_handlers(app: Flask) -> None:
    """
    Set up standardized error handlers on Flask app.

    Args:
        app: Flask application instance
    """

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        """Handle Flask/Werkzeug HTTP exceptions - preserve their status codes."""
        # "Method Not Allowed" -> "METHOD_NOT_ALLOWED"
        code = error.name.upper().replace(' ', '_')
        response, status = make_error_response(code, error.description, error.code)

        # 405 responses must still advertise the allowed methods
        if error.code == 405:
            allowed = error.get_headers()
            for name, value in allowed:
                if name.lower() == 'allow':
                    response.headers['Allow'] = value
        return response, status

    @app.errorhandler(ValidationError)
    def handle_validation_error(error):
        return make_error_response(
            "INVALID_PARAMS",
            str(error),
            field=error.field,
        )

    @app.errorhandler(NocoBaseError)
    def handle_upstream_error(error):
        """Fetch failures are reported with their message - no retry, no partial data."""
        logger.error(
            f"Upstream error: {error}",
            extra={
                "event": "upstream_error",
                "request_id": get_request_id(),
                "error_type": type(error).__name__,
            }
        )
        return make_error_response("UPSTREAM_ERROR", str(error))

    @app.errorhandler(Exception)
    def handle_generic_error(error):
        """Handle unhandled Python exceptions."""
        logger.exception(
            f"Unhandled error: {error}",
            extra={
                "event": "unhandled_error",
                "request_id": get_request_id(),
                "error_type": type(error).__name__,
            }
        )
        return make_error_response("INTERNAL_ERROR", "An unexpected error occurred")
