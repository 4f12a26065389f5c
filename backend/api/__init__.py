"""
API package - request boundary layer.

This package provides:
- Query param models (api.params)
- Global middleware (request_id, error_envelope, request_logging)
"""
