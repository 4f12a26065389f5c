"""
Input Normalization Utilities
=============================

Single source of truth for query-string normalization.
All parsing of request inputs happens here (or in api.params, which
delegates here), nowhere else.

Record-field normalization (amounts, codes, active flags) lives in
models.records - upstream data is coerced, request input is validated.

Usage:
    from utils.normalize import to_int, to_str, ValidationError

    @bp.route("/data")
    def get_data():
        try:
            limit = to_int(request.args.get("pageSize"), default=50, min_value=1)
        except ValidationError as e:
            return {"error": str(e)}, 400
"""

from typing import Optional


class ValidationError(ValueError):
    """Raised when input cannot be normalized to expected type."""

    def __init__(self, message: str, field: str = None, received_value=None):
        super().__init__(message)
        self.field = field
        self.received_value = received_value


def to_int(
    value: Optional[str],
    *,
    default: Optional[int] = None,
    min_value: Optional[int] = None,
    max_value: Optional[int] = None,
    field: str = None
) -> Optional[int]:
    """
    Convert string to int, with explicit None handling and optional bounds.

    Args:
        value: Input string (typically from request.args.get())
        default: Value to return if input is None or empty
        min_value: Inclusive lower bound
        max_value: Inclusive upper bound
        field: Field name for error messages

    Returns:
        Parsed integer or default

    Raises:
        ValidationError: If value cannot be converted or is out of bounds
    """
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        raise ValidationError(
            f"Expected int, got bool: {value!r}",
            field=field,
            received_value=value
        )
    try:
        result = int(str(value).strip())
    except (ValueError, TypeError):
        raise ValidationError(
            f"Expected int, got {type(value).__name__}: {value!r}",
            field=field,
            received_value=value
        )
    if min_value is not None and result < min_value:
        raise ValidationError(
            f"Must be >= {min_value}, got {result}",
            field=field,
            received_value=value
        )
    if max_value is not None and result > max_value:
        raise ValidationError(
            f"Must be <= {max_value}, got {result}",
            field=field,
            received_value=value
        )
    return result


def to_str(
    value: Optional[str],
    *,
    default: Optional[str] = None,
    strip: bool = True,
    field: str = None
) -> Optional[str]:
    """
    Normalize string input, optionally stripping whitespace.

    Args:
        value: Input string
        default: Value to return if input is None or empty
        strip: Whether to strip leading/trailing whitespace
        field: Field name for error messages

    Returns:
        Normalized string or default
    """
    if value is None or value == "":
        return default
    result = str(value)
    if strip:
        result = result.strip()
    # Treat whitespace-only as empty
    if result == "":
        return default
    return result
