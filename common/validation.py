"""ABOUTME: Shared validation helpers for MCP tool arguments.

Standalone validators return tuple[bool, Optional[str]] so callers can turn a
failure into whatever error shape their protocol surface needs. Tool arguments
arrive as decoded JSON, so every helper checks the Python type first.
"""

import math
from numbers import Real
from typing import Any, Mapping, Optional, Tuple


# =============================================================================
# Validation Constants
# =============================================================================

# String length defaults
DEFAULT_MIN_STRING_LENGTH: int = 1
DEFAULT_MAX_STRING_LENGTH: int = 65536  # 64KB


# =============================================================================
# Standalone Validator Functions
# =============================================================================

def validate_object(value: Any, field_name: str = "arguments") -> Tuple[bool, Optional[str]]:
    """Validate that a decoded JSON value is an object.

    Args:
        value: Decoded JSON value
        field_name: Name used in error messages (default: "arguments")

    Returns:
        Tuple of (is_valid, error_message)
    """
    if value is None:
        return False, f"{field_name} are required"

    if not isinstance(value, Mapping):
        return False, f"{field_name} must be an object, got {type(value).__name__}"

    return True, None


def validate_string_length(
    value: Any,
    min_length: int = DEFAULT_MIN_STRING_LENGTH,
    max_length: int = DEFAULT_MAX_STRING_LENGTH,
    field_name: str = "value"
) -> Tuple[bool, Optional[str]]:
    """Validate string type and length and return (is_valid, error_message).

    Length is measured after stripping surrounding whitespace.

    Args:
        value: Value to validate
        min_length: Minimum allowed length
        max_length: Maximum allowed length
        field_name: Name of field for error messages (default: "value")

    Returns:
        Tuple of (is_valid, error_message)
        - (True, None) if valid
        - (False, error_message) if invalid

    Example:
        is_valid, error = validate_string_length(city, 1, 256, "city")
        if not is_valid:
            print(f"Invalid city: {error}")
    """
    if not isinstance(value, str):
        return False, f"{field_name} must be a string, got {type(value).__name__}"

    value_len = len(value.strip())

    if value_len < min_length:
        return False, f"{field_name} must be at least {min_length} character(s), got {value_len}"

    if value_len > max_length:
        return False, f"{field_name} too long (max {max_length} characters, got {value_len})"

    return True, None


def validate_number(value: Any, field_name: str = "value") -> Tuple[bool, Optional[str]]:
    """Validate that value is a finite JSON number.

    bool is rejected even though it subclasses int, since JSON true/false
    are not numbers.

    Args:
        value: Value to validate
        field_name: Name of field for error messages (default: "value")

    Returns:
        Tuple of (is_valid, error_message)
    """
    if isinstance(value, bool) or not isinstance(value, Real):
        return False, f"{field_name} must be a number, got {type(value).__name__}"

    # Arbitrarily large JSON integers are finite and may not fit in a float
    if isinstance(value, int):
        return True, None

    if not math.isfinite(value):
        return False, f"{field_name} must be a finite number, got {value}"

    return True, None
