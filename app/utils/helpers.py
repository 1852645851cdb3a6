"""
Utility helper functions for safe data handling.
"""
from typing import Any, Optional


def safe_lower(value: Any) -> str:
    """
    Safely lowercase a value, handling None.

    Args:
        value: Any value to lowercase

    Returns:
        Lowercased string or empty string if None
    """
    if value is None:
        return ""
    return str(value).lower()


def safe_int(value: Any, default: Optional[int] = 0) -> Optional[int]:
    """
    Safely convert value to int, handling None and invalid values.

    Args:
        value: Any value to convert
        default: Default if conversion fails

    Returns:
        Integer or default
    """
    if value is None:
        return default
    try:
        return int(value)
    except (ValueError, TypeError):
        return default


def first_present(*values: Any) -> Any:
    """Return the first value that is not None, or None."""
    for value in values:
        if value is not None:
            return value
    return None
