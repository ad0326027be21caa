"""
Utility helper functions for safe handling of loosely-typed JSON.
"""
from typing import Any, Dict, Optional


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


def read_str(obj: Dict[str, Any], *keys: str) -> Optional[str]:
    """
    Return the first value among ``keys`` that is a string.

    Empty strings count as present; non-string values are skipped.

    Args:
        obj: Source mapping
        keys: Candidate keys, in priority order

    Returns:
        The first string found, or None
    """
    for key in keys:
        value = obj.get(key)
        if isinstance(value, str):
            return value
    return None


def read_bool(obj: Dict[str, Any], key: str) -> Optional[bool]:
    """Return ``obj[key]`` if it is a real boolean, else None."""
    value = obj.get(key)
    return value if isinstance(value, bool) else None


def read_dict(obj: Dict[str, Any], key: str) -> Optional[Dict[str, Any]]:
    """Return ``obj[key]`` if it is a JSON object, else None."""
    value = obj.get(key)
    return value if isinstance(value, dict) else None


def read_int(obj: Dict[str, Any], key: str) -> Optional[int]:
    """
    Return ``obj[key]`` as an int if it is numeric.

    Booleans are rejected; floats are accepted only when integral.
    """
    value = obj.get(key)
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None
