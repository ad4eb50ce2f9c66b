"""
Lenient Field Readers

Exchange payloads mix numbers and numeric strings, and leave fields empty or
missing. These helpers read a key from a dict and return None instead of
raising when the value is absent or unparsable.

Examples:
    >>> safe_float({"price": "7181.43"}, "price")
    7181.43
    >>> safe_float({"price": ""}, "price") is None
    True
    >>> safe_integer_2({"time": 1586301661310}, "timestamp", "time")
    1586301661310
"""

from typing import Any, Dict, Optional


def safe_value(data: Any, key: str, default: Any = None) -> Any:
    if not isinstance(data, dict):
        return default
    value = data.get(key)
    if value is None or value == "":
        return default
    return value


def safe_string(data: Any, key: str, default: Optional[str] = None) -> Optional[str]:
    value = safe_value(data, key)
    if value is None:
        return default
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def safe_float(data: Any, key: str, default: Optional[float] = None) -> Optional[float]:
    value = safe_value(data, key)
    if value is None or isinstance(value, bool):
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def safe_integer(data: Any, key: str, default: Optional[int] = None) -> Optional[int]:
    # Goes through float so "1586301661310.0" and 1.5e12 are accepted too
    number = safe_float(data, key)
    if number is None:
        return default
    return int(number)


def safe_integer_2(data: Any, key1: str, key2: str, default: Optional[int] = None) -> Optional[int]:
    """Read key1, falling back to key2"""
    value = safe_integer(data, key1)
    if value is None:
        return safe_integer(data, key2, default)
    return value


def safe_bool(data: Any, key: str, default: Optional[bool] = None) -> Optional[bool]:
    """
    Read a flag that may arrive as a JSON boolean, a number or a string.

    Examples:
        >>> safe_bool({"makerBuyer": "false"}, "makerBuyer")
        False
        >>> safe_bool({"makerBuyer": True}, "makerBuyer")
        True
    """
    value = safe_value(data, key)
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    text = str(value).strip().lower()
    if text in ("true", "1", "yes"):
        return True
    if text in ("false", "0", "no"):
        return False
    return default


def omit(data: Dict[str, Any], *keys: str) -> Dict[str, Any]:
    """Copy of data without the given keys, insertion order preserved"""
    return {k: v for k, v in data.items() if k not in keys}
