"""Deep merge used by the layered configuration loader.

Later layers override earlier ones. Lists are replaced unless the override
list starts with a marker:
- ``"+"``: append the remaining items to the base list
- ``"="``: replace the base list with the remaining items
"""
from __future__ import annotations

from typing import Any, Dict, List


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Return ``override`` merged over ``base`` without mutating either.

    Example:
        >>> deep_merge({"resolver": {"root": "/"}}, {"resolver": {"localDepmap": "x.xml"}})
        {'resolver': {'root': '/', 'localDepmap': 'x.xml'}}
    """
    result: Dict[str, Any] = dict(base)
    for key, value in (override or {}).items():
        current = result.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            result[key] = deep_merge(current, value)
        elif isinstance(current, list) and isinstance(value, list):
            result[key] = merge_arrays(current, value)
        else:
            result[key] = value
    return result


def merge_arrays(base: List[Any], override: List[Any]) -> List[Any]:
    """Merge two lists honouring the ``+``/``=`` markers.

    Example:
        >>> merge_arrays(["/etc/maven/fragments"], ["+", "/opt/fragments"])
        ['/etc/maven/fragments', '/opt/fragments']
        >>> merge_arrays(["/etc/maven/fragments"], ["/opt/fragments"])
        ['/opt/fragments']
    """
    if not override:
        return base
    marker = override[0]
    if isinstance(marker, str):
        if marker == "+":
            return [*base, *override[1:]]
        if marker == "=":
            return list(override[1:])
    return list(override)


__all__ = ["deep_merge", "merge_arrays"]
