"""Combinators for navigating semi-structured JSON values.

Every helper degrades to None (or an empty container) instead of raising,
so retailer normalizers can chain lookups over payloads whose shape drifts.
"""

from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

PathKey = Union[str, int]

_MISSING = object()


def dig(value: Any, *path: PathKey) -> Any:
    """Follow ``path`` through nested dicts/lists.

    Returns None as soon as a step is absent or the container type does
    not match the key (str keys need a dict, int keys need a list).

    >>> dig({"props": {"pageProps": {"a": 1}}}, "props", "pageProps", "a")
    1
    >>> dig({"props": None}, "props", "pageProps") is None
    True
    """
    current = value
    for key in path:
        if isinstance(key, int) and not isinstance(key, bool):
            if not isinstance(current, list) or not -len(current) <= key < len(current):
                return None
            current = current[key]
        elif isinstance(current, dict):
            current = current.get(key, _MISSING)
            if current is _MISSING:
                return None
        else:
            return None
    return current


def first_present(value: Any, *paths: Sequence[PathKey], default: Any = None) -> Any:
    """Try each path in order and return the first value that is not None."""
    for path in paths:
        found = dig(value, *path)
        if found is not None:
            return found
    return default


def as_list(value: Any) -> List[Any]:
    """Promote a singleton to a one-element list; None becomes []."""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def as_dict(value: Any) -> Dict[str, Any]:
    """Return ``value`` when it is a dict, otherwise an empty dict."""
    return value if isinstance(value, dict) else {}


def dicts(values: Iterable[Any]) -> List[Dict[str, Any]]:
    """Keep only the dict entries of an iterable."""
    return [v for v in values if isinstance(v, dict)]


def text_or_none(value: Any) -> Optional[str]:
    """Stringify scalar identifiers; containers and blanks become None."""
    if value is None or isinstance(value, (dict, list, bool)):
        return None
    text = str(value).strip()
    return text or None
