"""Structural equality over decoded JSON values."""

from collections.abc import Mapping


def deep_equal(a, b) -> bool:
    """Compare two JSON-shaped values recursively.

    Mappings are equal when they hold the same keys with equal values,
    whatever the insertion order.  Lists and tuples compare element by
    element.  ``True`` never equals ``1``; ``1`` equals ``1.0``.
    """
    if a is b:
        return True
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b
    if isinstance(a, Mapping):
        if not isinstance(b, Mapping) or len(a) != len(b):
            return False
        for key, value in a.items():
            if key not in b or not deep_equal(value, b[key]):
                return False
        return True
    if isinstance(a, (list, tuple)):
        if not isinstance(b, (list, tuple)) or len(a) != len(b):
            return False
        return all(deep_equal(x, y) for x, y in zip(a, b))
    if isinstance(a, (int, float)) and isinstance(b, (int, float)):
        return a == b
    if type(a) is not type(b):
        return False
    return a == b
