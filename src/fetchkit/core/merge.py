"""Deep-merge utilities for configuration values.

Implements N-argument left-to-right deep merge where later entries override
earlier ones. Only plain dicts are merged recursively; lists are copied as a
new container and every other value is treated as an opaque leaf.

There is no cycle detection: a value that references itself recurses until
``RecursionError``.
"""

from collections.abc import Mapping
from typing import Any, Iterator


def is_plain_mapping(value: Any) -> bool:
    """True for ordinary dicts only (not subclasses, models or other objects)."""
    return type(value) is dict


def has_property(obj: Any, name: str) -> bool:
    """True if obj is a mapping holding name as a key."""
    return isinstance(obj, Mapping) and name in obj


def _iter_items(value: Any, strict: bool) -> Iterator[tuple[Any, Any]]:
    if value is None:
        return
    if isinstance(value, Mapping):
        yield from value.items()
        return
    if not isinstance(value, list):
        if strict:
            raise TypeError(
                f"merge() arguments must be mappings or lists, got {type(value).__name__}"
            )
        # Bare scalars behave like a one-element list
        value = [value]
    for index, item in enumerate(value):
        yield str(index), item


def merge(*args: Any, strict: bool = False) -> dict[str, Any]:
    """Deep-merge configuration values left-to-right into a fresh dict.

    For dicts, keys are merged recursively. Lists replace the earlier value
    with a shallow copy. Scalars and other objects are overwritten by later
    values.

    Args:
        *args: Configuration values; ``None`` entries are skipped.
        strict: Reject top-level arguments that are neither mappings nor
            lists instead of coercing them into a one-element list.

    Returns:
        New dict that shares no nested dicts with the inputs.
    """
    result: dict[str, Any] = {}
    for arg in args:
        for key, value in _iter_items(arg, strict):
            if is_plain_mapping(result.get(key)) and is_plain_mapping(value):
                result[key] = merge(result[key], value)
            elif is_plain_mapping(value):
                result[key] = merge({}, value)
            elif isinstance(value, list):
                result[key] = list(value)
            else:
                result[key] = value
    return result
