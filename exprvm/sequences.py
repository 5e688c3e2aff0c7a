"""Member access, slicing and other operations on arrays, strings and objects."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from .arithmetic import equal
from .errors import OpcodeError

__all__ = ["fetch", "slice_of", "length", "flatten", "contains"]

_U64_MAX = 2**64 - 1


def _to_index(value: Decimal) -> int | None:
    if not value.is_finite() or value < 0:
        return None
    index = int(value)
    return index if index <= _U64_MAX else None


def _is_boundary(data: bytes, position: int) -> bool:
    return position == len(data) or (data[position] & 0xC0) != 0x80


def fetch(container: Any, key: Any) -> Any:
    """Read an object property, an array item or a one-byte string slice.

    Anything missing or of another kind yields ``None``.
    """
    if isinstance(container, dict) and isinstance(key, str):
        return container.get(key)
    if isinstance(container, (list, str)) and isinstance(key, Decimal):
        index = _to_index(key)
        if index is None:
            raise OpcodeError("Fetch", "Failed to convert to usize")
        if isinstance(container, list):
            return container[index] if index < len(container) else None
        data = container.encode("utf-8")
        if index < len(data) and data[index] < 0x80:
            return chr(data[index])
        return None
    return None


def slice_of(current: Any, start: Any, end: Any) -> Any:
    """Items or bytes of a string from start to end, both inclusive."""
    if not (isinstance(start, Decimal) and isinstance(end, Decimal)):
        raise OpcodeError("Slice", "Unsupported type")
    first = _to_index(start)
    if first is None:
        raise OpcodeError("Slice", "Failed to get range from")
    last = _to_index(end)
    if last is None:
        raise OpcodeError("Slice", "Failed to get range to")

    out_of_range = OpcodeError("Slice", "Index out of range")
    stop = last + 1
    if isinstance(current, list):
        if first > stop or stop > len(current):
            raise out_of_range
        return current[first:stop]
    if isinstance(current, str):
        data = current.encode("utf-8")
        if first > stop or stop > len(data):
            raise out_of_range
        if not (_is_boundary(data, first) and _is_boundary(data, stop)):
            raise out_of_range
        return data[first:stop].decode("utf-8")
    raise OpcodeError("Slice", "Unsupported type")


def length(a: Any) -> Decimal:
    """Number of items of an array, or of UTF-8 bytes of a string."""
    if isinstance(a, str):
        return Decimal(len(a.encode("utf-8")))
    if isinstance(a, list):
        return Decimal(len(a))
    raise OpcodeError("Len", "Unsupported type")


def flatten(a: Any) -> list[Any]:
    """Splice nested arrays one level into their parent."""
    if not isinstance(a, list):
        raise OpcodeError("Flatten", "Unsupported type")
    flat: list[Any] = []
    for item in a:
        if isinstance(item, list):
            flat.extend(item)
        else:
            flat.append(item)
    return flat


def contains(a: Any, b: Any) -> bool:
    """Substring test for strings, scalar membership test for arrays."""
    if isinstance(a, str) and isinstance(b, str):
        return b in a
    if isinstance(a, list):
        return any(equal(item, b) for item in a)
    raise OpcodeError("Contains", "Unsupported type")