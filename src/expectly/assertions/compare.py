"""Strict structural equality over arbitrary values."""

from __future__ import annotations

import dataclasses
import types
from collections.abc import Mapping, Sequence, Set
from typing import Any

from pydantic import BaseModel

_MISSING = object()
_TEXT_TYPES = (str, bytes, bytearray, memoryview)
# Compared by identity only.
_OPAQUE_TYPES = (type, types.FunctionType, types.BuiltinFunctionType, types.ModuleType, types.GeneratorType)


def deep_equal(a: Any, b: Any) -> bool:
    """Return True iff ``a`` and ``b`` are structurally equal.

    Types must match exactly at every level, so ``1`` and ``1.0`` differ, as do
    ``[1]`` and ``(1,)``. Containers, dataclasses, pydantic models and plain
    objects are compared member by member; other values fall back to ``==``.
    """
    return _equal(a, b, set())


def _equal(a: Any, b: Any, visited: set[tuple[int, int]]) -> bool:
    if a is b:
        return True
    if type(a) is not type(b):
        return False

    # Cycles: a pair already under comparison is assumed equal.
    key = (id(a), id(b))
    if key in visited:
        return True

    if isinstance(a, _OPAQUE_TYPES):
        return False
    if isinstance(a, _TEXT_TYPES):
        return a == b
    if isinstance(a, Mapping):
        visited.add(key)
        return _equal_mappings(a, b, visited)
    if isinstance(a, Set):
        return _equal_sets(a, b, visited)
    if isinstance(a, Sequence):
        visited.add(key)
        return len(a) == len(b) and all(_equal(x, y, visited) for x, y in zip(a, b))
    if dataclasses.is_dataclass(a):
        visited.add(key)
        return all(
            _equal(getattr(a, f.name, _MISSING), getattr(b, f.name, _MISSING), visited)
            for f in dataclasses.fields(a)
        )
    if isinstance(a, BaseModel):
        visited.add(key)
        return _equal_mappings(dict(a), dict(b), visited)
    if type(a).__eq__ is not object.__eq__:
        return bool(a == b)

    visited.add(key)
    return _equal_mappings(_attributes(a), _attributes(b), visited)


def _equal_mappings(a: Mapping[Any, Any], b: Mapping[Any, Any], visited: set[tuple[int, int]]) -> bool:
    if len(a) != len(b):
        return False
    # Hash lookup would pair 1, 1.0 and True; the stored key must match strictly too.
    b_keys = {k: k for k in b}
    for k, v in a.items():
        other_key = b_keys.get(k, _MISSING)
        if other_key is _MISSING or not _equal(k, other_key, visited):
            return False
        if not _equal(v, b[other_key], visited):
            return False
    return True


def _equal_sets(a: Set[Any], b: Set[Any], visited: set[tuple[int, int]]) -> bool:
    if len(a) != len(b):
        return False
    b_members = {m: m for m in b}
    for member in a:
        other = b_members.get(member, _MISSING)
        if other is _MISSING or not _equal(member, other, visited):
            return False
    return True


def _attributes(obj: Any) -> dict[str, Any]:
    attrs = dict(getattr(obj, "__dict__", {}))
    for cls in type(obj).__mro__:
        slots = cls.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for name in slots:
            if name in ("__dict__", "__weakref__"):
                continue
            attrs[name] = getattr(obj, name, _MISSING)
    return attrs
