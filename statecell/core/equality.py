#!/usr/bin/env python3
"""
Structural equality used to suppress redundant change notifications.

deep_equal decides whether two state values are observably identical. The
comparison classifies each value into a ShapeKind and tries the arms in a
fixed priority order:

    same value -> scalar/None mismatch -> type mismatch -> cycle memo
    -> sequence -> array -> date -> pattern -> set -> mapping -> record

The cycle memo records every (left, right) pairing of composites from both
sides. It is allocated per top-level call and threaded through the recursion;
nothing is kept between calls. A composite already paired with a different
partner on either side is treated as unequal, which keeps the comparison
symmetric.

deep_equal never raises for value pairs it cannot interpret: such pairs are
equal only when identical. Structures nested too deeply to walk compare
unequal.
"""

from __future__ import annotations

import dataclasses
import datetime
import enum
import functools
import logging
import math
import re
import types
from collections import ChainMap
from collections.abc import Callable, Iterator, Mapping, MutableMapping, Sequence
from decimal import Decimal
from fractions import Fraction
from typing import Any

import numpy as np

from statecell.core.constants import ShapeKind

logger = logging.getLogger(__name__)

# Memo keys are (side, id(value)); values are (value, partner)
Memo = MutableMapping[tuple[int, int], tuple[Any, Any]]
_LEFT = 0
_RIGHT = 1

_SCALAR_TYPES = (bool, int, float, complex, str, bytes, Decimal, Fraction, np.generic)
_OPAQUE_TYPES = (
    types.FunctionType,
    types.BuiltinFunctionType,
    types.MethodType,
    types.MethodWrapperType,
    types.WrapperDescriptorType,
    types.ModuleType,
    functools.partial,
    type,
    enum.Enum,
)
_DATE_TYPES = (datetime.date, datetime.time, datetime.timedelta)
_NUMERIC_DTYPE_KINDS = "biufc"
_NAN_DTYPE_KINDS = "fc"

_MISSING = object()


# =============================================================================
# Classification
# =============================================================================


def classify(value: Any) -> ShapeKind:
    """Map a runtime value onto the closed set of shapes the comparator knows."""
    if value is None:
        return ShapeKind.NONE
    if isinstance(value, _SCALAR_TYPES):
        return ShapeKind.SCALAR
    if isinstance(value, _OPAQUE_TYPES):
        return ShapeKind.OPAQUE
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        return ShapeKind.SEQUENCE
    if isinstance(value, np.ndarray):
        return ShapeKind.ARRAY
    if isinstance(value, _DATE_TYPES):
        return ShapeKind.DATE
    if isinstance(value, re.Pattern):
        return ShapeKind.PATTERN
    if isinstance(value, (set, frozenset)):
        return ShapeKind.SET
    if isinstance(value, Mapping):
        return ShapeKind.MAPPING
    if _public_attribute_names(value) is not None:
        return ShapeKind.RECORD
    return ShapeKind.UNKNOWN


def _public_attribute_names(value: Any) -> frozenset[str] | None:
    """Public attribute names of a record-like object, or None if it has no inspectable attributes."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return frozenset(f.name for f in dataclasses.fields(value) if not f.name.startswith("_"))

    names: set[str] = set()
    inspectable = False
    instance_dict = getattr(value, "__dict__", None)
    if isinstance(instance_dict, dict):
        inspectable = True
        names.update(key for key in instance_dict if isinstance(key, str))
    for klass in type(value).__mro__:
        slots = klass.__dict__.get("__slots__")
        if slots is None:
            continue
        inspectable = True
        if isinstance(slots, str):
            slots = (slots,)
        names.update(slot for slot in slots if slot not in ("__dict__", "__weakref__"))

    if not inspectable:
        return None
    return frozenset(name for name in names if not name.startswith("_"))


# =============================================================================
# Same-value comparison
# =============================================================================


def same_value(a: Any, b: Any) -> bool:
    """
    Identity comparison that treats equal scalars of one type as the same value.

    Floats follow SameValue semantics: NaN equals NaN, 0.0 differs from -0.0.
    Composites are the same value only when they are the same object.
    """
    if a is b:
        return True
    if type(a) is not type(b) or not isinstance(a, _SCALAR_TYPES):
        return False
    try:
        if a == b:
            return not _signed_zero_mismatch(a, b)
        # NaN is the only value unequal to itself
        return bool(a != a and b != b)
    except (ArithmeticError, TypeError, ValueError):
        return False


def _signed_zero_mismatch(a: Any, b: Any) -> bool:
    if isinstance(a, (float, np.floating)) and a == 0:
        return math.copysign(1.0, a) != math.copysign(1.0, b)
    return False


# =============================================================================
# Structural comparison
# =============================================================================


def deep_equal(a: Any, b: Any, visited: Memo | None = None) -> bool:
    """
    Return True if a and b are structurally indistinguishable.

    Args:
        a: Left value
        b: Right value
        visited: Cycle memo; leave as None for a top-level comparison

    """
    if visited is None:
        visited = {}
    try:
        return _equal(a, b, visited)
    except RecursionError:
        logger.warning("Values nested too deeply to compare (%s); treating them as unequal", type(a).__name__)
        return False


def _equal(a: Any, b: Any, visited: Memo) -> bool:
    if same_value(a, b):
        return True

    kind = classify(a)
    if not kind.is_composite or not classify(b).is_composite:
        return False
    if type(a) is not type(b):
        return False
    if kind is ShapeKind.UNKNOWN:
        return False

    left_seen = visited.get((_LEFT, id(a)))
    right_seen = visited.get((_RIGHT, id(b)))
    if left_seen is not None or right_seen is not None:
        return left_seen is not None and left_seen[1] is b
    # Both values stay referenced by the memo so their ids cannot be reused mid-comparison
    visited[(_LEFT, id(a))] = (a, b)
    visited[(_RIGHT, id(b))] = (b, a)

    return _ARMS[kind](a, b, visited)


def _equal_sequence(a: Sequence[Any], b: Sequence[Any], visited: Memo) -> bool:
    if len(a) != len(b):
        return False
    return all(_equal(x, y, visited) for x, y in zip(a, b))


def _equal_array(a: np.ndarray, b: np.ndarray, visited: Memo) -> bool:
    if a.shape != b.shape or a.dtype != b.dtype:
        return False
    if a.dtype.kind in _NUMERIC_DTYPE_KINDS:
        return bool(np.array_equal(a, b, equal_nan=a.dtype.kind in _NAN_DTYPE_KINDS))
    return _equal_sequence(a.ravel().tolist(), b.ravel().tolist(), visited)


def _equal_date(a: Any, b: Any, visited: Memo) -> bool:
    return _guarded_eq(a, b)


def _equal_pattern(a: re.Pattern, b: re.Pattern, visited: Memo) -> bool:
    return a.pattern == b.pattern and a.flags == b.flags


def _equal_set(a: set[Any] | frozenset[Any], b: set[Any] | frozenset[Any], visited: Memo) -> bool:
    if len(a) != len(b):
        return False
    index = _hash_index(b)
    for item in a:
        candidates = _candidates(item, b, index)
        if not _find_match(candidates, lambda candidate, trial, item=item: _equal(item, candidate, trial), visited):
            return False
    return True


def _equal_mapping(a: Mapping[Any, Any], b: Mapping[Any, Any], visited: Memo) -> bool:
    if len(a) != len(b):
        return False
    index = _hash_index(b)
    for key, value in a.items():

        def matches(candidate: Any, trial: Memo, key: Any = key, value: Any = value) -> bool:
            return _equal(key, candidate, trial) and _equal(value, b[candidate], trial)

        if not _find_match(_candidates(key, b, index), matches, visited):
            return False
    return True


def _equal_record(a: Any, b: Any, visited: Memo) -> bool:
    names = _public_attribute_names(a)
    # Objects keeping their state private, or defining their own equality, decide for themselves
    if not names or _defines_own_eq(a):
        return _guarded_eq(a, b)
    if names != _public_attribute_names(b):
        return False
    return all(_equal(getattr(a, name, _MISSING), getattr(b, name, _MISSING), visited) for name in names)


def _defines_own_eq(value: Any) -> bool:
    if dataclasses.is_dataclass(value):
        return False
    return type(value).__eq__ is not object.__eq__


def _guarded_eq(a: Any, b: Any) -> bool:
    """a == b, counting anything but a plain boolean result (or an exception) as unequal."""
    try:
        result = a == b
    except Exception:  # noqa: BLE001 - arbitrary __eq__ must not escape the comparator
        return False
    if isinstance(result, (bool, np.bool_)):
        return bool(result)
    return False


# =============================================================================
# Set and mapping member matching
# =============================================================================


def _hash_index(container: Any) -> dict[Any, Any] | None:
    """Map each member of container to itself, or None if the members cannot be indexed."""
    try:
        return {member: member for member in container}
    except Exception:  # noqa: BLE001 - arbitrary __hash__/__eq__ must not escape the comparator
        return None


def _candidates(item: Any, container: Any, index: dict[Any, Any] | None) -> Iterator[Any]:
    """
    Members of container that might match item, the hash hit first.

    A hash hit is only a candidate: it still has to pass the structural check,
    since == can equate values that deep_equal tells apart (1 and 1.0, or
    dataclass fields excluded from comparison).
    """
    hit = _MISSING
    if index is not None:
        try:
            hit = index.get(item, _MISSING)
        except Exception:  # noqa: BLE001 - unhashable or misbehaving items fall back to the scan
            hit = _MISSING
    if hit is not _MISSING:
        yield hit
    for member in container:
        if member is not hit:
            yield member


def _find_match(candidates: Iterator[Any], matches: Callable[[Any, Memo], bool], visited: Memo) -> bool:
    """
    Scan candidates for a structural match.

    Each trial runs against a child memo that is merged back only on success,
    so a rejected candidate leaves no pairings behind.
    """
    for candidate in candidates:
        trial: ChainMap[tuple[int, int], tuple[Any, Any]] = ChainMap({}, visited)
        if matches(candidate, trial):
            visited.update(trial.maps[0])
            return True
    return False


_ARMS: dict[ShapeKind, Callable[[Any, Any, Memo], bool]] = {
    ShapeKind.SEQUENCE: _equal_sequence,
    ShapeKind.ARRAY: _equal_array,
    ShapeKind.DATE: _equal_date,
    ShapeKind.PATTERN: _equal_pattern,
    ShapeKind.SET: _equal_set,
    ShapeKind.MAPPING: _equal_mapping,
    ShapeKind.RECORD: _equal_record,
}
