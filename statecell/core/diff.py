"""State diffing for debug logging."""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from typing import Any

from statecell.core.equality import deep_equal

ROOT_KEY = "<root>"

_ABSENT = object()


def state_diff(old_state: Any, new_state: Any) -> dict[str, tuple[Any, Any]]:
    """
    Get dictionary of changed top-level fields.

    Dataclass states are diffed per field, mappings per key. Any other
    value (or a change of type) is reported under ROOT_KEY.
    Missing keys show up as None on the side they are absent from.
    """
    if type(old_state) is not type(new_state):
        return {ROOT_KEY: (old_state, new_state)}

    if dataclasses.is_dataclass(old_state) and not isinstance(old_state, type):
        diff = {}
        for field in dataclasses.fields(old_state):
            old_val = getattr(old_state, field.name)
            new_val = getattr(new_state, field.name)
            if not deep_equal(old_val, new_val):
                diff[field.name] = (old_val, new_val)
        return diff

    if isinstance(old_state, Mapping):
        diff = {}
        for key in [*old_state, *(k for k in new_state if k not in old_state)]:
            old_val = old_state.get(key, _ABSENT)
            new_val = new_state.get(key, _ABSENT)
            if not deep_equal(old_val, new_val):
                diff[str(key)] = (_present(old_val), _present(new_val))
        return diff

    if deep_equal(old_state, new_state):
        return {}
    return {ROOT_KEY: (old_state, new_state)}


def _present(value: Any) -> Any:
    return None if value is _ABSENT else value
