"""
Action types dispatched to a store.

An action is either plain data (Action) or a deferred computation
(DeferredAction) that receives the store's dispatch and get_state and may
dispatch further actions, synchronously or after awaiting something.

Usage:
    store.dispatch(Action("inc"))
    store.dispatch(Action("add", payload=5))

    @thunk
    async def load(dispatch, get_state):
        data = await fetch()
        dispatch(Action("loaded", payload=data))

    await store.dispatch(load)
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, TypeAlias

from statecell.core.constants import ActionField
from statecell.core.exceptions import ErrorCodes, InvalidActionError

Dispatch: TypeAlias = Callable[[Any], Any]
GetState: TypeAlias = Callable[[], Any]
Thunk: TypeAlias = Callable[[Dispatch, GetState], Any]


@dataclass(frozen=True)
class Action:
    """
    Plain action record.

    Attributes:
        kind: Action kind the reducer switches on
        payload: Optional action data

    """

    kind: str
    payload: Any = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Action:
        """
        Build an action from a mapping with a "kind" (or "type") key.

        Raises:
            InvalidActionError: If the mapping has no string kind

        """
        kind = data.get(ActionField.KIND, data.get(ActionField.TYPE))
        if not isinstance(kind, str):
            msg = f"Action mapping needs a string '{ActionField.KIND}' key, got keys {sorted(map(str, data))}"
            raise InvalidActionError(msg, ErrorCodes.INVALID_ACTION, {"keys": list(data)})
        return cls(kind=kind, payload=data.get(ActionField.PAYLOAD))


@dataclass(frozen=True)
class DeferredAction:
    """Deferred action wrapping a thunk `(dispatch, get_state) -> value | awaitable`."""

    run: Thunk

    def __call__(self, dispatch: Dispatch, get_state: GetState) -> Any:
        return self.run(dispatch, get_state)

    @property
    def name(self) -> str:
        return getattr(self.run, "__qualname__", repr(self.run))


Dispatchable: TypeAlias = Action | DeferredAction


def create_action(kind: str, payload: Any = None) -> Action:
    """Create a plain action."""
    return Action(kind=kind, payload=payload)


def thunk(func: Thunk) -> DeferredAction:
    """Decorator marking a function as a deferred action."""
    return DeferredAction(func)


def to_dispatchable(value: Any) -> Dispatchable:
    """
    Coerce a dispatched value into the action union.

    Accepts Action and DeferredAction as-is, wraps bare callables into
    DeferredAction and converts mappings with a kind key into Action.

    Raises:
        InvalidActionError: For any other value

    """
    if isinstance(value, (Action, DeferredAction)):
        return value
    if isinstance(value, Mapping):
        return Action.from_mapping(value)
    if callable(value):
        return DeferredAction(value)
    msg = f"Cannot dispatch {type(value).__name__}: expected Action, DeferredAction, mapping or callable"
    raise InvalidActionError(msg, ErrorCodes.INVALID_ACTION, {"value_type": type(value).__name__})


def describe(action: Dispatchable) -> str:
    """Short label for log lines."""
    if isinstance(action, DeferredAction):
        return f"<thunk {action.name}>"
    return action.kind
