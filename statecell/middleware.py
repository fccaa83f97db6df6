"""
Middleware pipeline.

A middleware constructor is called once with a MiddlewareAPI and returns a
layer: either a Middleware object whose wrap(next_dispatch) builds this
layer's dispatch, or a plain callable next_dispatch -> dispatch. Layers are
folded right to left over the store's raw dispatch, so the first registered
middleware runs first on the way in and last on the way out:

    mw1 before -> mw2 before -> reducer -> mw2 after -> mw1 after

Middleware can:
- Log actions
- Modify or replace actions before passing them on
- Cancel actions (do not call next_dispatch)
- Dispatch extra actions or thunks through api.dispatch
- Trigger side effects
"""

from __future__ import annotations

import functools
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TypeAlias

from statecell.core.actions import Action, DeferredAction, Dispatch, Dispatchable, GetState, describe, to_dispatchable
from statecell.core.exceptions import ConfigurationError, ConstructionOrderError, ErrorCodes

if TYPE_CHECKING:
    from statecell.store import Store

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MiddlewareAPI:
    """
    Capabilities handed to each middleware constructor.

    Attributes:
        get_state: Returns the store's current state
        dispatch: Runs thunks immediately, forwards plain actions to the
            fully composed dispatch (the start of the chain)

    """

    get_state: GetState
    dispatch: Dispatch


class Middleware(ABC):
    """Base class for middleware built as objects; the class itself is the constructor."""

    def __init__(self, api: MiddlewareAPI) -> None:
        self.api = api

    @abstractmethod
    def wrap(self, next_dispatch: Dispatch) -> Dispatch:
        """Return this layer's dispatch, delegating onwards to next_dispatch."""


MiddlewareLayer: TypeAlias = Middleware | Callable[[Dispatch], Dispatch]
MiddlewareConstructor: TypeAlias = Callable[[MiddlewareAPI], MiddlewareLayer]


def apply_middleware(store: Store[Any], middlewares: Iterable[MiddlewareConstructor] = ()) -> Dispatch:
    """
    Compose middleware around the store's raw dispatch.

    Args:
        store: Store whose raw dispatch ends the chain
        middlewares: Constructors, in execution order; any iterable, read once

    Returns:
        The composed dispatch

    Raises:
        ConfigurationError: If a constructor returns something that is not a layer
        ConstructionOrderError: If a constructor dispatches while the chain is being built

    """

    middlewares = tuple(middlewares)

    def dispatch_during_construction(action: Dispatchable) -> Any:
        msg = f"Dispatching {describe(action)} while constructing middleware is not allowed."
        raise ConstructionOrderError(msg, ErrorCodes.DISPATCH_DURING_CONSTRUCTION)

    dispatch: Dispatch = dispatch_during_construction

    def outer_dispatch(action: Any) -> Any:
        return dispatch(to_dispatchable(action))

    def api_dispatch(action: Any) -> Any:
        action = to_dispatchable(action)
        if isinstance(action, DeferredAction):
            return action(outer_dispatch, store.get_state)
        return dispatch(action)

    api = MiddlewareAPI(get_state=store.get_state, dispatch=api_dispatch)

    # raw_dispatch raises ReducerReentrancyError while the reducer is running
    guarded_dispatch: Dispatch = store.raw_dispatch

    wraps = [_layer_wrap(constructor(api), constructor) for constructor in middlewares]

    composed = guarded_dispatch
    for wrap, constructor in reversed(list(zip(wraps, middlewares))):
        composed = wrap(composed)
        if not callable(composed):
            msg = f"Middleware {_name(constructor)} did not return a dispatch function"
            raise ConfigurationError(msg, ErrorCodes.CONFIG_INVALID, {"middleware": _name(constructor)})

    dispatch = composed
    logger.debug("Middleware chain composed: %s", [_name(mw) for mw in middlewares])
    return dispatch


def _layer_wrap(layer: Any, constructor: MiddlewareConstructor) -> Callable[[Dispatch], Dispatch]:
    wrap = getattr(layer, "wrap", None)
    if callable(wrap):
        return wrap
    if callable(layer):
        return layer
    msg = f"Middleware {_name(constructor)} returned {type(layer).__name__}, expected a Middleware or a callable"
    raise ConfigurationError(msg, ErrorCodes.CONFIG_INVALID, {"middleware": _name(constructor)})


def _name(obj: Any) -> str:
    return getattr(obj, "__qualname__", None) or type(obj).__qualname__


# =============================================================================
# Middleware helpers
# =============================================================================


def middleware(func: Callable[[MiddlewareAPI, Dispatch, Dispatchable], Any]) -> MiddlewareConstructor:
    """
    Decorator turning `func(api, next_dispatch, action)` into a middleware constructor.

    Example:
        @middleware
        def double_adds(api, next_dispatch, action):
            if isinstance(action, Action) and action.kind == "add":
                action = Action("add", action.payload * 2)
            return next_dispatch(action)

    """

    @functools.wraps(func)
    def constructor(api: MiddlewareAPI) -> Callable[[Dispatch], Dispatch]:
        def wrap(next_dispatch: Dispatch) -> Dispatch:
            def dispatch(action: Dispatchable) -> Any:
                return func(api, next_dispatch, action)

            return dispatch

        return wrap

    return constructor


class ThunkMiddleware(Middleware):
    """
    Runs deferred actions at this position in the chain.

    Thunks are also run by the store's raw dispatch, so this is only needed
    to keep later middleware from ever seeing them.
    """

    def wrap(self, next_dispatch: Dispatch) -> Dispatch:
        def dispatch(action: Dispatchable) -> Any:
            if isinstance(action, DeferredAction):
                return action(self.api.dispatch, self.api.get_state)
            return next_dispatch(action)

        return dispatch


def logging_middleware(api: MiddlewareAPI) -> Callable[[Dispatch], Dispatch]:
    """Middleware that logs all actions."""

    def wrap(next_dispatch: Dispatch) -> Dispatch:
        def dispatch(action: Dispatchable) -> Any:
            if isinstance(action, Action):
                logger.info("Action dispatched: %s, payload: %r", action.kind, action.payload)
            else:
                logger.info("Action dispatched: %s", describe(action))
            return next_dispatch(action)

        return dispatch

    return wrap


def create_side_effect_middleware(
    side_effects: Mapping[str, Callable[[Action, MiddlewareAPI], None]],
) -> MiddlewareConstructor:
    """
    Create middleware that triggers side effects for specific action kinds.

    Effects run after the action has passed down the chain, so they observe
    the updated state through api.get_state. An effect that raises is logged
    and does not affect the dispatch.

    Args:
        side_effects: Dict mapping action kinds to effect functions (action, api) -> None

    Returns:
        Middleware constructor

    """
    effects = dict(side_effects)

    @middleware
    def side_effect_middleware(api: MiddlewareAPI, next_dispatch: Dispatch, action: Dispatchable) -> Any:
        result = next_dispatch(action)
        if isinstance(action, Action) and action.kind in effects:
            try:
                effects[action.kind](action, api)
            except Exception as e:
                logger.exception("Error in side effect for %s: %s", action.kind, e)
        return result

    return side_effect_middleware


def create_filter_middleware(predicate: Callable[[Action], bool]) -> MiddlewareConstructor:
    """
    Create middleware that cancels plain actions rejected by predicate.

    Deferred actions always pass through.
    """

    @middleware
    def filter_middleware(api: MiddlewareAPI, next_dispatch: Dispatch, action: Dispatchable) -> Any:
        if isinstance(action, Action) and not predicate(action):
            logger.debug("ACTION BLOCKED: %s", action.kind)
            return None
        return next_dispatch(action)

    return filter_middleware
