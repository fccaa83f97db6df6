"""
Predictable state container.

This module implements a unidirectional data flow pattern:
    Action -> Dispatch -> (Middleware) -> Reducer -> New State -> Notify Subscribers

Usage:
    def reducer(state: dict, action: Action) -> dict:
        if action.kind == "inc":
            return {**state, "count": state["count"] + 1}
        return state

    store = create_store(reducer, {"count": 0})

    # Components subscribe to state changes
    unsubscribe = store.subscribe(my_callback)

    # Dispatch actions to change state
    store.dispatch(Action("inc"))

    # Components react to state changes in their callbacks
    def my_callback(state: dict) -> None:
        render(state["count"])

A dispatch whose reducer result is structurally equal to the current state
(see statecell.core.equality) changes nothing and notifies nobody.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any, Generic, TypeAlias, TypeVar

from statecell.core.actions import Action, DeferredAction, Dispatch, describe, to_dispatchable
from statecell.core.config import StoreConfig
from statecell.core.diff import state_diff
from statecell.core.equality import deep_equal
from statecell.core.exceptions import ErrorCodes, ReducerReentrancyError
from statecell.middleware import apply_middleware

if TYPE_CHECKING:
    from statecell.middleware import MiddlewareConstructor

logger = logging.getLogger(__name__)

S = TypeVar("S")

Reducer: TypeAlias = Callable[[S, Action], S]
Listener: TypeAlias = Callable[[Any], None]
UnsubscribeFunction: TypeAlias = Callable[[], None]


class Store(Generic[S]):
    """
    Central store that holds state and manages subscriptions.

    The store:
    - Holds the single source of truth for one state value
    - Dispatches actions through the reducer
    - Notifies subscribers when state changes
    - Routes dispatch through an optional middleware chain

    Each instance owns its own state cell and listener set; stores share nothing.
    """

    def __init__(
        self,
        reducer: Reducer[S],
        initial_state: S,
        middlewares: Sequence[MiddlewareConstructor] = (),
        config: StoreConfig | None = None,
    ) -> None:
        """
        Initialize the store.

        Args:
            reducer: Pure function (state, action) -> new state
            initial_state: Starting state
            middlewares: Middleware constructors, applied left to right
            config: Store settings, defaults to StoreConfig()

        """
        self.config = config or StoreConfig()
        self._reducer = reducer
        self._state = initial_state
        # id(listener) -> (listener, registration token), in registration order.
        # Keyed by identity so unhashable or value-equal callables stay distinct.
        self._listeners: dict[int, tuple[Listener, int]] = {}
        self._tokens = itertools.count(1)
        self._is_reducing = False

        self.middlewares: tuple[MiddlewareConstructor, ...] = tuple(middlewares)
        self._dispatch: Dispatch = self.raw_dispatch
        if self.middlewares:
            self._dispatch = apply_middleware(self, self.middlewares)

        logger.debug("%s: initialized with %d middleware(s), state: %r", self.config.name, len(self.middlewares), initial_state)

    def __repr__(self) -> str:
        return f"<Store {self.config.name!r} listeners={len(self._listeners)} middlewares={len(self.middlewares)}>"

    # =========================================================================
    # State access
    # =========================================================================

    def get_state(self) -> S:
        """Get current state snapshot (by reference)."""
        return self._state

    @property
    def state(self) -> S:
        """Get current state (read-only)."""
        return self._state

    @property
    def is_reducing(self) -> bool:
        """Check if the reducer is currently running."""
        return self._is_reducing

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    # =========================================================================
    # Dispatch
    # =========================================================================

    def dispatch(self, action: Any) -> Any:
        """
        Dispatch an action (or thunk) through the middleware chain.

        Returns:
            None for plain actions reaching the reducer, the thunk's return
            value for deferred actions, or whatever a middleware returned.

        """
        return self._dispatch(to_dispatchable(action))

    def raw_dispatch(self, action: Any) -> Any:
        """
        Apply an action directly, bypassing middleware.

        Deferred actions are run with (dispatch, get_state). Plain actions go
        through the reducer; listeners are notified only if the result is not
        structurally equal to the current state.

        Raises:
            ReducerReentrancyError: If called while the reducer is running

        """
        action = to_dispatchable(action)
        if self._is_reducing:
            msg = f"Cannot dispatch {describe(action)} while a reducer is executing."
            raise ReducerReentrancyError(msg, ErrorCodes.DISPATCH_DURING_REDUCE, {"store": self.config.name})

        if isinstance(action, DeferredAction):
            logger.debug("%s: THUNK DISPATCHED: %s", self.config.name, action.name)
            return action(self.dispatch, self.get_state)

        logger.debug("%s: ACTION DISPATCHED: %s | Payload: %r", self.config.name, action.kind, action.payload)

        old_state = self._state
        try:
            self._is_reducing = True
            new_state = self._reducer(old_state, action)
        finally:
            self._is_reducing = False

        if deep_equal(new_state, old_state):
            logger.debug("%s: STATE UNCHANGED: %s", self.config.name, action.kind)
            return None

        self._state = new_state
        if self.config.log_state_diff and logger.isEnabledFor(logging.DEBUG):
            logger.debug("%s: STATE CHANGED: %s | Diff: %s", self.config.name, action.kind, state_diff(old_state, new_state))

        self._notify_subscribers()
        return None

    # =========================================================================
    # Subscriptions
    # =========================================================================

    def subscribe(self, listener: Listener) -> UnsubscribeFunction:
        """
        Subscribe to state changes.

        Listeners are told apart by identity: subscribing the same object again
        keeps its original position, while distinct objects always get their
        own registration, even when they compare equal or are unhashable. The returned function removes exactly this registration and
        is safe to call more than once.
        """
        key = id(listener)
        registration = self._listeners.get(key)
        if registration is None:
            registration = (listener, next(self._tokens))
            self._listeners[key] = registration
        token = registration[1]
        cb_name = getattr(listener, "__qualname__", repr(listener))
        logger.debug("%s: SUBSCRIBER ADDED: %s | Total subscribers: %d", self.config.name, cb_name, len(self._listeners))

        def unsubscribe() -> None:
            current = self._listeners.get(key)
            if current is not None and current[1] == token:
                del self._listeners[key]
                logger.debug("%s: SUBSCRIBER REMOVED: %s", self.config.name, cb_name)

        return unsubscribe

    def _notify_subscribers(self) -> None:
        """Notify all subscribers of state change."""
        # Copy to allow (un)subscribe and nested dispatch during iteration
        for key, (listener, token) in list(self._listeners.items()):
            current = self._listeners.get(key)
            if current is None or current[1] != token:
                continue  # Unsubscribed earlier in this pass
            if not self.config.isolate_listener_errors:
                listener(self._state)
                continue
            try:
                listener(self._state)
            except Exception as e:
                logger.exception("%s: Error in subscriber callback: %s", self.config.name, e)


def create_store(
    reducer: Reducer[S],
    initial_state: S,
    middlewares: Sequence[MiddlewareConstructor] = (),
    config: StoreConfig | None = None,
) -> Store[S]:
    """Create a store; `middlewares` defaults to an empty sequence."""
    return Store(reducer, initial_state, middlewares, config)
