"""
Store Connectors - Connect consumers to a store.

Each connector is responsible for:
1. Subscribing to relevant state changes
2. Updating its consumer when the selected part of the state changes
3. Handling cleanup (unsubscribe) when the consumer goes away

A store can be scoped to a block of code with provide_store; helpers such as
use_store and use_selector then find it without it being passed around:

    with provide_store(store):
        sub = use_selector(lambda s: s["count"], label.set_text)
        ...
        sub.close()

The scope is a ContextVar, so it is local to the current thread or task.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any

from statecell.core.equality import same_value
from statecell.core.exceptions import BindingContextError, ErrorCodes

if TYPE_CHECKING:
    from statecell.store import Store, UnsubscribeFunction

logger = logging.getLogger(__name__)

_current_store: ContextVar[Store[Any] | None] = ContextVar("statecell_current_store", default=None)

Selector = Callable[[Any], Any]
Equality = Callable[[Any, Any], bool]

_ABSENT = object()


# =============================================================================
# Store scoping
# =============================================================================


@contextmanager
def provide_store(store: Store[Any]) -> Iterator[Store[Any]]:
    """Make `store` the one returned by use_store inside the with-block."""
    token = _current_store.set(store)
    try:
        yield store
    finally:
        _current_store.reset(token)


def use_store() -> Store[Any]:
    """
    Get the store provided by the innermost provide_store block.

    Raises:
        BindingContextError: If called outside provide_store

    """
    store = _current_store.get()
    if store is None:
        msg = "use_store must be used within a provide_store block"
        raise BindingContextError(msg, ErrorCodes.NO_STORE_IN_CONTEXT)
    return store


# =============================================================================
# Selector subscriptions
# =============================================================================


class SelectorSubscription:
    """
    Tracks a selected value and reports when it changes.

    The selected value is compared with `equality` (same_value by default:
    identity, or value equality for scalars), not with deep structural
    equality. The store has already suppressed structurally equal states.
    """

    def __init__(
        self,
        store: Store[Any],
        selector: Selector,
        on_change: Callable[[Any], None],
        equality: Equality = same_value,
    ) -> None:
        self.store = store
        self._selector = selector
        self._on_change = on_change
        self._equality = equality
        self._value = selector(store.get_state())
        self._unsubscribe: UnsubscribeFunction | None = store.subscribe(self._on_state_change)

    @property
    def value(self) -> Any:
        """Most recently selected value."""
        return self._value

    @property
    def closed(self) -> bool:
        return self._unsubscribe is None

    def _on_state_change(self, state: Any) -> None:
        selected = self._selector(state)
        if self._equality(self._value, selected):
            return
        self._value = selected
        self._on_change(selected)

    def close(self) -> None:
        """Cleanup subscription."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None


def use_selector(
    selector: Selector,
    on_change: Callable[[Any], None],
    equality: Equality = same_value,
    store: Store[Any] | None = None,
) -> SelectorSubscription:
    """
    Subscribe to a derived value of the state.

    Args:
        selector: Function extracting the value of interest from the state
        on_change: Called with the new value whenever it changes
        equality: Decides whether two selected values are the same
        store: Store to use; defaults to use_store()

    Returns:
        SelectorSubscription holding the current value

    Raises:
        BindingContextError: If no store is given and none is provided

    """
    return SelectorSubscription(store if store is not None else use_store(), selector, on_change, equality)


# =============================================================================
# Component connectors
# =============================================================================


class StoreConnector:
    """
    Base class for objects that mirror store state into a component.

    Subclasses override on_state_change. The connector subscribes on init and
    pushes the current state once so the component starts in sync.
    """

    def __init__(self, store: Store[Any], component: Any = None) -> None:
        self.store = store
        self.component = component
        self._unsubscribe: UnsubscribeFunction | None = store.subscribe(self.on_state_change)
        logger.debug("%s: Initialized and subscribed to store", type(self).__name__)

        self.on_state_change(store.get_state())

    def on_state_change(self, state: Any) -> None:
        """React to a state change."""

    def disconnect(self) -> None:
        """Cleanup subscription."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None


def connect_component(
    store: Store[Any],
    component: Any,
    state_to_props: Callable[[Any], dict[str, Any]],
    handlers: dict[str, Callable[[Any], None]],
) -> UnsubscribeFunction:
    """
    Connect a component to the store (similar to Redux connect()).

    Each handled prop gets its own selector subscription, so a handler runs
    once with the initial value and then only when its prop changes.

    Args:
        store: The store
        component: The component to connect
        state_to_props: Function that extracts relevant state for this component
        handlers: Dict mapping prop names to handler functions

    Returns:
        Unsubscribe function closing every prop subscription

    Example:
        connect_component(
            store,
            save_button,
            state_to_props=lambda s: {"saved": s["saved"]},
            handlers={"saved": lambda saved: save_button.set_text("Saved" if saved else "Save")},
        )

    """
    subscriptions = [_connect_prop(store, state_to_props, name, handler) for name, handler in handlers.items()]
    logger.debug("Connected component %s to %r (%d props)", type(component).__name__, store, len(subscriptions))

    def unsubscribe() -> None:
        for subscription in subscriptions:
            subscription.close()

    return unsubscribe


def _connect_prop(
    store: Store[Any],
    state_to_props: Callable[[Any], dict[str, Any]],
    name: str,
    handler: Callable[[Any], None],
) -> SelectorSubscription:
    def on_change(value: Any) -> None:
        if value is not _ABSENT:
            handler(value)

    subscription = SelectorSubscription(store, lambda state: state_to_props(state).get(name, _ABSENT), on_change)
    # Initial render with current state
    on_change(subscription.value)
    return subscription
