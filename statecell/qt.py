"""
Qt integration: re-emit store changes as Qt signals.

Requires the `qt` extra (PyQt6).

Usage:
    bridge = StoreSignalBridge(store, selector=lambda s: s["count"], parent=window)
    bridge.selection_changed.connect(lambda count: label.setText(str(count)))
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from statecell.core.equality import same_value

if TYPE_CHECKING:
    from statecell.store import Store

logger = logging.getLogger(__name__)


class StoreSignalBridge(QObject):
    """
    QObject that subscribes to a store and emits signals on change.

    state_changed is emitted with the new state on every notified change.
    selection_changed is emitted only when a selector is given and its
    output changes under `equality`.
    """

    state_changed = pyqtSignal(object)
    selection_changed = pyqtSignal(object)

    def __init__(
        self,
        store: Store[Any],
        selector: Callable[[Any], Any] | None = None,
        equality: Callable[[Any, Any], bool] = same_value,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self.store = store
        self._selector = selector
        self._equality = equality
        self._selected = selector(store.get_state()) if selector is not None else None
        self._unsubscribe: Callable[[], None] | None = store.subscribe(self._on_state_change)
        logger.debug("STORE SIGNAL BRIDGE: Initialized for %r", store)

    @property
    def selected(self) -> Any:
        return self._selected

    def _on_state_change(self, state: Any) -> None:
        self.state_changed.emit(state)
        if self._selector is None:
            return
        selected = self._selector(state)
        if not self._equality(self._selected, selected):
            self._selected = selected
            self.selection_changed.emit(selected)

    def disconnect_store(self) -> None:
        """Cleanup subscription."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None


def dispatch_later(store: Store[Any], action: Any) -> None:
    """
    Dispatch an action on the next event loop iteration.
    Useful for dispatching from within subscriber callbacks.
    """
    logger.debug("ASYNC DISPATCH QUEUED: %r", action)
    QTimer.singleShot(0, lambda: store.dispatch(action))
