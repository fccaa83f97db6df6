#!/usr/bin/env python3
"""
statecell.

A predictable state container: one state cell per store, updated by pure
reducers, observed by subscribers, intercepted by composable middleware.
"""

from statecell.core.actions import Action, DeferredAction, create_action, thunk
from statecell.core.config import StoreConfig
from statecell.core.equality import deep_equal, same_value
from statecell.core.exceptions import (
    BindingContextError,
    ConfigurationError,
    ConstructionOrderError,
    InvalidActionError,
    ReducerReentrancyError,
    StateCellError,
)
from statecell.middleware import (
    Middleware,
    MiddlewareAPI,
    ThunkMiddleware,
    apply_middleware,
    create_filter_middleware,
    create_side_effect_middleware,
    logging_middleware,
    middleware,
)
from statecell.store import Store, create_store

__version__ = "0.1.0"
__author__ = "statecell developers"
__description__ = "Predictable state container with structural change suppression and middleware"

__all__ = [
    "Action",
    "BindingContextError",
    "ConfigurationError",
    "ConstructionOrderError",
    "DeferredAction",
    "InvalidActionError",
    "Middleware",
    "MiddlewareAPI",
    "ReducerReentrancyError",
    "StateCellError",
    "Store",
    "StoreConfig",
    "ThunkMiddleware",
    "apply_middleware",
    "create_action",
    "create_filter_middleware",
    "create_side_effect_middleware",
    "create_store",
    "deep_equal",
    "logging_middleware",
    "middleware",
    "same_value",
    "thunk",
]
