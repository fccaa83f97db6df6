"""Core primitives: actions, structural equality, configuration and errors."""

from .actions import Action, DeferredAction, Dispatch, Dispatchable, GetState, Thunk, create_action, thunk, to_dispatchable
from .config import StoreConfig
from .diff import state_diff
from .equality import classify, deep_equal, same_value
from .exceptions import (
    BindingContextError,
    ConfigurationError,
    ConstructionOrderError,
    ErrorCodes,
    InvalidActionError,
    ReducerReentrancyError,
    StateCellError,
)

__all__ = [
    "Action",
    "BindingContextError",
    "ConfigurationError",
    "ConstructionOrderError",
    "DeferredAction",
    "Dispatch",
    "Dispatchable",
    "ErrorCodes",
    "GetState",
    "InvalidActionError",
    "ReducerReentrancyError",
    "StateCellError",
    "StoreConfig",
    "Thunk",
    "classify",
    "create_action",
    "deep_equal",
    "same_value",
    "state_diff",
    "thunk",
    "to_dispatchable",
]
