#!/usr/bin/env python3
"""
Custom Exception Classes for statecell
Provides structured error handling with specific exception types.

Every error raised by the store is a programmer error: it signals a violated
invariant and is never caught inside the package.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class StateCellError(Exception):
    """Base exception for all statecell errors."""

    def __init__(self, message: str, error_code: str | None = None, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}

    def __str__(self) -> str:
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message


class ConstructionOrderError(StateCellError):
    """Raised when dispatch is called before the middleware chain is composed."""


class ReducerReentrancyError(StateCellError):
    """Raised when the raw dispatch is re-entered while a reducer is running."""


class BindingContextError(StateCellError):
    """Raised when a binding helper is used outside a provide_store scope."""


class InvalidActionError(StateCellError, TypeError):
    """Raised when a dispatched value is neither an action nor a thunk."""


class ConfigurationError(StateCellError):
    """Raised when store or middleware configuration is invalid."""


class ErrorCodes(StrEnum):
    """Standardized error codes."""

    DISPATCH_DURING_CONSTRUCTION = "DISPATCH_DURING_CONSTRUCTION"
    DISPATCH_DURING_REDUCE = "DISPATCH_DURING_REDUCE"
    NO_STORE_IN_CONTEXT = "NO_STORE_IN_CONTEXT"
    INVALID_ACTION = "INVALID_ACTION"
    CONFIG_INVALID = "CONFIG_INVALID"
