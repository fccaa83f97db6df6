#!/usr/bin/env python3
"""
Constants for the statecell store.
Centralized definitions for string enums and environment variable names.
"""

from enum import StrEnum

# ============================================================================
# EQUALITY
# ============================================================================


class ShapeKind(StrEnum):
    """
    Runtime shapes recognized by the structural comparator.

    The order of the composite members mirrors the order in which
    deep_equal tries its comparison arms.
    """

    # Never compared structurally
    NONE = "none"
    SCALAR = "scalar"
    OPAQUE = "opaque"

    # Composite arms, in comparison priority order
    SEQUENCE = "sequence"
    ARRAY = "array"
    DATE = "date"
    PATTERN = "pattern"
    SET = "set"
    MAPPING = "mapping"
    RECORD = "record"

    # Composite without inspectable structure (identity only)
    UNKNOWN = "unknown"

    @property
    def is_composite(self) -> bool:
        """Whether values of this shape are compared structurally."""
        return self not in (ShapeKind.NONE, ShapeKind.SCALAR, ShapeKind.OPAQUE)


# ============================================================================
# ACTIONS
# ============================================================================


class ActionField(StrEnum):
    """Keys recognized when a plain mapping is dispatched as an action."""

    KIND = "kind"
    TYPE = "type"  # Accepted as an alias of KIND
    PAYLOAD = "payload"


# ============================================================================
# CONFIGURATION
# ============================================================================


class EnvVar(StrEnum):
    """Environment variables read by StoreConfig.from_env and setup_logging."""

    DEBUG = "STATECELL_DEBUG"
    ISOLATE_LISTENER_ERRORS = "STATECELL_ISOLATE_LISTENER_ERRORS"
    LOG_STATE_DIFF = "STATECELL_LOG_STATE_DIFF"


TRUTHY_VALUES = frozenset({"1", "true", "yes", "on"})
FALSY_VALUES = frozenset({"0", "false", "no", "off", ""})

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
