#!/usr/bin/env python3
"""Store configuration."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from statecell.core.constants import FALSY_VALUES, TRUTHY_VALUES, EnvVar
from statecell.core.exceptions import ConfigurationError, ErrorCodes


@dataclass(frozen=True)
class StoreConfig:
    """Store behaviour settings with hardcoded defaults."""

    # Label used in log lines, useful when several stores coexist
    name: str = "store"

    # Log and continue when a listener raises instead of propagating
    isolate_listener_errors: bool = False

    # Compute a field diff for the DEBUG log on every state change
    log_state_diff: bool = True

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **overrides: object) -> StoreConfig:
        """
        Build a config from STATECELL_* environment variables.

        Args:
            environ: Mapping to read instead of os.environ
            **overrides: Field values taking precedence over the environment

        Raises:
            ConfigurationError: If a boolean variable has an unrecognized value

        """
        env = os.environ if environ is None else environ
        values: dict[str, object] = {}

        isolate = _read_flag(env, EnvVar.ISOLATE_LISTENER_ERRORS)
        if isolate is not None:
            values["isolate_listener_errors"] = isolate
        log_diff = _read_flag(env, EnvVar.LOG_STATE_DIFF)
        if log_diff is not None:
            values["log_state_diff"] = log_diff

        values.update(overrides)
        return cls(**values)


def _read_flag(env: Mapping[str, str], var: EnvVar) -> bool | None:
    raw = env.get(var)
    if raw is None:
        return None
    value = raw.strip().lower()
    if value in TRUTHY_VALUES:
        return True
    if value in FALSY_VALUES:
        return False
    msg = f"{var} must be a boolean flag, got {raw!r}"
    raise ConfigurationError(msg, ErrorCodes.CONFIG_INVALID, {"variable": str(var), "value": raw})
