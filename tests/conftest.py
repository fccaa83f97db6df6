#!/usr/bin/env python3
"""
Shared test fixtures for statecell.
Provides common reducers and store setup.
"""

from __future__ import annotations

from typing import Any

import pytest

from statecell import Action, Store, create_store


def counter_reducer(state: dict[str, Any], action: Action) -> dict[str, Any]:
    """Reducer over {"count": int} used across the suite."""
    match action.kind:
        case "inc":
            return {"count": state["count"] + 1}
        case "add":
            return {"count": state["count"] + action.payload}
        case "clone":
            return {"count": state["count"]}
        case _:
            return state


def pytest_configure(config):
    """Register markers used by the suite."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "qt: mark test as requiring PyQt6")


@pytest.fixture
def reducer():
    """Provide the counter reducer."""
    return counter_reducer


@pytest.fixture
def store() -> Store[dict[str, Any]]:
    """Create a fresh counter store at {"count": 0}."""
    return create_store(counter_reducer, {"count": 0})
