"""
Tests for state diffing.
"""

from __future__ import annotations

from dataclasses import dataclass

from statecell.core.diff import ROOT_KEY, state_diff


@dataclass(frozen=True)
class ViewState:
    page: int = 0
    items: tuple = ()


class TestStateDiff:
    """Tests for state_diff."""

    def test_dataclass_fields(self) -> None:
        diff = state_diff(ViewState(page=1), ViewState(page=2))

        assert diff == {"page": (1, 2)}

    def test_structurally_equal_fields_are_skipped(self) -> None:
        assert state_diff(ViewState(items=(1, [2])), ViewState(items=(1, [2]))) == {}

    def test_mapping_keys(self) -> None:
        diff = state_diff({"a": 1, "b": 2}, {"a": 1, "b": 3})

        assert diff == {"b": (2, 3)}

    def test_added_and_removed_keys(self) -> None:
        diff = state_diff({"a": 1}, {"b": 2})

        assert diff == {"a": (1, None), "b": (None, 2)}

    def test_type_change(self) -> None:
        diff = state_diff({"a": 1}, ViewState())

        assert diff == {ROOT_KEY: ({"a": 1}, ViewState())}

    def test_scalar_states(self) -> None:
        assert state_diff(1, 2) == {ROOT_KEY: (1, 2)}
        assert state_diff(1, 1) == {}
