"""Tests for transition records and tables."""

import pytest

from tablefsm.core.exceptions import InvalidTableError
from tablefsm.core.table import TransitionTable
from tablefsm.core.transition import (
    NO_REDIRECT,
    SENTINEL_STATE,
    CharacterOf,
    ExactString,
    Function,
    MatchKind,
    NestedTable,
    StateType,
    Transition,
)


def never(cursor, context, payload):
    return -1


class TestMatchVariants:
    """Tests for the match variant classes."""

    def test_kinds(self):
        assert ExactString(b"a").kind is MatchKind.EXACT_STRING
        assert CharacterOf(b"ab").kind is MatchKind.SINGLE_CHARACTER_OF
        assert Function(never).kind is MatchKind.FUNCTION
        assert NestedTable(TransitionTable()).kind is MatchKind.NESTED_TABLE

    def test_bytes_coercion(self):
        assert ExactString(bytearray(b"ab")).literal == b"ab"
        assert CharacterOf(memoryview(b"xy")).chars == b"xy"

    def test_str_literal_rejected(self):
        with pytest.raises(TypeError):
            ExactString("a")

    def test_function_display_name(self):
        assert Function(never).display_name == "never"
        assert Function(never, name="custom").display_name == "custom"

    def test_nested_repr_does_not_recurse(self):
        table = TransitionTable(name="loop")
        table.add(Transition.nested(0, table, 0))

        assert "loop" in repr(table.rows[0].match)
        assert "loop" in repr(table.rows[0])


class TestTransition:
    """Tests for Transition records."""

    def test_defaults(self):
        transition = Transition.exact(0, b"a", 1)

        assert transition.match_kind is MatchKind.EXACT_STRING
        assert transition.failure_state == NO_REDIRECT
        assert transition.state_type is StateType.NORMAL
        assert transition.side_effect is None
        assert transition.payload is None
        assert transition.name == "0->1"

    def test_factories(self):
        table = TransitionTable()

        assert Transition.char_of(0, b"ab", 1).match_kind is MatchKind.SINGLE_CHARACTER_OF
        assert Transition.function(0, never, 1).match_kind is MatchKind.FUNCTION
        assert Transition.nested(0, table, 1).match.table is table

    def test_sentinel(self):
        sentinel = Transition.sentinel()

        assert sentinel.is_sentinel
        assert sentinel.current_state == SENTINEL_STATE
        assert sentinel.match_kind is None

    def test_label_is_name(self):
        assert Transition.exact(0, b"a", 1, label="letter a").name == "letter a"


class TestTransitionTable:
    """Tests for TransitionTable."""

    def test_iteration_stops_at_sentinel(self):
        table = TransitionTable([
            Transition.exact(0, b"a", 1),
            Transition.sentinel(),
            Transition.exact(0, b"b", 1),
        ])

        assert len(table) == 1
        assert len(table.rows) == 3
        assert [row.match.literal for row in table] == [b"a"]

    def test_implicit_sentinel(self):
        table = TransitionTable([Transition.exact(0, b"a", 1)])

        assert len(table) == 1

    def test_add_and_extend(self):
        table = TransitionTable(name="t")
        result = table.add(Transition.exact(0, b"a", 1)).extend([
            Transition.exact(1, b"b", 2),
            Transition.exact(1, b"c", 2),
        ])

        assert result is table
        assert len(table) == 3

    def test_rows_from_keeps_order(self):
        table = TransitionTable([
            Transition.exact(0, b"a", 1, label="first"),
            Transition.exact(1, b"b", 2),
            Transition.exact(0, b"c", 2, label="second"),
        ])

        assert [row.label for row in table.rows_from(0)] == ["first", "second"]
        assert table.rows_from(5) == []

    def test_states(self):
        table = TransitionTable([
            Transition.exact(0, b"a", 1, failure_state=3),
            Transition.exact(3, b"b", 2),
        ])

        assert table.states() == {0, 1, 2, 3}

    def test_repr(self):
        assert repr(TransitionTable(name="demo")) == "TransitionTable(name='demo', rows=0)"


class TestTableValidation:
    """Tests for TransitionTable.validate."""

    def test_valid_table(self, accept_a_table):
        assert accept_a_table.validate() == []

    def test_unreachable_rows_warned(self):
        table = TransitionTable([
            Transition.exact(0, b"a", 1),
            Transition.sentinel(),
            Transition.exact(0, b"b", 1),
        ])

        warnings = table.validate()
        assert any("unreachable" in warning for warning in warnings)

    def test_missing_initial_state_warned(self):
        table = TransitionTable([Transition.exact(1, b"a", 2)])

        assert any("initial state" in warning for warning in table.validate())

    def test_negative_source_state(self):
        table = TransitionTable([Transition.exact(-2, b"a", 1)], name="bad")

        with pytest.raises(InvalidTableError, match="negative source state") as exc_info:
            table.validate()
        assert exc_info.value.table_name == "bad"
        assert exc_info.value.details["row"] == 0

    def test_invalid_failure_state(self):
        table = TransitionTable([Transition.exact(0, b"a", 1, failure_state=-5)])

        with pytest.raises(InvalidTableError, match="failure state"):
            table.validate()

    @pytest.mark.parametrize("transition,problem", [
        (Transition.exact(0, b"", 1), "empty literal"),
        (Transition.char_of(0, b"", 1), "empty character set"),
        (Transition(0, Function(None), 1), "no recognizer"),
        (Transition(0, NestedTable(None), 1), "no nested table"),
        (Transition(0, None, 1), "no match condition"),
    ])
    def test_missing_match_data(self, transition, problem):
        with pytest.raises(InvalidTableError, match=problem):
            TransitionTable([transition]).validate()
