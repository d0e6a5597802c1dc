"""Pytest configuration and shared fixtures for tablefsm tests."""

import pytest
from pathlib import Path
import sys

# Add src to path for testing
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from tablefsm.core.table import TransitionTable  # noqa: E402
from tablefsm.core.transition import StateType, Transition  # noqa: E402

DIGITS = b"0123456789"


@pytest.fixture
def accept_a_table():
    """state 0 --"a"--> state 1 (accept)."""
    return TransitionTable(
        [
            Transition.exact(0, b"a", 1, state_type=StateType.ACCEPT),
            Transition.sentinel(),
        ],
        name="accept_a",
    )


@pytest.fixture
def redirect_table():
    """state 0 --"a"--> 1 (fail: 2), state 2 --"b"--> 1, state 1 accepting."""
    return TransitionTable(
        [
            Transition.exact(0, b"a", 1, failure_state=2, state_type=StateType.ACCEPT),
            Transition.exact(2, b"b", 1, state_type=StateType.ACCEPT),
            Transition.sentinel(),
        ],
        name="redirect",
    )


@pytest.fixture
def number_table():
    """One or more decimal digits."""
    return TransitionTable(
        [
            Transition.char_of(0, DIGITS, 1, state_type=StateType.ACCEPT, label="first digit"),
            Transition.char_of(1, DIGITS, 1, state_type=StateType.ACCEPT, label="next digit"),
            Transition.sentinel(),
        ],
        name="number",
    )


@pytest.fixture
def machine_config_dict():
    """Comma separated numbers, emitting a token per number."""
    return {
        "name": "numbers",
        "main": "number_list",
        "tables": [
            {
                "name": "number_list",
                "transitions": [
                    {"state": 0, "match": "table", "table": "number", "success": 1,
                     "type": "accept", "label": "number"},
                    {"state": 1, "match": "exact", "string": ",", "success": 0, "label": "comma"},
                ],
            },
            {
                "name": "number",
                "transitions": [
                    {"state": 0, "match": "function", "function": "digits", "success": 1,
                     "type": "accept", "side_effect": "emit_token", "payload": "number"},
                ],
            },
        ],
    }
