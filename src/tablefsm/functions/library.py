"""Built-in recognizers and side effects.

These can be referenced by name from table descriptions. Recognizers take
``(cursor, context, payload)`` and return the number of bytes matched or
``NO_MATCH``; side effects take the same arguments and return nothing.
"""

import string
from collections.abc import MutableMapping
from dataclasses import dataclass
from typing import Any, Callable, Dict, List

from tablefsm.core.cursor import Cursor
from tablefsm.core.transition import NO_MATCH

DIGITS = string.digits.encode("ascii")
LETTERS = string.ascii_letters.encode("ascii")
WHITESPACE = b" \t\r\n\f\v"
IDENTIFIER_START = LETTERS + b"_"
IDENTIFIER_BODY = IDENTIFIER_START + DIGITS


@dataclass(frozen=True)
class Token:
    """A span of input recorded by ``emit_token``."""

    kind: Any
    text: bytes
    start: int
    end: int


def _payload_bytes(payload: Any) -> bytes:
    if isinstance(payload, str):
        return payload.encode("utf-8")
    if isinstance(payload, (bytes, bytearray, memoryview)):
        return bytes(payload)
    raise TypeError(f"Expected bytes or str payload, got {type(payload).__name__}")


def _span(cursor: Cursor, allowed: bytes, start: int = 0) -> int:
    buffer = cursor.buffer
    index = cursor.position + start
    while index < len(buffer) and buffer[index] in allowed:
        index += 1
    return index - cursor.position


def _nonempty_span(cursor: Cursor, allowed: bytes) -> int:
    count = _span(cursor, allowed)
    return count if count > 0 else NO_MATCH


def digits(cursor: Cursor, context: Any, payload: Any) -> int:
    return _nonempty_span(cursor, DIGITS)


def alpha(cursor: Cursor, context: Any, payload: Any) -> int:
    return _nonempty_span(cursor, LETTERS)


def alnum(cursor: Cursor, context: Any, payload: Any) -> int:
    return _nonempty_span(cursor, LETTERS + DIGITS)


def whitespace(cursor: Cursor, context: Any, payload: Any) -> int:
    return _nonempty_span(cursor, WHITESPACE)


def identifier(cursor: Cursor, context: Any, payload: Any) -> int:
    """ASCII identifier: a letter or underscore, then letters, digits, underscores."""
    first = cursor.peek()
    if not first or first[0] not in IDENTIFIER_START:
        return NO_MATCH
    return _span(cursor, IDENTIFIER_BODY, start=1)


def span_of(cursor: Cursor, context: Any, payload: Any) -> int:
    """One or more bytes from the payload's byte set."""
    return _nonempty_span(cursor, _payload_bytes(payload))


def any_byte(cursor: Cursor, context: Any, payload: Any) -> int:
    return NO_MATCH if cursor.at_end() else 1


def end_of_input(cursor: Cursor, context: Any, payload: Any) -> int:
    """Zero-length match that only succeeds once the input is exhausted."""
    return 0 if cursor.at_end() else NO_MATCH


def until(cursor: Cursor, context: Any, payload: Any) -> int:
    """Everything before the payload terminator; fails if it never appears."""
    terminator = _payload_bytes(payload)
    if not terminator:
        return NO_MATCH
    index = cursor.buffer.find(terminator, cursor.position)
    return NO_MATCH if index < 0 else index - cursor.position


def rest_of_line(cursor: Cursor, context: Any, payload: Any) -> int:
    """Everything up to the next newline or the end of input, possibly nothing."""
    index = cursor.buffer.find(b"\n", cursor.position)
    end = len(cursor.buffer) if index < 0 else index
    return end - cursor.position


def _token_sink(context: Any) -> List[Any]:
    if isinstance(context, list):
        return context
    if isinstance(context, MutableMapping):
        return context.setdefault("tokens", [])
    tokens = getattr(context, "tokens", None)
    if tokens is None:
        raise TypeError(
            f"Context of type {type(context).__name__} has nowhere to store tokens"
        )
    return tokens


def emit_token(cursor: Cursor, context: Any, payload: Any) -> None:
    """Record the bytes just consumed as a ``Token`` whose kind is the payload.

    Tokens go to the context itself if it is a list, to ``context["tokens"]``
    for mappings, and to ``context.tokens`` otherwise.
    """
    _token_sink(context).append(
        Token(kind=payload, text=cursor.matched, start=cursor.mark, end=cursor.position)
    )


def count(cursor: Cursor, context: Any, payload: Any) -> None:
    """Increment the counter named by the payload."""
    if isinstance(context, MutableMapping):
        context[payload] = context.get(payload, 0) + 1
    else:
        setattr(context, payload, getattr(context, payload, 0) + 1)


BUILTIN_RECOGNIZERS: Dict[str, Callable] = {
    "digits": digits,
    "alpha": alpha,
    "alnum": alnum,
    "whitespace": whitespace,
    "identifier": identifier,
    "span_of": span_of,
    "any_byte": any_byte,
    "end_of_input": end_of_input,
    "until": until,
    "rest_of_line": rest_of_line,
}

BUILTIN_SIDE_EFFECTS: Dict[str, Callable] = {
    "emit_token": emit_token,
    "count": count,
}
