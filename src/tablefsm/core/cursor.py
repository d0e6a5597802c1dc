"""Input cursor over an immutable byte buffer."""

from typing import Union

BytesLike = Union[bytes, bytearray, memoryview]


class Cursor:
    """A read position within a byte buffer.

    The buffer is frozen to ``bytes`` on construction and shared between
    copies, so ``copy()`` is cheap and copies never observe each other's
    movement. All reads are bounded by the buffer length.

    Attributes:
        buffer: The full input.
        position: Offset of the next unread byte.
        mark: Offset the cursor was at before its last ``advance``.
    """

    __slots__ = ("buffer", "position", "mark")

    def __init__(self, data: BytesLike, position: int = 0):
        if isinstance(data, str):
            raise TypeError("Cursor input must be bytes-like, not str; encode it first")
        self.buffer = bytes(data)
        if position < 0 or position > len(self.buffer):
            raise ValueError(f"Position {position} outside buffer of length {len(self.buffer)}")
        self.position = position
        self.mark = position

    @classmethod
    def wrap(cls, data: Union["Cursor", BytesLike]) -> "Cursor":
        """Return ``data`` if it is already a cursor, else a new cursor over it."""
        if isinstance(data, Cursor):
            return data
        return cls(data)

    def copy(self) -> "Cursor":
        clone = Cursor.__new__(Cursor)
        clone.buffer = self.buffer
        clone.position = self.position
        clone.mark = self.mark
        return clone

    def advance(self, count: int) -> None:
        if count < 0:
            raise ValueError(f"Cannot advance by a negative count ({count})")
        if self.position + count > len(self.buffer):
            raise ValueError(
                f"Cannot advance {count} bytes from position {self.position}; "
                f"only {self.remaining_length} remain"
            )
        self.mark = self.position
        self.position += count

    @property
    def remaining(self) -> bytes:
        """Unconsumed input."""
        return self.buffer[self.position:]

    @property
    def remaining_length(self) -> int:
        return len(self.buffer) - self.position

    @property
    def matched(self) -> bytes:
        """Bytes consumed by the last ``advance``."""
        return self.buffer[self.mark:self.position]

    def at_end(self) -> bool:
        return self.position >= len(self.buffer)

    def peek(self, count: int = 1) -> bytes:
        """Return up to ``count`` bytes at the cursor without moving it."""
        return self.buffer[self.position:self.position + count]

    def startswith(self, literal: bytes) -> bool:
        return self.buffer.startswith(literal, self.position)

    def __len__(self) -> int:
        return self.remaining_length

    def __repr__(self) -> str:
        preview = self.peek(16)
        return f"Cursor(position={self.position}, length={len(self.buffer)}, next={preview!r})"
