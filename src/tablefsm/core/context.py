"""Execution context isolation modes.

The execution context is owned by the caller and shared by reference across
a run and all of its nested sub-runs. By default nothing a recognizer, a
side effect or an abandoned sub-run does to it is ever undone. The
``SNAPSHOT`` mode lets a context opt into rollback of failed attempts by
implementing the ``Snapshottable`` protocol.
"""

from copy import deepcopy
from enum import Enum
from typing import Any, Protocol, runtime_checkable


class ContextIsolation(Enum):
    """How the engine protects the context from failed attempts."""
    SHARED = "shared"  # Effects of failed attempts persist
    SNAPSHOT = "snapshot"  # Snapshottable contexts are restored after a failed attempt


@runtime_checkable
class Snapshottable(Protocol):
    """Context that can save and restore its own state."""

    def snapshot(self) -> Any:
        ...

    def restore(self, token: Any) -> None:
        ...


class SnapshotContext(dict):
    """Dictionary context with deep-copy snapshots.

    Snapshots copy every value, so this is meant for small contexts such as
    token lists and counters.
    """

    def snapshot(self) -> dict:
        return deepcopy(dict(self))

    def restore(self, token: dict) -> None:
        self.clear()
        self.update(deepcopy(token))
