"""Named registry of recognizers and side effects.

Table descriptions refer to functions by name. A name is looked up in the
registry first; names of the form ``package.module:attribute`` that are not
registered are imported on demand.

Example:
    ```python
    registry = FunctionRegistry()

    @registry.recognizer("hex_digits")
    def hex_digits(cursor, context, payload):
        ...

    registry.get("hex_digits")
    ```
"""

import importlib
import logging
import threading
from enum import Enum
from typing import Any, Callable, Dict, List

from tablefsm.core.exceptions import FunctionNotFoundError, RegistrationError

logger = logging.getLogger(__name__)


class FunctionKind(Enum):
    """Role a registered function plays in a transition."""
    RECOGNIZER = "recognizer"
    SIDE_EFFECT = "side_effect"


class FunctionRegistry:
    """Thread-safe mapping of names to recognizers and side effects."""

    def __init__(self, name: str = "functions", include_builtins: bool = True):
        """Initialize the registry.

        Args:
            name: Registry name for error messages.
            include_builtins: Register the built-in function library.
        """
        self._name = name
        self._items: Dict[str, Callable] = {}
        self._kinds: Dict[str, FunctionKind] = {}
        self._lock = threading.RLock()

        if include_builtins:
            from tablefsm.functions.library import BUILTIN_RECOGNIZERS, BUILTIN_SIDE_EFFECTS

            for key, func in BUILTIN_RECOGNIZERS.items():
                self.register(key, func, FunctionKind.RECOGNIZER)
            for key, func in BUILTIN_SIDE_EFFECTS.items():
                self.register(key, func, FunctionKind.SIDE_EFFECT)

    @property
    def name(self) -> str:
        return self._name

    def register(
        self,
        key: str,
        func: Callable,
        kind: FunctionKind = FunctionKind.RECOGNIZER,
        allow_overwrite: bool = False,
    ) -> None:
        """Register a function by name.

        Raises:
            RegistrationError: If the name is taken and ``allow_overwrite`` is False.
        """
        if not callable(func):
            raise RegistrationError(
                f"Cannot register non-callable {type(func).__name__} as '{key}'",
                context={"key": key, "registry": self._name},
            )
        with self._lock:
            if not allow_overwrite and key in self._items:
                raise RegistrationError(
                    f"Function '{key}' already registered in {self._name}",
                    context={"key": key, "registry": self._name},
                )
            self._items[key] = func
            self._kinds[key] = kind

    def recognizer(self, key: str | None = None, allow_overwrite: bool = False) -> Callable:
        """Decorator form of ``register`` for recognizers."""
        def decorator(func: Callable) -> Callable:
            self.register(key or func.__name__, func, FunctionKind.RECOGNIZER, allow_overwrite)
            return func
        return decorator

    def side_effect(self, key: str | None = None, allow_overwrite: bool = False) -> Callable:
        """Decorator form of ``register`` for side effects."""
        def decorator(func: Callable) -> Callable:
            self.register(key or func.__name__, func, FunctionKind.SIDE_EFFECT, allow_overwrite)
            return func
        return decorator

    def get(self, key: str) -> Callable:
        """Resolve a function name.

        Raises:
            FunctionNotFoundError: If the name is neither registered nor importable.
        """
        with self._lock:
            if key in self._items:
                return self._items[key]
        if ":" in key:
            return self._import(key)
        raise FunctionNotFoundError(
            key,
            details={"registry": self._name, "available_keys": self.list_names()},
        )

    def has(self, key: str) -> bool:
        with self._lock:
            return key in self._items

    def kind_of(self, key: str) -> FunctionKind | None:
        with self._lock:
            return self._kinds.get(key)

    def list_names(self, kind: FunctionKind | None = None) -> List[str]:
        with self._lock:
            return [
                key for key in self._items
                if kind is None or self._kinds[key] is kind
            ]

    def _import(self, reference: str) -> Callable:
        module_name, _, attribute = reference.partition(":")
        try:
            module = importlib.import_module(module_name)
            func: Any = getattr(module, attribute)
        except (ImportError, AttributeError) as e:
            raise FunctionNotFoundError(
                reference,
                details={"registry": self._name, "error": str(e)},
            ) from e
        if not callable(func):
            raise FunctionNotFoundError(
                reference,
                details={"registry": self._name, "error": "not callable"},
            )
        logger.debug(f"Imported function '{reference}'")
        return func

    def __contains__(self, key: str) -> bool:
        return self.has(key)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)
