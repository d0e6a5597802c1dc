"""Table FSM exception hierarchy.

Match failures never raise: every failed attempt collapses to ``NO_MATCH`` and
every failed run to an unsuccessful ``RunResult``. The exceptions in this
module are reserved for malformed tables and table descriptions, unknown
function names, and errors raised inside user-supplied functions.

Example:
    ```python
    from tablefsm.core.exceptions import TableFSMError

    try:
        machine = builder.build(config)
    except TableFSMError as e:
        logger.error(f"Error: {e}")
        if e.context:
            logger.error(f"Context: {e.context}")
    ```
"""

from typing import Any, Dict


class TableFSMError(Exception):
    """Base exception for all tablefsm errors.

    Attributes:
        context: Dictionary containing contextual information about the error
        details: Alias for context

    Args:
        message: Human-readable error message
        context: Optional dictionary with error context
        details: Alternative to context (takes precedence if both are given)
    """

    def __init__(
        self,
        message: str,
        context: Dict[str, Any] | None = None,
        details: Dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.context = details or context or {}
        self.details = self.context


class ConfigurationError(TableFSMError):
    """Raised when a table description is invalid or incomplete."""
    pass


class InvalidTableError(ConfigurationError):
    """Raised when a transition table is structurally invalid."""

    def __init__(self, table_name: str | None, message: str, details: Dict[str, Any] | None = None):
        name = table_name or "<anonymous>"
        super().__init__(f"Table '{name}' is invalid: {message}", context=details)
        self.table_name = table_name


class NotFoundError(TableFSMError):
    """Raised when a named item is not found."""
    pass


class FunctionNotFoundError(NotFoundError):
    """Raised when a function name cannot be resolved."""

    def __init__(self, name: str, details: Dict[str, Any] | None = None):
        super().__init__(f"Function '{name}' not found", context=details)
        self.function_name = name


class RegistrationError(TableFSMError):
    """Raised when a name is registered twice without overwrite."""
    pass


class OperationError(TableFSMError):
    """Raised when an operation fails."""
    pass


class FunctionError(OperationError):
    """Raised when a recognizer or side effect raises.

    This is a bug in user code, not a failed match, so it propagates
    instead of being treated as ``NO_MATCH``.
    """

    def __init__(
        self,
        message: str,
        function_name: str | None = None,
        state: int | None = None,
        details: Dict[str, Any] | None = None,
    ):
        if function_name:
            message = f"Function '{function_name}' failed: {message}"
        super().__init__(message, context=details)
        self.function_name = function_name
        self.state = state
