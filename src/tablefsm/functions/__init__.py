"""Function registry and built-in recognizers."""

from tablefsm.functions.library import Token
from tablefsm.functions.registry import FunctionKind, FunctionRegistry

__all__ = [
    "FunctionRegistry",
    "FunctionKind",
    "Token",
]
