"""Table FSM CLI module.

Provides command-line interface for validating, inspecting and running machines.
"""

from .main import cli, main

__all__ = ['cli', 'main']
