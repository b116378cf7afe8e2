"""
pylox runtime - Tree-walking interpreter.

This module provides:
- Interpreter: Executes statements against a scope chain
- Environment: Variable scopes with parent links
- Value helpers: truthiness, equality and print formatting
"""

from .values import (
    is_number,
    is_truthy,
    is_equal,
    stringify,
    type_name,
)

from .environment import (
    Environment,
)

from .interpreter import (
    Interpreter,
    ExecutionResult,
    execute,
)

__all__ = [
    # Values
    'is_number',
    'is_truthy',
    'is_equal',
    'stringify',
    'type_name',

    # Scopes
    'Environment',

    # Interpreter
    'Interpreter',
    'ExecutionResult',
    'execute',
]
