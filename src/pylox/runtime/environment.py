"""
Variable scopes for the interpreter.

Environments form a tree rooted at one global scope per session. A block
gets a child scope for the duration of its execution and nothing holds on
to it afterwards.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ..errors import error_undefined_variable
from ..tokens import Token


@dataclass
class Environment:
    """
    A single scope containing variable bindings.

    Scopes form a chain via the `enclosing` field for lexical scoping.
    """
    values: Dict[str, Any] = field(default_factory=dict)
    enclosing: Optional["Environment"] = None
    name: str = "global"  # For debugging

    def define(self, name: str, value: Any) -> None:
        """
        Bind a name in this scope.

        Redefining a name that already exists here simply overwrites it,
        which keeps 'var a = 1;' typed twice at the REPL harmless.
        """
        self.values[name] = value

    def get(self, name: Token) -> Any:
        """Look up a variable in this scope or enclosing scopes."""
        scope = self._resolve(name.lexeme)
        if scope is None:
            raise error_undefined_variable(name)
        return scope.values[name.lexeme]

    def assign(self, name: Token, value: Any) -> None:
        """
        Update the nearest existing binding of a variable.

        Assignment never creates a variable; an unbound name is an error.
        """
        scope = self._resolve(name.lexeme)
        if scope is None:
            raise error_undefined_variable(name)
        scope.values[name.lexeme] = value

    def child(self, name: str = "block") -> "Environment":
        """Create a nested scope whose parent is this one."""
        return Environment(enclosing=self, name=name)

    @property
    def depth(self) -> int:
        """Number of scopes between this one and the global scope."""
        depth = 0
        scope = self.enclosing
        while scope is not None:
            depth += 1
            scope = scope.enclosing
        return depth

    def _resolve(self, name: str) -> Optional["Environment"]:
        """Find the innermost scope that binds name."""
        scope = self
        while scope is not None:
            if name in scope.values:
                return scope
            scope = scope.enclosing
        return None

    def __contains__(self, name: str) -> bool:
        """Check if a variable exists in this scope or its parents."""
        return self._resolve(name) is not None
