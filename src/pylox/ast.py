"""
Abstract Syntax Tree (AST) node definitions for pylox.

The variant sets are closed: every operation over the tree (printing,
evaluating, executing) is a single dispatch over EXPRESSION_TYPES or
STATEMENT_TYPES, with one branch per variant. Nodes are frozen so the
interpreter can never rewrite the program it is running.
"""

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from .tokens import Token


# =============================================================================
# Base Classes
# =============================================================================

@dataclass(frozen=True)
class AstNode:
    """Base class for all AST nodes."""
    pass


@dataclass(frozen=True)
class Expr(AstNode):
    """Base class for all expressions."""
    pass


@dataclass(frozen=True)
class Stmt(AstNode):
    """Base class for all statements."""
    pass


# =============================================================================
# Expression Nodes
# =============================================================================

@dataclass(frozen=True)
class Literal(Expr):
    """A literal value: nil, true/false, a number or a string."""
    value: Union[None, bool, float, str]


@dataclass(frozen=True)
class Grouping(Expr):
    """A parenthesised expression."""
    expression: Expr


@dataclass(frozen=True)
class Unary(Expr):
    """A prefix operation (e.g. -n, !ok)."""
    operator: Token
    right: Expr


@dataclass(frozen=True)
class Binary(Expr):
    """A binary operation (e.g. a + b, x == y)."""
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True)
class Variable(Expr):
    """A variable reference. Keeps the identifier token for error lines."""
    name: Token


@dataclass(frozen=True)
class Assign(Expr):
    """Assignment to an existing variable; evaluates to the assigned value."""
    name: Token
    value: Expr


# =============================================================================
# Statement Nodes
# =============================================================================

@dataclass(frozen=True)
class ExpressionStatement(Stmt):
    """An expression evaluated for its side effects."""
    expression: Expr


@dataclass(frozen=True)
class PrintStatement(Stmt):
    """print <expression>;"""
    expression: Expr


@dataclass(frozen=True)
class VarDeclaration(Stmt):
    """var <name> (= <initializer>)?;"""
    name: Token
    initializer: Optional[Expr] = None


@dataclass(frozen=True)
class Block(Stmt):
    """A braced list of declarations, run in its own scope."""
    statements: Tuple[Stmt, ...] = ()


EXPRESSION_TYPES = (Literal, Grouping, Unary, Binary, Variable, Assign)

STATEMENT_TYPES = (ExpressionStatement, PrintStatement, VarDeclaration, Block)
