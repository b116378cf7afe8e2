"""
Fully parenthesised prefix printer for ASTs.

    -123 * (45.67)   →   (* (- 123) (group 45.67))

Useful for checking that the parser honours precedence and associativity.
"""

from typing import Iterable

from .ast import (
    AstNode, Expr, Literal, Grouping, Unary, Binary, Variable, Assign,
    Stmt, ExpressionStatement, PrintStatement, VarDeclaration, Block,
)
from .runtime.values import stringify


class AstPrinter:
    """Renders expressions and statements as Lisp-style strings."""

    def print(self, node: AstNode) -> str:
        if isinstance(node, Stmt):
            return self._print_statement(node)
        return self._print_expression(node)

    def _parenthesize(self, name: str, *parts: Expr) -> str:
        inner = " ".join(self._print_expression(p) for p in parts)
        return f"({name} {inner})"

    def _print_expression(self, expr: Expr) -> str:
        if isinstance(expr, Literal):
            return stringify(expr.value)
        elif isinstance(expr, Grouping):
            return self._parenthesize("group", expr.expression)
        elif isinstance(expr, Unary):
            return self._parenthesize(expr.operator.lexeme, expr.right)
        elif isinstance(expr, Binary):
            return self._parenthesize(expr.operator.lexeme, expr.left, expr.right)
        elif isinstance(expr, Variable):
            return expr.name.lexeme
        elif isinstance(expr, Assign):
            return f"(= {expr.name.lexeme} {self._print_expression(expr.value)})"
        else:
            raise TypeError(f"Unknown expression type: {type(expr).__name__}")

    def _print_statement(self, stmt: Stmt) -> str:
        if isinstance(stmt, ExpressionStatement):
            return self._parenthesize(";", stmt.expression)
        elif isinstance(stmt, PrintStatement):
            return self._parenthesize("print", stmt.expression)
        elif isinstance(stmt, VarDeclaration):
            if stmt.initializer is None:
                return f"(var {stmt.name.lexeme})"
            return f"(var {stmt.name.lexeme} = {self._print_expression(stmt.initializer)})"
        elif isinstance(stmt, Block):
            if not stmt.statements:
                return "(block)"
            inner = " ".join(self._print_statement(s) for s in stmt.statements)
            return f"(block {inner})"
        else:
            raise TypeError(f"Unknown statement type: {type(stmt).__name__}")


def print_ast(nodes: Iterable[AstNode]) -> str:
    """Render a sequence of nodes, one per line."""
    printer = AstPrinter()
    return "\n".join(printer.print(node) for node in nodes)
