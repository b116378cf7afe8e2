"""
Tree-walking interpreter for pylox.

Evaluates AST nodes directly against a chain of Environments. Evaluation is
post-order: operands are evaluated before the operator's own semantics are
applied.
"""

import logging
import math
import sys
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator, List, Optional, TextIO

from .environment import Environment
from .values import is_number, is_truthy, is_equal, stringify, type_name
from ..ast import (
    Expr, Literal, Grouping, Unary, Binary, Variable, Assign,
    Stmt, ExpressionStatement, PrintStatement, VarDeclaration, Block,
)
from ..errors import LoxRuntimeError, error_operand_type
from ..tokens import Token, TokenType

logger = logging.getLogger(__name__)


@dataclass
class ExecutionResult:
    """Result of executing a list of statements."""
    success: bool
    error: Optional[LoxRuntimeError] = None
    executed: int = 0  # statements completed before stopping

    @property
    def error_message(self) -> Optional[str]:
        if self.error is None:
            return None
        return str(self.error)


def _divide(left: float, right: float) -> float:
    """IEEE-754 division; Python raises where doubles give inf or nan."""
    if right != 0.0:
        return left / right
    if left == 0.0 or math.isnan(left):
        return math.nan
    return math.copysign(math.inf, left) * math.copysign(1.0, right)


class Interpreter:
    """
    Tree-walking interpreter.

    One instance lives for a whole session, so the global scope and anything
    defined in it survive between calls to execute().
    """

    def __init__(self, out: Optional[TextIO] = None, global_scope: Optional[Environment] = None):
        """
        Initialize the interpreter.

        Args:
            out: Stream that print statements write to (default: stdout)
            global_scope: Global scope to use (default: a fresh one)
        """
        self.out = out
        self.globals = global_scope if global_scope is not None else Environment()
        self.environment = self.globals

    def execute(self, statements: List[Stmt], environment: Optional[Environment] = None) -> ExecutionResult:
        """
        Execute statements in order.

        Stops at the first runtime error and returns it in the result instead
        of raising. Output already printed stays printed.

        Args:
            statements: Parsed statements, free of syntax errors
            environment: Scope to run in (default: the global scope)

        Returns:
            ExecutionResult with the error, if any
        """
        executed = 0
        with self._scope(environment if environment is not None else self.environment):
            for stmt in statements:
                try:
                    self._execute_statement(stmt)
                except LoxRuntimeError as e:
                    logger.debug("runtime error after %d statement(s): %s", executed, e.diagnostic.message)
                    return ExecutionResult(success=False, error=e, executed=executed)
                executed += 1

        return ExecutionResult(success=True, executed=executed)

    def evaluate(self, expr: Expr) -> Any:
        """Evaluate one expression in the current scope. Raises LoxRuntimeError."""
        return self._evaluate(expr)

    @contextmanager
    def _scope(self, environment: Environment) -> Iterator[Environment]:
        """Run the body with `environment` current, restoring the old one on any exit."""
        previous = self.environment
        self.environment = environment
        try:
            yield environment
        finally:
            self.environment = previous

    # =========================================================================
    # Statements
    # =========================================================================

    def _execute_statement(self, stmt: Stmt) -> None:
        """Execute a statement."""
        if isinstance(stmt, ExpressionStatement):
            self._evaluate(stmt.expression)
        elif isinstance(stmt, PrintStatement):
            self._execute_print(stmt)
        elif isinstance(stmt, VarDeclaration):
            self._execute_var(stmt)
        elif isinstance(stmt, Block):
            self._execute_block(stmt)
        else:
            raise TypeError(f"Unknown statement type: {type(stmt).__name__}")

    def _execute_print(self, stmt: PrintStatement) -> None:
        value = self._evaluate(stmt.expression)
        print(stringify(value), file=self.out if self.out is not None else sys.stdout)

    def _execute_var(self, stmt: VarDeclaration) -> None:
        """Declare a variable; a missing initializer means nil."""
        value = None
        if stmt.initializer is not None:
            value = self._evaluate(stmt.initializer)
        self.environment.define(stmt.name.lexeme, value)

    def _execute_block(self, block: Block) -> None:
        """Execute a block in a fresh child scope."""
        with self._scope(self.environment.child()) as scope:
            logger.debug("entered block scope at depth %d", scope.depth)
            for stmt in block.statements:
                self._execute_statement(stmt)

    # =========================================================================
    # Expressions
    # =========================================================================

    def _evaluate(self, expr: Expr) -> Any:
        """Evaluate an expression to produce a value."""
        if isinstance(expr, Literal):
            return expr.value
        elif isinstance(expr, Grouping):
            return self._evaluate(expr.expression)
        elif isinstance(expr, Unary):
            return self._eval_unary(expr)
        elif isinstance(expr, Binary):
            return self._eval_binary(expr)
        elif isinstance(expr, Variable):
            return self.environment.get(expr.name)
        elif isinstance(expr, Assign):
            return self._eval_assign(expr)
        else:
            raise TypeError(f"Unknown expression type: {type(expr).__name__}")

    def _eval_assign(self, expr: Assign) -> Any:
        value = self._evaluate(expr.value)
        self.environment.assign(expr.name, value)
        return value

    def _eval_unary(self, expr: Unary) -> Any:
        """Evaluate a unary operation."""
        right = self._evaluate(expr.right)

        if expr.operator.type == TokenType.MINUS:
            self._check_number_operand(expr.operator, right)
            return -right
        elif expr.operator.type == TokenType.BANG:
            return not is_truthy(right)
        else:
            raise TypeError(f"Unknown unary operator: {expr.operator.type}")

    def _eval_binary(self, expr: Binary) -> Any:
        """Evaluate a binary operation."""
        left = self._evaluate(expr.left)
        right = self._evaluate(expr.right)
        op = expr.operator

        # Equality works across all types and never fails
        if op.type == TokenType.EQUAL_EQUAL:
            return is_equal(left, right)
        elif op.type == TokenType.BANG_EQUAL:
            return not is_equal(left, right)

        # + is overloaded for strings
        if op.type == TokenType.PLUS:
            if is_number(left) and is_number(right):
                return left + right
            if isinstance(left, str) and isinstance(right, str):
                return left + right
            logger.debug("cannot add %s and %s", type_name(left), type_name(right))
            raise error_operand_type(op, "Operands must be two numbers or two strings.")

        self._check_number_operands(op, left, right)

        if op.type == TokenType.MINUS:
            return left - right
        elif op.type == TokenType.STAR:
            return left * right
        elif op.type == TokenType.SLASH:
            return _divide(left, right)
        elif op.type == TokenType.GREATER:
            return left > right
        elif op.type == TokenType.GREATER_EQUAL:
            return left >= right
        elif op.type == TokenType.LESS:
            return left < right
        elif op.type == TokenType.LESS_EQUAL:
            return left <= right
        else:
            raise TypeError(f"Unknown binary operator: {op.type}")

    def _check_number_operand(self, operator: Token, operand: Any) -> None:
        if not is_number(operand):
            raise error_operand_type(operator, "Operand must be a number.")

    def _check_number_operands(self, operator: Token, left: Any, right: Any) -> None:
        if not (is_number(left) and is_number(right)):
            raise error_operand_type(operator, "Operands must be numbers.")


# Convenience function for simple execution
def execute(statements: List[Stmt], environment: Optional[Environment] = None,
            out: Optional[TextIO] = None) -> ExecutionResult:
    """
    Execute statements against a fresh interpreter.

    This is a convenience wrapper around Interpreter.execute().
    """
    interpreter = Interpreter(out=out, global_scope=environment)
    return interpreter.execute(statements)
