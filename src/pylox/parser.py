"""
Recursive descent parser for pylox.

Converts a token stream into a list of statement nodes.

Grammar, lowest precedence first:

    program     → declaration* EOF
    declaration → varDecl | statement
    varDecl     → "var" IDENTIFIER ( "=" expression )? ";"
    statement   → printStmt | block | exprStmt
    printStmt   → "print" expression ";"
    block       → "{" declaration* "}"
    exprStmt    → expression ";"
    expression  → assignment
    assignment  → IDENTIFIER "=" assignment | equality
    equality    → comparison ( ( "!=" | "==" ) comparison )*
    comparison  → term ( ( ">" | ">=" | "<" | "<=" ) term )*
    term        → factor ( ( "-" | "+" ) factor )*
    factor      → unary ( ( "/" | "*" ) unary )*
    unary       → ( "!" | "-" ) unary | primary
    primary     → NUMBER | STRING | "true" | "false" | "nil"
                | IDENTIFIER | "(" expression ")"
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .tokens import Token, TokenType, starts_statement
from .lexer import tokenize
from .ast import (
    Expr, Literal, Grouping, Unary, Binary, Variable, Assign,
    Stmt, ExpressionStatement, PrintStatement, VarDeclaration, Block,
)
from .errors import (
    Diagnostic,
    DiagnosticCollector,
    ParserError,
    error_unexpected_token,
    error_invalid_assignment_target,
)

logger = logging.getLogger(__name__)


@dataclass
class ParseResult:
    """
    Statements that parsed cleanly, plus the errors reported on the way.

    When the lexer and parser share a collector, lexical errors are included
    too, so has_errors alone decides whether the program may run.
    """
    statements: List[Stmt] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        """A program with lexical or syntax errors must not be executed."""
        return len(self.diagnostics) > 0


class Parser:
    """
    Recursive descent parser with panic-mode error recovery.

    Usage:
        collector = DiagnosticCollector()
        tokens = tokenize(source, collector)
        result = Parser(tokens, collector).parse()
        if not result.has_errors:
            interpreter.execute(result.statements)

    Each left-associative binary level is a loop that folds the next
    operator/operand pair into the expression built so far. Unary and
    assignment are right-associative and recurse instead.
    """

    EQUALITY_OPERATORS = (TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL)
    COMPARISON_OPERATORS = (
        TokenType.GREATER, TokenType.GREATER_EQUAL,
        TokenType.LESS, TokenType.LESS_EQUAL,
    )
    TERM_OPERATORS = (TokenType.MINUS, TokenType.PLUS)
    FACTOR_OPERATORS = (TokenType.SLASH, TokenType.STAR)
    UNARY_OPERATORS = (TokenType.BANG, TokenType.MINUS)

    def __init__(self, tokens: List[Token], collector: Optional[DiagnosticCollector] = None):
        self.tokens = tokens
        self.pos = 0
        self.collector = collector if collector is not None else DiagnosticCollector()

    # =========================================================================
    # Token Navigation
    # =========================================================================

    def _current(self) -> Token:
        """Get current token."""
        return self.tokens[self.pos]

    def _previous(self) -> Token:
        """Get the most recently consumed token."""
        return self.tokens[self.pos - 1]

    def _is_at_end(self) -> bool:
        """Check if at end of tokens."""
        return self._current().type == TokenType.EOF

    def _check(self, token_type: TokenType) -> bool:
        """Check if current token is of given type."""
        if self._is_at_end():
            return False
        return self._current().type == token_type

    def _advance(self) -> Token:
        """Consume and return current token."""
        if not self._is_at_end():
            self.pos += 1
        return self._previous()

    def _match(self, *token_types: TokenType) -> Optional[Token]:
        """Consume token if it matches any of the given types."""
        for token_type in token_types:
            if self._check(token_type):
                return self._advance()
        return None

    def _consume(self, token_type: TokenType, message: str) -> Token:
        """Consume token of expected type, or raise error."""
        if self._check(token_type):
            return self._advance()
        raise self._error(self._current(), message)

    def _error(self, token: Token, message: str) -> ParserError:
        """Report a syntax error and return it for the caller to raise."""
        error = error_unexpected_token(token, message)
        self._report(error)
        return error

    def _report(self, error: ParserError) -> None:
        self.collector.add_error(error)

    def _synchronize(self) -> None:
        """
        Discard tokens until the start of the next statement.

        Stops just after a ';' or just before a keyword that begins a
        statement, so later errors are reported without cascading.
        """
        skipped_from = self._current()
        self._advance()

        while not self._is_at_end():
            if self._previous().type == TokenType.SEMICOLON:
                break
            if starts_statement(self._current().type):
                break
            self._advance()

        logger.debug(
            "resynchronized from line %d to %r on line %d",
            skipped_from.line, self._current().lexeme, self._current().line,
        )

    # =========================================================================
    # Statement Parsing
    # =========================================================================

    def _parse_declaration(self) -> Optional[Stmt]:
        """Parse one declaration, recovering in place from a syntax error."""
        try:
            if self._match(TokenType.VAR):
                return self._parse_var_declaration()
            return self._parse_statement()
        except ParserError:
            self._synchronize()
            return None

    def _parse_var_declaration(self) -> VarDeclaration:
        """Parse 'var' IDENTIFIER ('=' expression)? ';' after the 'var'."""
        name = self._consume(TokenType.IDENTIFIER, "Expect variable name.")

        initializer = None
        if self._match(TokenType.EQUAL):
            initializer = self._parse_expression()

        self._consume(TokenType.SEMICOLON, "Expect ';' after variable declaration.")
        return VarDeclaration(name=name, initializer=initializer)

    def _parse_statement(self) -> Stmt:
        """Parse a statement, dispatching on the current token."""
        if self._match(TokenType.PRINT):
            return self._parse_print_statement()
        if self._match(TokenType.LEFT_BRACE):
            return Block(statements=tuple(self._parse_block()))
        return self._parse_expression_statement()

    def _parse_print_statement(self) -> PrintStatement:
        value = self._parse_expression()
        self._consume(TokenType.SEMICOLON, "Expect ';' after value.")
        return PrintStatement(expression=value)

    def _parse_block(self) -> List[Stmt]:
        """Parse declarations up to the closing brace. '{' is already consumed."""
        statements = []

        while not self._check(TokenType.RIGHT_BRACE) and not self._is_at_end():
            stmt = self._parse_declaration()
            if stmt is not None:
                statements.append(stmt)

        self._consume(TokenType.RIGHT_BRACE, "Expect '}' after block.")
        return statements

    def _parse_expression_statement(self) -> ExpressionStatement:
        expr = self._parse_expression()
        self._consume(TokenType.SEMICOLON, "Expect ';' after expression.")
        return ExpressionStatement(expression=expr)

    # =========================================================================
    # Expression Parsing
    # =========================================================================

    def _parse_expression(self) -> Expr:
        return self._parse_assignment()

    def _parse_assignment(self) -> Expr:
        """
        Parse an assignment or fall through to equality.

        The target is parsed as an ordinary expression first; only once '='
        turns up is it checked to be a Variable. A bad target is reported
        but does not unwind, since the parser is not confused about where
        it is.
        """
        expr = self._parse_equality()

        equals = self._match(TokenType.EQUAL)
        if equals:
            value = self._parse_assignment()

            if isinstance(expr, Variable):
                return Assign(name=expr.name, value=value)

            self._report(error_invalid_assignment_target(equals))

        return expr

    def _parse_binary_level(self, operators, operand) -> Expr:
        """Parse one left-associative level: operand (op operand)*."""
        expr = operand()

        while True:
            operator = self._match(*operators)
            if operator is None:
                break
            right = operand()
            expr = Binary(left=expr, operator=operator, right=right)

        return expr

    def _parse_equality(self) -> Expr:
        return self._parse_binary_level(self.EQUALITY_OPERATORS, self._parse_comparison)

    def _parse_comparison(self) -> Expr:
        return self._parse_binary_level(self.COMPARISON_OPERATORS, self._parse_term)

    def _parse_term(self) -> Expr:
        return self._parse_binary_level(self.TERM_OPERATORS, self._parse_factor)

    def _parse_factor(self) -> Expr:
        return self._parse_binary_level(self.FACTOR_OPERATORS, self._parse_unary)

    def _parse_unary(self) -> Expr:
        """Parse unary expressions (!, -)."""
        operator = self._match(*self.UNARY_OPERATORS)
        if operator:
            right = self._parse_unary()
            return Unary(operator=operator, right=right)

        return self._parse_primary()

    def _parse_primary(self) -> Expr:
        """Parse primary expressions (literals, identifiers, grouping)."""
        if self._match(TokenType.FALSE):
            return Literal(value=False)
        if self._match(TokenType.TRUE):
            return Literal(value=True)
        if self._match(TokenType.NIL):
            return Literal(value=None)

        token = self._match(TokenType.NUMBER, TokenType.STRING)
        if token:
            return Literal(value=token.literal)

        token = self._match(TokenType.IDENTIFIER)
        if token:
            return Variable(name=token)

        if self._match(TokenType.LEFT_PAREN):
            expr = self._parse_expression()
            self._consume(TokenType.RIGHT_PAREN, "Expect ')' after expression.")
            return Grouping(expression=expr)

        raise self._error(self._current(), "Expect expression.")

    # =========================================================================
    # Entry Points
    # =========================================================================

    def parse(self) -> ParseResult:
        """Parse the whole token stream as a program."""
        statements = []

        while not self._is_at_end():
            stmt = self._parse_declaration()
            if stmt is not None:
                statements.append(stmt)

        return ParseResult(statements=statements, diagnostics=self.collector.errors)

    def parse_expression(self) -> Optional[Expr]:
        """
        Parse a single expression that must use up all the input.

        Returns None if it was malformed or followed by stray tokens.
        """
        try:
            expr = self._parse_expression()
            if not self._is_at_end():
                raise self._error(self._current(), "Expect end of expression.")
            return expr
        except ParserError:
            return None


def parse(tokens: List[Token], collector: Optional[DiagnosticCollector] = None) -> ParseResult:
    """
    Convenience function to parse tokens into statements.

    Args:
        tokens: List of tokens from the lexer
        collector: Optional collector that receives syntax errors

    Returns:
        ParseResult with the statements and any syntax errors
    """
    parser = Parser(tokens, collector)
    return parser.parse()


def parse_source(source: str, collector: Optional[DiagnosticCollector] = None) -> ParseResult:
    """
    Scan and parse source with one collector for both stages.

    The result's has_errors covers lexical errors as well as syntax errors.

    Args:
        source: Program text
        collector: Optional collector that receives every error

    Returns:
        ParseResult with the statements and all errors reported
    """
    if collector is None:
        collector = DiagnosticCollector()
    tokens = tokenize(source, collector)
    return Parser(tokens, collector).parse()
