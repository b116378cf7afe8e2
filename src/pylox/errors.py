"""
Lox-specific exceptions and error reporting.

Error code ranges:
- E0xx: Lexer errors
- E1xx: Parser errors
- E2xx: Runtime errors
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, TextIO
from .tokens import Token, TokenType


class ErrorSeverity(Enum):
    """Severity levels for diagnostics."""
    ERROR = "error"
    RUNTIME = "runtime"


@dataclass
class Diagnostic:
    """A single diagnostic message."""
    code: str                       # E001, E101, etc.
    message: str                    # Human-readable message
    line: int
    where: str = ""                 # "", " at end" or " at 'lexeme'"
    severity: ErrorSeverity = ErrorSeverity.ERROR

    def format(self) -> str:
        """Format the diagnostic for display."""
        if self.severity == ErrorSeverity.RUNTIME:
            return f"{self.message}\n[line {self.line}]"
        return f"[line {self.line}] Error{self.where}: {self.message}"


def token_location(token: Token) -> str:
    """Describe where a token sits for an error message."""
    if token.type == TokenType.EOF:
        return " at end"
    return f" at '{token.lexeme}'"


class LoxError(Exception):
    """Base exception for Lox errors."""

    def __init__(self, diagnostic: Diagnostic):
        self.diagnostic = diagnostic
        super().__init__(diagnostic.message)

    @property
    def line(self) -> int:
        return self.diagnostic.line

    def __str__(self) -> str:
        return self.diagnostic.format()


class LexerError(LoxError):
    """Error during lexical analysis (E0xx)."""
    pass


class ParserError(LoxError):
    """Error during parsing (E1xx)."""

    def __init__(self, diagnostic: Diagnostic, token: Token):
        self.token = token
        super().__init__(diagnostic)


class LoxRuntimeError(LoxError):
    """Error during evaluation (E2xx), tied to the token that caused it."""

    def __init__(self, diagnostic: Diagnostic, token: Token):
        self.token = token
        super().__init__(diagnostic)


class OperandTypeError(LoxRuntimeError):
    """An operator was applied to operands of the wrong type."""
    pass


class UndefinedVariableError(LoxRuntimeError):
    """A variable was read or assigned without being declared."""
    pass


# --- Lexer error codes ---

def error_unexpected_character(line: int) -> LexerError:
    """E001: Unexpected character."""
    diag = Diagnostic(
        code="E001",
        message="Unexpected character.",
        line=line,
    )
    return LexerError(diag)


def error_unterminated_string(line: int) -> LexerError:
    """E002: Unterminated string literal."""
    diag = Diagnostic(
        code="E002",
        message="Unterminated string.",
        line=line,
    )
    return LexerError(diag)


# --- Parser error codes ---

def error_unexpected_token(token: Token, message: str) -> ParserError:
    """E101/E102: Unexpected token, or unexpected end of input."""
    diag = Diagnostic(
        code="E102" if token.type == TokenType.EOF else "E101",
        message=message,
        line=token.line,
        where=token_location(token),
    )
    return ParserError(diag, token)


def error_invalid_assignment_target(equals: Token) -> ParserError:
    """E103: Left-hand side of '=' is not a variable."""
    diag = Diagnostic(
        code="E103",
        message="Invalid assignment target.",
        line=equals.line,
        where=token_location(equals),
    )
    return ParserError(diag, equals)


# --- Runtime error codes ---

def error_operand_type(operator: Token, message: str) -> OperandTypeError:
    """E201: Operand type mismatch."""
    diag = Diagnostic(
        code="E201",
        message=message,
        line=operator.line,
        severity=ErrorSeverity.RUNTIME,
    )
    return OperandTypeError(diag, operator)


def error_undefined_variable(name: Token) -> UndefinedVariableError:
    """E202: Undefined variable."""
    diag = Diagnostic(
        code="E202",
        message=f"Undefined variable '{name.lexeme}'.",
        line=name.line,
        severity=ErrorSeverity.RUNTIME,
    )
    return UndefinedVariableError(diag, name)


class DiagnosticCollector:
    """
    Collects diagnostics during a run.

    When a stream is given, each diagnostic is also written to it as soon as
    it is added, so errors surface in the order they are found.
    """

    def __init__(self, stream: Optional[TextIO] = None):
        self.diagnostics: List[Diagnostic] = []
        self.stream = stream

    def add(self, diagnostic: Diagnostic) -> None:
        """Add a diagnostic."""
        self.diagnostics.append(diagnostic)
        if self.stream is not None:
            print(diagnostic.format(), file=self.stream)

    def add_error(self, error: LoxError) -> None:
        """Add an error exception as a diagnostic."""
        self.add(error.diagnostic)

    @property
    def errors(self) -> List[Diagnostic]:
        """Lexical and syntax errors, in the order they were reported."""
        return [d for d in self.diagnostics if d.severity == ErrorSeverity.ERROR]

    @property
    def error_count(self) -> int:
        return sum(1 for d in self.diagnostics if d.severity == ErrorSeverity.ERROR)

    @property
    def runtime_error_count(self) -> int:
        return sum(1 for d in self.diagnostics if d.severity == ErrorSeverity.RUNTIME)

    @property
    def has_errors(self) -> bool:
        """True when a lexical or syntax error was reported."""
        return self.error_count > 0

    @property
    def has_runtime_errors(self) -> bool:
        return self.runtime_error_count > 0

    def reset(self) -> None:
        """Forget everything collected so far (once per REPL line)."""
        self.diagnostics.clear()

    def format_all(self) -> str:
        """Format all diagnostics for display."""
        return "\n".join(d.format() for d in self.diagnostics)

    def __len__(self) -> int:
        return len(self.diagnostics)

    def __iter__(self):
        return iter(self.diagnostics)
