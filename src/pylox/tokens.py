"""
Token types for the pylox lexer.

Token categories follow the error code ranges used in errors.py:
- E0xx: Lexer errors
- E1xx: Parser errors
- E2xx: Runtime errors
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Optional, Union


class TokenType(Enum):
    """All token types recognized by the lexer."""

    # --- Single-character tokens ---
    LEFT_PAREN = auto()         # (
    RIGHT_PAREN = auto()        # )
    LEFT_BRACE = auto()         # {
    RIGHT_BRACE = auto()        # }
    COMMA = auto()              # ,
    DOT = auto()                # .
    MINUS = auto()              # -
    PLUS = auto()               # +
    SEMICOLON = auto()          # ;
    SLASH = auto()              # /
    STAR = auto()               # *

    # --- One or two character tokens ---
    BANG = auto()               # !
    BANG_EQUAL = auto()         # !=
    EQUAL = auto()              # =
    EQUAL_EQUAL = auto()        # ==
    GREATER = auto()            # >
    GREATER_EQUAL = auto()      # >=
    LESS = auto()               # <
    LESS_EQUAL = auto()         # <=

    # --- Literals ---
    IDENTIFIER = auto()         # user-defined names
    STRING = auto()             # "hello"
    NUMBER = auto()             # 42, 3.14

    # --- Keywords ---
    AND = auto()
    CLASS = auto()
    ELSE = auto()
    FALSE = auto()
    FUN = auto()
    FOR = auto()
    IF = auto()
    NIL = auto()
    OR = auto()
    PRINT = auto()
    RETURN = auto()
    SUPER = auto()
    THIS = auto()
    TRUE = auto()
    VAR = auto()
    WHILE = auto()

    # --- Special ---
    EOF = auto()                # end of input


@dataclass(frozen=True)
class Token:
    """A single token from the lexer."""
    type: TokenType
    lexeme: str                             # The original source text
    literal: Optional[Union[float, str]]    # Decoded NUMBER/STRING value
    line: int                               # 1-indexed source line

    def __str__(self) -> str:
        if self.literal is not None:
            return f"{self.type.name} {self.lexeme} {self.literal!r}"
        return f"{self.type.name} {self.lexeme}"


# Keyword mapping - maps reserved word to token type
KEYWORDS: dict[str, TokenType] = {
    "and": TokenType.AND,
    "class": TokenType.CLASS,
    "else": TokenType.ELSE,
    "false": TokenType.FALSE,
    "for": TokenType.FOR,
    "fun": TokenType.FUN,
    "if": TokenType.IF,
    "nil": TokenType.NIL,
    "or": TokenType.OR,
    "print": TokenType.PRINT,
    "return": TokenType.RETURN,
    "super": TokenType.SUPER,
    "this": TokenType.THIS,
    "true": TokenType.TRUE,
    "var": TokenType.VAR,
    "while": TokenType.WHILE,
}


# Keywords that begin a statement; the parser resynchronizes in front of these
STATEMENT_KEYWORDS: frozenset[TokenType] = frozenset({
    TokenType.CLASS,
    TokenType.FUN,
    TokenType.VAR,
    TokenType.FOR,
    TokenType.IF,
    TokenType.WHILE,
    TokenType.PRINT,
    TokenType.RETURN,
})


def starts_statement(token_type: TokenType) -> bool:
    """Check if a token type can begin a new statement."""
    return token_type in STATEMENT_KEYWORDS
