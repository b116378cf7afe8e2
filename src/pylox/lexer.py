"""
Lexer for pylox.

Converts source text into a stream of tokens for the parser.
Supports:
- Single and double character operators (one character of lookahead)
- Line comments (//)
- String literals, which may span lines
- Number literals (digits with an optional fractional part)
- Identifiers and reserved words

Lexical errors never stop the scan. Each one is handed to the diagnostic
collector and scanning resumes with the next character, so one pass can
surface every bad character in the source.
"""

import logging
from typing import Iterator, List, Optional

from .tokens import Token, TokenType, KEYWORDS
from .errors import (
    DiagnosticCollector,
    error_unexpected_character,
    error_unterminated_string,
)

logger = logging.getLogger(__name__)


SINGLE_CHAR_TOKENS = {
    '(': TokenType.LEFT_PAREN,
    ')': TokenType.RIGHT_PAREN,
    '{': TokenType.LEFT_BRACE,
    '}': TokenType.RIGHT_BRACE,
    ',': TokenType.COMMA,
    '.': TokenType.DOT,
    '-': TokenType.MINUS,
    '+': TokenType.PLUS,
    ';': TokenType.SEMICOLON,
    '*': TokenType.STAR,
}

# Operators that change meaning when followed by '='
EQUAL_SUFFIX_TOKENS = {
    '!': (TokenType.BANG, TokenType.BANG_EQUAL),
    '=': (TokenType.EQUAL, TokenType.EQUAL_EQUAL),
    '<': (TokenType.LESS, TokenType.LESS_EQUAL),
    '>': (TokenType.GREATER, TokenType.GREATER_EQUAL),
}


def _is_digit(ch: str) -> bool:
    return '0' <= ch <= '9'


def _is_alpha(ch: str) -> bool:
    return ('a' <= ch <= 'z') or ('A' <= ch <= 'Z') or ch == '_'


def _is_alphanumeric(ch: str) -> bool:
    return _is_alpha(ch) or _is_digit(ch)


class Lexer:
    """
    Tokenizer for pylox source.

    Usage:
        lexer = Lexer(source_code)
        tokens = lexer.tokenize()

    Or for streaming:
        lexer = Lexer(source_code)
        for token in lexer:
            process(token)
    """

    def __init__(self, source: str, collector: Optional[DiagnosticCollector] = None):
        self.source = source
        self.collector = collector if collector is not None else DiagnosticCollector()
        self.start = 0          # Start of the lexeme being scanned
        self.pos = 0            # Current position in source
        self.line = 1           # Current line (1-indexed)

    def _peek(self, offset: int = 0) -> str:
        """Look at character at current position + offset without consuming."""
        idx = self.pos + offset
        if idx >= len(self.source):
            return '\0'
        return self.source[idx]

    def _advance(self) -> str:
        """Consume and return current character."""
        ch = self.source[self.pos]
        self.pos += 1
        return ch

    def _match(self, expected: str) -> bool:
        """Consume character if it matches expected."""
        if self._is_at_end() or self.source[self.pos] != expected:
            return False
        self.pos += 1
        return True

    def _is_at_end(self) -> bool:
        """Check if we've reached end of source."""
        return self.pos >= len(self.source)

    def _make_token(self, token_type: TokenType, literal=None) -> Token:
        """Create a token for the current lexeme."""
        return Token(token_type, self.source[self.start:self.pos], literal, self.line)

    def _skip_comment(self) -> None:
        """Skip a line comment; the newline is left for the line counter."""
        while self._peek() != '\n' and not self._is_at_end():
            self._advance()

    def _scan_string(self) -> Optional[Token]:
        """Scan a string literal. The opening quote is already consumed."""
        while self._peek() != '"' and not self._is_at_end():
            if self._peek() == '\n':
                self.line += 1
            self._advance()

        if self._is_at_end():
            self.collector.add_error(error_unterminated_string(self.line))
            return None

        self._advance()  # closing quote
        value = self.source[self.start + 1:self.pos - 1]
        return self._make_token(TokenType.STRING, value)

    def _scan_number(self) -> Token:
        """Scan a numeric literal. All numbers are floats."""
        while _is_digit(self._peek()):
            self._advance()

        # A fractional part needs a digit after the '.'
        if self._peek() == '.' and _is_digit(self._peek(1)):
            self._advance()
            while _is_digit(self._peek()):
                self._advance()

        return self._make_token(TokenType.NUMBER, float(self.source[self.start:self.pos]))

    def _scan_identifier_or_keyword(self) -> Token:
        """Scan an identifier or reserved word."""
        while _is_alphanumeric(self._peek()):
            self._advance()

        lexeme = self.source[self.start:self.pos]
        return self._make_token(KEYWORDS.get(lexeme, TokenType.IDENTIFIER))

    def _scan_token(self) -> Optional[Token]:
        """Scan the lexeme starting at self.start. Returns None for skipped input."""
        ch = self._advance()

        if ch in SINGLE_CHAR_TOKENS:
            return self._make_token(SINGLE_CHAR_TOKENS[ch])

        if ch in EQUAL_SUFFIX_TOKENS:
            single, double = EQUAL_SUFFIX_TOKENS[ch]
            return self._make_token(double if self._match('=') else single)

        if ch == '/':
            if self._match('/'):
                self._skip_comment()
                return None
            return self._make_token(TokenType.SLASH)

        if ch in ' \r\t':
            return None

        if ch == '\n':
            self.line += 1
            return None

        if ch == '"':
            return self._scan_string()

        if _is_digit(ch):
            return self._scan_number()

        if _is_alpha(ch):
            return self._scan_identifier_or_keyword()

        logger.debug("unexpected character %r on line %d", ch, self.line)
        self.collector.add_error(error_unexpected_character(self.line))
        return None

    def __iter__(self) -> Iterator[Token]:
        """Iterate over tokens, ending with exactly one EOF token."""
        while not self._is_at_end():
            self.start = self.pos
            token = self._scan_token()
            if token is not None:
                yield token
        yield Token(TokenType.EOF, "", None, self.line)

    def tokenize(self) -> List[Token]:
        """Tokenize the entire source, returning a list of tokens."""
        tokens = list(self)
        logger.debug("scanned %d token(s) over %d line(s)", len(tokens), self.line)
        return tokens


def tokenize(source: str, collector: Optional[DiagnosticCollector] = None) -> List[Token]:
    """
    Convenience function to tokenize source code.

    Args:
        source: The source code to tokenize
        collector: Optional collector that receives lexical errors

    Returns:
        List of tokens, always terminated by a single EOF token
    """
    lexer = Lexer(source, collector)
    return lexer.tokenize()
