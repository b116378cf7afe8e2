"""
pylox - a small dynamically typed scripting language.

This package provides:
- Lexer: Tokenizes source code
- Parser: Builds an AST from tokens, recovering from syntax errors
- Interpreter: Walks the AST against a chain of scopes
- Session: Keeps one interpreter alive across runs (scripts and REPL lines)

Usage:
    from pylox import parse_source, Interpreter

    # Lexical and syntax errors both land in result.diagnostics
    result = parse_source('var a = 1; { var a = 2; print a; } print a;')
    if not result.has_errors:
        Interpreter().execute(result.statements)

    # Or in one step
    from pylox import run_source
    run_source('print 1 + 2;')
"""

from .tokens import (
    Token,
    TokenType,
    KEYWORDS,
    STATEMENT_KEYWORDS,
)

from .lexer import (
    Lexer,
    tokenize,
)

from .ast import (
    # Base
    AstNode,
    Expr,
    Stmt,
    # Expressions
    Literal,
    Grouping,
    Unary,
    Binary,
    Variable,
    Assign,
    # Statements
    ExpressionStatement,
    PrintStatement,
    VarDeclaration,
    Block,
    EXPRESSION_TYPES,
    STATEMENT_TYPES,
)

from .parser import (
    Parser,
    ParseResult,
    parse,
    parse_source,
)

from .printer import (
    AstPrinter,
    print_ast,
)

from .errors import (
    LoxError,
    LexerError,
    ParserError,
    LoxRuntimeError,
    OperandTypeError,
    UndefinedVariableError,
    Diagnostic,
    DiagnosticCollector,
    ErrorSeverity,
)

from .runtime import (
    Interpreter,
    ExecutionResult,
    execute,
    Environment,
    stringify,
)

from .session import (
    Session,
    RunResult,
    run_source,
)

__all__ = [
    # Tokens
    'Token',
    'TokenType',
    'KEYWORDS',
    'STATEMENT_KEYWORDS',

    # Lexer
    'Lexer',
    'tokenize',

    # AST nodes
    'AstNode',
    'Expr',
    'Stmt',
    'Literal',
    'Grouping',
    'Unary',
    'Binary',
    'Variable',
    'Assign',
    'ExpressionStatement',
    'PrintStatement',
    'VarDeclaration',
    'Block',
    'EXPRESSION_TYPES',
    'STATEMENT_TYPES',

    # Parser
    'Parser',
    'ParseResult',
    'parse',
    'parse_source',

    # Printer
    'AstPrinter',
    'print_ast',

    # Errors
    'LoxError',
    'LexerError',
    'ParserError',
    'LoxRuntimeError',
    'OperandTypeError',
    'UndefinedVariableError',
    'Diagnostic',
    'DiagnosticCollector',
    'ErrorSeverity',

    # Runtime
    'Interpreter',
    'ExecutionResult',
    'execute',
    'Environment',
    'stringify',

    # Session
    'Session',
    'RunResult',
    'run_source',
]
