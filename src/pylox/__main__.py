#!/usr/bin/env python3
"""
CLI for pylox.

Usage:
    python -m pylox run FILE.lox
    python -m pylox repl
    python -m pylox tokens FILE.lox
    python -m pylox ast FILE.lox

With no sub-command an interactive prompt is started.

Exit codes follow sysexits.h: 64 for bad usage, 65 when the source has
lexical or syntax errors, 66 when the file cannot be read, 70 when the
program stops on a runtime error.

Examples:
    # Run a script
    python -m pylox run examples/scopes.lox

    # Show how a script is tokenized and parsed
    python -m pylox tokens examples/scopes.lox
    python -m pylox ast examples/scopes.lox

    # Trace scope changes while running
    python -m pylox --log-level DEBUG run examples/scopes.lox
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .errors import DiagnosticCollector
from .lexer import tokenize
from .parser import parse_source
from .printer import print_ast
from .session import Session, EX_DATAERR, EX_NOINPUT, EX_OK, EX_USAGE

logger = logging.getLogger("pylox")

PROMPT = "> "


class LoxArgumentParser(argparse.ArgumentParser):
    """Argument parser that exits with EX_USAGE instead of 2."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(EX_USAGE, f"{self.prog}: error: {message}\n")


def read_source(path_str: str) -> Optional[str]:
    """Read a whole source file, or report why it could not be read."""
    source_path = Path(path_str)
    if not source_path.exists():
        print(f"Error: File not found: {source_path}", file=sys.stderr)
        return None
    try:
        return source_path.read_text()
    except OSError as e:
        print(f"Error: Could not read {source_path}: {e}", file=sys.stderr)
        return None


def cmd_run(args) -> int:
    """Run a script file."""
    source = read_source(args.file)
    if source is None:
        return EX_NOINPUT

    logger.info("running %s", args.file)
    session = Session()
    return session.run(source).exit_code


def cmd_repl(args) -> int:
    """Read-eval-print loop. Variables persist from one line to the next."""
    session = Session()

    while True:
        print(PROMPT, end="", flush=True)
        line = sys.stdin.readline()
        if not line:
            print()
            break
        session.run(line)
        # A mistake on one line should not end the session
        session.reset()

    return EX_OK


def cmd_tokens(args) -> int:
    """Print the tokens of a source file, one per line."""
    source = read_source(args.file)
    if source is None:
        return EX_NOINPUT

    collector = DiagnosticCollector(stream=sys.stderr)
    for index, token in enumerate(tokenize(source, collector), start=1):
        print(f"{index}: {token}")

    return EX_DATAERR if collector.has_errors else EX_OK


def cmd_ast(args) -> int:
    """Print each parsed statement of a source file in prefix form."""
    source = read_source(args.file)
    if source is None:
        return EX_NOINPUT

    collector = DiagnosticCollector(stream=sys.stderr)
    result = parse_source(source, collector)
    if result.has_errors:
        return EX_DATAERR

    if result.statements:
        print(print_ast(result.statements))
    return EX_OK


def main(argv: Optional[List[str]] = None) -> int:
    parser = LoxArgumentParser(
        prog='python -m pylox',
        description='pylox interpreter',
    )
    parser.add_argument('--log-level', default='WARNING',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Logging level for interpreter internals')

    subparsers = parser.add_subparsers(dest='action')

    # run command
    run_parser = subparsers.add_parser('run', help='Run a script')
    run_parser.add_argument('file', help='Source file')

    # repl command
    subparsers.add_parser('repl', help='Start an interactive prompt')

    # tokens command
    tokens_parser = subparsers.add_parser('tokens', help='Print the tokens of a script')
    tokens_parser.add_argument('file', help='Source file')

    # ast command
    ast_parser = subparsers.add_parser('ast', help='Print the syntax tree of a script')
    ast_parser.add_argument('file', help='Source file')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(name)s: %(levelname)s: %(message)s',
    )

    if args.action == 'run':
        return cmd_run(args)
    elif args.action == 'tokens':
        return cmd_tokens(args)
    elif args.action == 'ast':
        return cmd_ast(args)
    else:
        return cmd_repl(args)


if __name__ == '__main__':
    sys.exit(main())
