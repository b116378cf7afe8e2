"""
Session control for pylox.

A Session owns the state that must persist across runs: one Interpreter and
its global scope. A script is one run; at the REPL every line is a run, and
reset() is called between lines so one bad line does not poison the rest.
"""

import logging
import sys
from dataclasses import dataclass, field
from typing import List, Optional, TextIO

from .ast import Stmt
from .errors import Diagnostic, DiagnosticCollector
from .lexer import tokenize
from .parser import Parser
from .runtime.interpreter import ExecutionResult, Interpreter
from .tokens import Token

logger = logging.getLogger(__name__)

# sysexits.h codes
EX_OK = 0
EX_USAGE = 64
EX_DATAERR = 65
EX_NOINPUT = 66
EX_SOFTWARE = 70


@dataclass
class RunResult:
    """Everything one pass over a piece of source produced."""
    tokens: List[Token] = field(default_factory=list)
    statements: List[Stmt] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    execution: Optional[ExecutionResult] = None
    had_error: bool = False  # a lexical or syntax error kept the program from running

    @property
    def had_runtime_error(self) -> bool:
        return self.execution is not None and not self.execution.success

    @property
    def exit_code(self) -> int:
        if self.had_error:
            return EX_DATAERR
        if self.had_runtime_error:
            return EX_SOFTWARE
        return EX_OK


class Session:
    """
    Governs a pylox session.

    Usage:
        session = Session()
        session.run("var a = 1;")
        session.reset()
        session.run("print a;")  # prints 1
    """

    def __init__(self, out: Optional[TextIO] = None, err: Optional[TextIO] = None):
        self.out = out
        self.err = err if err is not None else sys.stderr
        self.diagnostics = DiagnosticCollector(stream=self.err)
        self.interpreter = Interpreter(out=out)
        self.runs = 0

    @property
    def globals(self):
        return self.interpreter.globals

    @property
    def had_error(self) -> bool:
        return self.diagnostics.has_errors

    @property
    def had_runtime_error(self) -> bool:
        return self.diagnostics.has_runtime_errors

    def reset(self) -> None:
        """Clear the error flags. Global variables are kept."""
        self.diagnostics.reset()

    def run(self, source: str) -> RunResult:
        """
        Scan, parse and, if that went cleanly, execute source.

        Lexical and syntax errors are all reported and nothing runs. A
        runtime error is reported once and stops the remaining statements.
        """
        self.runs += 1
        first = len(self.diagnostics)

        tokens = tokenize(source, self.diagnostics)
        parsed = Parser(tokens, self.diagnostics).parse()
        result = RunResult(tokens=tokens, statements=parsed.statements)

        if self.diagnostics.has_errors:
            result.had_error = True
            result.diagnostics = self.diagnostics.diagnostics[first:]
            logger.debug("run %d: not executing, %d error(s)", self.runs, len(result.diagnostics))
            return result

        result.execution = self.interpreter.execute(parsed.statements)
        if result.execution.error is not None:
            self.diagnostics.add_error(result.execution.error)

        result.diagnostics = self.diagnostics.diagnostics[first:]
        logger.debug("run %d: executed %d statement(s)", self.runs, result.execution.executed)
        return result


def run_source(source: str, out: Optional[TextIO] = None, err: Optional[TextIO] = None) -> RunResult:
    """
    Run source in a fresh session.

    This is the simplest way to execute a program:

        from pylox import run_source

        result = run_source('var a = 1; { var a = 2; print a; } print a;')
        assert result.exit_code == 0
    """
    return Session(out=out, err=err).run(source)
