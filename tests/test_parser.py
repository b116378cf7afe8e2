"""
Unit tests for the pylox parser.
"""

import pytest
from pylox import (
    tokenize, parse, parse_source, Parser, ParseResult, TokenType, DiagnosticCollector,
    AstPrinter, print_ast,
    # AST nodes
    Literal, Grouping, Unary, Binary, Variable, Assign,
    ExpressionStatement, PrintStatement, VarDeclaration, Block,
)


def parse_expr(source: str):
    """Helper to parse a single expression."""
    return Parser(tokenize(source)).parse_expression()


def render(source: str) -> str:
    """Helper to render a single expression in prefix form."""
    return AstPrinter().print(parse_expr(source))


def messages(result: ParseResult):
    return [d.format() for d in result.diagnostics]


class TestStatements:
    """Test statement parsing."""

    def test_empty_program(self):
        """Empty source parses to no statements."""
        result = parse_source("")
        assert result.statements == []
        assert not result.has_errors

    def test_print_statement(self):
        """print statement wraps its expression."""
        result = parse_source("print 1;")
        stmt = result.statements[0]
        assert isinstance(stmt, PrintStatement)
        assert stmt.expression == Literal(1.0)

    def test_expression_statement(self):
        """Bare expression followed by a semicolon."""
        result = parse_source("a;")
        stmt = result.statements[0]
        assert isinstance(stmt, ExpressionStatement)
        assert isinstance(stmt.expression, Variable)
        assert stmt.expression.name.lexeme == "a"

    def test_var_with_initializer(self):
        """var declaration with an initializer."""
        result = parse_source("var x = 42;")
        stmt = result.statements[0]
        assert isinstance(stmt, VarDeclaration)
        assert stmt.name.lexeme == "x"
        assert stmt.initializer == Literal(42.0)

    def test_var_without_initializer(self):
        """var declaration without an initializer."""
        stmt = parse_source("var x;").statements[0]
        assert isinstance(stmt, VarDeclaration)
        assert stmt.initializer is None

    def test_block(self):
        """Blocks hold their own declarations."""
        stmt = parse_source("{ var a = 1; print a; }").statements[0]
        assert isinstance(stmt, Block)
        assert len(stmt.statements) == 2
        assert isinstance(stmt.statements[0], VarDeclaration)
        assert isinstance(stmt.statements[1], PrintStatement)

    def test_empty_block(self):
        """An empty block is allowed."""
        stmt = parse_source("{}").statements[0]
        assert isinstance(stmt, Block)
        assert stmt.statements == ()

    def test_nested_blocks(self):
        """Blocks nest."""
        result = parse_source("{ { print 1; } }")
        assert print_ast(result.statements) == "(block (block (print 1)))"

    def test_statements_in_source_order(self):
        """Top-level statements keep their order."""
        result = parse_source("var a = 1;\nprint a;\na = 2;")
        assert print_ast(result.statements) == "(var a = 1)\n(print a)\n(; (= a 2))"


class TestExpressions:
    """Test expression parsing."""

    def test_literals(self):
        """Literal keywords and values."""
        assert parse_expr("true") == Literal(True)
        assert parse_expr("false") == Literal(False)
        assert parse_expr("nil") == Literal(None)
        assert parse_expr('"hi"') == Literal("hi")
        assert parse_expr("1.5") == Literal(1.5)

    def test_grouping(self):
        """Parentheses produce a Grouping node."""
        expr = parse_expr("(1)")
        assert isinstance(expr, Grouping)
        assert expr.expression == Literal(1.0)

    def test_unary(self):
        """Unary minus."""
        expr = parse_expr("-x")
        assert isinstance(expr, Unary)
        assert expr.operator.type == TokenType.MINUS
        assert isinstance(expr.right, Variable)

    def test_assignment(self):
        """Assignment to a variable."""
        expr = parse_expr("a = 1")
        assert isinstance(expr, Assign)
        assert expr.name.lexeme == "a"
        assert expr.value == Literal(1.0)

    def test_precedence_example(self):
        """Unary binds tighter than factor; grouping is kept."""
        assert render("-123 * (45.67)") == "(* (- 123) (group 45.67))"

    def test_factor_over_term(self):
        """* binds tighter than +."""
        assert render("1 + 2 * 3") == "(+ 1 (* 2 3))"

    def test_term_over_comparison(self):
        """+ binds tighter than <."""
        assert render("1 + 2 < 4") == "(< (+ 1 2) 4)"

    def test_comparison_over_equality(self):
        """< binds tighter than ==."""
        assert render("1 < 2 == true") == "(== (< 1 2) true)"

    def test_binary_left_associative(self):
        """Binary operators associate to the left."""
        assert render("1 - 2 - 3") == "(- (- 1 2) 3)"
        assert render("8 / 4 / 2") == "(/ (/ 8 4) 2)"

    def test_unary_right_associative(self):
        """Unary operators nest to the right."""
        assert render("!!true") == "(! (! true))"
        assert render("- -1") == "(- (- 1))"

    def test_assignment_right_associative(self):
        """a = b = c assigns c to b, then to a."""
        assert render("a = b = c") == "(= a (= b c))"

    def test_grouping_overrides_precedence(self):
        """Parentheses change evaluation order."""
        assert render("(1 + 2) * 3") == "(* (group (+ 1 2)) 3)"

    def test_binary_node_fields(self):
        """Binary nodes keep the operator token."""
        expr = parse_expr("a == b")
        assert isinstance(expr, Binary)
        assert expr.operator.type == TokenType.EQUAL_EQUAL
        assert expr.operator.lexeme == "=="


class TestParseErrors:
    """Test syntax error reporting."""

    def test_missing_expression(self):
        """A missing operand is reported at the offending token."""
        result = parse_source("print 1 +;")
        assert result.has_errors
        assert messages(result) == ["[line 1] Error at ';': Expect expression."]
        assert result.diagnostics[0].code == "E101"

    def test_missing_paren_at_end(self):
        """Running out of input is reported 'at end'."""
        result = parse_source("(1 + 2")
        assert messages(result) == ["[line 1] Error at end: Expect ')' after expression."]
        assert result.diagnostics[0].code == "E102"

    def test_missing_semicolon_after_value(self):
        """print needs a terminating semicolon."""
        result = parse_source("print 1")
        assert messages(result) == ["[line 1] Error at end: Expect ';' after value."]

    def test_missing_semicolon_after_expression(self):
        """Expression statements need a terminating semicolon."""
        result = parse_source("a = 1 b;")
        assert messages(result) == ["[line 1] Error at 'b': Expect ';' after expression."]

    def test_missing_variable_name(self):
        """var must be followed by a name."""
        result = parse_source("var = 1;")
        assert messages(result) == ["[line 1] Error at '=': Expect variable name."]

    def test_missing_semicolon_after_declaration(self):
        """var declarations need a terminating semicolon."""
        result = parse_source("var a = 1")
        assert messages(result) == [
            "[line 1] Error at end: Expect ';' after variable declaration.",
        ]

    def test_unclosed_block(self):
        """A block must be closed."""
        result = parse_source("{ print 1;")
        assert messages(result) == ["[line 1] Error at end: Expect '}' after block."]

    def test_invalid_assignment_target(self):
        """Assigning to a non-variable is reported without unwinding."""
        result = parse_source("a + b = c;")
        assert messages(result) == ["[line 1] Error at '=': Invalid assignment target."]
        assert result.diagnostics[0].code == "E103"
        # Parsing carried on, so the statement itself is intact
        assert len(result.statements) == 1
        assert isinstance(result.statements[0].expression, Binary)

    def test_grouping_is_not_assignable(self):
        """A parenthesised name is not an assignment target."""
        result = parse_source("(a) = 1;")
        assert messages(result) == ["[line 1] Error at '=': Invalid assignment target."]

    def test_error_line_numbers(self):
        """Errors carry the line of the offending token."""
        result = parse_source("print 1;\n\nprint ;")
        assert messages(result) == ["[line 3] Error at ';': Expect expression."]

    def test_errors_go_to_collector(self):
        """A shared collector sees syntax errors too."""
        collector = DiagnosticCollector()
        parse(tokenize("print ;"), collector)
        assert collector.error_count == 1

    def test_parse_expression_returns_none_on_error(self):
        """parse_expression reports and gives up on malformed input."""
        collector = DiagnosticCollector()
        parser = Parser(tokenize("1 +"), collector)
        assert parser.parse_expression() is None
        assert collector.diagnostics[0].message == "Expect expression."

    def test_parse_expression_rejects_trailing_tokens(self):
        """Leftover input after a complete expression is an error."""
        collector = DiagnosticCollector()
        parser = Parser(tokenize("1 + 2 )"), collector)
        assert parser.parse_expression() is None
        assert [d.format() for d in collector] == [
            "[line 1] Error at ')': Expect end of expression.",
        ]

    def test_lexical_errors_block_execution(self):
        """A bad character counts as an error even though the parse succeeds."""
        result = parse_source('print "a" @;')
        assert result.has_errors
        assert messages(result) == ["[line 1] Error: Unexpected character."]
        assert len(result.statements) == 1

    def test_shared_collector_carries_lexical_errors(self):
        """Lexer and parser errors reach the result through one collector."""
        collector = DiagnosticCollector()
        result = parse(tokenize("@ print ;", collector), collector)
        assert messages(result) == [
            "[line 1] Error: Unexpected character.",
            "[line 1] Error at ';': Expect expression.",
        ]


class TestErrorRecovery:
    """Test panic-mode synchronization."""

    def test_multiple_errors_reported(self):
        """Independent errors are all reported in one pass."""
        result = parse_source("print 1 +;\nvar = 2;\nprint 3;")
        assert messages(result) == [
            "[line 1] Error at ';': Expect expression.",
            "[line 2] Error at '=': Expect variable name.",
        ]
        assert print_ast(result.statements) == "(print 3)"

    def test_resync_after_semicolon(self):
        """Parsing resumes after the ';' that ends the broken statement."""
        result = parse_source("var a = 1 + ; print a;")
        assert len(result.diagnostics) == 1
        assert print_ast(result.statements) == "(print a)"

    def test_resync_before_statement_keyword(self):
        """Parsing resumes at a keyword that starts a statement."""
        result = parse_source("var = 1 print 2;")
        assert len(result.diagnostics) == 1
        assert print_ast(result.statements) == "(print 2)"

    def test_no_cascading_errors(self):
        """One bad token produces one error."""
        result = parse_source("print (1 + ;\nprint 2;\nprint 3;")
        assert len(result.diagnostics) == 1
        assert print_ast(result.statements) == "(print 2)\n(print 3)"

    def test_recovery_inside_block(self):
        """Errors inside a block do not discard the rest of the block."""
        result = parse_source("{ print ; print 1; }")
        assert len(result.diagnostics) == 1
        assert print_ast(result.statements) == "(block (print 1))"

    def test_unclosed_block_reports_once(self):
        """EOF inside a block ends parsing after a single error."""
        result = parse_source("{ var a = 1;")
        assert len(result.diagnostics) == 1
        assert result.statements == []


class TestAstPrinter:
    """Test prefix rendering of trees."""

    def test_statement_forms(self):
        """Each statement kind has its own form."""
        result = parse_source('var a; var b = "x"; print b; b; {}')
        assert print_ast(result.statements) == (
            '(var a)\n(var b = x)\n(print b)\n(; b)\n(block)'
        )

    def test_literal_forms(self):
        """Literals render the way print shows them."""
        assert render("nil") == "nil"
        assert render("true") == "true"
        assert render("2.5") == "2.5"
        assert render("10") == "10"

    def test_unknown_node(self):
        """Anything outside the closed node set is rejected."""
        with pytest.raises(TypeError):
            AstPrinter().print(object())
