# =============================================================================
# test_parser.py - Parser Unit Tests
# =============================================================================
# Tests for the recursive descent / precedence climbing parser.
#
# Test coverage includes:
#   - Primary expressions: numbers, variables, calls, parentheses
#   - Operator precedence and left associativity
#   - Prototypes, definitions, externs and top-level expressions
#   - Failure results, diagnostics and the "no partial tree" rule
#   - Session independence and custom precedence tables
# =============================================================================

import io

import pytest
from toylang.ast import (
    BinaryExpression,
    CallExpression,
    FunctionDefinition,
    NumberLiteral,
    Prototype,
    VariableReference,
)
from toylang.errors import MissingTokenError, ToySyntaxError, UnexpectedTokenError
from toylang.lexer import Lexer, TokenType
from toylang.parser import ParseResult, Parser
from toylang.precedence import PrecedenceTable


def Num(value):
    return NumberLiteral(value)


def Var(name):
    return VariableReference(name)


def Bin(op, left, right):
    return BinaryExpression(op, left, right)


# =============================================================================
# Expression Tests
# =============================================================================

class TestPrimaryExpressions:
    """Test numbers, variables, calls and parenthesised expressions."""

    def test_number(self, make_parser):
        assert make_parser("42").parse_expression().node == Num(42)

    def test_variable(self, make_parser):
        assert make_parser("x").parse_expression().node == Var("x")

    def test_call_with_arguments(self, make_parser):
        result = make_parser("foo(1, bar)").parse_expression()
        assert result.node == CallExpression("foo", (Num(1), Var("bar")))

    def test_call_without_arguments(self, make_parser):
        result = make_parser("foo()").parse_expression()
        assert result.node == CallExpression("foo", ())

    def test_call_with_expression_arguments(self, make_parser):
        result = make_parser("f(a+1, g(b)*2)").parse_expression()
        assert result.node == CallExpression("f", (
            Bin("+", Var("a"), Num(1)),
            Bin("*", CallExpression("g", (Var("b"),)), Num(2)),
        ))

    def test_parentheses_leave_no_node(self, make_parser):
        assert make_parser("((x))").parse_expression().node == Var("x")

    def test_parse_primary_stops_before_operator(self, make_parser):
        parser = make_parser("a+b")
        assert parser.parse_primary().node == Var("a")
        assert parser.current.is_symbol("+")

    def test_parse_number_expr(self, make_parser):
        parser = make_parser("7 x")
        assert parser.parse_number_expr().node == Num(7)
        assert parser.current.type == TokenType.IDENTIFIER

    def test_parse_identifier_expr(self, make_parser):
        parser = make_parser("sum(1)")
        assert parser.parse_identifier_expr().node == CallExpression("sum", (Num(1),))

    def test_parse_paren_expr(self, make_parser):
        parser = make_parser("(1+2) rest")
        assert parser.parse_paren_expr().node == Bin("+", Num(1), Num(2))
        assert parser.current.value == "rest"


class TestBinaryExpressions:
    """Test operator precedence and associativity."""

    def test_multiplication_binds_tighter(self, make_parser):
        result = make_parser("1+2*3").parse_expression()
        assert result.node == Bin("+", Num(1), Bin("*", Num(2), Num(3)))

    def test_tighter_operator_first(self, make_parser):
        result = make_parser("1*2+3").parse_expression()
        assert result.node == Bin("+", Bin("*", Num(1), Num(2)), Num(3))

    def test_equal_precedence_is_left_associative(self, make_parser):
        result = make_parser("1-2-3").parse_expression()
        assert result.node == Bin("-", Bin("-", Num(1), Num(2)), Num(3))

    def test_mixed_additive_is_left_associative(self, make_parser):
        result = make_parser("a+b-c").parse_expression()
        assert result.node == Bin("-", Bin("+", Var("a"), Var("b")), Var("c"))

    def test_parentheses_override_precedence(self, make_parser):
        result = make_parser("(1+2)*3").parse_expression()
        assert result.node == Bin("*", Bin("+", Num(1), Num(2)), Num(3))

    def test_all_levels(self, make_parser):
        result = make_parser("a<b+c*d-e").parse_expression()
        assert result.node == Bin(
            "<",
            Var("a"),
            Bin("-", Bin("+", Var("b"), Bin("*", Var("c"), Var("d"))), Var("e")),
        )

    def test_unknown_operator_ends_expression(self, make_parser):
        """'/' is not in the table, so the expression stops before it."""
        parser = make_parser("1 / 2")
        result = parser.parse_expression()
        assert result.node == Num(1)
        assert parser.current.is_symbol("/")

    def test_semicolon_ends_expression(self, make_parser):
        parser = make_parser("x*2; y")
        assert parser.parse_expression().node == Bin("*", Var("x"), Num(2))
        assert parser.current.is_symbol(";")

    def test_parse_bin_op_rhs(self, make_parser):
        parser = make_parser("+ 2 * 3")
        result = parser.parse_bin_op_rhs(0, Num(1))
        assert result.node == Bin("+", Num(1), Bin("*", Num(2), Num(3)))

    def test_parse_bin_op_rhs_below_minimum(self, make_parser):
        """An operator looser than the minimum leaves lhs untouched."""
        parser = make_parser("+ 2")
        result = parser.parse_bin_op_rhs(30, Var("x"))
        assert result.node == Var("x")
        assert parser.current.is_symbol("+")


class TestCustomPrecedence:
    """Test parsing against a caller-supplied precedence table."""

    def test_extra_operator(self, diagnostics):
        table = PrecedenceTable({"+": 20, "*": 40, "/": 40})
        parser = Parser(Lexer("8/2/2"), precedence=table, diagnostics=diagnostics)
        result = parser.parse_expression()
        assert result.node == Bin("/", Bin("/", Num(8), Num(2)), Num(2))

    def test_zero_precedence_operator(self, diagnostics):
        table = PrecedenceTable({"=": 0, "+": 20})
        parser = Parser(Lexer("a=b+c"), precedence=table, diagnostics=diagnostics)
        result = parser.parse_expression()
        assert result.node == Bin("=", Var("a"), Bin("+", Var("b"), Var("c")))

    def test_removed_operator_is_not_parsed(self, diagnostics):
        table = PrecedenceTable({"+": 20})
        parser = Parser(Lexer("2*3"), precedence=table, diagnostics=diagnostics)
        assert parser.parse_expression().node == Num(2)


# =============================================================================
# Declaration Tests
# =============================================================================

class TestDeclarations:
    """Test prototypes, definitions, externs and top-level expressions."""

    def test_prototype(self, make_parser):
        result = make_parser("add(a b)").parse_prototype()
        assert result.node == Prototype("add", ("a", "b"))

    def test_prototype_without_parameters(self, make_parser):
        assert make_parser("zero()").parse_prototype().node == Prototype("zero", ())

    def test_duplicate_parameters_are_kept(self, make_parser):
        result = make_parser("f(a a)").parse_prototype()
        assert result.node.parameters == ("a", "a")

    def test_definition(self, make_parser):
        result = make_parser("def add(a b) a+b").parse_definition()
        assert result.node == FunctionDefinition(
            Prototype("add", ("a", "b")),
            Bin("+", Var("a"), Var("b")),
        )

    def test_definition_body_stops_at_next_construct(self, make_parser):
        parser = make_parser("def id(x) x def")
        assert parser.parse_definition().node.body == Var("x")
        assert parser.current.type == TokenType.DEF

    def test_extern(self, make_parser):
        result = make_parser("extern sin(x)").parse_extern()
        assert result.node == Prototype("sin", ("x",))

    def test_top_level_expression(self, make_parser):
        result = make_parser("x+1").parse_top_level_expr()
        assert result.node == FunctionDefinition(
            Prototype("", ()),
            Bin("+", Var("x"), Num(1)),
        )
        assert result.node.is_top_level_expression

    def test_definitions_do_not_share_prototypes(self, make_parser):
        parser = make_parser("def f(x) x def f(x) x")
        first = parser.parse_definition().node
        second = parser.parse_definition().node
        assert first == second
        assert first.prototype is not second.prototype

    def test_node_locations(self, make_parser):
        parser = make_parser("def f(x)\n  x*2")
        definition = parser.parse_definition().node
        assert (definition.location.line, definition.location.column) == (1, 1)
        assert (definition.prototype.location.line, definition.prototype.location.column) == (1, 5)
        assert (definition.body.location.line, definition.body.location.column) == (2, 3)


# =============================================================================
# Failure Tests
# =============================================================================

class TestFailures:
    """Test failed results, diagnostics and error details."""

    def test_unterminated_prototype(self, make_parser, diagnostics):
        result = make_parser("def foo(").parse_definition()
        assert not result
        assert result.node is None
        assert isinstance(result.error, MissingTokenError)
        assert result.error.message == "expected ')' in prototype"
        assert diagnostics.getvalue() == "Error expected ')' in prototype\n"

    def test_error_location(self, make_parser):
        result = make_parser("def foo(").parse_definition()
        assert str(result.error.location) == "<test>:1:9"
        assert str(result.error) == "<test>:1:9: error: expected ')' in prototype"

    def test_missing_function_name(self, make_parser):
        result = make_parser("extern 1(x)").parse_extern()
        assert result.error.message == "expected function name in prototype"

    def test_missing_open_paren_in_prototype(self, make_parser):
        result = make_parser("extern foo x").parse_extern()
        assert result.error.message == "expected '(' in prototype"

    def test_comma_in_prototype(self, make_parser):
        """Prototype parameters are separated by spaces, not commas."""
        result = make_parser("extern foo(a, b)").parse_extern()
        assert result.error.message == "expected ')' in prototype"

    def test_bad_argument_separator(self, make_parser):
        result = make_parser("foo(1 2)").parse_expression()
        assert result.error.message == "expected ')' or ',' in argument list"

    def test_unclosed_parenthesis(self, make_parser):
        result = make_parser("(1+2").parse_expression()
        assert result.error.message == "expected ')'"

    def test_unknown_token(self, make_parser):
        result = make_parser(")").parse_expression()
        assert isinstance(result.error, UnexpectedTokenError)
        assert result.error.message == "unknown token when expecting an expression"
        assert result.error.found == "')'"

    def test_missing_right_operand(self, make_parser):
        result = make_parser("1+").parse_expression()
        assert isinstance(result.error, UnexpectedTokenError)
        assert result.error.found == "end of input"

    def test_nested_failure_reports_once(self, make_parser, diagnostics):
        result = make_parser("foo(1, (2+))").parse_top_level_expr()
        assert not result.ok
        assert diagnostics.getvalue().splitlines() == [
            "Error unknown token when expecting an expression",
        ]

    @pytest.mark.parametrize("source,method", [
        ("def f(x) (x+", "parse_definition"),
        ("def f(x y", "parse_definition"),
        ("def (x) x", "parse_definition"),
        ("def f(x) g(x,", "parse_definition"),
        ("extern g(,)", "parse_extern"),
        ("a * (b + c", "parse_top_level_expr"),
        ("h(1 + )", "parse_top_level_expr"),
    ])
    def test_no_partial_trees(self, make_parser, source, method):
        """A failure anywhere below an entry point yields no node at all."""
        result = getattr(make_parser(source), method)()
        assert result.node is None
        assert isinstance(result.error, ToySyntaxError)

    def test_unwrap(self, make_parser):
        assert make_parser("x").parse_expression().unwrap() == Var("x")
        with pytest.raises(ToySyntaxError, match="expected '\\)'"):
            make_parser("(x").parse_expression().unwrap()

    def test_errors_are_collected(self, make_parser):
        parser = make_parser(") )")
        parser.parse_expression()
        parser.next_token()
        parser.parse_expression()
        assert parser.errors.error_count() == 2

    def test_failures_do_not_raise(self, make_parser):
        result = make_parser("def").parse_definition()
        assert isinstance(result, ParseResult)
        assert not result.ok

    def test_deep_nesting_fails_cleanly(self, make_parser, diagnostics):
        """Nesting deeper than the interpreter stack is a failed result."""
        depth = 5000
        result = make_parser("(" * depth + "1" + ")" * depth).parse_expression()
        assert not result.ok
        assert result.node is None
        assert isinstance(result.error, ToySyntaxError)
        assert result.error.message == "expression nested too deeply"
        assert diagnostics.getvalue() == "Error expression nested too deeply\n"

    def test_deep_nesting_in_definition(self, make_parser):
        depth = 5000
        parser = make_parser("def f(x) " + "(" * depth + "x" + ")" * depth)
        result = parser.parse_definition()
        assert result.error.message == "expression nested too deeply"
        assert parser.errors.error_count() == 1

    def test_moderate_nesting_parses(self, make_parser):
        depth = 50
        result = make_parser("(" * depth + "1" + ")" * depth).parse_expression()
        assert result.node == Num(1)

    @pytest.mark.parametrize("source,method", [
        ("x", "parse_number_expr"),
        ("(", "parse_number_expr"),
        ("1", "parse_identifier_expr"),
        ("def", "parse_identifier_expr"),
        ("x", "parse_paren_expr"),
        ("", "parse_paren_expr"),
    ])
    def test_wrong_starting_token(self, make_parser, diagnostics, source, method):
        """Single-production entry points reject a token they cannot start with."""
        parser = make_parser(source)
        before = parser.current
        result = getattr(parser, method)()
        assert result.node is None
        assert isinstance(result.error, UnexpectedTokenError)
        assert parser.current is before
        assert diagnostics.getvalue() == "Error unknown token when expecting an expression\n"


# =============================================================================
# Session Tests
# =============================================================================

class TestSessions:
    """Test current-token handling and session independence."""

    def test_current_is_read_on_demand(self, make_parser):
        parser = make_parser("x y")
        assert parser.current.value == "x"
        assert parser.current.value == "x"
        assert parser.next_token().value == "y"
        assert parser.current.value == "y"

    def test_independent_sessions(self, diagnostics):
        first = Parser(Lexer("1+2"), diagnostics=diagnostics)
        second = Parser(Lexer("(3"), diagnostics=diagnostics)
        assert first.parse_primary().node == Num(1)
        assert not second.parse_expression().ok
        assert first.parse_bin_op_rhs(0, Num(1)).node == Bin("+", Num(1), Num(2))
        assert first.errors.error_count() == 0
        assert second.errors.error_count() == 1

    def test_diagnostics_default_to_stderr(self, capsys):
        Parser(Lexer(")")).parse_expression()
        captured = capsys.readouterr()
        assert captured.err == "Error unknown token when expecting an expression\n"
        assert captured.out == ""

    def test_parser_over_stream(self, diagnostics):
        parser = Parser(Lexer(io.StringIO("def sq(x) x*x")), diagnostics=diagnostics)
        assert parser.parse_definition().node.prototype.name == "sq"
