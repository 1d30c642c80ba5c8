"""
Tests for the Expression System

These tests verify:
    - The one-operator grammar is tokenized and parsed into an AST
    - Longer operators win over shorter ones
    - Literals are typed (bool, str, number, bare word)
    - Anything outside the grammar is rejected
    - AST nodes are immutable
"""

import math

import pytest
from interview.expressions import (
    BareWord,
    BinaryExpression,
    BinaryOperator,
    Expression,
    ExpressionSyntaxError,
    Literal,
    VariableReference,
    parse_expression,
    parse_literal,
)


class TestParseExpression:
    """Test parsing of well-formed expressions."""

    def test_comparison(self):
        """Should parse identifier, operator and numeric literal."""
        expr = parse_expression("age >= 18")
        assert expr == BinaryExpression(
            operator=BinaryOperator.GREATER_EQUAL,
            left=VariableReference("age"),
            right=Literal(18),
        )

    def test_strict_equality_with_quoted_string(self):
        """Quotes are stripped from string literals."""
        expr = parse_expression("name === 'Bob'")
        assert expr.operator == BinaryOperator.STRICT_EQUALS
        assert expr.right == Literal("Bob")

    def test_double_quoted_string(self):
        expr = parse_expression('city == "New York"')
        assert expr.right == Literal("New York")

    def test_no_whitespace(self):
        """Operators need no surrounding spaces."""
        expr = parse_expression("age>=18")
        assert expr.left.name == "age"
        assert expr.operator == BinaryOperator.GREATER_EQUAL
        assert expr.right.value == 18

    def test_longest_operator_wins(self):
        """'===' must not be read as '==' followed by '='."""
        assert parse_expression("a === 1").operator == BinaryOperator.STRICT_EQUALS
        assert parse_expression("a !== 1").operator == BinaryOperator.STRICT_NOT_EQUALS
        assert parse_expression("a == 1").operator == BinaryOperator.EQUALS
        assert parse_expression("a <= 1").operator == BinaryOperator.LESS_EQUAL
        assert parse_expression("a < 1").operator == BinaryOperator.LESS_THAN

    def test_boolean_literals(self):
        assert parse_expression("hasJob === true").right == Literal(True)
        assert parse_expression("hasJob === false").right == Literal(False)

    def test_quoted_keyword_is_string(self):
        """'true' in quotes stays a string."""
        assert parse_expression("flag === 'true'").right == Literal("true")

    def test_arithmetic_operators(self):
        assert parse_expression("a + 2").operator == BinaryOperator.ADD
        assert parse_expression("a * 2").operator == BinaryOperator.MULTIPLY
        assert parse_expression("a / 2").operator == BinaryOperator.DIVIDE
        assert parse_expression("a - 2").operator == BinaryOperator.SUBTRACT

    def test_negative_literal_after_minus(self):
        """The first '-' is the operator, the second belongs to the number."""
        expr = parse_expression("a - -5")
        assert expr.operator == BinaryOperator.SUBTRACT
        assert expr.right == Literal(-5)

    def test_float_literal(self):
        assert parse_expression("salary / 12.5").right == Literal(12.5)

    def test_hex_literal(self):
        assert parse_expression("flags == 0x10").right == Literal(16)

    def test_infinity_literal(self):
        assert math.isinf(parse_expression("x < Infinity").right.value)

    def test_bare_word_on_right(self):
        """An unquoted identifier becomes a BareWord."""
        expr = parse_expression("a + b")
        assert expr.right == BareWord("b")

    def test_unquoted_non_identifier_text_is_string(self):
        expr = parse_expression("status == in progress")
        assert expr.right == Literal("in progress")

    def test_rest_of_string_is_one_literal(self):
        """A second operator is not a nested expression; it is part of the literal."""
        expr = parse_expression("a > 1 && b < 2")
        assert expr.operator == BinaryOperator.GREATER_THAN
        assert expr.right == Literal("1 && b < 2")

    def test_surrounding_whitespace(self):
        expr = parse_expression("   count   <   3   ")
        assert expr.left.name == "count"
        assert expr.right.value == 3


class TestParseFailures:
    """Strings outside the grammar raise ExpressionSyntaxError."""

    @pytest.mark.parametrize("text", [
        "total",
        "",
        "   ",
        "a ==",
        "a = 5",
        "(a > 1)",
        "!flag",
        "== 5",
    ])
    def test_rejected(self, text):
        with pytest.raises(ExpressionSyntaxError):
            parse_expression(text)

    def test_non_string_rejected(self):
        with pytest.raises(ExpressionSyntaxError):
            parse_expression(None)

    def test_syntax_error_is_value_error(self):
        """Callers catching ValueError also catch grammar failures."""
        assert issubclass(ExpressionSyntaxError, ValueError)


class TestParseLiteral:
    """Test right-hand literal typing."""

    def test_keywords(self):
        assert parse_literal("true") is True
        assert parse_literal(" false ") is False

    def test_numbers(self):
        assert parse_literal("42") == 42
        assert isinstance(parse_literal("42"), int)
        assert parse_literal("-2.5") == -2.5
        assert parse_literal("1e3") == 1000

    def test_quoted(self):
        assert parse_literal("'hello world'") == "hello world"
        assert parse_literal("''") == ""

    def test_raw_string(self):
        assert parse_literal("abc") == "abc"
        assert parse_literal("NaN") == "NaN"


class TestImmutability:
    """AST nodes are frozen dataclasses."""

    def test_nodes_are_expressions(self):
        expr = parse_expression("age >= 18")
        assert isinstance(expr, Expression)
        assert isinstance(expr.left, Expression)
        assert isinstance(expr.right, Expression)

    def test_binary_expression_immutable(self):
        expr = parse_expression("age >= 18")
        with pytest.raises(AttributeError):
            expr.operator = BinaryOperator.LESS_THAN

    def test_literal_immutable(self):
        lit = Literal(5)
        with pytest.raises(AttributeError):
            lit.value = 10

    def test_operator_categories(self):
        assert BinaryOperator.GREATER_THAN.is_comparison
        assert not BinaryOperator.GREATER_THAN.is_arithmetic
        assert BinaryOperator.DIVIDE.is_arithmetic
        assert not BinaryOperator.EQUALS.is_comparison
