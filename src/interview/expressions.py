"""
Expression System for Interview Definitions

``show_if`` conditions and ``computed`` fields are written as strings in a
definition, but they are parsed into a small AST before anything is
evaluated.

Grammar (one production, nothing else):

    expression := IDENTIFIER OPERATOR LITERAL

    IDENTIFIER := [A-Za-z0-9_]+
    OPERATOR   := === | !== | == | != | >= | <= | > | < | + | - | * | /
    LITERAL    := the trimmed rest of the string

A bare identifier on the right (``a + b``) reads the answer of that name
when the answer map has it, and is the plain string otherwise.

Examples:
    age >= 18
    name === 'Bob'
    has_job == true
    subtotal * 1.2

ARCHITECTURAL RULE:
    Exactly one binary term. No parentheses, no && or ||, no unary
    negation, no nesting. Conditions that need more are expressed as
    extra computed fields.
"""

import re
from abc import ABC
from dataclasses import dataclass
from enum import Enum
from typing import Union

from interview.coercion import is_numeric_literal, normalize_number, to_number


class ExpressionSyntaxError(ValueError):
    """Raised when a string does not match the one-operator grammar."""
    pass


class Expression(ABC):
    """
    Base class for all AST expressions.

    Structure only. Evaluation belongs in ``interview.evaluator``.
    """
    pass


class BinaryOperator(Enum):
    """
    Operators accepted between the identifier and the literal.
    """

    # Equality
    STRICT_EQUALS = "==="
    STRICT_NOT_EQUALS = "!=="
    EQUALS = "=="
    NOT_EQUALS = "!="

    # Comparison
    GREATER_EQUAL = ">="
    LESS_EQUAL = "<="
    GREATER_THAN = ">"
    LESS_THAN = "<"

    # Arithmetic
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"

    @property
    def is_comparison(self) -> bool:
        return self in _COMPARISONS

    @property
    def is_arithmetic(self) -> bool:
        return self in _ARITHMETIC


_COMPARISONS = frozenset({
    BinaryOperator.GREATER_EQUAL,
    BinaryOperator.LESS_EQUAL,
    BinaryOperator.GREATER_THAN,
    BinaryOperator.LESS_THAN,
})

_ARITHMETIC = frozenset({
    BinaryOperator.ADD,
    BinaryOperator.SUBTRACT,
    BinaryOperator.MULTIPLY,
    BinaryOperator.DIVIDE,
})


@dataclass(frozen=True)
class VariableReference(Expression):
    """
    References an answer-map key.

    This object does NOT check the key exists. A missing key reads as
    undefined at evaluation time.
    """

    name: str


@dataclass(frozen=True)
class Literal(Expression):
    """
    A constant on the right-hand side.

    Examples:
        - 18
        - -2.5
        - "Bob"
        - True
    """

    value: Union[int, float, str, bool]


@dataclass(frozen=True)
class BareWord(Expression):
    """
    An unquoted identifier on the right-hand side.

    Examples:
        - b        in  a + b
        - active   in  status === active

    Resolves to answers[text] when that key exists, otherwise to the
    string ``text`` itself.
    """

    text: str


@dataclass(frozen=True)
class BinaryExpression(Expression):
    """
    The only compound expression.

    Example:
        age >= 18

    Becomes:
        BinaryExpression(
            operator=BinaryOperator.GREATER_EQUAL,
            left=VariableReference("age"),
            right=Literal(18),
        )

    IMPORTANT:
        Immutable. The left side is always a VariableReference and the
        right side is a Literal or a BareWord.
    """

    operator: BinaryOperator
    left: VariableReference
    right: Union[Literal, BareWord]


# Longest operators first so "===" never reads as "==" followed by "=".
_OPERATOR_PATTERN = "|".join(
    re.escape(op.value)
    for op in sorted(BinaryOperator, key=lambda o: len(o.value), reverse=True)
)
_EXPRESSION_RE = re.compile(
    r"^\s*([A-Za-z0-9_]+)\s*(" + _OPERATOR_PATTERN + r")\s*(.*?)\s*$",
    re.DOTALL,
)
_QUOTED_RE = re.compile(r"^['\"](.*)['\"]$", re.DOTALL)
_BAREWORD_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _tokenize(text: str):
    """Split an expression into (identifier, operator, literal text)."""
    match = _EXPRESSION_RE.match(text)
    if not match or not match.group(3):
        raise ExpressionSyntaxError(f"Could not parse expression: {text!r}")
    return match.group(1), match.group(2), match.group(3)


def parse_literal(token: str) -> Union[int, float, str, bool]:
    """
    Convert the right-hand token to a typed value.

    Order:
        true / false      -> bool
        quoted            -> str without the quotes
        fully numeric     -> int or float
        anything else     -> the raw trimmed string
    """
    trimmed = token.strip()
    if trimmed == "true":
        return True
    if trimmed == "false":
        return False
    quoted = _QUOTED_RE.match(trimmed)
    if quoted:
        return quoted.group(1)
    if is_numeric_literal(trimmed):
        return normalize_number(to_number(trimmed))
    return trimmed


def parse_expression(text: str) -> BinaryExpression:
    """
    Parse an expression string into a BinaryExpression.

    Args:
        text: Expression such as ``"age >= 18"``

    Returns:
        BinaryExpression

    Raises:
        ExpressionSyntaxError: If the string is not exactly one
            identifier, one operator and one literal
    """
    if not isinstance(text, str):
        raise ExpressionSyntaxError(f"Expression must be a string, got {type(text).__name__}")

    name, op, literal = _tokenize(text)
    value = parse_literal(literal)
    if isinstance(value, str) and value == literal and _BAREWORD_RE.match(value):
        right = BareWord(value)
    else:
        right = Literal(value)

    return BinaryExpression(
        operator=BinaryOperator(op),
        left=VariableReference(name),
        right=right,
    )
