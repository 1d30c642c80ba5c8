"""
Expression Evaluator

Evaluates one parsed expression against the current answer map.

Two modes:
    - boolean mode (``show_if``): the result is reduced to True/False.
      A string that does not parse FAILS OPEN and returns True, so a
      broken condition can never hide a question.
    - value mode (``computed``): the raw result is returned.
      A string that does not parse FAILS CLOSED and returns None.

A condition that parses and evaluates to False is False. Fail-open only
covers parse failures.
"""

import logging
from functools import lru_cache
from typing import Any, Mapping

from interview import coercion
from interview.expressions import (
    BareWord,
    BinaryExpression,
    BinaryOperator,
    ExpressionSyntaxError,
    parse_expression,
)

logger = logging.getLogger(__name__)


@lru_cache(maxsize=512)
def _parse_cached(text: str) -> BinaryExpression:
    return parse_expression(text)


def resolve_right(expr: BinaryExpression, answers: Mapping[str, Any]) -> Any:
    """Value of the right-hand operand; a bare word reads an existing answer."""
    if isinstance(expr.right, BareWord):
        if expr.right.text in answers:
            return answers[expr.right.text]
        return expr.right.text
    return expr.right.value


def evaluate_expression(expr: BinaryExpression, answers: Mapping[str, Any]) -> Any:
    """
    Evaluate an already-parsed expression.

    Args:
        expr: Parsed BinaryExpression
        answers: Answer map; missing keys read as None

    Returns:
        bool for equality/comparison operators, a number for arithmetic
    """
    left = answers.get(expr.left.name)
    right = resolve_right(expr, answers)
    op = expr.operator

    if op is BinaryOperator.STRICT_EQUALS:
        return coercion.strict_equals(left, right)
    if op is BinaryOperator.STRICT_NOT_EQUALS:
        return not coercion.strict_equals(left, right)
    if op is BinaryOperator.EQUALS:
        return coercion.loose_equals(left, right)
    if op is BinaryOperator.NOT_EQUALS:
        return not coercion.loose_equals(left, right)
    if op.is_comparison:
        return coercion.compare(op.value, left, right)
    if op.is_arithmetic:
        return coercion.arithmetic(op.value, left, right)
    raise ExpressionSyntaxError(f"Unsupported operator: {op.value}")


def evaluate(expression: str, answers: Mapping[str, Any], as_boolean: bool = False,
             debug: bool = False) -> Any:
    """
    Parse and evaluate an expression string.

    Args:
        expression: e.g. ``"age >= 18"`` or ``"a + b"``
        answers: Current answer map
        as_boolean: True for visibility conditions
        debug: Emit DEBUG records with operands and result

    Returns:
        bool in boolean mode; the raw value (or None on parse failure)
        in value mode
    """
    try:
        expr = _parse_cached(expression)
    except (ExpressionSyntaxError, TypeError) as e:
        if as_boolean:
            logger.warning("Could not parse condition %r, showing question: %s", expression, e)
            return True
        logger.warning("Could not parse expression %r: %s", expression, e)
        return None

    result = evaluate_expression(expr, answers)

    if debug:
        left = answers.get(expr.left.name)
        right = resolve_right(expr, answers)
        logger.debug(
            "Evaluated %r: left=%r (%s) operator=%s right=%r (%s) -> %r",
            expression, left, coercion.js_type(left),
            expr.operator.value, right, coercion.js_type(right),
            result,
        )

    if as_boolean:
        return coercion.truthy(result)
    return result
