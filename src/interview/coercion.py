"""
Value Coercion Rules

Interview definitions were authored against a host whose comparison and
numeric-cast rules differ from Python's. Conditions such as ``age >= 18``
or ``count == '3'`` must keep producing the same results, so every
operator in the evaluator goes through the helpers below instead of
Python's own ``==``, ``<`` or ``float()``.

Value kinds recognised in an answer map:
    - undefined  (None, or a missing key)
    - boolean    (bool)
    - number     (int, float; NaN and infinities included)
    - string     (str)
    - object     (list/tuple of selections, anything else)

RULES:
    - The numeric cast never raises. Anything it cannot read is NaN.
    - Comparisons against NaN are False, arithmetic with NaN yields NaN.
    - Division by zero yields an infinity or NaN, never an exception.
"""

import math
import re
from typing import Any, Union

Number = Union[int, float]

NAN = float("nan")

# Integers beyond this lose precision in a double, so keep them as floats.
_MAX_SAFE_INTEGER = 2 ** 53

_DECIMAL_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")
_RADIX_RE = re.compile(r"^0([xXoObB])([0-9A-Za-z]+)$")
_RADIX_BASES = {"x": 16, "o": 8, "b": 2}


def js_type(value: Any) -> str:
    """Return the value kind used by the equality rules."""
    if value is None:
        return "undefined"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    return "object"


def normalize_number(value: Number) -> Number:
    """Collapse integral floats to ``int`` so results print as ``5``, not ``5.0``."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        if abs(value) > _MAX_SAFE_INTEGER:
            try:
                return float(value)
            except OverflowError:
                return math.copysign(math.inf, value)
        return value
    if math.isfinite(value) and value.is_integer() and abs(value) <= _MAX_SAFE_INTEGER:
        return int(value)
    return value


def _string_to_number(text: str) -> Number:
    s = text.strip()
    if not s:
        return 0
    if s in ("Infinity", "+Infinity"):
        return math.inf
    if s == "-Infinity":
        return -math.inf

    radix = _RADIX_RE.match(s)
    if radix:
        try:
            return normalize_number(int(radix.group(2), _RADIX_BASES[radix.group(1).lower()]))
        except ValueError:
            return NAN

    if _DECIMAL_RE.match(s):
        return normalize_number(float(s))
    return NAN


def to_js_string(value: Any) -> str:
    """String conversion matching the host's rules (``true``, ``NaN``, ``1,2``)."""
    if value is None:
        return "undefined"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, (list, tuple)):
        return ",".join("" if item is None else to_js_string(item) for item in value)
    if isinstance(value, str):
        return value
    return "[object Object]"


def to_number(value: Any) -> Number:
    """
    Lenient numeric cast.

    Examples:
        to_number("18")      -> 18
        to_number(" 2.5 ")   -> 2.5
        to_number("")        -> 0
        to_number(True)      -> 1
        to_number(None)      -> nan
        to_number("abc")     -> nan
        to_number(["7"])     -> 7
        to_number(["1","2"]) -> nan

    Never raises.
    """
    if value is None:
        return NAN
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return normalize_number(value)
    if isinstance(value, float):
        return value
    if isinstance(value, str):
        return _string_to_number(value)
    if isinstance(value, (list, tuple)):
        return _string_to_number(to_js_string(value))
    return NAN


def is_numeric_literal(token: str) -> bool:
    """True when the whole token survives the numeric cast."""
    return not math.isnan(_string_to_number(token))


def to_primitive(value: Any) -> Any:
    if js_type(value) == "object":
        return to_js_string(value)
    return value


def strict_equals(left: Any, right: Any) -> bool:
    """Type-sensitive equality (``===``)."""
    kind = js_type(left)
    if kind != js_type(right):
        return False
    if kind == "object":
        return left is right
    # NaN compares unequal to itself here too
    return left == right


def loose_equals(left: Any, right: Any) -> bool:
    """Coercing equality (``==``)."""
    left_kind = js_type(left)
    right_kind = js_type(right)

    if left_kind == right_kind:
        return strict_equals(left, right)
    if left is None or right is None:
        return False
    if left_kind == "number" and right_kind == "string":
        return left == to_number(right)
    if left_kind == "string" and right_kind == "number":
        return to_number(left) == right
    if left_kind == "boolean":
        return loose_equals(to_number(left), right)
    if right_kind == "boolean":
        return loose_equals(left, to_number(right))
    if left_kind == "object":
        return loose_equals(to_primitive(left), right)
    if right_kind == "object":
        return loose_equals(left, to_primitive(right))
    return False


def compare(operator: str, left: Any, right: Any) -> bool:
    """Numeric comparison; both sides pass through ``to_number`` first."""
    x = to_number(left)
    y = to_number(right)
    if operator == ">":
        return x > y
    if operator == "<":
        return x < y
    if operator == ">=":
        return x >= y
    if operator == "<=":
        return x <= y
    raise ValueError(f"Not a comparison operator: {operator}")


def _divide(x: Number, y: Number) -> Number:
    if y == 0:
        if x == 0 or math.isnan(x):
            return NAN
        return math.copysign(1.0, x) * math.copysign(1.0, float(y)) * math.inf
    return x / y


def arithmetic(operator: str, left: Any, right: Any) -> Number:
    """Numeric arithmetic; NaN propagates and nothing raises."""
    x = to_number(left)
    y = to_number(right)
    if operator == "+":
        result = x + y
    elif operator == "-":
        result = x - y
    elif operator == "*":
        result = x * y
    elif operator == "/":
        result = _divide(x, y)
    else:
        raise ValueError(f"Not an arithmetic operator: {operator}")
    return normalize_number(result)


def truthy(value: Any) -> bool:
    """Truthiness as the host sees it: lists are always true, NaN is false."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return not (value == 0 or math.isnan(value))
    if isinstance(value, str):
        return value != ""
    return True


def js_round(value: float) -> int:
    """Half-up rounding (``round(2.5) == 3``), unlike Python's banker's rounding."""
    return int(math.floor(value + 0.5))
