"""
Tests for value coercion rules.

Conditions in existing definitions depend on these exact results, so the
tests pin down the edge cases: NaN propagation, empty strings, booleans
in arithmetic and list answers.
"""

import math

import pytest
from interview.coercion import (
    arithmetic,
    compare,
    js_round,
    js_type,
    loose_equals,
    normalize_number,
    strict_equals,
    to_js_string,
    to_number,
    truthy,
)


class TestToNumber:
    """Lenient numeric cast."""

    @pytest.mark.parametrize("value, expected", [
        ("18", 18),
        (" 2.5 ", 2.5),
        ("", 0),
        ("   ", 0),
        (True, 1),
        (False, 0),
        (7, 7),
        (1.5, 1.5),
        ("0x1F", 31),
        ("0b101", 5),
        ("1e2", 100),
        ([], 0),
        (["7"], 7),
        ("-3", -3),
        (".5", 0.5),
    ])
    def test_numeric(self, value, expected):
        assert to_number(value) == expected

    @pytest.mark.parametrize("value", [None, "abc", "12abc", ["1", "2"], {"a": 1}, "0x", "NaN"])
    def test_nan(self, value):
        assert math.isnan(to_number(value))

    def test_infinity(self):
        assert to_number("Infinity") == math.inf
        assert to_number("-Infinity") == -math.inf


class TestStrictEquals:
    """Type-sensitive equality."""

    def test_same_type(self):
        assert strict_equals("Bob", "Bob")
        assert strict_equals(18, 18)
        assert strict_equals(18, 18.0)
        assert strict_equals(True, True)
        assert strict_equals(None, None)

    def test_different_types(self):
        assert not strict_equals("18", 18)
        assert not strict_equals(1, True)
        assert not strict_equals(None, False)
        assert not strict_equals(0, "")

    def test_nan_never_equal(self):
        nan = float("nan")
        assert not strict_equals(nan, nan)

    def test_lists_by_identity(self):
        items = ["a"]
        assert strict_equals(items, items)
        assert not strict_equals(["a"], ["a"])


class TestLooseEquals:
    """Coercing equality."""

    def test_number_and_string(self):
        assert loose_equals("18", 18)
        assert loose_equals(18, "18")
        assert loose_equals(0, "")
        assert not loose_equals(1, "one")

    def test_boolean_coerces_to_number(self):
        assert loose_equals(True, 1)
        assert loose_equals("1", True)
        assert loose_equals(False, "0")
        assert not loose_equals(True, "true")

    def test_undefined_only_equals_undefined(self):
        assert loose_equals(None, None)
        assert not loose_equals(None, 0)
        assert not loose_equals(None, False)
        assert not loose_equals("", None)

    def test_list_flattened(self):
        assert loose_equals(["a"], "a")
        assert loose_equals(["a", "b"], "a,b")
        assert loose_equals([], 0)


class TestCompare:
    """Relational operators through the numeric cast."""

    def test_numbers(self):
        assert compare(">=", 18, 18)
        assert not compare(">=", 17, 18)
        assert compare("<", "9", 10)
        assert compare("<=", True, 1)

    def test_nan_is_always_false(self):
        for op in (">", "<", ">=", "<="):
            assert not compare(op, "abc", 1)
            assert not compare(op, None, 1)

    def test_strings_compared_numerically(self):
        """'10' > '9' numerically, unlike string ordering."""
        assert compare(">", "10", "9")

    def test_unknown_operator(self):
        with pytest.raises(ValueError):
            compare("+", 1, 2)


class TestArithmetic:
    """Arithmetic through the numeric cast."""

    def test_basic(self):
        assert arithmetic("+", 2, 3) == 5
        assert arithmetic("-", "10", 4) == 6
        assert arithmetic("*", 2.5, 2) == 5
        assert arithmetic("/", 9, 2) == 4.5

    def test_integral_results_are_int(self):
        result = arithmetic("*", 2.5, 2)
        assert result == 5 and isinstance(result, int)

    def test_nan_propagates(self):
        assert math.isnan(arithmetic("+", None, 1))
        assert math.isnan(arithmetic("*", "abc", 2))

    def test_division_by_zero(self):
        assert arithmetic("/", 1, 0) == math.inf
        assert arithmetic("/", -1, 0) == -math.inf
        assert math.isnan(arithmetic("/", 0, 0))

    def test_booleans_are_numbers(self):
        assert arithmetic("+", True, 1) == 2

    def test_integers_beyond_float_range(self):
        assert arithmetic("-", 10 ** 400, 0.5) == math.inf
        assert arithmetic("/", -(10 ** 400), 3) == -math.inf
        assert arithmetic("+", 2 ** 60, 1.5) == float(2 ** 60) + 1.5
        assert compare(">", 10 ** 400, 1)

    def test_large_integers_become_floats(self):
        assert isinstance(to_number(2 ** 60), float)
        assert to_number(2 ** 53) == 2 ** 53

    def test_unknown_operator(self):
        with pytest.raises(ValueError):
            arithmetic(">", 1, 2)


class TestHelpers:
    """Truthiness, rounding and string conversion."""

    def test_truthy(self):
        assert not truthy(None)
        assert not truthy(0)
        assert not truthy(float("nan"))
        assert not truthy("")
        assert truthy("0")
        assert truthy([])
        assert truthy(-1)

    def test_js_round_half_up(self):
        assert js_round(2.5) == 3
        assert js_round(0.5) == 1
        assert js_round(33.333) == 33
        assert js_round(66.666) == 67

    def test_to_js_string(self):
        assert to_js_string(True) == "true"
        assert to_js_string(5.0) == "5"
        assert to_js_string(float("nan")) == "NaN"
        assert to_js_string(["a", None, 2]) == "a,,2"

    def test_js_type(self):
        assert js_type(None) == "undefined"
        assert js_type(True) == "boolean"
        assert js_type(3.2) == "number"
        assert js_type("x") == "string"
        assert js_type(["x"]) == "object"

    def test_normalize_number(self):
        assert isinstance(normalize_number(4.0), int)
        assert isinstance(normalize_number(4.5), float)
        assert normalize_number(math.inf) == math.inf
