"""
Tests for answer validation and input conversion.
"""

import math

import pytest
from interview.model import Option, Question, QuestionType, ValidationRules
from interview.validator import (
    INVALID_NUMBER,
    REQUIRED,
    SELECT_ONE,
    parse_answer,
    parse_float,
    parse_int,
    validate,
)


def make_question(qtype: QuestionType, required: bool = False, **rules) -> Question:
    options = []
    if qtype.has_options:
        options = [
            Option(value="full_time", label="Full time"),
            Option(value="part_time", label="Part time"),
            Option(value="contract", label="Contract"),
        ]
    return Question(
        id="q",
        variable="v",
        type=qtype,
        question="Question?",
        required=required,
        options=options,
        validation=ValidationRules(**rules) if rules else None,
    )


class TestTextValidation:
    """Text fields: required, length and pattern."""

    def test_required(self):
        q = make_question(QuestionType.TEXT, required=True)
        assert validate(q, "").message == REQUIRED
        assert validate(q, "   ").message == REQUIRED
        assert validate(q, None).message == REQUIRED
        assert validate(q, "Ann").valid

    def test_optional_blank_is_valid(self):
        assert validate(make_question(QuestionType.TEXT), "").valid

    def test_length(self):
        q = make_question(QuestionType.TEXT, min_length=2, max_length=4)
        assert validate(q, "a").message == "Minimum length is 2 characters"
        assert validate(q, "abcde").message == "Maximum length is 4 characters"
        assert validate(q, "abc").valid

    def test_pattern(self):
        q = make_question(QuestionType.TEXT, pattern=r"^\d{5}$", pattern_message="Five digits please")
        assert validate(q, "1234").message == "Five digits please"
        assert validate(q, "12345").valid

    def test_pattern_default_message(self):
        q = make_question(QuestionType.TEXT, pattern=r"^[a-z]+$")
        assert validate(q, "ABC").message == "Invalid format"


class TestNumericValidation:
    """Integer and number fields."""

    def test_required(self):
        q = make_question(QuestionType.INTEGER, required=True)
        assert validate(q, None).message == REQUIRED
        assert validate(q, "").message == REQUIRED

    def test_unreadable(self):
        q = make_question(QuestionType.INTEGER)
        assert validate(q, "abc").message == INVALID_NUMBER

    def test_optional_blank_is_invalid(self):
        """A blank optional numeric field still fails the number check."""
        assert validate(make_question(QuestionType.NUMBER), "").message == INVALID_NUMBER

    def test_range(self):
        q = make_question(QuestionType.INTEGER, min=0, max=130)
        assert validate(q, -1).message == "Minimum value is 0"
        assert validate(q, 131).message == "Maximum value is 130"
        assert validate(q, 0).valid
        assert validate(q, "42abc").valid

    def test_zero_is_present(self):
        q = make_question(QuestionType.NUMBER, required=True)
        assert validate(q, 0).valid

    def test_float(self):
        q = make_question(QuestionType.NUMBER, max=1.5)
        assert validate(q, "1.25").valid
        assert validate(q, 2.5).message == "Maximum value is 1.5"


class TestOtherValidation:
    """Email, yes/no and choice fields."""

    def test_email(self):
        q = make_question(QuestionType.EMAIL)
        assert validate(q, "ann@example.org").valid
        assert validate(q, "").valid
        assert validate(q, "not-an-email").message == "Please enter a valid email address"
        assert validate(q, "a b@example.org").valid is False

    def test_email_required(self):
        assert validate(make_question(QuestionType.EMAIL, required=True), "").message == REQUIRED

    def test_yesno(self):
        q = make_question(QuestionType.YESNO, required=True)
        assert validate(q, None).message == SELECT_ONE
        assert validate(q, False).valid
        assert validate(q, True).valid

    @pytest.mark.parametrize("qtype", [QuestionType.DROPDOWN, QuestionType.RADIO])
    def test_choice(self, qtype):
        q = make_question(qtype, required=True)
        assert validate(q, None).message == SELECT_ONE
        assert validate(q, "contract").valid

    def test_checkboxes(self):
        q = make_question(QuestionType.CHECKBOXES, required=True, min_select=2, max_select=2)
        assert validate(q, []).message == "Please select at least one option"
        assert validate(q, ["contract"]).message == "Please select at least 2 options"
        assert validate(q, ["contract", "full_time", "part_time"]).message == \
            "Please select no more than 2 options"
        assert validate(q, ["contract", "full_time"]).valid

    def test_optional_checkboxes_empty(self):
        assert validate(make_question(QuestionType.CHECKBOXES), []).valid


class TestLeadingNumberParse:
    """Lenient leading-number reads."""

    @pytest.mark.parametrize("text, expected", [
        ("42", 42), ("  7 ", 7), ("42abc", 42), ("-3", -3), ("3.9", 3), (12, 12), (4.7, 4),
    ])
    def test_parse_int(self, text, expected):
        assert parse_int(text) == expected

    @pytest.mark.parametrize("text", ["abc", "", None, True, float("nan")])
    def test_parse_int_invalid(self, text):
        assert parse_int(text) is None

    @pytest.mark.parametrize("text, expected", [
        ("2.5", 2.5), ("1e3", 1000), (".5", 0.5), ("3.0kg", 3), ("-0.25", -0.25),
    ])
    def test_parse_float(self, text, expected):
        assert parse_float(text) == expected

    def test_parse_float_infinity(self):
        assert parse_float("Infinity") == math.inf
        assert parse_float("-Infinity") == -math.inf

    @pytest.mark.parametrize("text", ["abc", "", ".", None, False])
    def test_parse_float_invalid(self, text):
        assert parse_float(text) is None


class TestParseAnswer:
    """Text typed at a prompt becomes a stored answer."""

    def test_numbers(self):
        assert parse_answer(make_question(QuestionType.INTEGER), " 20 ") == 20
        assert parse_answer(make_question(QuestionType.NUMBER), "60000.50") == 60000.5
        assert parse_answer(make_question(QuestionType.INTEGER), "") is None

    @pytest.mark.parametrize("raw, expected", [
        ("y", True), ("Yes", True), ("TRUE", True), ("1", True),
        ("n", False), ("No", False), ("false", False), ("0", False),
        ("maybe", None), ("", None),
    ])
    def test_yesno(self, raw, expected):
        assert parse_answer(make_question(QuestionType.YESNO), raw) is expected

    def test_choice_by_value_label_or_position(self):
        q = make_question(QuestionType.RADIO)
        assert parse_answer(q, "contract") == "contract"
        assert parse_answer(q, "Part time") == "part_time"
        assert parse_answer(q, "1") == "full_time"
        assert parse_answer(q, "other") is None

    def test_checkboxes(self):
        q = make_question(QuestionType.CHECKBOXES)
        assert parse_answer(q, "1, contract, Part time") == ["full_time", "contract", "part_time"]
        assert parse_answer(q, "1,1,unknown") == ["full_time"]
        assert parse_answer(q, "") == []

    def test_text_is_stripped(self):
        assert parse_answer(make_question(QuestionType.TEXT), "  Ann  ") == "Ann"
