"""
Answer validation and input conversion.

``validate`` checks a value against a question's type and rules before
it is stored. ``parse_answer`` turns raw text typed by a user into the
value stored in the answer map (int, float, bool, list of str or str).

Integer and number fields read a leading number the way a lenient
``parseInt``/``parseFloat`` does: "42abc" reads as 42, "abc" is invalid.
"""

import math
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from interview.model import Question, QuestionType

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")
_LEADING_FLOAT_RE = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
_LEADING_INFINITY_RE = re.compile(r"^\s*([+-]?)Infinity")

REQUIRED = "This field is required"
SELECT_ONE = "Please select an option"
INVALID_NUMBER = "Please enter a valid number"


@dataclass
class ValidationResult:
    valid: bool
    message: Optional[str] = None


_OK = ValidationResult(valid=True)


def _fail(message: str) -> ValidationResult:
    return ValidationResult(valid=False, message=message)


def parse_int(value: Any) -> Optional[int]:
    """Leading-integer parse; None where the host would give NaN."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    match = _LEADING_INT_RE.match(str(value))
    return int(match.group(1)) if match else None


def parse_float(value: Any) -> Optional[float]:
    """Leading-float parse; None where the host would give NaN."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return None if isinstance(value, float) and math.isnan(value) else value
    text = str(value)
    infinity = _LEADING_INFINITY_RE.match(text)
    if infinity:
        return -math.inf if infinity.group(1) == "-" else math.inf
    match = _LEADING_FLOAT_RE.match(text)
    if not match:
        return None
    number = float(match.group(1))
    return int(number) if number.is_integer() else number


def _blank(value: Any) -> bool:
    return not value or (isinstance(value, str) and value.strip() == "")


def _validate_text(value: Any, question: Question) -> ValidationResult:
    rules = question.validation
    if question.required and _blank(value):
        return _fail(REQUIRED)
    if rules is None:
        return _OK
    text = "" if value is None else str(value)

    if rules.min_length and len(text) < rules.min_length:
        return _fail(f"Minimum length is {rules.min_length} characters")
    if rules.max_length and len(text) > rules.max_length:
        return _fail(f"Maximum length is {rules.max_length} characters")
    if rules.pattern and not re.search(rules.pattern, text):
        return _fail(rules.pattern_message or "Invalid format")
    return _OK


def _validate_numeric(parse: Callable[[Any], Any]) -> Callable[[Any, Question], ValidationResult]:
    def validator(value: Any, question: Question) -> ValidationResult:
        if question.required and (value is None or value == ""):
            return _fail(REQUIRED)

        number = parse(value)
        if number is None:
            return _fail(INVALID_NUMBER)

        rules = question.validation
        if rules is not None:
            if rules.min is not None and number < rules.min:
                return _fail(f"Minimum value is {rules.min}")
            if rules.max is not None and number > rules.max:
                return _fail(f"Maximum value is {rules.max}")
        return _OK

    return validator


def _validate_email(value: Any, question: Question) -> ValidationResult:
    if question.required and _blank(value):
        return _fail(REQUIRED)
    if value and not _EMAIL_RE.match(str(value)):
        return _fail("Please enter a valid email address")
    return _OK


def _validate_yesno(value: Any, question: Question) -> ValidationResult:
    if question.required and value is None:
        return _fail(SELECT_ONE)
    return _OK


def _validate_choice(value: Any, question: Question) -> ValidationResult:
    if question.required and not value:
        return _fail(SELECT_ONE)
    return _OK


def _validate_checkboxes(value: Any, question: Question) -> ValidationResult:
    if question.required and not value:
        return _fail("Please select at least one option")

    rules = question.validation
    count = len(value or [])
    if rules is not None:
        if rules.min_select and count < rules.min_select:
            return _fail(f"Please select at least {rules.min_select} options")
        if rules.max_select and count > rules.max_select:
            return _fail(f"Please select no more than {rules.max_select} options")
    return _OK


_VALIDATORS: Dict[QuestionType, Callable[[Any, Question], ValidationResult]] = {
    QuestionType.TEXT: _validate_text,
    QuestionType.EMAIL: _validate_email,
    QuestionType.INTEGER: _validate_numeric(parse_int),
    QuestionType.NUMBER: _validate_numeric(parse_float),
    QuestionType.YESNO: _validate_yesno,
    QuestionType.DROPDOWN: _validate_choice,
    QuestionType.RADIO: _validate_choice,
    QuestionType.CHECKBOXES: _validate_checkboxes,
}


def validate(question: Question, value: Any) -> ValidationResult:
    """
    Check a value against the question's type and validation rules.

    Args:
        question: Question being answered
        value: Raw or parsed answer

    Returns:
        ValidationResult; ``message`` is set when ``valid`` is False
    """
    validator = _VALIDATORS.get(question.type)
    if validator is None:
        return _OK
    return validator(value, question)


def _match_option(question: Question, text: str) -> Any:
    for position, option in enumerate(question.options, start=1):
        if text in (str(option.value), option.label, str(position)):
            return option.value
    return None


def parse_answer(question: Question, raw: str) -> Any:
    """
    Convert text entered by a user into the stored answer.

    - integer/number: leading-number parse (None if unreadable)
    - yesno: y/yes/true/1 -> True, n/no/false/0 -> False, else None
    - dropdown/radio: matched by value, label or 1-based position
    - checkboxes: comma-separated values, labels or positions;
      unknown entries dropped
    - text/email: stripped text
    """
    text = raw.strip()
    if question.type is QuestionType.INTEGER:
        return parse_int(text) if text else None
    if question.type is QuestionType.NUMBER:
        return parse_float(text) if text else None
    if question.type is QuestionType.YESNO:
        lowered = text.lower()
        if lowered in ("y", "yes", "true", "1"):
            return True
        if lowered in ("n", "no", "false", "0"):
            return False
        return None
    if question.type in (QuestionType.DROPDOWN, QuestionType.RADIO):
        return _match_option(question, text) if text else None
    if question.type is QuestionType.CHECKBOXES:
        selected = []
        for part in text.split(","):
            part = part.strip()
            if not part:
                continue
            value = _match_option(question, part)
            if value is not None and value not in selected:
                selected.append(value)
        return selected
    return text
