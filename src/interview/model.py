"""
Core Interview Model Objects

Defines the fundamental data structures of an interview:
    - Options (choices of a choice question)
    - ValidationRules (per-question input constraints)
    - Questions (one prompt each, in order)
    - Variables (computed-field declarations)
    - Templates (document sources)
    - Definition (root container)
    - InterviewState (the mutable progress of one interview)

ARCHITECTURAL RULE:
    Definition objects are loaded once and never mutated by the engine.
    InterviewState is the only mutable object, and only the engine
    writes to it.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class QuestionType(Enum):
    """Input kinds a question can ask for."""

    TEXT = "text"
    EMAIL = "email"
    INTEGER = "integer"
    NUMBER = "number"
    YESNO = "yesno"
    DROPDOWN = "dropdown"
    RADIO = "radio"
    CHECKBOXES = "checkboxes"

    @property
    def has_options(self) -> bool:
        return self in (QuestionType.DROPDOWN, QuestionType.RADIO, QuestionType.CHECKBOXES)


@dataclass
class Option:
    """One selectable choice: the stored value and the label shown."""

    value: Any
    label: str


@dataclass
class ValidationRules:
    """
    Input constraints for a question.

    Which fields apply depends on the question type:
        text:       min_length, max_length, pattern, pattern_message
        integer:    min, max
        number:     min, max
        checkboxes: min_select, max_select

    Every field is optional. None means "no constraint".
    """

    min_length: Optional[int] = None
    max_length: Optional[int] = None
    pattern: Optional[str] = None
    pattern_message: Optional[str] = None
    min: Optional[float] = None
    max: Optional[float] = None
    min_select: Optional[int] = None
    max_select: Optional[int] = None


@dataclass
class Question:
    """
    A single interview question.

    Properties:
        id:
            Unique identifier within the definition
            Examples: "q1", "employment_status"

        variable:
            Answer-map key the answer is stored under.
            Need not be unique; the last write wins.

        type:
            QuestionType

        question:
            Prompt text

        required:
            Whether an empty answer is rejected by validation

        options:
            Choices, required for dropdown/radio/checkboxes

        validation:
            Optional ValidationRules

        show_if:
            Optional single-operator condition, e.g. "age >= 18".
            If None: always shown.

        computed:
            Optional single-operator expression whose result is written
            to ``variable`` after every answer. Prefer Definition.variables.

        help:
            Optional hint text
    """

    id: str
    variable: str
    type: QuestionType
    question: str
    required: bool = False
    options: List[Option] = field(default_factory=list)
    validation: Optional[ValidationRules] = None
    show_if: Optional[str] = None
    computed: Optional[str] = None
    help: Optional[str] = None


@dataclass
class Variable:
    """
    Declares a computed field.

    Properties:
        name: Answer-map key the result is written to
        computed: Single-operator expression, e.g. "a + b"
        description: Human-readable description (optional)

    Declared variables are evaluated in order, before any legacy
    Question.computed expression.
    """

    name: str
    computed: Optional[str] = None
    description: Optional[str] = None


@dataclass
class Template:
    """
    A document template.

    ``content`` is the template text itself (Mustache-style markup).
    """

    name: str
    content: str


@dataclass
class Definition:
    """
    Root container for an interview.

    Properties:
        questions:
            Ordered questions. The engine indexes into this list.

        variables:
            Computed-field declarations

        templates:
            Document templates; the first one is the default

        metadata:
            Arbitrary key-value pairs, e.g. {"title": "Intake form"}

    INVARIANTS:
        - Question ids are unique
        - Choice questions carry options
        - Never mutated after loading
    """

    questions: List[Question] = field(default_factory=list)
    variables: List[Variable] = field(default_factory=list)
    templates: List[Template] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def get_question(self, question_id: str) -> Optional[Question]:
        """
        Retrieve a question by ID.

        Args:
            question_id: Question identifier

        Returns:
            Question object or None if not found
        """
        for question in self.questions:
            if question.id == question_id:
                return question
        return None

    def get_variable(self, name: str) -> Optional[Variable]:
        """
        Retrieve a computed-field declaration by name.

        Args:
            name: Variable name

        Returns:
            Variable object or None if not found
        """
        for variable in self.variables:
            if variable.name == name:
                return variable
        return None

    def index_of(self, question_id: str) -> Optional[int]:
        """Position of a question in ``questions``, or None."""
        for index, question in enumerate(self.questions):
            if question.id == question_id:
                return index
        return None


@dataclass
class InterviewState:
    """
    Mutable progress of one interview.

    Properties:
        answers:
            Answer map: variable name -> bool, number, str, list of str
            or None

        current_question_index:
            Index into Definition.questions (NOT a question id)

        visited_questions:
            Stack of previously-current indices. Pushed on advance,
            popped on retreat.

        completed:
            True once no visible question remains at or after
            current_question_index

    INVARIANTS:
        - current_question_index only moves by +1 on advance or by a pop
          on retreat
        - len(visited_questions) equals advances minus retreats since
          the last reset
    """

    answers: Dict[str, Any] = field(default_factory=dict)
    current_question_index: int = 0
    visited_questions: List[int] = field(default_factory=list)
    completed: bool = False
