"""
Interview Engine

The state machine that walks a Definition one question at a time.

Responsibilities:
    - Question selection: the first visible question at or after the
      current index (``show_if`` evaluated against the answers)
    - Navigation: advance (push history), retreat (pop history), reset
    - Answers: store, then refresh computed fields
    - Progress: position over the raw question count
    - Observers: synchronous callbacks in subscription order

IMPORTANT:
    The engine is single-threaded and synchronous. Every mutating call
    runs to completion, then notifies observers with the live state.
    An observer that mutates the engine from inside its callback gets
    re-entrant notifications; nothing guards against that.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from interview.coercion import js_round
from interview.config import InterviewConfig
from interview.evaluator import evaluate
from interview.model import Definition, InterviewState, Question
from interview.serialization import DefinitionError, state_from_dict, state_to_dict

logger = logging.getLogger(__name__)

Observer = Callable[[InterviewState], None]


class InterviewEngine:
    """
    Drives one interview over an immutable Definition.

    Example:
        engine = InterviewEngine(definition)
        engine.subscribe(lambda state: print(state.current_question_index))
        question = engine.get_current_question()
        engine.set_answer(question.variable, 20)
        engine.next_question()

    Args:
        definition: Loaded Definition; must contain questions
        debug: Emit detailed DEBUG records for every operation
        config: Optional InterviewConfig; its ``debug`` flag also enables
            debug records

    Raises:
        DefinitionError: If the definition has no questions
    """

    def __init__(self, definition: Definition, debug: bool = False,
                 config: Optional[InterviewConfig] = None):
        if definition is None or not definition.questions:
            raise DefinitionError("no questions")

        self._definition = definition
        self._state = InterviewState()
        self._observers: List[Observer] = []
        self.debug = debug or bool(config and config.debug)

        self._debug_log(
            "InterviewEngine initialized",
            total_questions=len(definition.questions),
            has_variables=bool(definition.variables),
            has_templates=bool(definition.templates),
        )

    # =========================================================================
    # ACCESSORS
    # =========================================================================

    @property
    def definition(self) -> Definition:
        return self._definition

    @property
    def state(self) -> InterviewState:
        """The live state. Mutate it only through the engine."""
        return self._state

    def get_state(self) -> Dict[str, Any]:
        """Snapshot for persistence: ``{answers, currentQuestionIndex, visitedQuestions, completed}``."""
        return state_to_dict(self._state)

    # =========================================================================
    # OBSERVERS
    # =========================================================================

    def subscribe(self, observer: Observer) -> Observer:
        """Register a callback. Returns it so it can be unsubscribed later."""
        self._observers.append(observer)
        return observer

    def unsubscribe(self, observer: Observer) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def _notify_observers(self) -> None:
        for observer in list(self._observers):
            observer(self._state)

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def initialize(self, snapshot: Optional[Dict[str, Any]] = None) -> None:
        """
        Start from a fresh state, with a restored snapshot merged over it.

        Only the four snapshot fields are read; anything else in the
        snapshot is ignored. Observers are notified once.
        """
        self._debug_log(
            "Initializing engine",
            has_saved_state=bool(snapshot),
            saved_state_keys=sorted(snapshot) if isinstance(snapshot, dict) else None,
        )
        self._state = state_from_dict(snapshot, InterviewState())
        self._notify_observers()

    def reset(self) -> None:
        """Discard all answers and history."""
        previous_answers = len(self._state.answers)
        previous_index = self._state.current_question_index

        self._state = InterviewState()

        self._debug_log(
            "Interview reset",
            previous_answer_count=previous_answers,
            previous_index=previous_index,
        )
        self._notify_observers()

    # =========================================================================
    # QUESTION SELECTION
    # =========================================================================

    def should_show_question(self, question: Question) -> bool:
        """
        Visibility of one question.

        No ``show_if`` means visible. An unparseable ``show_if`` is also
        visible (the evaluator fails open), and so is one whose
        evaluation raises.
        """
        if not question.show_if:
            return True
        try:
            return evaluate(question.show_if, self._state.answers, as_boolean=True, debug=self.debug)
        except Exception:
            logger.exception("Error evaluating show_if for question %s: %r", question.id, question.show_if)
            return True

    def get_current_question(self) -> Optional[Question]:
        """
        First visible question at or after the current index.

        The stored index is NOT moved past hidden questions. When no
        visible question remains, ``state.completed`` is set and None is
        returned.
        """
        questions = self._definition.questions
        index = self._state.current_question_index

        self._debug_log("Getting current question", starting_index=index, total_questions=len(questions))

        while index < len(questions):
            question = questions[index]
            visible = self.should_show_question(question)

            self._debug_log(
                "Evaluated question",
                question_id=question.id,
                question_index=index,
                condition=question.show_if or "none",
                visible=visible,
            )

            if visible:
                return question
            index += 1

        self._state.completed = True
        self._debug_log("Interview completed - no more questions")
        return None

    # =========================================================================
    # ANSWERS
    # =========================================================================

    def set_answer(self, variable: str, value: Any) -> None:
        """
        Store an answer, refresh computed fields, notify observers.

        Args:
            variable: Answer-map key (usually ``question.variable``)
            value: bool, number, str, list of str or None
        """
        previous = self._state.answers.get(variable)
        self._state.answers[variable] = value

        self._debug_log(
            "Answer set",
            variable=variable,
            new_value=value,
            previous_value=previous,
            total_answers=len(self._state.answers),
        )

        self.update_computed_fields()
        self._notify_observers()

    def update_computed_fields(self) -> None:
        """
        Re-evaluate every computed field against the current answers.

        Order (authoritative):
            1. Definition.variables, in declaration order
            2. Question.computed (legacy placement), in question order

        A variable that reads a value written in step 2 sees the value
        from the previous pass. Each failure is logged on its own and
        does not stop the others.
        """
        answers = self._state.answers

        for variable in self._definition.variables:
            if not variable.computed:
                continue
            try:
                answers[variable.name] = evaluate(variable.computed, answers, debug=self.debug)
            except Exception:
                logger.exception("Error computing field %s = %r", variable.name, variable.computed)

        for question in self._definition.questions:
            if not question.computed:
                continue
            try:
                answers[question.variable] = evaluate(question.computed, answers, debug=self.debug)
            except Exception:
                logger.exception("Error computing field %s = %r", question.variable, question.computed)

    # =========================================================================
    # NAVIGATION
    # =========================================================================

    def next_question(self) -> None:
        """Advance one position. No-op once completed."""
        if self._state.completed:
            self._debug_log("Cannot advance - interview already completed")
            return

        previous_index = self._state.current_question_index
        self._state.visited_questions.append(previous_index)
        self._state.current_question_index += 1

        self._debug_log(
            "Moving to next question",
            from_index=previous_index,
            to_index=self._state.current_question_index,
            visited_questions=list(self._state.visited_questions),
        )

        if self.get_current_question() is None:
            self._state.completed = True
            self._debug_log("Interview completed after navigation")

        self._notify_observers()

    def previous_question(self) -> None:
        """
        Return to the previously-current index. No-op with empty history.

        The restored index is not re-checked for visibility; the next
        ``get_current_question`` call scans forward from it.
        """
        if not self._state.visited_questions:
            self._debug_log("Cannot go back - no visited questions")
            return

        previous_index = self._state.current_question_index
        self._state.current_question_index = self._state.visited_questions.pop()
        self._state.completed = False

        self._debug_log(
            "Moving to previous question",
            from_index=previous_index,
            to_index=self._state.current_question_index,
            remaining_visited=list(self._state.visited_questions),
        )
        self._notify_observers()

    def get_progress(self) -> int:
        """
        Percentage 0-100.

        Position over the RAW question count, so skipped conditional
        questions make progress jump. 100 once completed.
        """
        if self._state.completed:
            return 100
        total = len(self._definition.questions)
        return js_round(self._state.current_question_index / total * 100)

    # =========================================================================
    # DEBUG
    # =========================================================================

    def _debug_log(self, message: str, **data: Any) -> None:
        if not self.debug:
            return
        details = ", ".join(f"{key}={value!r}" for key, value in data.items())
        logger.debug(
            "%s%s [index=%d answers=%d visited=%d completed=%s]",
            message,
            f" ({details})" if details else "",
            self._state.current_question_index,
            len(self._state.answers),
            len(self._state.visited_questions),
            self._state.completed,
        )
