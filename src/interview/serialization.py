"""
Serialization helpers for interview objects (Definition, InterviewState).

Definitions are authored as YAML (or JSON) documents:

    metadata:
      title: Voter registration
    questions:
      - id: q1
        variable: age
        type: integer
        question: How old are you?
        required: true
        validation: {min: 0, max: 130}
      - id: q2
        variable: canVote
        type: yesno
        question: Do you want to register?
        show_if: age >= 18
    variables:
      - name: total
        computed: a + b
    templates:
      - name: summary
        content: "# {{metadata.title}}"

Snapshots of an InterviewState use the camelCase shape
``{answers, currentQuestionIndex, visitedQuestions, completed}``.

This module keeps both structures stable and explicit. Nothing outside
the named fields is ever read from a snapshot.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from interview.model import (
    Definition,
    InterviewState,
    Option,
    Question,
    QuestionType,
    Template,
    ValidationRules,
    Variable,
)

logger = logging.getLogger(__name__)


class DefinitionError(Exception):
    """Raised when an interview definition is missing or malformed."""
    pass


# camelCase document key -> ValidationRules attribute
_VALIDATION_KEYS = {
    "minLength": "min_length",
    "maxLength": "max_length",
    "pattern": "pattern",
    "patternMessage": "pattern_message",
    "min": "min",
    "max": "max",
    "minSelect": "min_select",
    "maxSelect": "max_select",
}


def option_to_dict(o: Option) -> Dict[str, Any]:
    return {"value": o.value, "label": o.label}


def option_from_dict(d: Any) -> Option:
    if isinstance(d, dict):
        if "value" not in d:
            raise DefinitionError(f"Option without value: {d!r}")
        value = d["value"]
        return Option(value=value, label=str(d.get("label", value)))
    return Option(value=d, label=str(d))


def validation_to_dict(v: ValidationRules | None) -> Dict[str, Any] | None:
    if v is None:
        return None
    out = {}
    for key, attr in _VALIDATION_KEYS.items():
        value = getattr(v, attr)
        if value is not None:
            out[key] = value
    return out


def validation_from_dict(d: Dict[str, Any] | None) -> ValidationRules | None:
    if d is None:
        return None
    if not isinstance(d, dict):
        raise DefinitionError(f"validation must be a mapping, got {type(d).__name__}")
    return ValidationRules(**{attr: d.get(key) for key, attr in _VALIDATION_KEYS.items()})


def question_to_dict(q: Question) -> Dict[str, Any]:
    d: Dict[str, Any] = {
        "id": q.id,
        "variable": q.variable,
        "type": q.type.value,
        "question": q.question,
        "required": q.required,
    }
    if q.options:
        d["options"] = [option_to_dict(o) for o in q.options]
    if q.validation is not None:
        d["validation"] = validation_to_dict(q.validation)
    if q.show_if is not None:
        d["show_if"] = q.show_if
    if q.computed is not None:
        d["computed"] = q.computed
    if q.help is not None:
        d["help"] = q.help
    return d


def question_from_dict(d: Dict[str, Any], position: int = 0) -> Question:
    if not isinstance(d, dict):
        raise DefinitionError(f"Question #{position + 1} must be a mapping")

    qid = d.get("id")
    if not qid:
        raise DefinitionError(f"Question #{position + 1} has no id")
    variable = d.get("variable")
    if not variable:
        raise DefinitionError(f"Question {qid!r} has no variable")

    try:
        qtype = QuestionType(d.get("type", "text"))
    except ValueError:
        raise DefinitionError(f"Question {qid!r} has unknown type {d.get('type')!r}")

    options = [option_from_dict(o) for o in d.get("options") or []]
    if qtype.has_options and not options:
        raise DefinitionError(f"Question {qid!r} of type {qtype.value} needs options")

    return Question(
        id=str(qid),
        variable=str(variable),
        type=qtype,
        question=str(d.get("question", "")),
        required=bool(d.get("required", False)),
        options=options,
        validation=validation_from_dict(d.get("validation")),
        show_if=d.get("show_if"),
        computed=d.get("computed"),
        help=d.get("help"),
    )


def variable_to_dict(v: Variable) -> Dict[str, Any]:
    d = {"name": v.name, "computed": v.computed}
    if v.description is not None:
        d["description"] = v.description
    return d


def variable_from_dict(d: Dict[str, Any]) -> Variable:
    if not isinstance(d, dict) or not d.get("name"):
        raise DefinitionError(f"Variable without name: {d!r}")
    return Variable(name=d["name"], computed=d.get("computed"), description=d.get("description"))


def template_to_dict(t: Template) -> Dict[str, Any]:
    return {"name": t.name, "content": t.content}


def template_from_dict(d: Any, position: int = 0) -> Template:
    if isinstance(d, str):
        return Template(name=f"template_{position + 1}", content=d)
    if not isinstance(d, dict) or "content" not in d:
        raise DefinitionError(f"Template #{position + 1} has no content")
    return Template(name=d.get("name") or f"template_{position + 1}", content=d["content"])


def definition_to_dict(defn: Definition) -> Dict[str, Any]:
    return {
        "questions": [question_to_dict(q) for q in defn.questions],
        "variables": [variable_to_dict(v) for v in defn.variables],
        "templates": [template_to_dict(t) for t in defn.templates],
        "metadata": defn.metadata,
    }


def definition_from_dict(d: Any) -> Definition:
    """
    Build a Definition from a parsed document.

    Raises:
        DefinitionError: If the document has no questions or any entry
            is malformed
    """
    if not isinstance(d, dict) or not d.get("questions"):
        raise DefinitionError("no questions")
    if not isinstance(d["questions"], list):
        raise DefinitionError("questions must be a list")

    defn = Definition()
    defn.questions = [question_from_dict(q, i) for i, q in enumerate(d["questions"])]
    defn.variables = [variable_from_dict(v) for v in d.get("variables") or []]
    defn.templates = [template_from_dict(t, i) for i, t in enumerate(d.get("templates") or [])]
    defn.metadata = dict(d.get("metadata") or {})

    seen = set()
    for q in defn.questions:
        if q.id in seen:
            raise DefinitionError(f"Duplicate question id: {q.id!r}")
        seen.add(q.id)

    return defn


def definition_to_json(defn: Definition) -> str:
    return json.dumps(definition_to_dict(defn), sort_keys=True)


def definition_from_json(s: str) -> Definition:
    if not s or not s.strip():
        raise DefinitionError("definition is empty")
    try:
        d = json.loads(s)
    except json.JSONDecodeError as e:
        raise DefinitionError(f"Invalid JSON definition: {e}") from e
    return definition_from_dict(d)


def definition_to_yaml(defn: Definition) -> str:
    return yaml.safe_dump(definition_to_dict(defn), sort_keys=False)


def definition_from_yaml(s: str) -> Definition:
    if not s or not s.strip():
        raise DefinitionError("definition is empty")
    try:
        d = yaml.safe_load(s)
    except yaml.YAMLError as e:
        raise DefinitionError(f"Invalid YAML definition: {e}") from e
    return definition_from_dict(d)


def load_definition(path: str | Path) -> Definition:
    """
    Load a definition file. ``.json`` files are read as JSON, anything
    else as YAML.

    Raises:
        DefinitionError: If the file is unreadable, empty or malformed
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise DefinitionError(f"Cannot read definition {path}: {e}") from e

    try:
        if path.suffix.lower() == ".json":
            return definition_from_json(text)
        return definition_from_yaml(text)
    except DefinitionError as e:
        logger.error("Failed to load interview definition %s: %s", path, e)
        raise


def state_to_dict(state: InterviewState) -> Dict[str, Any]:
    """Snapshot an InterviewState. Containers are copied."""
    return {
        "answers": dict(state.answers),
        "currentQuestionIndex": state.current_question_index,
        "visitedQuestions": list(state.visited_questions),
        "completed": state.completed,
    }


def _is_index(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _valid_visited(value: Any) -> bool:
    return isinstance(value, list) and all(_is_index(i) for i in value)


def state_from_dict(snapshot: Optional[Dict[str, Any]], base: Optional[InterviewState] = None) -> InterviewState:
    """
    Merge a snapshot over ``base`` (a fresh state by default).

    Only ``answers``, ``currentQuestionIndex``, ``visitedQuestions`` and
    ``completed`` are read. A field that is absent keeps the default; a
    field of the wrong type (or a negative index) is logged and also
    keeps the default.
    """
    state = base if base is not None else InterviewState()
    if not snapshot:
        return state
    if not isinstance(snapshot, dict):
        logger.warning("Ignoring snapshot of type %s", type(snapshot).__name__)
        return state

    fields: List[tuple] = [
        ("answers", "answers", lambda v: isinstance(v, dict), dict),
        ("currentQuestionIndex", "current_question_index", _is_index, lambda v: v),
        ("visitedQuestions", "visited_questions", _valid_visited, list),
        ("completed", "completed", lambda v: isinstance(v, bool), lambda v: v),
    ]
    for key, attr, check, copy in fields:
        if key not in snapshot:
            continue
        value = snapshot[key]
        if not check(value):
            logger.warning("Ignoring snapshot field %s with invalid value %r", key, value)
            continue
        setattr(state, attr, copy(value))

    return state
