"""
Document Template Binder

Flattens a Definition and its answers into the data object a template
renderer receives. Rendering itself (Mustache, Markdown, HTML) happens
outside this package.

Shape:
    {
        "metadata":     definition.metadata,
        "current_date": "10/17/2026",
        "current_time": "3:04:05 PM",
        "questions":    [{"question": ..., "answer": ...}, ...],
        <every answer as a top-level key>
    }

Answers are spread last, so an answer named ``metadata`` or
``questions`` replaces the fixed key.
"""

from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from interview.coercion import truthy
from interview.model import Definition

NOT_ANSWERED = "Not answered"

DEFAULT_TEMPLATE = """# {{metadata.title}}

## Summary Information

**Name:** {{user_name}}
**Date:** {{current_date}}

## Responses

{{#questions}}
### {{question}}
**Answer:** {{answer}}

{{/questions}}

---
*Generated on {{current_date}} at {{current_time}}*
"""


def format_date(now: datetime) -> str:
    return f"{now.month}/{now.day}/{now.year}"


def format_time(now: datetime) -> str:
    hour = now.hour % 12 or 12
    return f"{hour}:{now.minute:02d}:{now.second:02d} {'AM' if now.hour < 12 else 'PM'}"


def prepare_template_data(definition: Definition, answers: Mapping[str, Any],
                          now: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Build template data from a definition and an answer map.

    Args:
        definition: The interview definition
        answers: Answer map (engine.state.answers)
        now: Timestamp for the date/time fields (defaults to now)

    Returns:
        Flat dict ready for a template renderer. An answer that is
        empty, zero or False is listed as "Not answered".
    """
    now = now or datetime.now()
    questions = [
        {
            "question": q.question,
            "answer": answers.get(q.variable) if truthy(answers.get(q.variable)) else NOT_ANSWERED,
        }
        for q in definition.questions
    ]

    data: Dict[str, Any] = {
        "metadata": dict(definition.metadata),
        "current_date": format_date(now),
        "current_time": format_time(now),
        "questions": questions,
    }
    data.update(answers)
    return data


def select_template(definition: Definition) -> str:
    """Content of the first declared template, or the built-in default."""
    if definition.templates:
        return definition.templates[0].content
    return DEFAULT_TEMPLATE
