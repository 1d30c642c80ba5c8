"""
Definition Analyzer: early diagnostics for interview definitions.

Produces a read-only report covering:
    - Inventory counts
    - Expressions that do not parse (they fail open / closed at runtime)
    - Variables read by expressions that nothing ever writes
    - Choice questions without options, duplicate question ids
    - Computed fields that read a value written later in the same pass
      (they see the previous pass's value)

IMPORTANT: This module does NOT modify the definition.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from interview.expressions import BareWord, BinaryExpression, ExpressionSyntaxError, parse_expression
from interview.model import Definition


@dataclass
class DefinitionReport:
    """Analysis report for a definition."""

    title: Optional[str] = None
    total_questions: int = 0
    total_variables: int = 0
    total_templates: int = 0
    conditional_questions: int = 0
    computed_fields: int = 0

    # Problems
    duplicate_question_ids: Set[str] = field(default_factory=set)
    invalid_expressions: Dict[str, str] = field(default_factory=dict)  # location -> expression
    undefined_variables: Set[str] = field(default_factory=set)
    questions_missing_options: List[str] = field(default_factory=list)
    stale_references: List[str] = field(default_factory=list)

    # Usage
    variable_usage: Dict[str, int] = field(default_factory=dict)

    warnings: List[str] = field(default_factory=list)

    def add_warning(self, msg: str) -> None:
        """Add a warning to the report."""
        if msg not in self.warnings:
            self.warnings.append(msg)


def _parse(expression: str) -> Optional[BinaryExpression]:
    try:
        return parse_expression(expression)
    except ExpressionSyntaxError:
        return None


def analyze_definition(definition: Definition) -> DefinitionReport:
    """
    Perform analysis of a Definition.

    Returns a DefinitionReport with metrics and warnings.
    """
    report = DefinitionReport(title=definition.metadata.get("title"))

    report.total_questions = len(definition.questions)
    report.total_variables = len(definition.variables)
    report.total_templates = len(definition.templates)

    # Everything that is ever written to the answer map
    produced: Set[str] = {q.variable for q in definition.questions}
    produced.update(v.name for v in definition.variables)

    usage: Dict[str, int] = defaultdict(int)

    def check(location: str, expression: str) -> Optional[str]:
        expr = _parse(expression)
        if expr is None:
            report.invalid_expressions[location] = expression
            return None
        name = expr.left.name
        usage[name] += 1
        if isinstance(expr.right, BareWord) and expr.right.text in produced:
            usage[expr.right.text] += 1
        if name not in produced:
            report.undefined_variables.add(name)
        return name

    # =========================================================================
    # 1. QUESTIONS
    # =========================================================================

    seen_ids: Set[str] = set()
    for question in definition.questions:
        if question.id in seen_ids:
            report.duplicate_question_ids.add(question.id)
        seen_ids.add(question.id)

        if question.type.has_options and not question.options:
            report.questions_missing_options.append(question.id)

        if question.show_if:
            report.conditional_questions += 1
            check(f"question {question.id} show_if", question.show_if)

    # =========================================================================
    # 2. COMPUTED FIELDS (evaluation order: variables, then questions)
    # =========================================================================

    order: List[tuple] = [
        (f"variable {v.name}", v.name, v.computed)
        for v in definition.variables if v.computed
    ]
    order.extend(
        (f"question {q.id} computed", q.variable, q.computed)
        for q in definition.questions if q.computed
    )
    report.computed_fields = len(order)

    for position, (location, target, expression) in enumerate(order):
        name = check(location, expression)
        if name is None:
            continue
        written_later = [t for _, t, _ in order[position + 1:]]
        if name in written_later and name != target:
            report.stale_references.append(f"{location} reads {name} before it is recomputed")

    report.variable_usage = dict(usage)

    # =========================================================================
    # 3. WARNING FLAGS
    # =========================================================================

    if report.duplicate_question_ids:
        report.add_warning(
            f"Duplicate question ids: {', '.join(sorted(report.duplicate_question_ids))}"
        )

    for location, expression in report.invalid_expressions.items():
        report.add_warning(f"Unparseable expression in {location}: {expression!r}")

    if report.undefined_variables:
        report.add_warning(
            f"Undefined variable references: {', '.join(sorted(report.undefined_variables))}"
        )

    if report.questions_missing_options:
        report.add_warning(
            f"Choice questions without options: {', '.join(report.questions_missing_options)}"
        )

    for message in report.stale_references:
        report.add_warning(f"Stale computed read: {message}")

    return report
