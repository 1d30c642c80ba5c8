"""
Mermaid flowchart generator for interview definitions.

Converts a Definition (and optionally the current InterviewState) into
Mermaid ``flowchart TD`` source. Rendering the source to SVG is left to
Mermaid itself.

Supports two modes:
    - SIMPLE: Linear question flow with current/answered highlighting
    - DETAILED: Also labels the edge into each conditional question with
      its show_if condition
"""

import re
from enum import Enum
from typing import List, Optional, Tuple

from interview.coercion import truthy
from interview.model import Definition, InterviewState, QuestionType

MAX_LABEL_LENGTH = 30


class DiagramMode(Enum):
    """Visualization modes for Mermaid output."""
    SIMPLE = "simple"
    DETAILED = "detailed"


def _node_shape(question_type: QuestionType) -> Tuple[str, str]:
    """Opening and closing delimiters for a question node."""
    if question_type is QuestionType.YESNO:
        return "{", "}"  # decision
    if question_type in (QuestionType.DROPDOWN, QuestionType.RADIO):
        return "[", "]"
    return "(", ")"


def truncate_text(text: str, max_length: int = MAX_LABEL_LENGTH) -> str:
    """Strip characters Mermaid treats as syntax, collapse spaces, shorten."""
    clean = re.sub(r"['\"<>&\[\]{}()]", "", text or "")
    clean = clean.replace("?", "")
    clean = re.sub(r"\s+", " ", clean).strip()
    if len(clean) <= max_length:
        return clean
    return clean[:max_length - 3] + "..."


def format_condition(condition: str) -> str:
    """Readable edge label for a show_if expression."""
    label = re.sub(r"===|==", "=", condition)
    label = re.sub(r"!==|!=", "≠", label)
    label = label.replace("<", "&lt;").replace(">", "&gt;")
    label = label.replace('"', "'").replace("|", "/")
    return label


def generate_mermaid(definition: Definition, state: Optional[InterviewState] = None,
                     mode: DiagramMode = DiagramMode.SIMPLE) -> str:
    """
    Generate Mermaid flowchart source for a definition.

    Args:
        definition: Definition to visualize
        state: Optional state; highlights the current and answered
            questions
        mode: SIMPLE or DETAILED

    Returns:
        String containing the Mermaid flowchart
    """
    lines: List[str] = ["flowchart TD"]
    questions = definition.questions

    # =========================================================================
    # NODES
    # =========================================================================

    lines.append("    Start([Start Interview]);")

    for index, question in enumerate(questions):
        node_id = f"Q{index}"
        opening, closing = _node_shape(question.type)
        lines.append(f"    {node_id}{opening}{truncate_text(question.question)}{closing};")

        if state is not None and index == state.current_question_index:
            lines.append(f"    class {node_id} current;")
        if state is not None and truthy(state.answers.get(question.variable)):
            lines.append(f"    class {node_id} answered;")

    lines.append("    End([Complete Interview]);")
    lines.append("")

    # =========================================================================
    # EDGES
    # =========================================================================

    if questions:
        lines.append("    Start --> Q0;")
        for index in range(len(questions)):
            target = f"Q{index + 1}" if index + 1 < len(questions) else "End"
            condition = questions[index + 1].show_if if index + 1 < len(questions) else None
            if condition and mode == DiagramMode.DETAILED:
                lines.append(f'    Q{index} -->|"{format_condition(condition)}"| {target};')
            else:
                lines.append(f"    Q{index} --> {target};")

    lines.append("")
    lines.append("    classDef current fill:#4CAF50,stroke:#333,stroke-width:4px,color:#fff;")
    lines.append("    classDef answered fill:#2196F3,stroke:#333,stroke-width:2px,color:#fff;")

    return "\n".join(lines) + "\n"


def save_mermaid_file(definition: Definition, filename: str,
                      state: Optional[InterviewState] = None,
                      mode: DiagramMode = DiagramMode.SIMPLE) -> None:
    """
    Generate Mermaid source and save to file.

    Args:
        definition: Definition to visualize
        filename: Output file path (.mmd extension recommended)
        state: Optional state for highlighting
        mode: Visualization mode
    """
    source = generate_mermaid(definition, state=state, mode=mode)
    with open(filename, 'w', encoding='utf-8') as f:
        f.write(source)


__all__ = ["DiagramMode", "generate_mermaid", "save_mermaid_file", "truncate_text", "format_condition"]
