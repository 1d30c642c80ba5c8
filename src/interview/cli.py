"""
Command-line front end.

    interview run DEFINITION [--resume] [--debug] [--config FILE]
    interview check DEFINITION
    interview diagram DEFINITION [--detailed] [-o FILE]

``run`` asks the questions in the terminal. Besides answers it accepts
``:back``, ``:reset`` and ``:quit``. Progress is saved after every step,
so ``--resume`` picks up where the last run stopped.

After a skipped conditional branch the next visible question is asked
once more for each skipped question; the position only advances by one
per answer.
"""

import argparse
import logging
import sys
from typing import Callable, List, Optional

import yaml

from interview.analyzer import analyze_definition
from interview.backends import DiagramMode, generate_mermaid, save_mermaid_file
from interview.config import load_config
from interview.engine import InterviewEngine
from interview.logging_setup import configure_logging
from interview.model import QuestionType
from interview.persistence import StateStore
from interview.serialization import DefinitionError, load_definition
from interview.templates import prepare_template_data
from interview.validator import parse_answer, validate

logger = logging.getLogger(__name__)

BACK = ":back"
RESET = ":reset"
QUIT = ":quit"


def run_interview(engine: InterviewEngine, store: Optional[StateStore] = None,
                  input_fn: Callable[[str], str] = input,
                  out: Callable[[str], None] = print) -> bool:
    """
    Ask questions until the interview completes or the user quits.

    Returns:
        True if the interview completed, False if the user quit
    """
    def save() -> None:
        if store is not None:
            store.save(engine.get_state())

    while True:
        question = engine.get_current_question()
        if question is None:
            break

        out(f"[{engine.get_progress():3d}%] {question.question}")
        if question.help:
            out(f"       {question.help}")
        for position, option in enumerate(question.options, start=1):
            out(f"   {position}. {option.label}")
        if question.type is QuestionType.YESNO:
            out("   (yes/no)")
        elif question.type is QuestionType.CHECKBOXES:
            out("   (numbers separated by commas)")

        try:
            raw = input_fn("> ")
        except EOFError:
            raw = QUIT
        command = raw.strip()

        if command == QUIT:
            save()
            return False
        if command == BACK:
            engine.previous_question()
            save()
            continue
        if command == RESET:
            engine.reset()
            if store is not None:
                store.clear()
            continue

        value = parse_answer(question, raw)
        checked = command if question.type in (QuestionType.INTEGER, QuestionType.NUMBER) and value is None else value
        result = validate(question, checked)
        if not result.valid:
            out(f"   ! {result.message}")
            continue

        engine.set_answer(question.variable, value)
        engine.next_question()
        save()

    save()
    return True


def _cmd_run(args: argparse.Namespace) -> int:
    config = load_config(args.config, debug=True if args.debug else None)
    configure_logging(config.log_level, debug=config.debug)

    definition = load_definition(args.definition)
    engine = InterviewEngine(definition, config=config)
    store = StateStore.from_config(config.storage)

    engine.initialize(store.load() if args.resume else None)

    if not run_interview(engine, store):
        print("Progress saved. Run again with --resume to continue.")
        return 0

    print()
    print("Interview complete.")
    data = prepare_template_data(definition, engine.state.answers)
    print(yaml.safe_dump(data, sort_keys=False, allow_unicode=True))
    return 0


def _cmd_check(args: argparse.Namespace) -> int:
    definition = load_definition(args.definition)
    report = analyze_definition(definition)

    print(f"Definition: {report.title or args.definition}")
    print(f"  Questions:             {report.total_questions}")
    print(f"  Conditional questions: {report.conditional_questions}")
    print(f"  Computed fields:       {report.computed_fields}")
    print(f"  Templates:             {report.total_templates}")
    if report.warnings:
        print("Warnings:")
        for i, warning in enumerate(report.warnings, 1):
            print(f"  {i}. {warning}")
    else:
        print("No warnings.")

    return 1 if report.invalid_expressions else 0


def _cmd_diagram(args: argparse.Namespace) -> int:
    definition = load_definition(args.definition)
    mode = DiagramMode.DETAILED if args.detailed else DiagramMode.SIMPLE
    if args.output:
        save_mermaid_file(definition, args.output, mode=mode)
        print(f"Saved {args.output}")
    else:
        print(generate_mermaid(definition, mode=mode), end="")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="interview", description="Run and inspect guided interviews")
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Run an interview in the terminal")
    run.add_argument("definition", help="Path to a YAML or JSON definition")
    run.add_argument("--resume", action="store_true", help="Continue from saved progress")
    run.add_argument("--debug", action="store_true", help="Log every engine step")
    run.add_argument("--config", help="Path to a YAML config file")
    run.set_defaults(func=_cmd_run)

    check = sub.add_parser("check", help="Analyze a definition and list problems")
    check.add_argument("definition", help="Path to a YAML or JSON definition")
    check.set_defaults(func=_cmd_check)

    diagram = sub.add_parser("diagram", help="Print the Mermaid flowchart of a definition")
    diagram.add_argument("definition", help="Path to a YAML or JSON definition")
    diagram.add_argument("--detailed", action="store_true", help="Label conditional edges")
    diagram.add_argument("-o", "--output", help="Write to a file instead of stdout")
    diagram.set_defaults(func=_cmd_diagram)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return args.func(args)
    except DefinitionError as e:
        print(f"Cannot load interview: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
