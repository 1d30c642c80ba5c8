"""
Example definitions used by the demo CLI and the test-suite.

build_voting_definition: the smallest conditional interview, an age
question gating a registration question.

build_example_definition: a fuller employment interview with every
question type, a conditional branch, declared computed fields and a
legacy per-question computed field.
"""
from interview.model import (
    Definition,
    Option,
    Question,
    QuestionType,
    Template,
    ValidationRules,
    Variable,
)


def build_voting_definition() -> Definition:
    return Definition(
        questions=[
            Question(id="q1", variable="age", type=QuestionType.INTEGER,
                     question="How old are you?", required=True),
            Question(id="q2", variable="canVote", type=QuestionType.YESNO,
                     question="Would you like to register to vote?", show_if="age >= 18"),
        ],
        metadata={"title": "Voter registration"},
    )


def build_example_definition() -> Definition:
    definition = Definition(metadata={"title": "Employment Interview", "version": "1.0"})

    definition.questions = [
        Question(
            id="name",
            variable="user_name",
            type=QuestionType.TEXT,
            question="What is your full name?",
            required=True,
            validation=ValidationRules(min_length=2, max_length=80),
        ),
        Question(
            id="email",
            variable="email",
            type=QuestionType.EMAIL,
            question="What is your email address?",
        ),
        Question(
            id="employed",
            variable="hasJob",
            type=QuestionType.YESNO,
            question="Are you currently employed?",
            required=True,
        ),
        # Only asked of people with a job
        Question(
            id="employment_type",
            variable="employmentType",
            type=QuestionType.RADIO,
            question="What kind of employment is it?",
            options=[
                Option(value="full_time", label="Full time"),
                Option(value="part_time", label="Part time"),
                Option(value="contract", label="Contract"),
            ],
            show_if="hasJob === true",
        ),
        Question(
            id="salary",
            variable="salary",
            type=QuestionType.NUMBER,
            question="What is your annual salary?",
            validation=ValidationRules(min=0),
            show_if="hasJob === true",
        ),
        Question(
            id="dependents",
            variable="dependents",
            type=QuestionType.INTEGER,
            question="How many dependents do you have?",
            validation=ValidationRules(min=0, max=20),
        ),
        Question(
            id="region",
            variable="region",
            type=QuestionType.DROPDOWN,
            question="Which region do you live in?",
            options=[
                Option(value="north", label="North"),
                Option(value="south", label="South"),
            ],
        ),
        Question(
            id="benefits",
            variable="benefits",
            type=QuestionType.CHECKBOXES,
            question="Which benefits do you receive?",
            options=[
                Option(value="housing", label="Housing"),
                Option(value="childcare", label="Childcare"),
                Option(value="none", label="None"),
            ],
            validation=ValidationRules(max_select=2),
        ),
        # Legacy placement: written to "household" after every answer
        Question(
            id="household",
            variable="household",
            type=QuestionType.INTEGER,
            question="Household size",
            computed="dependents + 1",
        ),
    ]

    definition.variables = [
        Variable(name="monthly_salary", computed="salary / 12",
                 description="Salary spread over twelve months"),
        Variable(name="has_dependents", computed="dependents > 0"),
    ]

    definition.templates = [
        Template(
            name="summary",
            content="# {{metadata.title}}\n\n**Name:** {{user_name}}\n**Household:** {{household}}\n",
        ),
    ]

    return definition
