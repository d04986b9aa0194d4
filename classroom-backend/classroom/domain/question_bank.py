"""Per-course question bank.

Questions are shared by every form of a course that asks them; two
submissions with the same name and description are the same question.
"""

from __future__ import annotations

from typing import Optional

from ..schemas.course_schemas import QuestionDefinition
from .enums import CHOICE_TYPES, QUESTION_TYPES, FormKind
from .errors import ValidationError
from .model import Course, FeedbackQuestion, QuizQuestion


def validate_question(kind: FormKind, definition: QuestionDefinition, field: str = "question") -> None:
    """Raise ValidationError for the first broken rule of a question definition."""
    kind = FormKind(kind)
    if not definition.name:
        raise ValidationError(f"{field}.name", "must not be empty")
    if not definition.description:
        raise ValidationError(f"{field}.description", "must not be empty")
    if not definition.type:
        raise ValidationError(f"{field}.type", "must not be empty")

    allowed = [t.value for t in QUESTION_TYPES[kind]]
    if definition.type not in allowed:
        raise ValidationError(
            f"{field}.type",
            f"'{definition.type}' is not a {kind.value} question type ({', '.join(allowed)})",
        )

    choice = definition.type in CHOICE_TYPES[kind]
    if choice and len(definition.options) < 2:
        raise ValidationError(f"{field}.options", "choice questions need at least two options")

    if kind is FormKind.QUIZ and definition.has_correct_answer:
        correct = definition.correct_answers()
        if not correct:
            raise ValidationError(f"{field}.correct_answer", "must be given when has_correct_answer is set")
        if choice:
            unknown = [c for c in correct if c not in definition.options]
            if unknown:
                raise ValidationError(f"{field}.correct_answer", f"{unknown} not among the options")


def find_existing(course: Course, kind: FormKind, name: Optional[str], description: Optional[str]) -> Optional[str]:
    for q in course.questions_of(kind):
        if q.name == name and q.description == description:
            return q.id
    return None


def find_or_create(course: Course, kind: FormKind, definition: QuestionDefinition, field: str = "question") -> str:
    """Return the id of the bank entry matching the definition, adding it if new.

    An existing entry is returned as is, even when the new submission differs
    in type or options.
    """
    kind = FormKind(kind)
    existing = find_existing(course, kind, definition.name, definition.description)
    if existing is not None:
        return existing

    validate_question(kind, definition, field)

    if kind is FormKind.FEEDBACK:
        question = FeedbackQuestion(
            name=definition.name,
            description=definition.description,
            type=definition.type,
            options=list(definition.options),
            key=definition.key,
            range_low=definition.range_low,
            range_high=definition.range_high,
        )
    else:
        question = QuizQuestion(
            name=definition.name,
            description=definition.description,
            type=definition.type,
            options=list(definition.options),
            key=definition.key,
            has_correct_answer=definition.has_correct_answer,
            correct_answers=definition.correct_answers() if definition.has_correct_answer else [],
        )
    course.questions_of(kind).append(question)
    return question.id
