"""Form lifecycle, creation from submitted definitions, and participation.

Every function here works on an in-memory Course (or one of its forms) and
mutates it in place; persisting the course afterwards is the caller's job.
"""

from __future__ import annotations

import random
import uuid
from typing import Collection, Iterable, List, Optional, Union

from ..schemas.course_schemas import FormDefinition
from .enums import CHOICE_TYPES, FormKind, FormStatus, FeedbackQuestionType, QuizQuestionType, YES_NO_VALUES
from .errors import AliasConflict, InvalidStateError, NotFoundError, PermissionDeniedError, ValidationError
from .model import Actor, AnyForm, Course, FeedbackForm, QuestionWrapper, QuizForm, Result
from .question_bank import find_existing, find_or_create, validate_question

DEFAULT_CODE_RANGE = (100000, 999999)


def ensure_owner(course: Course, actor: Actor) -> None:
    if not actor.is_owner:
        raise PermissionDeniedError(f"User {actor.user_id} is not an owner of course {course.id}")


def allocate_connect_code(
    taken: Collection[int],
    rng: Optional[random.Random] = None,
    code_range: tuple[int, int] = DEFAULT_CODE_RANGE,
) -> int:
    """Draw codes from ``code_range`` (inclusive) until one is not taken."""
    low, high = code_range
    if sum(1 for c in set(taken) if low <= c <= high) >= high - low + 1:
        raise InvalidStateError("No free connect code left")
    rng = rng or random.Random()
    while True:
        code = rng.randint(low, high)
        if code not in taken:
            return code


def reserved_codes(course: Course, extra: Iterable[int] = ()) -> set[int]:
    codes = set(extra)
    codes.update(f.connect_code for f in course.all_forms() if f.status is not FormStatus.FINISHED)
    return codes


def _validate_form_header(definition: FormDefinition) -> None:
    if not definition.name:
        raise ValidationError("name", "must not be empty")
    if not definition.description:
        raise ValidationError("description", "must not be empty")
    if not definition.questions:
        raise ValidationError("questions", "a form needs at least one question")


def _validate_questions(kind: FormKind, definition: FormDefinition) -> None:
    for idx, q in enumerate(definition.questions):
        validate_question(kind, q, f"questions[{idx}]")


def _collect_question_ids(course: Course, kind: FormKind, definition: FormDefinition) -> List[str]:
    return [
        find_or_create(course, kind, q, f"questions[{idx}]")
        for idx, q in enumerate(definition.questions)
    ]


def create_form(
    course: Course,
    kind: FormKind,
    definition: FormDefinition,
    actor: Actor,
    taken_codes: Iterable[int] = (),
    rng: Optional[random.Random] = None,
    code_range: tuple[int, int] = DEFAULT_CODE_RANGE,
) -> AnyForm:
    """Build a NOT_STARTED form from a definition and add it to the course.

    New questions land in the course's bank. Nothing is touched unless the
    whole definition is valid.
    """
    kind = FormKind(kind)
    ensure_owner(course, actor)
    _validate_form_header(definition)
    _validate_questions(kind, definition)

    key = definition.key or uuid.uuid4().hex[:8]
    if course.form_by_key(kind, key) is not None:
        raise ValidationError("key", f"a {kind.value} form with key '{key}' already exists")

    code = allocate_connect_code(reserved_codes(course, taken_codes), rng, code_range)
    wrappers = [QuestionWrapper(question_id=qid) for qid in _collect_question_ids(course, kind, definition)]

    form_cls = FeedbackForm if kind is FormKind.FEEDBACK else QuizForm
    form = form_cls(
        course_id=course.id,
        name=definition.name,
        description=definition.description,
        key=key,
        connect_code=code,
        questions=wrappers,
    )
    course.forms_of(kind).append(form)
    return form


def update_form(
    course: Course,
    kind: FormKind,
    existing_key: str,
    definition: FormDefinition,
    actor: Actor,
    taken_codes: Iterable[int] = (),
    rng: Optional[random.Random] = None,
    code_range: tuple[int, int] = DEFAULT_CODE_RANGE,
) -> AnyForm:
    """Merge a resubmitted definition into the form with ``existing_key``.

    Unknown keys create a new form. Known forms only ever gain questions:
    wrappers missing from the resubmission are kept.
    """
    kind = FormKind(kind)
    ensure_owner(course, actor)
    form = course.form_by_key(kind, existing_key)
    if form is None:
        definition = definition.model_copy(update={"key": existing_key})
        return create_form(course, kind, definition, actor, taken_codes, rng, code_range)

    for idx, q in enumerate(definition.questions):
        if find_existing(course, kind, q.name, q.description) is None:
            validate_question(kind, q, f"questions[{idx}]")

    if definition.name:
        form.name = definition.name
    if definition.description:
        form.description = definition.description
    for qid in _collect_question_ids(course, kind, definition):
        if form.wrapper_for(qid) is None:
            form.questions.append(QuestionWrapper(question_id=qid))
    return form


# --- lifecycle ---

def _require_status(form: AnyForm, *allowed: FormStatus) -> None:
    if form.status not in allowed:
        wanted = " or ".join(s.value for s in allowed)
        raise InvalidStateError(f"Form {form.id} is {form.status.value}, expected {wanted}")


def start_form(form: AnyForm) -> None:
    _require_status(form, FormStatus.NOT_STARTED)
    form.status = FormStatus.STARTED
    if isinstance(form, QuizForm):
        form.current_question_index = 0
        form.current_question_finished = False


def finish_form(form: AnyForm) -> None:
    _require_status(form, FormStatus.STARTED)
    form.status = FormStatus.FINISHED


def next_question(form: QuizForm) -> int:
    _require_status(form, FormStatus.STARTED)
    if form.current_question_index + 1 >= len(form.questions):
        raise InvalidStateError("That was the last question")
    form.current_question_index += 1
    form.current_question_finished = False
    return form.current_question_index


def reveal_question(form: QuizForm) -> None:
    _require_status(form, FormStatus.STARTED)
    form.current_question_finished = True


# --- participation ---

def join(form: AnyForm, user_id: str, alias: str) -> None:
    """Register ``user_id`` under ``alias``; re-joining replaces the old alias."""
    _require_status(form, FormStatus.STARTED)
    alias = (alias or "").strip()
    if not alias:
        raise ValidationError("alias", "must not be empty")
    holder = form.alias_holder(alias)
    if holder is not None and holder != user_id:
        raise AliasConflict(alias)
    form.participants[user_id] = alias


def _normalize_answer(answer: Union[str, List[str], None]) -> List[str]:
    if answer is None:
        return []
    if isinstance(answer, str):
        return [answer]
    return list(answer)


def _check_answer(kind: FormKind, question, values: List[str]) -> None:
    if not values or any(v is None or str(v).strip() == "" for v in values):
        raise ValidationError("answer", "must not be empty")
    multi = question.type == QuizQuestionType.MULTIPLE_CHOICE
    if not multi and len(values) != 1:
        raise ValidationError("answer", f"{question.type.value} questions take exactly one value")
    if len(set(values)) != len(values):
        raise ValidationError("answer", "values must not repeat")
    if question.type.value in CHOICE_TYPES[kind]:
        unknown = [v for v in values if v not in question.options]
        if unknown:
            raise ValidationError("answer", f"{unknown} not among the options")
    if question.type in (FeedbackQuestionType.YES_NO, QuizQuestionType.YES_NO):
        if values[0].lower() not in YES_NO_VALUES:
            raise ValidationError("answer", "must be 'yes' or 'no'")
    if question.type == QuizQuestionType.NUMBER:
        try:
            float(values[0])
        except ValueError:
            raise ValidationError("answer", "must be a number") from None


def submit_answer(
    form: AnyForm,
    course: Course,
    user_id: str,
    question_id: str,
    answer: Union[str, List[str]],
) -> Result:
    """Store ``user_id``'s answer to ``question_id``, replacing an earlier one."""
    _require_status(form, FormStatus.STARTED)
    if user_id not in form.participants:
        raise NotFoundError(f"Participant {user_id} has not joined form {form.id}")
    wrapper = form.wrapper_for(question_id)
    if wrapper is None:
        raise NotFoundError(f"Question {question_id} is not part of form {form.id}")

    kind = FormKind(form.kind)
    values = _normalize_answer(answer)
    question = course.question(kind, question_id)
    _check_answer(kind, question, values)
    if question.type in (FeedbackQuestionType.YES_NO, QuizQuestionType.YES_NO):
        values = [v.lower() for v in values]

    result = Result(user_id=user_id, values=values)
    wrapper.results = [r for r in wrapper.results if r.user_id != user_id]
    wrapper.results.append(result)
    return result
