from __future__ import annotations

import random
from typing import Iterable, Optional

from ..schemas.course_schemas import CourseCreateIn, CourseDefinition
from .enums import FormKind
from .errors import ValidationError
from .forms import DEFAULT_CODE_RANGE, ensure_owner, update_form
from .model import Actor, Course


def _require(value: Optional[str], field: str) -> str:
    if not value or not value.strip():
        raise ValidationError(field, "must not be empty")
    return value


def create_course(definition: CourseCreateIn, owner_id: str) -> Course:
    """A new, empty course owned by ``owner_id``."""
    if not owner_id:
        raise ValidationError("owner", "a course needs an owner")
    return Course(
        name=_require(definition.name, "name"),
        description=_require(definition.description, "description"),
        key=_require(definition.key, "key"),
        owners=[owner_id],
    )


def import_course(
    course: Course,
    definition: CourseDefinition,
    actor: Actor,
    taken_codes: Iterable[int] = (),
    rng: Optional[random.Random] = None,
    code_range: tuple[int, int] = DEFAULT_CODE_RANGE,
) -> Course:
    """Apply a whole course definition: header fields, then every form by key."""
    ensure_owner(course, actor)
    course.name = _require(definition.name, "name")
    course.description = _require(definition.description, "description")
    if definition.key:
        course.key = definition.key

    taken = set(taken_codes)
    for kind, forms in ((FormKind.FEEDBACK, definition.feedback_forms), (FormKind.QUIZ, definition.quiz_forms)):
        for idx, form_def in enumerate(forms):
            if not form_def.key:
                raise ValidationError(f"{kind.value}_forms[{idx}].key", "must not be empty")
            form = update_form(course, kind, form_def.key, form_def, actor, taken, rng, code_range)
            taken.add(form.connect_code)
    return course
