"""Cross-course view of the sessions that are currently running."""

from __future__ import annotations

from typing import Iterable, List, Tuple

from .enums import FormStatus
from .errors import NotFoundError
from .model import AnyForm, Course
from .views import without_results


def list_live(
    courses: Iterable[Course],
    include_results: bool = False,
    legacy: bool = False,
) -> List[Tuple[Course, AnyForm]]:
    """Running forms in course-scan order, feedback forms before quiz forms.

    Each STARTED form appears once, redacted unless ``include_results``.
    ``legacy`` keeps the old feed: the full form when started, and on top of
    that a redacted copy of every form whatever its status.
    """
    live: List[Tuple[Course, AnyForm]] = []
    for course in courses:
        for form in course.all_forms():
            started = form.status is FormStatus.STARTED
            if legacy:
                if started:
                    live.append((course, form.model_copy(deep=True)))
                live.append((course, without_results(form)))
            elif started:
                live.append((course, form.model_copy(deep=True) if include_results else without_results(form)))
    return live


def find_by_connect_code(courses: Iterable[Course], code: int) -> Tuple[Course, AnyForm]:
    for course in courses:
        for form in course.all_forms():
            if form.connect_code == code and form.status is FormStatus.STARTED:
                return course, form
    raise NotFoundError(f"No running form with connect code {code}")


def active_connect_codes(courses: Iterable[Course]) -> set[int]:
    """Codes held by forms that have not finished yet, across all courses."""
    return {
        form.connect_code
        for course in courses
        for form in course.all_forms()
        if form.status is not FormStatus.FINISHED
    }
