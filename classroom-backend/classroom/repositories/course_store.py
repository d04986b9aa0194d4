"""Whole-document course persistence.

A store keeps one document per course. ``save`` replaces the document as a
whole; with ``check_version`` it refuses to overwrite a document that was
saved by someone else since the given course was loaded.
"""

import logging
from threading import Lock
from typing import Dict, List, Protocol

from ..domain.errors import ConcurrentUpdateError, NotFoundError
from ..domain.model import Course

logger = logging.getLogger(__name__)


class CourseStore(Protocol):
    def load(self, course_id: str) -> Course: ...

    def save(self, course: Course) -> None: ...

    def list_all(self) -> List[Course]: ...


def stale(course: Course, stored_version: int | None) -> bool:
    """True when saving ``course`` would overwrite a newer document."""
    if stored_version is None:
        return course.version != 0
    return stored_version != course.version


class InMemoryCourseStore:
    def __init__(self, check_version: bool = True) -> None:
        self.check_version = check_version
        self._docs: Dict[str, str] = {}
        self._lock = Lock()

    def load(self, course_id: str) -> Course:
        raw = self._docs.get(course_id)
        if raw is None:
            raise NotFoundError(f"Course {course_id} not found")
        return Course.model_validate_json(raw)

    def save(self, course: Course) -> None:
        with self._lock:
            raw = self._docs.get(course.id)
            stored_version = Course.model_validate_json(raw).version if raw is not None else None
            if self.check_version and stale(course, stored_version):
                logger.warning(
                    "Rejected save of course %s: version %s, stored %s",
                    course.id, course.version, stored_version,
                )
                raise ConcurrentUpdateError(f"Course {course.id} was changed by someone else")
            course.version += 1
            self._docs[course.id] = course.model_dump_json()

    def list_all(self) -> List[Course]:
        return [Course.model_validate_json(raw) for raw in list(self._docs.values())]
