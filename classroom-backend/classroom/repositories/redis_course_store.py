import logging
from typing import List

from redis import Redis
from redis.exceptions import WatchError

from ..domain.errors import ConcurrentUpdateError, NotFoundError
from ..domain.model import Course
from .course_store import stale

logger = logging.getLogger(__name__)


class RedisCourseStore:
    """One JSON document per course, ids kept in a set for listing."""

    def __init__(self, client: Redis, prefix: str = "classroom:", check_version: bool = True) -> None:
        self.client = client
        self.prefix = prefix
        self.check_version = check_version

    # --- Redis keys ---

    def k_course(self, course_id: str) -> str:
        return f"{self.prefix}course:{course_id}"

    def k_index(self) -> str:
        return f"{self.prefix}courses"

    # --- store ---

    def load(self, course_id: str) -> Course:
        raw = self.client.get(self.k_course(course_id))
        if raw is None:
            raise NotFoundError(f"Course {course_id} not found")
        return Course.model_validate_json(raw)

    def save(self, course: Course) -> None:
        key = self.k_course(course.id)
        doc = course.model_copy(update={"version": course.version + 1}).model_dump_json()

        if not self.check_version:
            # last write wins
            with self.client.pipeline() as pipe:
                pipe.set(key, doc)
                pipe.sadd(self.k_index(), course.id)
                pipe.execute()
            course.version += 1
            return

        with self.client.pipeline() as pipe:
            try:
                # WATCH puts the pipeline in immediate mode until MULTI
                pipe.watch(key)
                raw = pipe.get(key)
                stored_version = Course.model_validate_json(raw).version if raw is not None else None
                if stale(course, stored_version):
                    raise ConcurrentUpdateError(f"Course {course.id} was changed by someone else")
                pipe.multi()
                pipe.set(key, doc)
                pipe.sadd(self.k_index(), course.id)
                pipe.execute()
            except WatchError:
                logger.warning("Course %s changed while saving", course.id)
                raise ConcurrentUpdateError(f"Course {course.id} was changed by someone else") from None
        course.version += 1

    def list_all(self) -> List[Course]:
        ids = sorted(self.client.smembers(self.k_index()))
        if not ids:
            return []
        raws = self.client.mget([self.k_course(i) for i in ids])
        return [Course.model_validate_json(raw) for raw in raws if raw is not None]
