import logging
from typing import List

from supabase import Client

from ..domain.errors import ConcurrentUpdateError, NotFoundError
from ..domain.model import Course

logger = logging.getLogger(__name__)


class SupabaseCourseStore:
    """Courses as jsonb documents in one table: id, version, document."""

    def __init__(self, client: Client, table: str = "courses", check_version: bool = True) -> None:
        self.client = client
        self.table = table
        self.check_version = check_version

    def load(self, course_id: str) -> Course:
        res = (
            self.client.table(self.table)
            .select("document")
            .eq("id", course_id)
            .limit(1)
            .execute()
        )
        if not res.data:
            raise NotFoundError(f"Course {course_id} not found")
        return Course.model_validate(res.data[0]["document"])

    def save(self, course: Course) -> None:
        new_version = course.version + 1
        doc = course.model_copy(update={"version": new_version}).model_dump(mode="json")
        row = {"id": course.id, "version": new_version, "document": doc}

        if not self.check_version:
            self.client.table(self.table).upsert(row).execute()
        elif course.version == 0:
            existing = self.client.table(self.table).select("id").eq("id", course.id).limit(1).execute()
            if existing.data:
                raise ConcurrentUpdateError(f"Course {course.id} already exists")
            self.client.table(self.table).insert(row).execute()
        else:
            # only matches while nobody else has saved since we loaded
            res = (
                self.client.table(self.table)
                .update({"version": new_version, "document": doc})
                .eq("id", course.id)
                .eq("version", course.version)
                .execute()
            )
            if not res.data:
                logger.warning("Rejected save of course %s at version %s", course.id, course.version)
                raise ConcurrentUpdateError(f"Course {course.id} was changed by someone else")
        course.version = new_version

    def list_all(self) -> List[Course]:
        res = self.client.table(self.table).select("document").order("id").execute()
        return [Course.model_validate(r["document"]) for r in (res.data or [])]
