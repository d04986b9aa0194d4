from typing import Annotated

from fastapi import Depends, Header, HTTPException, status

from ...core.config import settings
from ...repositories.course_store import CourseStore, InMemoryCourseStore
from ...services.course_service import CourseService

_store: CourseStore | None = None


def get_store() -> CourseStore:
    global _store
    if _store is None:
        if settings.COURSE_STORE == "redis":
            from ...core.redis_manager import get_redis
            from ...repositories.redis_course_store import RedisCourseStore

            _store = RedisCourseStore(get_redis(), settings.REDIS_PREFIX, settings.OPTIMISTIC_LOCKING)
        elif settings.COURSE_STORE == "supabase":
            from ...core.supabase_client import get_supabase
            from ...repositories.supabase_course_store import SupabaseCourseStore

            _store = SupabaseCourseStore(get_supabase(), settings.SUPABASE_COURSES_TABLE, settings.OPTIMISTIC_LOCKING)
        else:
            _store = InMemoryCourseStore(settings.OPTIMISTIC_LOCKING)
    return _store


def get_service() -> CourseService:
    return CourseService(
        get_store(),
        code_range=(settings.CONNECT_CODE_MIN, settings.CONNECT_CODE_MAX),
        live_feed_legacy=settings.LIVE_FEED_LEGACY,
    )


def get_user_id(x_user_id: Annotated[str | None, Header()] = None) -> str:
    # authentication happens upstream; we only trust the forwarded subject
    if not x_user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing X-User-Id header")
    return x_user_id


ServiceDep = Annotated[CourseService, Depends(get_service)]
UserDep = Annotated[str, Depends(get_user_id)]
