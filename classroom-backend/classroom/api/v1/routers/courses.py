from fastapi import APIRouter, status

from ....schemas.course_schemas import CourseCreateIn, CourseDefinition, CourseOut
from ..deps import ServiceDep, UserDep

router = APIRouter(prefix="/courses", tags=["courses"])


@router.get("/", response_model=list[CourseOut])
async def list_courses(svc: ServiceDep, user_id: UserDep):
    return svc.list_courses()


@router.post("/", response_model=CourseOut, status_code=status.HTTP_201_CREATED)
async def create_course(payload: CourseCreateIn, svc: ServiceDep, user_id: UserDep):
    return svc.create_course(payload, user_id)


@router.get("/{course_id}", response_model=CourseOut)
async def get_course(course_id: str, svc: ServiceDep, user_id: UserDep):
    return svc.get_course(course_id)


@router.put("/{course_id}", response_model=CourseOut)
async def import_course(course_id: str, payload: CourseDefinition, svc: ServiceDep, user_id: UserDep):
    return svc.import_course(course_id, payload, user_id)
