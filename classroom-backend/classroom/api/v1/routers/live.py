from fastapi import APIRouter

from ....schemas.course_schemas import LiveFormOut
from ..deps import ServiceDep, UserDep

router = APIRouter(prefix="/live", tags=["live"])


# clients poll these; there is no push channel
@router.get("/", response_model=list[LiveFormOut])
async def list_live(svc: ServiceDep, user_id: UserDep):
    return [LiveFormOut(course_id=course.id, form=form) for course, form in svc.list_live()]


@router.get("/{connect_code}", response_model=LiveFormOut)
async def find_live_form(connect_code: int, svc: ServiceDep, user_id: UserDep):
    course, form = svc.find_by_connect_code(connect_code)
    return LiveFormOut(course_id=course.id, form=form)
