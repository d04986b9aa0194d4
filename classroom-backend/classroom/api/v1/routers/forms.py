from fastapi import APIRouter, HTTPException, status

from ....domain.enums import FormKind
from ....domain.model import AnyForm
from ....schemas.course_schemas import AnswerIn, FormDefinition, ParticipateIn, ScoreboardEntry
from ..deps import ServiceDep, UserDep

router = APIRouter(prefix="/courses/{course_id}/{kind}/forms", tags=["forms"])


def _quiz_only(kind: FormKind) -> None:
    if kind is not FormKind.QUIZ:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Only quiz forms have this endpoint")


@router.get("/", response_model=list[AnyForm])
async def list_forms(course_id: str, kind: FormKind, svc: ServiceDep, user_id: UserDep):
    return svc.list_forms(course_id, kind, user_id)


@router.post("/", response_model=AnyForm, status_code=status.HTTP_201_CREATED)
async def create_form(course_id: str, kind: FormKind, payload: FormDefinition, svc: ServiceDep, user_id: UserDep):
    return svc.create_form(course_id, kind, payload, user_id)


@router.put("/by-key/{key}", response_model=AnyForm)
async def update_form(
    course_id: str, kind: FormKind, key: str, payload: FormDefinition, svc: ServiceDep, user_id: UserDep
):
    return svc.update_form(course_id, kind, key, payload, user_id)


@router.get("/{form_id}", response_model=AnyForm)
async def get_form(course_id: str, kind: FormKind, form_id: str, svc: ServiceDep, user_id: UserDep, results: bool = False):
    return svc.get_form(course_id, kind, form_id, user_id, results=results)


@router.post("/{form_id}/start", response_model=AnyForm)
async def start_form(course_id: str, kind: FormKind, form_id: str, svc: ServiceDep, user_id: UserDep):
    return svc.start_form(course_id, kind, form_id, user_id)


@router.post("/{form_id}/finish", response_model=AnyForm)
async def finish_form(course_id: str, kind: FormKind, form_id: str, svc: ServiceDep, user_id: UserDep):
    return svc.finish_form(course_id, kind, form_id, user_id)


@router.post("/{form_id}/next", response_model=AnyForm)
async def next_question(course_id: str, kind: FormKind, form_id: str, svc: ServiceDep, user_id: UserDep):
    _quiz_only(kind)
    return svc.next_question(course_id, form_id, user_id)


@router.post("/{form_id}/reveal", response_model=AnyForm)
async def reveal_question(course_id: str, kind: FormKind, form_id: str, svc: ServiceDep, user_id: UserDep):
    _quiz_only(kind)
    return svc.reveal_question(course_id, form_id, user_id)


@router.post("/{form_id}/participate")
async def participate(
    course_id: str, kind: FormKind, form_id: str, payload: ParticipateIn, svc: ServiceDep, user_id: UserDep
):
    svc.join(course_id, kind, form_id, user_id, payload.alias)
    return {"status": "ok"}


@router.post("/{form_id}/answers")
async def submit_answer(
    course_id: str, kind: FormKind, form_id: str, payload: AnswerIn, svc: ServiceDep, user_id: UserDep
):
    svc.submit_answer(course_id, kind, form_id, user_id, payload.question_id, payload.answer)
    return {"status": "ok"}


@router.get("/{form_id}/scoreboard", response_model=list[ScoreboardEntry])
async def scoreboard(course_id: str, kind: FormKind, form_id: str, svc: ServiceDep, user_id: UserDep):
    _quiz_only(kind)
    return svc.scoreboard(course_id, form_id, user_id)


# anonymous polling of a running session: structure only, no answers
@router.get("/{form_id}/public", response_model=AnyForm)
async def get_public_form(course_id: str, kind: FormKind, form_id: str, svc: ServiceDep):
    return svc.get_public_form(course_id, kind, form_id)
