"""Course aggregate and the entities it owns.

A Course is persisted as one document: its question banks, its forms and
everything collected inside those forms. Forms and questions come in two
variants, told apart by their ``kind`` tag.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Annotated, Dict, Iterator, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .enums import FeedbackQuestionType, FormKind, FormStatus, QuizQuestionType
from .errors import NotFoundError


def new_id() -> str:
    return str(uuid.uuid4())


class CamelModel(BaseModel):
    # snake_case in python, camelCase on the wire
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- questions ---

class FeedbackQuestion(CamelModel):
    kind: Literal["feedback"] = "feedback"
    id: str = Field(default_factory=new_id)
    name: str
    description: str
    type: FeedbackQuestionType
    options: List[str] = Field(default_factory=list)
    key: Optional[str] = None
    range_low: Optional[str] = None
    range_high: Optional[str] = None


class QuizQuestion(CamelModel):
    kind: Literal["quiz"] = "quiz"
    id: str = Field(default_factory=new_id)
    name: str
    description: str
    type: QuizQuestionType
    options: List[str] = Field(default_factory=list)
    key: Optional[str] = None
    has_correct_answer: bool = False
    correct_answers: List[str] = Field(default_factory=list)


Question = Annotated[Union[FeedbackQuestion, QuizQuestion], Field(discriminator="kind")]


# --- wrappers ---

class Result(CamelModel):
    user_id: str
    values: List[str]
    # only filled in on materialized views
    correct: Optional[bool] = None


class QuestionWrapper(CamelModel):
    id: str = Field(default_factory=new_id)
    question_id: str
    results: List[Result] = Field(default_factory=list)
    # view-only
    question_content: Optional[Question] = None
    tally: Optional[Dict[str, int]] = None

    def result_of(self, user_id: str) -> Optional[Result]:
        return next((r for r in self.results if r.user_id == user_id), None)


# --- forms ---

class FormBase(CamelModel):
    id: str = Field(default_factory=new_id)
    course_id: str
    name: str
    description: str
    key: str
    connect_code: int
    status: FormStatus = FormStatus.NOT_STARTED
    questions: List[QuestionWrapper] = Field(default_factory=list)
    # participant user id -> alias
    participants: Dict[str, str] = Field(default_factory=dict)

    def wrapper_for(self, question_id: str) -> Optional[QuestionWrapper]:
        return next((w for w in self.questions if w.question_id == question_id), None)

    def alias_holder(self, alias: str) -> Optional[str]:
        return next((uid for uid, a in self.participants.items() if a == alias), None)


class FeedbackForm(FormBase):
    kind: Literal["feedback"] = "feedback"


class QuizForm(FormBase):
    kind: Literal["quiz"] = "quiz"
    current_question_index: int = 0
    current_question_finished: bool = False


Form = Annotated[Union[FeedbackForm, QuizForm], Field(discriminator="kind")]
AnyForm = Union[FeedbackForm, QuizForm]
AnyQuestion = Union[FeedbackQuestion, QuizQuestion]


# --- course ---

class Course(CamelModel):
    id: str = Field(default_factory=new_id)
    name: str
    description: str
    key: str
    owners: List[str] = Field(default_factory=list)

    feedback_questions: List[FeedbackQuestion] = Field(default_factory=list)
    quiz_questions: List[QuizQuestion] = Field(default_factory=list)

    feedback_forms: List[FeedbackForm] = Field(default_factory=list)
    quiz_forms: List[QuizForm] = Field(default_factory=list)

    # bumped by the store on every successful save
    version: int = 0

    def is_owner(self, user_id: str) -> bool:
        return user_id in self.owners

    def questions_of(self, kind: FormKind) -> list:
        return self.feedback_questions if FormKind(kind) is FormKind.FEEDBACK else self.quiz_questions

    def forms_of(self, kind: FormKind) -> list:
        return self.feedback_forms if FormKind(kind) is FormKind.FEEDBACK else self.quiz_forms

    def all_forms(self) -> Iterator[AnyForm]:
        yield from self.feedback_forms
        yield from self.quiz_forms

    def question(self, kind: FormKind, question_id: str) -> AnyQuestion:
        for q in self.questions_of(kind):
            if q.id == question_id:
                return q
        raise NotFoundError(f"Question {question_id} not found in course {self.id}")

    def form(self, kind: FormKind, form_id: str) -> AnyForm:
        for f in self.forms_of(kind):
            if f.id == form_id:
                return f
        raise NotFoundError(f"{FormKind(kind).value.capitalize()} form {form_id} not found")

    def form_by_key(self, kind: FormKind, key: str) -> Optional[AnyForm]:
        return next((f for f in self.forms_of(kind) if f.key == key), None)


@dataclass(frozen=True)
class Actor:
    """Who is calling, and whether they own the course at hand."""

    user_id: str
    is_owner: bool = False

    @classmethod
    def for_course(cls, course: Course, user_id: str) -> "Actor":
        return cls(user_id=user_id, is_owner=course.is_owner(user_id))
