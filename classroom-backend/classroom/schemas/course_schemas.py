from typing import List, Optional, Union
from pydantic import Field, field_validator

from ..domain.model import CamelModel, Form


# Definitions are deliberately loose: the domain validates them and names the
# offending field, so only types are checked here.

class QuestionDefinition(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    type: Optional[str] = None
    options: List[str] = Field(default_factory=list)
    key: Optional[str] = None
    # feedback only
    range_low: Optional[str] = None
    range_high: Optional[str] = None
    # quiz only
    has_correct_answer: bool = False
    correct_answer: Union[str, List[str], None] = None

    @field_validator("options", mode="before")
    @classmethod
    def _none_is_empty(cls, v):
        return [] if v is None else v

    def correct_answers(self) -> list[str]:
        if self.correct_answer is None:
            return []
        if isinstance(self.correct_answer, str):
            return [self.correct_answer]
        return list(self.correct_answer)


class FormDefinition(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    key: Optional[str] = None
    questions: List[QuestionDefinition] = Field(default_factory=list)


class CourseCreateIn(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    key: Optional[str] = None


class CourseDefinition(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    key: Optional[str] = None
    feedback_forms: List[FormDefinition] = Field(default_factory=list)
    quiz_forms: List[FormDefinition] = Field(default_factory=list)


class ParticipateIn(CamelModel):
    alias: str


class AnswerIn(CamelModel):
    question_id: str
    answer: Union[str, List[str]]


class CourseOut(CamelModel):
    id: str
    name: str
    description: str
    key: str
    owners: List[str]
    feedback_form_count: int
    quiz_form_count: int


class ScoreboardEntry(CamelModel):
    user_id: str
    alias: str
    score: int


class LiveFormOut(CamelModel):
    course_id: str
    form: Form
