"""Audience-specific copies of a form.

Nothing in this module mutates the form it is given; every function returns a
deep copy. Correctness of quiz answers is worked out here, on the copy, and
never written back.
"""

from __future__ import annotations

from collections import Counter
from typing import Collection, List, Optional

from .enums import FormKind, FormStatus
from .model import AnyForm, Course, QuizForm, QuizQuestion, QuestionWrapper
from ..schemas.course_schemas import ScoreboardEntry


def _normalized(values) -> frozenset:
    return frozenset(str(v).strip().casefold() for v in values)


def is_correct(question: QuizQuestion, values: List[str]) -> Optional[bool]:
    """None when the question has no correct answer to compare against."""
    if not question.has_correct_answer or not question.correct_answers:
        return None
    return _normalized(values) == _normalized(question.correct_answers)


def without_results(form: AnyForm) -> AnyForm:
    """Copy of the form with every collected answer removed."""
    copy = form.model_copy(deep=True)
    for wrapper in copy.questions:
        wrapper.results = []
        wrapper.tally = None
    return copy


def anonymous(form: AnyForm) -> AnyForm:
    """Result-free copy whose participants are keyed by join order, not user id."""
    copy = without_results(form)
    copy.participants = {str(seat): alias for seat, alias in enumerate(copy.participants.values(), 1)}
    return copy


def _enrich(wrapper: QuestionWrapper, course: Course, kind: FormKind, reveal: Optional[Collection[str]]) -> None:
    question = course.question(kind, wrapper.question_id).model_copy(deep=True)
    show_correct = reveal is None or wrapper.question_id in reveal

    if isinstance(question, QuizQuestion) and not show_correct:
        question.has_correct_answer = False
        question.correct_answers = []

    wrapper.question_content = question
    wrapper.tally = dict(Counter(v for r in wrapper.results for v in r.values))
    for result in wrapper.results:
        result.correct = is_correct(question, result.values) if isinstance(question, QuizQuestion) else None


def with_question_contents(form: AnyForm, course: Course, reveal: Optional[Collection[str]] = None) -> AnyForm:
    """Copy of the form where every wrapper carries its full question.

    ``reveal`` limits the question ids whose correct answer is shown;
    None shows all of them.
    """
    copy = form.model_copy(deep=True)
    kind = FormKind(copy.kind)
    for wrapper in copy.questions:
        _enrich(wrapper, course, kind, reveal)
    return copy


def without_results_but_with_question_contents(
    form: AnyForm, course: Course, reveal: Optional[Collection[str]] = None
) -> AnyForm:
    return without_results(with_question_contents(form, course, reveal))


def revealed_question_ids(form: AnyForm) -> set[str]:
    """Question ids whose correct answer a participant may already see."""
    if form.status is FormStatus.FINISHED:
        return {w.question_id for w in form.questions}
    if not isinstance(form, QuizForm) or form.status is not FormStatus.STARTED:
        return set()
    upto = form.current_question_index + (1 if form.current_question_finished else 0)
    return {w.question_id for w in form.questions[:upto]}


def scoreboard(form: QuizForm, course: Course) -> List[ScoreboardEntry]:
    """Correct answers per registered participant, best first."""
    scores = {uid: 0 for uid in form.participants}
    for wrapper in form.questions:
        question = course.question(FormKind.QUIZ, wrapper.question_id)
        for result in wrapper.results:
            if result.user_id in scores and is_correct(question, result.values):
                scores[result.user_id] += 1

    board = [
        ScoreboardEntry(user_id=uid, alias=form.participants[uid], score=score)
        for uid, score in scores.items()
    ]
    board.sort(key=lambda e: (-e.score, e.alias))
    return board
