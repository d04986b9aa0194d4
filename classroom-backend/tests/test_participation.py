import pytest

from classroom.domain import forms
from classroom.domain.enums import FormKind
from classroom.domain.errors import AliasConflict, InvalidStateError, NotFoundError, ValidationError
from classroom.schemas.course_schemas import QuestionDefinition

from conftest import choice_question, form_definition


@pytest.fixture
def quiz(course, owner, rng):
    return forms.create_form(
        course,
        FormKind.QUIZ,
        form_definition(
            choice_question("Q1", correct="A"),
            choice_question("Q2", options=("A", "B", "C"), correct=["A", "C"], type="MULTIPLE_CHOICE"),
            QuestionDefinition(name="Q3", description="How many?", type="NUMBER"),
        ),
        owner,
        rng=rng,
    )


def test_join_requires_started_form(quiz):
    with pytest.raises(InvalidStateError):
        forms.join(quiz, "p1", "alice")
    forms.start_form(quiz)
    forms.join(quiz, "p1", "alice")
    forms.finish_form(quiz)
    with pytest.raises(InvalidStateError):
        forms.join(quiz, "p2", "bob")
    assert quiz.participants == {"p1": "alice"}


def test_submit_requires_started_form(quiz, course):
    qid = quiz.questions[0].question_id
    with pytest.raises(InvalidStateError):
        forms.submit_answer(quiz, course, "p1", qid, "A")
    forms.start_form(quiz)
    forms.join(quiz, "p1", "alice")
    forms.submit_answer(quiz, course, "p1", qid, "A")
    forms.finish_form(quiz)
    with pytest.raises(InvalidStateError):
        forms.submit_answer(quiz, course, "p1", qid, "B")
    assert [r.values for r in quiz.questions[0].results] == [["A"]]


def test_alias_taken_by_someone_else(quiz):
    forms.start_form(quiz)
    forms.join(quiz, "p1", "X")
    with pytest.raises(AliasConflict):
        forms.join(quiz, "p2", "X")
    assert quiz.participants == {"p1": "X"}


def test_rejoin_replaces_alias(quiz):
    forms.start_form(quiz)
    forms.join(quiz, "p1", "X")
    forms.join(quiz, "p1", "Y")
    forms.join(quiz, "p1", "Y")
    assert quiz.participants == {"p1": "Y"}
    # X is free again
    forms.join(quiz, "p2", "X")


def test_alias_unique_per_form_only(course, owner, rng, quiz):
    other = forms.create_form(course, FormKind.QUIZ, form_definition(choice_question("Q1"), name="Other"), owner, rng=rng)
    forms.start_form(quiz)
    forms.start_form(other)
    forms.join(quiz, "p1", "X")
    forms.join(other, "p2", "X")


@pytest.mark.parametrize("alias", ["", "   "])
def test_empty_alias_rejected(quiz, alias):
    forms.start_form(quiz)
    with pytest.raises(ValidationError) as err:
        forms.join(quiz, "p1", alias)
    assert err.value.field == "alias"


def test_alias_is_trimmed(quiz):
    forms.start_form(quiz)
    forms.join(quiz, "p1", "  alice ")
    with pytest.raises(AliasConflict):
        forms.join(quiz, "p2", "alice")


def test_unregistered_participant_cannot_answer(quiz, course):
    forms.start_form(quiz)
    with pytest.raises(NotFoundError):
        forms.submit_answer(quiz, course, "ghost", quiz.questions[0].question_id, "A")


def test_unknown_question_rejected(quiz, course):
    forms.start_form(quiz)
    forms.join(quiz, "p1", "alice")
    with pytest.raises(NotFoundError):
        forms.submit_answer(quiz, course, "p1", "not-a-question", "A")


def test_last_answer_wins(quiz, course):
    forms.start_form(quiz)
    forms.join(quiz, "p1", "alice")
    forms.join(quiz, "p2", "bob")
    qid = quiz.questions[0].question_id
    forms.submit_answer(quiz, course, "p1", qid, "A")
    forms.submit_answer(quiz, course, "p2", qid, "B")
    forms.submit_answer(quiz, course, "p1", qid, "B")
    results = {r.user_id: r.values for r in quiz.questions[0].results}
    assert results == {"p1": ["B"], "p2": ["B"]}
    # correctness is never stored
    assert all(r.correct is None for r in quiz.questions[0].results)


@pytest.mark.parametrize(
    "index, answer",
    [
        (0, "Z"),
        (0, ["A", "B"]),
        (0, ""),
        (1, ["A", "D"]),
        (1, ["A", "A", "A"]),
        (2, "many"),
    ],
)
def test_answer_checked_against_question(quiz, course, index, answer):
    forms.start_form(quiz)
    forms.join(quiz, "p1", "alice")
    with pytest.raises(ValidationError) as err:
        forms.submit_answer(quiz, course, "p1", quiz.questions[index].question_id, answer)
    assert err.value.field == "answer"


def test_multiple_choice_and_number_answers(quiz, course):
    forms.start_form(quiz)
    forms.join(quiz, "p1", "alice")
    forms.submit_answer(quiz, course, "p1", quiz.questions[1].question_id, ["C", "A"])
    forms.submit_answer(quiz, course, "p1", quiz.questions[2].question_id, "42")
    assert quiz.questions[1].results[0].values == ["C", "A"]
    assert quiz.questions[2].results[0].values == ["42"]


def test_feedback_form_participation(course, owner, rng):
    form = forms.create_form(
        course,
        FormKind.FEEDBACK,
        form_definition(
            QuestionDefinition(name="Stars", description="Rate the lecture", type="STARS"),
            QuestionDefinition(name="Again", description="Would attend again", type="YES_NO"),
        ),
        owner,
        rng=rng,
    )
    forms.start_form(form)
    forms.join(form, "p1", "anon")
    forms.submit_answer(form, course, "p1", form.questions[0].question_id, "5")
    forms.submit_answer(form, course, "p1", form.questions[1].question_id, "Yes")
    with pytest.raises(ValidationError):
        forms.submit_answer(form, course, "p1", form.questions[1].question_id, "maybe")
    forms.join(form, "p2", "other")
    forms.submit_answer(form, course, "p2", form.questions[1].question_id, "yes")
    assert [r.values for r in form.questions[1].results] == [["yes"], ["yes"]]
