import pytest

from classroom.domain import forms, views
from classroom.domain.enums import FormKind
from classroom.schemas.course_schemas import QuestionDefinition

from conftest import choice_question, form_definition


@pytest.fixture
def running_quiz(course, owner, rng):
    """Algorithms101: two single-choice questions, alice and bob both answer A to the first."""
    quiz = forms.create_form(
        course,
        FormKind.QUIZ,
        form_definition(choice_question("Q1", correct="A"), choice_question("Q2", correct="A")),
        owner,
        rng=rng,
    )
    forms.start_form(quiz)
    forms.join(quiz, "p-alice", "alice")
    forms.join(quiz, "p-bob", "bob")
    q1 = quiz.questions[0].question_id
    forms.submit_answer(quiz, course, "p-alice", q1, "A")
    forms.submit_answer(quiz, course, "p-bob", q1, "A")
    return quiz


def test_scenario_owner_view_shows_answers_and_correct_answer(running_quiz, course):
    view = views.with_question_contents(running_quiz, course)
    first = view.questions[0]
    assert sorted(r.values[0] for r in first.results) == ["A", "A"]
    assert all(r.correct is True for r in first.results)
    assert first.question_content.name == "Q1"
    assert first.question_content.correct_answers == ["A"]
    assert first.tally == {"A": 2}
    assert view.questions[1].results == []


def test_scenario_redacted_view_has_no_answers(running_quiz, course):
    view = views.without_results_but_with_question_contents(running_quiz, course)
    assert [w.question_content.name for w in view.questions] == ["Q1", "Q2"]
    assert all(w.results == [] for w in view.questions)

    bare = views.without_results(running_quiz)
    assert all(w.results == [] and w.question_content is None for w in bare.questions)


def test_views_do_not_touch_the_source(running_quiz, course):
    before = running_quiz.model_dump()
    views.with_question_contents(running_quiz, course)
    views.without_results(running_quiz)
    views.without_results_but_with_question_contents(running_quiz, course)
    assert running_quiz.model_dump() == before
    assert running_quiz.questions[0].question_content is None


def test_redaction_round_trip(running_quiz, course):
    enriched = views.with_question_contents(running_quiz, course)
    redacted = views.without_results(enriched)
    assert all(w.results == [] for w in redacted.questions)

    again = views.with_question_contents(redacted, course)
    assert [w.question_content for w in again.questions] == [w.question_content for w in enriched.questions]
    assert [w.question_id for w in again.questions] == [w.question_id for w in running_quiz.questions]


def test_correct_answer_hidden_outside_reveal(running_quiz, course):
    view = views.with_question_contents(running_quiz, course, reveal=set())
    content = view.questions[0].question_content
    assert content.correct_answers == []
    assert not content.has_correct_answer
    assert all(r.correct is None for r in view.questions[0].results)


def test_revealed_question_ids_follow_quiz_progress(running_quiz):
    first, second = (w.question_id for w in running_quiz.questions)
    assert views.revealed_question_ids(running_quiz) == set()
    forms.reveal_question(running_quiz)
    assert views.revealed_question_ids(running_quiz) == {first}
    forms.next_question(running_quiz)
    assert views.revealed_question_ids(running_quiz) == {first}
    forms.finish_form(running_quiz)
    assert views.revealed_question_ids(running_quiz) == {first, second}


def test_multiple_choice_correctness_ignores_order(course, owner, rng):
    quiz = forms.create_form(
        course,
        FormKind.QUIZ,
        form_definition(choice_question("MC", options=("A", "B", "C"), correct=["A", "C"], type="MULTIPLE_CHOICE")),
        owner,
        rng=rng,
    )
    forms.start_form(quiz)
    forms.join(quiz, "p1", "one")
    forms.join(quiz, "p2", "two")
    qid = quiz.questions[0].question_id
    forms.submit_answer(quiz, course, "p1", qid, ["C", "A"])
    forms.submit_answer(quiz, course, "p2", qid, ["A"])
    results = {r.user_id: r.correct for r in views.with_question_contents(quiz, course).questions[0].results}
    assert results == {"p1": True, "p2": False}


def test_scoreboard(running_quiz, course):
    q2 = running_quiz.questions[1].question_id
    forms.submit_answer(running_quiz, course, "p-bob", q2, "A")
    forms.submit_answer(running_quiz, course, "p-alice", q2, "B")
    forms.join(running_quiz, "p-carol", "carol")
    board = views.scoreboard(running_quiz, course)
    assert [(e.alias, e.score) for e in board] == [("bob", 2), ("alice", 1), ("carol", 0)]


def test_yes_no_tally_ignores_case(course, owner, rng):
    form = forms.create_form(
        course,
        FormKind.FEEDBACK,
        form_definition(QuestionDefinition(name="Again", description="Would attend again", type="YES_NO")),
        owner,
        rng=rng,
    )
    forms.start_form(form)
    forms.join(form, "p1", "alice")
    forms.join(form, "p2", "bob")
    qid = form.questions[0].question_id
    forms.submit_answer(form, course, "p1", qid, "Yes")
    forms.submit_answer(form, course, "p2", qid, "yes")
    assert views.with_question_contents(form, course).questions[0].tally == {"yes": 2}


def test_multiple_choice_tally_counts_each_participant_once(course, owner, rng):
    quiz = forms.create_form(
        course,
        FormKind.QUIZ,
        form_definition(choice_question("Pick", options=("A", "B", "C"), correct=["A"], type="MULTIPLE_CHOICE")),
        owner,
        rng=rng,
    )
    forms.start_form(quiz)
    forms.join(quiz, "p1", "alice")
    qid = quiz.questions[0].question_id
    forms.submit_answer(quiz, course, "p1", qid, ["A", "C"])
    assert views.with_question_contents(quiz, course).questions[0].tally == {"A": 1, "C": 1}


def test_anonymous_view_hides_user_ids(running_quiz):
    view = views.anonymous(running_quiz)
    assert view.participants == {"1": "alice", "2": "bob"}
    assert all(w.results == [] for w in view.questions)
    assert "p-alice" in running_quiz.participants
