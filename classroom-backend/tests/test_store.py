import pytest

from classroom.domain import forms
from classroom.domain.enums import FormKind
from classroom.domain.errors import AliasConflict, ConcurrentUpdateError, NotFoundError
from classroom.repositories.course_store import InMemoryCourseStore

from conftest import choice_question, form_definition


@pytest.fixture
def saved(course, owner, rng):
    def _saved(store):
        form = forms.create_form(course, FormKind.QUIZ, form_definition(choice_question("Q1")), owner, rng=rng)
        forms.start_form(form)
        store.save(course)
        return course.id, form.id
    return _saved


def test_load_returns_independent_copies(store, course):
    store.save(course)
    a = store.load(course.id)
    a.name = "changed"
    assert store.load(course.id).name == "Algorithms101"


def test_missing_course(store):
    with pytest.raises(NotFoundError):
        store.load("nope")


def test_version_bumped_on_save(store, course):
    assert course.version == 0
    store.save(course)
    store.save(course)
    assert course.version == 2
    assert store.load(course.id).version == 2


def test_list_all_in_insertion_order(store, course):
    from classroom.domain.model import Course

    other = Course(name="Other", description="d", key="k", owners=["x"])
    store.save(course)
    store.save(other)
    assert [c.name for c in store.list_all()] == ["Algorithms101", "Other"]


def test_racing_alias_claims_rejected_with_version_check(store, saved):
    course_id, form_id = saved(store)

    first = store.load(course_id)
    second = store.load(course_id)
    forms.join(first.form(FormKind.QUIZ, form_id), "p1", "X")
    forms.join(second.form(FormKind.QUIZ, form_id), "p2", "X")

    store.save(first)
    with pytest.raises(ConcurrentUpdateError):
        store.save(second)

    # retrying on a fresh copy sees the claim
    fresh = store.load(course_id)
    with pytest.raises(AliasConflict):
        forms.join(fresh.form(FormKind.QUIZ, form_id), "p2", "X")
    assert fresh.form(FormKind.QUIZ, form_id).participants == {"p1": "X"}


def test_racing_alias_claims_last_write_wins_without_version_check(saved):
    store = InMemoryCourseStore(check_version=False)
    course_id, form_id = saved(store)

    first = store.load(course_id)
    second = store.load(course_id)
    forms.join(first.form(FormKind.QUIZ, form_id), "p1", "X")
    forms.join(second.form(FormKind.QUIZ, form_id), "p2", "X")
    store.save(first)
    store.save(second)

    # p1's registration is silently lost
    assert store.load(course_id).form(FormKind.QUIZ, form_id).participants == {"p2": "X"}


def test_new_course_cannot_overwrite_existing(store, course):
    store.save(course)
    clone = course.model_copy(update={"version": 0})
    with pytest.raises(ConcurrentUpdateError):
        store.save(clone)
