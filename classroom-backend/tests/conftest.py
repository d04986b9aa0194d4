import random

import pytest
from fastapi.testclient import TestClient

from classroom.domain.model import Actor, Course
from classroom.repositories.course_store import InMemoryCourseStore
from classroom.schemas.course_schemas import FormDefinition, QuestionDefinition
from classroom.services.course_service import CourseService

OWNER = "u-owner"


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def course():
    return Course(name="Algorithms101", description="Intro to algorithms", key="ALGO-101", owners=[OWNER])


@pytest.fixture
def owner():
    return Actor(user_id=OWNER, is_owner=True)


@pytest.fixture
def stranger():
    return Actor(user_id="u-stranger", is_owner=False)


def choice_question(name, options=("A", "B"), correct=None, type="SINGLE_CHOICE"):
    return QuestionDefinition(
        name=name,
        description=f"{name} description",
        type=type,
        options=list(options),
        has_correct_answer=correct is not None,
        correct_answer=correct,
    )


def form_definition(*questions, name="Lecture 1", key=None):
    return FormDefinition(name=name, description=f"{name} description", key=key, questions=list(questions))


@pytest.fixture
def store():
    return InMemoryCourseStore()


@pytest.fixture
def service(store, rng):
    return CourseService(store, rng=rng)


@pytest.fixture
def client(service):
    from classroom.api.v1.deps import get_service
    from classroom.main import app

    app.dependency_overrides[get_service] = lambda: service
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
