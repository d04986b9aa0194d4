import logging
import random
from typing import List, Optional, Tuple, Union

from ..domain import courses as course_ops
from ..domain import forms as form_ops
from ..domain import live as live_ops
from ..domain import views
from ..domain.enums import FormKind
from ..domain.model import Actor, AnyForm, Course, QuizForm
from ..repositories.course_store import CourseStore
from ..schemas.course_schemas import (
    CourseCreateIn,
    CourseDefinition,
    CourseOut,
    FormDefinition,
    ScoreboardEntry,
)

logger = logging.getLogger(__name__)


class CourseService:
    """Runs every course operation as load -> mutate in memory -> save.

    A failing operation raises before ``save``, so nothing of it is persisted.
    """

    def __init__(
        self,
        store: CourseStore,
        code_range: Tuple[int, int] = form_ops.DEFAULT_CODE_RANGE,
        live_feed_legacy: bool = False,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.store = store
        self.code_range = code_range
        self.live_feed_legacy = live_feed_legacy
        self.rng = rng or random.Random()

    # --- courses ---

    def _summary(self, course: Course) -> CourseOut:
        return CourseOut(
            id=course.id,
            name=course.name,
            description=course.description,
            key=course.key,
            owners=list(course.owners),
            feedback_form_count=len(course.feedback_forms),
            quiz_form_count=len(course.quiz_forms),
        )

    def list_courses(self) -> List[CourseOut]:
        return [self._summary(c) for c in self.store.list_all()]

    def get_course(self, course_id: str) -> CourseOut:
        return self._summary(self.store.load(course_id))

    def create_course(self, definition: CourseCreateIn, user_id: str) -> CourseOut:
        course = course_ops.create_course(definition, user_id)
        self.store.save(course)
        logger.info("Course %s (%s) created by %s", course.id, course.key, user_id)
        return self._summary(course)

    def import_course(self, course_id: str, definition: CourseDefinition, user_id: str) -> CourseOut:
        course = self.store.load(course_id)
        course_ops.import_course(
            course,
            definition,
            Actor.for_course(course, user_id),
            self._taken_codes(),
            self.rng,
            self.code_range,
        )
        self.store.save(course)
        logger.info("Course %s updated from definition by %s", course_id, user_id)
        return self._summary(course)

    # --- forms ---

    def _taken_codes(self) -> set[int]:
        return live_ops.active_connect_codes(self.store.list_all())

    def list_forms(self, course_id: str, kind: FormKind, user_id: str) -> List[AnyForm]:
        course = self.store.load(course_id)
        if course.is_owner(user_id):
            return [f.model_copy(deep=True) for f in course.forms_of(kind)]
        return [views.without_results(f) for f in course.forms_of(kind)]

    def create_form(self, course_id: str, kind: FormKind, definition: FormDefinition, user_id: str) -> AnyForm:
        course = self.store.load(course_id)
        form = form_ops.create_form(
            course,
            kind,
            definition,
            Actor.for_course(course, user_id),
            self._taken_codes(),
            self.rng,
            self.code_range,
        )
        self.store.save(course)
        logger.info(
            "%s form %s created in course %s with %d questions (code %s)",
            FormKind(kind).value, form.id, course_id, len(form.questions), form.connect_code,
        )
        return form

    def update_form(
        self, course_id: str, kind: FormKind, key: str, definition: FormDefinition, user_id: str
    ) -> AnyForm:
        course = self.store.load(course_id)
        form = form_ops.update_form(
            course,
            kind,
            key,
            definition,
            Actor.for_course(course, user_id),
            self._taken_codes(),
            self.rng,
            self.code_range,
        )
        self.store.save(course)
        logger.info("%s form %s (key %s) updated in course %s", FormKind(kind).value, form.id, key, course_id)
        return form

    def get_form(self, course_id: str, kind: FormKind, form_id: str, user_id: str, results: bool = False) -> AnyForm:
        """Owners may ask for results; everybody else gets the question set only."""
        course = self.store.load(course_id)
        form = course.form(kind, form_id)
        if course.is_owner(user_id):
            if results:
                return views.with_question_contents(form, course)
            return views.without_results_but_with_question_contents(form, course)
        return views.without_results_but_with_question_contents(
            form, course, reveal=views.revealed_question_ids(form)
        )

    def get_public_form(self, course_id: str, kind: FormKind, form_id: str) -> AnyForm:
        course = self.store.load(course_id)
        return views.anonymous(course.form(kind, form_id))

    # --- lifecycle ---

    def _owned_form(self, course: Course, kind: FormKind, form_id: str, user_id: str) -> AnyForm:
        form = course.form(kind, form_id)
        form_ops.ensure_owner(course, Actor.for_course(course, user_id))
        return form

    def _owned_quiz(self, course: Course, form_id: str, user_id: str) -> QuizForm:
        return self._owned_form(course, FormKind.QUIZ, form_id, user_id)

    def start_form(self, course_id: str, kind: FormKind, form_id: str, user_id: str) -> AnyForm:
        course = self.store.load(course_id)
        form = self._owned_form(course, kind, form_id, user_id)
        form_ops.start_form(form)
        self.store.save(course)
        logger.info("Form %s started (code %s)", form_id, form.connect_code)
        return form

    def finish_form(self, course_id: str, kind: FormKind, form_id: str, user_id: str) -> AnyForm:
        course = self.store.load(course_id)
        form = self._owned_form(course, kind, form_id, user_id)
        form_ops.finish_form(form)
        self.store.save(course)
        logger.info("Form %s finished with %d participants", form_id, len(form.participants))
        return form

    def next_question(self, course_id: str, form_id: str, user_id: str) -> QuizForm:
        course = self.store.load(course_id)
        form = self._owned_quiz(course, form_id, user_id)
        idx = form_ops.next_question(form)
        self.store.save(course)
        logger.info("Quiz %s moved to question %d", form_id, idx)
        return form

    def reveal_question(self, course_id: str, form_id: str, user_id: str) -> QuizForm:
        course = self.store.load(course_id)
        form = self._owned_quiz(course, form_id, user_id)
        form_ops.reveal_question(form)
        self.store.save(course)
        logger.info("Quiz %s revealed question %d", form_id, form.current_question_index)
        return form

    # --- participation ---

    def join(self, course_id: str, kind: FormKind, form_id: str, user_id: str, alias: str) -> None:
        course = self.store.load(course_id)
        form = course.form(kind, form_id)
        form_ops.join(form, user_id, alias)
        self.store.save(course)
        logger.info("User %s joined form %s as '%s'", user_id, form_id, alias.strip())

    def submit_answer(
        self,
        course_id: str,
        kind: FormKind,
        form_id: str,
        user_id: str,
        question_id: str,
        answer: Union[str, List[str]],
    ) -> None:
        course = self.store.load(course_id)
        form = course.form(kind, form_id)
        form_ops.submit_answer(form, course, user_id, question_id, answer)
        self.store.save(course)
        logger.info("Stored answer of %s to question %s in form %s", user_id, question_id, form_id)

    def scoreboard(self, course_id: str, form_id: str, user_id: str) -> List[ScoreboardEntry]:
        course = self.store.load(course_id)
        form = self._owned_quiz(course, form_id, user_id)
        return views.scoreboard(form, course)

    # --- live ---

    def list_live(self, include_results: bool = False) -> List[Tuple[Course, AnyForm]]:
        return live_ops.list_live(
            self.store.list_all(),
            include_results=include_results,
            legacy=self.live_feed_legacy,
        )

    def find_by_connect_code(self, code: int) -> Tuple[Course, AnyForm]:
        course, form = live_ops.find_by_connect_code(self.store.list_all(), code)
        return course, views.without_results_but_with_question_contents(
            form, course, reveal=views.revealed_question_ids(form)
        )
