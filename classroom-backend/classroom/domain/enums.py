from enum import Enum


class FormKind(str, Enum):
    FEEDBACK = "feedback"
    QUIZ = "quiz"


class FormStatus(str, Enum):
    NOT_STARTED = "NOT_STARTED"
    STARTED = "STARTED"
    FINISHED = "FINISHED"


class FeedbackQuestionType(str, Enum):
    SLIDER = "SLIDER"
    STARS = "STARS"
    FULLTEXT = "FULLTEXT"
    YES_NO = "YES_NO"
    SINGLE_CHOICE = "SINGLE_CHOICE"


class QuizQuestionType(str, Enum):
    SINGLE_CHOICE = "SINGLE_CHOICE"
    MULTIPLE_CHOICE = "MULTIPLE_CHOICE"
    YES_NO = "YES_NO"
    FREE_TEXT = "FREE_TEXT"
    NUMBER = "NUMBER"


# types whose answers must be picked from the question's options
CHOICE_TYPES = {
    FormKind.FEEDBACK: {FeedbackQuestionType.SINGLE_CHOICE.value},
    FormKind.QUIZ: {QuizQuestionType.SINGLE_CHOICE.value, QuizQuestionType.MULTIPLE_CHOICE.value},
}

QUESTION_TYPES = {
    FormKind.FEEDBACK: FeedbackQuestionType,
    FormKind.QUIZ: QuizQuestionType,
}

YES_NO_VALUES = ("yes", "no")
