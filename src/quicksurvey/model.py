"""
Core Survey Model Objects

Defines the data structures that flow between the storage layer and
whatever renders forms or results:
    - Questions (what is asked)
    - Responses (one respondent's answers)
    - Surveys (root container, metadata plus every response)

ARCHITECTURAL RULE:
    These objects:
        - Know nothing about CSV, HTTP or the remote store
        - Are plain data
        - Are fully serializable
"""

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Union


class QuestionType(Enum):
    """
    Kind of input a question collects.

    Values are the strings persisted inside survey.csv, so existing
    files stay readable.
    """

    SHORT_TEXT = "text"
    LONG_TEXT = "textarea"
    SINGLE_CHOICE = "radio"
    MULTI_CHOICE = "checkbox"

    @property
    def is_choice(self) -> bool:
        return self in (QuestionType.SINGLE_CHOICE, QuestionType.MULTI_CHOICE)


# A scalar answer is a str; a multi-choice answer is a frozenset of
# selected options.
Answer = Union[str, FrozenSet[str]]


@dataclass
class Question:
    """
    A single question in a survey.

    Properties:
        id:
            Unique within the survey. Responses are keyed by it.

        type:
            QuestionType

        text:
            Display text. Also used as the column header in responses.csv.

        options:
            Ordered choices. Expected for choice questions, empty otherwise.
            Not validated here.
    """

    id: str
    type: QuestionType
    text: str
    options: List[str] = field(default_factory=list)


@dataclass
class SurveyResponse:
    """
    One submission.

    answers maps question id -> Answer. Keys that do not match a question
    are dropped when the survey is encoded.
    """

    id: str
    answers: Dict[str, Answer] = field(default_factory=dict)

    def get_answer(self, question_id: str) -> Answer:
        """Return the answer for a question, or "" if it was not answered."""
        return self.answers.get(question_id, "")


@dataclass
class Survey:
    """
    Root container for a survey and everything collected for it.

    The whole object (metadata and all responses) is persisted on every
    save. id is immutable once created, and question structure is not
    expected to change after responses exist.

    Properties:
        id:
            Survey identifier, also the storage directory name

        title / description:
            Free text shown to respondents

        questions:
            Ordered questions. Order defines column order in responses.csv.

        responses:
            Ordered submissions
    """

    id: str
    title: str = ""
    description: str = ""
    questions: List[Question] = field(default_factory=list)
    responses: List[SurveyResponse] = field(default_factory=list)

    def get_question(self, question_id: str) -> Optional[Question]:
        """
        Retrieve a question by ID.

        Args:
            question_id: Question identifier

        Returns:
            Question object or None if not found
        """
        for question in self.questions:
            if question.id == question_id:
                return question
        return None

    def get_response(self, response_id: str) -> Optional[SurveyResponse]:
        for response in self.responses:
            if response.id == response_id:
                return response
        return None


def new_survey_id() -> str:
    return uuid.uuid4().hex


def new_response_id() -> str:
    return uuid.uuid4().hex
