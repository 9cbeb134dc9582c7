"""
Survey workflow used by the pages that create surveys, take them and list
them. Everything goes through SurveyRepository, nothing is cached.
"""

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Union

from quicksurvey.model import (
    Answer,
    Question,
    QuestionType,
    Survey,
    SurveyResponse,
    new_response_id,
    new_survey_id,
)
from quicksurvey.repository import SurveyRepository
from quicksurvey.store import StoreError

logger = logging.getLogger(__name__)


class SurveyNotFoundError(LookupError):
    """Raised when submitting to a survey that does not exist."""
    pass


class SurveyService:
    def __init__(self, repository: SurveyRepository) -> None:
        self.repository = repository

    def create_survey(self, title: str, description: str, questions: List[Question]) -> Survey:
        survey = Survey(
            id=new_survey_id(),
            title=title,
            description=description,
            questions=list(questions),
        )
        self.repository.save(survey)
        logger.info("Created survey %s (%d questions)", survey.id, len(survey.questions))
        return survey

    def get_survey(self, survey_id: str) -> Optional[Survey]:
        return self.repository.load(survey_id)

    def submit_response(
        self,
        survey_id: str,
        answers: Mapping[str, Union[str, Iterable[str]]],
    ) -> SurveyResponse:
        """
        Append one response to a survey and save it.

        The survey is re-read right before appending so the response list
        is as fresh as possible. Multi-choice answers may be given as any
        iterable of options.

        Raises:
            SurveyNotFoundError: no survey with this id
            TypeError: several values given for a single-answer question
            StoreError: the save failed; the response was not recorded
        """
        survey = self.repository.load(survey_id)
        if survey is None:
            raise SurveyNotFoundError(f"Survey {survey_id} not found")

        response = SurveyResponse(id=new_response_id(), answers=_normalize_answers(survey, answers))
        survey.responses.append(response)
        self.repository.save(survey)
        logger.info("Recorded response %s for survey %s", response.id, survey_id)
        return response

    def list_surveys(self) -> List[Survey]:
        """
        Load every survey. Failures degrade to an empty or partial list.
        """
        try:
            survey_ids = self.repository.list()
        except StoreError as e:
            logger.warning("Failed to list surveys: %s", e)
            return []

        surveys = []
        for survey_id in survey_ids:
            try:
                survey = self.repository.load(survey_id)
            except StoreError as e:
                logger.warning("Failed to load survey %s: %s", survey_id, e)
                continue
            if survey is not None:
                surveys.append(survey)
        return surveys


def _normalize_answers(
    survey: Survey,
    answers: Mapping[str, Union[str, Iterable[str]]],
) -> Dict[str, Answer]:
    normalized: Dict[str, Answer] = {}
    for question in survey.questions:
        if question.id not in answers:
            continue
        value = answers[question.id]
        if question.type is QuestionType.MULTI_CHOICE:
            values = [value] if isinstance(value, str) else value
            normalized[question.id] = frozenset(v for v in values if v)
        elif isinstance(value, str):
            normalized[question.id] = value
        else:
            raise TypeError(f"Question {question.id} takes a single answer, got {value!r}")
    return normalized
