"""
Tests for quicksurvey Core Model Objects

These tests verify:
    - Basic model creation
    - Question type values as persisted
    - Retrieval methods
    - Answer defaults
"""

import pytest
from quicksurvey.model import (
    Question,
    QuestionType,
    Survey,
    SurveyResponse,
    new_response_id,
    new_survey_id,
)


class TestQuestionType:
    """Test QuestionType values."""

    def test_persisted_values(self):
        """Values match what survey.csv files carry."""
        assert QuestionType("text") is QuestionType.SHORT_TEXT
        assert QuestionType("textarea") is QuestionType.LONG_TEXT
        assert QuestionType("radio") is QuestionType.SINGLE_CHOICE
        assert QuestionType("checkbox") is QuestionType.MULTI_CHOICE

    def test_is_choice(self):
        assert QuestionType.SINGLE_CHOICE.is_choice
        assert QuestionType.MULTI_CHOICE.is_choice
        assert not QuestionType.SHORT_TEXT.is_choice
        assert not QuestionType.LONG_TEXT.is_choice

    def test_unknown_value(self):
        with pytest.raises(ValueError):
            QuestionType("slider")


class TestQuestion:
    """Test Question objects."""

    def test_options_default_empty(self):
        q = Question(id="q1", type=QuestionType.SHORT_TEXT, text="Name?")
        assert q.options == []

    def test_options_not_shared(self):
        """Default options list must not be shared between instances."""
        a = Question(id="a", type=QuestionType.SINGLE_CHOICE, text="A")
        b = Question(id="b", type=QuestionType.SINGLE_CHOICE, text="B")
        a.options.append("x")
        assert b.options == []


class TestSurveyResponse:
    """Test SurveyResponse objects."""

    def test_get_answer(self):
        r = SurveyResponse(id="r1", answers={"q1": "Red", "q2": frozenset({"A"})})
        assert r.get_answer("q1") == "Red"
        assert r.get_answer("q2") == frozenset({"A"})

    def test_missing_answer_is_empty(self):
        r = SurveyResponse(id="r1")
        assert r.get_answer("q1") == ""


class TestSurvey:
    """Test Survey container."""

    def test_new_survey_has_no_responses(self):
        survey = Survey(id="42", title="T")
        assert survey.responses == []
        assert survey.questions == []
        assert survey.description == ""

    def test_get_question(self):
        q1 = Question(id="q1", type=QuestionType.SHORT_TEXT, text="Name?")
        survey = Survey(id="42", questions=[q1])
        assert survey.get_question("q1") is q1
        assert survey.get_question("nope") is None

    def test_get_response(self):
        r1 = SurveyResponse(id="r1")
        survey = Survey(id="42", responses=[r1])
        assert survey.get_response("r1") is r1
        assert survey.get_response("r2") is None


def test_generated_ids_are_unique():
    assert new_survey_id() != new_survey_id()
    assert new_response_id() != new_response_id()
    assert "/" not in new_survey_id()
