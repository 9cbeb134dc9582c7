"""
Tests for serialization and deserialization of quicksurvey objects.

These tests ensure lossless JSON/YAML round-trip using the explicit
serialization functions in `quicksurvey.serialization`, and a stable
`questions` blob format.
"""

import json

import pytest

from quicksurvey.examples import build_example_feedback_survey
from quicksurvey.model import Question, QuestionType
from quicksurvey.serialization import (
    questions_from_json,
    questions_to_json,
    survey_from_dict,
    survey_from_json,
    survey_from_yaml,
    survey_to_dict,
    survey_to_json,
    survey_to_yaml,
)


def test_json_roundtrip():
    survey = build_example_feedback_survey()
    before = survey_to_dict(survey)
    json_str = survey_to_json(survey)
    restored = survey_from_json(json_str)
    after = survey_to_dict(restored)
    assert before == after
    assert restored == survey


def test_yaml_roundtrip():
    survey = build_example_feedback_survey()
    before = survey_to_dict(survey)
    yaml_str = survey_to_yaml(survey)
    restored = survey_from_yaml(yaml_str)
    after = survey_to_dict(restored)
    assert before == after
    assert restored == survey


def test_multi_answer_serialized_as_sorted_list():
    survey = build_example_feedback_survey()
    d = survey_to_dict(survey)
    assert d["responses"][0]["answers"]["q3"] == ["Dinner", "Keynote"]
    assert survey_from_dict(d).responses[0].answers["q3"] == frozenset({"Keynote", "Dinner"})


class TestQuestionsBlob:
    """The JSON array stored in the questions column of survey.csv."""

    def test_compact_format(self):
        questions = [
            Question(id="q1", type=QuestionType.SINGLE_CHOICE, text="Color?", options=["Red", "Blue"]),
            Question(id="q2", type=QuestionType.SHORT_TEXT, text="Why?"),
        ]
        assert questions_to_json(questions) == (
            '[{"id":"q1","type":"radio","text":"Color?","options":["Red","Blue"]},'
            '{"id":"q2","type":"text","text":"Why?"}]'
        )

    def test_roundtrip(self):
        questions = build_example_feedback_survey().questions
        assert questions_from_json(questions_to_json(questions)) == questions

    def test_non_ascii_kept(self):
        questions = [Question(id="q1", type=QuestionType.SHORT_TEXT, text="Café?")]
        assert "Café" in questions_to_json(questions)

    def test_not_a_list(self):
        with pytest.raises(TypeError):
            questions_from_json('{"id": "q1"}')

    def test_invalid_json(self):
        with pytest.raises(ValueError):
            questions_from_json("[{")

    def test_unknown_type(self):
        with pytest.raises(ValueError):
            questions_from_json(json.dumps([{"id": "q1", "type": "slider", "text": "x"}]))

    def test_item_not_an_object(self):
        with pytest.raises(TypeError):
            questions_from_json('["x"]')

    def test_missing_id(self):
        with pytest.raises(KeyError):
            questions_from_json(json.dumps([{"type": "text", "text": "x"}]))
