"""
Serialization helpers for quicksurvey objects (Survey, Question, SurveyResponse).

Provides lossless JSON/YAML round-trip via intermediate dict representation.
The question list is also serialized on its own, as the JSON blob stored
in the `questions` column of survey.csv.
This module intentionally keeps serialization structure stable and explicit.
"""
from __future__ import annotations

import json
from typing import Any, Dict, List

import yaml

from quicksurvey.model import (
    Answer,
    Question,
    QuestionType,
    Survey,
    SurveyResponse,
)


def question_to_dict(q: Question) -> Dict[str, Any]:
    d: Dict[str, Any] = {"id": q.id, "type": q.type.value, "text": q.text}
    if q.options:
        d["options"] = list(q.options)
    return d


def question_from_dict(d: Dict[str, Any]) -> Question:
    if not isinstance(d, dict):
        raise TypeError(f"Expected a question object, got {type(d).__name__}")
    options = d.get("options") or []
    if not isinstance(options, list):
        raise TypeError(f"Question options must be a list, got {type(options).__name__}")
    return Question(
        id=str(d["id"]),
        type=QuestionType(d["type"]),
        text=str(d.get("text", "")),
        options=[str(o) for o in options],
    )


def questions_to_json(questions: List[Question]) -> str:
    return json.dumps(
        [question_to_dict(q) for q in questions],
        ensure_ascii=False,
        separators=(",", ":"),
    )


def questions_from_json(s: str) -> List[Question]:
    """
    Parse the `questions` blob.

    Raises:
        ValueError: invalid JSON or a question with an unknown type
        TypeError / KeyError: structurally malformed entries
    """
    data = json.loads(s)
    if not isinstance(data, list):
        raise TypeError(f"Expected a JSON array of questions, got {type(data).__name__}")
    return [question_from_dict(d) for d in data]


def answer_to_value(answer: Answer) -> Any:
    if isinstance(answer, (set, frozenset)):
        return sorted(answer)
    return answer


def answer_from_value(value: Any) -> Answer:
    if isinstance(value, list):
        return frozenset(str(v) for v in value)
    return "" if value is None else str(value)


def response_to_dict(r: SurveyResponse) -> Dict[str, Any]:
    return {
        "id": r.id,
        "answers": {qid: answer_to_value(a) for qid, a in r.answers.items()},
    }


def response_from_dict(d: Dict[str, Any]) -> SurveyResponse:
    answers = d.get("answers") or {}
    return SurveyResponse(
        id=str(d["id"]),
        answers={qid: answer_from_value(v) for qid, v in answers.items()},
    )


def survey_to_dict(s: Survey) -> Dict[str, Any]:
    return {
        "id": s.id,
        "title": s.title,
        "description": s.description,
        "questions": [question_to_dict(q) for q in s.questions],
        "responses": [response_to_dict(r) for r in s.responses],
    }


def survey_from_dict(d: Dict[str, Any]) -> Survey:
    s = Survey(id=str(d["id"]))
    s.title = d.get("title", "")
    s.description = d.get("description", "")
    s.questions = [question_from_dict(q) for q in d.get("questions", [])]
    s.responses = [response_from_dict(r) for r in d.get("responses", [])]
    return s


def survey_to_json(s: Survey) -> str:
    return json.dumps(survey_to_dict(s), sort_keys=True, ensure_ascii=False)


def survey_from_json(s: str) -> Survey:
    d = json.loads(s)
    return survey_from_dict(d)


def survey_to_yaml(s: Survey) -> str:
    return yaml.safe_dump(survey_to_dict(s), allow_unicode=True, sort_keys=False)


def survey_from_yaml(s: str) -> Survey:
    d = yaml.safe_load(s)
    return survey_from_dict(d)
