"""
Survey Results: per-question tabulation of collected responses.

For each question, in survey order:
    - single choice: how many responses picked each value
    - multi choice: how many responses included each declared option
    - free text: the non-empty answers, verbatim, in response order

IMPORTANT: This is read-only. It does NOT modify the survey.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import List

from quicksurvey.model import Question, QuestionType, Survey


@dataclass
class OptionCount:
    option: str
    count: int
    percent: float = 0.0


@dataclass
class QuestionSummary:
    """Tabulated answers to one question."""

    question_id: str
    question_text: str
    question_type: QuestionType
    answered: int = 0
    counts: List[OptionCount] = field(default_factory=list)  # choice questions
    texts: List[str] = field(default_factory=list)           # free-text questions

    def get_count(self, option: str) -> int:
        for entry in self.counts:
            if entry.option == option:
                return entry.count
        return 0


@dataclass
class SurveyResults:
    survey_id: str
    title: str
    total_responses: int = 0
    questions: List[QuestionSummary] = field(default_factory=list)

    def get_summary(self, question_id: str) -> QuestionSummary | None:
        for summary in self.questions:
            if summary.question_id == question_id:
                return summary
        return None


def _percent(count: int, total: int) -> float:
    return (count / total) * 100 if total else 0.0


def _summarize(question: Question, survey: Survey) -> QuestionSummary:
    total = len(survey.responses)
    summary = QuestionSummary(
        question_id=question.id,
        question_text=question.text,
        question_type=question.type,
    )
    answers = [r.get_answer(question.id) for r in survey.responses]
    summary.answered = sum(1 for a in answers if a)

    if question.type is QuestionType.MULTI_CHOICE:
        selected = [a if isinstance(a, (set, frozenset)) else {a} for a in answers]
        for option in question.options:
            count = sum(1 for s in selected if option in s)
            summary.counts.append(OptionCount(option, count, _percent(count, total)))

    elif question.type is QuestionType.SINGLE_CHOICE:
        counter = Counter(a for a in answers if a and isinstance(a, str))
        # Declared options first (even if nobody picked them), then strays
        ordered = list(question.options) + sorted(v for v in counter if v not in question.options)
        for option in ordered:
            summary.counts.append(OptionCount(option, counter[option], _percent(counter[option], total)))

    else:
        summary.texts = [a for a in answers if a and isinstance(a, str)]

    return summary


def tabulate_results(survey: Survey) -> SurveyResults:
    """
    Tabulate every question of a survey.

    Percentages are relative to the total number of responses, not only
    those that answered the question.
    """
    results = SurveyResults(
        survey_id=survey.id,
        title=survey.title,
        total_responses=len(survey.responses),
    )
    results.questions = [_summarize(q, survey) for q in survey.questions]
    return results
