"""
Example survey builder for demos and tests.

Builds a short feedback survey with one question of each type and a few
responses, including answers that need quoting in CSV (commas, quotes,
newlines) and a multi-choice answer.
"""
from quicksurvey.model import Question, QuestionType, Survey, SurveyResponse


def build_example_feedback_survey(survey_id: str = "example", with_responses: bool = True) -> Survey:
    survey = Survey(
        id=survey_id,
        title="Team Offsite Feedback",
        description='Tell us how the offsite went, "honestly".',
    )

    survey.questions = [
        Question(id="q1", type=QuestionType.SHORT_TEXT, text="Your name?"),
        Question(
            id="q2",
            type=QuestionType.SINGLE_CHOICE,
            text="Overall, how was it?",
            options=["Great", "Fine", "Poor, really"],
        ),
        Question(
            id="q3",
            type=QuestionType.MULTI_CHOICE,
            text="Which sessions did you attend?",
            options=["Keynote", "Workshop", "Dinner"],
        ),
        Question(id="q4", type=QuestionType.LONG_TEXT, text="Anything else?"),
    ]

    if not with_responses:
        return survey

    survey.responses = [
        SurveyResponse(
            id="r1",
            answers={
                "q1": "Ada",
                "q2": "Great",
                "q3": frozenset({"Keynote", "Dinner"}),
                "q4": 'Loved the "unconference" part,\nmore of that please',
            },
        ),
        SurveyResponse(
            id="r2",
            answers={
                "q1": "Grace",
                "q2": "Poor, really",
                "q3": frozenset({"Workshop"}),
            },
        ),
        SurveyResponse(
            id="r3",
            answers={
                "q2": "Great",
                "q3": frozenset(),
                "q4": "",
            },
        ),
    ]
    return survey
