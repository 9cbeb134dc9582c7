"""
CSV codec for quicksurvey (Survey <-> persisted text).

Two artifacts are produced per survey, so that recording responses never
rewrites survey metadata:

survey.csv:
    id,title,description,questions
    <one row; questions is a JSON array escaped as a single field>

responses.csv:
    response_id,<question 1 text>,<question 2 text>,...
    <one row per response>

Syntax Notes:
    - Field delimiter is ',' and rows end with '\\n'
    - A field is wrapped in double quotes (embedded quotes doubled) iff it
      contains ',', '"' or a newline
    - Multi-choice answers are joined with ';' inside a single field
    - Response headers are question text, so two questions with identical
      text produce duplicate headers. Decoding is positional and keyed by
      question id, so this only affects legibility of the file.

Decode problems never raise. They are reported as CodecWarning and the
affected part degrades to an empty value, so one corrupt file cannot make a
survey unreadable.
"""

import csv
import logging
import warnings
from io import StringIO
from typing import Iterable, List, Optional

from quicksurvey.model import (
    Answer,
    Question,
    QuestionType,
    Survey,
    SurveyResponse,
)
from quicksurvey.serialization import questions_from_json, questions_to_json

logger = logging.getLogger(__name__)

FIELD_DELIMITER = ","
MULTI_VALUE_DELIMITER = ";"
QUOTE = '"'

METADATA_HEADER = ["id", "title", "description", "questions"]
RESPONSE_ID_HEADER = "response_id"


class CodecWarning(UserWarning):
    """Emitted when persisted survey data is malformed and partially dropped."""
    pass


def _warn(message: str) -> None:
    logger.warning(message)
    warnings.warn(message, CodecWarning, stacklevel=3)


def escape_field(value: str) -> str:
    """
    Escape a single field.

    Examples:
        hello        -> hello
        a,b          -> "a,b"
        6" tall      -> "6"" tall"
    """
    value = str(value)
    if not value:
        return value
    return encode_row([value])


def encode_row(fields: Iterable[str]) -> str:
    # Callers join rows with "\n"; the CRLF terminator makes the writer quote both \r and \n
    buffer = StringIO()
    writer = csv.writer(
        buffer,
        delimiter=FIELD_DELIMITER,
        quotechar=QUOTE,
        quoting=csv.QUOTE_MINIMAL,
        lineterminator="\r\n",
    )
    writer.writerow([str(f) for f in fields])
    return buffer.getvalue()[:-2]


def decode_row(line: str) -> List[str]:
    """
    Split one logical row into fields.

    Single pass over the characters, tracking whether we are inside quotes:
        - "" inside quotes is a literal quote
        - any other quote toggles the quoted state
        - an unquoted delimiter ends the current field
        - end of line always ends the last field, even if empty
    """
    fields: List[str] = []
    current: List[str] = []
    inside_quotes = False
    i = 0
    n = len(line)

    while i < n:
        ch = line[i]
        if ch == QUOTE:
            if inside_quotes and i + 1 < n and line[i + 1] == QUOTE:
                current.append(QUOTE)
                i += 1
            else:
                inside_quotes = not inside_quotes
        elif ch == FIELD_DELIMITER and not inside_quotes:
            fields.append("".join(current))
            current = []
        else:
            current.append(ch)
        i += 1

    fields.append("".join(current))
    return fields


def split_rows(text: str) -> List[str]:
    """
    Split a document into logical rows.

    Newlines inside quoted fields belong to the field, not the row
    boundary. CRLF line endings are accepted. Blank rows are dropped.
    """
    rows: List[str] = []
    current: List[str] = []
    inside_quotes = False

    for ch in text:
        if ch == QUOTE:
            inside_quotes = not inside_quotes
            current.append(ch)
        elif ch == "\n" and not inside_quotes:
            rows.append("".join(current))
            current = []
        else:
            current.append(ch)
    rows.append("".join(current))

    cleaned = []
    for row in rows:
        if row.endswith("\r"):
            row = row[:-1]
        if row.strip():
            cleaned.append(row)
    return cleaned


# =========================================================================
# survey.csv
# =========================================================================

def encode_metadata(survey: Survey) -> str:
    row = [survey.id, survey.title, survey.description, questions_to_json(survey.questions)]
    return "\n".join([encode_row(METADATA_HEADER), encode_row(row)])


def decode_metadata(text: str) -> Optional[Survey]:
    """
    Parse survey.csv content.

    Returns:
        Survey with no responses, or None if the file holds no data row
    """
    rows = split_rows(text)
    if len(rows) < 2:
        return None

    header = decode_row(rows[0])
    if header != METADATA_HEADER:
        _warn(f"Unexpected survey metadata header: {header}")

    fields = decode_row(rows[1])
    fields += [""] * (len(METADATA_HEADER) - len(fields))
    survey_id, title, description, questions_blob = fields[:4]

    questions: List[Question] = []
    if questions_blob.strip():
        try:
            questions = questions_from_json(questions_blob)
        except (ValueError, TypeError, KeyError) as e:
            _warn(f"Malformed questions for survey {survey_id!r}, using none: {e}")
            questions = []

    return Survey(id=survey_id, title=title, description=description, questions=questions)


# =========================================================================
# responses.csv
# =========================================================================

def _encode_answer(question: Question, answer: Answer) -> str:
    if isinstance(answer, (set, frozenset)):
        # Declared option order first, anything else sorted after
        ordered = [o for o in question.options if o in answer]
        ordered += sorted(a for a in answer if a not in question.options)
        return MULTI_VALUE_DELIMITER.join(ordered)
    return answer or ""


def _decode_answer(question: Question, raw: str) -> Answer:
    if question.type is QuestionType.MULTI_CHOICE:
        return frozenset(v for v in raw.split(MULTI_VALUE_DELIMITER) if v)
    return raw


def encode_responses(survey: Survey) -> str:
    lines = [encode_row([RESPONSE_ID_HEADER] + [q.text for q in survey.questions])]
    for response in survey.responses:
        row = [response.id]
        for question in survey.questions:
            row.append(_encode_answer(question, response.get_answer(question.id)))
        lines.append(encode_row(row))
    return "\n".join(lines)


def decode_responses(text: str, questions: List[Question]) -> List[SurveyResponse]:
    """
    Parse responses.csv content against the survey's questions.

    Columns are matched to questions by position. A header-only (or empty)
    file yields no responses.
    """
    rows = split_rows(text)
    if not rows:
        return []

    header = decode_row(rows[0])
    if header and header[0] != RESPONSE_ID_HEADER:
        _warn(f"Unexpected responses header: {header}")

    responses = []
    for row in rows[1:]:
        fields = decode_row(row)
        answers = {}
        for index, question in enumerate(questions):
            raw = fields[index + 1] if index + 1 < len(fields) else ""
            answers[question.id] = _decode_answer(question, raw)
        responses.append(SurveyResponse(id=fields[0], answers=answers))

    return responses


__all__ = [
    "CodecWarning",
    "escape_field",
    "encode_row",
    "decode_row",
    "split_rows",
    "encode_metadata",
    "decode_metadata",
    "encode_responses",
    "decode_responses",
]
