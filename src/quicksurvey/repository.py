"""
Survey repository: maps Survey objects onto a revisioned store.

Layout under the root namespace:
    surveys/{id}/survey.csv       metadata and questions
    surveys/{id}/responses.csv    every response

save() performs two independent commits (metadata, then responses).
They are not atomic as a pair: if the second fails, readers see the new
metadata with the previous responses.

Responses are rewritten in full on every save. Two writers that loaded the
same survey and save concurrently race, and the later commit wins.
"""

import logging
from typing import List, Optional

from quicksurvey.csv_codec import (
    decode_metadata,
    decode_responses,
    encode_metadata,
    encode_responses,
)
from quicksurvey.model import Survey
from quicksurvey.store import RevisionedStore

logger = logging.getLogger(__name__)

DEFAULT_ROOT = "surveys"
METADATA_FILENAME = "survey.csv"
RESPONSES_FILENAME = "responses.csv"


def validate_survey_id(survey_id: str) -> None:
    if not survey_id or "/" in survey_id or survey_id in (".", ".."):
        raise ValueError(f"Invalid survey id: {survey_id!r}")


class SurveyRepository:
    """Repository for surveys and their responses in a RevisionedStore."""

    def __init__(self, store: RevisionedStore, root: str = DEFAULT_ROOT) -> None:
        self.store = store
        self.root = root.strip("/")

    def _survey_path(self, survey_id: str, filename: str) -> str:
        validate_survey_id(survey_id)
        return "/".join(part for part in (self.root, survey_id, filename) if part)

    def metadata_path(self, survey_id: str) -> str:
        return self._survey_path(survey_id, METADATA_FILENAME)

    def responses_path(self, survey_id: str) -> str:
        return self._survey_path(survey_id, RESPONSES_FILENAME)

    def list(self) -> List[str]:
        """Return ids of all surveys. Empty if nothing has been saved yet."""
        entries = self.store.list_dir(self.root)
        return [entry.name for entry in entries if entry.type == "dir"]

    def load(self, survey_id: str) -> Optional[Survey]:
        """
        Read a survey and its responses.

        Returns:
            Survey, or None if its metadata file is absent. A missing
            responses file means zero responses.
        """
        metadata = self.store.read(self.metadata_path(survey_id))
        if metadata is None:
            logger.debug("Survey %s has no metadata", survey_id)
            return None

        survey = decode_metadata(metadata.content)
        if survey is None:
            logger.warning("Survey %s metadata has no data row", survey_id)
            return None

        responses = self.store.read(self.responses_path(survey_id))
        if responses is not None:
            survey.responses = decode_responses(responses.content, survey.questions)
        return survey

    def save(self, survey: Survey) -> None:
        """
        Write metadata, then responses.

        Raises:
            ConflictError / RemoteRequestError from the store. Nothing is
            rolled back.
        """
        self.store.write(
            self.metadata_path(survey.id),
            encode_metadata(survey),
            f"Update survey {survey.id} metadata",
        )
        self.store.write(
            self.responses_path(survey.id),
            encode_responses(survey),
            f"Update survey {survey.id} responses",
        )
