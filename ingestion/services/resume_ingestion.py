"""
Resume ingestion coordinator.

Extracts text from an uploaded PDF, stores it as one knowledge base entry
per distinct file (resume://<user_id>/<hash16>) and overwrites the
resume_summary blob of the aggregate profile.
"""

import uuid
from typing import Optional

from ingestion.config import get_settings
from ingestion.constants import RESUME_SOURCE_URL, SOURCE_RESUME
from ingestion.exceptions import ExtractionEmptyError, InvalidInputError
from ingestion.logging import get_logger, log_timing
from ingestion.parsing import resume_extractor

from .base import IngestionCoordinator
from .results import ResumeOutcome

logger = get_logger("resume.ingestion")

SUCCESS_MESSAGE = "Successfully processed resume"


class ResumeIngestionService(IngestionCoordinator):
    """Coordinator for uploaded resumes."""

    source_type = SOURCE_RESUME

    def __init__(self, session, trigger=None, word_cap: Optional[int] = None, deadline=None):
        super().__init__(session, trigger, deadline)
        self.word_cap = word_cap or get_settings().resume_word_cap

    @log_timing("resume_ingestion", logger)
    def ingest(
        self,
        user_id: uuid.UUID,
        content: bytes,
        filename: Optional[str],
        content_type: Optional[str] = None,
    ) -> ResumeOutcome:
        """
        Process an uploaded resume for a user.

        Raises:
            UserNotFoundError: user_id does not resolve to a user
        """
        self._resolve_user(user_id)
        logger.info("resume_ingestion_started", user_id=str(user_id), filename=filename)

        try:
            summary = resume_extractor.process_resume(
                content, filename, content_type, word_cap=self.word_cap
            )
        except (InvalidInputError, ExtractionEmptyError) as e:
            logger.warning("resume_rejected", user_id=str(user_id), filename=filename, reason=str(e))
            return ResumeOutcome.failure(str(e))

        entry = self.knowledge_base.upsert(
            user_id=user_id,
            source_type=SOURCE_RESUME,
            source_url=RESUME_SOURCE_URL.format(user_id=user_id, file_hash=summary.file_hash),
            content=summary.raw_text,
            metadata={
                "fileName": summary.file_name,
                "fileHash": summary.file_hash,
                "wordCount": summary.word_count,
                "processedAt": summary.processed_at.isoformat(),
            },
        )
        self.user_info.merge_resume_summary(user_id, summary, summary.processed_at)
        self._complete(user_id, [entry])

        logger.info(
            "resume_ingestion_completed", user_id=str(user_id), word_count=summary.word_count
        )
        return ResumeOutcome(success=True, message=SUCCESS_MESSAGE, word_count=summary.word_count)
