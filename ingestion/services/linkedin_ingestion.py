"""
LinkedIn job ingestion coordinator.

Stores a scraped job description as a knowledge base entry keyed by the
job's public URL. A job already ingested for the user is served from the
knowledge base without scraping again.
"""

import uuid

from ingestion.api import linkedin_scraper
from ingestion.constants import SOURCE_LINKEDIN
from ingestion.exceptions import UpstreamUnavailableError
from ingestion.logging import get_logger, log_timing

from .base import IngestionCoordinator
from .results import LinkedInOutcome

logger = get_logger("linkedin.ingestion")


class LinkedInIngestionService(IngestionCoordinator):
    """
    Coordinator for LinkedIn job postings.

    Job postings describe a target role, not the user, so this coordinator
    leaves the aggregate profile and last_ingested_at alone.
    """

    source_type = SOURCE_LINKEDIN

    @log_timing("linkedin_ingestion", logger)
    def ingest(self, user_id: uuid.UUID, job_id: str) -> LinkedInOutcome:
        """
        Ingest one job posting. On success the message is the Markdown content.

        Raises:
            UserNotFoundError: user_id does not resolve to a user
        """
        self._resolve_user(user_id)
        job_id = (job_id or "").strip()
        not_found = f"Job or job content not found: {job_id}"

        if not linkedin_scraper.is_valid_job_id(job_id):
            logger.warning("linkedin_invalid_job_id", user_id=str(user_id), job_id=job_id)
            return LinkedInOutcome.failure(not_found)

        url = linkedin_scraper.job_url(job_id)
        cached = self.knowledge_base.get_by_key(user_id, SOURCE_LINKEDIN, url)
        if cached is not None:
            logger.info("linkedin_job_cached", user_id=str(user_id), job_id=job_id)
            return LinkedInOutcome(success=True, message=cached.content)

        result = linkedin_scraper.fetch_job_content(job_id)
        try:
            result.raise_for_upstream("LinkedIn")
        except UpstreamUnavailableError as e:
            logger.warning("linkedin_upstream_failed", job_id=job_id, reason=e.reason)
            return LinkedInOutcome.failure(str(e))

        if not result.is_ok or not result.data:
            return LinkedInOutcome.failure(not_found)

        entry = self.knowledge_base.upsert(
            user_id=user_id,
            source_type=SOURCE_LINKEDIN,
            source_url=url,
            content=result.data,
            metadata={"jobId": job_id, "jobUrl": url},
        )
        self._complete(user_id, [entry])

        logger.info("linkedin_ingestion_completed", user_id=str(user_id), job_id=job_id)
        return LinkedInOutcome(success=True, message=result.data)
