"""
Downstream embedding trigger.

After a coordinator commits new knowledge base entries it notifies the
processing service, which generates embeddings for them. The call is best
effort: failures are logged and never change the ingestion outcome.
"""

import uuid
from collections.abc import Sequence

import httpx

from ingestion.config import get_settings
from ingestion.logging import get_logger

logger = get_logger("processing_trigger")

TRIGGER_PATH = "/api/v1/embeddings/trigger"


class ProcessingTrigger:
    """HTTP client for the processing service's embedding trigger."""

    def __init__(self, base_url: str | None = None, timeout: float | None = None):
        settings = get_settings()
        self.base_url = base_url if base_url is not None else settings.processing_service_url
        self.timeout = timeout or settings.processing_timeout_seconds

    @property
    def enabled(self) -> bool:
        return bool(self.base_url)

    def trigger_embedding_generation(
        self, user_id: uuid.UUID, source_type: str, entry_ids: Sequence[uuid.UUID]
    ) -> bool:
        """
        Ask the processing service to embed the given entries.

        Returns:
            True if the processing service accepted the request
        """
        if not self.enabled or not entry_ids:
            return False

        payload = {
            "user_id": str(user_id),
            "source_type": source_type,
            "knowledge_base_ids": [str(entry_id) for entry_id in entry_ids],
        }

        try:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.post(f"{self.base_url.rstrip('/')}{TRIGGER_PATH}", json=payload)
        except httpx.HTTPError as e:
            logger.warning(
                "embedding_trigger_failed",
                user_id=str(user_id),
                source_type=source_type,
                error=str(e),
            )
            return False

        if response.status_code >= 400:
            logger.warning(
                "embedding_trigger_rejected",
                user_id=str(user_id),
                source_type=source_type,
                status=response.status_code,
            )
            return False

        logger.info(
            "embedding_trigger_sent",
            user_id=str(user_id),
            source_type=source_type,
            entries=len(entry_ids),
        )
        return True
