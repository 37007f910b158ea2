"""Shared plumbing for the per-source ingestion coordinators."""

import time
import uuid
from collections.abc import Sequence
from dataclasses import dataclass, field

from sqlalchemy.orm import Session

from ingestion.exceptions import IngestionTimeoutError
from ingestion.logging import get_logger
from ingestion.models import KnowledgeBaseEntry, User
from ingestion.repositories import KnowledgeBaseRepository, UserInfoRepository, UserRepository

from .processing_trigger import ProcessingTrigger

logger = get_logger("ingestion")


@dataclass(frozen=True)
class Deadline:
    """A monotonic cut-off shared by the branches of one composite run."""

    timeout: float
    expires_at: float = field(default=0.0)

    @classmethod
    def after(cls, timeout: float) -> "Deadline":
        return cls(timeout=timeout, expires_at=time.monotonic() + timeout)

    def expired(self) -> bool:
        return time.monotonic() >= self.expires_at


class IngestionCoordinator:
    """
    Base for coordinators that run one source's ingestion inside one session.

    Subclasses resolve the user, fetch, upsert entries and merge their
    aggregate blob, then call _complete() to commit and notify the
    processing service. With a deadline, a run that reaches _complete()
    late rolls back instead of committing.
    """

    source_type: str

    def __init__(
        self,
        session: Session,
        trigger: ProcessingTrigger | None = None,
        deadline: Deadline | None = None,
    ):
        self.session = session
        self.users = UserRepository(session)
        self.knowledge_base = KnowledgeBaseRepository(session)
        self.user_info = UserInfoRepository(session)
        self.trigger = trigger if trigger is not None else ProcessingTrigger()
        self.deadline = deadline

    def _resolve_user(self, user_id: uuid.UUID) -> User:
        return self.users.require(user_id)

    def _check_deadline(self, user_id: uuid.UUID) -> None:
        if self.deadline is None or not self.deadline.expired():
            return
        self.session.rollback()
        logger.warning(
            "ingestion_deadline_exceeded",
            user_id=str(user_id),
            source_type=self.source_type,
            timeout=self.deadline.timeout,
        )
        raise IngestionTimeoutError(self.source_type, self.deadline.timeout)

    def _complete(self, user_id: uuid.UUID, entries: Sequence[KnowledgeBaseEntry]) -> None:
        """
        Commit the run, then fire the embedding trigger for the written entries.

        Raises:
            IngestionTimeoutError: the deadline passed; the run was rolled back
        """
        self._check_deadline(user_id)
        entry_ids = [entry.id for entry in entries]
        self.session.commit()

        try:
            self.trigger.trigger_embedding_generation(user_id, self.source_type, entry_ids)
        except Exception as e:
            logger.warning(
                "embedding_trigger_error",
                user_id=str(user_id),
                source_type=self.source_type,
                error=str(e),
            )
