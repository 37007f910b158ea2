"""
Knowledge base repository.

All writes go through upsert(), which keys entries on
(user_id, source_type, source_url). Re-ingesting a source updates the
existing row in place and keeps its id and created_at.
"""

import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError

from ingestion.logging import get_logger
from ingestion.models import KnowledgeBaseEntry

from .base import BaseRepository

logger = get_logger("repository.knowledge_base")

CONFLICT_KEY = ["user_id", "source_type", "source_url"]

_DIALECT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


class KnowledgeBaseRepository(BaseRepository[KnowledgeBaseEntry]):
    """Repository for knowledge base entries."""

    model = KnowledgeBaseEntry

    def get_by_key(
        self, user_id: uuid.UUID, source_type: str, source_url: str
    ) -> KnowledgeBaseEntry | None:
        """Get the entry for one (user, source type, locator) triple."""
        stmt = select(KnowledgeBaseEntry).where(
            KnowledgeBaseEntry.user_id == user_id,
            KnowledgeBaseEntry.source_type == source_type,
            KnowledgeBaseEntry.source_url == source_url,
        )
        return self.session.scalars(stmt).first()

    def list_for_user(
        self, user_id: uuid.UUID, source_type: str | None = None
    ) -> list[KnowledgeBaseEntry]:
        stmt = select(KnowledgeBaseEntry).where(KnowledgeBaseEntry.user_id == user_id)
        if source_type:
            stmt = stmt.where(KnowledgeBaseEntry.source_type == source_type)
        stmt = stmt.order_by(KnowledgeBaseEntry.created_at)
        return list(self.session.scalars(stmt))

    def delete_for_source(self, user_id: uuid.UUID, source_type: str) -> int:
        """
        Delete every entry of one source type for a user.

        Ingestion never calls this itself; stale entries (e.g. repositories
        that are no longer pinned) stay until a caller removes them.
        """
        result = self.session.execute(
            delete(KnowledgeBaseEntry).where(
                KnowledgeBaseEntry.user_id == user_id,
                KnowledgeBaseEntry.source_type == source_type,
            )
        )
        self.session.flush()
        logger.info(
            "knowledge_base_source_deleted",
            user_id=str(user_id),
            source_type=source_type,
            deleted=result.rowcount,
        )
        return result.rowcount or 0

    def upsert(
        self,
        user_id: uuid.UUID,
        source_type: str,
        source_url: str,
        content: str,
        metadata: dict[str, Any],
    ) -> KnowledgeBaseEntry:
        """
        Insert or update the entry for (user_id, source_type, source_url).

        On PostgreSQL and SQLite this is a single INSERT ... ON CONFLICT DO
        UPDATE, so concurrent writers for the same triple never produce a
        duplicate row. Other dialects fall back to select-then-write with a
        retry when a concurrent insert wins.

        Returns:
            The persisted entry with its current content
        """
        insert_fn = _DIALECT_INSERTS.get(self.session.get_bind().dialect.name)
        if insert_fn is not None:
            entry_id = self._upsert_on_conflict(
                insert_fn, user_id, source_type, source_url, content, metadata
            )
            entry = self.session.get(KnowledgeBaseEntry, entry_id, populate_existing=True)
        else:
            entry = self._upsert_portable(user_id, source_type, source_url, content, metadata)

        logger.debug(
            "knowledge_base_upserted",
            user_id=str(user_id),
            source_type=source_type,
            source_url=source_url,
            entry_id=str(entry.id),
        )
        return entry  # type: ignore[return-value]

    def _upsert_on_conflict(
        self,
        insert_fn,
        user_id: uuid.UUID,
        source_type: str,
        source_url: str,
        content: str,
        metadata: dict[str, Any],
    ) -> uuid.UUID:
        table = KnowledgeBaseEntry.__table__
        now = datetime.now(timezone.utc)

        stmt = insert_fn(table).values(
            id=uuid.uuid4(),
            user_id=user_id,
            source_type=source_type,
            source_url=source_url,
            content=content,
            metadata=metadata,
            created_at=now,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=CONFLICT_KEY,
            set_={
                "content": stmt.excluded["content"],
                "metadata": stmt.excluded["metadata"],
                "updated_at": stmt.excluded["updated_at"],
            },
        ).returning(table.c.id)

        return self.session.execute(stmt).scalar_one()

    def _upsert_portable(
        self,
        user_id: uuid.UUID,
        source_type: str,
        source_url: str,
        content: str,
        metadata: dict[str, Any],
    ) -> KnowledgeBaseEntry:
        entry = self.get_by_key(user_id, source_type, source_url)
        if entry is None:
            try:
                with self.session.begin_nested():
                    entry = KnowledgeBaseEntry(
                        user_id=user_id,
                        source_type=source_type,
                        source_url=source_url,
                        content=content,
                        metadata_=metadata,
                    )
                    self.session.add(entry)
                return entry
            except IntegrityError:
                logger.info(
                    "knowledge_base_insert_raced",
                    user_id=str(user_id),
                    source_type=source_type,
                    source_url=source_url,
                )
                entry = self.get_by_key(user_id, source_type, source_url)
                if entry is None:
                    raise

        entry.content = content
        entry.metadata_ = metadata
        entry.updated_at = datetime.now(timezone.utc)
        self.session.flush()
        return entry
