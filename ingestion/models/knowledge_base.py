"""
Knowledge base SQLAlchemy model.

One row per ingested source instance. The (user_id, source_type, source_url)
triple is unique; re-ingesting the same triple updates the row in place.
"""

import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from sqlalchemy import JSON, DateTime, ForeignKey, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ingestion.constants import SOURCE_GITHUB, SOURCE_LEETCODE, SOURCE_LINKEDIN, SOURCE_RESUME

from .base import Base

if TYPE_CHECKING:
    from .user import User


class KnowledgeBaseEntry(Base):
    """
    Normalized content unit derived from one source.

    Attributes:
        content: Free text used for retrieval and summarization
        source_type: github, leetcode, resume or linkedin
        source_url: Stable locator unique per source instance
        metadata_: Source-specific facts (column name "metadata")
        embedding: Written by the downstream processing service only
    """

    __tablename__ = "user_knowledge_base"
    __table_args__ = (
        UniqueConstraint(
            "user_id", "source_type", "source_url", name="uq_knowledge_base_user_source_url"
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("users.id"), index=True)
    content: Mapped[str] = mapped_column(Text)
    source_type: Mapped[str] = mapped_column(String(20), index=True)
    source_url: Mapped[str] = mapped_column(String(1024))
    metadata_: Mapped[dict[str, Any]] = mapped_column("metadata", JSON, default=dict)
    embedding: Mapped[list[float] | None] = mapped_column(JSON, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="knowledge_base")

    @property
    def is_from_github(self) -> bool:
        return self.source_type == SOURCE_GITHUB

    @property
    def is_from_leetcode(self) -> bool:
        return self.source_type == SOURCE_LEETCODE

    @property
    def is_from_resume(self) -> bool:
        return self.source_type == SOURCE_RESUME

    @property
    def is_from_linkedin(self) -> bool:
        return self.source_type == SOURCE_LINKEDIN
