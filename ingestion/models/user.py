"""
User SQLAlchemy model.

Owned by the user-management collaborator. Ingestion reads it to resolve the
GitHub handle and bearer token, and never mutates it.
"""

import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

if TYPE_CHECKING:
    from .knowledge_base import KnowledgeBaseEntry
    from .user_info import UserInfo


class User(Base):
    """
    User identity record.

    Attributes:
        email: Unique email address
        github_username: GitHub login whose pinned repositories are ingested
        github_token: Bearer token used for GitHub GraphQL and REST calls
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(String(255), unique=True)
    github_username: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    github_token: Mapped[str] = mapped_column(String(512))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    # Relationships
    knowledge_base: Mapped[list["KnowledgeBaseEntry"]] = relationship(
        "KnowledgeBaseEntry", back_populates="user"
    )
    info: Mapped["UserInfo"] = relationship("UserInfo", back_populates="user", uselist=False)
