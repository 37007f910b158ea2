"""
Aggregate profile SQLAlchemy model.
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Any, Optional

from sqlalchemy import JSON, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

if TYPE_CHECKING:
    from .user import User


class UserInfo(Base):
    """
    Per-user rollup of derived statistics, one JSON blob per source.

    Each per-source ingestion overwrites its own blob wholesale and bumps
    last_ingested_at, so the timestamp tracks the latest successful run of
    any source rather than a full refresh.
    """

    __tablename__ = "user_info"

    user_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("users.id"), primary_key=True)
    github_stats: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)
    leetcode_stats: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)
    resume_summary: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)
    last_ingested_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="info")
