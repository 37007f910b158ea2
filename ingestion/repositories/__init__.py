"""
Repository pattern implementations for data access.

Repositories wrap one SQLAlchemy session and never commit; the caller's
session scope (db.session() or the get_db dependency) owns the transaction.

Usage:
    from ingestion.repositories import KnowledgeBaseRepository
    from ingestion.db import db

    with db.session() as session:
        repo = KnowledgeBaseRepository(session)
        entry = repo.upsert(user_id, "github", url, content, metadata)
"""

from .base import BaseRepository
from .knowledge_base_repository import KnowledgeBaseRepository
from .user_info_repository import UserInfoRepository
from .user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "KnowledgeBaseRepository",
    "UserInfoRepository",
]
