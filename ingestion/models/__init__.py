"""
SQLAlchemy models for the ingestion core.

Usage:
    from ingestion.models import User, KnowledgeBaseEntry, UserInfo
"""

from .base import Base
from .knowledge_base import KnowledgeBaseEntry
from .user import User
from .user_info import UserInfo

__all__ = [
    # Base
    "Base",
    # User
    "User",
    # Knowledge base
    "KnowledgeBaseEntry",
    # Aggregate profile
    "UserInfo",
]
