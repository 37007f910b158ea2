"""
Profile Signal Ingestion Core Library.

This package pulls a user's professional signal from GitHub, LeetCode,
uploaded resumes and LinkedIn job postings into a per-user knowledge base
and an aggregate profile.

Usage:
    # Database
    from ingestion.db import db, get_db
    from ingestion.models import User, KnowledgeBaseEntry, UserInfo
    from ingestion.repositories import KnowledgeBaseRepository, UserInfoRepository

    # Coordinators
    from ingestion.services import GitHubIngestionService, CompositeIngestionService

    # Config
    from ingestion.config import get_settings, Settings

    # Logging
    from ingestion.logging import get_logger, configure_logging
"""

__version__ = "1.0.0"

# Lazy imports to avoid circular dependencies
# Users should import directly from submodules:
#   from ingestion.db import db
#   from ingestion.config import get_settings
#   from ingestion.logging import get_logger
