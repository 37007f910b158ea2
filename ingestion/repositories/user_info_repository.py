"""
Aggregate profile repository.

Each merge_* method overwrites exactly one JSON blob and bumps
last_ingested_at; the other blobs are left untouched.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError

from ingestion.logging import get_logger
from ingestion.models import UserInfo
from ingestion.stats import GitHubStats, LeetCodeStats, ResumeSummary

from .base import BaseRepository

logger = get_logger("repository.user_info")


class UserInfoRepository(BaseRepository[UserInfo]):
    """Repository for the per-user aggregate profile."""

    model = UserInfo

    def get_or_create(self, user_id: uuid.UUID) -> UserInfo:
        """Fetch the aggregate profile row, creating an empty one if missing."""
        info = self.get_by_id(user_id)
        if info is not None:
            return info

        try:
            with self.session.begin_nested():
                info = UserInfo(user_id=user_id)
                self.session.add(info)
            return info
        except IntegrityError:
            # Another writer created the row first
            info = self.get_by_id(user_id)
            if info is None:
                raise
            return info

    def merge_github_stats(
        self, user_id: uuid.UUID, stats: GitHubStats, ingested_at: datetime | None = None
    ) -> UserInfo:
        info = self.get_or_create(user_id)
        info.github_stats = stats.to_dict()
        return self._touch(info, ingested_at, "github_stats")

    def merge_leetcode_stats(
        self, user_id: uuid.UUID, stats: LeetCodeStats, ingested_at: datetime | None = None
    ) -> UserInfo:
        info = self.get_or_create(user_id)
        info.leetcode_stats = stats.to_dict()
        return self._touch(info, ingested_at, "leetcode_stats")

    def merge_resume_summary(
        self, user_id: uuid.UUID, summary: ResumeSummary, ingested_at: datetime | None = None
    ) -> UserInfo:
        info = self.get_or_create(user_id)
        info.resume_summary = summary.to_dict()
        return self._touch(info, ingested_at, "resume_summary")

    def _touch(self, info: UserInfo, ingested_at: datetime | None, blob: str) -> UserInfo:
        info.last_ingested_at = ingested_at or datetime.now(timezone.utc)
        self.session.flush()
        logger.debug("user_info_merged", user_id=str(info.user_id), blob=blob)
        return info
