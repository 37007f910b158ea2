# Source API clients

from .base import FetchResult, FetchStatus
from .github_api import PinnedRepo, fetch_pinned_repos, fetch_readme
from .leetcode_api import (
    fetch_contest_ranking,
    fetch_language_stats,
    fetch_recent_submissions,
    fetch_user_profile,
)
from .linkedin_scraper import fetch_job_content, is_valid_job_id, job_url

__all__ = [
    "FetchResult",
    "FetchStatus",
    "PinnedRepo",
    "fetch_pinned_repos",
    "fetch_readme",
    "fetch_user_profile",
    "fetch_recent_submissions",
    "fetch_contest_ranking",
    "fetch_language_stats",
    "fetch_job_content",
    "is_valid_job_id",
    "job_url",
]
