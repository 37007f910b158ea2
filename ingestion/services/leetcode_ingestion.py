"""
LeetCode ingestion coordinator.

Runs the four LeetCode queries, assembles a LeetCodeStats value and stores
one knowledge base entry per handle (https://leetcode.com/u/<handle>).
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from ingestion.api import leetcode_api
from ingestion.api.base import FetchResult
from ingestion.constants import (
    CONTENT_RECENT_SUBMISSIONS,
    CONTENT_TOP_LANGUAGES,
    LEETCODE_PROFILE_URL,
    RECENT_SUBMISSIONS_LIMIT,
    SOURCE_LEETCODE,
)
from ingestion.logging import get_logger, log_timing
from ingestion.stats import LeetCodeStats, RecentSubmission

from .base import IngestionCoordinator
from .results import LeetCodeOutcome

logger = get_logger("leetcode.ingestion")

SUCCESS_MESSAGE = "Successfully ingested LeetCode data"
UNAVAILABLE_MESSAGE = "LeetCode API unavailable"

_DIFFICULTY_FIELDS = {
    "All": "total_solved",
    "Easy": "easy_solved",
    "Medium": "medium_solved",
    "Hard": "hard_solved",
}


def _data(result: FetchResult[dict]) -> dict:
    """The "data" object of a successful query, or {} for anything else."""
    if not result.is_ok or not result.data:
        return {}
    return result.data.get("data") or {}


def _apply_profile(stats: LeetCodeStats, matched_user: dict) -> None:
    profile = matched_user.get("profile") or {}
    stats.ranking = profile.get("ranking") or 0
    stats.reputation = profile.get("reputation") or 0
    stats.star_rating = float(profile.get("starRating") or 0)
    stats.about_me = profile.get("aboutMe") or ""

    submit_stats = (matched_user.get("submitStatsGlobal") or {}).get("acSubmissionNum")
    if isinstance(submit_stats, list):
        for field_name in _DIFFICULTY_FIELDS.values():
            setattr(stats, field_name, 0)
        for stat in submit_stats:
            field_name = _DIFFICULTY_FIELDS.get(stat.get("difficulty"))
            if field_name:
                setattr(stats, field_name, stat.get("count") or 0)

    badges = matched_user.get("badges")
    if isinstance(badges, list):
        stats.badges = [badge.get("name", "") for badge in badges]

    active_badge = matched_user.get("activeBadge")
    if active_badge and active_badge.get("name"):
        stats.active_badge = active_badge["name"]


def _apply_contest(stats: LeetCodeStats, data: dict) -> None:
    ranking = data.get("userContestRanking")
    if not ranking:
        return
    stats.contests_attended = ranking.get("attendedContestsCount") or 0
    stats.contest_rating = float(ranking.get("rating") or 0)
    stats.global_ranking = ranking.get("globalRanking") or 0
    stats.top_percentage = float(ranking.get("topPercentage") or 0)


def _apply_languages(stats: LeetCodeStats, data: dict) -> None:
    counts = (data.get("matchedUser") or {}).get("languageProblemCount")
    if isinstance(counts, list):
        stats.language_stats = {
            entry.get("languageName", ""): entry.get("problemsSolved") or 0 for entry in counts
        }


def _apply_submissions(stats: LeetCodeStats, data: dict) -> None:
    submissions = data.get("recentAcSubmissionList")
    if isinstance(submissions, list):
        stats.recent_submissions = [
            RecentSubmission(
                title=sub.get("title", ""),
                title_slug=sub.get("titleSlug", ""),
                language=sub.get("lang", ""),
                timestamp=int(sub.get("timestamp") or 0),
            )
            for sub in submissions
        ]


def build_leetcode_stats(
    matched_user: dict,
    submissions: FetchResult[dict],
    contest: FetchResult[dict],
    languages: FetchResult[dict],
) -> LeetCodeStats:
    """Assemble stats from the profile plus whichever secondary queries succeeded."""
    stats = LeetCodeStats(username=matched_user.get("username", ""))
    _apply_profile(stats, matched_user)
    _apply_contest(stats, _data(contest))
    _apply_languages(stats, _data(languages))
    _apply_submissions(stats, _data(submissions))
    return stats


def build_leetcode_content(stats: LeetCodeStats) -> str:
    """Render stats as knowledge base text."""
    parts = [f"LeetCode Profile: {stats.username}\n\n"]

    parts.append("=== Problem Statistics ===\n")
    parts.append(f"Total Problems Solved: {stats.total_solved or 0}\n")
    parts.append(f"Easy: {stats.easy_solved or 0}\n")
    parts.append(f"Medium: {stats.medium_solved or 0}\n")
    parts.append(f"Hard: {stats.hard_solved or 0}\n\n")

    if stats.contest_rating and stats.contest_rating > 0:
        parts.append("=== Contest Statistics ===\n")
        parts.append(f"Contest Rating: {stats.contest_rating:.0f}\n")
        parts.append(f"Contests Attended: {stats.contests_attended or 0}\n")
        parts.append(f"Global Ranking: {stats.global_ranking or 0}\n")
        parts.append(f"Top Percentage: {stats.top_percentage or 0:.2f}%\n\n")

    if stats.language_stats:
        parts.append("=== Programming Languages ===\n")
        top = sorted(stats.language_stats.items(), key=lambda kv: kv[1], reverse=True)
        for language, count in top[:CONTENT_TOP_LANGUAGES]:
            parts.append(f"{language}: {count} problems\n")
        parts.append("\n")

    if stats.badges:
        parts.append("=== Badges ===\n")
        parts.append(", ".join(stats.badges) + "\n\n")

    if stats.recent_submissions:
        parts.append("=== Recent Submissions ===\n")
        for sub in stats.recent_submissions[:CONTENT_RECENT_SUBMISSIONS]:
            parts.append(f"- {sub.title} ({sub.language})\n")

    return "".join(parts)


def build_leetcode_metadata(handle: str, stats: LeetCodeStats) -> dict[str, Any]:
    return {
        "username": handle,
        "totalSolved": stats.total_solved or 0,
        "contestRating": stats.contest_rating or 0,
        "ranking": stats.ranking or 0,
    }


class LeetCodeIngestionService(IngestionCoordinator):
    """Coordinator for the LeetCode source."""

    source_type = SOURCE_LEETCODE

    @log_timing("leetcode_ingestion", logger)
    def ingest(self, user_id: uuid.UUID, handle: str) -> LeetCodeOutcome:
        """
        Ingest a LeetCode handle for a user.

        The profile query decides success; the other three only enrich
        the stats and may fail independently.

        Raises:
            UserNotFoundError: user_id does not resolve to a user
        """
        self._resolve_user(user_id)
        handle = (handle or "").strip()
        logger.info("leetcode_ingestion_started", user_id=str(user_id), handle=handle)

        profile = leetcode_api.fetch_user_profile(handle)
        submissions = leetcode_api.fetch_recent_submissions(handle, RECENT_SUBMISSIONS_LIMIT)
        contest = leetcode_api.fetch_contest_ranking(handle)
        languages = leetcode_api.fetch_language_stats(handle)

        if not profile.is_ok:
            logger.warning("leetcode_profile_unavailable", handle=handle, reason=profile.error)
            return LeetCodeOutcome.failure(UNAVAILABLE_MESSAGE)

        matched_user: Optional[dict] = _data(profile).get("matchedUser")
        if not matched_user:
            logger.warning("leetcode_user_not_found", handle=handle)
            return LeetCodeOutcome.failure(f"LeetCode user not found: {handle}")

        stats = build_leetcode_stats(matched_user, submissions, contest, languages)

        entry = self.knowledge_base.upsert(
            user_id=user_id,
            source_type=SOURCE_LEETCODE,
            source_url=LEETCODE_PROFILE_URL.format(username=handle),
            content=build_leetcode_content(stats),
            metadata=build_leetcode_metadata(handle, stats),
        )
        self.user_info.merge_leetcode_stats(user_id, stats, datetime.now(timezone.utc))
        self._complete(user_id, [entry])

        solved = stats.total_solved or 0
        logger.info("leetcode_ingestion_completed", user_id=str(user_id), problems_solved=solved)
        return LeetCodeOutcome(success=True, message=SUCCESS_MESSAGE, problems_solved=solved)
