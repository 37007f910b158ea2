"""
Typed aggregate blobs stored on the user's aggregate profile.

Coordinators build these values and hand them to UserInfoRepository, which
serializes them with to_dict() into the JSON columns. Keys use camelCase so
downstream consumers of the JSON columns see a stable shape.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass
class RepoSummary:
    """Per-repository facts kept in GitHubStats.pinned_repos."""

    name: str
    url: str
    stars: int
    forks: int
    primary_language: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "url": self.url,
            "stars": self.stars,
            "forks": self.forks,
            "primaryLanguage": self.primary_language,
        }


@dataclass
class GitHubStats:
    """Rollup across all pinned repositories."""

    total_stars: int
    total_forks: int
    total_pinned_repos: int
    pinned_repos: list[RepoSummary]
    language_distribution: dict[str, int]
    top_topics: list[str]
    last_synced: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalStars": self.total_stars,
            "totalForks": self.total_forks,
            "totalPinnedRepos": self.total_pinned_repos,
            "pinnedRepos": [repo.to_dict() for repo in self.pinned_repos],
            "languageDistribution": dict(self.language_distribution),
            "topTopics": list(self.top_topics),
            "lastSynced": self.last_synced.isoformat(),
        }


@dataclass
class RecentSubmission:
    title: str
    title_slug: str
    language: str
    timestamp: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "titleSlug": self.title_slug,
            "language": self.language,
            "timestamp": self.timestamp,
        }


@dataclass
class LeetCodeStats:
    """
    Competitive-programming profile assembled from the four LeetCode queries.

    Fields stay None when the query that provides them failed or returned
    nothing, so a missing contest history is distinguishable from a zero rating.
    """

    username: str
    ranking: int = 0
    reputation: int = 0
    star_rating: float = 0.0
    about_me: str = ""

    total_solved: int | None = None
    easy_solved: int | None = None
    medium_solved: int | None = None
    hard_solved: int | None = None

    contests_attended: int | None = None
    contest_rating: float | None = None
    global_ranking: int | None = None
    top_percentage: float | None = None

    language_stats: dict[str, int] | None = None
    badges: list[str] | None = None
    active_badge: str | None = None
    recent_submissions: list[RecentSubmission] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "username": self.username,
            "ranking": self.ranking,
            "reputation": self.reputation,
            "starRating": self.star_rating,
            "aboutMe": self.about_me,
            "totalSolved": self.total_solved,
            "easySolved": self.easy_solved,
            "mediumSolved": self.medium_solved,
            "hardSolved": self.hard_solved,
            "contestsAttended": self.contests_attended,
            "contestRating": self.contest_rating,
            "globalRanking": self.global_ranking,
            "topPercentage": self.top_percentage,
            "languageStats": self.language_stats,
            "badges": self.badges,
            "activeBadge": self.active_badge,
            "recentSubmissions": (
                [sub.to_dict() for sub in self.recent_submissions]
                if self.recent_submissions is not None
                else None
            ),
        }


@dataclass
class ResumeSummary:
    file_name: str
    file_hash: str
    word_count: int
    processed_at: datetime
    raw_text: str
    skills: list[str] = field(default_factory=list)
    experiences: list[str] = field(default_factory=list)
    education: list[str] = field(default_factory=list)
    summary: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "fileName": self.file_name,
            "fileHash": self.file_hash,
            "wordCount": self.word_count,
            "processedAt": self.processed_at.isoformat(),
            "rawText": self.raw_text,
            "skills": list(self.skills),
            "experiences": list(self.experiences),
            "education": list(self.education),
            "summary": self.summary,
        }


__all__ = [
    "RepoSummary",
    "GitHubStats",
    "RecentSubmission",
    "LeetCodeStats",
    "ResumeSummary",
]
