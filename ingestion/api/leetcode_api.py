"""
LeetCode GraphQL client.

Four independent queries; each one can fail or come back empty without
affecting the others. Query shapes follow the public leetcode.com/graphql
schema used by the community leetcode-graphql project.
"""

import requests  # type: ignore[import-untyped]

from ingestion.config import get_settings
from ingestion.constants import LEETCODE_REFERER, RECENT_SUBMISSIONS_LIMIT
from ingestion.logging import get_logger

from .base import FetchResult

logger = get_logger("leetcode")


USER_PROFILE_QUERY = """
query getUserProfile($username: String!) {
    matchedUser(username: $username) {
        username
        profile {
            realName
            aboutMe
            ranking
            reputation
            starRating
        }
        submitStatsGlobal {
            acSubmissionNum {
                difficulty
                count
            }
        }
        badges {
            name
            icon
        }
        activeBadge {
            name
            icon
        }
    }
}
"""

RECENT_SUBMISSIONS_QUERY = """
query getRecentSubmissions($username: String!, $limit: Int!) {
    recentAcSubmissionList(username: $username, limit: $limit) {
        id
        title
        titleSlug
        timestamp
        lang
    }
}
"""

CONTEST_RANKING_QUERY = """
query getUserContestRanking($username: String!) {
    userContestRanking(username: $username) {
        attendedContestsCount
        rating
        globalRanking
        topPercentage
    }
    userContestRankingHistory(username: $username) {
        attended
        rating
        ranking
        contest {
            title
            startTime
        }
    }
}
"""

LANGUAGE_STATS_QUERY = """
query languageStats($username: String!) {
    matchedUser(username: $username) {
        languageProblemCount {
            languageName
            problemsSolved
        }
    }
}
"""


def _execute_query(query: str, variables: dict, operation: str) -> FetchResult[dict]:
    """POST one query. Network, status and decoding failures become UPSTREAM_ERROR."""
    settings = get_settings()
    username = variables.get("username")

    try:
        response = requests.post(
            settings.leetcode_graphql_url,
            headers={"Content-Type": "application/json", "Referer": LEETCODE_REFERER},
            json={"query": query, "variables": variables},
            timeout=settings.source_timeout_seconds,
        )
    except requests.RequestException as e:
        logger.error("leetcode_request_exception", operation=operation, username=username, error=str(e))
        return FetchResult.upstream_error(str(e))

    if response.status_code != 200:
        logger.error(
            "leetcode_request_failed",
            operation=operation,
            username=username,
            status=response.status_code,
        )
        return FetchResult.upstream_error(f"HTTP {response.status_code}")

    try:
        payload = response.json()
    except ValueError as e:
        logger.error("leetcode_invalid_json", operation=operation, username=username, error=str(e))
        return FetchResult.upstream_error("invalid JSON response")

    if not isinstance(payload, dict):
        return FetchResult.upstream_error("unexpected response shape")

    return FetchResult.ok(payload)


def fetch_user_profile(username: str) -> FetchResult[dict]:
    return _execute_query(USER_PROFILE_QUERY, {"username": username}, "profile")


def fetch_recent_submissions(
    username: str, limit: int = RECENT_SUBMISSIONS_LIMIT
) -> FetchResult[dict]:
    return _execute_query(
        RECENT_SUBMISSIONS_QUERY, {"username": username, "limit": limit}, "recent_submissions"
    )


def fetch_contest_ranking(username: str) -> FetchResult[dict]:
    return _execute_query(CONTEST_RANKING_QUERY, {"username": username}, "contest_ranking")


def fetch_language_stats(username: str) -> FetchResult[dict]:
    return _execute_query(LANGUAGE_STATS_QUERY, {"username": username}, "language_stats")
