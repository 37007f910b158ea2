"""GitHub API client for pinned repositories and README content."""

import base64
import binascii
from dataclasses import dataclass, field

import requests  # type: ignore[import-untyped]

from ingestion.config import get_settings
from ingestion.constants import (
    GITHUB_USER_AGENT,
    GITHUB_WEB_BASE,
    PINNED_REPO_LIMIT,
    REPO_TOPIC_LIMIT,
)
from ingestion.logging import get_logger

from .base import FetchResult

logger = get_logger("github")


PINNED_REPOS_QUERY = f"""
query($login: String!) {{
    user(login: $login) {{
        pinnedItems(first: {PINNED_REPO_LIMIT}, types: REPOSITORY) {{
            nodes {{
                ... on Repository {{
                    name
                    description
                    url
                    stargazerCount
                    forkCount
                    primaryLanguage {{ name color }}
                    repositoryTopics(first: {REPO_TOPIC_LIMIT}) {{
                        nodes {{ topic {{ name }} }}
                    }}
                }}
            }}
        }}
    }}
}}
"""


@dataclass
class PinnedRepo:
    """One pinned repository as returned by the GraphQL API."""

    name: str
    url: str
    description: str | None = None
    stars: int | None = None
    forks: int | None = None
    primary_language: str | None = None
    topics: list[str] = field(default_factory=list)


def _get_headers(token: str | None, graphql: bool = False) -> dict[str, str]:
    """Get headers for GitHub API requests."""
    headers = {
        "Accept": "application/json" if graphql else "application/vnd.github.v3+json",
        "User-Agent": GITHUB_USER_AGENT,
    }
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def _parse_repo_node(node: dict) -> PinnedRepo | None:
    """Parse a GraphQL Repository node. Non-repository pins come back empty."""
    if not node or not node.get("url"):
        return None

    primary_language = node.get("primaryLanguage") or {}
    topics_conn = node.get("repositoryTopics") or {}
    topics = [
        (topic_node.get("topic") or {}).get("name", "")
        for topic_node in topics_conn.get("nodes") or []
        if (topic_node.get("topic") or {}).get("name")
    ]

    return PinnedRepo(
        name=node.get("name", ""),
        url=node["url"],
        description=node.get("description"),
        stars=node.get("stargazerCount"),
        forks=node.get("forkCount"),
        primary_language=primary_language.get("name"),
        topics=topics,
    )


def fetch_pinned_repos(username: str, token: str | None) -> FetchResult[list[PinnedRepo]]:
    """
    Fetch up to six pinned repositories for a GitHub user in one GraphQL query.

    Args:
        username: GitHub login
        token: Bearer token for the GraphQL API

    Returns:
        OK with the parsed repositories (possibly empty), NOT_FOUND when the
        response carries no user / pinnedItems wrapper, UPSTREAM_ERROR on
        network failure, timeout, non-200 status or an undecodable body.
    """
    settings = get_settings()

    try:
        response = requests.post(
            settings.github_graphql_url,
            headers=_get_headers(token, graphql=True),
            json={"query": PINNED_REPOS_QUERY, "variables": {"login": username}},
            timeout=settings.source_timeout_seconds,
        )
    except requests.RequestException as e:
        logger.error("graphql_exception", username=username, error=str(e))
        return FetchResult.upstream_error(str(e))

    if response.status_code != 200:
        logger.error("graphql_request_failed", username=username, status=response.status_code)
        return FetchResult.upstream_error(f"HTTP {response.status_code}")

    try:
        payload = response.json()
    except ValueError as e:
        logger.error("graphql_invalid_json", username=username, error=str(e))
        return FetchResult.upstream_error("invalid JSON response")

    if not isinstance(payload, dict):
        logger.error("graphql_unexpected_payload", username=username, type=type(payload).__name__)
        return FetchResult.upstream_error("unexpected response shape")

    for error in payload.get("errors") or []:
        message = error.get("message", "Unknown") if isinstance(error, dict) else str(error)
        logger.warning("graphql_error", username=username, error=message)

    data = payload.get("data")
    user = data.get("user") if isinstance(data, dict) else None
    if not isinstance(user, dict) or not isinstance(user.get("pinnedItems"), dict):
        logger.warning("github_user_not_found", username=username)
        return FetchResult.not_found(f"No GitHub data found for {username}")

    repos = []
    for node in user["pinnedItems"].get("nodes") or []:
        repo = _parse_repo_node(node)
        if repo is not None:
            repos.append(repo)

    logger.info("pinned_repos_fetched", username=username, repo_count=len(repos))
    return FetchResult.ok(repos)


def _split_repo_url(repo_url: str) -> tuple[str, str] | None:
    """Extract (owner, name) from https://github.com/<owner>/<name>."""
    path = repo_url.replace(GITHUB_WEB_BASE, "").strip("/")
    parts = path.split("/")
    if len(parts) < 2 or not parts[0] or not parts[1]:
        return None
    return parts[0], parts[1]


def fetch_readme(repo_url: str, token: str | None) -> str:
    """
    Fetch and decode a repository README. Best effort: any failure yields "".

    GitHub returns the file Base64-encoded with embedded line breaks, so the
    payload is decoded MIME-style (whitespace ignored).
    """
    settings = get_settings()
    owner_name = _split_repo_url(repo_url)
    if owner_name is None:
        logger.warning("readme_bad_repo_url", repo_url=repo_url)
        return ""

    owner, name = owner_name
    url = f"{settings.github_api_base}/repos/{owner}/{name}/readme"

    try:
        response = requests.get(
            url, headers=_get_headers(token), timeout=settings.source_timeout_seconds
        )
    except requests.RequestException as e:
        logger.warning("readme_fetch_failed", repo_url=repo_url, error=str(e))
        return ""

    if response.status_code != 200:
        logger.debug("readme_not_available", repo_url=repo_url, status=response.status_code)
        return ""

    try:
        payload = response.json()
    except ValueError as e:
        logger.warning("readme_decode_failed", repo_url=repo_url, error=str(e))
        return ""

    encoded = payload.get("content") if isinstance(payload, dict) else None
    if not isinstance(encoded, str):
        logger.warning("readme_unexpected_payload", repo_url=repo_url)
        return ""

    try:
        raw = base64.b64decode("".join(encoded.split()))
    except (ValueError, binascii.Error) as e:
        logger.warning("readme_decode_failed", repo_url=repo_url, error=str(e))
        return ""

    return raw.decode("utf-8", errors="replace")
