"""
GitHub ingestion coordinator.

Pulls a user's pinned repositories (plus READMEs) into the knowledge base
and rolls them up into the github_stats blob of the aggregate profile.
"""

import contextvars
import uuid
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Any

from ingestion.api import github_api
from ingestion.api.github_api import PinnedRepo
from ingestion.config import get_settings
from ingestion.constants import SOURCE_GITHUB, UNKNOWN_LANGUAGE
from ingestion.exceptions import UpstreamUnavailableError
from ingestion.logging import get_logger, log_timing
from ingestion.stats import GitHubStats, RepoSummary

from .base import IngestionCoordinator
from .results import GitHubOutcome

logger = get_logger("github.ingestion")

NO_DATA_MESSAGE = "No GitHub data found"
SUCCESS_MESSAGE = "Successfully ingested GitHub data"


def build_repo_content(repo: PinnedRepo, readme: str) -> str:
    """Render one repository as knowledge base text."""
    lines = [f"Repository: {repo.name}", f"URL: {repo.url}"]
    if repo.description and repo.description.strip():
        lines.append(f"Description: {repo.description}")
    if repo.primary_language:
        lines.append(f"Primary Language: {repo.primary_language}")
    if repo.topics:
        lines.append(f"Topics: {', '.join(repo.topics)}")
    lines.append(f"Stars: {repo.stars or 0}")
    lines.append(f"Forks: {repo.forks or 0}")

    content = "\n".join(lines) + "\n"
    if readme and readme.strip():
        content += "\n--- README ---\n" + readme
    return content


def build_repo_metadata(repo: PinnedRepo) -> dict[str, Any]:
    return {
        "repoName": repo.name,
        "repoUrl": repo.url,
        "primaryLanguage": repo.primary_language or UNKNOWN_LANGUAGE,
        "stars": repo.stars or 0,
        "forks": repo.forks or 0,
        "topics": list(repo.topics),
    }


def aggregate_github_stats(repos: list[PinnedRepo], synced_at: datetime) -> GitHubStats:
    """
    Roll pinned repositories up into one GitHubStats value.

    Repositories without a primary language count under "Unknown"; topics
    are the sorted union across all repositories.
    """
    language_distribution: dict[str, int] = {}
    topics: set[str] = set()
    summaries = []

    for repo in repos:
        language = repo.primary_language or UNKNOWN_LANGUAGE
        language_distribution[language] = language_distribution.get(language, 0) + 1
        topics.update(repo.topics)
        summaries.append(
            RepoSummary(
                name=repo.name,
                url=repo.url,
                stars=repo.stars or 0,
                forks=repo.forks or 0,
                primary_language=language,
            )
        )

    return GitHubStats(
        total_stars=sum(repo.stars or 0 for repo in repos),
        total_forks=sum(repo.forks or 0 for repo in repos),
        total_pinned_repos=len(repos),
        pinned_repos=summaries,
        language_distribution=language_distribution,
        top_topics=sorted(topics),
        last_synced=synced_at,
    )


class GitHubIngestionService(IngestionCoordinator):
    """Coordinator for the GitHub source."""

    source_type = SOURCE_GITHUB

    def _fetch_readmes(self, repos: list[PinnedRepo], token: str | None) -> list[str]:
        """Fetch READMEs on a bounded pool. Results come back in pinned order."""
        if not repos:
            return []
        workers = min(get_settings().readme_fetch_workers, len(repos))
        # One context copy per task so request_id and source reach the fetch logs
        contexts = [contextvars.copy_context() for _ in repos]
        with ThreadPoolExecutor(max_workers=workers) as executor:
            return list(
                executor.map(
                    lambda ctx, repo: ctx.run(github_api.fetch_readme, repo.url, token),
                    contexts,
                    repos,
                )
            )

    @log_timing("github_ingestion", logger)
    def ingest(self, user_id: uuid.UUID) -> GitHubOutcome:
        """
        Ingest the user's pinned repositories.

        Raises:
            UserNotFoundError: user_id does not resolve to a user
        """
        user = self._resolve_user(user_id)
        username = user.github_username
        logger.info("github_ingestion_started", user_id=str(user_id), username=username)

        if not username:
            return GitHubOutcome.failure(NO_DATA_MESSAGE)

        result = github_api.fetch_pinned_repos(username, user.github_token)
        try:
            result.raise_for_upstream("GitHub")
        except UpstreamUnavailableError as e:
            logger.warning("github_ingestion_upstream_failed", user_id=str(user_id), reason=e.reason)
            return GitHubOutcome.failure(str(e))

        if not result.is_ok:
            logger.warning("github_no_data", user_id=str(user_id), username=username)
            return GitHubOutcome.failure(NO_DATA_MESSAGE)

        repos: list[PinnedRepo] = result.data or []
        readmes = self._fetch_readmes(repos, user.github_token)

        entries = [
            self.knowledge_base.upsert(
                user_id=user_id,
                source_type=SOURCE_GITHUB,
                source_url=repo.url,
                content=build_repo_content(repo, readme),
                metadata=build_repo_metadata(repo),
            )
            for repo, readme in zip(repos, readmes)
        ]

        now = datetime.now(timezone.utc)
        self.user_info.merge_github_stats(user_id, aggregate_github_stats(repos, now), now)
        self._complete(user_id, entries)

        logger.info("github_ingestion_completed", user_id=str(user_id), repos_processed=len(repos))
        return GitHubOutcome(
            success=True,
            message=SUCCESS_MESSAGE,
            repos_processed=len(repos),
            repo_names=tuple(repo.name for repo in repos),
        )
