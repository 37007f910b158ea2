"""
Tests for the GitHub client and the GitHub ingestion coordinator.
"""

import base64
import time
from datetime import datetime, timezone

import pytest
import requests
import structlog

import ingestion.api.github_api as github_api
from ingestion.api.base import FetchResult, FetchStatus
from ingestion.api.github_api import PinnedRepo
from ingestion.exceptions import IngestionTimeoutError, UserNotFoundError
from ingestion.logging import LogContext
from ingestion.models import UserInfo
from ingestion.repositories import KnowledgeBaseRepository
from ingestion.services import Deadline
from ingestion.services.github_ingestion import (
    GitHubIngestionService,
    aggregate_github_stats,
    build_repo_content,
)


def _repo(name, stars, forks, language="Go", topics=None, description=None):
    return PinnedRepo(
        name=name,
        url=f"https://github.com/octocat/{name}",
        description=description,
        stars=stars,
        forks=forks,
        primary_language=language,
        topics=topics or [],
    )


class TestGitHubClient:
    def test_pinned_query_uses_variables(self, monkeypatch, mock_response):
        captured = {}

        def fake_post(url, headers=None, json=None, timeout=None):  # noqa: ARG001
            captured["json"] = json
            captured["headers"] = headers
            captured["timeout"] = timeout
            return mock_response(200, {"data": {"user": {"pinnedItems": {"nodes": []}}}})

        monkeypatch.setattr(github_api.requests, "post", fake_post)

        result = github_api.fetch_pinned_repos('oc"to\ncat', "token")

        assert result.status is FetchStatus.OK
        assert result.data == []
        body = captured["json"]
        assert body["variables"] == {"login": 'oc"to\ncat'}
        assert 'oc"to' not in body["query"]
        assert "pinnedItems(first: 6, types: REPOSITORY)" in body["query"]
        assert captured["headers"]["Authorization"] == "Bearer token"
        assert captured["timeout"] > 0

    def test_pinned_parses_nodes(self, monkeypatch, mock_response):
        payload = {
            "data": {
                "user": {
                    "pinnedItems": {
                        "nodes": [
                            {
                                "name": "cli-tool",
                                "description": "A tool",
                                "url": "https://github.com/octocat/cli-tool",
                                "stargazerCount": 3,
                                "forkCount": 1,
                                "primaryLanguage": {"name": "Go", "color": "#00ADD8"},
                                "repositoryTopics": {
                                    "nodes": [{"topic": {"name": "cli"}}, {"topic": {"name": "go"}}]
                                },
                            },
                            {},
                        ]
                    }
                }
            }
        }
        monkeypatch.setattr(
            github_api.requests, "post", lambda *a, **kw: mock_response(200, payload)
        )

        result = github_api.fetch_pinned_repos("octocat", None)

        assert len(result.data) == 1
        repo = result.data[0]
        assert repo.name == "cli-tool"
        assert repo.primary_language == "Go"
        assert repo.topics == ["cli", "go"]

    def test_missing_user_is_not_found(self, monkeypatch, mock_response):
        monkeypatch.setattr(
            github_api.requests, "post", lambda *a, **kw: mock_response(200, {"data": {"user": None}})
        )
        assert github_api.fetch_pinned_repos("ghost", None).is_not_found

    def test_network_error_is_upstream_error(self, monkeypatch, mock_response):
        def boom(*args, **kwargs):
            raise requests.ConnectionError("connection refused")

        monkeypatch.setattr(github_api.requests, "post", boom)

        result = github_api.fetch_pinned_repos("octocat", None)

        assert result.status is FetchStatus.UPSTREAM_ERROR
        assert "connection refused" in result.error

    def test_non_200_is_upstream_error(self, monkeypatch, mock_response):
        monkeypatch.setattr(github_api.requests, "post", lambda *a, **kw: mock_response(502, {}))
        assert github_api.fetch_pinned_repos("octocat", None).status is FetchStatus.UPSTREAM_ERROR

    def test_readme_decodes_line_wrapped_base64(self, monkeypatch, mock_response):
        encoded = base64.b64encode(b"# Hello\n\nWorld" * 10).decode()
        wrapped = "\n".join(encoded[i : i + 60] for i in range(0, len(encoded), 60))
        captured = {}

        def fake_get(url, headers=None, timeout=None):  # noqa: ARG001
            captured["url"] = url
            return mock_response(200, {"content": wrapped, "encoding": "base64"})

        monkeypatch.setattr(github_api.requests, "get", fake_get)

        readme = github_api.fetch_readme("https://github.com/octocat/hello", "token")

        assert readme.startswith("# Hello")
        assert captured["url"].endswith("/repos/octocat/hello/readme")

    def test_readme_failure_is_empty(self, monkeypatch, mock_response):
        monkeypatch.setattr(github_api.requests, "get", lambda *a, **kw: mock_response(404, {}))
        assert github_api.fetch_readme("https://github.com/octocat/hello", None) == ""

    def test_readme_non_object_json_is_empty(self, monkeypatch, mock_response):
        monkeypatch.setattr(
            github_api.requests, "get", lambda *a, **kw: mock_response(200, ["not", "an", "object"])
        )
        assert github_api.fetch_readme("https://github.com/octocat/hello", None) == ""

    def test_readme_non_string_content_is_empty(self, monkeypatch, mock_response):
        monkeypatch.setattr(
            github_api.requests, "get", lambda *a, **kw: mock_response(200, {"content": 42})
        )
        assert github_api.fetch_readme("https://github.com/octocat/hello", None) == ""

    def test_pinned_non_object_json_is_upstream_error(self, monkeypatch, mock_response):
        monkeypatch.setattr(
            github_api.requests, "post", lambda *a, **kw: mock_response(200, ["not", "an", "object"])
        )

        result = github_api.fetch_pinned_repos("octocat", None)

        assert result.status is FetchStatus.UPSTREAM_ERROR
        assert result.error == "unexpected response shape"

    def test_pinned_non_object_data_is_not_found(self, monkeypatch, mock_response):
        monkeypatch.setattr(
            github_api.requests, "post", lambda *a, **kw: mock_response(200, {"data": ["user"]})
        )
        assert github_api.fetch_pinned_repos("octocat", None).is_not_found


class TestAggregation:
    def test_two_go_repos_with_shared_topic(self):
        repos = [
            _repo("alpha", 3, 2, topics=["cli", "parser"]),
            _repo("beta", 7, 4, topics=["cli"]),
        ]

        stats = aggregate_github_stats(repos, datetime.now(timezone.utc))

        assert stats.total_stars == 10
        assert stats.total_forks == 6
        assert stats.total_pinned_repos == 2
        assert stats.language_distribution == {"Go": 2}
        assert stats.top_topics == ["cli", "parser"]

    def test_missing_language_counts_as_unknown(self):
        repos = [_repo("alpha", None, None, language=None)]

        stats = aggregate_github_stats(repos, datetime.now(timezone.utc))

        assert stats.language_distribution == {"Unknown": 1}
        assert stats.total_stars == 0
        assert stats.pinned_repos[0].primary_language == "Unknown"

    def test_repo_content_layout(self):
        repo = _repo("alpha", 3, 2, topics=["cli"], description="Fast CLI")

        content = build_repo_content(repo, "# Alpha")

        assert content == (
            "Repository: alpha\n"
            "URL: https://github.com/octocat/alpha\n"
            "Description: Fast CLI\n"
            "Primary Language: Go\n"
            "Topics: cli\n"
            "Stars: 3\n"
            "Forks: 2\n"
            "\n--- README ---\n# Alpha"
        )

    def test_repo_content_skips_blank_fields(self):
        repo = _repo("alpha", 0, 0, language=None, description="  ")

        content = build_repo_content(repo, "   ")

        assert "Description" not in content
        assert "Primary Language" not in content
        assert "README" not in content


class TestGitHubIngestionService:
    @pytest.fixture
    def stub_github(self, monkeypatch):
        repos = [
            _repo("alpha", 3, 2, topics=["cli", "parser"]),
            _repo("beta", 7, 4, topics=["cli"]),
        ]
        monkeypatch.setattr(
            github_api, "fetch_pinned_repos", lambda username, token: FetchResult.ok(repos)
        )
        monkeypatch.setattr(github_api, "fetch_readme", lambda url, token: f"README for {url}")
        return repos

    def test_success_writes_entries_and_stats(self, test_session, test_user, trigger, stub_github):
        outcome = GitHubIngestionService(test_session, trigger).ingest(test_user.id)

        assert outcome.success
        assert outcome.message == "Successfully ingested GitHub data"
        assert outcome.repos_processed == 2
        assert outcome.repo_names == ("alpha", "beta")

        entries = KnowledgeBaseRepository(test_session).list_for_user(test_user.id, "github")
        assert {e.source_url for e in entries} == {r.url for r in stub_github}
        alpha = next(e for e in entries if e.metadata_["repoName"] == "alpha")
        assert alpha.metadata_["stars"] == 3
        assert alpha.metadata_["topics"] == ["cli", "parser"]
        assert "README for https://github.com/octocat/alpha" in alpha.content

        info = test_session.get(UserInfo, test_user.id)
        assert info.github_stats["totalStars"] == 10
        assert info.github_stats["languageDistribution"] == {"Go": 2}
        assert info.last_ingested_at is not None

        assert len(trigger.calls) == 1
        assert trigger.calls[0][1] == "github"
        assert len(trigger.calls[0][2]) == 2

    def test_reingest_does_not_duplicate(self, test_session, test_user, trigger, stub_github):
        service = GitHubIngestionService(test_session, trigger)
        service.ingest(test_user.id)
        service.ingest(test_user.id)

        entries = KnowledgeBaseRepository(test_session).list_for_user(test_user.id, "github")
        assert len(entries) == 2

    def test_readmes_merge_in_pinned_order(self, test_session, test_user, trigger, monkeypatch):
        repos = [_repo(f"r{i}", i, 0) for i in range(4)]
        monkeypatch.setattr(github_api, "fetch_pinned_repos", lambda u, t: FetchResult.ok(repos))

        def slow_first(url, token):
            if url.endswith("/r0"):
                time.sleep(0.05)
            return url.rsplit("/", 1)[-1]

        monkeypatch.setattr(github_api, "fetch_readme", slow_first)

        GitHubIngestionService(test_session, trigger).ingest(test_user.id)

        repo = KnowledgeBaseRepository(test_session)
        for r in repos:
            entry = repo.get_by_key(test_user.id, "github", r.url)
            assert entry.content.endswith(f"--- README ---\n{r.name}")

    def test_upstream_failure(self, test_session, test_user, trigger, monkeypatch):
        monkeypatch.setattr(
            github_api,
            "fetch_pinned_repos",
            lambda u, t: FetchResult.upstream_error("HTTP 502"),
        )

        outcome = GitHubIngestionService(test_session, trigger).ingest(test_user.id)

        assert not outcome.success
        assert outcome.message == "GitHub API unavailable: HTTP 502"
        assert KnowledgeBaseRepository(test_session).list_for_user(test_user.id) == []
        assert trigger.calls == []

    def test_no_data(self, test_session, test_user, trigger, monkeypatch):
        monkeypatch.setattr(github_api, "fetch_pinned_repos", lambda u, t: FetchResult.not_found())

        outcome = GitHubIngestionService(test_session, trigger).ingest(test_user.id)

        assert not outcome.success
        assert outcome.message == "No GitHub data found"
        assert outcome.repos_processed == 0

    def test_unknown_user_raises(self, test_session, unknown_user_id, trigger):
        with pytest.raises(UserNotFoundError, match=str(unknown_user_id)):
            GitHubIngestionService(test_session, trigger).ingest(unknown_user_id)

    def test_trigger_failure_does_not_change_outcome(
        self, test_session, test_user, failing_trigger, stub_github
    ):
        outcome = GitHubIngestionService(test_session, failing_trigger).ingest(test_user.id)

        assert outcome.success

    def test_malformed_readme_payload_keeps_run(
        self, test_session, test_user, trigger, monkeypatch, mock_response
    ):
        repos = [_repo("alpha", 1, 0)]
        monkeypatch.setattr(github_api, "fetch_pinned_repos", lambda u, t: FetchResult.ok(repos))
        monkeypatch.setattr(
            github_api.requests, "get", lambda *a, **kw: mock_response(200, ["not", "an", "object"])
        )

        outcome = GitHubIngestionService(test_session, trigger).ingest(test_user.id)

        assert outcome.success
        entry = KnowledgeBaseRepository(test_session).get_by_key(
            test_user.id, "github", repos[0].url
        )
        assert "README" not in entry.content

    def test_readme_fetch_sees_bound_context(self, test_session, test_user, trigger, monkeypatch):
        repos = [_repo(f"r{i}", i, 0) for i in range(3)]
        monkeypatch.setattr(github_api, "fetch_pinned_repos", lambda u, t: FetchResult.ok(repos))
        seen = []

        def record_context(url, token):
            seen.append(structlog.contextvars.get_contextvars().get("request_id"))
            return ""

        monkeypatch.setattr(github_api, "fetch_readme", record_context)

        with LogContext(request_id="req-42"):
            GitHubIngestionService(test_session, trigger).ingest(test_user.id)

        assert seen == ["req-42"] * 3

    def test_expired_deadline_rolls_back(self, test_session, test_user, trigger, stub_github):
        user_id = test_user.id
        deadline = Deadline(timeout=0.2, expires_at=time.monotonic() - 1)

        with pytest.raises(IngestionTimeoutError, match=r"github ingestion timed out after 0\.2s"):
            GitHubIngestionService(test_session, trigger, deadline).ingest(user_id)

        assert KnowledgeBaseRepository(test_session).list_for_user(user_id) == []
        assert test_session.get(UserInfo, user_id) is None
        assert trigger.calls == []

    def test_live_deadline_commits(self, test_session, test_user, trigger, stub_github):
        deadline = Deadline.after(30)

        outcome = GitHubIngestionService(test_session, trigger, deadline).ingest(test_user.id)

        assert outcome.success
        assert len(trigger.calls) == 1
