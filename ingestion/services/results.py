"""
Outcome values returned by the ingestion coordinators.

Every coordinator returns one of these instead of raising for domain
failures. CompositeOutcome is built only through fold_outcomes().
"""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class GitHubOutcome:
    success: bool
    message: str
    repos_processed: int = 0
    repo_names: tuple[str, ...] = ()

    @classmethod
    def failure(cls, message: str) -> "GitHubOutcome":
        return cls(success=False, message=message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "message": self.message,
            "repos_processed": self.repos_processed,
            "repo_names": list(self.repo_names),
        }


@dataclass(frozen=True)
class LeetCodeOutcome:
    success: bool
    message: str
    problems_solved: int = 0

    @classmethod
    def failure(cls, message: str) -> "LeetCodeOutcome":
        return cls(success=False, message=message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "message": self.message,
            "problems_solved": self.problems_solved,
        }


@dataclass(frozen=True)
class ResumeOutcome:
    success: bool
    message: str
    word_count: int = 0

    @classmethod
    def failure(cls, message: str) -> "ResumeOutcome":
        return cls(success=False, message=message)

    def to_dict(self) -> dict[str, Any]:
        return {"success": self.success, "message": self.message, "word_count": self.word_count}


@dataclass(frozen=True)
class LinkedInOutcome:
    """On success the message carries the job description as Markdown."""

    success: bool
    message: str

    @classmethod
    def failure(cls, message: str) -> "LinkedInOutcome":
        return cls(success=False, message=message)

    def to_dict(self) -> dict[str, Any]:
        return {"success": self.success, "message": self.message}


@dataclass(frozen=True)
class CompositeOutcome:
    """
    Result of ingesting every requested source.

    Sub-outcomes are None for sources that were not attempted.
    """

    success: bool
    message: str
    github: Optional[GitHubOutcome] = None
    leetcode: Optional[LeetCodeOutcome] = None
    resume: Optional[ResumeOutcome] = None
    attempted: tuple[str, ...] = field(default=())

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "message": self.message,
            "github_result": self.github.to_dict() if self.github else None,
            "leetcode_result": self.leetcode.to_dict() if self.leetcode else None,
            "resume_result": self.resume.to_dict() if self.resume else None,
        }


def fold_outcomes(
    github: Optional[GitHubOutcome],
    leetcode: Optional[LeetCodeOutcome] = None,
    resume: Optional[ResumeOutcome] = None,
) -> CompositeOutcome:
    """
    Combine per-source outcomes into one.

    success is the AND over attempted sources. The message joins
    "<Source>: <message>" parts with " | " in the fixed order GitHub,
    LeetCode, Resume, independent of the order the sources finished in.
    """
    labelled = [
        ("GitHub", github),
        ("LeetCode", leetcode),
        ("Resume", resume),
    ]
    attempted = [(label, outcome) for label, outcome in labelled if outcome is not None]

    return CompositeOutcome(
        success=all(outcome.success for _, outcome in attempted),
        message=" | ".join(f"{label}: {outcome.message}" for label, outcome in attempted),
        github=github,
        leetcode=leetcode,
        resume=resume,
        attempted=tuple(label for label, _ in attempted),
    )
