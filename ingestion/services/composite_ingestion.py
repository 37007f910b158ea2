"""
Composite ingestion: GitHub, LeetCode and resume in one call.

Each source runs as an isolated branch in its own session. A branch that
raises is reported as a failed sub-outcome; siblings still run and keep
their committed writes.

In parallel mode every branch shares one Deadline. A branch that reaches
its commit after the deadline rolls back and reports a timeout, so a
timed-out source never leaves writes behind. Branches are always joined
before the call returns.
"""

import contextvars
import uuid
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from contextlib import AbstractContextManager
from typing import Optional, Union

from sqlalchemy.orm import Session

from ingestion.config import get_settings
from ingestion.db import db
from ingestion.exceptions import IngestionTimeoutError
from ingestion.logging import LogContext, get_logger, log_timing

from .base import Deadline
from .github_ingestion import GitHubIngestionService
from .leetcode_ingestion import LeetCodeIngestionService
from .processing_trigger import ProcessingTrigger
from .results import CompositeOutcome, GitHubOutcome, LeetCodeOutcome, ResumeOutcome, fold_outcomes
from .resume_ingestion import ResumeIngestionService

logger = get_logger("composite.ingestion")

SessionFactory = Callable[[], AbstractContextManager[Session]]
Outcome = Union[GitHubOutcome, LeetCodeOutcome, ResumeOutcome]
Branch = Callable[[Session, Optional[Deadline]], Outcome]

GITHUB = "github"
LEETCODE = "leetcode"
RESUME = "resume"

_FAILURE_TYPES: dict[str, type] = {
    GITHUB: GitHubOutcome,
    LEETCODE: LeetCodeOutcome,
    RESUME: ResumeOutcome,
}


class CompositeIngestionService:
    """
    Run every requested source and fold the results.

    GitHub always runs. LeetCode runs when a non-blank handle is given and
    the resume branch runs when both file bytes and a filename are given.
    """

    def __init__(
        self,
        session_factory: Optional[SessionFactory] = None,
        trigger: Optional[ProcessingTrigger] = None,
        parallel: Optional[bool] = None,
        timeout: Optional[float] = None,
    ):
        settings = get_settings()
        self.session_factory = session_factory or db.session
        self.trigger = trigger
        self.parallel = settings.ingest_all_parallel if parallel is None else parallel
        self.timeout = timeout or settings.source_timeout_seconds

    def _run_branch(self, name: str, work: Branch, deadline: Optional[Deadline] = None) -> Outcome:
        """Run one source in its own session; any exception becomes a failure outcome."""
        try:
            with LogContext(source=name), self.session_factory() as session:
                return work(session, deadline)
        except IngestionTimeoutError as e:
            logger.error("composite_branch_timeout", source=name, timeout=e.timeout)
            return _FAILURE_TYPES[name].failure(f"Error: {e}")
        except Exception as e:
            logger.error("composite_branch_failed", source=name, error=str(e))
            return _FAILURE_TYPES[name].failure(f"Error: {e}")

    def _run_sequential(self, branches: dict[str, Branch]) -> dict[str, Outcome]:
        return {name: self._run_branch(name, work) for name, work in branches.items()}

    def _run_parallel(self, branches: dict[str, Branch]) -> dict[str, Outcome]:
        deadline = Deadline.after(self.timeout)
        # Leaving the block joins every branch; each one enforces the deadline itself
        with ThreadPoolExecutor(max_workers=len(branches)) as executor:
            futures = {
                name: executor.submit(
                    contextvars.copy_context().run, self._run_branch, name, work, deadline
                )
                for name, work in branches.items()
            }
            return {name: future.result() for name, future in futures.items()}

    @log_timing("composite_ingestion", logger)
    def ingest_all(
        self,
        user_id: uuid.UUID,
        leetcode_handle: Optional[str] = None,
        resume_content: Optional[bytes] = None,
        resume_filename: Optional[str] = None,
        resume_content_type: Optional[str] = None,
    ) -> CompositeOutcome:
        branches: dict[str, Branch] = {
            GITHUB: lambda session, deadline: GitHubIngestionService(
                session, self.trigger, deadline
            ).ingest(user_id),
        }
        if leetcode_handle and leetcode_handle.strip():
            branches[LEETCODE] = lambda session, deadline: LeetCodeIngestionService(
                session, self.trigger, deadline
            ).ingest(user_id, leetcode_handle)
        if resume_content and resume_filename:
            branches[RESUME] = lambda session, deadline: ResumeIngestionService(
                session, self.trigger, deadline=deadline
            ).ingest(user_id, resume_content, resume_filename, resume_content_type)

        logger.info(
            "composite_ingestion_started",
            user_id=str(user_id),
            sources=list(branches),
            parallel=self.parallel,
        )

        if self.parallel and len(branches) > 1:
            results = self._run_parallel(branches)
        else:
            results = self._run_sequential(branches)

        outcome = fold_outcomes(
            results.get(GITHUB),  # type: ignore[arg-type]
            results.get(LEETCODE),  # type: ignore[arg-type]
            results.get(RESUME),  # type: ignore[arg-type]
        )
        logger.info(
            "composite_ingestion_completed", user_id=str(user_id), success=outcome.success
        )
        return outcome
