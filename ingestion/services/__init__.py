"""
Ingestion coordinators.

Each coordinator works inside one SQLAlchemy session and returns an outcome
value; domain failures never raise. UserNotFoundError, and IngestionTimeoutError
when a deadline is set, are the exceptions that cross a coordinator boundary.
"""

from ingestion.services.base import Deadline
from ingestion.services.composite_ingestion import CompositeIngestionService
from ingestion.services.github_ingestion import GitHubIngestionService
from ingestion.services.leetcode_ingestion import LeetCodeIngestionService
from ingestion.services.linkedin_ingestion import LinkedInIngestionService
from ingestion.services.processing_trigger import ProcessingTrigger
from ingestion.services.results import (
    CompositeOutcome,
    GitHubOutcome,
    LeetCodeOutcome,
    LinkedInOutcome,
    ResumeOutcome,
    fold_outcomes,
)
from ingestion.services.resume_ingestion import ResumeIngestionService

__all__ = [
    "Deadline",
    "GitHubIngestionService",
    "LeetCodeIngestionService",
    "ResumeIngestionService",
    "LinkedInIngestionService",
    "CompositeIngestionService",
    "ProcessingTrigger",
    "GitHubOutcome",
    "LeetCodeOutcome",
    "ResumeOutcome",
    "LinkedInOutcome",
    "CompositeOutcome",
    "fold_outcomes",
]
