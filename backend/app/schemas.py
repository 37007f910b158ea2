"""
Pydantic schemas for request and response validation.

user_id is accepted as a plain string; a malformed id is a domain failure
(success=false), not a validation error.
"""

from pydantic import BaseModel, Field


class GitHubIngestionRequest(BaseModel):
    user_id: str


class LeetCodeIngestionRequest(BaseModel):
    user_id: str
    leetcode_username: str


class LinkedInJobRequest(BaseModel):
    user_id: str
    job_id: str


class HealthCheckRequest(BaseModel):
    caller_name: str | None = None


class GitHubIngestionResponse(BaseModel):
    success: bool
    message: str
    repos_processed: int = 0
    repo_names: list[str] = Field(default_factory=list)


class LeetCodeIngestionResponse(BaseModel):
    success: bool
    message: str
    problems_solved: int = 0


class ResumeIngestionResponse(BaseModel):
    success: bool
    message: str
    word_count: int = 0


class LinkedInJobResponse(BaseModel):
    success: bool
    message: str


class IngestAllResponse(BaseModel):
    success: bool
    message: str
    github_result: GitHubIngestionResponse | None = None
    leetcode_result: LeetCodeIngestionResponse | None = None
    resume_result: ResumeIngestionResponse | None = None


class HealthCheckResponse(BaseModel):
    healthy: bool
    status: str
    timestamp_millis: int
