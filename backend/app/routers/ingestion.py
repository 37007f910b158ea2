"""
Ingestion endpoints.

Every ingestion call answers HTTP 200. Domain failures (unknown user,
upstream outage, bad upload, malformed id) come back as success=false with
a message; only a request missing required fields is rejected with 422.
"""

import time
import uuid
from collections.abc import Callable
from typing import Optional, TypeVar

from fastapi import APIRouter, Depends, File, Form, UploadFile
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ingestion.logging import get_logger
from ingestion.services import (
    CompositeIngestionService,
    GitHubIngestionService,
    LeetCodeIngestionService,
    LinkedInIngestionService,
    ResumeIngestionService,
)

from ..config import get_settings
from ..database import get_db
from ..schemas import (
    GitHubIngestionRequest,
    GitHubIngestionResponse,
    HealthCheckRequest,
    HealthCheckResponse,
    IngestAllResponse,
    LeetCodeIngestionRequest,
    LeetCodeIngestionResponse,
    LinkedInJobRequest,
    LinkedInJobResponse,
    ResumeIngestionResponse,
)

logger = get_logger("api.ingestion")

router = APIRouter(prefix="/ingestion", tags=["ingestion"])

HEALTHY_STATUS = "Ingestion service is healthy"

ResponseT = TypeVar("ResponseT", bound=BaseModel)


class InvalidUserIdError(ValueError):
    def __init__(self, raw: str):
        super().__init__(f"Invalid user id: {raw}")


def _parse_user_id(raw: str) -> uuid.UUID:
    try:
        return uuid.UUID(str(raw).strip())
    except ValueError as e:
        raise InvalidUserIdError(raw) from e


def _call(
    operation: str,
    response_model: type[ResponseT],
    work: Callable[[], dict],
    session: Optional[Session] = None,
) -> ResponseT:
    """
    Run a coordinator call and serialize its outcome.

    Anything raised (including UserNotFoundError) becomes a failure response
    with message "Error: <exc>". Partial writes in the request session are
    rolled back first.
    """
    try:
        return response_model(**work())
    except Exception as e:
        if session is not None:
            session.rollback()
        logger.error("ingestion_call_failed", operation=operation, error=str(e))
        return response_model(success=False, message=f"Error: {e}")


@router.post("/github", response_model=GitHubIngestionResponse)
def ingest_github(payload: GitHubIngestionRequest, session: Session = Depends(get_db)):
    def work() -> dict:
        user_id = _parse_user_id(payload.user_id)
        return GitHubIngestionService(session).ingest(user_id).to_dict()

    return _call("github", GitHubIngestionResponse, work, session)


@router.post("/leetcode", response_model=LeetCodeIngestionResponse)
def ingest_leetcode(payload: LeetCodeIngestionRequest, session: Session = Depends(get_db)):
    def work() -> dict:
        user_id = _parse_user_id(payload.user_id)
        return LeetCodeIngestionService(session).ingest(user_id, payload.leetcode_username).to_dict()

    return _call("leetcode", LeetCodeIngestionResponse, work, session)


@router.post("/resume", response_model=ResumeIngestionResponse)
def ingest_resume(
    user_id: str = Form(...),
    file: UploadFile = File(...),
    session: Session = Depends(get_db),
):
    max_bytes = get_settings().max_upload_size_bytes

    def work() -> dict:
        parsed_id = _parse_user_id(user_id)
        content = file.file.read(max_bytes + 1)
        if len(content) > max_bytes:
            return {
                "success": False,
                "message": f"File size must be less than {get_settings().max_upload_size_mb}MB",
            }
        return ResumeIngestionService(session).ingest(
            parsed_id, content, file.filename, file.content_type
        ).to_dict()

    return _call("resume", ResumeIngestionResponse, work, session)


@router.post("/linkedin-job", response_model=LinkedInJobResponse)
def ingest_linkedin_job(payload: LinkedInJobRequest, session: Session = Depends(get_db)):
    def work() -> dict:
        user_id = _parse_user_id(payload.user_id)
        return LinkedInIngestionService(session).ingest(user_id, payload.job_id).to_dict()

    return _call("linkedin_job", LinkedInJobResponse, work, session)


@router.post("/all", response_model=IngestAllResponse)
def ingest_all(
    user_id: str = Form(...),
    leetcode_username: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
):
    max_bytes = get_settings().max_upload_size_bytes

    def work() -> dict:
        parsed_id = _parse_user_id(user_id)
        content = file.file.read(max_bytes + 1) if file is not None else None
        if content is not None and len(content) > max_bytes:
            return {
                "success": False,
                "message": f"File size must be less than {get_settings().max_upload_size_mb}MB",
            }
        return CompositeIngestionService().ingest_all(
            parsed_id,
            leetcode_handle=leetcode_username,
            resume_content=content,
            resume_filename=file.filename if file is not None else None,
            resume_content_type=file.content_type if file is not None else None,
        ).to_dict()

    return _call("all", IngestAllResponse, work)


def _health(caller_name: Optional[str]) -> HealthCheckResponse:
    logger.debug("health_check", caller_name=caller_name)
    return HealthCheckResponse(
        healthy=True,
        status=HEALTHY_STATUS,
        timestamp_millis=int(time.time() * 1000),
    )


@router.get("/health", response_model=HealthCheckResponse)
def health_check(caller_name: Optional[str] = None):
    return _health(caller_name)


@router.post("/health", response_model=HealthCheckResponse)
def health_check_post(payload: Optional[HealthCheckRequest] = None):
    return _health(payload.caller_name if payload else None)
