"""
LinkedIn public job page scraper.

Fetches https://www.linkedin.com/jobs/view/<job_id>, pulls the job
description region out of the page and converts it to Markdown.
"""

import httpx
from bs4 import BeautifulSoup
from bs4.element import Tag
from markdownify import markdownify

from ingestion.config import get_settings
from ingestion.constants import (
    LINKEDIN_CONTENT_SELECTOR,
    LINKEDIN_JOB_ID_LENGTH,
    LINKEDIN_USER_AGENT,
)
from ingestion.logging import get_logger

from .base import FetchResult

logger = get_logger("linkedin")


def is_valid_job_id(job_id: str | None) -> bool:
    """A job id is exactly ten ASCII digits."""
    if not job_id or len(job_id) != LINKEDIN_JOB_ID_LENGTH:
        return False
    return job_id.isascii() and job_id.isdigit()


def job_url(job_id: str) -> str:
    return f"{get_settings().linkedin_jobs_base_url.rstrip('/')}/{job_id}"


def clean_job_html(soup: BeautifulSoup, region: Tag) -> None:
    """
    Normalize the description markup in place before Markdown conversion.

    LinkedIn renders section labels as <strong>Label</strong><br>, which
    converts to bold text glued to the following paragraph.
    """
    for br in region.select("strong + br"):
        br.decompose()

    for strong in region.find_all("strong"):
        text = strong.get_text().strip()
        if not text or (strong.parent is not None and strong.parent.name == "li"):
            continue
        heading = soup.new_tag("h3")
        heading.string = text
        strong.replace_with(heading)

    for br in region.select("br + br"):
        br.decompose()


def html_to_markdown(html: str) -> str:
    return markdownify(html, heading_style="ATX").strip()


def extract_job_content(html: str) -> str | None:
    """Pull the description region out of a job page. None when absent or empty."""
    soup = BeautifulSoup(html, "html.parser")
    region = soup.select_one(LINKEDIN_CONTENT_SELECTOR)
    if region is None or not region.get_text().strip():
        return None

    clean_job_html(soup, region)
    return html_to_markdown(region.decode_contents())


def fetch_job_content(job_id: str) -> FetchResult[str]:
    """
    Scrape a job description as Markdown.

    Returns NOT_FOUND for a malformed id or a page without a description
    region, UPSTREAM_ERROR when the page cannot be fetched.
    """
    if not is_valid_job_id(job_id):
        logger.warning("invalid_job_id", job_id=job_id)
        return FetchResult.not_found(f"Invalid job id: {job_id}")

    settings = get_settings()
    url = job_url(job_id)

    try:
        with httpx.Client(
            timeout=settings.source_timeout_seconds, follow_redirects=True
        ) as client:
            response = client.get(url, headers={"User-Agent": LINKEDIN_USER_AGENT})
    except httpx.HTTPError as e:
        logger.error("job_page_fetch_failed", job_id=job_id, error=str(e))
        return FetchResult.upstream_error(str(e))

    if response.status_code == 404:
        logger.warning("job_page_not_found", job_id=job_id)
        return FetchResult.not_found(f"Job not found: {job_id}")
    if response.status_code != 200:
        logger.error("job_page_request_failed", job_id=job_id, status=response.status_code)
        return FetchResult.upstream_error(f"HTTP {response.status_code}")

    content = extract_job_content(response.text)
    if content is None:
        logger.warning("job_content_region_missing", job_id=job_id)
        return FetchResult.not_found(f"Job content not found: {job_id}")

    return FetchResult.ok(content)
