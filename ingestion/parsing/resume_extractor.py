"""
Resume text extraction.

Turns an uploaded PDF into capped plain text plus the structured fields kept
on the aggregate profile (skills, experience entries, education entries and
a summary line). Field extraction is heuristic and regex-based; the caps and
thresholds live in ingestion.constants.
"""

import hashlib
import io
import re
import unicodedata
from datetime import datetime, timezone
from typing import List, Optional

import pdfplumber

from ingestion.constants import (
    DEFAULT_WORD_CAP,
    FILE_HASH_LENGTH,
    MAX_EDUCATION,
    MAX_EDUCATION_CHARS,
    MAX_EXPERIENCE_CHARS,
    MAX_EXPERIENCES,
    MAX_SKILL_LENGTH,
    MAX_SKILLS,
    MIN_EDUCATION_CHARS,
    MIN_EXPERIENCE_CHARS,
    PARAGRAPH_MAX_CHARS,
    PARAGRAPH_MIN_CHARS,
    PDF_CONTENT_TYPE,
    PDF_SUFFIX,
    SKILL_DELIMITERS,
    SUMMARY_MAX_CHARS,
    SUMMARY_MIN_CHARS,
    TRUNCATION_SUFFIX,
)
from ingestion.exceptions import ExtractionEmptyError, InvalidInputError
from ingestion.logging import get_logger
from ingestion.stats import ResumeSummary

logger = get_logger("resume")


SKILL_PATTERNS = [
    r"skills?[:\s]+([^\n]+)",
    r"technical\s+skills?[:\s]+([^\n]+)",
    r"programming\s+languages?[:\s]+([^\n]+)",
    r"technologies?[:\s]+([^\n]+)",
    r"frameworks?[:\s]+([^\n]+)",
]

EXPERIENCE_SECTION = re.compile(
    r"(experience|employment|work\s+history)[:\s]*([\s\S]*?)"
    r"(?=education|skills|projects|certifications|$)",
    re.IGNORECASE | re.MULTILINE,
)
EXPERIENCE_SPLIT = re.compile(
    r"(?=\d{4}\s*[-–]|january|february|march|april|may|june|july|august"
    r"|september|october|november|december)",
    re.IGNORECASE,
)

EDUCATION_SECTION = re.compile(
    r"(education|academic|qualifications?)[:\s]*([\s\S]*?)"
    r"(?=experience|skills|projects|certifications|$)",
    re.IGNORECASE | re.MULTILINE,
)
EDUCATION_SPLIT = re.compile(
    r"(?=bachelor|master|phd|b\.s\.|m\.s\.|b\.a\.|m\.a\.|university|college|institute)",
    re.IGNORECASE,
)

SUMMARY_PATTERN = re.compile(
    rf"(summary|objective|profile|about)[:\s]*([^\n]{{{SUMMARY_MIN_CHARS},{SUMMARY_MAX_CHARS}}})",
    re.IGNORECASE | re.MULTILINE,
)

_SKILL_SPLIT = re.compile("[" + re.escape(SKILL_DELIMITERS) + "]")


def is_pdf(filename: Optional[str], content_type: Optional[str]) -> bool:
    """Accept by declared content type or by a .pdf file name."""
    if content_type == PDF_CONTENT_TYPE:
        return True
    return bool(filename) and filename.lower().endswith(PDF_SUFFIX)


def extract_text(content: bytes) -> Optional[str]:
    """
    Extract page text in reading order.

    Returns None when the bytes cannot be parsed as a PDF.
    """
    try:
        with pdfplumber.open(io.BytesIO(content)) as pdf:
            pages = [page.extract_text() or "" for page in pdf.pages]
    except Exception as e:
        logger.error("pdf_text_extraction_failed", error=str(e))
        return None
    return "\n".join(pages)


def _keep_char(ch: str) -> bool:
    if ch.isspace():
        return True
    return unicodedata.category(ch)[0] in ("L", "N", "P")


def clean_text(text: str) -> str:
    text = re.sub(r"\s+", " ", text)
    text = "".join(ch for ch in text if _keep_char(ch))
    text = re.sub(r"\r\n|\r", "\n", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def cap_words(text: str, max_words: int) -> str:
    """Keep the first max_words whitespace-separated tokens."""
    words = text.split()
    if len(words) <= max_words:
        return text
    return " ".join(words[:max_words])


def count_words(text: Optional[str]) -> int:
    if not text or not text.strip():
        return 0
    return len(text.split())


def compute_file_hash(content: bytes) -> str:
    """First 16 hex chars of the SHA-256 of the raw upload."""
    return hashlib.sha256(content).hexdigest()[:FILE_HASH_LENGTH]


def _truncate(text: str, limit: int) -> str:
    return text[:limit] + TRUNCATION_SUFFIX if len(text) > limit else text


def extract_skills(text: str) -> List[str]:
    skills: List[str] = []
    for pattern in SKILL_PATTERNS:
        for match in re.finditer(pattern, text, re.IGNORECASE):
            for skill in _SKILL_SPLIT.split(match.group(1).strip()):
                cleaned = skill.strip()
                if cleaned and len(cleaned) < MAX_SKILL_LENGTH and cleaned not in skills:
                    skills.append(cleaned)
    return skills[:MAX_SKILLS]


def extract_experiences(text: str) -> List[str]:
    match = EXPERIENCE_SECTION.search(text)
    if not match:
        return []

    experiences = []
    for entry in EXPERIENCE_SPLIT.split(match.group(2).strip()):
        cleaned = entry.strip()
        if len(cleaned) > MIN_EXPERIENCE_CHARS:
            experiences.append(_truncate(cleaned, MAX_EXPERIENCE_CHARS))
    return experiences[:MAX_EXPERIENCES]


def extract_education(text: str) -> List[str]:
    match = EDUCATION_SECTION.search(text)
    if not match:
        return []

    education = []
    for entry in EDUCATION_SPLIT.split(match.group(2).strip()):
        cleaned = entry.strip()
        if len(cleaned) > MIN_EDUCATION_CHARS:
            education.append(_truncate(cleaned, MAX_EDUCATION_CHARS))
    return education[:MAX_EDUCATION]


def extract_summary(text: str) -> str:
    """
    First labelled summary line, else the first mid-sized paragraph, else "".
    """
    match = SUMMARY_PATTERN.search(text)
    if match:
        return match.group(2).strip()

    for paragraph in text.split("\n\n"):
        stripped = paragraph.strip()
        if PARAGRAPH_MIN_CHARS <= len(stripped) < PARAGRAPH_MAX_CHARS:
            return stripped
    return ""


def process_resume(
    content: bytes,
    filename: Optional[str],
    content_type: Optional[str] = None,
    word_cap: int = DEFAULT_WORD_CAP,
) -> ResumeSummary:
    """
    Run the full extraction pipeline on an uploaded file.

    Raises:
        InvalidInputError: the upload is not a PDF
        ExtractionEmptyError: the PDF yielded no text
    """
    if not is_pdf(filename, content_type):
        raise InvalidInputError("Invalid file type. Only PDF files are supported.")

    raw_text = extract_text(content)
    if raw_text is None or not raw_text.strip():
        raise ExtractionEmptyError("Could not extract text from PDF")

    capped = cap_words(clean_text(raw_text), word_cap)
    word_count = count_words(capped)
    logger.info("resume_text_extracted", word_count=word_count, word_cap=word_cap)

    return ResumeSummary(
        file_name=filename or "",
        file_hash=compute_file_hash(content),
        word_count=word_count,
        processed_at=datetime.now(timezone.utc),
        raw_text=capped,
        skills=extract_skills(capped),
        experiences=extract_experiences(capped),
        education=extract_education(capped),
        summary=extract_summary(capped),
    )
