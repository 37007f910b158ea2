# Resume parsing and field extraction module

from .resume_extractor import (
    cap_words,
    clean_text,
    compute_file_hash,
    count_words,
    extract_education,
    extract_experiences,
    extract_skills,
    extract_summary,
    extract_text,
    is_pdf,
    process_resume,
)

__all__ = [
    "is_pdf",
    "extract_text",
    "clean_text",
    "cap_words",
    "count_words",
    "compute_file_hash",
    "extract_skills",
    "extract_experiences",
    "extract_education",
    "extract_summary",
    "process_resume",
]
