"""
Tests for resume text extraction and field heuristics.
"""

import pytest

from ingestion.constants import DEFAULT_WORD_CAP, MAX_SKILLS
from ingestion.exceptions import ExtractionEmptyError, InvalidInputError
from ingestion.parsing import resume_extractor
from ingestion.parsing.resume_extractor import (
    cap_words,
    clean_text,
    compute_file_hash,
    count_words,
    extract_education,
    extract_experiences,
    extract_skills,
    extract_summary,
    is_pdf,
    process_resume,
)


class TestIsPdf:
    @pytest.mark.parametrize(
        "filename, content_type",
        [
            ("cv.pdf", None),
            ("CV.PDF", "application/octet-stream"),
            ("cv.bin", "application/pdf"),
        ],
    )
    def test_accepts_pdf(self, filename, content_type):
        assert is_pdf(filename, content_type)

    def test_rejects_other_types(self):
        assert not is_pdf("cv.docx", "application/msword")
        assert not is_pdf(None, None)


class TestCleanText:
    def test_collapses_whitespace_and_strips(self):
        assert clean_text("  Hello \t\n\n world  ") == "Hello world"

    def test_drops_symbols_but_keeps_punctuation(self):
        assert clean_text("Python★ C++, Go! ©2024") == "Python C, Go! 2024"

    def test_keeps_unicode_letters(self):
        assert clean_text("Zoë Müller") == "Zoë Müller"


class TestWordCap:
    def test_caps_5000_words_to_3000(self):
        text = " ".join(f"word{i}" for i in range(5000))

        capped = cap_words(text, DEFAULT_WORD_CAP)

        assert count_words(capped) == 3000
        assert capped.split()[-1] == "word2999"

    def test_under_cap_is_unchanged(self):
        assert cap_words("a b c", 10) == "a b c"

    def test_count_words_empty(self):
        assert count_words("") == 0
        assert count_words("   ") == 0


def test_file_hash_is_16_hex_chars():
    file_hash = compute_file_hash(b"%PDF-1.4 test")
    assert len(file_hash) == 16
    assert all(c in "0123456789abcdef" for c in file_hash)
    assert compute_file_hash(b"%PDF-1.4 test") == file_hash


class TestFieldExtraction:
    def test_extract_skills_splits_on_delimiters(self):
        text = "Skills: Python, Go; Docker | Kubernetes • SQL"
        assert extract_skills(text) == ["Python", "Go", "Docker", "Kubernetes", "SQL"]

    def test_extract_skills_dedupes_and_caps(self):
        many = ", ".join(f"skill{i}" for i in range(40))
        text = f"Skills: {many}\nTechnologies: skill1, skill2"

        skills = extract_skills(text)

        assert len(skills) == MAX_SKILLS
        assert len(set(skills)) == len(skills)

    def test_extract_skills_drops_long_entries(self):
        text = "Skills: " + "x" * 50 + ", Rust"
        assert extract_skills(text) == ["Rust"]

    def test_extract_experiences_splits_on_dates(self):
        text = (
            "Experience: 2020 - 2023 Senior Engineer at Acme building payments "
            "2018 - 2020 Engineer at Initech on reporting tools Education: BSc"
        )

        experiences = extract_experiences(text)

        assert len(experiences) == 2
        assert experiences[0].startswith("2020 - 2023 Senior Engineer")
        assert experiences[1].startswith("2018 - 2020 Engineer")

    def test_extract_experiences_truncates(self):
        text = "Experience: 2020 - " + "a" * 600

        experiences = extract_experiences(text)

        assert experiences[0].endswith("...")
        assert len(experiences[0]) == 503

    def test_extract_education(self):
        text = "Education: Bachelor of Science, State University 2016 Master of Arts, City College 2018"

        education = extract_education(text)

        assert education[0].startswith("Bachelor of Science")
        assert any(entry.startswith("Master of Arts") for entry in education)

    def test_extract_summary_from_label(self):
        line = "Backend engineer with eight years building data platforms in Python"
        assert extract_summary(f"Summary: {line}") == line

    def test_extract_summary_paragraph_fallback(self):
        paragraph = "A" * 120
        assert extract_summary(f"short\n\n{paragraph}\n\nrest") == paragraph

    def test_extract_summary_empty_when_nothing_fits(self):
        assert extract_summary("too short") == ""


class TestProcessResume:
    def test_rejects_non_pdf(self):
        with pytest.raises(InvalidInputError, match="Only PDF files are supported"):
            process_resume(b"hello", "cv.docx", "application/msword")

    def test_rejects_empty_text(self, monkeypatch):
        monkeypatch.setattr(resume_extractor, "extract_text", lambda content: "   ")

        with pytest.raises(ExtractionEmptyError, match="Could not extract text from PDF"):
            process_resume(b"%PDF-", "cv.pdf")

    def test_unparseable_pdf_is_empty(self):
        with pytest.raises(ExtractionEmptyError):
            process_resume(b"not really a pdf", "cv.pdf", "application/pdf")

    def test_word_cap_applies(self, monkeypatch):
        text = " ".join(f"w{i}" for i in range(5000))
        monkeypatch.setattr(resume_extractor, "extract_text", lambda content: text)

        summary = process_resume(b"%PDF-", "cv.pdf")

        assert summary.word_count == 3000
        assert count_words(summary.raw_text) == 3000

    def test_real_pdf(self, make_pdf):
        content = make_pdf(
            [
                "Jane Developer",
                "Skills: Python, PostgreSQL, Docker",
                "Experience: 2019 - 2024 Platform engineer at Example Corp",
            ]
        )

        summary = process_resume(content, "jane.pdf", "application/pdf")

        assert "Python" in summary.raw_text
        assert summary.word_count > 0
        assert summary.file_hash == compute_file_hash(content)
        assert "Python" in summary.skills
