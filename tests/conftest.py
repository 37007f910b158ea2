"""
Pytest fixtures for the ingestion core tests.

Each test gets a fresh in-memory SQLite database. StaticPool keeps the
single connection alive so every session sees the same data.
"""

import uuid
from contextlib import contextmanager

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from ingestion import models  # noqa: F401
from ingestion.config import get_settings
from ingestion.db import Base
from ingestion.models import User


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Settings are cached; tests that set env vars need a fresh read."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(scope="function")
def test_db():
    """Create a fresh test database for each test."""
    db_url = "sqlite://"
    engine = create_engine(
        db_url,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(
        bind=engine, autoflush=False, autocommit=False, expire_on_commit=False
    )

    yield db_url, TestingSessionLocal, engine

    engine.dispose()


@pytest.fixture
def test_session(test_db):
    """Get a test session from the test database."""
    _, TestingSessionLocal, _ = test_db
    session = TestingSessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@pytest.fixture
def session_scope(test_db):
    """Session factory with the same commit/rollback contract as db.session()."""
    _, TestingSessionLocal, _ = test_db

    @contextmanager
    def scope():
        session = TestingSessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    return scope


@pytest.fixture
def test_user(test_session) -> User:
    user = User(
        email="octocat@example.com",
        github_username="octocat",
        github_token="ghp_test_token",
    )
    test_session.add(user)
    test_session.commit()
    return user


@pytest.fixture
def unknown_user_id() -> uuid.UUID:
    return uuid.UUID("00000000-0000-0000-0000-000000000001")


class RecordingTrigger:
    """Stand-in for ProcessingTrigger that records calls instead of sending them."""

    def __init__(self, fail: bool = False):
        self.calls = []
        self.fail = fail

    def trigger_embedding_generation(self, user_id, source_type, entry_ids):
        self.calls.append((user_id, source_type, list(entry_ids)))
        if self.fail:
            raise RuntimeError("processing service down")
        return True


@pytest.fixture
def trigger() -> RecordingTrigger:
    return RecordingTrigger()


class MockResponse:
    """Minimal requests/httpx response double."""

    def __init__(self, status_code: int, payload=None, text: str = ""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


def _pdf_escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def build_pdf(lines: list[str]) -> bytes:
    """Build a one-page PDF with one Helvetica text line per entry."""
    text_ops = ["BT", "/F1 11 Tf", "14 TL", "72 740 Td"]
    for line in lines:
        text_ops.append(f"({_pdf_escape(line)}) Tj T*")
    text_ops.append("ET")
    stream = "\n".join(text_ops).encode("latin-1")

    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
        b"/Contents 4 0 R /Resources << /Font << /F1 5 0 R >> >> >>",
        b"<< /Length " + str(len(stream)).encode() + b" >>\nstream\n" + stream + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += f"{number} 0 obj\n".encode() + body + b"\nendobj\n"

    xref_offset = len(out)
    out += f"xref\n0 {len(objects) + 1}\n".encode()
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += f"{offset:010d} 00000 n \n".encode()
    out += f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R >>\n".encode()
    out += f"startxref\n{xref_offset}\n%%EOF\n".encode()
    return bytes(out)


@pytest.fixture
def make_pdf():
    return build_pdf


@pytest.fixture
def failing_trigger() -> RecordingTrigger:
    return RecordingTrigger(fail=True)


@pytest.fixture
def mock_response():
    return MockResponse
