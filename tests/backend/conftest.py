from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from backend.app.database import db
from backend.app.main import create_app
from ingestion.models import User


@pytest.fixture
def app_db():
    """Point the shared DatabaseManager at a fresh in-memory database."""
    db.reset()
    db.initialize("sqlite://")
    db.create_all_tables()
    yield db
    db.reset()


@pytest.fixture
def test_app_client(app_db) -> Iterator[TestClient]:
    app = create_app()
    with TestClient(app) as client:
        yield client


@pytest.fixture
def api_user(app_db) -> User:
    with app_db.session() as session:
        user = User(
            email="tester@example.com",
            github_username="tester",
            github_token="ghp_tester",
        )
        session.add(user)
        session.flush()
        session.refresh(user)
    return user
