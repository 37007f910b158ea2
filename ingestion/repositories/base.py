"""Generic repository over one mapped model."""

import uuid
from typing import Generic, TypeVar

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ingestion.db import Base

T = TypeVar("T", bound=Base)


class BaseRepository(Generic[T]):
    """
    Shared lookups for repositories bound to a session.

    Subclasses set ``model``. Repositories flush but never commit; the
    session scope that created the session decides when to commit.

        class UserRepository(BaseRepository[User]):
            model = User
    """

    model: type[T]

    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, id: uuid.UUID) -> T | None:
        return self.session.get(self.model, id)

    def count(self, **filters) -> int:
        """Count rows matching column equality filters."""
        columns = self.model.__mapper__.columns
        stmt = select(func.count()).select_from(self.model)
        for key, value in filters.items():
            if key not in columns:
                raise ValueError(f"Unknown filter key: {key}")
            stmt = stmt.where(columns[key] == value)
        return self.session.scalar(stmt) or 0
