"""
Base repository class providing common database operations.
"""

import json
from typing import Any, Generic, TypeVar

from sqlalchemy import ColumnElement, String, cast
from sqlalchemy import delete as sa_delete
from sqlalchemy.orm import Session

from repositories.database import Base

T = TypeVar("T", bound=Base)  # type: ignore[valid-type]


def json_list_contains(column: Any, value: str) -> ColumnElement[bool]:
    """
    Portable membership test for a JSON list column of strings.

    Matches the serialized element, quotes and ``\\uXXXX`` escapes included,
    against the column's JSON text. LIKE wildcards in ``value`` are escaped.
    """
    return cast(column, String).contains(json.dumps(value), autoescape=True)


class BaseRepository(Generic[T]):
    """
    Base repository providing common CRUD operations.

    Methods that end in a commit are meant for single-step writes. Multi-step
    units of work (cascade deletes, mutation + audit entry) use ``add``,
    ``remove`` and ``delete_where`` and commit once at the end.
    """

    def __init__(self, model: type[T], db: Session):
        """
        Initialize repository.

        Args:
            model: SQLAlchemy model class
            db: Database session
        """
        self.model = model
        self.db = db

    def get_by_id(self, id: int) -> T | None:
        """
        Get entity by ID.

        Args:
            id: Entity ID

        Returns:
            Entity if found, None otherwise
        """
        return self.db.query(self.model).filter(self.model.id == id).first()

    def get_page(self, offset: int = 0, limit: int = 10) -> list[T]:
        """Get entities newest first."""
        return (
            self.db.query(self.model)
            .order_by(self.model.created_at.desc(), self.model.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )

    def add(self, entity: T) -> None:
        """
        Add entity to session without committing.

        Args:
            entity: Entity to add
        """
        self.db.add(entity)

    def create(self, entity: T) -> T:
        """
        Create new entity.

        Args:
            entity: Entity to create

        Returns:
            Created entity
        """
        self.db.add(entity)
        self.db.commit()
        self.db.refresh(entity)
        return entity

    def update(self, entity: T) -> T:
        """
        Persist pending changes on an entity.

        Args:
            entity: Entity to update

        Returns:
            Updated entity
        """
        self.db.commit()
        self.db.refresh(entity)
        return entity

    def delete(self, entity: T) -> None:
        """
        Delete entity and commit.

        Args:
            entity: Entity to delete
        """
        self.db.delete(entity)
        self.db.commit()

    def remove(self, entity: T) -> None:
        """Mark entity for deletion without committing."""
        self.db.delete(entity)

    def delete_where(self, *criteria: Any) -> int:
        """
        Bulk delete rows matching the criteria without committing.

        Returns:
            Number of rows deleted
        """
        result = self.db.execute(
            sa_delete(self.model)
            .where(*criteria)
            .execution_options(synchronize_session=False)
        )
        return int(result.rowcount or 0)

    def count(self) -> int:
        """
        Count total number of entities.

        Returns:
            Total count
        """
        return self.db.query(self.model).count()

    def commit(self) -> None:
        """Commit the current transaction."""
        self.db.commit()

    def flush(self) -> None:
        """Flush pending changes without committing."""
        self.db.flush()

    def rollback(self) -> None:
        """Rollback the current transaction."""
        self.db.rollback()

    def refresh(self, entity: T) -> None:
        """
        Refresh entity from database.

        Args:
            entity: Entity to refresh
        """
        self.db.refresh(entity)
