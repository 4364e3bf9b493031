"""
User repository for database operations.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

import repositories.db_models as db_models
from .base import BaseRepository


class UserRepository(BaseRepository[db_models.User]):
    """Repository for User entity database operations."""

    def __init__(self, db: Session):
        """
        Initialize user repository.

        Args:
            db: Database session
        """
        super().__init__(db_models.User, db)

    def get_by_email(self, email: str) -> Optional[db_models.User]:
        """
        Get user by email.

        Args:
            email: User email (compared lower-cased)

        Returns:
            User if found, None otherwise
        """
        return (
            self.db.query(db_models.User)
            .filter(db_models.User.email == email.lower())
            .first()
        )

    def email_exists(self, email: str) -> bool:
        """
        Check if email already exists.

        Args:
            email: Email to check

        Returns:
            True if email exists, False otherwise
        """
        return self.get_by_email(email) is not None

    def list_by_role(
        self, role: db_models.UserRole, skip: int = 0, limit: int = 10
    ) -> List[db_models.User]:
        """
        Get users holding a role, newest first.

        Args:
            role: Role to filter on
            skip: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            List of users
        """
        return (
            self.db.query(db_models.User)
            .filter(db_models.User.role == role)
            .order_by(db_models.User.created_at.desc(), db_models.User.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def count_by_role(self, role: db_models.UserRole) -> int:
        return self.db.query(db_models.User).filter(db_models.User.role == role).count()

    def _mentors(self, approved: bool):  # type: ignore[no-untyped-def]
        return self.db.query(db_models.User).filter(
            db_models.User.role == db_models.UserRole.MENTOR,
            db_models.User.is_mentor_approved == approved,
        )

    def list_approved_mentors(
        self, skip: int = 0, limit: int = 10
    ) -> List[db_models.User]:
        """Get approved mentors, newest first."""
        return (
            self._mentors(True)
            .order_by(db_models.User.created_at.desc(), db_models.User.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def count_approved_mentors(self) -> int:
        return self._mentors(True).count()

    def list_pending_mentors(
        self, skip: int = 0, limit: int = 10
    ) -> List[db_models.User]:
        """Get mentors awaiting approval, oldest first so the queue drains in order."""
        return (
            self._mentors(False)
            .order_by(db_models.User.created_at.asc(), db_models.User.id.asc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def count_pending_mentors(self) -> int:
        return self._mentors(False).count()
