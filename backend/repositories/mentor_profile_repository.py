"""
Mentor profile repository for database operations.
"""

from typing import List, Optional, Tuple

from sqlalchemy import case, update
from sqlalchemy.orm import Query, Session

import repositories.db_models as db_models
from .base import BaseRepository, json_list_contains


class MentorProfileRepository(BaseRepository[db_models.MentorProfile]):
    """Repository for MentorProfile entity database operations."""

    def __init__(self, db: Session):
        super().__init__(db_models.MentorProfile, db)

    def get_by_user_id(self, user_id: int) -> Optional[db_models.MentorProfile]:
        """
        Get the profile owned by a user.

        Args:
            user_id: Owner user ID

        Returns:
            MentorProfile if found, None otherwise
        """
        return (
            self.db.query(db_models.MentorProfile)
            .filter(db_models.MentorProfile.user_id == user_id)
            .first()
        )

    def _with_approval(self, approved: bool) -> Query:
        # Approval lives on the owning user record.
        return (
            self.db.query(db_models.MentorProfile)
            .join(db_models.User, db_models.MentorProfile.user_id == db_models.User.id)
            .filter(db_models.User.is_mentor_approved == approved)
        )

    def list_approved(
        self, skip: int = 0, limit: int = 10
    ) -> List[db_models.MentorProfile]:
        """
        Get approved profiles ordered by total upvotes.

        Args:
            skip: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            List of mentor profiles
        """
        return (
            self._with_approval(True)
            .order_by(
                db_models.MentorProfile.total_upvotes.desc(),
                db_models.MentorProfile.id.asc(),
            )
            .offset(skip)
            .limit(limit)
            .all()
        )

    def count_approved(self) -> int:
        return self._with_approval(True).count()

    def list_pending(
        self, skip: int = 0, limit: int = 10
    ) -> List[db_models.MentorProfile]:
        """Get profiles awaiting admin approval, newest first."""
        return (
            self._with_approval(False)
            .order_by(
                db_models.MentorProfile.created_at.desc(),
                db_models.MentorProfile.id.desc(),
            )
            .offset(skip)
            .limit(limit)
            .all()
        )

    def count_pending(self) -> int:
        return self._with_approval(False).count()

    def _with_tag(self, tag: str) -> Query:
        return self._with_approval(True).filter(
            json_list_contains(db_models.MentorProfile.expertise_tags, tag.lower())
        )

    def list_by_tag(
        self, tag: str, skip: int = 0, limit: int = 10
    ) -> List[db_models.MentorProfile]:
        """
        Get approved profiles listing an expertise tag.

        Args:
            tag: Expertise tag
            skip: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            List of mentor profiles ordered by total upvotes
        """
        return (
            self._with_tag(tag)
            .order_by(
                db_models.MentorProfile.total_upvotes.desc(),
                db_models.MentorProfile.id.asc(),
            )
            .offset(skip)
            .limit(limit)
            .all()
        )

    def count_by_tag(self, tag: str) -> int:
        return self._with_tag(tag).count()

    def get_top(self, limit: int = 10) -> List[db_models.MentorProfile]:
        """Get the approved profiles with the most upvotes."""
        return self.list_approved(skip=0, limit=limit)

    def adjust_total_upvotes(self, user_id: int, delta: int) -> None:
        """
        Atomically add ``delta`` to the owner's total upvotes, never below 0.

        No-op when the user has no profile. Does not commit.

        Args:
            user_id: Owner user ID
            delta: Signed increment
        """
        column = db_models.MentorProfile.total_upvotes
        if delta >= 0:
            new_value = column + delta
        else:
            new_value = case((column + delta > 0, column + delta), else_=0)
        self.db.execute(
            update(db_models.MentorProfile)
            .where(db_models.MentorProfile.user_id == user_id)
            .values(total_upvotes=new_value)
            .execution_options(synchronize_session=False)
        )

    def set_total_upvotes(self, profile_id: int, value: int) -> None:
        self.db.execute(
            update(db_models.MentorProfile)
            .where(db_models.MentorProfile.id == profile_id)
            .values(total_upvotes=value)
            .execution_options(synchronize_session=False)
        )

    def cached_totals(self) -> List[Tuple[int, int, int]]:
        """(profile_id, user_id, total_upvotes) for every profile."""
        return [
            (row[0], row[1], row[2])
            for row in self.db.query(
                db_models.MentorProfile.id,
                db_models.MentorProfile.user_id,
                db_models.MentorProfile.total_upvotes,
            ).all()
        ]
