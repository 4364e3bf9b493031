"""
Comment repository for database operations.
"""

from typing import List

from sqlalchemy.orm import Session

import repositories.db_models as db_models
from .base import BaseRepository


class CommentRepository(BaseRepository[db_models.Comment]):
    """Repository for Comment entity database operations."""

    def __init__(self, db: Session):
        super().__init__(db_models.Comment, db)

    def list_top_level(
        self, doubt_id: int, skip: int = 0, limit: int = 20
    ) -> List[db_models.Comment]:
        """
        Get comments on a doubt that are not replies, newest first.

        Args:
            doubt_id: Doubt ID
            skip: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            List of comments
        """
        return (
            self.db.query(db_models.Comment)
            .filter(
                db_models.Comment.doubt_id == doubt_id,
                db_models.Comment.parent_comment_id.is_(None),
            )
            .order_by(db_models.Comment.created_at.desc(), db_models.Comment.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def count_top_level(self, doubt_id: int) -> int:
        return (
            self.db.query(db_models.Comment)
            .filter(
                db_models.Comment.doubt_id == doubt_id,
                db_models.Comment.parent_comment_id.is_(None),
            )
            .count()
        )

    def list_replies(self, parent_comment_id: int) -> List[db_models.Comment]:
        """Get direct replies to a comment, oldest first."""
        return (
            self.db.query(db_models.Comment)
            .filter(db_models.Comment.parent_comment_id == parent_comment_id)
            .order_by(db_models.Comment.created_at.asc(), db_models.Comment.id.asc())
            .all()
        )

    def list_by_user(
        self, user_id: int, skip: int = 0, limit: int = 20
    ) -> List[db_models.Comment]:
        return (
            self.db.query(db_models.Comment)
            .filter(db_models.Comment.user_id == user_id)
            .order_by(db_models.Comment.created_at.desc(), db_models.Comment.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def count_by_user(self, user_id: int) -> int:
        return (
            self.db.query(db_models.Comment)
            .filter(db_models.Comment.user_id == user_id)
            .count()
        )

    def count_by_doubt(self, doubt_id: int) -> int:
        return (
            self.db.query(db_models.Comment)
            .filter(db_models.Comment.doubt_id == doubt_id)
            .count()
        )

    def ids_by_user(self, user_id: int) -> List[int]:
        rows = (
            self.db.query(db_models.Comment.id)
            .filter(db_models.Comment.user_id == user_id)
            .all()
        )
        return [row[0] for row in rows]
