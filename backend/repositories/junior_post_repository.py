"""
Junior space post repository for database operations.
"""

from datetime import datetime, timedelta, timezone
from typing import List, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

import repositories.db_models as db_models
from .base import BaseRepository


class JuniorPostRepository(BaseRepository[db_models.JuniorSpacePost]):
    """Repository for JuniorSpacePost entity database operations."""

    def __init__(self, db: Session):
        super().__init__(db_models.JuniorSpacePost, db)

    def list_by_junior(
        self, junior_id: int, skip: int = 0, limit: int = 10
    ) -> List[db_models.JuniorSpacePost]:
        """
        Get posts written by a user, newest first.

        Args:
            junior_id: Author user ID
            skip: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            List of posts
        """
        return (
            self.db.query(db_models.JuniorSpacePost)
            .filter(db_models.JuniorSpacePost.junior_id == junior_id)
            .order_by(
                db_models.JuniorSpacePost.created_at.desc(),
                db_models.JuniorSpacePost.id.desc(),
            )
            .offset(skip)
            .limit(limit)
            .all()
        )

    def count_by_junior(self, junior_id: int) -> int:
        return (
            self.db.query(db_models.JuniorSpacePost)
            .filter(db_models.JuniorSpacePost.junior_id == junior_id)
            .count()
        )

    def count_posters(self) -> int:
        """Count distinct users that have posted."""
        return (
            self.db.query(
                func.count(func.distinct(db_models.JuniorSpacePost.junior_id))
            ).scalar()
            or 0
        )

    def posts_per_day(self, days: int = 30) -> List[Tuple[str, int]]:
        """
        Count posts per calendar day over the last ``days`` days.

        Returns:
            List of (YYYY-MM-DD, count) tuples, most recent day first
        """
        since = datetime.now(timezone.utc) - timedelta(days=days)
        day = func.date(db_models.JuniorSpacePost.created_at)
        rows = (
            self.db.query(day, func.count(db_models.JuniorSpacePost.id))
            .filter(db_models.JuniorSpacePost.created_at >= since)
            .group_by(day)
            .order_by(day.desc())
            .all()
        )
        return [(str(row[0]), row[1]) for row in rows]
