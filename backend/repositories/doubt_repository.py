"""
Doubt repository for database operations.
"""

from collections import Counter
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func, update
from sqlalchemy.orm import Query, Session

import repositories.db_models as db_models
from .base import BaseRepository, json_list_contains


class DoubtRepository(BaseRepository[db_models.Doubt]):
    """Repository for Doubt entity database operations."""

    def __init__(self, db: Session):
        super().__init__(db_models.Doubt, db)

    def _filtered(
        self,
        status: Optional[db_models.DoubtStatus] = None,
        junior_id: Optional[int] = None,
        tag: Optional[str] = None,
    ) -> Query:
        query = self.db.query(db_models.Doubt)
        if status is not None:
            query = query.filter(db_models.Doubt.status == status)
        if junior_id is not None:
            query = query.filter(db_models.Doubt.junior_id == junior_id)
        if tag is not None:
            query = query.filter(
                json_list_contains(db_models.Doubt.tags, tag.lower())
            )
        return query

    def list_doubts(
        self,
        skip: int = 0,
        limit: int = 10,
        status: Optional[db_models.DoubtStatus] = None,
        junior_id: Optional[int] = None,
        tag: Optional[str] = None,
    ) -> List[db_models.Doubt]:
        """
        Get doubts newest first, optionally filtered.

        Args:
            skip: Number of records to skip
            limit: Maximum number of records to return
            status: Only doubts in this status
            junior_id: Only doubts authored by this user
            tag: Only doubts carrying this tag

        Returns:
            List of doubts
        """
        return (
            self._filtered(status=status, junior_id=junior_id, tag=tag)
            .order_by(db_models.Doubt.created_at.desc(), db_models.Doubt.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def count_doubts(
        self,
        status: Optional[db_models.DoubtStatus] = None,
        junior_id: Optional[int] = None,
        tag: Optional[str] = None,
    ) -> int:
        return self._filtered(status=status, junior_id=junior_id, tag=tag).count()

    def ids_by_junior(self, junior_id: int) -> List[int]:
        rows = (
            self.db.query(db_models.Doubt.id)
            .filter(db_models.Doubt.junior_id == junior_id)
            .all()
        )
        return [row[0] for row in rows]

    def count_by_status(self) -> Dict[db_models.DoubtStatus, int]:
        """
        Count doubts per status.

        Returns:
            Mapping of every status to its count (zero when absent)
        """
        rows = (
            self.db.query(db_models.Doubt.status, func.count(db_models.Doubt.id))
            .group_by(db_models.Doubt.status)
            .all()
        )
        counts = {status: 0 for status in db_models.DoubtStatus}
        for status, count in rows:
            counts[status] = count
        return counts

    def top_tags(self, limit: int = 10) -> List[Tuple[str, int]]:
        """
        Get the most used tags.

        Args:
            limit: Maximum number of tags to return

        Returns:
            List of (tag, count) tuples, most used first
        """
        counter: Counter[str] = Counter()
        for (tags,) in self.db.query(db_models.Doubt.tags).all():
            counter.update(tags or [])
        return counter.most_common(limit)

    def mark_answered(self, doubt_id: int) -> None:
        """
        Move an open doubt to answered. Doubts in any other status are untouched.

        Does not commit.
        """
        self.db.execute(
            update(db_models.Doubt)
            .where(
                db_models.Doubt.id == doubt_id,
                db_models.Doubt.status == db_models.DoubtStatus.OPEN,
            )
            .values(status=db_models.DoubtStatus.ANSWERED)
            .execution_options(synchronize_session=False)
        )
