"""
Answer repository for database operations.
"""

from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import case, update
from sqlalchemy.orm import Session

import repositories.db_models as db_models
from .base import BaseRepository


class AnswerRepository(BaseRepository[db_models.Answer]):
    """Repository for Answer entity database operations."""

    def __init__(self, db: Session):
        super().__init__(db_models.Answer, db)

    def list_by_doubt(
        self,
        doubt_id: int,
        skip: int = 0,
        limit: Optional[int] = 10,
        by_upvotes: bool = True,
    ) -> List[db_models.Answer]:
        """
        Get answers posted on a doubt.

        Args:
            doubt_id: Doubt ID
            skip: Number of records to skip
            limit: Maximum number of records to return (None for all)
            by_upvotes: Most upvoted first when True, newest first otherwise

        Returns:
            List of answers
        """
        if by_upvotes:
            ordering = (
                db_models.Answer.upvote_count.desc(),
                db_models.Answer.created_at.desc(),
                db_models.Answer.id.desc(),
            )
        else:
            ordering = (db_models.Answer.created_at.desc(), db_models.Answer.id.desc())
        return (
            self.db.query(db_models.Answer)
            .filter(db_models.Answer.doubt_id == doubt_id)
            .order_by(*ordering)
            .offset(skip)
            .limit(limit)
            .all()
        )

    def count_by_doubt(self, doubt_id: int) -> int:
        return (
            self.db.query(db_models.Answer)
            .filter(db_models.Answer.doubt_id == doubt_id)
            .count()
        )

    def list_by_mentor(
        self, mentor_id: int, skip: int = 0, limit: int = 10
    ) -> List[db_models.Answer]:
        """Get answers written by a mentor, newest first."""
        return (
            self.db.query(db_models.Answer)
            .filter(db_models.Answer.mentor_id == mentor_id)
            .order_by(db_models.Answer.created_at.desc(), db_models.Answer.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def count_by_mentor(self, mentor_id: int) -> int:
        return (
            self.db.query(db_models.Answer)
            .filter(db_models.Answer.mentor_id == mentor_id)
            .count()
        )

    def get_top_helpful(self, limit: int = 10) -> List[db_models.Answer]:
        """Get the most upvoted answers across all doubts."""
        return (
            self.db.query(db_models.Answer)
            .order_by(db_models.Answer.upvote_count.desc(), db_models.Answer.id.asc())
            .limit(limit)
            .all()
        )

    def author_map(self, *criteria: Any) -> Dict[int, int]:
        """
        Map answer ID to author (mentor) ID for answers matching the criteria.

        Example:
            ``repo.author_map(db_models.Answer.doubt_id == doubt_id)``
        """
        rows = (
            self.db.query(db_models.Answer.id, db_models.Answer.mentor_id)
            .filter(*criteria)
            .all()
        )
        return {answer_id: mentor_id for answer_id, mentor_id in rows}

    def adjust_upvote_count(self, answer_id: int, delta: int) -> None:
        """
        Atomically add ``delta`` to an answer's upvote count, never below 0.

        Executed as a single SQL UPDATE so concurrent writers cannot lose
        increments. Does not commit; callers refresh loaded instances.

        Args:
            answer_id: Answer ID
            delta: Signed increment
        """
        column = db_models.Answer.upvote_count
        if delta >= 0:
            new_value = column + delta
        else:
            new_value = case((column + delta > 0, column + delta), else_=0)
        self.db.execute(
            update(db_models.Answer)
            .where(db_models.Answer.id == answer_id)
            .values(upvote_count=new_value)
            .execution_options(synchronize_session=False)
        )

    def set_upvote_count(self, answer_id: int, value: int) -> None:
        self.db.execute(
            update(db_models.Answer)
            .where(db_models.Answer.id == answer_id)
            .values(upvote_count=value)
            .execution_options(synchronize_session=False)
        )

    def cached_upvote_counts(self) -> List[Tuple[int, int]]:
        """(answer_id, upvote_count) for every answer."""
        return [
            (row[0], row[1])
            for row in self.db.query(
                db_models.Answer.id, db_models.Answer.upvote_count
            ).all()
        ]
