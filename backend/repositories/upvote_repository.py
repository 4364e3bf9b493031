"""
Upvote ledger repository for database operations.
"""

from typing import Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

import repositories.db_models as db_models
from .base import BaseRepository


class UpvoteRepository(BaseRepository[db_models.Upvote]):
    """Repository for Upvote entity database operations."""

    def __init__(self, db: Session):
        super().__init__(db_models.Upvote, db)

    def get_by_user_and_answer(
        self, user_id: int, answer_id: int
    ) -> Optional[db_models.Upvote]:
        """
        Get the ledger entry for a (user, answer) pair.

        Args:
            user_id: Voter user ID
            answer_id: Answer ID

        Returns:
            Upvote if found, None otherwise
        """
        return (
            self.db.query(db_models.Upvote)
            .filter(
                db_models.Upvote.user_id == user_id,
                db_models.Upvote.answer_id == answer_id,
            )
            .first()
        )

    def list_by_answer(
        self, answer_id: int, skip: int = 0, limit: int = 10
    ) -> List[db_models.Upvote]:
        return (
            self.db.query(db_models.Upvote)
            .filter(db_models.Upvote.answer_id == answer_id)
            .order_by(db_models.Upvote.created_at.desc(), db_models.Upvote.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def count_by_answer(self, answer_id: int) -> int:
        return (
            self.db.query(db_models.Upvote)
            .filter(db_models.Upvote.answer_id == answer_id)
            .count()
        )

    def list_by_user(
        self, user_id: int, skip: int = 0, limit: int = 10
    ) -> List[db_models.Upvote]:
        return (
            self.db.query(db_models.Upvote)
            .filter(db_models.Upvote.user_id == user_id)
            .order_by(db_models.Upvote.created_at.desc(), db_models.Upvote.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def count_by_user(self, user_id: int) -> int:
        return (
            self.db.query(db_models.Upvote)
            .filter(db_models.Upvote.user_id == user_id)
            .count()
        )

    def answer_ids_by_user(self, user_id: int) -> List[int]:
        """Get the IDs of every answer a user has upvoted."""
        rows = (
            self.db.query(db_models.Upvote.answer_id)
            .filter(db_models.Upvote.user_id == user_id)
            .all()
        )
        return [row[0] for row in rows]

    def counts_for_answers(self, answer_ids: List[int]) -> Dict[int, int]:
        """Count ledger entries for the given answers (answers without votes absent)."""
        if not answer_ids:
            return {}
        rows = (
            self.db.query(db_models.Upvote.answer_id, func.count(db_models.Upvote.id))
            .filter(db_models.Upvote.answer_id.in_(answer_ids))
            .group_by(db_models.Upvote.answer_id)
            .all()
        )
        return {answer_id: count for answer_id, count in rows}

    def counts_by_answer(self) -> Dict[int, int]:
        """
        Count ledger entries per answer.

        Returns:
            Mapping of answer ID to upvote count (answers without votes absent)
        """
        rows = (
            self.db.query(db_models.Upvote.answer_id, func.count(db_models.Upvote.id))
            .group_by(db_models.Upvote.answer_id)
            .all()
        )
        return {answer_id: count for answer_id, count in rows}

    def counts_by_mentor(self) -> Dict[int, int]:
        """
        Count ledger entries per answer author.

        Returns:
            Mapping of mentor user ID to upvotes received
        """
        rows = (
            self.db.query(db_models.Answer.mentor_id, func.count(db_models.Upvote.id))
            .select_from(db_models.Upvote)
            .join(db_models.Answer, db_models.Upvote.answer_id == db_models.Answer.id)
            .group_by(db_models.Answer.mentor_id)
            .all()
        )
        return {mentor_id: count for mentor_id, count in rows}

    def top_answers(self, limit: int = 10) -> List[Tuple[int, int]]:
        """Get (answer_id, count) pairs for the most upvoted answers."""
        count = func.count(db_models.Upvote.id)
        rows = (
            self.db.query(db_models.Upvote.answer_id, count)
            .group_by(db_models.Upvote.answer_id)
            .order_by(count.desc(), db_models.Upvote.answer_id.asc())
            .limit(limit)
            .all()
        )
        return [(answer_id, total) for answer_id, total in rows]
