"""
Admin action ledger repository.

The ledger is append-only: this repository exposes inserts and reads only.
"""

from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Query, Session

import repositories.db_models as db_models
from .base import BaseRepository


class AdminActionRepository(BaseRepository[db_models.AdminAction]):
    """Repository for AdminAction entity database operations."""

    def __init__(self, db: Session):
        super().__init__(db_models.AdminAction, db)

    def _for_admin(
        self, admin_id: int, action_type: Optional[db_models.AdminActionType]
    ) -> Query:
        query = self.db.query(db_models.AdminAction).filter(
            db_models.AdminAction.admin_id == admin_id
        )
        if action_type is not None:
            query = query.filter(db_models.AdminAction.action_type == action_type)
        return query

    def list_by_admin(
        self,
        admin_id: int,
        action_type: Optional[db_models.AdminActionType] = None,
        skip: int = 0,
        limit: int = 20,
    ) -> List[db_models.AdminAction]:
        """
        Get actions performed by an admin, newest first.

        Args:
            admin_id: Admin user ID
            action_type: Optional action type filter
            skip: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            List of admin actions
        """
        return (
            self._for_admin(admin_id, action_type)
            .order_by(
                db_models.AdminAction.created_at.desc(),
                db_models.AdminAction.id.desc(),
            )
            .offset(skip)
            .limit(limit)
            .all()
        )

    def count_by_admin(
        self,
        admin_id: int,
        action_type: Optional[db_models.AdminActionType] = None,
    ) -> int:
        return self._for_admin(admin_id, action_type).count()

    def breakdown_by_type(
        self, admin_id: int
    ) -> List[Tuple[db_models.AdminActionType, int]]:
        """
        Count an admin's actions per action type.

        Returns:
            List of (action_type, count) tuples, most frequent first
        """
        count = func.count(db_models.AdminAction.id)
        rows = (
            self.db.query(db_models.AdminAction.action_type, count)
            .filter(db_models.AdminAction.admin_id == admin_id)
            .group_by(db_models.AdminAction.action_type)
            .order_by(count.desc())
            .all()
        )
        return [(action_type, total) for action_type, total in rows]
