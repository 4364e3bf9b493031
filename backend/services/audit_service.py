"""Service for the append-only admin action ledger."""

from typing import Optional

from loguru import logger
from sqlalchemy.orm import Session

import models.schemas as schemas
import repositories.db_models as db_models
from repositories.admin_action_repository import AdminActionRepository


class AuditService:
    """Service for recording and reading admin actions."""

    @staticmethod
    def record_action(
        db: Session,
        admin_id: int,
        action_type: db_models.AdminActionType,
        target_id: int,
        commit: bool = True,
    ) -> db_models.AdminAction:
        """
        Append an entry to the admin action ledger.

        Moderation calls this with ``commit=False`` so the entry is written in
        the same transaction as the mutation it describes.

        Args:
            db: Database session
            admin_id: Acting admin ID
            action_type: Kind of action performed
            target_id: ID of the affected entity
            commit: Commit immediately (otherwise only flush)

        Returns:
            The stored AdminAction (with ID assigned)
        """
        repo = AdminActionRepository(db)
        action = db_models.AdminAction(
            admin_id=admin_id, action_type=action_type, target_id=target_id
        )
        repo.add(action)
        if commit:
            repo.commit()
            repo.refresh(action)
        else:
            repo.flush()

        logger.bind(
            admin_id=admin_id, action_type=action_type.value, target_id=target_id
        ).info(f"AUDIT: admin {admin_id} {action_type.value} target {target_id}")
        return action

    @staticmethod
    def list_actions(
        db: Session,
        admin_id: int,
        action_type: Optional[db_models.AdminActionType] = None,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[list[db_models.AdminAction], int]:
        """
        Get an admin's own actions, newest first.

        Returns:
            Tuple of (actions, total matching)
        """
        repo = AdminActionRepository(db)
        actions = repo.list_by_admin(
            admin_id, action_type=action_type, skip=skip, limit=limit
        )
        total = repo.count_by_admin(admin_id, action_type=action_type)
        return actions, total

    @staticmethod
    def get_stats(db: Session, admin_id: int) -> schemas.AdminStats:
        """Total and per-type counts of an admin's own actions."""
        repo = AdminActionRepository(db)
        breakdown = [
            schemas.ActionTypeCount(action_type=action_type, count=count)
            for action_type, count in repo.breakdown_by_type(admin_id)
        ]
        return schemas.AdminStats(
            total_actions=repo.count_by_admin(admin_id),
            action_breakdown=breakdown,
        )
