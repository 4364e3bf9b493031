"""
Doubt service for business logic.
"""

from typing import Optional

from sqlalchemy.orm import Session

import models.schemas as schemas
import repositories.db_models as db_models
from models.exceptions import DoubtNotFoundException, UserNotFoundException
from repositories.answer_repository import AnswerRepository
from repositories.doubt_repository import DoubtRepository
from repositories.user_repository import UserRepository
from services import content_cascade
from services.authorization_service import (
    ActionKind,
    Actor,
    Resource,
    ResourceKind,
    authorize,
)


class DoubtService:
    """Service for doubt-related business logic."""

    @staticmethod
    def create_doubt(
        db: Session, actor: Actor, data: schemas.DoubtCreate
    ) -> db_models.Doubt:
        """
        Post a new doubt authored by the actor. Doubts start ``open``.

        Args:
            db: Database session
            actor: Authenticated author
            data: Doubt content

        Returns:
            Created doubt
        """
        doubt = db_models.Doubt(
            title=data.title,
            description=data.description,
            tags=data.tags,
            status=db_models.DoubtStatus.OPEN,
            junior_id=actor.id,
        )
        return DoubtRepository(db).create(doubt)

    @staticmethod
    def get_doubt(db: Session, doubt_id: int) -> db_models.Doubt:
        """
        Get a doubt by ID.

        Raises:
            DoubtNotFoundException: If the doubt does not exist
        """
        doubt = DoubtRepository(db).get_by_id(doubt_id)
        if not doubt:
            raise DoubtNotFoundException("Doubt not found")
        return doubt

    @staticmethod
    def get_doubt_with_answers(db: Session, doubt_id: int) -> schemas.DoubtWithAnswers:
        """Get a doubt together with its answers, most upvoted first."""
        doubt = DoubtService.get_doubt(db, doubt_id)
        answers = AnswerRepository(db).list_by_doubt(doubt_id, limit=None)
        result = schemas.DoubtWithAnswers.model_validate(doubt)
        result.answers = [schemas.Answer.model_validate(a) for a in answers]
        return result

    @staticmethod
    def list_doubts(
        db: Session,
        skip: int = 0,
        limit: int = 10,
        status: Optional[db_models.DoubtStatus] = None,
    ) -> tuple[list[db_models.Doubt], int]:
        repo = DoubtRepository(db)
        return (
            repo.list_doubts(skip=skip, limit=limit, status=status),
            repo.count_doubts(status=status),
        )

    @staticmethod
    def list_by_user(
        db: Session, user_id: int, skip: int = 0, limit: int = 10
    ) -> tuple[list[db_models.Doubt], int]:
        """
        Get doubts posted by a user.

        Raises:
            UserNotFoundException: If the user does not exist
        """
        if not UserRepository(db).get_by_id(user_id):
            raise UserNotFoundException("User not found")
        repo = DoubtRepository(db)
        return (
            repo.list_doubts(skip=skip, limit=limit, junior_id=user_id),
            repo.count_doubts(junior_id=user_id),
        )

    @staticmethod
    def list_by_tag(
        db: Session, tag: str, skip: int = 0, limit: int = 10
    ) -> tuple[list[db_models.Doubt], int]:
        repo = DoubtRepository(db)
        return (
            repo.list_doubts(skip=skip, limit=limit, tag=tag),
            repo.count_doubts(tag=tag),
        )

    @staticmethod
    def get_stats(db: Session) -> schemas.DoubtStats:
        """Doubt counts per status and the ten most used tags."""
        repo = DoubtRepository(db)
        per_status = repo.count_by_status()
        return schemas.DoubtStats(
            total=sum(per_status.values()),
            open=per_status[db_models.DoubtStatus.OPEN],
            answered=per_status[db_models.DoubtStatus.ANSWERED],
            resolved=per_status[db_models.DoubtStatus.RESOLVED],
            closed=per_status[db_models.DoubtStatus.CLOSED],
            top_tags=[
                schemas.TagCount(tag=tag, count=count)
                for tag, count in repo.top_tags(limit=10)
            ],
        )

    @staticmethod
    def update_doubt(
        db: Session, actor: Actor, doubt_id: int, data: schemas.DoubtUpdate
    ) -> db_models.Doubt:
        """
        Update a doubt. Owner or admin only.

        Raises:
            DoubtNotFoundException: If the doubt does not exist
            ForbiddenException: If the actor is neither owner nor admin
        """
        doubt = DoubtService.get_doubt(db, doubt_id)
        authorize(
            actor,
            ActionKind.UPDATE_CONTENT,
            Resource(kind=ResourceKind.DOUBT, owner_id=doubt.junior_id),
        )

        if data.title is not None:
            doubt.title = data.title
        if data.description is not None:
            doubt.description = data.description
        if data.tags is not None:
            doubt.tags = data.tags
        if data.status is not None:
            doubt.status = data.status
        return DoubtRepository(db).update(doubt)

    @staticmethod
    def delete_doubt(db: Session, actor: Actor, doubt_id: int) -> None:
        """
        Delete a doubt with its answers, their upvotes and its comments.

        Raises:
            DoubtNotFoundException: If the doubt does not exist
            ForbiddenException: If the actor is neither owner nor admin
        """
        doubt = DoubtService.get_doubt(db, doubt_id)
        authorize(
            actor,
            ActionKind.DELETE_CONTENT,
            Resource(kind=ResourceKind.DOUBT, owner_id=doubt.junior_id),
        )
        try:
            content_cascade.delete_doubt_tree(db, doubt)
            db.commit()
        except Exception:
            db.rollback()
            raise
