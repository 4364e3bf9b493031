"""
Answer service for business logic.
"""

from loguru import logger
from sqlalchemy.orm import Session

import models.schemas as schemas
import repositories.db_models as db_models
from models.exceptions import (
    AnswerNotFoundException,
    DoubtNotFoundException,
    UserNotFoundException,
)
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


class AnswerService:
    """Service for answer-related business logic."""

    @staticmethod
    def create_answer(
        db: Session, actor: Actor, doubt_id: int, data: schemas.AnswerCreate
    ) -> db_models.Answer:
        """
        Post an answer on a doubt.

        The first answer on an ``open`` doubt moves it to ``answered``; later
        answers and doubts in other statuses are left alone.

        Args:
            db: Database session
            actor: Authenticated author
            doubt_id: Doubt being answered
            data: Answer content

        Returns:
            Created answer

        Raises:
            UnauthorizedRoleException: If the actor is not a mentor
            MentorNotApprovedException: If the mentor is not approved yet
            DoubtNotFoundException: If the doubt does not exist
        """
        authorize(actor, ActionKind.CREATE_ANSWER)

        doubt_repo = DoubtRepository(db)
        if not doubt_repo.get_by_id(doubt_id):
            raise DoubtNotFoundException("Doubt not found")

        answer_repo = AnswerRepository(db)
        answer = db_models.Answer(
            content=data.content,
            doubt_id=doubt_id,
            mentor_id=actor.id,
            upvote_count=0,
        )
        answer_repo.add(answer)
        answer_repo.flush()
        doubt_repo.mark_answered(doubt_id)
        answer_repo.commit()
        answer_repo.refresh(answer)

        logger.info(f"Answer {answer.id} posted on doubt {doubt_id} by {actor.id}")
        return answer

    @staticmethod
    def get_answer(db: Session, answer_id: int) -> db_models.Answer:
        """
        Get an answer by ID.

        Raises:
            AnswerNotFoundException: If the answer does not exist
        """
        answer = AnswerRepository(db).get_by_id(answer_id)
        if not answer:
            raise AnswerNotFoundException("Answer not found")
        return answer

    @staticmethod
    def list_by_doubt(
        db: Session,
        doubt_id: int,
        sort_by: schemas.AnswerSortOrder = schemas.AnswerSortOrder.UPVOTES,
        skip: int = 0,
        limit: int = 10,
    ) -> tuple[list[db_models.Answer], int]:
        """
        Get answers on a doubt.

        Raises:
            DoubtNotFoundException: If the doubt does not exist
        """
        if not DoubtRepository(db).get_by_id(doubt_id):
            raise DoubtNotFoundException("Doubt not found")
        repo = AnswerRepository(db)
        answers = repo.list_by_doubt(
            doubt_id,
            skip=skip,
            limit=limit,
            by_upvotes=sort_by == schemas.AnswerSortOrder.UPVOTES,
        )
        return answers, repo.count_by_doubt(doubt_id)

    @staticmethod
    def list_by_mentor(
        db: Session, mentor_id: int, skip: int = 0, limit: int = 10
    ) -> tuple[list[db_models.Answer], int]:
        """
        Get answers written by a mentor.

        Raises:
            UserNotFoundException: If the user does not exist
        """
        if not UserRepository(db).get_by_id(mentor_id):
            raise UserNotFoundException("User not found")
        repo = AnswerRepository(db)
        return (
            repo.list_by_mentor(mentor_id, skip=skip, limit=limit),
            repo.count_by_mentor(mentor_id),
        )

    @staticmethod
    def get_most_helpful(db: Session, limit: int = 10) -> list[db_models.Answer]:
        return AnswerRepository(db).get_top_helpful(limit=limit)

    @staticmethod
    def update_answer(
        db: Session, actor: Actor, answer_id: int, data: schemas.AnswerUpdate
    ) -> db_models.Answer:
        """
        Edit an answer. Owner or admin only.

        Raises:
            AnswerNotFoundException: If the answer does not exist
            ForbiddenException: If the actor is neither owner nor admin
        """
        answer = AnswerService.get_answer(db, answer_id)
        authorize(
            actor,
            ActionKind.UPDATE_CONTENT,
            Resource(kind=ResourceKind.ANSWER, owner_id=answer.mentor_id),
        )
        answer.content = data.content
        return AnswerRepository(db).update(answer)

    @staticmethod
    def delete_answer(db: Session, actor: Actor, answer_id: int) -> None:
        """
        Delete an answer and its upvotes. Owner or admin only.

        Raises:
            AnswerNotFoundException: If the answer does not exist
            ForbiddenException: If the actor is neither owner nor admin
        """
        answer = AnswerService.get_answer(db, answer_id)
        authorize(
            actor,
            ActionKind.DELETE_CONTENT,
            Resource(kind=ResourceKind.ANSWER, owner_id=answer.mentor_id),
        )
        try:
            content_cascade.delete_answer_tree(db, answer)
            db.commit()
        except Exception:
            db.rollback()
            raise
