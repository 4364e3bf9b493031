"""
Service for admin moderation operations.

Every operation is one unit of work: locate the target, apply the mutation
(with cascades), append the matching ledger entry, then commit once. If any
step fails the session is rolled back, so no mutation persists without its
audit record.
"""

from datetime import datetime, timezone
from typing import Callable

from loguru import logger
from sqlalchemy.orm import Session

import models.schemas as schemas
import repositories.db_models as db_models
from models.exceptions import (
    AnswerNotFoundException,
    CommentNotFoundException,
    DoubtNotFoundException,
    JuniorPostNotFoundException,
    MentorProfileNotFoundException,
    UserNotFoundException,
)
from repositories.answer_repository import AnswerRepository
from repositories.comment_repository import CommentRepository
from repositories.doubt_repository import DoubtRepository
from repositories.junior_post_repository import JuniorPostRepository
from repositories.mentor_profile_repository import MentorProfileRepository
from repositories.user_repository import UserRepository
from services import content_cascade
from services.audit_service import AuditService

ActionType = db_models.AdminActionType


class ModerationService:
    """Service for admin moderation operations."""

    @staticmethod
    def _commit_with_audit(
        db: Session,
        admin_id: int,
        action_type: db_models.AdminActionType,
        target_id: int,
        mutate: Callable[[], None],
    ) -> schemas.ModerationResult:
        try:
            mutate()
            action = AuditService.record_action(
                db, admin_id, action_type, target_id, commit=False
            )
            action_id = action.id
            db.commit()
        except Exception:
            db.rollback()
            raise
        return schemas.ModerationResult(target_id=target_id, action_id=action_id)

    @staticmethod
    def approve_mentor(
        db: Session, admin_id: int, mentor_id: int
    ) -> schemas.ModerationResult:
        """
        Approve a mentor so they can post answers.

        Re-approving an approved mentor succeeds and is logged again.

        Raises:
            UserNotFoundException: If the user does not exist
        """
        user = UserRepository(db).get_by_id(mentor_id)
        if not user:
            raise UserNotFoundException("User not found")

        def mutate() -> None:
            user.is_mentor_approved = True

        result = ModerationService._commit_with_audit(
            db, admin_id, ActionType.APPROVE_MENTOR, mentor_id, mutate
        )
        logger.info(f"Mentor {mentor_id} approved by admin {admin_id}")
        return result

    @staticmethod
    def reject_mentor(
        db: Session, admin_id: int, mentor_id: int
    ) -> schemas.ModerationResult:
        """
        Reject a mentor by deleting their profile.

        The user's approval flag is left untouched.

        Raises:
            MentorProfileNotFoundException: If the mentor has no profile
        """
        profile_repo = MentorProfileRepository(db)
        profile = profile_repo.get_by_user_id(mentor_id)
        if not profile:
            raise MentorProfileNotFoundException("Mentor profile not found")

        result = ModerationService._commit_with_audit(
            db,
            admin_id,
            ActionType.REJECT_MENTOR,
            mentor_id,
            lambda: profile_repo.remove(profile),
        )
        logger.info(f"Mentor {mentor_id} rejected by admin {admin_id}")
        return result

    @staticmethod
    def ban_user(db: Session, admin_id: int, user_id: int) -> schemas.ModerationResult:
        """
        Ban a user. Banned users are refused by the authentication gate.

        Raises:
            UserNotFoundException: If the user does not exist
        """
        user = UserRepository(db).get_by_id(user_id)
        if not user:
            raise UserNotFoundException("User not found")

        def mutate() -> None:
            user.banned_at = datetime.now(timezone.utc)

        result = ModerationService._commit_with_audit(
            db, admin_id, ActionType.BAN_USER, user_id, mutate
        )
        logger.warning(f"User {user_id} banned by admin {admin_id}")
        return result

    @staticmethod
    def unban_user(
        db: Session, admin_id: int, user_id: int
    ) -> schemas.ModerationResult:
        """
        Lift a ban.

        Raises:
            UserNotFoundException: If the user does not exist
        """
        user = UserRepository(db).get_by_id(user_id)
        if not user:
            raise UserNotFoundException("User not found")

        def mutate() -> None:
            user.banned_at = None

        result = ModerationService._commit_with_audit(
            db, admin_id, ActionType.UNBAN_USER, user_id, mutate
        )
        logger.info(f"User {user_id} unbanned by admin {admin_id}")
        return result

    @staticmethod
    def delete_doubt(
        db: Session, admin_id: int, doubt_id: int
    ) -> schemas.ModerationResult:
        """
        Take down a doubt with its answers, their upvotes and its comments.

        Raises:
            DoubtNotFoundException: If the doubt does not exist
        """
        doubt = DoubtRepository(db).get_by_id(doubt_id)
        if not doubt:
            raise DoubtNotFoundException("Doubt not found")

        result = ModerationService._commit_with_audit(
            db,
            admin_id,
            ActionType.DELETE_DOUBT,
            doubt_id,
            lambda: content_cascade.delete_doubt_tree(db, doubt),
        )
        logger.info(f"Doubt {doubt_id} deleted by admin {admin_id}")
        return result

    @staticmethod
    def delete_answer(
        db: Session, admin_id: int, answer_id: int
    ) -> schemas.ModerationResult:
        """
        Take down an answer and its upvotes.

        Raises:
            AnswerNotFoundException: If the answer does not exist
        """
        answer = AnswerRepository(db).get_by_id(answer_id)
        if not answer:
            raise AnswerNotFoundException("Answer not found")

        result = ModerationService._commit_with_audit(
            db,
            admin_id,
            ActionType.DELETE_ANSWER,
            answer_id,
            lambda: content_cascade.delete_answer_tree(db, answer),
        )
        logger.info(f"Answer {answer_id} deleted by admin {admin_id}")
        return result

    @staticmethod
    def delete_comment(
        db: Session, admin_id: int, comment_id: int
    ) -> tuple[schemas.ModerationResult, int]:
        """
        Take down a comment and its replies.

        Returns:
            Tuple of (result, doubt ID the comment belonged to)

        Raises:
            CommentNotFoundException: If the comment does not exist
        """
        comment = CommentRepository(db).get_by_id(comment_id)
        if not comment:
            raise CommentNotFoundException("Comment not found")
        doubt_id = comment.doubt_id

        result = ModerationService._commit_with_audit(
            db,
            admin_id,
            ActionType.DELETE_COMMENT,
            comment_id,
            lambda: content_cascade.delete_comment_tree(db, comment),
        )
        logger.info(f"Comment {comment_id} deleted by admin {admin_id}")
        return result, doubt_id

    @staticmethod
    def delete_junior_post(
        db: Session, admin_id: int, post_id: int
    ) -> schemas.ModerationResult:
        """
        Take down a junior space post.

        Raises:
            JuniorPostNotFoundException: If the post does not exist
        """
        post_repo = JuniorPostRepository(db)
        post = post_repo.get_by_id(post_id)
        if not post:
            raise JuniorPostNotFoundException("Junior space post not found")

        result = ModerationService._commit_with_audit(
            db,
            admin_id,
            ActionType.DELETE_JUNIOR_POST,
            post_id,
            lambda: post_repo.remove(post),
        )
        logger.info(f"Junior space post {post_id} deleted by admin {admin_id}")
        return result
