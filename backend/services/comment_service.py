"""
Comment service for business logic.

Comments form a two-level tree: top-level comments on a doubt and their
direct replies. A reply to a reply is attached to the top-level comment.
"""

from sqlalchemy.orm import Session

import models.schemas as schemas
import repositories.db_models as db_models
from models.exceptions import (
    CommentNotFoundException,
    DoubtNotFoundException,
    ParentCommentNotFoundException,
    UserNotFoundException,
)
from repositories.comment_repository import CommentRepository
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


class CommentService:
    """Service for comment-related business logic."""

    @staticmethod
    def create_comment(
        db: Session, actor: Actor, doubt_id: int, data: schemas.CommentCreate
    ) -> db_models.Comment:
        """
        Comment on a doubt, optionally as a reply.

        Args:
            db: Database session
            actor: Authenticated author
            doubt_id: Doubt being commented on
            data: Content and optional parent comment ID

        Returns:
            Created comment

        Raises:
            DoubtNotFoundException: If the doubt does not exist
            ParentCommentNotFoundException: If the parent does not exist or
                belongs to another doubt
        """
        if not DoubtRepository(db).get_by_id(doubt_id):
            raise DoubtNotFoundException("Doubt not found")

        comment_repo = CommentRepository(db)
        parent_id = None
        if data.parent_comment_id is not None:
            parent = comment_repo.get_by_id(data.parent_comment_id)
            if not parent or parent.doubt_id != doubt_id:
                raise ParentCommentNotFoundException("Parent comment not found")
            parent_id = parent.parent_comment_id or parent.id

        comment = db_models.Comment(
            content=data.content,
            doubt_id=doubt_id,
            user_id=actor.id,
            parent_comment_id=parent_id,
        )
        return comment_repo.create(comment)

    @staticmethod
    def get_comment(db: Session, comment_id: int) -> db_models.Comment:
        """
        Get a comment by ID.

        Raises:
            CommentNotFoundException: If the comment does not exist
        """
        comment = CommentRepository(db).get_by_id(comment_id)
        if not comment:
            raise CommentNotFoundException("Comment not found")
        return comment

    @staticmethod
    def list_by_doubt(
        db: Session, doubt_id: int, skip: int = 0, limit: int = 20
    ) -> tuple[list[db_models.Comment], int]:
        """
        Get top-level comments on a doubt.

        Raises:
            DoubtNotFoundException: If the doubt does not exist
        """
        if not DoubtRepository(db).get_by_id(doubt_id):
            raise DoubtNotFoundException("Doubt not found")
        repo = CommentRepository(db)
        return (
            repo.list_top_level(doubt_id, skip=skip, limit=limit),
            repo.count_top_level(doubt_id),
        )

    @staticmethod
    def get_replies(db: Session, comment_id: int) -> list[db_models.Comment]:
        CommentService.get_comment(db, comment_id)
        return CommentRepository(db).list_replies(comment_id)

    @staticmethod
    def list_by_user(
        db: Session, user_id: int, skip: int = 0, limit: int = 20
    ) -> tuple[list[db_models.Comment], int]:
        if not UserRepository(db).get_by_id(user_id):
            raise UserNotFoundException("User not found")
        repo = CommentRepository(db)
        return (
            repo.list_by_user(user_id, skip=skip, limit=limit),
            repo.count_by_user(user_id),
        )

    @staticmethod
    def update_comment(
        db: Session, actor: Actor, comment_id: int, data: schemas.CommentUpdate
    ) -> db_models.Comment:
        """
        Edit a comment. Owner or admin only.

        Raises:
            CommentNotFoundException: If the comment does not exist
            ForbiddenException: If the actor is neither owner nor admin
        """
        comment = CommentService.get_comment(db, comment_id)
        authorize(
            actor,
            ActionKind.UPDATE_CONTENT,
            Resource(kind=ResourceKind.COMMENT, owner_id=comment.user_id),
        )
        comment.content = data.content
        return CommentRepository(db).update(comment)

    @staticmethod
    def delete_comment(db: Session, actor: Actor, comment_id: int) -> int:
        """
        Delete a comment and its replies. Owner or admin only.

        Returns:
            ID of the doubt the comment belonged to

        Raises:
            CommentNotFoundException: If the comment does not exist
            ForbiddenException: If the actor is neither owner nor admin
        """
        comment = CommentService.get_comment(db, comment_id)
        authorize(
            actor,
            ActionKind.DELETE_CONTENT,
            Resource(kind=ResourceKind.COMMENT, owner_id=comment.user_id),
        )
        doubt_id = comment.doubt_id
        try:
            content_cascade.delete_comment_tree(db, comment)
            db.commit()
        except Exception:
            db.rollback()
            raise
        return doubt_id
