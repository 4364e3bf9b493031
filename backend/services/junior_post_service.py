"""
Junior space post service for business logic.
"""

from sqlalchemy.orm import Session

import models.schemas as schemas
import repositories.db_models as db_models
from models.exceptions import JuniorPostNotFoundException, UserNotFoundException
from repositories.junior_post_repository import JuniorPostRepository
from repositories.user_repository import UserRepository
from services.authorization_service import (
    ActionKind,
    Actor,
    Resource,
    ResourceKind,
    authorize,
)


class JuniorPostService:
    """Service for junior space posts."""

    @staticmethod
    def create_post(
        db: Session, actor: Actor, data: schemas.JuniorPostCreate
    ) -> db_models.JuniorSpacePost:
        post = db_models.JuniorSpacePost(content=data.content, junior_id=actor.id)
        return JuniorPostRepository(db).create(post)

    @staticmethod
    def get_post(db: Session, post_id: int) -> db_models.JuniorSpacePost:
        """
        Get a post by ID.

        Raises:
            JuniorPostNotFoundException: If the post does not exist
        """
        post = JuniorPostRepository(db).get_by_id(post_id)
        if not post:
            raise JuniorPostNotFoundException("Junior space post not found")
        return post

    @staticmethod
    def list_posts(
        db: Session, skip: int = 0, limit: int = 10
    ) -> tuple[list[db_models.JuniorSpacePost], int]:
        repo = JuniorPostRepository(db)
        return repo.get_page(offset=skip, limit=limit), repo.count()

    @staticmethod
    def list_by_user(
        db: Session, user_id: int, skip: int = 0, limit: int = 10
    ) -> tuple[list[db_models.JuniorSpacePost], int]:
        if not UserRepository(db).get_by_id(user_id):
            raise UserNotFoundException("User not found")
        repo = JuniorPostRepository(db)
        return (
            repo.list_by_junior(user_id, skip=skip, limit=limit),
            repo.count_by_junior(user_id),
        )

    @staticmethod
    def get_recent(db: Session, limit: int = 5) -> list[db_models.JuniorSpacePost]:
        return JuniorPostRepository(db).get_page(offset=0, limit=limit)

    @staticmethod
    def get_stats(db: Session) -> schemas.JuniorSpaceStats:
        """Post totals and per-day activity over the last 30 days."""
        repo = JuniorPostRepository(db)
        return schemas.JuniorSpaceStats(
            total_posts=repo.count(),
            total_posters=repo.count_posters(),
            posts_per_day=[
                schemas.DailyPostCount(day=day, count=count)
                for day, count in repo.posts_per_day(days=30)
            ],
        )

    @staticmethod
    def update_post(
        db: Session, actor: Actor, post_id: int, data: schemas.JuniorPostUpdate
    ) -> db_models.JuniorSpacePost:
        """
        Edit a post. Owner or admin only.

        Raises:
            JuniorPostNotFoundException: If the post does not exist
            ForbiddenException: If the actor is neither owner nor admin
        """
        post = JuniorPostService.get_post(db, post_id)
        authorize(
            actor,
            ActionKind.UPDATE_CONTENT,
            Resource(kind=ResourceKind.JUNIOR_POST, owner_id=post.junior_id),
        )
        post.content = data.content
        return JuniorPostRepository(db).update(post)

    @staticmethod
    def delete_post(db: Session, actor: Actor, post_id: int) -> None:
        """
        Delete a post. Owner or admin only.

        Raises:
            JuniorPostNotFoundException: If the post does not exist
            ForbiddenException: If the actor is neither owner nor admin
        """
        post = JuniorPostService.get_post(db, post_id)
        authorize(
            actor,
            ActionKind.DELETE_CONTENT,
            Resource(kind=ResourceKind.JUNIOR_POST, owner_id=post.junior_id),
        )
        JuniorPostRepository(db).delete(post)
