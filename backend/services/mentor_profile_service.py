"""
Mentor profile service for business logic.

Profiles are keyed by their owner's user ID throughout the API. Approval
is read from the owner's user record.
"""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

import models.schemas as schemas
import repositories.db_models as db_models
from models.exceptions import (
    MentorProfileExistsException,
    MentorProfileNotFoundException,
    UnauthorizedRoleException,
    UserNotFoundException,
)
from repositories.answer_repository import AnswerRepository
from repositories.mentor_profile_repository import MentorProfileRepository
from repositories.user_repository import UserRepository
from services.authorization_service import (
    ActionKind,
    Actor,
    Resource,
    ResourceKind,
    authorize,
)

DEFAULT_BADGE = "Mentor"


class MentorProfileService:
    """Service for mentor profile business logic."""

    @staticmethod
    def create_profile(
        db: Session,
        actor: Actor,
        mentor_id: int,
        data: schemas.MentorProfileCreate,
    ) -> db_models.MentorProfile:
        """
        Create the profile of a mentor. Owner or admin only.

        Args:
            db: Database session
            actor: Authenticated actor
            mentor_id: User ID of the mentor the profile belongs to
            data: Badge and expertise tags

        Returns:
            Created profile

        Raises:
            ForbiddenException: If the actor is neither the mentor nor an admin
            UserNotFoundException: If the user does not exist
            UnauthorizedRoleException: If the user is not a mentor
            MentorProfileExistsException: If the mentor already has a profile
        """
        authorize(
            actor,
            ActionKind.CREATE_PROFILE,
            Resource(kind=ResourceKind.MENTOR_PROFILE, owner_id=mentor_id),
        )

        user = UserRepository(db).get_by_id(mentor_id)
        if not user:
            raise UserNotFoundException("User not found")
        if user.role != db_models.UserRole.MENTOR:
            raise UnauthorizedRoleException("Only mentors can create mentor profiles")

        repo = MentorProfileRepository(db)
        if repo.get_by_user_id(mentor_id):
            raise MentorProfileExistsException()

        profile = db_models.MentorProfile(
            user_id=mentor_id,
            badge=data.badge or DEFAULT_BADGE,
            expertise_tags=data.expertise_tags,
            total_upvotes=0,
        )
        try:
            return repo.create(profile)
        except IntegrityError:
            repo.rollback()
            raise MentorProfileExistsException()

    @staticmethod
    def _get(db: Session, mentor_id: int) -> db_models.MentorProfile:
        profile = MentorProfileRepository(db).get_by_user_id(mentor_id)
        if not profile:
            raise MentorProfileNotFoundException("Mentor profile not found")
        return profile

    @staticmethod
    def get_profile(db: Session, mentor_id: int) -> schemas.MentorProfileDetail:
        """
        Get a mentor's profile with their answer count.

        Raises:
            MentorProfileNotFoundException: If the mentor has no profile
        """
        profile = MentorProfileService._get(db, mentor_id)
        detail = schemas.MentorProfileDetail.model_validate(profile)
        detail.answers_count = AnswerRepository(db).count_by_mentor(mentor_id)
        return detail

    @staticmethod
    def update_profile(
        db: Session,
        actor: Actor,
        mentor_id: int,
        data: schemas.MentorProfileUpdate,
    ) -> db_models.MentorProfile:
        """
        Update badge or expertise tags. Owner or admin only.

        Raises:
            MentorProfileNotFoundException: If the mentor has no profile
            ForbiddenException: If the actor is neither owner nor admin
        """
        profile = MentorProfileService._get(db, mentor_id)
        authorize(
            actor,
            ActionKind.UPDATE_CONTENT,
            Resource(kind=ResourceKind.MENTOR_PROFILE, owner_id=profile.user_id),
        )
        if data.badge is not None:
            profile.badge = data.badge
        if data.expertise_tags is not None:
            profile.expertise_tags = data.expertise_tags
        return MentorProfileRepository(db).update(profile)

    @staticmethod
    def delete_profile(db: Session, actor: Actor, mentor_id: int) -> None:
        """
        Delete a mentor's profile. Owner or admin only.

        Raises:
            MentorProfileNotFoundException: If the mentor has no profile
            ForbiddenException: If the actor is neither owner nor admin
        """
        profile = MentorProfileService._get(db, mentor_id)
        authorize(
            actor,
            ActionKind.DELETE_CONTENT,
            Resource(kind=ResourceKind.MENTOR_PROFILE, owner_id=profile.user_id),
        )
        MentorProfileRepository(db).delete(profile)

    @staticmethod
    def list_approved(
        db: Session, skip: int = 0, limit: int = 10
    ) -> tuple[list[db_models.MentorProfile], int]:
        repo = MentorProfileRepository(db)
        return repo.list_approved(skip=skip, limit=limit), repo.count_approved()

    @staticmethod
    def list_pending(
        db: Session, actor: Actor, skip: int = 0, limit: int = 10
    ) -> tuple[list[db_models.MentorProfile], int]:
        """
        Profiles whose mentor is still awaiting approval. Admin only.

        Raises:
            UnauthorizedRoleException: If the actor is not an admin
        """
        authorize(actor, ActionKind.VIEW_PENDING_MENTORS)
        repo = MentorProfileRepository(db)
        return repo.list_pending(skip=skip, limit=limit), repo.count_pending()

    @staticmethod
    def list_by_expertise(
        db: Session, tag: str, skip: int = 0, limit: int = 10
    ) -> tuple[list[db_models.MentorProfile], int]:
        repo = MentorProfileRepository(db)
        return (
            repo.list_by_tag(tag, skip=skip, limit=limit),
            repo.count_by_tag(tag),
        )

    @staticmethod
    def get_top(db: Session, limit: int = 10) -> list[db_models.MentorProfile]:
        return MentorProfileRepository(db).get_top(limit=limit)
