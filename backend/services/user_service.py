"""
User service for registration, authentication and account management.
"""

import hmac

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

import models.schemas as schemas
import repositories.db_models as db_models
from authentication.auth import (
    authenticate_user,
    create_user_token,
    get_password_hash,
    verify_password,
)
from models.config import settings
from models.exceptions import (
    EmailAlreadyExistsException,
    InvalidCredentialsException,
    InvalidPasswordException,
    InvalidRoleException,
    InvalidSecretKeyException,
    UserNotFoundException,
)
from repositories.user_repository import UserRepository
from services import content_cascade
from services.authorization_service import (
    ActionKind,
    Actor,
    Resource,
    ResourceKind,
    authorize,
)

SELF_REGISTER_ROLES = (db_models.UserRole.JUNIOR, db_models.UserRole.MENTOR)


class UserService:
    """Service for user-related business logic."""

    @staticmethod
    def _create_user(
        db: Session,
        data: schemas.RegistrationBase,
        role: db_models.UserRole,
    ) -> tuple[db_models.User, str]:
        user_repo = UserRepository(db)
        email = str(data.email).lower()
        if user_repo.email_exists(email):
            raise EmailAlreadyExistsException()

        user = db_models.User(
            name=data.name,
            email=email,
            hashed_password=get_password_hash(data.password),
            role=role,
            bio=data.bio,
            # Only mentors start unapproved.
            is_mentor_approved=role != db_models.UserRole.MENTOR,
        )
        try:
            user = user_repo.create(user)
        except IntegrityError:
            # Lost a race with a concurrent signup for the same email.
            user_repo.rollback()
            raise EmailAlreadyExistsException()
        logger.info(f"User {user.id} registered as {role.value}")
        return user, create_user_token(user)

    @staticmethod
    def register(
        db: Session, data: schemas.UserRegister
    ) -> tuple[db_models.User, str]:
        """
        Self-service registration as junior or mentor.

        Mentors registered here still need admin approval before answering.

        Returns:
            Tuple of (created user, access token)

        Raises:
            InvalidRoleException: If the requested role is not self-assignable
            EmailAlreadyExistsException: If the email is taken
        """
        if data.role not in SELF_REGISTER_ROLES:
            raise InvalidRoleException("Role must be junior or mentor")
        return UserService._create_user(db, data, data.role)

    @staticmethod
    def register_mentor(
        db: Session, data: schemas.SecretKeyRegister
    ) -> tuple[db_models.User, str]:
        """
        Register a mentor account using the mentor secret key.

        Raises:
            InvalidSecretKeyException: If the secret key does not match
            EmailAlreadyExistsException: If the email is taken
        """
        if not hmac.compare_digest(data.secret_key, settings.MENTOR_SECRET_KEY):
            logger.warning("Mentor registration rejected: invalid secret key")
            raise InvalidSecretKeyException(
                "Invalid secret key for mentor registration"
            )
        return UserService._create_user(db, data, db_models.UserRole.MENTOR)

    @staticmethod
    def register_admin(
        db: Session, data: schemas.SecretKeyRegister
    ) -> tuple[db_models.User, str]:
        """
        Register an admin account using the admin secret key.

        Raises:
            InvalidSecretKeyException: If the secret key does not match
            EmailAlreadyExistsException: If the email is taken
        """
        if not hmac.compare_digest(data.secret_key, settings.ADMIN_SECRET_KEY):
            logger.warning("Admin registration rejected: invalid secret key")
            raise InvalidSecretKeyException("Invalid secret key for admin registration")
        return UserService._create_user(db, data, db_models.UserRole.ADMIN)

    @staticmethod
    def login(db: Session, email: str, password: str) -> tuple[db_models.User, str]:
        """
        Authenticate a user and create an access token.

        Banned users can still log in; the ban is enforced on every
        authenticated request instead.

        Raises:
            InvalidCredentialsException: If email or password is incorrect
        """
        user = authenticate_user(db, email, password)
        if not user:
            raise InvalidCredentialsException()
        return user, create_user_token(user)

    @staticmethod
    def get_user(db: Session, user_id: int) -> db_models.User:
        """
        Get a user by ID.

        Raises:
            UserNotFoundException: If the user does not exist
        """
        user = UserRepository(db).get_by_id(user_id)
        if not user:
            raise UserNotFoundException("User not found")
        return user

    @staticmethod
    def update_profile(
        db: Session,
        actor: Actor,
        user_id: int,
        data: schemas.UserProfileUpdate,
    ) -> db_models.User:
        """
        Update name and bio. Owner or admin only.

        Raises:
            UserNotFoundException: If the user does not exist
            ForbiddenException: If the actor is neither owner nor admin
        """
        user = UserService.get_user(db, user_id)
        authorize(
            actor,
            ActionKind.UPDATE_CONTENT,
            Resource(kind=ResourceKind.USER, owner_id=user.id),
        )

        if data.name is not None:
            user.name = data.name
        if data.bio is not None:
            user.bio = data.bio
        return UserRepository(db).update(user)

    @staticmethod
    def change_password(
        db: Session,
        actor: Actor,
        user_id: int,
        current_password: str,
        new_password: str,
    ) -> None:
        """
        Change a password after verifying the current one.

        Raises:
            UserNotFoundException: If the user does not exist
            ForbiddenException: If the actor is neither owner nor admin
            InvalidPasswordException: If the current password is wrong
        """
        user = UserService.get_user(db, user_id)
        authorize(
            actor,
            ActionKind.UPDATE_CONTENT,
            Resource(kind=ResourceKind.USER, owner_id=user.id),
        )
        if not verify_password(current_password, user.hashed_password):
            raise InvalidPasswordException()

        user.hashed_password = get_password_hash(new_password)
        UserRepository(db).update(user)
        logger.info(f"Password changed for user {user.id}")

    @staticmethod
    def list_approved_mentors(
        db: Session, skip: int = 0, limit: int = 10
    ) -> tuple[list[db_models.User], int]:
        repo = UserRepository(db)
        return (
            repo.list_approved_mentors(skip=skip, limit=limit),
            repo.count_approved_mentors(),
        )

    @staticmethod
    def list_pending_mentors(
        db: Session, skip: int = 0, limit: int = 10
    ) -> tuple[list[db_models.User], int]:
        repo = UserRepository(db)
        return (
            repo.list_pending_mentors(skip=skip, limit=limit),
            repo.count_pending_mentors(),
        )

    @staticmethod
    def list_users_by_role(
        db: Session, role: str, skip: int = 0, limit: int = 10
    ) -> tuple[list[db_models.User], int]:
        """
        List users holding a role.

        Raises:
            InvalidRoleException: If ``role`` is not junior, mentor or admin
        """
        try:
            user_role = db_models.UserRole(role.lower())
        except ValueError:
            raise InvalidRoleException(f"Invalid role: {role}")
        repo = UserRepository(db)
        return (
            repo.list_by_role(user_role, skip=skip, limit=limit),
            repo.count_by_role(user_role),
        )

    @staticmethod
    def delete_user(db: Session, actor: Actor, user_id: int) -> None:
        """
        Permanently delete a user, their profile and their content. Admin only.

        Upvotes the user cast are withdrawn so counters stay consistent.

        Raises:
            UnauthorizedRoleException: If the actor is not an admin
            UserNotFoundException: If the user does not exist
        """
        authorize(actor, ActionKind.DELETE_USER)
        user = UserService.get_user(db, user_id)
        try:
            content_cascade.delete_user_tree(db, user)
            db.commit()
        except Exception:
            db.rollback()
            raise
        logger.warning(f"User {user_id} deleted by admin {actor.id}")
