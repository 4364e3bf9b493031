"""Tests for UserService."""

from datetime import datetime, timezone

import pytest

import models.schemas as schemas
import repositories.db_models as db_models
from authentication.auth import verify_password
from models.exceptions import (
    EmailAlreadyExistsException,
    InvalidCredentialsException,
    InvalidPasswordException,
    InvalidRoleException,
    InvalidSecretKeyException,
    UnauthorizedRoleException,
    UserNotFoundException,
)
from repositories.user_repository import UserRepository
from services.authorization_service import actor_from_user
from services.upvote_service import UpvoteService
from services.user_service import UserService

TEST_PASSWORD = "password123"


def _registration(**overrides) -> dict:
    data = {
        "name": "Alice",
        "email": "alice@example.com",
        "password": "secret123",
    }
    data.update(overrides)
    return data


class TestRegistration:
    def test_junior_is_approved_immediately(self, db_session):
        user, token = UserService.register(
            db_session, schemas.UserRegister(**_registration())
        )

        assert user.role == db_models.UserRole.JUNIOR
        assert user.is_mentor_approved is True
        assert token

    def test_mentor_starts_pending(self, db_session):
        user, _ = UserService.register(
            db_session,
            schemas.UserRegister(
                **_registration(name="Bob", email="bob@example.com"),
                role=db_models.UserRole.MENTOR,
            ),
        )

        assert user.role == db_models.UserRole.MENTOR
        assert user.is_mentor_approved is False

    def test_admin_role_not_self_assignable(self, db_session):
        with pytest.raises(InvalidRoleException) as exc_info:
            UserService.register(
                db_session,
                schemas.UserRegister(**_registration(), role=db_models.UserRole.ADMIN),
            )
        assert exc_info.value.code == "INVALID_ROLE"

    def test_email_is_case_insensitive(self, db_session):
        UserService.register(db_session, schemas.UserRegister(**_registration()))

        with pytest.raises(EmailAlreadyExistsException):
            UserService.register(
                db_session,
                schemas.UserRegister(**_registration(email="ALICE@example.com")),
            )

    def test_duplicate_insert_race_maps_to_conflict(self, db_session, monkeypatch):
        UserService.register(db_session, schemas.UserRegister(**_registration()))
        # Simulate a concurrent signup that passed the existence check too.
        monkeypatch.setattr(UserRepository, "email_exists", lambda self, email: False)

        with pytest.raises(EmailAlreadyExistsException):
            UserService.register(db_session, schemas.UserRegister(**_registration()))

        assert db_session.query(db_models.User).count() == 1

    def test_mentor_secret_key(self, db_session):
        user, _ = UserService.register_mentor(
            db_session,
            schemas.SecretKeyRegister(**_registration(), secret_key="mentor-secret"),
        )
        assert user.role == db_models.UserRole.MENTOR
        assert user.is_mentor_approved is False

    def test_admin_secret_key(self, db_session):
        user, _ = UserService.register_admin(
            db_session,
            schemas.SecretKeyRegister(**_registration(), secret_key="admin-secret"),
        )
        assert user.role == db_models.UserRole.ADMIN

    @pytest.mark.parametrize("method", ["register_mentor", "register_admin"])
    def test_wrong_secret_key(self, db_session, method):
        with pytest.raises(InvalidSecretKeyException):
            getattr(UserService, method)(
                db_session,
                schemas.SecretKeyRegister(**_registration(), secret_key="guess"),
            )
        assert db_session.query(db_models.User).count() == 0


class TestLogin:
    def test_login_success(self, db_session, junior_user):
        user, token = UserService.login(db_session, junior_user.email, TEST_PASSWORD)
        assert user.id == junior_user.id
        assert token

    def test_wrong_password(self, db_session, junior_user):
        with pytest.raises(InvalidCredentialsException):
            UserService.login(db_session, junior_user.email, "not-the-password")

    def test_unknown_email(self, db_session):
        with pytest.raises(InvalidCredentialsException):
            UserService.login(db_session, "nobody@example.com", TEST_PASSWORD)

    def test_banned_user_can_still_log_in(self, db_session, junior_user):
        junior_user.banned_at = datetime.now(timezone.utc)
        db_session.commit()

        user, _ = UserService.login(db_session, junior_user.email, TEST_PASSWORD)
        assert user.is_banned


class TestAccount:
    def test_update_own_profile(self, db_session, junior_user):
        user = UserService.update_profile(
            db_session,
            actor_from_user(junior_user),
            junior_user.id,
            schemas.UserProfileUpdate(bio="Learning Python"),
        )
        assert user.bio == "Learning Python"
        assert user.name == "Junior"

    def test_change_password(self, db_session, junior_user):
        UserService.change_password(
            db_session,
            actor_from_user(junior_user),
            junior_user.id,
            TEST_PASSWORD,
            "brand-new-password",
        )
        db_session.refresh(junior_user)
        assert verify_password("brand-new-password", junior_user.hashed_password)

    def test_change_password_wrong_current(self, db_session, junior_user):
        with pytest.raises(InvalidPasswordException):
            UserService.change_password(
                db_session,
                actor_from_user(junior_user),
                junior_user.id,
                "wrong",
                "brand-new-password",
            )

    def test_get_missing_user(self, db_session):
        with pytest.raises(UserNotFoundException):
            UserService.get_user(db_session, 99999)

    def test_list_users_by_role(self, db_session, junior_user, other_junior, mentor_user):
        users, total = UserService.list_users_by_role(db_session, "JUNIOR")
        assert total == 2
        assert {u.id for u in users} == {junior_user.id, other_junior.id}

        with pytest.raises(InvalidRoleException):
            UserService.list_users_by_role(db_session, "superuser")

    def test_pending_mentors_listed_apart(
        self, db_session, mentor_user, pending_mentor
    ):
        approved, approved_total = UserService.list_approved_mentors(db_session)
        pending, pending_total = UserService.list_pending_mentors(db_session)

        assert approved_total == 1 and approved[0].id == mentor_user.id
        assert pending_total == 1 and pending[0].id == pending_mentor.id


class TestDeleteUser:
    def test_requires_admin(self, db_session, junior_user, other_junior):
        with pytest.raises(UnauthorizedRoleException):
            UserService.delete_user(
                db_session, actor_from_user(junior_user), other_junior.id
            )

    def test_withdraws_cast_upvotes(
        self,
        db_session,
        admin_user,
        other_junior,
        mentor_profile,
        test_answer,
        test_comment,
    ):
        UpvoteService.upvote(db_session, other_junior.id, test_answer.id)
        voter_id = other_junior.id

        UserService.delete_user(db_session, actor_from_user(admin_user), voter_id)

        db_session.refresh(test_answer)
        db_session.refresh(mentor_profile)
        assert test_answer.upvote_count == 0
        assert mentor_profile.total_upvotes == 0
        assert db_session.query(db_models.Comment).count() == 0
        assert (
            db_session.query(db_models.User).filter(db_models.User.id == voter_id).count()
            == 0
        )

    def test_removes_mentor_content(
        self, db_session, admin_user, mentor_user, mentor_profile, test_answer
    ):
        mentor_id = mentor_user.id

        UserService.delete_user(db_session, actor_from_user(admin_user), mentor_id)

        assert db_session.query(db_models.Answer).count() == 0
        assert db_session.query(db_models.MentorProfile).count() == 0
        assert db_session.query(db_models.Doubt).count() == 1
