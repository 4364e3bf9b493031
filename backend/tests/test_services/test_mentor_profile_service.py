"""Tests for MentorProfileService."""

import pytest

import models.schemas as schemas
import repositories.db_models as db_models
from models.exceptions import (
    ForbiddenException,
    MentorProfileExistsException,
    MentorProfileNotFoundException,
    UnauthorizedRoleException,
    UserNotFoundException,
)
from services.authorization_service import actor_from_user
from services.mentor_profile_service import MentorProfileService


def test_mentor_creates_own_profile(db_session, mentor_user):
    profile = MentorProfileService.create_profile(
        db_session,
        actor_from_user(mentor_user),
        mentor_user.id,
        schemas.MentorProfileCreate(expertise_tags=["Django", "django", "SQL"]),
    )

    assert profile.badge == "Mentor"
    assert profile.expertise_tags == ["django", "sql"]
    assert profile.total_upvotes == 0
    assert profile.approved_by_admin is True


def test_admin_creates_profile_for_mentor(db_session, admin_user, pending_mentor):
    profile = MentorProfileService.create_profile(
        db_session,
        actor_from_user(admin_user),
        pending_mentor.id,
        schemas.MentorProfileCreate(badge="Rust Guru"),
    )

    assert profile.user_id == pending_mentor.id
    # Approval is read from the user record.
    assert profile.approved_by_admin is False


def test_cannot_create_for_someone_else(db_session, mentor_user, pending_mentor):
    with pytest.raises(ForbiddenException):
        MentorProfileService.create_profile(
            db_session,
            actor_from_user(mentor_user),
            pending_mentor.id,
            schemas.MentorProfileCreate(),
        )


def test_junior_cannot_have_profile(db_session, junior_user):
    with pytest.raises(UnauthorizedRoleException):
        MentorProfileService.create_profile(
            db_session,
            actor_from_user(junior_user),
            junior_user.id,
            schemas.MentorProfileCreate(),
        )


def test_missing_user(db_session, admin_user):
    with pytest.raises(UserNotFoundException):
        MentorProfileService.create_profile(
            db_session, actor_from_user(admin_user), 99999, schemas.MentorProfileCreate()
        )


def test_duplicate_profile(db_session, mentor_user, mentor_profile):
    with pytest.raises(MentorProfileExistsException) as exc_info:
        MentorProfileService.create_profile(
            db_session,
            actor_from_user(mentor_user),
            mentor_user.id,
            schemas.MentorProfileCreate(),
        )
    assert exc_info.value.code == "PROFILE_EXISTS"


def test_get_profile_counts_answers(db_session, mentor_user, mentor_profile, test_answer):
    detail = MentorProfileService.get_profile(db_session, mentor_user.id)

    assert detail.badge == "Python Pro"
    assert detail.answers_count == 1
    assert detail.user.name == "Mentor"


def test_get_missing_profile(db_session, junior_user):
    with pytest.raises(MentorProfileNotFoundException):
        MentorProfileService.get_profile(db_session, junior_user.id)


def test_update_and_delete_own_profile(db_session, mentor_user, mentor_profile):
    actor = actor_from_user(mentor_user)

    profile = MentorProfileService.update_profile(
        db_session,
        actor,
        mentor_user.id,
        schemas.MentorProfileUpdate(badge="Async Wizard", expertise_tags=["AsyncIO"]),
    )
    assert profile.badge == "Async Wizard"
    assert profile.expertise_tags == ["asyncio"]

    MentorProfileService.delete_profile(db_session, actor, mentor_user.id)
    assert db_session.query(db_models.MentorProfile).count() == 0


def test_listing_by_expertise_only_approved(
    db_session, admin_user, mentor_profile, pending_mentor
):
    MentorProfileService.create_profile(
        db_session,
        actor_from_user(admin_user),
        pending_mentor.id,
        schemas.MentorProfileCreate(expertise_tags=["python"]),
    )

    profiles, total = MentorProfileService.list_by_expertise(db_session, "Python")

    assert total == 1
    assert profiles[0].id == mentor_profile.id
    _, total = MentorProfileService.list_by_expertise(db_session, "go")
    assert total == 0


def test_pending_list_is_admin_only(
    db_session, admin_user, mentor_user, pending_mentor, mentor_profile
):
    MentorProfileService.create_profile(
        db_session,
        actor_from_user(admin_user),
        pending_mentor.id,
        schemas.MentorProfileCreate(),
    )

    with pytest.raises(UnauthorizedRoleException):
        MentorProfileService.list_pending(db_session, actor_from_user(mentor_user))

    pending, total = MentorProfileService.list_pending(
        db_session, actor_from_user(admin_user)
    )
    assert total == 1
    assert pending[0].user_id == pending_mentor.id

    approved, approved_total = MentorProfileService.list_approved(db_session)
    assert approved_total == 1
    assert approved[0].id == mentor_profile.id
