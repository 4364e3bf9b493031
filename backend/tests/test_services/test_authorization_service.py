"""Tests for the authorization policy."""

import pytest

from models.exceptions import (
    ForbiddenException,
    MentorNotApprovedException,
    UnauthorizedRoleException,
)
from repositories.db_models import UserRole
from services.authorization_service import (
    ActionKind,
    Actor,
    Resource,
    ResourceKind,
    actor_from_user,
    authorize,
    can_perform,
)

JUNIOR = Actor(id=1, role=UserRole.JUNIOR, is_mentor_approved=True)
MENTOR = Actor(id=2, role=UserRole.MENTOR, is_mentor_approved=True)
PENDING = Actor(id=3, role=UserRole.MENTOR, is_mentor_approved=False)
ADMIN = Actor(id=4, role=UserRole.ADMIN, is_mentor_approved=True)

ADMIN_ONLY = [
    ActionKind.APPROVE_MENTOR,
    ActionKind.REJECT_MENTOR,
    ActionKind.BAN_USER,
    ActionKind.UNBAN_USER,
    ActionKind.MODERATE_CONTENT,
    ActionKind.DELETE_USER,
    ActionKind.VIEW_AUDIT_LOG,
    ActionKind.VIEW_PENDING_MENTORS,
    ActionKind.RECONCILE_COUNTERS,
]


class TestCanPerform:
    """Decision table of the policy."""

    @pytest.mark.parametrize("action", list(ActionKind))
    def test_admin_may_do_anything(self, action):
        resource = Resource(kind=ResourceKind.DOUBT, owner_id=999)
        assert can_perform(ADMIN, action, resource).allowed

    @pytest.mark.parametrize(
        "action", [ActionKind.UPDATE_CONTENT, ActionKind.DELETE_CONTENT]
    )
    @pytest.mark.parametrize("kind", list(ResourceKind))
    def test_owner_may_modify_own_content(self, action, kind):
        resource = Resource(kind=kind, owner_id=JUNIOR.id)
        assert can_perform(JUNIOR, action, resource).allowed

    @pytest.mark.parametrize(
        "action", [ActionKind.UPDATE_CONTENT, ActionKind.DELETE_CONTENT]
    )
    def test_non_owner_is_forbidden(self, action):
        resource = Resource(kind=ResourceKind.ANSWER, owner_id=MENTOR.id)
        decision = can_perform(JUNIOR, action, resource)

        assert not decision.allowed
        assert decision.code == "FORBIDDEN"
        assert "answer" in decision.reason

    def test_owner_action_without_resource_is_forbidden(self):
        decision = can_perform(MENTOR, ActionKind.UPDATE_CONTENT)
        assert decision.code == "FORBIDDEN"

    def test_approved_mentor_may_answer(self):
        assert can_perform(MENTOR, ActionKind.CREATE_ANSWER).allowed

    def test_unapproved_mentor_cannot_answer(self):
        decision = can_perform(PENDING, ActionKind.CREATE_ANSWER)
        assert not decision.allowed
        assert decision.code == "NOT_APPROVED"

    def test_junior_cannot_answer_even_if_flagged_approved(self):
        decision = can_perform(JUNIOR, ActionKind.CREATE_ANSWER)
        assert decision.code == "UNAUTHORIZED"

    @pytest.mark.parametrize("action", ADMIN_ONLY)
    @pytest.mark.parametrize("actor", [JUNIOR, MENTOR, PENDING])
    def test_admin_only_actions_refused(self, actor, action):
        decision = can_perform(actor, action)
        assert not decision.allowed
        assert decision.code == "UNAUTHORIZED"

    def test_mentor_may_create_own_profile_only(self):
        own = Resource(kind=ResourceKind.MENTOR_PROFILE, owner_id=MENTOR.id)
        other = Resource(kind=ResourceKind.MENTOR_PROFILE, owner_id=PENDING.id)

        assert can_perform(MENTOR, ActionKind.CREATE_PROFILE, own).allowed
        assert can_perform(MENTOR, ActionKind.CREATE_PROFILE, other).code == "FORBIDDEN"


class TestAuthorize:
    """Decisions are turned into the matching domain exception."""

    def test_allowed_returns_none(self):
        assert authorize(MENTOR, ActionKind.CREATE_ANSWER) is None

    def test_forbidden(self):
        resource = Resource(kind=ResourceKind.COMMENT, owner_id=MENTOR.id)
        with pytest.raises(ForbiddenException) as exc_info:
            authorize(JUNIOR, ActionKind.DELETE_CONTENT, resource)
        assert exc_info.value.code == "FORBIDDEN"

    def test_not_approved(self):
        with pytest.raises(MentorNotApprovedException) as exc_info:
            authorize(PENDING, ActionKind.CREATE_ANSWER)
        assert exc_info.value.code == "NOT_APPROVED"

    def test_unauthorized(self):
        with pytest.raises(UnauthorizedRoleException) as exc_info:
            authorize(MENTOR, ActionKind.BAN_USER)
        assert exc_info.value.code == "UNAUTHORIZED"


def test_actor_from_user(pending_mentor):
    actor = actor_from_user(pending_mentor)

    assert actor.id == pending_mentor.id
    assert actor.role == UserRole.MENTOR
    assert actor.is_mentor_approved is False
