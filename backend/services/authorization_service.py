"""
Authorization policy.

Pure functions deciding whether an actor may perform an action on a
resource. No I/O: callers load the resource, build an ``Actor`` and a
``Resource``, and either inspect the ``Decision`` or call ``authorize`` to
raise the matching domain exception.
"""

import enum
from dataclasses import dataclass
from typing import Optional

import repositories.db_models as db_models
from models.exceptions import (
    ForbiddenException,
    MentorNotApprovedException,
    UnauthorizedRoleException,
)

Role = db_models.UserRole


class ActionKind(str, enum.Enum):
    CREATE_ANSWER = "create_answer"
    CREATE_PROFILE = "create_profile"
    UPDATE_CONTENT = "update_content"
    DELETE_CONTENT = "delete_content"
    APPROVE_MENTOR = "approve_mentor"
    REJECT_MENTOR = "reject_mentor"
    BAN_USER = "ban_user"
    UNBAN_USER = "unban_user"
    MODERATE_CONTENT = "moderate_content"
    DELETE_USER = "delete_user"
    VIEW_AUDIT_LOG = "view_audit_log"
    VIEW_PENDING_MENTORS = "view_pending_mentors"
    RECONCILE_COUNTERS = "reconcile_counters"


class ResourceKind(str, enum.Enum):
    USER = "user"
    DOUBT = "doubt"
    ANSWER = "answer"
    COMMENT = "comment"
    JUNIOR_POST = "junior_post"
    MENTOR_PROFILE = "mentor_profile"


OWNER_ACTIONS = frozenset(
    {ActionKind.UPDATE_CONTENT, ActionKind.DELETE_CONTENT, ActionKind.CREATE_PROFILE}
)

ADMIN_ONLY_ACTIONS = frozenset(
    {
        ActionKind.APPROVE_MENTOR,
        ActionKind.REJECT_MENTOR,
        ActionKind.BAN_USER,
        ActionKind.UNBAN_USER,
        ActionKind.MODERATE_CONTENT,
        ActionKind.DELETE_USER,
        ActionKind.VIEW_AUDIT_LOG,
        ActionKind.VIEW_PENDING_MENTORS,
        ActionKind.RECONCILE_COUNTERS,
    }
)


@dataclass(frozen=True)
class Actor:
    id: int
    role: Role
    is_mentor_approved: bool = False


@dataclass(frozen=True)
class Resource:
    kind: ResourceKind
    owner_id: int


@dataclass(frozen=True)
class Decision:
    allowed: bool
    code: Optional[str] = None
    reason: str = ""


ALLOW = Decision(allowed=True)


def actor_from_user(user: db_models.User) -> Actor:
    """Build the policy view of an authenticated user."""
    return Actor(
        id=user.id, role=user.role, is_mentor_approved=bool(user.is_mentor_approved)
    )


def can_perform(
    actor: Actor, action: ActionKind, resource: Optional[Resource] = None
) -> Decision:
    """
    Decide whether ``actor`` may perform ``action`` on ``resource``.

    Rules are evaluated in order; the first that applies wins:

    1. Admins may do anything.
    2. Owner-scoped mutations require ``actor.id == resource.owner_id``.
    3. Answering requires an approved mentor.
    4. Admin-only operations are refused to everyone else.

    Args:
        actor: Who is acting
        action: What they want to do
        resource: Target of the action, required for owner-scoped actions

    Returns:
        Decision with ``allowed`` and, when denied, a stable ``code``
    """
    if actor.role == Role.ADMIN:
        return ALLOW

    if action in OWNER_ACTIONS:
        if resource is not None and resource.owner_id == actor.id:
            return ALLOW
        kind = resource.kind.value if resource is not None else "resource"
        return Decision(
            allowed=False,
            code="FORBIDDEN",
            reason=f"Not authorized to modify this {kind}",
        )

    if action == ActionKind.CREATE_ANSWER:
        if actor.role != Role.MENTOR:
            return Decision(
                allowed=False,
                code="UNAUTHORIZED",
                reason="Only mentors can post answers",
            )
        if not actor.is_mentor_approved:
            return Decision(
                allowed=False,
                code="NOT_APPROVED",
                reason="Your mentor account is not approved yet",
            )
        return ALLOW

    if action in ADMIN_ONLY_ACTIONS:
        return Decision(
            allowed=False, code="UNAUTHORIZED", reason="Admin access required"
        )

    return Decision(allowed=False, code="UNAUTHORIZED", reason="Action not permitted")


def authorize(
    actor: Actor, action: ActionKind, resource: Optional[Resource] = None
) -> None:
    """
    Enforce ``can_perform``.

    Raises:
        ForbiddenException: Non-owner mutation (FORBIDDEN)
        MentorNotApprovedException: Mentor awaiting approval (NOT_APPROVED)
        UnauthorizedRoleException: Role does not allow the action (UNAUTHORIZED)
    """
    decision = can_perform(actor, action, resource)
    if decision.allowed:
        return
    if decision.code == "FORBIDDEN":
        raise ForbiddenException(decision.reason)
    if decision.code == "NOT_APPROVED":
        raise MentorNotApprovedException(decision.reason)
    raise UnauthorizedRoleException(decision.reason)
