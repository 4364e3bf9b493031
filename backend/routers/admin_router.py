"""
Admin endpoints: registration, mentor approval, bans, content takedowns and
the admin action ledger.

Every route except ``/register`` requires an admin. Each moderation call
appends exactly one ledger entry in the same transaction as the mutation.
"""

from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Request, status
from sqlalchemy.orm import Session

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from helpers.pagination import Page, PageLimit, page_offset, paginated_response
from helpers.rate_limiter import REGISTER_RATE_LIMIT, limiter
from repositories.database import get_db
from services.audit_service import AuditService
from services.moderation_service import ModerationService
from services.realtime_service import (
    JUNIOR_SPACE_CHANNEL,
    RealtimeEvent,
    broadcaster,
    doubt_channel,
)
from services.upvote_service import UpvoteService
from services.user_service import UserService

router = APIRouter(prefix="/admin", tags=["admin"])

ModerationResponse = schemas.ApiResponse[schemas.ModerationResult]


@router.post(
    "/register",
    response_model=schemas.AuthResponse,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit(REGISTER_RATE_LIMIT)
def register_admin(
    request: Request,
    payload: schemas.SecretKeyRegister,
    db: Session = Depends(get_db),
) -> schemas.AuthResponse:
    """Register an admin account with the admin secret key."""
    user, token = UserService.register_admin(db, payload)
    return schemas.AuthResponse(
        message="Admin account created successfully",
        data=schemas.User.model_validate(user),
        token=token,
    )


@router.post("/approve-mentor/{mentor_id}", response_model=ModerationResponse)
def approve_mentor(
    mentor_id: int,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_admin_user),
) -> schemas.ApiResponse[schemas.ModerationResult]:
    result = ModerationService.approve_mentor(db, current_user.id, mentor_id)
    return ModerationResponse(message="Mentor approved successfully", data=result)


@router.post("/reject-mentor/{mentor_id}", response_model=ModerationResponse)
def reject_mentor(
    mentor_id: int,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_admin_user),
) -> schemas.ApiResponse[schemas.ModerationResult]:
    """Reject a mentor by removing their profile."""
    result = ModerationService.reject_mentor(db, current_user.id, mentor_id)
    return ModerationResponse(message="Mentor rejected", data=result)


@router.post("/ban-user/{user_id}", response_model=ModerationResponse)
def ban_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_admin_user),
) -> schemas.ApiResponse[schemas.ModerationResult]:
    result = ModerationService.ban_user(db, current_user.id, user_id)
    return ModerationResponse(message="User banned successfully", data=result)


@router.post("/unban-user/{user_id}", response_model=ModerationResponse)
def unban_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_admin_user),
) -> schemas.ApiResponse[schemas.ModerationResult]:
    result = ModerationService.unban_user(db, current_user.id, user_id)
    return ModerationResponse(message="User unbanned successfully", data=result)


@router.delete("/doubts/{doubt_id}", response_model=ModerationResponse)
def delete_doubt(
    doubt_id: int,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_admin_user),
) -> schemas.ApiResponse[schemas.ModerationResult]:
    """Take down a doubt together with its answers, upvotes and comments."""
    result = ModerationService.delete_doubt(db, current_user.id, doubt_id)
    return ModerationResponse(message="Doubt deleted successfully", data=result)


@router.delete("/answers/{answer_id}", response_model=ModerationResponse)
def delete_answer(
    answer_id: int,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_admin_user),
) -> schemas.ApiResponse[schemas.ModerationResult]:
    result = ModerationService.delete_answer(db, current_user.id, answer_id)
    return ModerationResponse(message="Answer deleted successfully", data=result)


@router.delete("/comments/{comment_id}", response_model=ModerationResponse)
def delete_comment(
    comment_id: int,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_admin_user),
) -> schemas.ApiResponse[schemas.ModerationResult]:
    result, doubt_id = ModerationService.delete_comment(
        db, current_user.id, comment_id
    )
    background_tasks.add_task(
        broadcaster.publish,
        doubt_channel(doubt_id),
        RealtimeEvent.COMMENT_DELETED,
        {"comment_id": comment_id},
    )
    return ModerationResponse(message="Comment deleted successfully", data=result)


@router.delete("/junior-space-posts/{post_id}", response_model=ModerationResponse)
def delete_junior_post(
    post_id: int,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_admin_user),
) -> schemas.ApiResponse[schemas.ModerationResult]:
    result = ModerationService.delete_junior_post(db, current_user.id, post_id)
    background_tasks.add_task(
        broadcaster.publish,
        JUNIOR_SPACE_CHANNEL,
        RealtimeEvent.POST_DELETED,
        {"post_id": post_id},
    )
    return ModerationResponse(message="Post deleted successfully", data=result)


@router.get("/actions", response_model=schemas.PaginatedResponse[schemas.AdminAction])
def get_admin_actions(
    action_type: Optional[db_models.AdminActionType] = None,
    page: Page = 1,
    limit: PageLimit = 20,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_admin_user),
) -> schemas.PaginatedResponse[schemas.AdminAction]:
    """The calling admin's own ledger entries, newest first."""
    actions, total = AuditService.list_actions(
        db,
        current_user.id,
        action_type=action_type,
        skip=page_offset(page, limit),
        limit=limit,
    )
    return paginated_response(actions, schemas.AdminAction, total, page, limit)


@router.get("/stats", response_model=schemas.ApiResponse[schemas.AdminStats])
def get_admin_stats(
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_admin_user),
) -> schemas.ApiResponse[schemas.AdminStats]:
    return schemas.ApiResponse[schemas.AdminStats](
        data=AuditService.get_stats(db, current_user.id)
    )


@router.get("/mentors/pending", response_model=schemas.PaginatedResponse[schemas.User])
def get_pending_mentors(
    page: Page = 1,
    limit: PageLimit = 10,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_admin_user),
) -> schemas.PaginatedResponse[schemas.User]:
    """Mentor accounts awaiting approval, with or without a profile."""
    users, total = UserService.list_pending_mentors(
        db, skip=page_offset(page, limit), limit=limit
    )
    return paginated_response(users, schemas.User, total, page, limit)


@router.post(
    "/maintenance/reconcile-upvotes",
    response_model=schemas.ApiResponse[schemas.ReconcileResult],
)
def reconcile_upvotes(
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_admin_user),
) -> schemas.ApiResponse[schemas.ReconcileResult]:
    """Rebuild cached upvote counters from the upvote ledger."""
    return schemas.ApiResponse[schemas.ReconcileResult](
        message="Upvote counters reconciled",
        data=UpvoteService.reconcile_counters(db),
    )
