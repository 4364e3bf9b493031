"""Upvote endpoints. The authenticated user is always the voter."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from helpers.pagination import Page, PageLimit, page_offset, paginated_response
from repositories.database import get_db
from services.upvote_service import UpvoteService

router = APIRouter(prefix="/upvotes", tags=["upvotes"])


@router.get("/stats/overview", response_model=schemas.ApiResponse[schemas.UpvoteStats])
def get_upvote_stats(
    db: Session = Depends(get_db),
) -> schemas.ApiResponse[schemas.UpvoteStats]:
    return schemas.ApiResponse[schemas.UpvoteStats](
        data=UpvoteService.get_upvote_stats(db)
    )


@router.get("/user/{user_id}", response_model=schemas.PaginatedResponse[schemas.Upvote])
def get_upvotes_by_user(
    user_id: int,
    page: Page = 1,
    limit: PageLimit = 10,
    db: Session = Depends(get_db),
) -> schemas.PaginatedResponse[schemas.Upvote]:
    upvotes, total = UpvoteService.get_upvotes_by_user(
        db, user_id, skip=page_offset(page, limit), limit=limit
    )
    return paginated_response(upvotes, schemas.Upvote, total, page, limit)


@router.post(
    "/{answer_id}",
    response_model=schemas.ApiResponse[schemas.UpvoteResult],
    status_code=status.HTTP_201_CREATED,
)
def upvote_answer(
    answer_id: int,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_active_user),
) -> schemas.ApiResponse[schemas.UpvoteResult]:
    """
    Upvote an answer.

    A second upvote on the same answer fails with ``ALREADY_UPVOTED``.
    """
    result = UpvoteService.upvote(db, current_user.id, answer_id)
    return schemas.ApiResponse[schemas.UpvoteResult](
        message="Answer upvoted successfully", data=result
    )


@router.delete("/{answer_id}", response_model=schemas.ApiResponse[schemas.UpvoteResult])
def remove_upvote(
    answer_id: int,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_active_user),
) -> schemas.ApiResponse[schemas.UpvoteResult]:
    result = UpvoteService.remove_upvote(db, current_user.id, answer_id)
    return schemas.ApiResponse[schemas.UpvoteResult](
        message="Upvote removed successfully", data=result
    )


@router.get("/{answer_id}", response_model=schemas.PaginatedResponse[schemas.Upvote])
def get_upvotes_by_answer(
    answer_id: int,
    page: Page = 1,
    limit: PageLimit = 10,
    db: Session = Depends(get_db),
) -> schemas.PaginatedResponse[schemas.Upvote]:
    upvotes, total = UpvoteService.get_upvotes_by_answer(
        db, answer_id, skip=page_offset(page, limit), limit=limit
    )
    return paginated_response(upvotes, schemas.Upvote, total, page, limit)


@router.get(
    "/{answer_id}/check", response_model=schemas.ApiResponse[schemas.UpvoteCheck]
)
def check_upvote(
    answer_id: int,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_active_user),
) -> schemas.ApiResponse[schemas.UpvoteCheck]:
    is_upvoted = UpvoteService.has_upvoted(db, current_user.id, answer_id)
    return schemas.ApiResponse[schemas.UpvoteCheck](
        data=schemas.UpvoteCheck(is_upvoted=is_upvoted)
    )
