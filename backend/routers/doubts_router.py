"""Doubt endpoints. Everything except the stats overview requires a login."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from helpers.pagination import Page, PageLimit, page_offset, paginated_response
from repositories.database import get_db
from services.authorization_service import actor_from_user
from services.doubt_service import DoubtService

router = APIRouter(prefix="/doubts", tags=["doubts"])


@router.get("/stats/overview", response_model=schemas.ApiResponse[schemas.DoubtStats])
def get_doubt_stats(
    db: Session = Depends(get_db),
) -> schemas.ApiResponse[schemas.DoubtStats]:
    return schemas.ApiResponse[schemas.DoubtStats](data=DoubtService.get_stats(db))


@router.get("/user/{user_id}", response_model=schemas.PaginatedResponse[schemas.Doubt])
def get_doubts_by_user(
    user_id: int,
    page: Page = 1,
    limit: PageLimit = 10,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_active_user),
) -> schemas.PaginatedResponse[schemas.Doubt]:
    doubts, total = DoubtService.list_by_user(
        db, user_id, skip=page_offset(page, limit), limit=limit
    )
    return paginated_response(doubts, schemas.Doubt, total, page, limit)


@router.get("/tag/{tag}", response_model=schemas.PaginatedResponse[schemas.Doubt])
def get_doubts_by_tag(
    tag: str,
    page: Page = 1,
    limit: PageLimit = 10,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_active_user),
) -> schemas.PaginatedResponse[schemas.Doubt]:
    doubts, total = DoubtService.list_by_tag(
        db, tag, skip=page_offset(page, limit), limit=limit
    )
    return paginated_response(doubts, schemas.Doubt, total, page, limit)


@router.post(
    "",
    response_model=schemas.ApiResponse[schemas.Doubt],
    status_code=status.HTTP_201_CREATED,
)
def create_doubt(
    payload: schemas.DoubtCreate,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_active_user),
) -> schemas.ApiResponse[schemas.Doubt]:
    doubt = DoubtService.create_doubt(db, actor_from_user(current_user), payload)
    return schemas.ApiResponse[schemas.Doubt](
        message="Doubt created successfully", data=schemas.Doubt.model_validate(doubt)
    )


@router.get("", response_model=schemas.PaginatedResponse[schemas.Doubt])
def get_all_doubts(
    page: Page = 1,
    limit: PageLimit = 10,
    status_filter: Optional[db_models.DoubtStatus] = Query(
        default=None, alias="status"
    ),
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_active_user),
) -> schemas.PaginatedResponse[schemas.Doubt]:
    """List doubts newest first, optionally filtered by ``status``."""
    doubts, total = DoubtService.list_doubts(
        db, skip=page_offset(page, limit), limit=limit, status=status_filter
    )
    return paginated_response(doubts, schemas.Doubt, total, page, limit)


@router.get("/{doubt_id}", response_model=schemas.ApiResponse[schemas.DoubtWithAnswers])
def get_doubt(
    doubt_id: int,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_active_user),
) -> schemas.ApiResponse[schemas.DoubtWithAnswers]:
    return schemas.ApiResponse[schemas.DoubtWithAnswers](
        data=DoubtService.get_doubt_with_answers(db, doubt_id)
    )


@router.patch("/{doubt_id}", response_model=schemas.ApiResponse[schemas.Doubt])
def update_doubt(
    doubt_id: int,
    payload: schemas.DoubtUpdate,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_active_user),
) -> schemas.ApiResponse[schemas.Doubt]:
    doubt = DoubtService.update_doubt(
        db, actor_from_user(current_user), doubt_id, payload
    )
    return schemas.ApiResponse[schemas.Doubt](
        message="Doubt updated successfully", data=schemas.Doubt.model_validate(doubt)
    )


@router.delete(
    "/{doubt_id}", response_model=schemas.ApiResponse[schemas.DeletedResource]
)
def delete_doubt(
    doubt_id: int,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_active_user),
) -> schemas.ApiResponse[schemas.DeletedResource]:
    """Delete a doubt with its answers and comments. Owner or admin only."""
    DoubtService.delete_doubt(db, actor_from_user(current_user), doubt_id)
    return schemas.ApiResponse[schemas.DeletedResource](
        message="Doubt deleted successfully",
        data=schemas.DeletedResource(id=doubt_id),
    )
