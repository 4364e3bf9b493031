"""Answer endpoints."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from helpers.pagination import (
    Page,
    PageLimit,
    TopLimit,
    page_offset,
    paginated_response,
)
from repositories.database import get_db
from services.answer_service import AnswerService
from services.authorization_service import actor_from_user

router = APIRouter(prefix="/answers", tags=["answers"])


@router.get("/helpful/top", response_model=schemas.ApiResponse[list[schemas.Answer]])
def get_most_helpful_answers(
    limit: TopLimit = 10, db: Session = Depends(get_db)
) -> schemas.ApiResponse[list[schemas.Answer]]:
    answers = AnswerService.get_most_helpful(db, limit=limit)
    return schemas.ApiResponse[list[schemas.Answer]](
        data=[schemas.Answer.model_validate(a) for a in answers]
    )


@router.get(
    "/doubt/{doubt_id}", response_model=schemas.PaginatedResponse[schemas.Answer]
)
def get_answers_by_doubt(
    doubt_id: int,
    page: Page = 1,
    limit: PageLimit = 10,
    sort_by: schemas.AnswerSortOrder = schemas.AnswerSortOrder.UPVOTES,
    db: Session = Depends(get_db),
) -> schemas.PaginatedResponse[schemas.Answer]:
    answers, total = AnswerService.list_by_doubt(
        db, doubt_id, sort_by=sort_by, skip=page_offset(page, limit), limit=limit
    )
    return paginated_response(answers, schemas.Answer, total, page, limit)


@router.get(
    "/mentor/{mentor_id}", response_model=schemas.PaginatedResponse[schemas.Answer]
)
def get_answers_by_mentor(
    mentor_id: int,
    page: Page = 1,
    limit: PageLimit = 10,
    db: Session = Depends(get_db),
) -> schemas.PaginatedResponse[schemas.Answer]:
    answers, total = AnswerService.list_by_mentor(
        db, mentor_id, skip=page_offset(page, limit), limit=limit
    )
    return paginated_response(answers, schemas.Answer, total, page, limit)


@router.post(
    "/doubt/{doubt_id}",
    response_model=schemas.ApiResponse[schemas.Answer],
    status_code=status.HTTP_201_CREATED,
)
def create_answer(
    doubt_id: int,
    payload: schemas.AnswerCreate,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_active_user),
) -> schemas.ApiResponse[schemas.Answer]:
    """
    Answer a doubt. Approved mentors only.

    Domain exceptions are caught by centralized exception handlers.
    """
    answer = AnswerService.create_answer(
        db, actor_from_user(current_user), doubt_id, payload
    )
    return schemas.ApiResponse[schemas.Answer](
        message="Answer posted successfully",
        data=schemas.Answer.model_validate(answer),
    )


@router.get("/{answer_id}", response_model=schemas.ApiResponse[schemas.Answer])
def get_answer(
    answer_id: int, db: Session = Depends(get_db)
) -> schemas.ApiResponse[schemas.Answer]:
    answer = AnswerService.get_answer(db, answer_id)
    return schemas.ApiResponse[schemas.Answer](
        data=schemas.Answer.model_validate(answer)
    )


@router.patch("/{answer_id}", response_model=schemas.ApiResponse[schemas.Answer])
def update_answer(
    answer_id: int,
    payload: schemas.AnswerUpdate,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_active_user),
) -> schemas.ApiResponse[schemas.Answer]:
    answer = AnswerService.update_answer(
        db, actor_from_user(current_user), answer_id, payload
    )
    return schemas.ApiResponse[schemas.Answer](
        message="Answer updated successfully",
        data=schemas.Answer.model_validate(answer),
    )


@router.delete(
    "/{answer_id}", response_model=schemas.ApiResponse[schemas.DeletedResource]
)
def delete_answer(
    answer_id: int,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_active_user),
) -> schemas.ApiResponse[schemas.DeletedResource]:
    AnswerService.delete_answer(db, actor_from_user(current_user), answer_id)
    return schemas.ApiResponse[schemas.DeletedResource](
        message="Answer deleted successfully",
        data=schemas.DeletedResource(id=answer_id),
    )
