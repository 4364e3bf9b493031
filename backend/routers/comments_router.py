"""Comment endpoints. Create and delete are broadcast on the doubt's channel."""

from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.orm import Session

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from helpers.pagination import Page, PageLimit, page_offset, paginated_response
from repositories.database import get_db
from services.authorization_service import actor_from_user
from services.comment_service import CommentService
from services.realtime_service import RealtimeEvent, broadcaster, doubt_channel

router = APIRouter(prefix="/comments", tags=["comments"])


@router.post(
    "/doubt/{doubt_id}",
    response_model=schemas.ApiResponse[schemas.Comment],
    status_code=status.HTTP_201_CREATED,
)
def create_comment(
    doubt_id: int,
    payload: schemas.CommentCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_active_user),
) -> schemas.ApiResponse[schemas.Comment]:
    """
    Comment on a doubt or reply to a comment.

    Subscribers of ``doubt-{doubt_id}`` receive a ``new-comment`` event after
    the response is sent.
    """
    comment = CommentService.create_comment(
        db, actor_from_user(current_user), doubt_id, payload
    )
    data = schemas.Comment.model_validate(comment)
    background_tasks.add_task(
        broadcaster.publish,
        doubt_channel(doubt_id),
        RealtimeEvent.NEW_COMMENT,
        data.model_dump(mode="json"),
    )
    return schemas.ApiResponse[schemas.Comment](
        message="Comment posted successfully", data=data
    )


@router.get(
    "/doubt/{doubt_id}", response_model=schemas.PaginatedResponse[schemas.Comment]
)
def get_comments_by_doubt(
    doubt_id: int,
    page: Page = 1,
    limit: PageLimit = 20,
    db: Session = Depends(get_db),
) -> schemas.PaginatedResponse[schemas.Comment]:
    """Top-level comments on a doubt, newest first. Replies are fetched per comment."""
    comments, total = CommentService.list_by_doubt(
        db, doubt_id, skip=page_offset(page, limit), limit=limit
    )
    return paginated_response(comments, schemas.Comment, total, page, limit)


@router.get(
    "/user/{user_id}", response_model=schemas.PaginatedResponse[schemas.Comment]
)
def get_comments_by_user(
    user_id: int,
    page: Page = 1,
    limit: PageLimit = 20,
    db: Session = Depends(get_db),
) -> schemas.PaginatedResponse[schemas.Comment]:
    comments, total = CommentService.list_by_user(
        db, user_id, skip=page_offset(page, limit), limit=limit
    )
    return paginated_response(comments, schemas.Comment, total, page, limit)


@router.get("/{comment_id}", response_model=schemas.ApiResponse[schemas.Comment])
def get_comment(
    comment_id: int, db: Session = Depends(get_db)
) -> schemas.ApiResponse[schemas.Comment]:
    comment = CommentService.get_comment(db, comment_id)
    return schemas.ApiResponse[schemas.Comment](
        data=schemas.Comment.model_validate(comment)
    )


@router.get(
    "/{comment_id}/replies",
    response_model=schemas.ApiResponse[list[schemas.Comment]],
)
def get_replies(
    comment_id: int, db: Session = Depends(get_db)
) -> schemas.ApiResponse[list[schemas.Comment]]:
    replies = CommentService.get_replies(db, comment_id)
    return schemas.ApiResponse[list[schemas.Comment]](
        data=[schemas.Comment.model_validate(r) for r in replies]
    )


@router.patch("/{comment_id}", response_model=schemas.ApiResponse[schemas.Comment])
def update_comment(
    comment_id: int,
    payload: schemas.CommentUpdate,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_active_user),
) -> schemas.ApiResponse[schemas.Comment]:
    comment = CommentService.update_comment(
        db, actor_from_user(current_user), comment_id, payload
    )
    return schemas.ApiResponse[schemas.Comment](
        message="Comment updated successfully",
        data=schemas.Comment.model_validate(comment),
    )


@router.delete(
    "/{comment_id}", response_model=schemas.ApiResponse[schemas.DeletedResource]
)
def delete_comment(
    comment_id: int,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_active_user),
) -> schemas.ApiResponse[schemas.DeletedResource]:
    """Delete a comment and its replies. Owner or admin only."""
    doubt_id = CommentService.delete_comment(
        db, actor_from_user(current_user), comment_id
    )
    background_tasks.add_task(
        broadcaster.publish,
        doubt_channel(doubt_id),
        RealtimeEvent.COMMENT_DELETED,
        {"comment_id": comment_id},
    )
    return schemas.ApiResponse[schemas.DeletedResource](
        message="Comment deleted successfully",
        data=schemas.DeletedResource(id=comment_id),
    )
