"""Junior space endpoints. Create and delete are broadcast on ``junior-space``."""

from fastapi import APIRouter, BackgroundTasks, Depends, status
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
from services.authorization_service import actor_from_user
from services.junior_post_service import JuniorPostService
from services.realtime_service import (
    JUNIOR_SPACE_CHANNEL,
    RealtimeEvent,
    broadcaster,
)

router = APIRouter(prefix="/junior-space-posts", tags=["junior-space"])


@router.get(
    "/stats/overview", response_model=schemas.ApiResponse[schemas.JuniorSpaceStats]
)
def get_junior_space_stats(
    db: Session = Depends(get_db),
) -> schemas.ApiResponse[schemas.JuniorSpaceStats]:
    return schemas.ApiResponse[schemas.JuniorSpaceStats](
        data=JuniorPostService.get_stats(db)
    )


@router.get("/recent", response_model=schemas.ApiResponse[list[schemas.JuniorPost]])
def get_recent_posts(
    limit: TopLimit = 5, db: Session = Depends(get_db)
) -> schemas.ApiResponse[list[schemas.JuniorPost]]:
    posts = JuniorPostService.get_recent(db, limit=limit)
    return schemas.ApiResponse[list[schemas.JuniorPost]](
        data=[schemas.JuniorPost.model_validate(p) for p in posts]
    )


@router.get(
    "/user/{user_id}", response_model=schemas.PaginatedResponse[schemas.JuniorPost]
)
def get_posts_by_user(
    user_id: int,
    page: Page = 1,
    limit: PageLimit = 10,
    db: Session = Depends(get_db),
) -> schemas.PaginatedResponse[schemas.JuniorPost]:
    posts, total = JuniorPostService.list_by_user(
        db, user_id, skip=page_offset(page, limit), limit=limit
    )
    return paginated_response(posts, schemas.JuniorPost, total, page, limit)


@router.post(
    "",
    response_model=schemas.ApiResponse[schemas.JuniorPost],
    status_code=status.HTTP_201_CREATED,
)
def create_post(
    payload: schemas.JuniorPostCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_active_user),
) -> schemas.ApiResponse[schemas.JuniorPost]:
    post = JuniorPostService.create_post(db, actor_from_user(current_user), payload)
    data = schemas.JuniorPost.model_validate(post)
    background_tasks.add_task(
        broadcaster.publish,
        JUNIOR_SPACE_CHANNEL,
        RealtimeEvent.NEW_POST,
        data.model_dump(mode="json"),
    )
    return schemas.ApiResponse[schemas.JuniorPost](
        message="Post created successfully", data=data
    )


@router.get("", response_model=schemas.PaginatedResponse[schemas.JuniorPost])
def get_all_posts(
    page: Page = 1, limit: PageLimit = 10, db: Session = Depends(get_db)
) -> schemas.PaginatedResponse[schemas.JuniorPost]:
    posts, total = JuniorPostService.list_posts(
        db, skip=page_offset(page, limit), limit=limit
    )
    return paginated_response(posts, schemas.JuniorPost, total, page, limit)


@router.get("/{post_id}", response_model=schemas.ApiResponse[schemas.JuniorPost])
def get_post(
    post_id: int, db: Session = Depends(get_db)
) -> schemas.ApiResponse[schemas.JuniorPost]:
    post = JuniorPostService.get_post(db, post_id)
    return schemas.ApiResponse[schemas.JuniorPost](
        data=schemas.JuniorPost.model_validate(post)
    )


@router.patch("/{post_id}", response_model=schemas.ApiResponse[schemas.JuniorPost])
def update_post(
    post_id: int,
    payload: schemas.JuniorPostUpdate,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_active_user),
) -> schemas.ApiResponse[schemas.JuniorPost]:
    post = JuniorPostService.update_post(
        db, actor_from_user(current_user), post_id, payload
    )
    return schemas.ApiResponse[schemas.JuniorPost](
        message="Post updated successfully",
        data=schemas.JuniorPost.model_validate(post),
    )


@router.delete(
    "/{post_id}", response_model=schemas.ApiResponse[schemas.DeletedResource]
)
def delete_post(
    post_id: int,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_active_user),
) -> schemas.ApiResponse[schemas.DeletedResource]:
    JuniorPostService.delete_post(db, actor_from_user(current_user), post_id)
    background_tasks.add_task(
        broadcaster.publish,
        JUNIOR_SPACE_CHANNEL,
        RealtimeEvent.POST_DELETED,
        {"post_id": post_id},
    )
    return schemas.ApiResponse[schemas.DeletedResource](
        message="Post deleted successfully",
        data=schemas.DeletedResource(id=post_id),
    )
