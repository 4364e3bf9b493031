"""Mentor profile endpoints, keyed by the mentor's user ID."""

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
from services.authorization_service import actor_from_user
from services.mentor_profile_service import MentorProfileService

router = APIRouter(prefix="/mentor-profiles", tags=["mentor-profiles"])


@router.get(
    "/approved", response_model=schemas.PaginatedResponse[schemas.MentorProfile]
)
def get_approved_profiles(
    page: Page = 1, limit: PageLimit = 10, db: Session = Depends(get_db)
) -> schemas.PaginatedResponse[schemas.MentorProfile]:
    """Profiles of approved mentors, most upvoted first."""
    profiles, total = MentorProfileService.list_approved(
        db, skip=page_offset(page, limit), limit=limit
    )
    return paginated_response(profiles, schemas.MentorProfile, total, page, limit)


@router.get(
    "/pending", response_model=schemas.PaginatedResponse[schemas.MentorProfile]
)
def get_pending_profiles(
    page: Page = 1,
    limit: PageLimit = 10,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_active_user),
) -> schemas.PaginatedResponse[schemas.MentorProfile]:
    profiles, total = MentorProfileService.list_pending(
        db, actor_from_user(current_user), skip=page_offset(page, limit), limit=limit
    )
    return paginated_response(profiles, schemas.MentorProfile, total, page, limit)


@router.get(
    "/expertise/{tag}",
    response_model=schemas.PaginatedResponse[schemas.MentorProfile],
)
def get_profiles_by_expertise(
    tag: str,
    page: Page = 1,
    limit: PageLimit = 10,
    db: Session = Depends(get_db),
) -> schemas.PaginatedResponse[schemas.MentorProfile]:
    profiles, total = MentorProfileService.list_by_expertise(
        db, tag.strip().lower(), skip=page_offset(page, limit), limit=limit
    )
    return paginated_response(profiles, schemas.MentorProfile, total, page, limit)


@router.get("/top", response_model=schemas.ApiResponse[list[schemas.MentorProfile]])
def get_top_mentors(
    limit: TopLimit = 10, db: Session = Depends(get_db)
) -> schemas.ApiResponse[list[schemas.MentorProfile]]:
    profiles = MentorProfileService.get_top(db, limit=limit)
    return schemas.ApiResponse[list[schemas.MentorProfile]](
        data=[schemas.MentorProfile.model_validate(p) for p in profiles]
    )


@router.post(
    "/{mentor_id}",
    response_model=schemas.ApiResponse[schemas.MentorProfile],
    status_code=status.HTTP_201_CREATED,
)
def create_profile(
    mentor_id: int,
    payload: schemas.MentorProfileCreate,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_active_user),
) -> schemas.ApiResponse[schemas.MentorProfile]:
    profile = MentorProfileService.create_profile(
        db, actor_from_user(current_user), mentor_id, payload
    )
    return schemas.ApiResponse[schemas.MentorProfile](
        message="Mentor profile created successfully",
        data=schemas.MentorProfile.model_validate(profile),
    )


@router.get(
    "/{mentor_id}", response_model=schemas.ApiResponse[schemas.MentorProfileDetail]
)
def get_profile(
    mentor_id: int, db: Session = Depends(get_db)
) -> schemas.ApiResponse[schemas.MentorProfileDetail]:
    return schemas.ApiResponse[schemas.MentorProfileDetail](
        data=MentorProfileService.get_profile(db, mentor_id)
    )


@router.patch(
    "/{mentor_id}", response_model=schemas.ApiResponse[schemas.MentorProfile]
)
def update_profile(
    mentor_id: int,
    payload: schemas.MentorProfileUpdate,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_active_user),
) -> schemas.ApiResponse[schemas.MentorProfile]:
    profile = MentorProfileService.update_profile(
        db, actor_from_user(current_user), mentor_id, payload
    )
    return schemas.ApiResponse[schemas.MentorProfile](
        message="Mentor profile updated successfully",
        data=schemas.MentorProfile.model_validate(profile),
    )


@router.delete(
    "/{mentor_id}", response_model=schemas.ApiResponse[schemas.DeletedResource]
)
def delete_profile(
    mentor_id: int,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_active_user),
) -> schemas.ApiResponse[schemas.DeletedResource]:
    MentorProfileService.delete_profile(db, actor_from_user(current_user), mentor_id)
    return schemas.ApiResponse[schemas.DeletedResource](
        message="Mentor profile deleted successfully",
        data=schemas.DeletedResource(id=mentor_id),
    )
