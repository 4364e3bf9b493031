"""User registration, login and account endpoints."""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from helpers.pagination import Page, PageLimit, page_offset, paginated_response
from helpers.rate_limiter import LOGIN_RATE_LIMIT, REGISTER_RATE_LIMIT, limiter
from repositories.database import get_db
from services.authorization_service import actor_from_user
from services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])


def _auth_response(
    user: db_models.User, token: str, message: str
) -> schemas.AuthResponse:
    return schemas.AuthResponse(
        message=message, data=schemas.User.model_validate(user), token=token
    )


@router.post(
    "/register",
    response_model=schemas.AuthResponse,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit(REGISTER_RATE_LIMIT)
def register(
    request: Request, payload: schemas.UserRegister, db: Session = Depends(get_db)
) -> schemas.AuthResponse:
    """
    Register as a junior or mentor.

    Mentors registered here must be approved by an admin before answering.
    """
    user, token = UserService.register(db, payload)
    return _auth_response(user, token, "User registered successfully")


@router.post(
    "/register/mentor",
    response_model=schemas.AuthResponse,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit(REGISTER_RATE_LIMIT)
def register_mentor(
    request: Request,
    payload: schemas.SecretKeyRegister,
    db: Session = Depends(get_db),
) -> schemas.AuthResponse:
    """Register a mentor account with the mentor secret key."""
    user, token = UserService.register_mentor(db, payload)
    return _auth_response(
        user, token, "Mentor account created successfully. Awaiting admin approval."
    )


@router.post("/login", response_model=schemas.AuthResponse)
@limiter.limit(LOGIN_RATE_LIMIT)
def login(
    request: Request, payload: schemas.UserLogin, db: Session = Depends(get_db)
) -> schemas.AuthResponse:
    """Log in with email and password. Rate limited to 5 per minute."""
    user, token = UserService.login(db, str(payload.email), payload.password)
    return _auth_response(user, token, "Login successful")


@router.get("/me", response_model=schemas.ApiResponse[schemas.User])
def get_me(
    current_user: db_models.User = Depends(auth.get_current_active_user),
) -> schemas.ApiResponse[schemas.User]:
    return schemas.ApiResponse[schemas.User](
        data=schemas.User.model_validate(current_user)
    )


@router.get(
    "/mentors/approved", response_model=schemas.PaginatedResponse[schemas.User]
)
def list_approved_mentors(
    page: Page = 1, limit: PageLimit = 10, db: Session = Depends(get_db)
) -> schemas.PaginatedResponse[schemas.User]:
    users, total = UserService.list_approved_mentors(
        db, skip=page_offset(page, limit), limit=limit
    )
    return paginated_response(users, schemas.User, total, page, limit)


@router.get("/role/{role}", response_model=schemas.PaginatedResponse[schemas.User])
def list_users_by_role(
    role: str,
    page: Page = 1,
    limit: PageLimit = 10,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_active_user),
) -> schemas.PaginatedResponse[schemas.User]:
    users, total = UserService.list_users_by_role(
        db, role, skip=page_offset(page, limit), limit=limit
    )
    return paginated_response(users, schemas.User, total, page, limit)


@router.get("/{user_id}", response_model=schemas.ApiResponse[schemas.User])
def get_user_profile(
    user_id: int, db: Session = Depends(get_db)
) -> schemas.ApiResponse[schemas.User]:
    user = UserService.get_user(db, user_id)
    return schemas.ApiResponse[schemas.User](data=schemas.User.model_validate(user))


@router.patch("/{user_id}", response_model=schemas.ApiResponse[schemas.User])
def update_user_profile(
    user_id: int,
    payload: schemas.UserProfileUpdate,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_active_user),
) -> schemas.ApiResponse[schemas.User]:
    """Update name or bio. Owner or admin only."""
    user = UserService.update_profile(
        db, actor_from_user(current_user), user_id, payload
    )
    return schemas.ApiResponse[schemas.User](
        message="Profile updated successfully",
        data=schemas.User.model_validate(user),
    )


@router.post("/{user_id}/change-password", response_model=schemas.ApiResponse[None])
def change_password(
    user_id: int,
    payload: schemas.PasswordChange,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_active_user),
) -> schemas.ApiResponse[None]:
    UserService.change_password(
        db,
        actor_from_user(current_user),
        user_id,
        payload.current_password,
        payload.new_password,
    )
    return schemas.ApiResponse[None](message="Password changed successfully")


@router.delete(
    "/{user_id}", response_model=schemas.ApiResponse[schemas.DeletedResource]
)
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_active_user),
) -> schemas.ApiResponse[schemas.DeletedResource]:
    """Permanently delete a user and their content. Admin only."""
    UserService.delete_user(db, actor_from_user(current_user), user_id)
    return schemas.ApiResponse[schemas.DeletedResource](
        message="User deleted successfully",
        data=schemas.DeletedResource(id=user_id),
    )
