from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
import jwt
from sqlalchemy.orm import Session

import repositories.db_models as db_models
from models.config import settings
from models.exceptions import (
    AuthenticationException,
    UnauthorizedRoleException,
    UserBannedException,
)
from repositories.database import get_db

bearer_scheme = HTTPBearer(auto_error=False)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(plain_password.encode(), hashed_password.encode())


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Sign a JWT carrying ``data``.

    The ``sub`` claim holds the user ID as a string. Tokens expire after
    ``ACCESS_TOKEN_EXPIRE_MINUTES`` unless ``expires_delta`` is given.
    """
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(
            minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
        )
    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(
        to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM
    )
    return encoded_jwt


def create_user_token(user: db_models.User) -> str:
    return create_access_token(data={"sub": str(user.id), "role": user.role.value})


def authenticate_user(db: Session, email: str, password: str) -> db_models.User | None:
    user = (
        db.query(db_models.User)
        .filter(db_models.User.email == email.lower())
        .first()
    )
    if not user:
        return None
    if not verify_password(password, str(user.hashed_password)):
        return None
    return user


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> db_models.User:
    """
    Get the current authenticated user from the bearer JWT.

    Raises:
        AuthenticationException: If the token is missing, invalid or expired,
            or the user no longer exists.
    """
    if credentials is None:
        raise AuthenticationException("Not authenticated")

    try:
        payload = jwt.decode(
            credentials.credentials,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
        )
        subject = payload.get("sub")
        if subject is None:
            raise AuthenticationException("Could not validate credentials")
        user_id = int(subject)
    except jwt.exceptions.ExpiredSignatureError:
        raise AuthenticationException("Session expired. Please log in again.")
    except (jwt.exceptions.InvalidTokenError, ValueError):
        raise AuthenticationException("Could not validate credentials")

    user = db.query(db_models.User).filter(db_models.User.id == user_id).first()
    if user is None:
        raise AuthenticationException("Could not validate credentials")
    return user


async def get_current_active_user(
    current_user: db_models.User = Depends(get_current_user),
) -> db_models.User:
    """
    Get the current user and verify they are not banned.

    Raises:
        UserBannedException: If an admin has banned the account.
    """
    if current_user.is_banned:
        raise UserBannedException()
    return current_user


async def get_admin_user(
    current_user: db_models.User = Depends(get_current_active_user),
) -> db_models.User:
    """
    Require the admin role.

    Raises:
        UnauthorizedRoleException: If the user is not an admin.
    """
    if current_user.role != db_models.UserRole.ADMIN:
        raise UnauthorizedRoleException("Admin access required")
    return current_user
