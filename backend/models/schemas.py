from datetime import datetime
from enum import Enum
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from repositories.db_models import AdminActionType, DoubtStatus, UserRole

T = TypeVar("T")


class AnswerSortOrder(str, Enum):
    """Answer list ordering options."""

    UPVOTES = "upvotes"
    NEWEST = "newest"


def _normalize_tags(tags: Optional[List[str]]) -> Optional[List[str]]:
    """Lower-case, strip and de-duplicate tags, keeping first-seen order."""
    if tags is None:
        return None
    seen: list[str] = []
    for tag in tags:
        cleaned = tag.strip().lower()
        if cleaned and cleaned not in seen:
            seen.append(cleaned)
    return seen


# ============================================================================
# Response envelope
# ============================================================================


class Pagination(BaseModel):
    total: int
    page: int
    limit: int
    pages: int


class ApiResponse(BaseModel, Generic[T]):
    """Success envelope shared by every endpoint."""

    success: bool = True
    message: str = ""
    data: Optional[T] = None


class PaginatedResponse(BaseModel, Generic[T]):
    success: bool = True
    message: str = ""
    data: List[T]
    pagination: Pagination


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    code: str
    correlation_id: Optional[str] = None


# User Schemas
class UserPublic(BaseModel):
    """Author summary embedded in content responses."""

    id: int
    name: str
    role: UserRole

    model_config = ConfigDict(from_attributes=True)


class User(BaseModel):
    id: int
    name: str
    email: EmailStr
    role: UserRole
    bio: str = ""
    is_mentor_approved: bool
    is_banned: bool = False
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RegistrationBase(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6)
    bio: str = Field(default="", max_length=500)


class UserRegister(RegistrationBase):
    role: UserRole = UserRole.JUNIOR


class SecretKeyRegister(RegistrationBase):
    """Mentor and admin registration both require a shared secret key."""

    secret_key: str = Field(..., min_length=1)


class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class AuthResponse(BaseModel):
    success: bool = True
    message: str = ""
    data: User
    token: str


class UserProfileUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    bio: Optional[str] = Field(default=None, max_length=500)


class PasswordChange(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=6)


# Mentor Profile Schemas
class MentorProfileCreate(BaseModel):
    badge: Optional[str] = Field(default=None, max_length=100)
    expertise_tags: List[str] = Field(default_factory=list)

    @field_validator("expertise_tags")
    @classmethod
    def normalize_tags(cls, v: List[str]) -> List[str]:
        return _normalize_tags(v) or []


class MentorProfileUpdate(BaseModel):
    badge: Optional[str] = Field(default=None, min_length=1, max_length=100)
    expertise_tags: Optional[List[str]] = None

    @field_validator("expertise_tags")
    @classmethod
    def normalize_tags(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return _normalize_tags(v)


class MentorProfile(BaseModel):
    id: int
    user_id: int
    badge: str
    expertise_tags: List[str] = []
    total_upvotes: int
    approved_by_admin: bool
    created_at: datetime
    user: UserPublic

    model_config = ConfigDict(from_attributes=True)


class MentorProfileDetail(MentorProfile):
    answers_count: int = 0


# Doubt Schemas
class DoubtCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=5000)
    tags: List[str] = Field(default_factory=list)

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, v: List[str]) -> List[str]:
        return _normalize_tags(v) or []


class DoubtUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, min_length=1, max_length=5000)
    tags: Optional[List[str]] = None
    status: Optional[DoubtStatus] = None

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return _normalize_tags(v)


class Doubt(BaseModel):
    id: int
    title: str
    description: str
    tags: List[str] = []
    status: DoubtStatus
    junior_id: int
    author: UserPublic
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


# Answer Schemas
class AnswerCreate(BaseModel):
    content: str = Field(..., min_length=20, max_length=10000)


class AnswerUpdate(BaseModel):
    content: str = Field(..., min_length=20, max_length=10000)


class Answer(BaseModel):
    id: int
    content: str
    upvote_count: int
    doubt_id: int
    mentor_id: int
    mentor: UserPublic
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DoubtWithAnswers(Doubt):
    answers: List[Answer] = []


class TagCount(BaseModel):
    tag: str
    count: int


class DoubtStats(BaseModel):
    total: int
    open: int
    answered: int
    resolved: int
    closed: int
    top_tags: List[TagCount]


# Comment Schemas
class CommentCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=2000)
    parent_comment_id: Optional[int] = None


class CommentUpdate(BaseModel):
    content: str = Field(..., min_length=1, max_length=2000)


class Comment(BaseModel):
    id: int
    content: str
    doubt_id: int
    user_id: int
    parent_comment_id: Optional[int] = None
    author: UserPublic
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


# Junior Space Schemas
class JuniorPostCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=3000)


class JuniorPostUpdate(BaseModel):
    content: str = Field(..., min_length=1, max_length=3000)


class JuniorPost(BaseModel):
    id: int
    content: str
    junior_id: int
    author: UserPublic
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DailyPostCount(BaseModel):
    day: str
    count: int


class JuniorSpaceStats(BaseModel):
    total_posts: int
    total_posters: int
    posts_per_day: List[DailyPostCount]


# Upvote Schemas
class Upvote(BaseModel):
    id: int
    user_id: int
    answer_id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UpvoteResult(BaseModel):
    answer_id: int
    upvote_count: int
    upvote_id: Optional[int] = None


class UpvoteCheck(BaseModel):
    is_upvoted: bool


class AnswerUpvoteCount(BaseModel):
    answer_id: int
    count: int


class UpvoteStats(BaseModel):
    total_upvotes: int
    top_answers: List[AnswerUpvoteCount]


class ReconcileResult(BaseModel):
    answers_fixed: int
    profiles_fixed: int


# Admin Schemas
class AdminAction(BaseModel):
    id: int
    admin_id: int
    action_type: AdminActionType
    target_id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ModerationResult(BaseModel):
    target_id: int
    action_id: int


class ActionTypeCount(BaseModel):
    action_type: AdminActionType
    count: int


class AdminStats(BaseModel):
    total_actions: int
    action_breakdown: List[ActionTypeCount]


class DeletedResource(BaseModel):
    id: int
