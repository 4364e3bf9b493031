"""
Database models using SQLAlchemy 2.0 style with Mapped type hints.

Ownership is always a plain foreign key to ``users.id``. Dependents
(answers of a doubt, replies of a comment, upvotes of an answer) are removed
explicitly by the service layer inside the same transaction as the parent,
so no ORM-level cascades are declared here.
"""

import enum
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from repositories.database import Base


class UserRole(str, enum.Enum):
    JUNIOR = "junior"
    MENTOR = "mentor"
    ADMIN = "admin"


class DoubtStatus(str, enum.Enum):
    OPEN = "open"
    ANSWERED = "answered"
    RESOLVED = "resolved"
    CLOSED = "closed"


class AdminActionType(str, enum.Enum):
    """Moderation operations recorded in the admin action ledger."""

    APPROVE_MENTOR = "approve_mentor"
    REJECT_MENTOR = "reject_mentor"
    DELETE_DOUBT = "delete_doubt"
    DELETE_ANSWER = "delete_answer"
    DELETE_COMMENT = "delete_comment"
    BAN_USER = "ban_user"
    UNBAN_USER = "unban_user"
    DELETE_JUNIOR_POST = "delete_junior_post"


def _utc_now() -> datetime:
    """Return current UTC datetime (timezone-aware)."""
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"
    __table_args__ = (Index("ix_users_role_approved", "role", "is_mentor_approved"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String, unique=True, index=True, nullable=False)
    hashed_password: Mapped[str] = mapped_column(String, nullable=False)
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole), default=UserRole.JUNIOR, nullable=False
    )
    bio: Mapped[str] = mapped_column(String(500), default="", nullable=False)
    # Single source of truth for mentor approval; MentorProfile reads it.
    is_mentor_approved: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )
    banned_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)

    @property
    def is_banned(self) -> bool:
        return self.banned_at is not None


class MentorProfile(Base):
    __tablename__ = "mentor_profiles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), unique=True, nullable=False
    )
    badge: Mapped[str] = mapped_column(String(100), default="Mentor", nullable=False)
    expertise_tags: Mapped[List[str]] = mapped_column(JSON, default=list)
    total_upvotes: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)

    user: Mapped["User"] = relationship("User")

    @property
    def approved_by_admin(self) -> bool:
        """Approval is owned by the User record; the profile only mirrors it."""
        return bool(self.user.is_mentor_approved)


class Doubt(Base):
    __tablename__ = "doubts"
    __table_args__ = (
        Index("ix_doubts_junior", "junior_id"),
        Index("ix_doubts_status", "status"),
        Index("ix_doubts_created", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    tags: Mapped[List[str]] = mapped_column(JSON, default=list)
    status: Mapped[DoubtStatus] = mapped_column(
        Enum(DoubtStatus), default=DoubtStatus.OPEN, nullable=False
    )
    junior_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=_utc_now, onupdate=_utc_now
    )

    author: Mapped["User"] = relationship("User")


class Answer(Base):
    __tablename__ = "answers"
    __table_args__ = (
        Index("ix_answers_doubt", "doubt_id"),
        Index("ix_answers_mentor", "mentor_id"),
        Index("ix_answers_upvotes", "upvote_count"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    upvote_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    doubt_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("doubts.id"), nullable=False
    )
    mentor_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=_utc_now, onupdate=_utc_now
    )

    mentor: Mapped["User"] = relationship("User")


class Comment(Base):
    __tablename__ = "comments"
    __table_args__ = (
        Index("ix_comments_doubt_parent", "doubt_id", "parent_comment_id"),
        Index("ix_comments_user", "user_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    doubt_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("doubts.id"), nullable=False
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False
    )
    parent_comment_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("comments.id"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=_utc_now, onupdate=_utc_now
    )

    author: Mapped["User"] = relationship("User")


class JuniorSpacePost(Base):
    __tablename__ = "junior_space_posts"
    __table_args__ = (
        Index("ix_junior_posts_junior", "junior_id"),
        Index("ix_junior_posts_created", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    junior_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=_utc_now, onupdate=_utc_now
    )

    author: Mapped["User"] = relationship("User")


class Upvote(Base):
    __tablename__ = "upvotes"
    __table_args__ = (
        # One vote per user per answer; concurrent duplicates fail here.
        UniqueConstraint("user_id", "answer_id", name="uq_upvote_user_answer"),
        Index("ix_upvotes_answer", "answer_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False
    )
    answer_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("answers.id"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)


class AdminAction(Base):
    """Append-only audit record of a completed moderation action."""

    __tablename__ = "admin_actions"
    __table_args__ = (
        Index("ix_admin_actions_admin", "admin_id"),
        Index("ix_admin_actions_created", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    # Plain columns, not foreign keys: ledger rows outlive both the admin
    # account and the target they describe.
    admin_id: Mapped[int] = mapped_column(Integer, nullable=False)
    action_type: Mapped[AdminActionType] = mapped_column(
        Enum(AdminActionType), nullable=False
    )
    target_id: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)
