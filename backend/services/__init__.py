"""
Services layer for business logic.

This package contains service modules that encapsulate business logic
separate from the API routes.
"""

from .answer_service import AnswerService
from .audit_service import AuditService
from .comment_service import CommentService
from .doubt_service import DoubtService
from .junior_post_service import JuniorPostService
from .mentor_profile_service import MentorProfileService
from .moderation_service import ModerationService
from .upvote_service import UpvoteService
from .user_service import UserService

__all__ = [
    "AnswerService",
    "AuditService",
    "CommentService",
    "DoubtService",
    "JuniorPostService",
    "MentorProfileService",
    "ModerationService",
    "UpvoteService",
    "UserService",
]
