"""
Repository pattern implementation for data access layer.
"""

from .admin_action_repository import AdminActionRepository
from .answer_repository import AnswerRepository
from .base import BaseRepository
from .comment_repository import CommentRepository
from .doubt_repository import DoubtRepository
from .junior_post_repository import JuniorPostRepository
from .mentor_profile_repository import MentorProfileRepository
from .upvote_repository import UpvoteRepository
from .user_repository import UserRepository

__all__ = [
    "AdminActionRepository",
    "AnswerRepository",
    "BaseRepository",
    "CommentRepository",
    "DoubtRepository",
    "JuniorPostRepository",
    "MentorProfileRepository",
    "UpvoteRepository",
    "UserRepository",
]
