"""
Cascade deletes shared by owner deletes, admin moderation and account removal.

None of these functions commit. Callers run them inside their own unit of
work and commit once, together with any audit entry, so a partially deleted
tree is never persisted.
"""

from collections import Counter
from typing import Dict, List

from sqlalchemy.orm import Session

import repositories.db_models as db_models
from repositories.answer_repository import AnswerRepository
from repositories.comment_repository import CommentRepository
from repositories.doubt_repository import DoubtRepository
from repositories.junior_post_repository import JuniorPostRepository
from repositories.mentor_profile_repository import MentorProfileRepository
from repositories.upvote_repository import UpvoteRepository
from repositories.user_repository import UserRepository


def _drop_upvotes_for_answers(db: Session, authors: Dict[int, int]) -> int:
    """
    Delete ledger rows of the given answers and take them off mentor totals.

    Args:
        authors: Mapping of answer ID to author ID

    Returns:
        Number of ledger rows deleted
    """
    if not authors:
        return 0
    upvote_repo = UpvoteRepository(db)
    profile_repo = MentorProfileRepository(db)

    answer_ids = list(authors)
    per_mentor: Counter[int] = Counter()
    for answer_id, votes in upvote_repo.counts_for_answers(answer_ids).items():
        per_mentor[authors[answer_id]] += votes

    for mentor_id, lost in per_mentor.items():
        profile_repo.adjust_total_upvotes(mentor_id, -lost)

    return upvote_repo.delete_where(db_models.Upvote.answer_id.in_(answer_ids))


def delete_answer_tree(db: Session, answer: db_models.Answer) -> None:
    """Delete an answer and its upvotes."""
    _drop_upvotes_for_answers(db, {answer.id: answer.mentor_id})
    AnswerRepository(db).delete_where(db_models.Answer.id == answer.id)


def delete_comment_tree(db: Session, comment: db_models.Comment) -> int:
    """
    Delete a comment and its direct replies.

    Replies never have replies of their own, so one level is the whole tree.

    Returns:
        Number of replies removed
    """
    comment_repo = CommentRepository(db)
    removed = comment_repo.delete_where(
        db_models.Comment.parent_comment_id == comment.id
    )
    comment_repo.delete_where(db_models.Comment.id == comment.id)
    return removed


def _delete_doubt_by_id(db: Session, doubt_id: int) -> None:
    answer_repo = AnswerRepository(db)
    _drop_upvotes_for_answers(
        db, answer_repo.author_map(db_models.Answer.doubt_id == doubt_id)
    )
    answer_repo.delete_where(db_models.Answer.doubt_id == doubt_id)

    comment_repo = CommentRepository(db)
    comment_repo.delete_where(
        db_models.Comment.doubt_id == doubt_id,
        db_models.Comment.parent_comment_id.is_not(None),
    )
    comment_repo.delete_where(db_models.Comment.doubt_id == doubt_id)

    DoubtRepository(db).delete_where(db_models.Doubt.id == doubt_id)


def delete_doubt_tree(db: Session, doubt: db_models.Doubt) -> None:
    """Delete a doubt with all of its answers, their upvotes and all comments."""
    _delete_doubt_by_id(db, doubt.id)


def delete_user_tree(db: Session, user: db_models.User) -> List[int]:
    """
    Delete a user together with everything they authored.

    Upvotes the user cast are withdrawn first so the affected answers and
    their authors' totals drop by one each.

    Returns:
        IDs of surviving answers whose counters were decremented
    """
    answer_repo = AnswerRepository(db)
    profile_repo = MentorProfileRepository(db)
    upvote_repo = UpvoteRepository(db)

    upvoted_ids = upvote_repo.answer_ids_by_user(user.id)
    upvote_repo.delete_where(db_models.Upvote.user_id == user.id)
    if upvoted_ids:
        voted_authors = answer_repo.author_map(db_models.Answer.id.in_(upvoted_ids))
        for answer_id, mentor_id in voted_authors.items():
            answer_repo.adjust_upvote_count(answer_id, -1)
            profile_repo.adjust_total_upvotes(mentor_id, -1)

    for doubt_id in DoubtRepository(db).ids_by_junior(user.id):
        _delete_doubt_by_id(db, doubt_id)

    _drop_upvotes_for_answers(
        db, answer_repo.author_map(db_models.Answer.mentor_id == user.id)
    )
    answer_repo.delete_where(db_models.Answer.mentor_id == user.id)

    comment_repo = CommentRepository(db)
    own_comment_ids = comment_repo.ids_by_user(user.id)
    if own_comment_ids:
        comment_repo.delete_where(
            db_models.Comment.parent_comment_id.in_(own_comment_ids)
        )
        comment_repo.delete_where(db_models.Comment.id.in_(own_comment_ids))

    JuniorPostRepository(db).delete_where(
        db_models.JuniorSpacePost.junior_id == user.id
    )
    profile_repo.delete_where(db_models.MentorProfile.user_id == user.id)
    UserRepository(db).delete_where(db_models.User.id == user.id)

    if not upvoted_ids:
        return []
    return list(answer_repo.author_map(db_models.Answer.id.in_(upvoted_ids)))
