"""
Upvote ledger service.

``Answer.upvote_count`` and ``MentorProfile.total_upvotes`` are cached
aggregates of the ``upvotes`` table. They are only ever changed with
SQL-side increments inside the same transaction as the ledger row, and
``reconcile_counters`` rebuilds them from the ledger if they drift.
"""

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

import models.schemas as schemas
import repositories.db_models as db_models
from models.exceptions import (
    AlreadyUpvotedException,
    AnswerNotFoundException,
    UpvoteNotFoundException,
)
from repositories.answer_repository import AnswerRepository
from repositories.mentor_profile_repository import MentorProfileRepository
from repositories.upvote_repository import UpvoteRepository


class UpvoteService:
    """Service for upvote-related business logic."""

    @staticmethod
    def upvote(db: Session, user_id: int, answer_id: int) -> schemas.UpvoteResult:
        """
        Record an upvote and bump the cached counters.

        Args:
            db: Database session
            user_id: Voter ID
            answer_id: Answer ID

        Returns:
            UpvoteResult with the new answer count

        Raises:
            AnswerNotFoundException: If the answer does not exist
            AlreadyUpvotedException: If the pair is already in the ledger,
                including when a concurrent request inserted it first
        """
        answer_repo = AnswerRepository(db)
        upvote_repo = UpvoteRepository(db)

        answer = answer_repo.get_by_id(answer_id)
        if not answer:
            raise AnswerNotFoundException("Answer not found")

        if upvote_repo.get_by_user_and_answer(user_id, answer_id):
            raise AlreadyUpvotedException()

        upvote = db_models.Upvote(user_id=user_id, answer_id=answer_id)
        try:
            upvote_repo.add(upvote)
            upvote_repo.flush()
            answer_repo.adjust_upvote_count(answer_id, 1)
            MentorProfileRepository(db).adjust_total_upvotes(answer.mentor_id, 1)
            upvote_repo.commit()
        except IntegrityError:
            # Lost the race on the (user_id, answer_id) unique constraint.
            upvote_repo.rollback()
            raise AlreadyUpvotedException()

        answer_repo.refresh(answer)
        return schemas.UpvoteResult(
            answer_id=answer_id,
            upvote_count=answer.upvote_count,
            upvote_id=upvote.id,
        )

    @staticmethod
    def remove_upvote(
        db: Session, user_id: int, answer_id: int
    ) -> schemas.UpvoteResult:
        """
        Withdraw an upvote. Counters never drop below zero.

        Raises:
            UpvoteNotFoundException: If the user has not upvoted the answer
        """
        answer_repo = AnswerRepository(db)
        upvote_repo = UpvoteRepository(db)

        upvote = upvote_repo.get_by_user_and_answer(user_id, answer_id)
        if not upvote:
            raise UpvoteNotFoundException("Upvote not found")

        answer = answer_repo.get_by_id(answer_id)
        upvote_repo.remove(upvote)
        upvote_repo.flush()
        answer_repo.adjust_upvote_count(answer_id, -1)
        if answer:
            MentorProfileRepository(db).adjust_total_upvotes(answer.mentor_id, -1)
        upvote_repo.commit()

        count = 0
        if answer:
            answer_repo.refresh(answer)
            count = answer.upvote_count
        return schemas.UpvoteResult(answer_id=answer_id, upvote_count=count)

    @staticmethod
    def has_upvoted(db: Session, user_id: int, answer_id: int) -> bool:
        return (
            UpvoteRepository(db).get_by_user_and_answer(user_id, answer_id) is not None
        )

    @staticmethod
    def get_upvotes_by_answer(
        db: Session, answer_id: int, skip: int = 0, limit: int = 10
    ) -> tuple[list[db_models.Upvote], int]:
        """
        Get ledger entries for an answer.

        Raises:
            AnswerNotFoundException: If the answer does not exist
        """
        if not AnswerRepository(db).get_by_id(answer_id):
            raise AnswerNotFoundException("Answer not found")
        repo = UpvoteRepository(db)
        return (
            repo.list_by_answer(answer_id, skip=skip, limit=limit),
            repo.count_by_answer(answer_id),
        )

    @staticmethod
    def get_upvotes_by_user(
        db: Session, user_id: int, skip: int = 0, limit: int = 10
    ) -> tuple[list[db_models.Upvote], int]:
        repo = UpvoteRepository(db)
        return (
            repo.list_by_user(user_id, skip=skip, limit=limit),
            repo.count_by_user(user_id),
        )

    @staticmethod
    def get_upvote_stats(db: Session) -> schemas.UpvoteStats:
        """Total ledger size and the ten most upvoted answers."""
        repo = UpvoteRepository(db)
        return schemas.UpvoteStats(
            total_upvotes=repo.count(),
            top_answers=[
                schemas.AnswerUpvoteCount(answer_id=answer_id, count=count)
                for answer_id, count in repo.top_answers(limit=10)
            ],
        )

    @staticmethod
    def reconcile_counters(
        db: Session, dry_run: bool = False
    ) -> schemas.ReconcileResult:
        """
        Rebuild every cached upvote counter from the ledger.

        Args:
            db: Database session
            dry_run: Count drifted counters and roll back instead of committing

        Returns:
            Number of answers and mentor profiles whose counter was corrected
        """
        upvote_repo = UpvoteRepository(db)
        answer_repo = AnswerRepository(db)
        profile_repo = MentorProfileRepository(db)

        per_answer = upvote_repo.counts_by_answer()
        per_mentor = upvote_repo.counts_by_mentor()

        answers_fixed = 0
        for answer_id, cached in answer_repo.cached_upvote_counts():
            actual = per_answer.get(answer_id, 0)
            if cached != actual:
                answer_repo.set_upvote_count(answer_id, actual)
                answers_fixed += 1

        profiles_fixed = 0
        for profile_id, user_id, cached in profile_repo.cached_totals():
            actual = per_mentor.get(user_id, 0)
            if cached != actual:
                profile_repo.set_total_upvotes(profile_id, actual)
                profiles_fixed += 1

        if dry_run:
            upvote_repo.rollback()
            return schemas.ReconcileResult(
                answers_fixed=answers_fixed, profiles_fixed=profiles_fixed
            )

        upvote_repo.commit()
        if answers_fixed or profiles_fixed:
            logger.warning(
                f"Upvote counters reconciled: {answers_fixed} answers, "
                f"{profiles_fixed} profiles corrected"
            )
        else:
            logger.info("Upvote counters consistent with ledger")
        return schemas.ReconcileResult(
            answers_fixed=answers_fixed, profiles_fixed=profiles_fixed
        )
