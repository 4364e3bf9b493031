"""Tests for UpvoteService and the cached upvote counters."""

import pytest

import repositories.db_models as db_models
from models.exceptions import (
    AlreadyUpvotedException,
    AnswerNotFoundException,
    UpvoteNotFoundException,
)
from repositories.upvote_repository import UpvoteRepository
from services.upvote_service import UpvoteService


def _counts(db_session, answer, profile):
    db_session.refresh(answer)
    db_session.refresh(profile)
    return answer.upvote_count, profile.total_upvotes


class TestUpvote:
    def test_upvote_increments_answer_and_mentor(
        self, db_session, junior_user, test_answer, mentor_profile
    ):
        result = UpvoteService.upvote(db_session, junior_user.id, test_answer.id)

        assert result.answer_id == test_answer.id
        assert result.upvote_count == 1
        assert result.upvote_id is not None
        assert _counts(db_session, test_answer, mentor_profile) == (1, 1)

    def test_upvote_missing_answer(self, db_session, junior_user):
        with pytest.raises(AnswerNotFoundException):
            UpvoteService.upvote(db_session, junior_user.id, 99999)

    def test_double_upvote_rejected(
        self, db_session, junior_user, test_answer, mentor_profile
    ):
        UpvoteService.upvote(db_session, junior_user.id, test_answer.id)

        with pytest.raises(AlreadyUpvotedException) as exc_info:
            UpvoteService.upvote(db_session, junior_user.id, test_answer.id)

        assert exc_info.value.code == "ALREADY_UPVOTED"
        assert _counts(db_session, test_answer, mentor_profile) == (1, 1)

    def test_concurrent_duplicate_hits_unique_constraint(
        self, db_session, junior_user, test_answer, mentor_profile, monkeypatch
    ):
        """A duplicate that slips past the lookup is stopped by the constraint."""
        UpvoteService.upvote(db_session, junior_user.id, test_answer.id)
        monkeypatch.setattr(
            UpvoteRepository, "get_by_user_and_answer", lambda self, u, a: None
        )

        with pytest.raises(AlreadyUpvotedException):
            UpvoteService.upvote(db_session, junior_user.id, test_answer.id)

        assert _counts(db_session, test_answer, mentor_profile) == (1, 1)
        assert (
            db_session.query(db_models.Upvote)
            .filter(db_models.Upvote.answer_id == test_answer.id)
            .count()
            == 1
        )


class TestRemoveUpvote:
    def test_remove_restores_count(
        self, db_session, junior_user, test_answer, mentor_profile
    ):
        UpvoteService.upvote(db_session, junior_user.id, test_answer.id)
        result = UpvoteService.remove_upvote(db_session, junior_user.id, test_answer.id)

        assert result.upvote_count == 0
        assert _counts(db_session, test_answer, mentor_profile) == (0, 0)
        assert not UpvoteService.has_upvoted(
            db_session, junior_user.id, test_answer.id
        )

    def test_remove_without_upvote(self, db_session, junior_user, test_answer):
        with pytest.raises(UpvoteNotFoundException):
            UpvoteService.remove_upvote(db_session, junior_user.id, test_answer.id)

    def test_counters_never_go_negative(
        self, db_session, junior_user, test_answer, mentor_profile
    ):
        UpvoteService.upvote(db_session, junior_user.id, test_answer.id)
        # Simulate drift: caches already at zero while the ledger row exists
        test_answer.upvote_count = 0
        mentor_profile.total_upvotes = 0
        db_session.commit()

        result = UpvoteService.remove_upvote(db_session, junior_user.id, test_answer.id)

        assert result.upvote_count == 0
        assert _counts(db_session, test_answer, mentor_profile) == (0, 0)


def test_two_voters_scenario(
    db_session, user_factory, test_answer, mentor_profile
):
    """Carol and Dave upvote; a duplicate changes nothing; Carol withdraws."""
    carol = user_factory("Carol")
    dave = user_factory("Dave")

    assert UpvoteService.upvote(db_session, carol.id, test_answer.id).upvote_count == 1
    assert UpvoteService.upvote(db_session, dave.id, test_answer.id).upvote_count == 2

    with pytest.raises(AlreadyUpvotedException):
        UpvoteService.upvote(db_session, carol.id, test_answer.id)
    assert _counts(db_session, test_answer, mentor_profile) == (2, 2)

    result = UpvoteService.remove_upvote(db_session, carol.id, test_answer.id)
    assert result.upvote_count == 1
    assert _counts(db_session, test_answer, mentor_profile) == (1, 1)


class TestQueries:
    def test_get_upvotes_by_answer(self, db_session, user_factory, test_answer):
        for name in ("Voter One", "Voter Two", "Voter Three"):
            UpvoteService.upvote(db_session, user_factory(name).id, test_answer.id)

        upvotes, total = UpvoteService.get_upvotes_by_answer(
            db_session, test_answer.id, skip=0, limit=2
        )

        assert total == 3
        assert len(upvotes) == 2

    def test_get_upvotes_by_missing_answer(self, db_session):
        with pytest.raises(AnswerNotFoundException):
            UpvoteService.get_upvotes_by_answer(db_session, 99999)

    def test_stats(self, db_session, junior_user, other_junior, test_answer):
        UpvoteService.upvote(db_session, junior_user.id, test_answer.id)
        UpvoteService.upvote(db_session, other_junior.id, test_answer.id)

        stats = UpvoteService.get_upvote_stats(db_session)

        assert stats.total_upvotes == 2
        assert stats.top_answers[0].answer_id == test_answer.id
        assert stats.top_answers[0].count == 2


class TestReconcile:
    def test_repairs_drifted_counters(
        self, db_session, junior_user, test_answer, mentor_profile
    ):
        UpvoteService.upvote(db_session, junior_user.id, test_answer.id)
        test_answer.upvote_count = 7
        mentor_profile.total_upvotes = 0
        db_session.commit()

        result = UpvoteService.reconcile_counters(db_session)

        assert result.answers_fixed == 1
        assert result.profiles_fixed == 1
        assert _counts(db_session, test_answer, mentor_profile) == (1, 1)

    def test_consistent_counters_untouched(
        self, db_session, junior_user, test_answer, mentor_profile
    ):
        UpvoteService.upvote(db_session, junior_user.id, test_answer.id)

        result = UpvoteService.reconcile_counters(db_session)

        assert result.answers_fixed == 0
        assert result.profiles_fixed == 0

    def test_dry_run_reports_without_writing(
        self, db_session, junior_user, test_answer, mentor_profile
    ):
        UpvoteService.upvote(db_session, junior_user.id, test_answer.id)
        test_answer.upvote_count = 5
        db_session.commit()

        result = UpvoteService.reconcile_counters(db_session, dry_run=True)

        assert result.answers_fixed == 1
        db_session.refresh(test_answer)
        assert test_answer.upvote_count == 5
