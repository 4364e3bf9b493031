"""Tests for doubt, answer and mentor profile repositories."""

import repositories.db_models as db_models
from repositories.answer_repository import AnswerRepository
from repositories.doubt_repository import DoubtRepository
from repositories.mentor_profile_repository import MentorProfileRepository
from repositories.user_repository import UserRepository


class TestDoubtRepository:
    def test_tag_filter_matches_whole_tags(self, db_session, junior_user):
        repo = DoubtRepository(db_session)
        for title, tags in [("A", ["python"]), ("B", ["py"]), ("C", ["python", "sql"])]:
            repo.create(
                db_models.Doubt(
                    title=title, description="d", tags=tags, junior_id=junior_user.id
                )
            )

        titles = {d.title for d in repo.list_doubts(tag="python")}

        assert titles == {"A", "C"}
        assert repo.count_doubts(tag="PY") == 1

    def test_tag_filter_treats_wildcards_literally(self, db_session, junior_user):
        repo = DoubtRepository(db_session)
        for title, tags in [("A", ["node_js"]), ("B", ["nodexjs"]), ("C", ["100%"])]:
            repo.create(
                db_models.Doubt(
                    title=title, description="d", tags=tags, junior_id=junior_user.id
                )
            )

        assert [d.title for d in repo.list_doubts(tag="node_js")] == ["A"]
        assert repo.count_doubts(tag="100%") == 1
        assert repo.count_doubts(tag="%") == 0

    def test_tag_filter_matches_non_ascii_tags(self, db_session, junior_user):
        repo = DoubtRepository(db_session)
        repo.create(
            db_models.Doubt(
                title="Accents",
                description="d",
                tags=["café"],
                junior_id=junior_user.id,
            )
        )

        assert [d.title for d in repo.list_doubts(tag="Café")] == ["Accents"]
        assert repo.count_doubts(tag="cafe") == 0

    def test_count_by_status_includes_zeroes(self, db_session, test_doubt):
        counts = DoubtRepository(db_session).count_by_status()

        assert counts[db_models.DoubtStatus.OPEN] == 1
        assert counts[db_models.DoubtStatus.CLOSED] == 0
        assert set(counts) == set(db_models.DoubtStatus)

    def test_mark_answered_only_moves_open(self, db_session, test_doubt):
        repo = DoubtRepository(db_session)

        repo.mark_answered(test_doubt.id)
        repo.commit()
        db_session.refresh(test_doubt)
        assert test_doubt.status == db_models.DoubtStatus.ANSWERED

        test_doubt.status = db_models.DoubtStatus.CLOSED
        db_session.commit()
        repo.mark_answered(test_doubt.id)
        repo.commit()
        db_session.refresh(test_doubt)
        assert test_doubt.status == db_models.DoubtStatus.CLOSED

    def test_top_tags(self, db_session, junior_user, test_doubt):
        DoubtRepository(db_session).create(
            db_models.Doubt(
                title="SQL joins",
                description="d",
                tags=["sql", "python"],
                junior_id=junior_user.id,
            )
        )

        assert DoubtRepository(db_session).top_tags(limit=1) == [("python", 2)]


class TestCounterAdjustments:
    def test_answer_count_clamped_at_zero(self, db_session, test_answer):
        repo = AnswerRepository(db_session)

        repo.adjust_upvote_count(test_answer.id, 2)
        repo.adjust_upvote_count(test_answer.id, -5)
        repo.commit()

        db_session.refresh(test_answer)
        assert test_answer.upvote_count == 0

    def test_profile_total_follows_deltas(self, db_session, mentor_user, mentor_profile):
        repo = MentorProfileRepository(db_session)

        repo.adjust_total_upvotes(mentor_user.id, 3)
        repo.adjust_total_upvotes(mentor_user.id, -1)
        repo.commit()

        db_session.refresh(mentor_profile)
        assert mentor_profile.total_upvotes == 2

    def test_profile_adjust_without_profile_is_noop(self, db_session, junior_user):
        MentorProfileRepository(db_session).adjust_total_upvotes(junior_user.id, 1)
        db_session.commit()
        assert db_session.query(db_models.MentorProfile).count() == 0


class TestMentorListings:
    def test_pending_mentors_oldest_first(self, db_session, user_factory, mentor_user):
        first = user_factory("First", db_models.UserRole.MENTOR, approved=False)
        second = user_factory("Second", db_models.UserRole.MENTOR, approved=False)
        repo = UserRepository(db_session)

        pending = repo.list_pending_mentors()

        assert [u.id for u in pending] == [first.id, second.id]
        assert repo.count_pending_mentors() == 2
        assert repo.count_approved_mentors() == 1

    def test_profiles_by_upvotes(self, db_session, user_factory, mentor_profile):
        other = user_factory("Other Mentor", db_models.UserRole.MENTOR)
        strong = MentorProfileRepository(db_session).create(
            db_models.MentorProfile(user_id=other.id, total_upvotes=10)
        )

        top = MentorProfileRepository(db_session).get_top(limit=2)

        assert [p.id for p in top] == [strong.id, mentor_profile.id]

    def test_profiles_by_tag_match_literally(self, db_session, user_factory, mentor_user):
        repo = MentorProfileRepository(db_session)
        repo.create(
            db_models.MentorProfile(user_id=mentor_user.id, expertise_tags=["node_js"])
        )
        other = user_factory("Other Mentor", db_models.UserRole.MENTOR)
        repo.create(
            db_models.MentorProfile(user_id=other.id, expertise_tags=["nodexjs", "café"])
        )

        assert [p.user_id for p in repo.list_by_tag("node_js")] == [mentor_user.id]
        assert [p.user_id for p in repo.list_by_tag("café")] == [other.id]
        assert repo.count_by_tag("node%") == 0
