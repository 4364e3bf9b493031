"""
Pytest configuration and fixtures for backend tests.
"""

import os
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Add backend directory to path for imports
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

# Set test environment variables before importing config
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only"
os.environ["MENTOR_SECRET_KEY"] = "mentor-secret"
os.environ["ADMIN_SECRET_KEY"] = "admin-secret"
os.environ["ENVIRONMENT"] = "test"
os.environ["CORS_ORIGINS"] = '["http://localhost:3000"]'

from authentication.auth import create_access_token, get_password_hash  # noqa: E402
from repositories.database import Base, enable_sqlite_foreign_keys, get_db  # noqa: E402
import repositories.db_models as db_models  # noqa: E402

# Test database engine (in-memory SQLite)
TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
enable_sqlite_foreign_keys(engine)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TEST_PASSWORD = "password123"


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh in-memory database session for each test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with overridden database dependency."""
    from main import app
    from helpers.rate_limiter import limiter

    # Reset rate limiter storage before each test to prevent rate limit errors
    limiter.reset()

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def make_user(
    db_session,
    name: str,
    role: db_models.UserRole,
    approved: bool = True,
) -> db_models.User:
    """Persist a user with the shared test password."""
    user = db_models.User(
        name=name,
        email=f"{name.lower().replace(' ', '.')}@codeshack.dev",
        hashed_password=get_password_hash(TEST_PASSWORD),
        role=role,
        is_mentor_approved=approved,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def headers_for(user: db_models.User) -> dict:
    token = create_access_token(data={"sub": str(user.id)})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def junior_user(db_session) -> db_models.User:
    return make_user(db_session, "Junior", db_models.UserRole.JUNIOR)


@pytest.fixture
def other_junior(db_session) -> db_models.User:
    return make_user(db_session, "Other Junior", db_models.UserRole.JUNIOR)


@pytest.fixture
def mentor_user(db_session) -> db_models.User:
    """An approved mentor."""
    return make_user(db_session, "Mentor", db_models.UserRole.MENTOR)


@pytest.fixture
def pending_mentor(db_session) -> db_models.User:
    """A mentor still awaiting admin approval."""
    return make_user(
        db_session, "Pending Mentor", db_models.UserRole.MENTOR, approved=False
    )


@pytest.fixture
def admin_user(db_session) -> db_models.User:
    return make_user(db_session, "Admin", db_models.UserRole.ADMIN)


@pytest.fixture
def mentor_profile(db_session, mentor_user) -> db_models.MentorProfile:
    profile = db_models.MentorProfile(
        user_id=mentor_user.id,
        badge="Python Pro",
        expertise_tags=["python", "fastapi"],
        total_upvotes=0,
    )
    db_session.add(profile)
    db_session.commit()
    db_session.refresh(profile)
    return profile


@pytest.fixture
def test_doubt(db_session, junior_user) -> db_models.Doubt:
    doubt = db_models.Doubt(
        title="How do list comprehensions work?",
        description="I keep getting confused by nested comprehensions.",
        tags=["python"],
        junior_id=junior_user.id,
    )
    db_session.add(doubt)
    db_session.commit()
    db_session.refresh(doubt)
    return doubt


@pytest.fixture
def test_answer(db_session, test_doubt, mentor_user) -> db_models.Answer:
    answer = db_models.Answer(
        content="Read them left to right, exactly like nested for loops.",
        doubt_id=test_doubt.id,
        mentor_id=mentor_user.id,
        upvote_count=0,
    )
    db_session.add(answer)
    db_session.commit()
    db_session.refresh(answer)
    return answer


@pytest.fixture
def test_comment(db_session, test_doubt, other_junior) -> db_models.Comment:
    comment = db_models.Comment(
        content="Same question here!",
        doubt_id=test_doubt.id,
        user_id=other_junior.id,
    )
    db_session.add(comment)
    db_session.commit()
    db_session.refresh(comment)
    return comment


@pytest.fixture
def test_post(db_session, junior_user) -> db_models.JuniorSpacePost:
    post = db_models.JuniorSpacePost(
        content="Finally understood recursion today.", junior_id=junior_user.id
    )
    db_session.add(post)
    db_session.commit()
    db_session.refresh(post)
    return post


@pytest.fixture
def junior_headers(junior_user) -> dict:
    return headers_for(junior_user)


@pytest.fixture
def other_junior_headers(other_junior) -> dict:
    return headers_for(other_junior)


@pytest.fixture
def mentor_headers(mentor_user) -> dict:
    return headers_for(mentor_user)


@pytest.fixture
def pending_mentor_headers(pending_mentor) -> dict:
    return headers_for(pending_mentor)


@pytest.fixture
def admin_headers(admin_user) -> dict:
    return headers_for(admin_user)


@pytest.fixture
def user_factory(db_session):
    """Create extra users inside a test: ``user_factory("Carol", UserRole.JUNIOR)``."""

    def _make(
        name: str,
        role: db_models.UserRole = db_models.UserRole.JUNIOR,
        approved: bool = True,
    ) -> db_models.User:
        return make_user(db_session, name, role, approved)

    return _make


@pytest.fixture
def auth_headers_for():
    return headers_for
