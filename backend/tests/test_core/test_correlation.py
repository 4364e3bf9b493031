"""Tests for correlation ID context and its use in domain exceptions."""

import pytest

from core.correlation import (
    ensure_correlation_id,
    generate_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from models.exceptions import (
    AlreadyUpvotedException,
    DomainException,
    EmailAlreadyExistsException,
    InvalidCredentialsException,
    MentorNotApprovedException,
    NotFoundException,
    UserBannedException,
)


class TestCorrelationContext:
    def setup_method(self) -> None:
        set_correlation_id("")

    def test_generated_ids_are_short_hex(self) -> None:
        correlation_id = generate_correlation_id()
        assert len(correlation_id) == 8
        int(correlation_id, 16)

    def test_generated_ids_are_unique(self) -> None:
        assert len({generate_correlation_id() for _ in range(50)}) == 50

    def test_set_and_get(self) -> None:
        set_correlation_id("req12345")
        assert get_correlation_id() == "req12345"

    def test_ensure_binds_when_missing(self) -> None:
        first = ensure_correlation_id()
        assert first
        assert ensure_correlation_id() == first
        assert get_correlation_id() == first

    def test_ensure_keeps_existing(self) -> None:
        set_correlation_id("existing")
        assert ensure_correlation_id() == "existing"


class TestDomainExceptionCorrelation:
    def setup_method(self) -> None:
        set_correlation_id("")

    def test_uses_context_id(self) -> None:
        set_correlation_id("context1")
        assert DomainException("boom").correlation_id == "context1"

    def test_explicit_id_wins(self) -> None:
        set_correlation_id("context1")
        exc = DomainException("boom", correlation_id="explicit")
        assert exc.correlation_id == "explicit"

    def test_generates_without_context(self) -> None:
        assert len(DomainException("boom").correlation_id) == 8


@pytest.mark.parametrize(
    "exc_class,code",
    [
        (InvalidCredentialsException, "INVALID_CREDENTIALS"),
        (EmailAlreadyExistsException, "EMAIL_EXISTS"),
        (AlreadyUpvotedException, "ALREADY_UPVOTED"),
        (MentorNotApprovedException, "NOT_APPROVED"),
        (UserBannedException, "USER_BANNED"),
    ],
)
def test_default_messages_and_codes(exc_class, code) -> None:
    exc = exc_class()
    assert exc.code == code
    assert exc.message


def test_code_override() -> None:
    exc = NotFoundException("gone", code="CUSTOM")
    assert exc.code == "CUSTOM"
    assert str(exc) == "gone"
