"""Tests for Sentry event scrubbing and sampling."""

from typing import Any
from unittest.mock import patch

from core.sentry_config import _before_send, _traces_sampler, init_sentry


class TestBeforeSend:
    def test_scrubs_user_identity(self) -> None:
        event: dict[str, Any] = {
            "user": {"id": "1", "email": "a@b.c", "username": "a", "ip_address": "1.2.3.4"}
        }
        result = _before_send(event, {})  # type: ignore[arg-type]
        assert result is not None
        assert result["user"] == {"id": "1", "ip_address": "{{auto}}"}

    def test_scrubs_request_secrets(self) -> None:
        event: dict[str, Any] = {
            "request": {
                "cookies": {"session": "x"},
                "headers": {"Authorization": "Bearer abc"},
                "data": {"email": "a@b.c", "password": "p", "secret_key": "s"},
            }
        }
        result = _before_send(event, {})  # type: ignore[arg-type]
        assert result is not None
        request = result["request"]
        assert "cookies" not in request
        assert request["headers"]["Authorization"] == "[Filtered]"
        assert request["data"]["password"] == "[Filtered]"
        assert request["data"]["secret_key"] == "[Filtered]"
        assert request["data"]["email"] == "a@b.c"


class TestTracesSampler:
    def _rate(self, path: str) -> float:
        return _traces_sampler({"asgi_scope": {"path": path}})

    def test_health_not_sampled(self) -> None:
        assert self._rate("/api/health") == 0.0

    def test_admin_sampled_more(self) -> None:
        assert self._rate("/api/admin/stats") == 0.5

    def test_default_rate(self) -> None:
        assert self._rate("/api/doubts") == 0.2

    def test_parent_decision_respected(self) -> None:
        assert _traces_sampler({"parent_sampled": True}) == 1.0


def test_init_without_dsn_is_noop(monkeypatch) -> None:
    monkeypatch.delenv("SENTRY_DSN", raising=False)
    with patch("core.sentry_config.sentry_sdk.init") as mock_init:
        init_sentry()
    mock_init.assert_not_called()
