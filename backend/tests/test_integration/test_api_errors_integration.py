"""Error envelope and status code conventions."""

import pytest
from fastapi.testclient import TestClient


def _assert_error(response, status_code: int, code: str) -> None:
    assert response.status_code == status_code
    body = response.json()
    assert body["success"] is False
    assert body["code"] == code
    assert body["message"]
    assert body["correlation_id"]


def test_missing_token(client: TestClient) -> None:
    response = client.post(
        "/api/doubts", json={"title": "t", "description": "d"}
    )
    _assert_error(response, 401, "INVALID_TOKEN")
    assert response.headers["WWW-Authenticate"] == "Bearer"


def test_garbage_token(client: TestClient) -> None:
    response = client.get(
        "/api/users/me", headers={"Authorization": "Bearer not-a-jwt"}
    )
    _assert_error(response, 401, "INVALID_TOKEN")


def test_wrong_password(client: TestClient, junior_user) -> None:
    response = client.post(
        "/api/users/login", json={"email": junior_user.email, "password": "nope"}
    )
    _assert_error(response, 401, "INVALID_CREDENTIALS")


def test_admin_endpoint_requires_admin(
    client: TestClient, junior_headers: dict, pending_mentor
) -> None:
    response = client.post(
        f"/api/admin/approve-mentor/{pending_mentor.id}", headers=junior_headers
    )
    _assert_error(response, 403, "UNAUTHORIZED")


def test_non_owner_edit_forbidden(
    client: TestClient, other_junior_headers: dict, test_doubt
) -> None:
    response = client.patch(
        f"/api/doubts/{test_doubt.id}",
        json={"title": "Not mine"},
        headers=other_junior_headers,
    )
    _assert_error(response, 403, "FORBIDDEN")


def test_request_validation(client: TestClient, junior_headers: dict) -> None:
    response = client.post(
        "/api/doubts", json={"title": "", "description": "d"}, headers=junior_headers
    )
    _assert_error(response, 400, "VALIDATION_ERROR")
    assert response.json()["message"].startswith("title")


def test_short_answer_rejected(
    client: TestClient, mentor_headers: dict, test_doubt
) -> None:
    response = client.post(
        f"/api/answers/doubt/{test_doubt.id}",
        json={"content": "too short"},
        headers=mentor_headers,
    )
    _assert_error(response, 400, "VALIDATION_ERROR")


def test_duplicate_email(client: TestClient, junior_user) -> None:
    response = client.post(
        "/api/users/register",
        json={"name": "Copy", "email": junior_user.email, "password": "secret123"},
    )
    _assert_error(response, 409, "EMAIL_EXISTS")


def test_invalid_mentor_secret(client: TestClient) -> None:
    response = client.post(
        "/api/users/register/mentor",
        json={
            "name": "Eve",
            "email": "eve@example.com",
            "password": "secret123",
            "secret_key": "wrong",
        },
    )
    _assert_error(response, 403, "INVALID_SECRET_KEY")


@pytest.mark.parametrize(
    "path,code",
    [
        ("/api/doubts/99999", "DOUBT_NOT_FOUND"),
        ("/api/answers/99999", "ANSWER_NOT_FOUND"),
        ("/api/comments/99999", "COMMENT_NOT_FOUND"),
        ("/api/junior-space-posts/99999", "POST_NOT_FOUND"),
        ("/api/mentor-profiles/99999", "PROFILE_NOT_FOUND"),
        ("/api/users/99999", "USER_NOT_FOUND"),
    ],
)
def test_not_found_codes(
    client: TestClient, junior_headers: dict, path: str, code: str
) -> None:
    _assert_error(client.get(path, headers=junior_headers), 404, code)


def test_correlation_id_echoed(client: TestClient, junior_headers: dict) -> None:
    response = client.get(
        "/api/doubts/99999",
        headers={**junior_headers, "X-Correlation-ID": "abc12345"},
    )

    assert response.headers["X-Correlation-ID"] == "abc12345"
    assert response.json()["correlation_id"] == "abc12345"


def test_list_envelope(client: TestClient, junior_headers: dict, test_doubt) -> None:
    response = client.get(
        "/api/doubts", params={"page": 1, "limit": 5}, headers=junior_headers
    )

    body = response.json()
    assert body["success"] is True
    assert body["pagination"] == {"total": 1, "page": 1, "limit": 5, "pages": 1}
    assert body["data"][0]["author"]["name"] == "Junior"


def test_doubt_list_requires_login(client: TestClient) -> None:
    _assert_error(client.get("/api/doubts"), 401, "INVALID_TOKEN")


def test_doubt_stats_are_public(client: TestClient, test_doubt) -> None:
    response = client.get("/api/doubts/stats/overview")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["total"] == 1
    assert data["open"] == 1
    assert data["top_tags"] == [{"tag": "python", "count": 1}]
