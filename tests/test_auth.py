"""Registration, login and refresh-token rotation."""

from __future__ import annotations

from conftest import register


def test_register_login_and_me(client) -> None:
    headers = register(client, "user@example.com")

    me = client.get("/api/auth/me", headers=headers)
    assert me.status_code == 200
    assert me.json()["email"] == "user@example.com"
    assert me.json()["role"] == "USER"

    login = client.post(
        "/api/auth/login",
        json={"email": "user@example.com", "password": "secret1"},
    )
    assert login.status_code == 200
    assert login.json()["tokenType"] == "bearer"
    assert login.json()["user"]["email"] == "user@example.com"
    assert "refreshToken" in login.cookies


def test_duplicate_registration_conflicts(client) -> None:
    register(client, "user@example.com")

    response = client.post(
        "/api/auth/register",
        json={"email": "user@example.com", "password": "another1"},
    )

    assert response.status_code == 409


def test_wrong_password_is_rejected(client) -> None:
    register(client, "user@example.com")

    response = client.post(
        "/api/auth/login",
        json={"email": "user@example.com", "password": "wrong-password"},
    )

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid email or password"


def test_refresh_rotates_and_revokes_previous_token(client) -> None:
    register(client, "user@example.com")
    first_token = client.cookies.get("refreshToken")
    assert first_token

    rotated = client.post("/api/auth/refresh")
    assert rotated.status_code == 200, rotated.text
    assert rotated.json()["accessToken"]
    second_token = rotated.cookies.get("refreshToken")
    assert second_token and second_token != first_token

    client.cookies.clear()
    client.cookies.set("refreshToken", first_token)
    replayed = client.post("/api/auth/refresh")
    assert replayed.status_code == 401

    client.cookies.clear()
    client.cookies.set("refreshToken", second_token)
    assert client.post("/api/auth/refresh").status_code == 200


def test_login_invalidates_older_refresh_token(client) -> None:
    register(client, "user@example.com")
    stale = client.cookies.get("refreshToken")

    client.post(
        "/api/auth/login",
        json={"email": "user@example.com", "password": "secret1"},
    )
    client.cookies.clear()
    client.cookies.set("refreshToken", stale)

    assert client.post("/api/auth/refresh").status_code == 401


def test_refresh_without_cookie_is_unauthorized(client) -> None:
    client.cookies.clear()

    response = client.post("/api/auth/refresh")

    assert response.status_code == 401
