# tests/test_auth_api.py

from taskhub.services.user_directory import UserDirectory

from .helpers import register_user


def test_register_returns_user_token_and_cookie(client):
    resp = client.post(
        "/auth/register",
        json={"name": "  Dana  ", "email": "Dana@Example.com", "password": "hunter22"},
    )

    assert resp.status_code == 201
    body = resp.json()
    assert body["token"]
    assert body["user"]["name"] == "Dana"
    assert body["user"]["email"] == "dana@example.com"
    assert "createdAt" in body["user"]
    assert "password" not in body["user"] and "hashedPassword" not in body["user"]
    assert resp.cookies.get("token") == body["token"]


def test_duplicate_email_is_rejected_regardless_of_case(client, alice):
    resp = client.post(
        "/auth/register",
        json={"name": "Alice Again", "email": "ALICE@example.com", "password": "secret123"},
    )

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Email already registered"


def test_register_validation_errors(client):
    resp = client.post("/auth/register", json={"name": "A", "email": "not-an-email", "password": "123"})

    assert resp.status_code == 400
    body = resp.json()
    assert body["detail"] == "Validation failed"
    assert {error["field"] for error in body["errors"]} == {"name", "email", "password"}


def test_login(client, alice):
    resp = client.post("/auth/login", json={"email": "alice@example.com", "password": "secret123"})

    assert resp.status_code == 200
    assert resp.json()["user"]["id"] == alice.id
    assert resp.cookies.get("token")


def test_login_failures_share_one_message(client, alice):
    wrong_password = client.post("/auth/login", json={"email": "alice@example.com", "password": "nope123"})
    unknown_email = client.post("/auth/login", json={"email": "ghost@example.com", "password": "secret123"})

    assert wrong_password.status_code == 401
    assert unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json() == {"detail": "Invalid email or password"}


def test_me_requires_a_token(client):
    resp = client.get("/auth/me")

    assert resp.status_code == 401
    assert resp.json()["detail"] == "Authentication required"


def test_me_rejects_garbage_token(client):
    resp = client.get("/auth/me", headers={"Authorization": "Bearer not.a.jwt"})

    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid or expired token"


def test_me_with_bearer_header(client, alice):
    resp = client.get("/auth/me", headers=alice.headers)

    assert resp.status_code == 200
    assert resp.json()["email"] == "alice@example.com"


def test_cookie_wins_over_header(client, alice, bob):
    client.post("/auth/login", json={"email": "bob@example.com", "password": "secret123"})

    resp = client.get("/auth/me", headers=alice.headers)

    assert resp.json()["id"] == bob.id


def test_logout_clears_cookie(client, alice):
    client.post("/auth/login", json={"email": "alice@example.com", "password": "secret123"})
    assert client.get("/auth/me").status_code == 200

    resp = client.post("/auth/logout")

    assert resp.json() == {"message": "Logout successful"}
    assert client.get("/auth/me").status_code == 401


def test_update_profile(client, alice):
    resp = client.put("/auth/profile", json={"name": "Alice Liddell"}, headers=alice.headers)

    assert resp.status_code == 200
    assert resp.json()["name"] == "Alice Liddell"
    assert client.get("/auth/me", headers=alice.headers).json()["name"] == "Alice Liddell"


def test_update_profile_rejects_short_name(client, alice):
    resp = client.put("/auth/profile", json={"name": "A"}, headers=alice.headers)
    assert resp.status_code == 400


def test_token_for_deleted_user_is_rejected(client, db):
    dana = register_user(client, "Dana", "dana@example.com")
    UserDirectory(db).delete(dana.id)

    assert client.get("/auth/me", headers=dana.headers).status_code == 401


def test_duplicate_email_caught_by_unique_constraint(client, alice, monkeypatch):
    # Simulate a concurrent registration that slipped past the existence check
    monkeypatch.setattr(UserDirectory, "email_exists", lambda self, email: False)

    resp = client.post(
        "/auth/register",
        json={"name": "Alice Again", "email": "ALICE@example.com", "password": "secret123"},
    )

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Email already registered"
    login = client.post("/auth/login", json={"email": "alice@example.com", "password": "secret123"})
    assert login.status_code == 200
