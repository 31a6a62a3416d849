# tests/helpers.py

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone


@dataclass
class RegisteredUser:
    id: str
    name: str
    email: str
    token: str
    headers: dict = field(default_factory=dict)


def future_iso(days: int = 1) -> str:
    return (datetime.now(timezone.utc) + timedelta(days=days)).isoformat()


def past_iso(days: int = 1) -> str:
    return (datetime.now(timezone.utc) - timedelta(days=days)).isoformat()


def register_user(client, name: str, email: str, password: str = "secret123") -> RegisteredUser:
    resp = client.post("/auth/register", json={"name": name, "email": email, "password": password})
    assert resp.status_code == 201, resp.text
    # Registration sets the session cookie, and a cookie beats the Authorization
    # header; drop it so each test user is picked by header.
    client.cookies.clear()

    body = resp.json()
    token = body["token"]
    return RegisteredUser(
        id=body["user"]["id"],
        name=name,
        email=email,
        token=token,
        headers={"Authorization": f"Bearer {token}"},
    )


def task_payload(**overrides) -> dict:
    payload = {
        "title": "Write report",
        "description": "Quarterly numbers",
        "dueDate": future_iso(),
        "priority": "HIGH",
    }
    payload.update(overrides)
    return payload
