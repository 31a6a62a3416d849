# tests/test_dashboard.py

import asyncio
from datetime import timedelta

from taskhub.database import SessionLocal
from taskhub.models.task import TaskStatus
from taskhub.services.dashboard import DashboardAggregator
from taskhub.services.task_store import TaskStore
from taskhub.utils.dates import utcnow

from .helpers import future_iso, task_payload


def _ids(tasks):
    return sorted(t.id for t in tasks)


def test_aggregator_splits_assigned_created_and_overdue(db, make_user):
    alice = make_user("Alice", "alice@example.com")
    bob = make_user("Bob", "bob@example.com")
    store = TaskStore(db)
    now = utcnow()

    def add(title, days, creator, assignee=None, status=TaskStatus.TODO):
        return store.create(
            title=title,
            description="...",
            due_date=now + timedelta(days=days),
            creator_id=creator.id,
            assigned_to_id=assignee.id if assignee else None,
            status=status,
        )

    mine = add("Mine", 2, alice)
    for_bob = add("For Bob", 3, alice, assignee=bob)
    for_alice = add("For Alice", 1, bob, assignee=alice)
    late = add("Late", -1, bob, assignee=alice)
    add("Late but done", -1, alice, status=TaskStatus.COMPLETED)
    add("Not mine", 4, bob)

    dashboard = asyncio.run(DashboardAggregator(SessionLocal).get_dashboard(alice.id))

    assert _ids(dashboard.assigned_tasks) == sorted([for_alice.id, late.id])
    assert [t.title for t in dashboard.created_tasks] == ["Late but done", "Mine", "For Bob"]
    assert _ids(dashboard.overdue_tasks) == [late.id]
    assert mine.id in _ids(dashboard.created_tasks)


def test_aggregator_uses_its_clock_for_overdue(db, make_user):
    alice = make_user("Alice", "alice@example.com")
    TaskStore(db).create(
        title="Next week",
        description="...",
        due_date=utcnow() + timedelta(days=7),
        creator_id=alice.id,
    )

    two_weeks_out = utcnow() + timedelta(days=14)
    aggregator = DashboardAggregator(SessionLocal, clock=lambda: two_weeks_out)
    dashboard = asyncio.run(aggregator.get_dashboard(alice.id))

    assert [t.title for t in dashboard.overdue_tasks] == ["Next week"]


def test_dashboard_for_new_user_is_empty(client, alice):
    resp = client.get("/tasks/dashboard", headers=alice.headers)

    assert resp.status_code == 200
    assert resp.json() == {"assignedTasks": [], "createdTasks": [], "overdueTasks": []}


def test_dashboard_endpoint(client, alice, bob):
    created = client.post(
        "/tasks",
        json=task_payload(title="Review PR", dueDate=future_iso(2), assignedToId=bob.id),
        headers=alice.headers,
    )
    assert created.status_code == 201
    task_id = created.json()["id"]

    alice_view = client.get("/tasks/dashboard", headers=alice.headers).json()
    bob_view = client.get("/tasks/dashboard", headers=bob.headers).json()

    assert [t["id"] for t in alice_view["createdTasks"]] == [task_id]
    assert alice_view["assignedTasks"] == []
    assert [t["id"] for t in bob_view["assignedTasks"]] == [task_id]
    assert bob_view["assignedTasks"][0]["creator"]["email"] == "alice@example.com"
    assert bob_view["overdueTasks"] == []


def test_dashboard_requires_auth(client):
    assert client.get("/tasks/dashboard").status_code == 401
