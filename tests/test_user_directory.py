# tests/test_user_directory.py

from datetime import timedelta

import pytest

from taskhub.errors import ConflictError
from taskhub.services.task_store import TaskStore
from taskhub.services.user_directory import UserDirectory
from taskhub.utils.dates import utcnow


@pytest.fixture()
def directory(db):
    return UserDirectory(db)


def test_create_stores_normalized_email(directory):
    user = directory.create(name="Dana", email="  Dana@Example.COM ", hashed_password="x")

    assert user.email == "dana@example.com"
    assert directory.get_by_email("DANA@example.com").id == user.id


def test_create_duplicate_email_is_a_conflict(directory):
    directory.create(name="Dana", email="dana@example.com", hashed_password="x")

    with pytest.raises(ConflictError, match="Email already registered"):
        directory.create(name="Dana Two", email="DANA@example.com", hashed_password="y")

    # Session was rolled back and is still usable
    assert [u.name for u in directory.list_all()] == ["Dana"]


def test_delete_user_without_tasks(directory):
    user = directory.create(name="Dana", email="dana@example.com", hashed_password="x")

    assert directory.delete(user.id) is True
    assert directory.get_by_id(user.id) is None


def test_delete_missing_user(directory):
    assert directory.delete("not-a-user-id") is False


def test_delete_user_with_created_tasks_is_refused(db, directory):
    user = directory.create(name="Dana", email="dana@example.com", hashed_password="x")
    TaskStore(db).create(
        title="Keep me",
        description="...",
        due_date=utcnow() + timedelta(days=1),
        creator_id=user.id,
    )

    with pytest.raises(ConflictError, match="User still has created tasks"):
        directory.delete(user.id)

    assert directory.get_by_id(user.id) is not None
    assert [t.title for t in TaskStore(db).find_by_creator(user.id)] == ["Keep me"]


def test_search_escapes_wildcards(directory):
    directory.create(name="Dana", email="dana@example.com", hashed_password="x")
    directory.create(name="100% Eve", email="eve@example.com", hashed_password="x")

    assert [u.name for u in directory.search("%")] == ["100% Eve"]
    assert [u.name for u in directory.search("EXAMPLE")] == ["100% Eve", "Dana"]
