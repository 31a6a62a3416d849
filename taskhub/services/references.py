# taskhub/services/references.py
"""
A task points at users either by bare id or, once the relationship is
loaded, by the expanded User row. Authorization only ever compares ids, so
both shapes go through ``reference_id``.
"""

from dataclasses import dataclass
from typing import Optional, Union

from sqlalchemy import inspect

from taskhub.models.task import Task
from taskhub.models.user import User


@dataclass(frozen=True)
class IdRef:
    id: str


@dataclass(frozen=True)
class ExpandedRef:
    user: User


Reference = Union[IdRef, ExpandedRef]


def reference_id(ref: Optional[Reference]) -> Optional[str]:
    if ref is None:
        return None
    if isinstance(ref, ExpandedRef):
        return str(ref.user.id)
    return str(ref.id)


def _loaded_user(task: Task, attribute: str) -> Optional[User]:
    if attribute in inspect(task).unloaded:
        return None
    return getattr(task, attribute)


def creator_ref(task: Task) -> Reference:
    creator = _loaded_user(task, "creator")
    if creator is not None:
        return ExpandedRef(creator)
    return IdRef(task.creator_id)


def assignee_ref(task: Task) -> Optional[Reference]:
    if task.assigned_to_id is None:
        return None
    assignee = _loaded_user(task, "assignee")
    if assignee is not None and assignee.id == task.assigned_to_id:
        return ExpandedRef(assignee)
    # Dangling or not loaded: fall back to the raw id
    return IdRef(task.assigned_to_id)
