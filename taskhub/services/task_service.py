# taskhub/services/task_service.py
"""
Task service: turns untrusted task payloads plus the acting user into
validated writes, or rejects them.

Authorization is re-derived from the stored task on every mutation, so a
reassignment takes effect for the very next request. The load, the check
and the write are separate statements; a concurrent delete or reassignment
between them is not detected.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from taskhub.errors import ForbiddenError, NotFoundError, ValidationError
from taskhub.models.task import Task
from taskhub.schemas.task import TaskCreate, TaskUpdate
from taskhub.services.references import assignee_ref, creator_ref, reference_id
from taskhub.services.task_store import TaskFilter, TaskSort, TaskStore
from taskhub.services.user_directory import UserDirectory, is_valid_id
from taskhub.utils.dates import utcnow

logger = logging.getLogger(__name__)

# Marks "assignee not mentioned in the patch"; None means "unassign"
_UNCHANGED = object()


@dataclass
class UpdateResult:
    task: Task
    previous_assignee_id: Optional[str]


def can_update(creator_id: str, assignee_id: Optional[str], acting_user_id: str) -> bool:
    """Creator or current assignee may update"""
    return acting_user_id == creator_id or (assignee_id is not None and acting_user_id == assignee_id)


def can_delete(creator_id: str, acting_user_id: str) -> bool:
    """Only the creator may delete"""
    return acting_user_id == creator_id


class TaskService:
    def __init__(self, db: Session, clock: Callable[[], datetime] = utcnow):
        self.db = db
        self.clock = clock
        self.tasks = TaskStore(db)
        self.users = UserDirectory(db)

    def _ensure_future(self, due_date: datetime) -> None:
        if due_date <= self.clock():
            raise ValidationError("Due date must be in the future")

    def resolve_assignee(
        self,
        assigned_to_email: Optional[str] = None,
        assigned_to_id: Optional[str] = None,
    ) -> Optional[str]:
        """Resolve the assignee user id from an email or an id.

        A non-blank email takes precedence and must match an existing user.
        A non-blank id only has to be well-formed; the user it names is not
        looked up. Neither given means unassigned.
        """
        email = (assigned_to_email or "").strip()
        if email:
            user = self.users.get_by_email(email)
            if user is None:
                raise NotFoundError(f"User with email {email} not found")
            return user.id

        user_id = (assigned_to_id or "").strip()
        if user_id:
            if not is_valid_id(user_id):
                raise ValidationError("Invalid assigned user ID")
            return str(uuid.UUID(user_id))

        return None

    def _resolve_patch_assignee(self, patch: TaskUpdate):
        fields = patch.model_fields_set
        if "assigned_to" in fields:
            if not (patch.assigned_to or "").strip():
                return None
            return self.resolve_assignee(assigned_to_email=patch.assigned_to)
        if "assigned_to_id" in fields:
            if not (patch.assigned_to_id or "").strip():
                return None
            return self.resolve_assignee(assigned_to_id=patch.assigned_to_id)
        return _UNCHANGED

    def create_task(self, payload: TaskCreate, creator_id: str) -> Task:
        self._ensure_future(payload.due_date)
        assigned_to_id = self.resolve_assignee(payload.assigned_to, payload.assigned_to_id)

        task = self.tasks.create(
            title=payload.title,
            description=payload.description,
            due_date=payload.due_date,
            priority=payload.priority,
            status=payload.status,
            creator_id=creator_id,
            assigned_to_id=assigned_to_id,
        )
        logger.info(f"Task {task.id} created by {creator_id} (assignee: {assigned_to_id})")
        return task

    def get_task(self, task_id: str) -> Task:
        task = self.tasks.get(task_id)
        if task is None:
            raise NotFoundError("Task not found")
        return task

    def list_tasks(self, filters: TaskFilter = None, sort: TaskSort = None) -> List[Task]:
        return self.tasks.find_all(filters, sort)

    def update_task(self, task_id: str, patch: TaskUpdate, acting_user_id: str) -> UpdateResult:
        task = self.get_task(task_id)

        creator_id = reference_id(creator_ref(task))
        previous_assignee_id = reference_id(assignee_ref(task))
        if not can_update(creator_id, previous_assignee_id, acting_user_id):
            raise ForbiddenError("Not authorized to update this task")

        fields = patch.model_fields_set
        changes = {}
        for name in ("title", "description", "priority", "status"):
            if name in fields:
                changes[name] = getattr(patch, name)

        # Only a changed due date is re-checked; resending the stored value is
        # allowed even once it has passed
        if "due_date" in fields and patch.due_date != task.due_date:
            self._ensure_future(patch.due_date)
            changes["due_date"] = patch.due_date

        new_assignee = self._resolve_patch_assignee(patch)
        if new_assignee is not _UNCHANGED:
            changes["assigned_to_id"] = new_assignee

        task = self.tasks.update(task, **changes)
        logger.info(f"Task {task.id} updated by {acting_user_id}: {sorted(changes)}")
        return UpdateResult(task=task, previous_assignee_id=previous_assignee_id)

    def delete_task(self, task_id: str, acting_user_id: str) -> None:
        task = self.get_task(task_id)

        if not can_delete(reference_id(creator_ref(task)), acting_user_id):
            raise ForbiddenError("Not authorized to delete this task")

        self.tasks.delete(task)
        logger.info(f"Task {task_id} deleted by {acting_user_id}")
