# taskhub/services/task_store.py
"""
Persistence for task records: create/read/update/delete plus the filtered,
sorted queries used by the task list and the dashboard.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from sqlalchemy import and_, case, or_
from sqlalchemy.orm import Session

from taskhub.models.task import Task, TaskPriority, TaskStatus
from taskhub.services.user_directory import is_valid_id
from taskhub.utils.dates import utcnow

SORT_FIELDS = ("dueDate", "createdAt", "priority", "status")
SORT_ORDERS = ("asc", "desc")

PRIORITY_RANK = [TaskPriority.LOW, TaskPriority.MEDIUM, TaskPriority.HIGH, TaskPriority.URGENT]
STATUS_RANK = [TaskStatus.TODO, TaskStatus.IN_PROGRESS, TaskStatus.REVIEW, TaskStatus.COMPLETED]


@dataclass
class TaskFilter:
    """Recognized task list filters; None means "don't filter on this"."""
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    assigned_to_id: Optional[str] = None
    creator_id: Optional[str] = None
    overdue: bool = False


@dataclass
class TaskSort:
    field: str = "dueDate"
    order: str = "asc"

    def __post_init__(self):
        if self.field not in SORT_FIELDS:
            raise ValueError(f"Unsupported sort field: {self.field}")
        if self.order not in SORT_ORDERS:
            raise ValueError(f"Unsupported sort order: {self.order}")


def _canonical_id(value: str) -> str:
    # Ids are stored in canonical UUID form
    return str(uuid.UUID(value)) if is_valid_id(value) else value


def _rank(column, ranked):
    return case(*[(column == value, index) for index, value in enumerate(ranked)], else_=len(ranked))


def _sort_expression(sort: TaskSort):
    if sort.field == "priority":
        expr = _rank(Task.priority, PRIORITY_RANK)
    elif sort.field == "status":
        expr = _rank(Task.status, STATUS_RANK)
    elif sort.field == "createdAt":
        expr = Task.created_at
    else:
        expr = Task.due_date
    return expr.desc() if sort.order == "desc" else expr.asc()


class TaskStore:
    def __init__(self, db: Session):
        self.db = db

    def create(self, **fields) -> Task:
        task = Task(**fields)
        self.db.add(task)
        self.db.commit()
        self.db.refresh(task)
        return task

    def get(self, task_id: str) -> Optional[Task]:
        if not is_valid_id(task_id):
            return None
        return self.db.query(Task).filter(Task.id == str(task_id)).first()

    def find_all(self, filters: TaskFilter = None, sort: TaskSort = None) -> List[Task]:
        filters = filters or TaskFilter()
        sort = sort or TaskSort()

        query = self.db.query(Task)
        if filters.creator_id:
            query = query.filter(Task.creator_id == _canonical_id(filters.creator_id))
        if filters.assigned_to_id:
            query = query.filter(Task.assigned_to_id == _canonical_id(filters.assigned_to_id))
        if filters.status:
            query = query.filter(Task.status == filters.status)
        if filters.priority:
            query = query.filter(Task.priority == filters.priority)
        if filters.overdue:
            query = query.filter(
                and_(
                    Task.due_date < utcnow(),
                    Task.status != TaskStatus.COMPLETED,
                )
            )

        return query.order_by(_sort_expression(sort)).all()

    def update(self, task: Task, **fields) -> Task:
        for key, value in fields.items():
            setattr(task, key, value)
        task.updated_at = utcnow()
        self.db.commit()
        self.db.refresh(task)
        return task

    def delete(self, task: Task) -> None:
        self.db.delete(task)
        self.db.commit()

    def find_by_assignee(self, user_id: str) -> List[Task]:
        return (
            self.db.query(Task)
            .filter(Task.assigned_to_id == user_id)
            .order_by(Task.due_date.asc())
            .all()
        )

    def find_by_creator(self, user_id: str) -> List[Task]:
        return (
            self.db.query(Task)
            .filter(Task.creator_id == user_id)
            .order_by(Task.due_date.asc())
            .all()
        )

    def find_overdue(self, user_id: Optional[str] = None, now: Optional[datetime] = None) -> List[Task]:
        """Past due and not completed; limited to one user's tasks when given"""
        query = self.db.query(Task).filter(
            and_(
                Task.due_date < (now or utcnow()),
                Task.status != TaskStatus.COMPLETED,
            )
        )
        if user_id:
            query = query.filter(
                or_(
                    Task.creator_id == user_id,
                    Task.assigned_to_id == user_id,
                )
            )
        return query.order_by(Task.due_date.asc()).all()
