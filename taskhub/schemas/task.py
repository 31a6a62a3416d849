# taskhub/schemas/task.py
from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import StringConstraints, field_validator, model_validator
from pydantic.networks import validate_email

from taskhub.models.task import TaskPriority, TaskStatus
from taskhub.schemas.base import CamelModel
from taskhub.schemas.user import UserSummary
from taskhub.utils.dates import as_utc, to_utc_naive

TaskTitle = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]
TaskDescription = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


def _check_assignee_email(v: Optional[str]) -> Optional[str]:
    # Blank means "no assignee"; anything else has to look like an email
    if v is not None and v.strip():
        validate_email(v.strip())
    return v


class TaskCreate(CamelModel):
    title: TaskTitle
    description: TaskDescription
    due_date: datetime
    priority: TaskPriority = TaskPriority.MEDIUM
    status: TaskStatus = TaskStatus.TODO
    assigned_to: Optional[str] = None      # assignee email, wins over the id
    assigned_to_id: Optional[str] = None

    @field_validator('due_date')
    @classmethod
    def normalize_due_date(cls, v):
        return to_utc_naive(v)

    @field_validator('assigned_to')
    @classmethod
    def assignee_email_format(cls, v):
        return _check_assignee_email(v)


class TaskUpdate(CamelModel):
    """Partial update.

    Fields left out of the request body are untouched. For the assignee
    fields an explicit ``null`` or ``""`` clears the assignment, so callers
    must check ``model_fields_set`` rather than comparing against None.
    """
    title: Optional[TaskTitle] = None
    description: Optional[TaskDescription] = None
    due_date: Optional[datetime] = None
    priority: Optional[TaskPriority] = None
    status: Optional[TaskStatus] = None
    assigned_to: Optional[str] = None
    assigned_to_id: Optional[str] = None

    @field_validator('due_date')
    @classmethod
    def normalize_due_date(cls, v):
        return to_utc_naive(v) if v is not None else v

    @field_validator('assigned_to')
    @classmethod
    def assignee_email_format(cls, v):
        return _check_assignee_email(v)

    @model_validator(mode='after')
    def reject_null_fields(self):
        for name in ('title', 'description', 'due_date', 'priority', 'status'):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class TaskOut(CamelModel):
    id: str
    title: str
    description: str
    due_date: datetime
    priority: TaskPriority
    status: TaskStatus

    creator_id: str
    assigned_to_id: Optional[str] = None

    # Related objects
    creator: Optional[UserSummary] = None
    assignee: Optional[UserSummary] = None

    created_at: datetime
    updated_at: Optional[datetime] = None

    @field_validator('due_date', 'created_at', 'updated_at')
    @classmethod
    def attach_utc(cls, v):
        return as_utc(v)


class TaskList(CamelModel):
    tasks: List[TaskOut]
    count: int


class TaskUpdateResult(CamelModel):
    task: TaskOut
    previous_assignee_id: Optional[str] = None


class DashboardOut(CamelModel):
    assigned_tasks: List[TaskOut]
    created_tasks: List[TaskOut]
    overdue_tasks: List[TaskOut]
