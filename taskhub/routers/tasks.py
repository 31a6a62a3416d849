# taskhub/routers/tasks.py
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session, sessionmaker

from taskhub.database import get_db, get_session_factory
from taskhub.models.task import TaskPriority, TaskStatus
from taskhub.models.user import User
from taskhub.schemas.task import DashboardOut, TaskCreate, TaskList, TaskOut, TaskUpdate, TaskUpdateResult
from taskhub.services.dashboard import DashboardAggregator
from taskhub.services.task_service import TaskService
from taskhub.services.task_store import TaskFilter, TaskSort
from taskhub.services.websocket_manager import websocket_manager
from taskhub.utils.auth import get_current_user

router = APIRouter(prefix="/tasks", tags=["Tasks"])


@router.post("", response_model=TaskOut, status_code=status.HTTP_201_CREATED)
async def create_task(
    payload: TaskCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    task = TaskService(db).create_task(payload, current_user.id)
    task_out = TaskOut.model_validate(task)

    await websocket_manager.broadcast_created(task_out)
    if task_out.assigned_to_id:
        await websocket_manager.notify_assigned(task_out.assigned_to_id, task_out)

    return task_out


@router.get("", response_model=TaskList)
def get_all_tasks(
    status: Optional[TaskStatus] = None,
    priority: Optional[TaskPriority] = None,
    assigned_to_id: Optional[str] = Query(default=None, alias="assignedToId"),
    creator_id: Optional[str] = Query(default=None, alias="creatorId"),
    overdue: bool = False,
    sort_by: Literal["dueDate", "createdAt", "priority", "status"] = Query(default="dueDate", alias="sortBy"),
    sort_order: Literal["asc", "desc"] = Query(default="asc", alias="sortOrder"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """List tasks with optional filters and sorting"""
    filters = TaskFilter(
        status=status,
        priority=priority,
        assigned_to_id=assigned_to_id,
        creator_id=creator_id,
        overdue=overdue,
    )
    tasks = TaskService(db).list_tasks(filters, TaskSort(field=sort_by, order=sort_order))
    return TaskList(tasks=[TaskOut.model_validate(task) for task in tasks], count=len(tasks))


# Registered before /{task_id} so "dashboard" is not read as an id
@router.get("/dashboard", response_model=DashboardOut)
async def get_dashboard(
    current_user: User = Depends(get_current_user),
    session_factory: sessionmaker = Depends(get_session_factory),
):
    """Tasks assigned to me, created by me, and overdue"""
    return await DashboardAggregator(session_factory).get_dashboard(current_user.id)


@router.get("/{task_id}", response_model=TaskOut)
def get_task(
    task_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return TaskService(db).get_task(task_id)


@router.put("/{task_id}", response_model=TaskUpdateResult)
async def update_task(
    task_id: str,
    patch: TaskUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Update a task; only its creator or current assignee may do this"""
    result = TaskService(db).update_task(task_id, patch, current_user.id)
    task_out = TaskOut.model_validate(result.task)

    await websocket_manager.broadcast_updated(task_out)

    new_assignee_id = task_out.assigned_to_id
    if new_assignee_id and new_assignee_id != result.previous_assignee_id:
        await websocket_manager.notify_assigned(new_assignee_id, task_out)

    return TaskUpdateResult(task=task_out, previous_assignee_id=result.previous_assignee_id)


@router.delete("/{task_id}")
async def delete_task(
    task_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Delete a task; creator only"""
    TaskService(db).delete_task(task_id, current_user.id)
    await websocket_manager.broadcast_deleted(task_id)
    return {"message": "Task deleted successfully"}
