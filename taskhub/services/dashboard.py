# taskhub/services/dashboard.py
import asyncio
import logging
from datetime import datetime
from typing import Callable, List

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import sessionmaker

from taskhub.schemas.task import DashboardOut, TaskOut
from taskhub.services.task_store import TaskStore
from taskhub.utils.dates import utcnow

logger = logging.getLogger(__name__)


class DashboardAggregator:
    """Builds a user's dashboard from three independent task queries.

    The queries run concurrently, each on its own session in the threadpool.
    A task may show up in more than one list. If any query fails the whole
    dashboard fails.
    """

    def __init__(self, session_factory: sessionmaker, clock: Callable[[], datetime] = utcnow):
        self.session_factory = session_factory
        self.clock = clock

    def _run_query(self, fetch: Callable[[TaskStore], list]) -> List[TaskOut]:
        db = self.session_factory()
        try:
            # Serialize while the session is still open
            return [TaskOut.model_validate(task) for task in fetch(TaskStore(db))]
        finally:
            db.close()

    async def get_dashboard(self, user_id: str) -> DashboardOut:
        now = self.clock()

        assigned_tasks, created_tasks, overdue_tasks = await asyncio.gather(
            run_in_threadpool(self._run_query, lambda store: store.find_by_assignee(user_id)),
            run_in_threadpool(self._run_query, lambda store: store.find_by_creator(user_id)),
            run_in_threadpool(self._run_query, lambda store: store.find_overdue(user_id, now=now)),
        )

        logger.debug(
            f"Dashboard for {user_id}: {len(assigned_tasks)} assigned, "
            f"{len(created_tasks)} created, {len(overdue_tasks)} overdue"
        )
        return DashboardOut(
            assigned_tasks=assigned_tasks,
            created_tasks=created_tasks,
            overdue_tasks=overdue_tasks,
        )
