import asyncio
import logging
from typing import Any, Dict, List, Optional

from fastapi import WebSocket

from taskhub.errors import UnauthenticatedError
from taskhub.schemas.task import TaskOut
from taskhub.utils.security import decode_access_token

logger = logging.getLogger(__name__)

TASK_CREATED = "task:created"
TASK_UPDATED = "task:updated"
TASK_DELETED = "task:deleted"
TASK_ASSIGNED = "task:assigned"
AUTHENTICATED = "authenticated"
AUTHENTICATION_ERROR = "authentication_error"


class ConnectionRegistry:
    """Maps a user id to that user's live socket.

    One socket per user: registering again replaces the previous socket,
    which stays open but stops receiving targeted events. Only touched from
    the event loop, so no locking.
    """

    def __init__(self):
        self._connections: Dict[str, WebSocket] = {}

    def register(self, user_id: str, websocket: WebSocket) -> Optional[WebSocket]:
        """Register `websocket` for `user_id`, returning the socket it replaced"""
        previous = self._connections.get(user_id)
        self._connections[user_id] = websocket
        return previous

    def unregister(self, user_id: str, websocket: WebSocket) -> bool:
        # A socket that was already replaced must not evict its replacement
        if self._connections.get(user_id) is websocket:
            del self._connections[user_id]
            return True
        return False

    def lookup(self, user_id: str) -> Optional[WebSocket]:
        return self._connections.get(user_id)


class WebSocketManager:
    def __init__(self):
        self.registry = ConnectionRegistry()
        # Every open socket -> its user id once authenticated
        self.active_connections: Dict[WebSocket, Optional[str]] = {}

    def connect(self, websocket: WebSocket):
        """Track a newly accepted WebSocket"""
        # Note: websocket.accept() is called in the main endpoint, not here
        self.active_connections[websocket] = None
        logger.info(f"Client connected. Total connections: {len(self.active_connections)}")

    def disconnect(self, websocket: WebSocket):
        """Forget a WebSocket and its user registration"""
        user_id = self.active_connections.pop(websocket, None)
        if user_id is not None:
            self.registry.unregister(user_id, websocket)
            logger.info(f"User {user_id} disconnected")
        logger.info(f"Client disconnected. Remaining connections: {len(self.active_connections)}")

    async def authenticate(self, websocket: WebSocket, token: str) -> Optional[str]:
        """Verify `token` and register the socket for its user"""
        if not isinstance(token, str):
            token = ""
        try:
            user_id = decode_access_token(token)
        except UnauthenticatedError as e:
            logger.info(f"WebSocket authentication failed: {e.message}")
            await self.send_event(websocket, AUTHENTICATION_ERROR, {"message": "Invalid token"})
            return None

        previous_user_id = self.active_connections.get(websocket)
        if previous_user_id is not None and previous_user_id != user_id:
            self.registry.unregister(previous_user_id, websocket)

        replaced = self.registry.register(user_id, websocket)
        if replaced is not None and replaced is not websocket:
            logger.info(f"User {user_id} re-registered; previous session no longer receives assignments")
        self.active_connections[websocket] = user_id

        logger.info(f"WebSocket authenticated user {user_id}")
        await self.send_event(websocket, AUTHENTICATED, {"userId": user_id})
        return user_id

    async def send_event(self, websocket: WebSocket, event: str, data: Any) -> bool:
        """Send one event to one socket, dropping the socket if the send fails"""
        failed = await self._send_to_connections([websocket], {"event": event, "data": data})
        return not failed

    async def _send_to_connections(self, connections: List[WebSocket], message: dict) -> List[WebSocket]:
        if not connections:
            return []

        results = await asyncio.gather(
            *(websocket.send_json(message) for websocket in connections),
            return_exceptions=True,
        )

        failed = []
        for websocket, result in zip(connections, results):
            if isinstance(result, Exception):
                logger.warning(f"Error sending {message['event']} to WebSocket: {result!r}")
                failed.append(websocket)

        # Clean up disconnected websockets
        for websocket in failed:
            self.disconnect(websocket)
        return failed

    async def broadcast(self, event: str, data: Any):
        """Send an event to every open socket, authenticated or not"""
        connections = list(self.active_connections.keys())
        await self._send_to_connections(connections, {"event": event, "data": data})

    async def broadcast_created(self, task: TaskOut):
        await self.broadcast(TASK_CREATED, _task_payload(task))

    async def broadcast_updated(self, task: TaskOut):
        await self.broadcast(TASK_UPDATED, _task_payload(task))

    async def broadcast_deleted(self, task_id: str):
        await self.broadcast(TASK_DELETED, {"taskId": task_id})

    async def notify_assigned(self, user_id: str, task: TaskOut) -> bool:
        """Tell an assignee about a task; dropped when they have no live socket"""
        websocket = self.registry.lookup(user_id)
        if websocket is None:
            logger.info(f"User {user_id} not connected, assignment notification dropped")
            return False

        return await self.send_event(
            websocket,
            TASK_ASSIGNED,
            {
                "message": f"You have been assigned a new task: {task.title}",
                "task": _task_payload(task),
            },
        )

    def get_total_connections(self) -> int:
        return len(self.active_connections)


def _task_payload(task: TaskOut) -> dict:
    return task.model_dump(mode="json", by_alias=True)


# Global instance
websocket_manager = WebSocketManager()
