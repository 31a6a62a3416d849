import json
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request, WebSocket, WebSocketDisconnect, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from taskhub.config.settings import AppConfig
from taskhub.database import create_all_tables
from taskhub.errors import TaskHubError, UnauthenticatedError
from taskhub.routers import auth, tasks, users
from taskhub.services.websocket_manager import websocket_manager

logging.basicConfig(level=AppConfig.LOGGING['level'], format=AppConfig.LOGGING['format'])
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting Task Manager API...")
    if AppConfig.DATABASE['create_tables']:
        create_all_tables()
        logger.info("Database tables ready")
    yield
    logger.info("Shutting down Task Manager API...")


# Interactive docs stay off in production
app = FastAPI(
    title="TaskHub API",
    lifespan=lifespan,
    docs_url=None if AppConfig.is_production() else "/docs",
    redoc_url=None if AppConfig.is_production() else "/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=AppConfig.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    response = await call_next(request)
    logger.info(f"{request.method} {request.url.path} -> {response.status_code}")
    return response


# Error mapping
@app.exception_handler(TaskHubError)
async def taskhub_error_handler(request: Request, exc: TaskHubError):
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthenticatedError) else None
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message}, headers=headers)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = [
        {
            "field": ".".join(str(part) for part in error["loc"] if part not in ("body", "query")),
            "message": error["msg"],
        }
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Validation failed", "errors": errors},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# Route registration
app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
app.include_router(users.router, prefix="/users", tags=["Users"])
app.include_router(tasks.router)


# Root route
@app.get("/")
def read_root():
    return {"message": "Task Manager API"}


@app.get("/health")
def health():
    return {
        "status": "ok",
        "connections": websocket_manager.get_total_connections(),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


# Real-time channel: clients authenticate over the socket, or with ?token=
@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket, token: Optional[str] = None):
    await websocket.accept()
    websocket_manager.connect(websocket)

    try:
        if token:
            await websocket_manager.authenticate(websocket, token)

        while True:
            data = await websocket.receive_text()

            try:
                received = json.loads(data)
            except json.JSONDecodeError:
                logger.debug("Ignoring non-JSON WebSocket frame")
                continue

            if isinstance(received, dict) and received.get("event") == "authenticate":
                await websocket_manager.authenticate(websocket, received.get("data"))
            else:
                logger.debug(f"Ignoring WebSocket message: {data[:100]}")

    except WebSocketDisconnect:
        logger.debug("WebSocket closed by client")
    finally:
        websocket_manager.disconnect(websocket)
