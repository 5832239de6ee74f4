# src/ambitask/api/app.py

"""
Task API.

A stateless HTTP layer over the task store:

    GET    /tasks        -> all tasks, newest first
    POST   /tasks        -> create (201)
    PUT    /tasks/{id}   -> partial update
    PATCH  /tasks/{id}   -> partial update (same semantics as PUT)
    DELETE /tasks/{id}   -> {"success": true}

Errors are returned as {"error": "<message>"}; internal details never leave the server.
"""

from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..core.errors import AmbiTaskError
from ..core.ports import TaskRepo
from .schemas import DeleteResponse, ErrorResponse, TaskCreate, TaskResponse, TaskUpdate

logger = logging.getLogger(__name__)

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def get_store(request: Request) -> TaskRepo:
    return request.app.state.task_store


async def _app_error_handler(request: Request, exc: AmbiTaskError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.info("%s %s rejected (%s): %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        loc = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = f"{loc}: {first.get('msg', 'invalid value')}" if loc else str(first.get("msg"))
    else:
        message = "Invalid request body"
    logger.info("%s %s rejected (400): %s", request.method, request.url.path, message)
    return JSONResponse({"error": message}, status_code=400)


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse({"error": "Internal server error"}, status_code=500)


def create_app(task_store: TaskRepo, *, cors_origins: list[str] | None = None) -> FastAPI:
    """Build the API around an already-opened store (the composition root owns it)."""
    app = FastAPI(title="AmbiTask API")
    app.state.task_store = task_store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins if cors_origins is not None else ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(AmbiTaskError, _app_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _request_validation_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _unhandled_error_handler)

    @app.get("/")
    def root():
        return {"message": "AmbiTask API is working"}

    @app.get("/tasks", response_model=list[TaskResponse], responses=_ERROR_RESPONSES)
    def list_tasks(store: TaskRepo = Depends(get_store)):
        return [t.to_wire() for t in store.list_tasks()]

    @app.post("/tasks", status_code=201, response_model=TaskResponse, responses=_ERROR_RESPONSES)
    def create_task(body: TaskCreate, store: TaskRepo = Depends(get_store)):
        task = store.create_task(
            title=body.title,
            completed=body.completed,
            important=body.important,
            due_at=body.due_at,
            notified=body.notified,
        )
        logger.info("Task created id=%s", task.id)
        return task.to_wire()

    def _update(task_id: str, body: TaskUpdate, store: TaskRepo):
        task = store.update_task(task_id, body.changes())
        logger.info("Task updated id=%s fields=%s", task_id, sorted(body.model_fields_set))
        return task.to_wire()

    @app.put("/tasks/{task_id}", response_model=TaskResponse, responses=_ERROR_RESPONSES)
    def put_task(task_id: str, body: TaskUpdate, store: TaskRepo = Depends(get_store)):
        return _update(task_id, body, store)

    @app.patch("/tasks/{task_id}", response_model=TaskResponse, responses=_ERROR_RESPONSES)
    def patch_task(task_id: str, body: TaskUpdate, store: TaskRepo = Depends(get_store)):
        return _update(task_id, body, store)

    @app.delete("/tasks/{task_id}", response_model=DeleteResponse, responses=_ERROR_RESPONSES)
    def delete_task(task_id: str, store: TaskRepo = Depends(get_store)):
        store.delete_task(task_id)
        logger.info("Task deleted id=%s", task_id)
        return {"success": True}

    return app
