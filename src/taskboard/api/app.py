"""FastAPI application exposing the task store over JSON REST.

Routes:
    GET    /api/tasks              list all tasks
    POST   /api/tasks              create a task          {"title": ...}
    PUT    /api/tasks/{id}         rename a task          {"title": ...}
    DELETE /api/tasks/{id}         delete a task
    POST   /api/tasks/{id}/toggle  flip the completed flag
    GET    /healthz                liveness probe

Every error response is a JSON object with a single "error" field.
"""

import re
from typing import Any

import pydantic
from fastapi import APIRouter, Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from taskboard import __version__
from taskboard.api.middleware import REQUEST_ID_HEADER, RequestContextMiddleware
from taskboard.api.schemas import TitleRequest
from taskboard.config import Settings, get_settings
from taskboard.tasks import (
    NotPersistedError,
    TaskNotFoundError,
    TaskStore,
    TaskValidationError,
)

CORS_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
CORS_HEADERS = ["Accept", "Authorization", "Content-Type", "X-CSRF-Token"]
CORS_EXPOSED_HEADERS = ["Link", REQUEST_ID_HEADER]
CORS_MAX_AGE = 300

_TASK_ID_RE = re.compile(r"^[+-]?[0-9]+$")

# Ids must fit a signed 64-bit integer
MAX_TASK_ID = 2**63 - 1
MIN_TASK_ID = -(2**63)


class InvalidRequestError(Exception):
    """The request could not be interpreted (bad JSON body or task id)."""


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def parse_task_id(raw: str) -> int:
    """Parse a task id path segment.

    Raises:
        InvalidRequestError: If the segment is not an ASCII decimal integer
            within the signed 64-bit range.
    """
    if not _TASK_ID_RE.fullmatch(raw):
        raise InvalidRequestError("Invalid task ID")
    try:
        task_id = int(raw)
    except ValueError as e:
        # Past the interpreter's integer string conversion limit
        raise InvalidRequestError("Invalid task ID") from e
    if not MIN_TASK_ID <= task_id <= MAX_TASK_ID:
        raise InvalidRequestError("Invalid task ID")
    return task_id


async def read_title(request: Request) -> str:
    """Extract the title from a JSON request body.

    Raises:
        InvalidRequestError: If the body is not a JSON object with a string title.
    """
    body = await request.body()
    try:
        return TitleRequest.model_validate_json(body).title
    except pydantic.ValidationError as e:
        raise InvalidRequestError("Invalid JSON") from e


def get_store(request: Request) -> TaskStore:
    return request.app.state.store


router = APIRouter(prefix="/api/tasks")


@router.get("")
def list_tasks(store: TaskStore = Depends(get_store)) -> list[dict[str, Any]]:
    return [task.to_dict() for task in store.list_tasks()]


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_task(request: Request, store: TaskStore = Depends(get_store)) -> dict[str, Any]:
    title = await read_title(request)
    task = await run_in_threadpool(store.create, title)
    return task.to_dict()


@router.delete("/{task_id}")
def delete_task(task_id: str, store: TaskStore = Depends(get_store)) -> dict[str, Any]:
    return store.delete(parse_task_id(task_id)).to_dict()


@router.put("/{task_id}")
async def rename_task(
    task_id: str, request: Request, store: TaskStore = Depends(get_store)
) -> dict[str, Any]:
    parsed_id = parse_task_id(task_id)
    title = await read_title(request)
    task = await run_in_threadpool(store.rename, parsed_id, title)
    return task.to_dict()


@router.post("/{task_id}/toggle")
def toggle_task(task_id: str, store: TaskStore = Depends(get_store)) -> dict[str, Any]:
    return store.toggle(parse_task_id(task_id)).to_dict()


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(InvalidRequestError)
    async def _invalid_request(request: Request, exc: InvalidRequestError) -> JSONResponse:
        return error_response(status.HTTP_400_BAD_REQUEST, str(exc))

    @app.exception_handler(TaskValidationError)
    async def _validation(request: Request, exc: TaskValidationError) -> JSONResponse:
        return error_response(status.HTTP_400_BAD_REQUEST, str(exc))

    @app.exception_handler(TaskNotFoundError)
    async def _not_found(request: Request, exc: TaskNotFoundError) -> JSONResponse:
        return error_response(status.HTTP_404_NOT_FOUND, str(exc))

    @app.exception_handler(NotPersistedError)
    async def _not_persisted(request: Request, exc: NotPersistedError) -> JSONResponse:
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Task change was not saved")

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        response = error_response(exc.status_code, str(exc.detail))
        if exc.headers:
            response.headers.update(exc.headers)
        return response


def create_app(settings: Settings | None = None, store: TaskStore | None = None) -> FastAPI:
    """Build the HTTP application.

    Args:
        settings: Service settings. Uses get_settings() if None.
        store: Task store to serve. If None, one is built from settings
            and loaded from its snapshot file.

    Returns:
        Configured FastAPI application.

    Raises:
        PersistenceError: If a store had to be loaded and its snapshot is
            unreadable or malformed.
    """
    if settings is None:
        settings = get_settings()
    if store is None:
        store = TaskStore.from_settings(settings)
        store.load()

    app = FastAPI(title="taskboard", version=__version__)
    app.state.settings = settings
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_methods=CORS_METHODS,
        allow_headers=CORS_HEADERS,
        expose_headers=CORS_EXPOSED_HEADERS,
        allow_credentials=True,
        max_age=CORS_MAX_AGE,
    )
    # Added last so it wraps CORS and logs preflight requests too
    app.add_middleware(RequestContextMiddleware)

    _register_error_handlers(app)
    app.include_router(router)

    @app.get("/healthz")
    def healthz() -> dict[str, Any]:
        return {"status": "ok", "tasks": store.count()}

    return app
