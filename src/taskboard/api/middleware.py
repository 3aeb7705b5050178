"""HTTP middleware: request ids, access logging and the last-resort 500."""

import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from taskboard.logging import Loggers, bind_context, clear_context

REQUEST_ID_HEADER = "X-Request-ID"

logger = Loggers.api()


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Tag each request with an id and log its outcome.

    An incoming X-Request-ID header is reused, otherwise a new id is
    generated. The id is bound to the structlog context for the
    duration of the request and echoed on the response.

    Exceptions no route handler dealt with are logged here, while the
    request id is still bound, and answered with a JSON 500.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        clear_context()
        bind_context(request_id=request_id)
        start = time.perf_counter()
        try:
            try:
                response = await call_next(request)
            except Exception as exc:
                logger.error(
                    "unhandled_error",
                    method=request.method,
                    path=request.url.path,
                    exc_info=exc,
                )
                response = JSONResponse(
                    status_code=500, content={"error": "Internal server error"}
                )
            response.headers[REQUEST_ID_HEADER] = request_id
            logger.info(
                "request_completed",
                method=request.method,
                path=request.url.path,
                status=response.status_code,
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
            )
            return response
        finally:
            clear_context()
