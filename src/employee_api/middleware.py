"""Request tracing middleware."""

import uuid
from collections.abc import Awaitable, Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from employee_api.logging import get_logger

REQUEST_ID_HEADER = "X-Request-ID"

logger = get_logger(__name__)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Bind request_id, method and path to the structlog context.

    The request ID comes from the X-Request-ID header, or a fresh UUID4 when
    the client sent none. It is echoed back on the response so callers can
    match an error body to the server-side log lines.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        # The catch-all 500 handler runs outside this middleware and reads it from here.
        request.state.request_id = request_id

        try:
            response = await call_next(request)
        except Exception:
            logger.info("request_failed", status=500)
            raise
        response.headers[REQUEST_ID_HEADER] = request_id

        if response.status_code >= 400:
            logger.info("request_failed", status=response.status_code)

        return response
