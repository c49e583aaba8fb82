from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy import text
from starlette.exceptions import HTTPException as StarletteHTTPException

from employee_api.db.session import create_tables, shutdown
from employee_api.dependencies import DB
from employee_api.exceptions import DomainError, TransactionError
from employee_api.logging import get_logger
from employee_api.middleware import REQUEST_ID_HEADER, RequestContextMiddleware
from employee_api.normalizer import (
    failure_kind_name,
    fallback_attributes,
    normalize_attributes,
    normalize_domain_failure,
    normalize_failure,
)
from employee_api.routers.employee import router as employee_router
from employee_api.schemas.error import ErrorRecord

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup: create missing tables. Shutdown: close pooled connections."""
    await create_tables()
    yield
    await shutdown()


app = FastAPI(title="Employees API", lifespan=lifespan)
app.add_middleware(RequestContextMiddleware)
app.include_router(employee_router)


def _error_response(record: ErrorRecord, headers: dict[str, str] | None = None) -> JSONResponse:
    """Serialize the record as the body; its status becomes the response status."""
    return JSONResponse(status_code=record.status, content=record.to_json(), headers=headers)


def _describe_conversion_errors(exc: RequestValidationError) -> str:
    """One sentence per failed parameter, e.g. for GET /employees/turtle."""
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"])
        if error["type"] == "missing":
            parts.append(f"{location}: {error['msg']}")
            continue
        parts.append(
            f"Failed to convert value '{error.get('input')}' for {location}: {error['msg']}"
        )
    return "; ".join(parts)


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Recognized domain failures: title and status come from the failure kind."""
    if exc.kind is None:
        return await unhandled_exception_handler(request, exc)
    logger.warning("domain_error", error=exc.message, kind=exc.kind.name)
    return _error_response(normalize_domain_failure(exc))


@app.exception_handler(TransactionError)
async def transaction_error_handler(request: Request, exc: TransactionError) -> JSONResponse:
    """Changes rejected at flush time, usually because of field rule violations."""
    record = normalize_failure(exc, HTTPStatus.BAD_REQUEST)
    logger.warning(
        "transaction_failed",
        error=record.detail,
        issues=[issue.model_dump() for issue in record.validation_issues],
    )
    return _error_response(record)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Path, query or body values that could not be converted to their declared types."""
    detail = _describe_conversion_errors(exc)
    record = normalize_failure(exc, HTTPStatus.BAD_REQUEST, message=detail)
    logger.info("request_conversion_failed", error=record.detail)
    return _error_response(record)


@app.exception_handler(StarletteHTTPException)
async def http_fallback_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Errors raised by the routing layer itself: unknown routes, wrong methods.

    A detail equal to the status reason phrase is the framework default and
    carries no information, so it is reported as null.
    """
    phrase = HTTPStatus(exc.status_code).phrase if exc.status_code in {s.value for s in HTTPStatus} else None
    message = None if exc.detail == phrase else exc.detail
    attributes = fallback_attributes(exc.status_code, request.url.path, message)
    logger.info("http_fallback", status=exc.status_code)
    return _error_response(normalize_attributes(attributes, failure=exc), headers=exc.headers)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything else: logged with traceback, reported as a 500.

    Starlette runs this outside RequestContextMiddleware, so the request ID
    header is added here.
    """
    logger.exception("unhandled_exception", error_type=failure_kind_name(exc))
    request_id = getattr(request.state, "request_id", None)
    headers = {REQUEST_ID_HEADER: request_id} if request_id else None
    return _error_response(normalize_failure(exc, HTTPStatus.INTERNAL_SERVER_ERROR), headers)


@app.get("/health")
async def health(db: DB) -> dict[str, str]:
    """Health check endpoint: verifies database connectivity."""
    await db.execute(text("SELECT 1"))
    return {"status": "ok"}
