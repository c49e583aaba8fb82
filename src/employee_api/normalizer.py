"""Error normalization: turn any failure into one ErrorRecord.

Three kinds of input are accepted:

1. Framework fallback attributes: a mapping with ``error``, ``status``,
   ``message``, ``timestamp`` and ``path``, built when a request matches no
   route or fails before reaching application code.
2. An unhandled failure: any exception, plus a status chosen by the caller.
3. A recognized domain failure: a DomainError whose kind fixes title and status.

Every path also scans the failure chain for the nearest
ConstraintViolationError and flattens its violations into field issues.
All functions are pure apart from reading the clock.
"""

from collections.abc import Iterator, Mapping
from datetime import UTC, datetime
from http import HTTPStatus
from typing import Any

from employee_api.exceptions import DomainError
from employee_api.schemas.error import ErrorRecord, FieldIssue
from employee_api.validation import ConstraintViolationError

INTERNAL_ERROR_TITLE = "Rest Internal Exception"

# Stands in for a violation whose invalid value is missing.
NULL_VALUE_CODE = "null"


def now() -> datetime:
    """Current UTC time at the precision the error body carries."""
    return datetime.now(UTC).replace(microsecond=0, tzinfo=None)


def failure_kind_name(exc: BaseException) -> str:
    """Fully qualified class name, e.g. ``employee_api.exceptions.ResourceNotFoundError``."""
    cls = type(exc)
    return f"{cls.__module__}.{cls.__qualname__}"


def failure_message(exc: BaseException) -> str | None:
    """The message a failure was raised with, or None when it carries none."""
    if isinstance(exc, DomainError):
        return exc.message
    if len(exc.args) > 1:
        return str(exc)
    if not exc.args or exc.args[0] is None:
        return None
    return str(exc.args[0])


def unwrap(exc: BaseException) -> BaseException | None:
    """Return the failure one level below ``exc`` in its chain.

    Explicit causes (``raise ... from``) win over the implicit context, and a
    context hidden with ``from None`` is not followed.
    """
    cause = getattr(exc, "__cause__", None)
    if cause is not None:
        return cause
    if getattr(exc, "__suppress_context__", False):
        return None
    return getattr(exc, "__context__", None)


def failure_chain(exc: BaseException | None) -> Iterator[BaseException]:
    """Yield ``exc`` and each underlying cause, stopping on a cycle."""
    seen: set[int] = set()
    while exc is not None and id(exc) not in seen:
        seen.add(id(exc))
        yield exc
        exc = unwrap(exc)


def scan_constraint_violations(exc: BaseException | None) -> list[FieldIssue]:
    """Field issues from the nearest ConstraintViolationError in the chain."""
    for link in failure_chain(exc):
        if isinstance(link, ConstraintViolationError):
            return [
                FieldIssue(
                    code=NULL_VALUE_CODE if v.invalid_value is None else str(v.invalid_value),
                    message=v.message,
                )
                for v in link.violations
            ]
    return []


def fallback_attributes(status: int, path: str, message: str | None = None) -> dict[str, Any]:
    """Build the attribute bag the fallback route hands to normalize_attributes."""
    try:
        error = HTTPStatus(status).phrase
    except ValueError:
        error = "Unknown Status"
    return {
        "timestamp": now(),
        "status": status,
        "error": error,
        "message": message,
        "path": path,
    }


def normalize_attributes(
    attributes: Mapping[str, Any], failure: BaseException | None = None
) -> ErrorRecord:
    """Normalize framework fallback attributes."""
    return ErrorRecord(
        title=attributes["error"],
        status=attributes["status"],
        detail=attributes.get("message"),
        timestamp=attributes.get("timestamp") or now(),
        developer_message=f"path: {attributes['path']}",
        validation_issues=scan_constraint_violations(failure),
    )


def normalize_failure(
    exc: BaseException, status: int, message: str | None = None
) -> ErrorRecord:
    """Normalize an unrecognized failure with a caller-supplied status.

    ``message`` replaces the failure's own message when the caller has a
    better description (e.g. a parameter conversion summary).
    """
    return ErrorRecord(
        title=INTERNAL_ERROR_TITLE,
        status=int(status),
        detail=message if message is not None else failure_message(exc),
        timestamp=now(),
        developer_message=failure_kind_name(exc),
        validation_issues=scan_constraint_violations(exc),
    )


def normalize_domain_failure(exc: DomainError) -> ErrorRecord:
    """Normalize a recognized domain failure using its kind's title and status."""
    if exc.kind is None:
        raise ValueError(f"{failure_kind_name(exc)} has no domain failure kind")
    return ErrorRecord(
        title=exc.kind.title,
        status=exc.kind.status,
        detail=exc.message,
        timestamp=now(),
        developer_message=failure_kind_name(exc),
        validation_issues=scan_constraint_violations(exc),
    )


def normalize(
    source: Mapping[str, Any] | BaseException, status: int = HTTPStatus.INTERNAL_SERVER_ERROR
) -> ErrorRecord:
    """Dispatch to the matching normalizer.

    ``status`` only applies to unrecognized failures; attribute bags and
    domain failures carry their own.
    """
    match source:
        case Mapping():
            return normalize_attributes(source)
        case DomainError(kind=kind) if kind is not None:
            return normalize_domain_failure(source)
        case BaseException():
            return normalize_failure(source, int(status))
        case _:
            raise TypeError(f"cannot normalize {type(source).__name__}")
