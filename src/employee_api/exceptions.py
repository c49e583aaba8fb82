"""Domain exceptions raised by services and translated by the error normalizer.

Each recognized domain failure carries a DomainFailureKind, which fixes the
title and HTTP status of the error record it produces. Anything without a
kind is reported as a generic internal error.
"""

from enum import Enum

APPLICATION_ERROR_PREFIX = "Error from a Lambda School Application "


class DomainFailureKind(Enum):
    """Recognized domain failures and the (title, status) they map to."""

    RESOURCE_NOT_FOUND = ("Resource Not Found", 404)
    RESOURCE_CONFLICT = ("Resource Conflict", 409)

    def __init__(self, title: str, status: int) -> None:
        self.title = title
        self.status = status


class DomainError(Exception):
    """Base class for all domain exceptions."""

    kind: DomainFailureKind | None = None

    def __init__(self, message: str) -> None:
        self.message = APPLICATION_ERROR_PREFIX + message
        super().__init__(self.message)


class ResourceNotFoundError(DomainError):
    """Raised when a requested entity does not exist."""

    kind = DomainFailureKind.RESOURCE_NOT_FOUND


class ResourceConflictError(DomainError):
    """Raised when an operation conflicts with existing state (e.g. duplicate email)."""

    kind = DomainFailureKind.RESOURCE_CONFLICT


class TransactionError(Exception):
    """Raised when pending changes cannot be written to the database.

    Always chained (``raise ... from``) to the failure that stopped the flush,
    so the normalizer can dig constraint violations out of it.
    """
