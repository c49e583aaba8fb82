"""Generic pagination types shared by list endpoints.

PaginatedResponse[T]: Pydantic model for HTTP responses (serializable).
Paginated[T]:         plain dataclass for service-layer returns.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class PaginatedResponse(BaseModel, Generic[T]):
    """Pydantic model for paginated HTTP responses.

    ``from_attributes`` lets ``model_validate`` read a ``Paginated`` dataclass
    directly::

        EmployeeListResponse = PaginatedResponse[EmployeeResponse]
        EmployeeListResponse.model_validate(await get_employees(db, skip, limit))

    Use it at the HTTP boundary only; services return ``Paginated``.
    """

    model_config = {"from_attributes": True}

    items: list[T]
    total: int
    skip: int
    limit: int


@dataclass
class Paginated(Generic[T]):
    """Page of results plus pagination metadata, for the service layer."""

    items: list[T]
    total: int
    skip: int
    limit: int
