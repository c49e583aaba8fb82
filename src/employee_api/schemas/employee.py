"""Employee request and response schemas.

Request bodies only describe shape. Value rules (salary floor, email format,
blank names) are enforced on the entity at flush time, see employee_api.validation.
"""

from datetime import datetime

from pydantic import BaseModel

from employee_api.schemas.pagination import PaginatedResponse


class EmployeeCreate(BaseModel):
    name: str | None = None
    email: str | None = None
    salary: float


class EmployeeUpdate(BaseModel):
    """Partial update: only fields present in the body are applied."""

    name: str | None = None
    email: str | None = None
    salary: float | None = None


class EmployeeResponse(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    name: str
    email: str
    salary: float
    created_at: datetime
    updated_at: datetime


EmployeeListResponse = PaginatedResponse[EmployeeResponse]
