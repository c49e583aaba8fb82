"""Employee endpoints."""

from fastapi import APIRouter, Query, Response

from employee_api.dependencies import DB
from employee_api.schemas.employee import (
    EmployeeCreate,
    EmployeeListResponse,
    EmployeeResponse,
    EmployeeUpdate,
)
from employee_api.services import employee as service

router = APIRouter(prefix="/employees", tags=["employees"])


@router.get("", response_model=EmployeeListResponse, status_code=200)
async def list_employees(
    db: DB,
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
) -> EmployeeListResponse:
    result = await service.get_employees(db, skip, limit)
    return EmployeeListResponse.model_validate(result)


@router.get("/{employee_id}", response_model=EmployeeResponse)
async def get_employee(db: DB, employee_id: int) -> EmployeeResponse:
    employee = await service.get_employee(db, employee_id)
    return EmployeeResponse.model_validate(employee)


@router.post("", response_model=EmployeeResponse, status_code=201)
async def create_employee(db: DB, body: EmployeeCreate) -> EmployeeResponse:
    """Create an employee. Field rules are checked when the row is flushed."""
    employee = await service.create_employee(db, body)
    return EmployeeResponse.model_validate(employee)


@router.put("/{employee_id}", response_model=EmployeeResponse)
async def update_employee(db: DB, employee_id: int, body: EmployeeUpdate) -> EmployeeResponse:
    employee = await service.update_employee(db, employee_id, body)
    return EmployeeResponse.model_validate(employee)


@router.delete("/{employee_id}", status_code=204)
async def delete_employee(db: DB, employee_id: int) -> Response:
    await service.delete_employee(db, employee_id)
    return Response(status_code=204)
