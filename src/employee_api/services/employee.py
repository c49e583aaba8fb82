"""Employee business logic.

Raises domain exceptions for missing employees and duplicate emails; field
rules are left to the persistence layer.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from employee_api.exceptions import ResourceConflictError, ResourceNotFoundError
from employee_api.models import Employee
from employee_api.repositories import employee as repo
from employee_api.schemas.employee import EmployeeCreate, EmployeeUpdate
from employee_api.schemas.pagination import Paginated


async def get_employees(db: AsyncSession, skip: int, limit: int) -> Paginated[Employee]:
    items = await repo.list_employees(db, skip, limit)
    total = await repo.count_employees(db)
    return Paginated(items=items, total=total, skip=skip, limit=limit)


async def get_employee(db: AsyncSession, employee_id: int) -> Employee:
    """Return the employee or raise ResourceNotFoundError."""
    employee = await repo.get_employee(db, employee_id)
    if employee is None:
        raise ResourceNotFoundError(f"Employee id {employee_id} not found")
    return employee


async def create_employee(db: AsyncSession, data: EmployeeCreate) -> Employee:
    await _ensure_email_free(db, data.email)
    return await repo.add_employee(db, data.model_dump())


async def update_employee(db: AsyncSession, employee_id: int, data: EmployeeUpdate) -> Employee:
    """Apply only the fields the client actually sent."""
    employee = await get_employee(db, employee_id)
    fields = data.model_dump(exclude_unset=True)
    if fields.get("email") is not None and fields["email"] != employee.email:
        await _ensure_email_free(db, fields["email"])
    return await repo.update_employee(db, employee, fields)


async def delete_employee(db: AsyncSession, employee_id: int) -> None:
    employee = await get_employee(db, employee_id)
    await repo.delete_employee(db, employee)


async def _ensure_email_free(db: AsyncSession, email: str | None) -> None:
    if email is not None and await repo.get_employee_by_email(db, email) is not None:
        raise ResourceConflictError(f"Employee email {email} already exists")
