"""Employee data-access layer.

Query and write functions only, no business logic or HTTP concerns.
Writes flush immediately so rule violations surface inside the request that
caused them; the per-request session in get_db owns commit.
"""

from typing import Any

from sqlalchemy import func, inspect, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from employee_api.exceptions import TransactionError
from employee_api.models import Employee
from employee_api.validation import ConstraintViolationError


async def list_employees(db: AsyncSession, skip: int, limit: int) -> list[Employee]:
    """Return a page of employees ordered by id."""
    stmt = select(Employee).order_by(Employee.id).offset(skip).limit(limit)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def count_employees(db: AsyncSession) -> int:
    stmt = select(func.count(Employee.id))
    result = await db.execute(stmt)
    return result.scalar_one()


async def get_employee(db: AsyncSession, employee_id: int) -> Employee | None:
    return await db.get(Employee, employee_id)


async def get_employee_by_email(db: AsyncSession, email: str) -> Employee | None:
    stmt = select(Employee).where(Employee.email == email)
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def add_employee(db: AsyncSession, fields: dict[str, Any]) -> Employee:
    """Insert a new employee; timestamps come back with the flush."""
    employee = Employee(**fields)
    db.add(employee)
    await _flush(db, employee)
    return employee


async def update_employee(db: AsyncSession, employee: Employee, fields: dict[str, Any]) -> Employee:
    """Apply the given fields to an existing employee and flush."""
    for key, value in fields.items():
        setattr(employee, key, value)
    await _flush(db, employee)
    return employee


async def delete_employee(db: AsyncSession, employee: Employee) -> None:
    await db.delete(employee)
    await db.flush()


async def _flush(db: AsyncSession, employee: Employee) -> None:
    """Flush pending changes, wrapping write failures in a TransactionError.

    Rule violations are caught before any SQL runs, so only the offending
    changes are dropped from the session. A database-level rejection (NOT NULL,
    unique email raced past the service check) leaves the session's
    transaction unusable, so it is rolled back.
    """
    try:
        await db.flush()
    except ConstraintViolationError as exc:
        if inspect(employee).pending:
            db.expunge(employee)
        else:
            db.expire(employee)
        raise TransactionError("Could not commit transaction") from exc
    except IntegrityError as exc:
        await db.rollback()
        raise TransactionError("Could not commit transaction") from exc
