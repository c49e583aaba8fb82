"""SQLAlchemy models.

Field rules in ``info["constraints"]`` are enforced by employee_api.validation
before every flush; the unique email index is enforced by the database.
"""

from datetime import datetime

from sqlalchemy import DateTime, Float, String, func
from sqlalchemy.orm import Mapped, mapped_column

from employee_api.db.session import Base
from employee_api.validation import CONSTRAINTS_KEY, Email, Min, NotBlank, NotNull, Size

MIN_SALARY = 100000.0


class Employee(Base):
    __tablename__ = "employees"
    # Fetch created_at/updated_at during flush; a lazy reload would need sync I/O.
    __mapper_args__ = {"eager_defaults": True}

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(
        String(100), info={CONSTRAINTS_KEY: [NotBlank(), Size(min=1, max=100)]}
    )
    email: Mapped[str] = mapped_column(
        String(255), unique=True, info={CONSTRAINTS_KEY: [NotBlank(), Email()]}
    )
    salary: Mapped[float] = mapped_column(
        Float, info={CONSTRAINTS_KEY: [NotNull(), Min(MIN_SALARY)]}
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
