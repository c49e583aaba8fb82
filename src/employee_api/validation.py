"""Entity field rules checked at flush time.

Rules are declared on mapped columns through ``info={"constraints": [...]}``::

    salary: Mapped[float] = mapped_column(info={"constraints": [Min(100000.0)]})

A ``before_flush`` listener checks every new or modified entity in the session
and raises ConstraintViolationError before any SQL is emitted. Request schemas
carry no value rules, so bad data reaches persistence and fails there.
"""

import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from sqlalchemy import event, inspect
from sqlalchemy.orm import Session, UOWTransaction

CONSTRAINTS_KEY = "constraints"


class Constraint(Protocol):
    def check(self, value: Any) -> str | None:
        """Return a violation message, or None when the value is acceptable."""
        ...


@dataclass(frozen=True)
class NotNull:
    message: str = "must not be null"

    def check(self, value: Any) -> str | None:
        return self.message if value is None else None


@dataclass(frozen=True)
class NotBlank:
    message: str = "must not be blank"

    def check(self, value: Any) -> str | None:
        if value is None or not str(value).strip():
            return self.message
        return None


@dataclass(frozen=True)
class Size:
    """String length bounds, inclusive. None is left to NotBlank."""

    min: int = 0
    max: int = 2**31 - 1

    def check(self, value: Any) -> str | None:
        if value is None or self.min <= len(value) <= self.max:
            return None
        return f"size must be between {self.min} and {self.max}"


@dataclass(frozen=True)
class Min:
    value: float

    def check(self, value: Any) -> str | None:
        if value is None or value >= self.value:
            return None
        return f"must be greater than or equal to {self.value}"


_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


@dataclass(frozen=True)
class Email:
    message: str = "must be a well-formed email address"

    def check(self, value: Any) -> str | None:
        if value is None or _EMAIL_RE.match(value):
            return None
        return self.message


@dataclass(frozen=True)
class Violation:
    """One failed rule on one entity attribute."""

    field: str
    invalid_value: Any
    message: str


class ConstraintViolationError(Exception):
    """Raised when one or more entities break their declared field rules."""

    def __init__(self, violations: Sequence[Violation]) -> None:
        self.violations = list(violations)
        summary = ", ".join(f"{v.field}: {v.message}" for v in self.violations)
        super().__init__(f"Validation failed: {summary}")


def validate_entity(entity: object) -> list[Violation]:
    """Check an ORM instance against the rules declared on its columns.

    Violations come out in column order, then in the order the rules were
    declared on each column.
    """
    violations: list[Violation] = []
    for attr in inspect(entity).mapper.column_attrs:
        rules: Sequence[Constraint] = attr.columns[0].info.get(CONSTRAINTS_KEY, ())
        value = getattr(entity, attr.key)
        for rule in rules:
            message = rule.check(value)
            if message is not None:
                violations.append(Violation(attr.key, value, message))
    return violations


@event.listens_for(Session, "before_flush")
def _validate_before_flush(
    session: Session, _flush_context: UOWTransaction, _instances: object
) -> None:
    pending = [*session.new, *(obj for obj in session.dirty if session.is_modified(obj))]
    violations = [violation for entity in pending for violation in validate_entity(entity)]
    if violations:
        raise ConstraintViolationError(violations)
