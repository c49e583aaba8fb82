"""Error response schemas.

Every failing request gets the same body, built by employee_api.normalizer::

    {
        "title": "Resource Not Found",
        "status": 404,
        "detail": "Error from a Lambda School Application Employee id 9999 not found",
        "timestamp": "2026-10-18 14:03:12",
        "developerMessage": "employee_api.exceptions.ResourceNotFoundError",
        "errors": []
    }

Keys are emitted in field declaration order.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class FieldIssue(BaseModel):
    """One field rule violation: the offending value as a string, and why."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str


class ErrorRecord(BaseModel):
    """Canonical error envelope returned for every failing request."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str
    status: int = Field(ge=100, le=599)
    detail: str | None = None
    timestamp: datetime
    developer_message: str | None = Field(default=None, alias="developerMessage")
    validation_issues: list[FieldIssue] = Field(default_factory=list, alias="errors")

    @field_validator("timestamp", mode="before")
    @classmethod
    def _parse_timestamp(cls, value: Any) -> Any:
        if isinstance(value, str):
            try:
                return datetime.strptime(value, TIMESTAMP_FORMAT)
            except ValueError:
                return value
        return value

    @field_serializer("timestamp")
    def _format_timestamp(self, value: datetime) -> str:
        return value.strftime(TIMESTAMP_FORMAT)

    def to_json(self) -> dict[str, Any]:
        """Body for the HTTP response, with the public key names."""
        return self.model_dump(mode="json", by_alias=True)
