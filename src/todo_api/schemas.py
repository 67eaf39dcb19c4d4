from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator

CREATE_TEXT_MESSAGE = "Text is required and cannot be empty"
UPDATE_TEXT_MESSAGE = "Text cannot be empty"
UPDATE_COMPLETED_MESSAGE = "Completed must be a boolean"
NO_FIELDS_MESSAGE = "No valid fields to update"


def _clean_text(value: Any, message: str) -> str:
    """Return the trimmed text, or raise ValueError(message) if it is not a non-empty string."""
    if not isinstance(value, str):
        raise ValueError(message)
    s = value.strip()
    if not s:
        raise ValueError(message)
    return s


def format_timestamp(value: datetime) -> str:
    """Render a timestamp as ISO-8601 UTC with millisecond precision, e.g. '2024-05-01T12:30:45.123Z'."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


# PUBLIC_INTERFACE
class TodoCreate(BaseModel):
    """
    Schema for creating a new Todo item.
    """

    model_config = ConfigDict(json_schema_extra={"example": {"text": "buy milk"}})

    # Missing text reaches validate_text as None so it gets the same message as blank text
    text: Optional[str] = Field(None, description="Todo text; surrounding whitespace is stripped", validate_default=True)

    @field_validator("text", mode="before")
    @classmethod
    def validate_text(cls, v: Any) -> str:
        """
        Require a string that is non-empty after stripping whitespace.
        """
        return _clean_text(v, CREATE_TEXT_MESSAGE)


# PUBLIC_INTERFACE
class TodoUpdate(BaseModel):
    """
    Patch for an existing Todo item.
    Both fields are optional; only provided fields will be updated, and at
    least one must be provided. Explicit nulls are rejected.
    """

    model_config = ConfigDict(
        json_schema_extra={"example": {"text": "buy oat milk", "completed": True}}
    )

    text: Optional[str] = Field(default=None, description="New todo text")
    completed: Optional[bool] = Field(default=None, description="New completion status")

    @field_validator("text", mode="before")
    @classmethod
    def validate_text(cls, v: Any) -> str:
        return _clean_text(v, UPDATE_TEXT_MESSAGE)

    @field_validator("completed", mode="before")
    @classmethod
    def validate_completed(cls, v: Any) -> bool:
        # Only real JSON booleans; no "true"/1 coercion
        if not isinstance(v, bool):
            raise ValueError(UPDATE_COMPLETED_MESSAGE)
        return v

    @model_validator(mode="after")
    def require_one_field(self) -> "TodoUpdate":
        if self.text is None and self.completed is None:
            raise ValueError(NO_FIELDS_MESSAGE)
        return self


# PUBLIC_INTERFACE
class TodoOut(BaseModel):
    """
    Schema returned by the API for a Todo item.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "text": "buy milk",
                "completed": False,
                "createdAt": "2024-05-01T12:30:45.123Z",
            }
        },
    )

    id: int = Field(..., description="Unique identifier of the todo item")
    text: str = Field(..., description="Todo text")
    completed: bool = Field(..., description="Completion status flag")
    created_at: datetime = Field(..., alias="createdAt", description="Creation timestamp (ISO-8601, UTC)")

    @field_serializer("created_at")
    def serialize_created_at(self, value: datetime) -> str:
        return format_timestamp(value)


# PUBLIC_INTERFACE
class HealthOut(BaseModel):
    """Static payload returned by the health check."""

    status: str = Field("OK", description="Service status")
    message: str = Field("Todo API is running", description="Human readable status message")
