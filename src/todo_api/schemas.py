from __future__ import annotations

from datetime import date, datetime
from typing import List, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

# Shared type for incoming deadline which can be a date, datetime, or ISO8601 string
DeadlineInput = Union[date, datetime, str]


def _parse_deadline(value: DeadlineInput) -> datetime:
    """
    Internal helper to normalize deadline input into a datetime (naive allowed).
    - If value is a string, attempt to parse via datetime.fromisoformat; if time is missing, set to 00:00.
      A trailing "Z" is read as UTC.
    - If value is a date (not datetime), convert to datetime at 00:00.
    - If value is a datetime, return as-is.
    """
    if isinstance(value, datetime):
        return value

    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, 0, 0, 0)

    if isinstance(value, str):
        s = value.strip()
        if s.endswith(("Z", "z")):
            s = s[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(s)
        except ValueError:
            try:
                d = date.fromisoformat(s)
                return datetime(d.year, d.month, d.day, 0, 0, 0)
            except ValueError as e:
                raise ValueError(
                    "Invalid deadline format. Use ISO8601 date or datetime string (e.g., '2025-01-31' or '2025-01-31T13:45:00')."
                ) from e

    raise ValueError("Invalid type for deadline; expected date, datetime, or ISO8601 string.")


def _strip_required(v: str, field: str) -> str:
    s = v.strip()
    if not (1 <= len(s) <= 200):
        raise ValueError(f"{field} length must be between 1 and 200 characters")
    return s


# PUBLIC_INTERFACE
class UserCreate(BaseModel):
    """
    Schema for creating a new user account.
    """

    model_config = ConfigDict(
        json_schema_extra={"example": {"name": "Ada Lovelace", "username": "ada"}}
    )

    name: str = Field(..., description="Display name of the user", min_length=1, max_length=200)
    username: str = Field(..., description="Unique username, sent back in the `username` header", min_length=1, max_length=200)

    @field_validator("name", "username")
    @classmethod
    def validate_text(cls, v: str, info: ValidationInfo) -> str:
        """
        Strip whitespace and enforce 1..200 length.
        """
        return _strip_required(v, info.field_name)


# PUBLIC_INTERFACE
class TodoWrite(BaseModel):
    """
    Schema for creating a todo or replacing the title and deadline of an existing one.
    """

    model_config = ConfigDict(
        json_schema_extra={"example": {"title": "Buy groceries", "deadline": "2025-02-01"}}
    )

    title: str = Field(..., description="Short title for the todo item", min_length=1, max_length=200)
    deadline: datetime = Field(
        ...,
        description="Deadline of the todo item. Accepts ISO8601 date or datetime; dates are set to 00:00",
    )

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """
        Strip whitespace and enforce 1..200 length.
        """
        return _strip_required(v, "title")

    @field_validator("deadline", mode="before")
    @classmethod
    def parse_deadline(cls, v: DeadlineInput) -> datetime:
        return _parse_deadline(v)


# PUBLIC_INTERFACE
class TodoOut(BaseModel):
    """
    Schema returned by the API for a Todo item.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "4f9c5d1e-2b7a-4c8e-9a3f-0d6b1e2c3a4b",
                "title": "Buy groceries",
                "deadline": "2025-02-01T00:00:00",
                "done": False,
                "created_at": "2025-01-25T10:15:30.123456",
            }
        }
    )

    id: str = Field(..., description="Unique identifier (UUID) of the todo item")
    title: str = Field(..., description="Short title for the todo item")
    deadline: datetime = Field(..., description="Deadline of the todo item as an ISO8601 datetime")
    done: bool = Field(..., description="Completion flag")
    created_at: datetime = Field(..., description="Creation timestamp")


# PUBLIC_INTERFACE
class UserOut(BaseModel):
    """
    Schema returned by the API for a user, including the todos it owns.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "9b2e6f0a-51c3-4d7e-8f1a-2c3d4e5f6a7b",
                "name": "Ada Lovelace",
                "username": "ada",
                "pro": False,
                "todos": [],
            }
        }
    )

    id: str = Field(..., description="Unique identifier (UUID) of the user")
    name: str = Field(..., description="Display name of the user")
    username: str = Field(..., description="Unique username")
    pro: bool = Field(..., description="True when the user is on the unlimited pro plan")
    todos: List[TodoOut] = Field(default_factory=list, description="Todos owned by the user, in creation order")
