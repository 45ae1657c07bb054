"""Pydantic schemas for API request/response models."""

from datetime import date, datetime, time
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from timesheet_tracker.models import MAX_ROW_ID, Role


# ============================================================================
# Error schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Schema for error responses."""

    detail: str
    code: str
    fields: list[str] | None = None


# ============================================================================
# Auth schemas
# ============================================================================


class RegisterRequest(BaseModel):
    """Schema for registering a new user."""

    model_config = ConfigDict(populate_by_name=True)

    email: str = Field(min_length=1)
    password: str = Field(min_length=1)
    full_name: str = Field(alias="fullName", min_length=1)
    role: Role = Role.EMPLOYEE
    manager_id: int | None = Field(default=None, alias="managerId", gt=0, le=MAX_ROW_ID)

    @field_validator("manager_id", mode="before")
    @classmethod
    def blank_manager_is_none(cls, value: Any) -> Any:
        # Registration forms submit "" when no manager is picked
        if value == "":
            return None
        return value


class LoginRequest(BaseModel):
    """Schema for logging in."""

    email: str
    password: str


class UserResponse(BaseModel):
    """Public profile of a user."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    full_name: str
    role: Role
    manager_id: int | None = None


class TokenResponse(BaseModel):
    """Schema for register/login responses."""

    token: str
    user: UserResponse


class ManagerResponse(BaseModel):
    """Manager directory item."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    full_name: str
    email: str


# ============================================================================
# Timesheet entry schemas
# ============================================================================


class EntryCreate(BaseModel):
    """Schema for creating an entry.

    Fields are optional here so that missing ones are reported together by
    the entry service rather than one at a time by the parser.
    """

    project: str | None = None
    task_description: str | None = None
    entry_date: date | None = None
    start_time: time | None = None
    end_time: time | None = None

    @field_validator("start_time", "end_time")
    @classmethod
    def local_time_only(cls, value: time | None) -> time | None:
        # Entries are wall-clock times on entry_date; offsets would not survive storage
        if value is not None and value.tzinfo is not None:
            raise ValueError("time must not carry a timezone")
        return value


class EntryResponse(BaseModel):
    """Schema for a stored entry."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    project: str
    task_description: str | None = None
    entry_date: date
    start_time: time
    end_time: time
    status: str
    duration_hours: float
    created_at: datetime | None = None


class ReviewEntryResponse(EntryResponse):
    """Schema for an entry listed to a manager."""

    employee_name: str


class StatusUpdate(BaseModel):
    """Schema for a manager decision."""

    status: str | None = None
