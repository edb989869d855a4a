"""
Pydantic models for API endpoint input validation.

Clients send camelCase field names (``employeeId``, ``telegramTag``,
``botToken``); snake_case is accepted as well. Validation failures are
reported to the client as HTTP 400.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, EmailStr
from pydantic.alias_generators import to_camel

from ..database.models import TaskPriorityEnum, TaskStatusEnum
from ..utils.datetime_utils import to_naive_utc


MAX_PASSWORD_BYTES = 72  # bcrypt limit


class RequestModel(BaseModel):
    """Base for request bodies: camelCase aliases, enum values as plain strings."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        str_strip_whitespace=True,
    )


def _require_text(v: Optional[str], field: str) -> Optional[str]:
    if v is not None and not v:
        raise ValueError(f"{field} cannot be empty")
    return v


def _normalize_deadline(v: Optional[datetime]) -> Optional[datetime]:
    return to_naive_utc(v)


# ============================================
# AUTH
# ============================================

class RegisterRequest(RequestModel):
    """Account registration."""
    email: EmailStr
    password: str = Field(..., min_length=6)
    name: str = Field(..., min_length=1, max_length=100)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v):
        return v.lower()

    @field_validator("password")
    @classmethod
    def validate_password_length(cls, v):
        if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")
        return v


class LoginRequest(RequestModel):
    """Credentials. Deliberately loose: a bad email is just a failed login."""
    email: str = Field(..., max_length=255)
    password: str = Field(..., max_length=255)


# ============================================
# EMPLOYEES
# ============================================

class EmployeeCreate(RequestModel):
    """Input validation for creating employees."""
    name: str = Field(..., min_length=1, max_length=100)
    position: Optional[str] = Field(None, max_length=100)
    telegram_tag: Optional[str] = Field(None, max_length=100)

    @field_validator("telegram_tag")
    @classmethod
    def strip_at_sign(cls, v):
        return v.lstrip("@") if v else v


class EmployeeUpdate(RequestModel):
    """Partial employee update. Only fields present in the body are applied."""
    name: Optional[str] = Field(None, max_length=100)
    position: Optional[str] = Field(None, max_length=100)
    telegram_tag: Optional[str] = Field(None, max_length=100)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return _require_text(v, "name")

    @field_validator("telegram_tag")
    @classmethod
    def strip_at_sign(cls, v):
        return v.lstrip("@") if v else v


# ============================================
# TASKS
# ============================================

class TaskCreate(RequestModel):
    """Input validation for creating tasks."""
    title: str = Field(..., min_length=1, max_length=500)
    description: Optional[str] = Field(None, max_length=5000)
    employee_id: int = Field(..., gt=0)
    deadline: datetime
    priority: TaskPriorityEnum = TaskPriorityEnum.MEDIUM
    status: TaskStatusEnum = TaskStatusEnum.NEW
    result: Optional[str] = Field(None, max_length=5000)
    completed_at: Optional[datetime] = None

    _deadline = field_validator("deadline", "completed_at")(_normalize_deadline)


class TaskUpdate(RequestModel):
    """Partial task update. Only fields present in the body are applied."""
    title: Optional[str] = Field(None, max_length=500)
    description: Optional[str] = Field(None, max_length=5000)
    employee_id: Optional[int] = Field(None, gt=0)
    deadline: Optional[datetime] = None
    priority: Optional[TaskPriorityEnum] = None
    status: Optional[TaskStatusEnum] = None
    result: Optional[str] = Field(None, max_length=5000)
    completed_at: Optional[datetime] = None

    _deadline = field_validator("deadline", "completed_at")(_normalize_deadline)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        return _require_text(v, "title")

    @field_validator("title", "employee_id", "deadline", "priority", "status")
    @classmethod
    def reject_null(cls, v, info):
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v


# ============================================
# NOTIFICATION CONFIG
# ============================================

class ConfigUpdate(RequestModel):
    """Telegram credentials to store for the caller."""
    bot_token: Optional[str] = Field(None, max_length=200)
    chat_id: Optional[str] = Field(None, max_length=100)


class TelegramTestRequest(RequestModel):
    """Credentials to send a one-off test message with."""
    bot_token: Optional[str] = Field(None, max_length=200)
    chat_id: Optional[str] = Field(None, max_length=100)
