"""
Response models for the HTTP API.

Built from ORM rows (``from_attributes``) and serialized with camelCase keys.
Timestamps are stored as naive UTC and rendered as ISO 8601 with a ``Z``.
"""

from datetime import datetime
from typing import Annotated, Optional, List, Dict, Any
from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

from ..utils.datetime_utils import to_naive_utc


def _iso_utc(dt: datetime) -> str:
    return to_naive_utc(dt).isoformat(timespec="milliseconds") + "Z"


UtcDatetime = Annotated[datetime, PlainSerializer(_iso_utc, return_type=str, when_used="json")]


class ResponseModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class UserPublic(ResponseModel):
    """Account data safe to return to the client (no password hash)."""
    id: int
    email: str
    name: str
    role: str


class AuthResponse(ResponseModel):
    token: str
    user: UserPublic


class CurrentUserResponse(ResponseModel):
    user: UserPublic


class EmployeeResponse(ResponseModel):
    id: int
    user_id: int
    name: str
    position: Optional[str] = None
    telegram_tag: Optional[str] = None
    created_at: UtcDatetime


class TaskHistoryEntry(ResponseModel):
    timestamp: UtcDatetime
    action: str
    changes: Dict[str, Any] = Field(default_factory=dict)


class TaskResponse(ResponseModel):
    """Task with its assignee embedded and full change history."""
    id: int
    user_id: int
    employee_id: int
    employee: Optional[EmployeeResponse] = None
    title: str
    description: Optional[str] = None
    deadline: UtcDatetime
    priority: str
    status: str
    result: Optional[str] = None
    completed_at: Optional[UtcDatetime] = None
    history: List[TaskHistoryEntry] = Field(default_factory=list)
    created_at: UtcDatetime
    updated_at: UtcDatetime


class ConfigResponse(ResponseModel):
    user_id: int
    bot_token: str = ""
    chat_id: str = ""


class StatsResponse(ResponseModel):
    total: int = 0
    new: int = 0
    in_progress: int = 0
    completed: int = 0
    overdue: int = 0


class MessageResponse(ResponseModel):
    message: str
