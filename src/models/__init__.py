from .api_validation import (
    RegisterRequest,
    LoginRequest,
    EmployeeCreate,
    EmployeeUpdate,
    TaskCreate,
    TaskUpdate,
    ConfigUpdate,
    TelegramTestRequest,
)
from .responses import (
    UserPublic,
    AuthResponse,
    CurrentUserResponse,
    EmployeeResponse,
    TaskHistoryEntry,
    TaskResponse,
    ConfigResponse,
    StatsResponse,
    MessageResponse,
)

__all__ = [
    "RegisterRequest",
    "LoginRequest",
    "EmployeeCreate",
    "EmployeeUpdate",
    "TaskCreate",
    "TaskUpdate",
    "ConfigUpdate",
    "TelegramTestRequest",
    "UserPublic",
    "AuthResponse",
    "CurrentUserResponse",
    "EmployeeResponse",
    "TaskHistoryEntry",
    "TaskResponse",
    "ConfigResponse",
    "StatsResponse",
    "MessageResponse",
]
