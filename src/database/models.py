"""
SQLAlchemy models for the TaskFlow database.

Schema includes:
- Users (tenants) with hashed passwords
- Employees owned by a user
- Tasks assigned to employees, with an append-only history log
- Per-user Telegram notification config
"""

from datetime import datetime
from typing import Optional, List, Dict, Any
from sqlalchemy import (
    String,
    Text,
    Integer,
    DateTime,
    ForeignKey,
    JSON,
    Index,
)
from sqlalchemy.orm import DeclarativeBase, relationship, Mapped, mapped_column
import enum

from ..utils.datetime_utils import utcnow


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


# ==================== ENUMS ====================

class UserRoleEnum(str, enum.Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    EMPLOYEE = "employee"


class TaskPriorityEnum(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TaskStatusEnum(str, enum.Enum):
    NEW = "new"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class HistoryActionEnum(str, enum.Enum):
    UPDATED = "updated"


# ==================== USERS ====================

class UserDB(Base):
    """Registered account. Owns every other record."""
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    role: Mapped[str] = mapped_column(String(20), default=UserRoleEnum.MANAGER.value)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)


# ==================== EMPLOYEES ====================

class EmployeeDB(Base):
    """Employee that tasks can be assigned to."""
    __tablename__ = "employees"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    position: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    telegram_tag: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    __table_args__ = (
        Index("idx_employees_user", "user_id"),
    )


# ==================== TASKS ====================

class TaskDB(Base):
    """Task assigned to an employee."""
    __tablename__ = "tasks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    employee_id: Mapped[int] = mapped_column(Integer, ForeignKey("employees.id"), nullable=False)

    # Core fields
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Classification
    priority: Mapped[str] = mapped_column(String(20), default=TaskPriorityEnum.MEDIUM.value)
    status: Mapped[str] = mapped_column(String(30), default=TaskStatusEnum.NEW.value)

    # Outcome
    result: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Timing
    deadline: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    # Relationships
    employee: Mapped["EmployeeDB"] = relationship("EmployeeDB", lazy="selectin")
    history: Mapped[List["TaskHistoryDB"]] = relationship(
        "TaskHistoryDB",
        back_populates="task",
        cascade="all, delete-orphan",
        order_by="TaskHistoryDB.id",
        lazy="selectin",
    )

    __table_args__ = (
        Index("idx_tasks_user", "user_id"),
        Index("idx_tasks_user_status", "user_id", "status"),
        Index("idx_tasks_employee", "employee_id"),
        Index("idx_tasks_deadline", "deadline"),
        Index("idx_tasks_created", "created_at"),
    )


class TaskHistoryDB(Base):
    """Append-only change log for a task. One row per update."""
    __tablename__ = "task_history"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    task_id: Mapped[int] = mapped_column(Integer, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False)

    timestamp: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    action: Mapped[str] = mapped_column(String(50), nullable=False)
    changes: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)

    task: Mapped["TaskDB"] = relationship("TaskDB", back_populates="history")

    __table_args__ = (
        Index("idx_task_history_task", "task_id"),
    )


# ==================== CONFIG ====================

class ConfigDB(Base):
    """Per-user Telegram integration settings."""
    __tablename__ = "configs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False
    )

    # bot_token is stored Fernet-encrypted when ENCRYPTION_KEY is configured
    bot_token: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    chat_id: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
