"""
FastAPI dependencies: database session, notifier, authenticated user and
per-request services.
"""

import logging
from typing import AsyncIterator, Optional

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from ..database.models import UserDB
from ..integrations.telegram import TelegramNotifier
from ..services import (
    AuthService,
    BotConfigService,
    EmployeeService,
    StatsService,
    TaskService,
)
from ..utils.security import AuthenticationError

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


async def get_session(request: Request) -> AsyncIterator[AsyncSession]:
    """One session per request from the application's database handle."""
    async with request.app.state.database.session() as session:
        yield session


def get_notifier(request: Request) -> TelegramNotifier:
    return request.app.state.notifier


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    session: AsyncSession = Depends(get_session),
) -> UserDB:
    """Resolve the bearer token to a user, or reject with 401."""
    if credentials is None:
        raise HTTPException(status_code=401, detail="Authentication required")

    try:
        return await AuthService(session).resolve_user(credentials.credentials)
    except AuthenticationError as e:
        logger.info(f"Rejected access token: {e}")
        raise HTTPException(status_code=401, detail="Invalid or expired token")


# ==================== SERVICES ====================

def get_auth_service(session: AsyncSession = Depends(get_session)) -> AuthService:
    return AuthService(session)


def get_employee_service(
    user: UserDB = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> EmployeeService:
    return EmployeeService(session, user.id)


def get_task_service(
    user: UserDB = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
    notifier: TelegramNotifier = Depends(get_notifier),
) -> TaskService:
    return TaskService(session, user.id, notifier)


def get_bot_config_service(
    user: UserDB = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
    notifier: TelegramNotifier = Depends(get_notifier),
) -> BotConfigService:
    return BotConfigService(session, user.id, notifier)


def get_stats_service(
    user: UserDB = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> StatsService:
    return StatsService(session, user.id)
