"""
Auth routes: registration, login and the current user.
"""

import logging

from fastapi import APIRouter, Depends, Request

from config import settings
from ..database.models import UserDB
from ..middleware.slowapi_limiter import limiter
from ..models import (
    AuthResponse,
    CurrentUserResponse,
    LoginRequest,
    RegisterRequest,
    UserPublic,
)
from ..services import AuthService
from .dependencies import get_auth_service, get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=201)
@limiter.limit(settings.auth_rate_limit)
async def register(
    request: Request,
    payload: RegisterRequest,
    auth: AuthService = Depends(get_auth_service),
):
    """Create an account and return a token for it."""
    token, user = await auth.register(payload.email, payload.password, payload.name)
    return AuthResponse(token=token, user=UserPublic.model_validate(user))


@router.post("/login", response_model=AuthResponse)
@limiter.limit(settings.auth_rate_limit)
async def login(
    request: Request,
    payload: LoginRequest,
    auth: AuthService = Depends(get_auth_service),
):
    """Exchange credentials for a token."""
    token, user = await auth.login(payload.email, payload.password)
    return AuthResponse(token=token, user=UserPublic.model_validate(user))


@router.get("/me", response_model=CurrentUserResponse)
async def me(user: UserDB = Depends(get_current_user)):
    return CurrentUserResponse(user=UserPublic.model_validate(user))
