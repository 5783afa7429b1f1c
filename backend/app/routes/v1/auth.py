# backend/app/routes/v1/auth.py
"""
Authentication routes.

Endpoints under /api/auth:
    POST /register   -> Student registration (account + student profile)
    POST /login      -> Email/password login; sets the session cookie
    POST /logout     -> Clears the session cookie
    GET /me          -> Current user
"""

import asyncio
import logging
from typing import NoReturn

from fastapi import APIRouter, Depends, HTTPException, Response, status

from ...api.dependencies.auth import get_current_user
from ...api.dependencies.services import get_auth_service
from ...auth import create_access_token
from ...core.exceptions import DomainException
from ...models.user import User
from ...schemas.auth import (
    LoginRequest,
    LoginResponse,
    LogoutResponse,
    StudentRegisterRequest,
    UserResponse,
)
from ...services.auth_service import AuthService
from ...utils.cookies import clear_session_cookie, set_session_cookie

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(
    payload: StudentRegisterRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> UserResponse:
    """Register a new student."""
    try:
        user = await asyncio.to_thread(
            auth_service.register_student,
            email=payload.email,
            password=payload.password,
            name=payload.name,
            phone=payload.phone,
            skill_level=payload.skill_level,
            preferences=payload.preferences,
            timezone=payload.timezone,
        )
    except DomainException as e:
        handle_domain_exception(e)
    return UserResponse.from_user(user)


@router.post("/login", response_model=LoginResponse)
async def login(
    payload: LoginRequest,
    response: Response,
    auth_service: AuthService = Depends(get_auth_service),
) -> LoginResponse:
    """
    Verify credentials and start a session.

    The token is returned in the body and also set as an HttpOnly cookie.
    """
    user = await asyncio.to_thread(auth_service.authenticate_user, payload.email, payload.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token = create_access_token(data={"sub": user.id})
    set_session_cookie(response, access_token)
    logger.info(f"User logged in: {user.id}")
    return LoginResponse(access_token=access_token, user=UserResponse.from_user(user))


@router.post("/logout", response_model=LogoutResponse)
async def logout(response: Response) -> LogoutResponse:
    clear_session_cookie(response)
    return LogoutResponse()


@router.get("/me", response_model=UserResponse)
async def read_users_me(current_user: User = Depends(get_current_user)) -> UserResponse:
    return UserResponse.from_user(current_user)
