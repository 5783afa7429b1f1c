"""Cookie utilities for consistent session handling."""
from __future__ import annotations

from fastapi import Response

from app.core.config import settings


def session_cookie_name() -> str:
    return settings.session_cookie_name or "bookapro_sid"


def set_session_cookie(response: Response, value: str, *, max_age: int | None = None) -> str:
    """
    Set the session cookie (HttpOnly, path ``/``).

    ``Secure`` and ``SameSite`` follow settings. Returns the cookie name.
    """
    name = session_cookie_name()
    response.set_cookie(
        key=name,
        value=value,
        httponly=True,
        samesite=settings.session_cookie_samesite or "lax",
        secure=bool(settings.session_cookie_secure),
        path="/",
        max_age=max_age if max_age is not None else settings.access_token_expire_minutes * 60,
    )
    return name


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=session_cookie_name(),
        path="/",
        httponly=True,
        samesite=settings.session_cookie_samesite or "lax",
        secure=bool(settings.session_cookie_secure),
    )
