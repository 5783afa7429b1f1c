"""
Password hashing and session token helpers.

Sessions are HS256 JWTs (PyJWT) whose ``sub`` is the user id. They travel in
an HttpOnly cookie or, for API clients, as a Bearer token.
"""

from datetime import datetime, timedelta, timezone
import logging
from typing import Any, Dict, Optional, cast

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
import jwt
from jwt import PyJWTError
from passlib.context import CryptContext

from .core.config import settings
from .utils.cookies import session_cookie_name

logger = logging.getLogger(__name__)

pwd_context = CryptContext(
    schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.bcrypt_rounds
)

# Pre-computed bcrypt hash used when the user doesn't exist, so login timing
# does not reveal which emails are registered.
DUMMY_HASH_FOR_TIMING_ATTACK = "$2b$12$LQv3c1yqBWVHxkd0LHAkCOYz6TtxMQJqhN8/X4.V4ferVKnNaOuJi"

oauth2_scheme_optional = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def _secret_value(secret_obj: Any) -> str:
    getter = getattr(secret_obj, "get_secret_value", None)
    if callable(getter):
        return cast(str, getter())
    return cast(str, secret_obj)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against a bcrypt hash.

    Malformed or empty hashes verify as False.
    """
    if not hashed_password:
        return False
    try:
        return bool(pwd_context.verify(plain_password, hashed_password))
    except ValueError as e:
        logger.error(f"Error verifying password: {str(e)}")
        return False


def get_password_hash(password: str) -> str:
    return str(pwd_context.hash(password))


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a signed session token.

    Args:
        data: Claims to encode; ``sub`` must be the user id
        expires_delta: Optional lifetime, defaults to the configured session length
    """
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    to_encode.update({"exp": expire, "iat": datetime.now(timezone.utc)})

    encoded_jwt = cast(
        str,
        jwt.encode(to_encode, _secret_value(settings.secret_key), algorithm=settings.algorithm),
    )
    logger.debug(f"Created access token for user: {data.get('sub')}")
    return encoded_jwt


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Decode and verify a session token.

    Raises:
        jwt.PyJWTError: If the token is malformed, tampered with or expired
    """
    payload = jwt.decode(
        token,
        _secret_value(settings.secret_key),
        algorithms=[settings.algorithm],
    )
    return cast(Dict[str, Any], payload)


def _extract_token(request: Request, bearer_token: Optional[str]) -> Optional[str]:
    if bearer_token:
        return bearer_token
    cookie_token = request.cookies.get(session_cookie_name())
    if cookie_token:
        logger.debug("Using session cookie for authentication")
    return cookie_token


async def get_current_user_id(
    request: Request, token: Optional[str] = Depends(oauth2_scheme_optional)
) -> str:
    """
    Dependency returning the user id from the session token.

    The Authorization header wins over the session cookie.

    Raises:
        HTTPException: 401 when the token is missing, invalid or expired
    """
    not_authenticated = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
        headers={"WWW-Authenticate": "Bearer"},
    )
    invalid_credentials = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    token = _extract_token(request, token)
    if not token:
        raise not_authenticated

    try:
        payload = decode_access_token(token)
    except PyJWTError as e:
        logger.warning(f"JWT validation error: {str(e)}")
        raise invalid_credentials

    user_id = payload.get("sub")
    if not isinstance(user_id, str) or not user_id:
        logger.warning("Token payload missing 'sub' field")
        raise invalid_credentials
    return user_id


async def get_current_user_id_optional(
    request: Request, token: Optional[str] = Depends(oauth2_scheme_optional)
) -> Optional[str]:
    """Like ``get_current_user_id`` but returns None instead of raising."""
    token = _extract_token(request, token)
    if not token:
        return None
    try:
        payload = decode_access_token(token)
    except PyJWTError:
        return None
    user_id = payload.get("sub")
    return user_id if isinstance(user_id, str) and user_id else None
