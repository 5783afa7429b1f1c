# backend/app/api/dependencies/auth.py
"""
Authentication and authorization dependencies.

Routes depend on ``get_current_principal`` (or ``require_admin``) and hand
the resulting ``AuthenticatedUser`` to the service layer.
"""

import logging
from typing import Optional

from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from ...auth import get_current_user_id, get_current_user_id_optional
from ...models.user import User
from ...principal import AuthenticatedUser
from ...repositories.factory import RepositoryFactory
from .database import get_db

logger = logging.getLogger(__name__)


def get_current_user(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> User:
    """
    Load the user behind the session token.

    Raises:
        HTTPException: 401 if the user no longer exists or is deactivated
    """
    user = RepositoryFactory.create_user_repository(db).get_by_id(user_id)
    if user is None or not user.is_active:
        logger.warning(f"Session for unknown or inactive user: {user_id}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def get_current_principal(user: User = Depends(get_current_user)) -> AuthenticatedUser:
    return AuthenticatedUser.from_user(user)


def get_optional_principal(
    user_id: Optional[str] = Depends(get_current_user_id_optional),
    db: Session = Depends(get_db),
) -> Optional[AuthenticatedUser]:
    """The caller if a valid session is present, otherwise None."""
    if not user_id:
        return None
    user = RepositoryFactory.create_user_repository(db).get_by_id(user_id)
    if user is None or not user.is_active:
        return None
    return AuthenticatedUser.from_user(user)


def require_admin(
    principal: AuthenticatedUser = Depends(get_current_principal),
) -> AuthenticatedUser:
    """Dependency that ensures the caller has administrator privileges."""
    if not principal.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return principal
