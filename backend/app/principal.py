"""Authenticated identity passed explicitly into the service layer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from app.core.enums import RoleName

if TYPE_CHECKING:
    from app.models.user import User


@dataclass(frozen=True)
class AuthenticatedUser:
    """
    The caller of a service operation.

    Resolved once per request from the session token; services never read
    session state themselves.
    """

    id: str
    email: str
    role: RoleName

    @classmethod
    def from_user(cls, user: "User") -> "AuthenticatedUser":
        return cls(id=str(user.id), email=str(user.email), role=RoleName(user.role))

    @property
    def is_admin(self) -> bool:
        return self.role == RoleName.ADMIN

    @property
    def is_coach(self) -> bool:
        return self.role == RoleName.COACH

    @property
    def is_student(self) -> bool:
        return self.role == RoleName.STUDENT
