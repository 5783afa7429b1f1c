"""
Helpers for working with SQLAlchemy sessions in a dialect-agnostic way.
"""

from __future__ import annotations

from sqlalchemy.orm import Session


def get_dialect_name(session: Session, default: str = "sqlite") -> str:
    """
    Return the SQLAlchemy dialect name of the engine bound to ``session``.

    Falls back to ``default`` when the session has no bind.
    """
    bind = session.get_bind()
    if bind is None:
        return default
    return bind.dialect.name or default


def is_postgres(session: Session) -> bool:
    return get_dialect_name(session) == "postgresql"
