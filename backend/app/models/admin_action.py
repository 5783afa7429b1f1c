# backend/app/models/admin_action.py
"""Audit log of actions taken by administrators."""

from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Index, String
from sqlalchemy.orm import relationship
import ulid

from ..database import Base


class AdminAction(Base):
    """
    One row per admin action (approve/reject/delete).

    ``target_id`` is not a foreign key so the log survives deletion of the
    target.
    """

    __tablename__ = "admin_actions"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    admin_id = Column(String(26), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    action = Column(String(50), nullable=False)
    target_type = Column(String(50), nullable=False)
    target_id = Column(String(26), nullable=False)
    details = Column(JSON, nullable=True)
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )

    admin = relationship("User", foreign_keys=[admin_id])

    __table_args__ = (Index("idx_admin_actions_created", "created_at"),)
