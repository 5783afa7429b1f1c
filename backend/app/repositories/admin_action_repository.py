# backend/app/repositories/admin_action_repository.py
"""Admin action log repository."""

from typing import Any, Dict, List, Optional, cast

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.admin_action import AdminAction
from .base_repository import BaseRepository


class AdminActionRepository(BaseRepository[AdminAction]):
    def __init__(self, db: Session):
        super().__init__(db, AdminAction)

    def log(
        self,
        admin_id: str,
        action: str,
        target_type: str,
        target_id: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> AdminAction:
        return self.create(
            admin_id=admin_id,
            action=action,
            target_type=target_type,
            target_id=target_id,
            details=details or {},
        )

    def list_recent(self, limit: int = 100) -> List[AdminAction]:
        try:
            return cast(
                List[AdminAction],
                (
                    self.db.query(AdminAction)
                    .order_by(AdminAction.created_at.desc(), AdminAction.id.desc())
                    .limit(limit)
                    .all()
                ),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing admin actions: {str(e)}")
            raise RepositoryException(f"Failed to list admin actions: {str(e)}")
