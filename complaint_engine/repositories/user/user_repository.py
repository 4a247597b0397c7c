"""
Read access to the principal directory.
"""

from typing import List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from complaint_engine.core.exceptions import RepositoryError
from complaint_engine.models.base.enums import ComplaintCategory, UserRole, UserStatus
from complaint_engine.models.user.user import User
from complaint_engine.repositories.base.base_repository import BaseRepository
from complaint_engine.schemas.principal import Principal


class UserRepository(BaseRepository[User]):
    """Resolves principals, agencies, staff and appellate authorities."""

    def __init__(self, db: Session):
        super().__init__(User, db)

    def resolve_principal(self, user_id: str) -> Optional[Principal]:
        """Principal for an approved user, or None."""
        user = self.find_approved(user_id)
        return Principal.from_user(user) if user else None

    def find_approved(
        self,
        user_id: str,
        roles: Optional[Sequence[UserRole]] = None,
    ) -> Optional[User]:
        """Approved user with the given id, optionally restricted to roles."""
        user = self.find_by_id(user_id)
        if user is None or user.status != UserStatus.APPROVED:
            return None
        if roles is not None and user.role not in roles:
            return None
        return user

    def find_approved_by_role(
        self,
        role: UserRole,
        department: Optional[ComplaintCategory] = None,
    ) -> List[User]:
        """Approved users of a role in stable order (oldest first)."""
        try:
            stmt = (
                select(User)
                .where(User.role == role, User.status == UserStatus.APPROVED)
                .order_by(User.created_at.asc(), User.id.asc())
            )
            if department is not None:
                stmt = stmt.where(User.department == department)
            return list(self.db.execute(stmt).scalars().all())
        except SQLAlchemyError as e:
            raise RepositoryError(f"User lookup failed: {str(e)}") from e
