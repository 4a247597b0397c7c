"""
Base repository with standardized create, lookup and count operations.

Provides the foundation for all domain repositories.
"""

from typing import Generic, Optional, Type, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from complaint_engine.config.logging import get_logger
from complaint_engine.core.exceptions import RepositoryError
from complaint_engine.models.base.base_model import BaseModel

logger = get_logger(__name__)

# Type variable for model classes
ModelType = TypeVar("ModelType", bound=BaseModel)


class BaseRepository(Generic[ModelType]):
    """
    Base repository with standardized operations.

    Repositories flush but never commit or roll back; the calling service
    owns the transaction.
    """

    def __init__(self, model: Type[ModelType], db: Session):
        """
        Initialize repository.

        Args:
            model: SQLAlchemy model class
            db: Database session
        """
        self.model = model
        self.db = db

    # ==================== Create Operations ====================

    def create(self, entity: ModelType) -> ModelType:
        """
        Persist a new entity.

        Args:
            entity: Entity to create

        Raises:
            RepositoryError: On integrity or database failure
        """
        try:
            self.db.add(entity)
            self.db.flush()

            logger.debug(f"Created {self.model.__name__} with id: {entity.id}")
            return entity

        except IntegrityError as e:
            raise RepositoryError(
                f"{self.model.__name__} violates a uniqueness or integrity constraint",
                details={"error": str(e.orig)},
            ) from e
        except SQLAlchemyError as e:
            raise RepositoryError(f"Create failed: {str(e)}") from e

    # ==================== Read Operations ====================

    def find_by_id(self, id: str) -> Optional[ModelType]:
        """Find entity by primary key, or None."""
        try:
            return self.db.get(self.model, id)
        except SQLAlchemyError as e:
            raise RepositoryError(f"Find by ID failed: {str(e)}") from e

    def count(self, *conditions) -> int:
        """Count rows matching the given SQL conditions."""
        try:
            stmt = select(func.count()).select_from(self.model)
            if conditions:
                stmt = stmt.where(*conditions)
            return self.db.execute(stmt).scalar_one()
        except SQLAlchemyError as e:
            raise RepositoryError(f"Count failed: {str(e)}") from e
