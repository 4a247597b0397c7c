"""
Base model configuration for SQLAlchemy ORM.

Provides the declarative base and an abstract model carrying the
UUID primary key and dictionary conversion shared by every table.
"""

import enum
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Type
from uuid import uuid4

from sqlalchemy import Enum as SAEnum
from sqlalchemy import String
from sqlalchemy.orm import Mapped, declarative_base, mapped_column

# Create declarative base
Base = declarative_base()


def utc_now() -> datetime:
    """Timezone-aware current time used for every stored timestamp"""
    return datetime.now(timezone.utc)


def enum_column(enum_cls: Type[enum.Enum], name: str) -> SAEnum:
    """Enum column type storing the member values rather than member names"""
    return SAEnum(
        enum_cls,
        name=name,
        values_callable=lambda members: [member.value for member in members],
        native_enum=False,
        validate_strings=True,
    )


class BaseModel(Base):
    """
    Abstract base model with common fields and methods.
    """

    __abstract__ = True

    # Primary key column - present in all models
    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
        nullable=False,
        comment="Primary key (UUID)"
    )

    def to_dict(self, exclude: Optional[List[str]] = None) -> Dict[str, Any]:
        """
        Convert model instance to dictionary.

        Args:
            exclude: List of field names to exclude

        Returns:
            Dictionary representation of the model
        """
        exclude = exclude or []
        result = {}

        for column in self.__table__.columns:
            if column.name in exclude:
                continue
            value = getattr(self, column.key)

            if isinstance(value, datetime):
                result[column.name] = value.isoformat()
            elif isinstance(value, enum.Enum):
                result[column.name] = value.value
            else:
                result[column.name] = value

        return result

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(id={self.id})>"
