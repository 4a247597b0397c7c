"""
Per-month counter backing complaint number allocation.
"""

from sqlalchemy import Integer
from sqlalchemy.orm import Mapped, mapped_column

from complaint_engine.models.base.base_model import Base

__all__ = ["ComplaintSequence"]


class ComplaintSequence(Base):
    """Last issued complaint number suffix for a (year, month) pair"""

    __tablename__ = "complaint_sequences"

    year: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    month: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    last_value: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<ComplaintSequence({self.year}-{self.month:02d}: {self.last_value})>"
