"""
Atomic allocation of monthly complaint number suffixes.
"""

from sqlalchemy import select, update
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from complaint_engine.config.logging import get_logger
from complaint_engine.core.exceptions import RepositoryError
from complaint_engine.models.complaint.complaint_sequence import ComplaintSequence

logger = get_logger(__name__)

_UPSERT_INSERTS = {
    "postgresql": postgresql_insert,
    "sqlite": sqlite_insert,
}


class ComplaintSequenceRepository:
    """
    Issues strictly increasing values per (year, month).

    The counter row is incremented with a single UPDATE, so the row lock
    taken by that statement serializes concurrent submitters until commit.
    """

    def __init__(self, db: Session):
        self.db = db

    def next_value(self, year: int, month: int) -> int:
        try:
            self._ensure_row(year, month)
            self.db.execute(
                update(ComplaintSequence)
                .where(ComplaintSequence.year == year, ComplaintSequence.month == month)
                .values(last_value=ComplaintSequence.last_value + 1)
                .execution_options(synchronize_session=False)
            )
            value = self.db.execute(
                select(ComplaintSequence.last_value).where(
                    ComplaintSequence.year == year, ComplaintSequence.month == month
                )
            ).scalar_one()
            logger.debug(f"Allocated complaint sequence {year}-{month:02d}/{value}")
            return value
        except SQLAlchemyError as e:
            raise RepositoryError(f"Complaint number allocation failed: {str(e)}") from e

    def _ensure_row(self, year: int, month: int) -> None:
        dialect = self.db.get_bind().dialect.name
        insert = _UPSERT_INSERTS.get(dialect)

        if insert is not None:
            self.db.execute(
                insert(ComplaintSequence)
                .values(year=year, month=month, last_value=0)
                .on_conflict_do_nothing(index_elements=["year", "month"])
            )
            return

        if self.db.get(ComplaintSequence, (year, month)) is None:
            self.db.add(ComplaintSequence(year=year, month=month, last_value=0))
            self.db.flush()
