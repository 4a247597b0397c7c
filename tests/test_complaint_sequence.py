import re
from datetime import datetime, timezone

from sqlalchemy import select

from complaint_engine.core.constants import COMPLAINT_NUMBER_PATTERN
from complaint_engine.models.complaint.complaint_sequence import ComplaintSequence
from complaint_engine.repositories.complaint.complaint_sequence_repository import ComplaintSequenceRepository
from complaint_engine.services.complaint.complaint_service import format_complaint_number


def test_values_increase_per_month(db_session):
    repo = ComplaintSequenceRepository(db_session)

    assert [repo.next_value(2025, 3) for _ in range(3)] == [1, 2, 3]
    assert repo.next_value(2025, 4) == 1
    assert repo.next_value(2026, 3) == 1
    assert repo.next_value(2025, 3) == 4


def test_counter_survives_commit(db_session):
    repo = ComplaintSequenceRepository(db_session)
    repo.next_value(2025, 3)
    db_session.commit()

    assert repo.next_value(2025, 3) == 2
    db_session.rollback()

    row = db_session.scalars(select(ComplaintSequence)).one()
    assert (row.year, row.month, row.last_value) == (2025, 3, 1)


def test_number_format():
    issued = datetime(2025, 3, 14, tzinfo=timezone.utc)

    assert format_complaint_number(issued, 7) == "CMP-25-03-0007"
    assert format_complaint_number(issued, 12345) == "CMP-25-03-12345"
    assert re.match(COMPLAINT_NUMBER_PATTERN, format_complaint_number(issued, 1))
    assert not re.match(COMPLAINT_NUMBER_PATTERN, "CMP-2025-03-0001")


def test_month_rollover_restarts_numbering(submit, services):
    first = submit()
    services.complaints().now = lambda: datetime(2025, 4, 1, 0, 5, tzinfo=timezone.utc)

    second = submit()

    assert first.complaint_number == "CMP-25-03-0001"
    assert second.complaint_number == "CMP-25-04-0001"
