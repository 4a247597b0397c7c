import pytest
from sqlalchemy import select

from complaint_engine.config.settings import Settings
from complaint_engine.core.exceptions import RepositoryError
from complaint_engine.models.base.enums import ComplaintStatus, UserStatus
from complaint_engine.models.complaint.complaint import Complaint
from complaint_engine.models.complaint.complaint_history import ComplaintHistory
from complaint_engine.services.base.service_factory import ServiceFactory
from complaint_engine.services.base.service_result import ErrorCode


def history_statuses(detail):
    return [entry.status for entry in detail.history]


class TestSubmission:

    def test_first_complaint_of_month(self, submit, users, gateway):
        detail = submit()

        assert detail.complaint_number == "CMP-25-03-0001"
        assert detail.status == ComplaintStatus.PENDING
        assert detail.reporter_id == users["resident"].id
        assert len(detail.history) == 1
        assert detail.history[0].note == "Complaint submitted"
        assert detail.history[0].sequence == 1
        assert gateway.titles_for(users["electrical_admin"].id) == ["New Complaint Received"]
        assert gateway.titles_for(users["civil_admin"].id) == []

    def test_numbers_increase_within_month(self, submit):
        numbers = [submit().complaint_number for _ in range(3)]

        assert numbers == ["CMP-25-03-0001", "CMP-25-03-0002", "CMP-25-03-0003"]

    def test_misc_complaints_notify_super_admins(self, submit, users, gateway):
        submit(category="Misc", subcategory="Security")

        recipients = {n["recipient_id"] for n in gateway.sent}
        assert recipients == {users["super_admin"].id, users["second_super_admin"].id}

    def test_inactive_resource_rejected(self, services, principals, resources):
        result = services.complaints().submit_complaint(
            principals["resident"],
            {
                "resource_id": resources["closed_office"].id,
                "category": "Civil",
                "subcategory": "Plumbing",
                "description": "Leaking tap",
            },
        )

        assert not result.is_success
        assert result.error_code == ErrorCode.VALIDATION_ERROR

    def test_unknown_resource(self, services, principals):
        result = services.complaints().submit_complaint(
            principals["resident"],
            {
                "resource_id": "missing-resource",
                "category": "Civil",
                "subcategory": "Plumbing",
                "description": "Leaking tap",
            },
        )

        assert result.error_code == ErrorCode.NOT_FOUND

    def test_subcategory_must_match_category(self, services, principals, resources, db_session):
        result = services.complaints().submit_complaint(
            principals["resident"],
            {
                "resource_id": resources["quarter"].id,
                "category": "Electrical",
                "subcategory": "Plumbing",
                "description": "Wrong subcategory",
            },
        )

        assert result.error_code == ErrorCode.VALIDATION_ERROR
        assert db_session.scalar(select(Complaint.id)) is None

    def test_more_than_two_images_rejected(self, services, principals, resources, db_session):
        result = services.complaints().submit_complaint(
            principals["resident"],
            {
                "resource_id": resources["quarter"].id,
                "category": "Electrical",
                "subcategory": "Lighting",
                "description": "Three photos of the same bulb",
                "images": ["a.jpg", "b.jpg", "c.jpg"],
            },
        )

        assert result.error_code == ErrorCode.VALIDATION_ERROR
        assert db_session.scalar(select(Complaint.id)) is None

    def test_description_over_limit_rejected(self, services, principals, resources):
        result = services.complaints().submit_complaint(
            principals["resident"],
            {
                "resource_id": resources["quarter"].id,
                "category": "Electrical",
                "subcategory": "Lighting",
                "description": "x" * 1001,
            },
        )

        assert result.error_code == ErrorCode.VALIDATION_ERROR

    def test_intake_limits_follow_injected_settings(self, db_session, dispatcher, principals, resources):
        strict = ServiceFactory(
            db_session,
            dispatcher,
            Settings(LOG_TO_FILE=False, MAX_IMAGES_PER_COMPLAINT=1, DESCRIPTION_MAX_LENGTH=5),
        )
        base = {"resource_id": resources["quarter"].id, "category": "Electrical", "subcategory": "Lighting"}

        too_many = strict.complaints().submit_complaint(
            principals["resident"], {**base, "description": "Dark", "images": ["a.jpg", "b.jpg"]}
        )
        too_long = strict.complaints().submit_complaint(
            principals["resident"], {**base, "description": "Bulb is out"}
        )

        assert too_many.error_code == ErrorCode.VALIDATION_ERROR
        assert too_long.error_code == ErrorCode.VALIDATION_ERROR
        assert db_session.scalar(select(Complaint.id)) is None

    def test_duplicate_number_is_rolled_back_by_service(self, submit, services, principals, resources, monkeypatch):
        first = submit()
        sequence_repo = services.complaints().sequence_repo
        issue_next = sequence_repo.next_value
        monkeypatch.setattr(sequence_repo, "next_value", lambda year, month: 1)

        clash = services.complaints().submit_complaint(
            principals["resident"],
            {
                "resource_id": resources["quarter"].id,
                "category": "Electrical",
                "subcategory": "Lighting",
                "description": "Reuses an issued number",
            },
        )
        monkeypatch.setattr(sequence_repo, "next_value", issue_next)
        after = submit()

        assert clash.error_code == ErrorCode.INTERNAL_ERROR
        assert first.complaint_number == "CMP-25-03-0001"
        assert after.complaint_number == "CMP-25-03-0002"

    def test_lookup_by_number(self, submit, services, principals):
        detail = submit()

        result = services.complaints().get_complaint(principals["resident"], detail.complaint_number)

        assert result.is_success
        assert result.data.id == detail.id


class TestHappyPaths:

    def test_assign_resolve_and_close(self, submit, advance, services, principals, users, gateway):
        complaint = submit()
        advance(complaint.id, "resolved")

        result = services.feedback().submit_feedback(principals["resident"], complaint.id, 5)

        assert result.is_success
        assert result.message == "Feedback submitted and complaint closed"
        detail = result.data
        assert detail.status == ComplaintStatus.CLOSED
        assert detail.closed_at is not None
        assert detail.feedback_rating == 5
        assert detail.appellate_authority_id is None
        # staff assignment keeps the status and still records a history row
        assert history_statuses(detail) == [
            ComplaintStatus.PENDING,
            ComplaintStatus.ASSIGNED,
            ComplaintStatus.ASSIGNED,
            ComplaintStatus.RESOLVED,
            ComplaintStatus.CLOSED,
        ]
        assert "Complaint Closed" in gateway.titles_for(users["electrical_admin"].id)
        assert "Complaint Resolved" in gateway.titles_for(users["resident"].id)

    def test_assign_without_staff_then_resolve_and_close(self, submit, services, principals, users):
        complaint = submit()
        services.assignment().assign_to_agency(
            principals["electrical_admin"], complaint.id, users["staff"].id
        ).unwrap()
        services.resolution().resolve(principals["staff"], complaint.id, "Fixed").unwrap()

        detail = services.feedback().submit_feedback(principals["resident"], complaint.id, 5).unwrap()

        assert detail.status == ComplaintStatus.CLOSED
        assert len(detail.history) == 4

    def test_staff_acting_as_agency_is_not_listed(self, submit, services, principals, users):
        complaint = submit()
        services.assignment().assign_to_agency(
            principals["electrical_admin"], complaint.id, users["staff"].id
        ).unwrap()

        opened = services.complaints().get_complaint(principals["staff"], complaint.id)
        listed = services.complaints().list_complaints(principals["staff"]).unwrap()
        stats = services.analytics().stats(principals["staff"]).unwrap()

        assert opened.is_success
        assert listed.total_count == 0
        assert stats.total == 0

    def test_escalate_and_finalize(self, submit, advance, services, principals, users, gateway):
        complaint = submit()
        advance(complaint.id, "resolved")

        escalated = services.feedback().submit_feedback(
            principals["resident"], complaint.id, 1, "still broken"
        )

        assert escalated.is_success
        assert escalated.message == "Feedback submitted and complaint escalated"
        assert escalated.data.status == ComplaintStatus.ESCALATED
        assert escalated.data.escalation_reason == "still broken"
        assert escalated.data.appellate_authority_id == users["super_admin"].id
        assert gateway.titles_for(users["super_admin"].id) == ["Complaint Escalated"]

        final = services.escalation().finalize(principals["super_admin"], complaint.id, "repaired")

        assert final.is_success
        assert final.data.status == ComplaintStatus.FINAL_RESOLUTION
        assert final.data.final_resolution == "repaired"
        assert final.data.closed_at is not None
        assert final.data.history[-1].note == "Final resolution: repaired"
        assert "Final Resolution" in gateway.titles_for(users["resident"].id)

    def test_finalize_while_pending_leaves_complaint_untouched(self, submit, services, principals):
        complaint = submit()

        result = services.escalation().finalize(principals["super_admin"], complaint.id, "repaired")

        assert result.error_code == ErrorCode.INVALID_STATE
        after = services.complaints().get_complaint(principals["super_admin"], complaint.id).unwrap()
        assert after.status == ComplaintStatus.PENDING
        assert after.final_resolution is None
        assert after.version == complaint.version
        assert len(after.history) == 1


class TestFeedbackThreshold:

    @pytest.mark.parametrize(
        "rating,expected",
        [
            (1, ComplaintStatus.ESCALATED),
            (2, ComplaintStatus.ESCALATED),
            (3, ComplaintStatus.CLOSED),
            (4, ComplaintStatus.CLOSED),
            (5, ComplaintStatus.CLOSED),
        ],
    )
    def test_rating_decides_outcome(self, rating, expected, submit, advance, services, principals):
        complaint = submit()
        advance(complaint.id, "resolved")

        detail = services.feedback().submit_feedback(principals["resident"], complaint.id, rating).unwrap()

        assert detail.status == expected

    @pytest.mark.parametrize("rating", [0, 6])
    def test_rating_out_of_range(self, rating, submit, advance, services, principals):
        complaint = submit()
        advance(complaint.id, "resolved")

        result = services.feedback().submit_feedback(principals["resident"], complaint.id, rating)

        assert result.error_code == ErrorCode.VALIDATION_ERROR
        current = services.complaints().get_complaint(principals["resident"], complaint.id).unwrap()
        assert current.status == ComplaintStatus.RESOLVED

    def test_no_super_admin_leaves_authority_empty(self, submit, advance, services, principals, users, db_session):
        for key in ("super_admin", "second_super_admin"):
            users[key].status = UserStatus.REJECTED
        db_session.commit()
        complaint = submit()
        advance(complaint.id, "resolved")

        detail = services.feedback().submit_feedback(principals["resident"], complaint.id, 1).unwrap()

        assert detail.status == ComplaintStatus.ESCALATED
        assert detail.appellate_authority_id is None


class TestInvalidTransitions:

    def test_resolve_twice(self, submit, advance, services, principals):
        complaint = submit()
        advance(complaint.id, "resolved")
        before = services.complaints().get_complaint(principals["super_admin"], complaint.id).unwrap()

        result = services.resolution().resolve(principals["staff"], complaint.id, "Again")

        assert result.error_code == ErrorCode.INVALID_STATE
        after = services.complaints().get_complaint(principals["super_admin"], complaint.id).unwrap()
        assert len(after.history) == len(before.history)
        assert history_statuses(after).count(ComplaintStatus.RESOLVED) == 1
        assert after.resolution_notes == "Replaced the bulb"

    def test_resolve_pending(self, submit, services, principals):
        complaint = submit()

        result = services.resolution().resolve(principals["electrical_admin"], complaint.id, "Nothing to do")

        assert result.error_code == ErrorCode.INVALID_STATE

    def test_staff_before_agency(self, submit, services, principals, users):
        complaint = submit()

        result = services.assignment().assign_to_staff(principals["electrical_admin"], complaint.id, users["staff"].id)

        assert result.error_code == ErrorCode.INVALID_STATE

    def test_reassign_agency_rejected(self, submit, advance, services, principals, users):
        complaint = submit()
        advance(complaint.id, "assigned")

        result = services.assignment().assign_to_agency(
            principals["electrical_admin"], complaint.id, users["staff"].id
        )

        assert result.error_code == ErrorCode.INVALID_STATE

    def test_feedback_on_closed(self, submit, advance, services, principals):
        complaint = submit()
        advance(complaint.id, "resolved")
        services.feedback().submit_feedback(principals["resident"], complaint.id, 4).unwrap()

        result = services.feedback().submit_feedback(principals["resident"], complaint.id, 1)

        assert result.error_code == ErrorCode.INVALID_STATE

    @pytest.mark.parametrize("agency_key", ["resident", "pending_staff"])
    def test_agency_must_be_approved_handler(self, agency_key, submit, services, principals, users):
        complaint = submit()

        result = services.assignment().assign_to_agency(
            principals["electrical_admin"], complaint.id, users[agency_key].id
        )

        assert result.error_code == ErrorCode.NOT_FOUND

    def test_unknown_agency(self, submit, services, principals):
        complaint = submit()

        result = services.assignment().assign_to_agency(principals["electrical_admin"], complaint.id, "nobody")

        assert result.error_code == ErrorCode.NOT_FOUND

    def test_staff_must_be_maintenance_staff(self, submit, advance, services, principals, users):
        complaint = submit()
        advance(complaint.id, "assigned")

        result = services.assignment().assign_to_staff(
            principals["electrical_admin"], complaint.id, users["civil_admin"].id
        )

        assert result.error_code == ErrorCode.NOT_FOUND

    def test_unknown_complaint(self, services, principals):
        result = services.resolution().resolve(principals["super_admin"], "CMP-25-03-9999", "Done")

        assert result.error_code == ErrorCode.NOT_FOUND

    def test_blank_resolution_notes(self, submit, advance, services, principals):
        complaint = submit()
        advance(complaint.id, "staffed")

        result = services.resolution().resolve(principals["staff"], complaint.id, "   ")

        assert result.error_code == ErrorCode.VALIDATION_ERROR


class TestPermissions:

    def test_resident_cannot_assign(self, submit, services, principals, users):
        complaint = submit()

        result = services.assignment().assign_to_agency(principals["resident"], complaint.id, users["staff"].id)

        assert result.error_code == ErrorCode.INSUFFICIENT_PERMISSIONS

    def test_other_department_admin_cannot_assign(self, submit, services, principals, users):
        complaint = submit()

        result = services.assignment().assign_to_agency(principals["civil_admin"], complaint.id, users["staff"].id)

        assert result.error_code == ErrorCode.INSUFFICIENT_PERMISSIONS

    def test_unassigned_staff_cannot_resolve(self, submit, advance, services, principals):
        complaint = submit()
        advance(complaint.id, "staffed")

        result = services.resolution().resolve(principals["other_staff"], complaint.id, "Done")

        assert result.error_code == ErrorCode.INSUFFICIENT_PERMISSIONS

    def test_only_reporter_gives_feedback(self, submit, advance, services, principals):
        complaint = submit()
        advance(complaint.id, "resolved")

        for key in ("other_resident", "super_admin"):
            result = services.feedback().submit_feedback(principals[key], complaint.id, 5)
            assert result.error_code == ErrorCode.INSUFFICIENT_PERMISSIONS

    def test_only_super_admin_finalizes(self, submit, advance, services, principals):
        complaint = submit()
        advance(complaint.id, "resolved")
        services.feedback().submit_feedback(principals["resident"], complaint.id, 1).unwrap()

        result = services.escalation().finalize(principals["electrical_admin"], complaint.id, "repaired")

        assert result.error_code == ErrorCode.INSUFFICIENT_PERMISSIONS

    def test_other_resident_cannot_view(self, submit, services, principals):
        complaint = submit()

        result = services.complaints().get_complaint(principals["other_resident"], complaint.id)

        assert result.error_code == ErrorCode.INSUFFICIENT_PERMISSIONS

    def test_role_check_precedes_lookup(self, services, principals):
        result = services.escalation().finalize(principals["resident"], "missing", "repaired")

        assert result.error_code == ErrorCode.INSUFFICIENT_PERMISSIONS


class TestHistory:

    def test_history_endpoint_is_ordered(self, submit, advance, services, principals):
        complaint = submit()
        advance(complaint.id, "resolved")

        entries = services.complaints().get_history(principals["resident"], complaint.id).unwrap()

        assert [e.sequence for e in entries] == [1, 2, 3, 4]
        assert entries[-1].note == "Replaced the bulb"

    def test_history_rows_cannot_be_edited(self, submit, db_session):
        complaint = submit()
        entry = db_session.scalars(
            select(ComplaintHistory).where(ComplaintHistory.complaint_id == complaint.id)
        ).one()

        entry.note = "rewritten"
        with pytest.raises(RepositoryError):
            db_session.flush()
        db_session.rollback()

    def test_history_rows_cannot_be_deleted(self, submit, db_session):
        complaint = submit()
        entry = db_session.scalars(
            select(ComplaintHistory).where(ComplaintHistory.complaint_id == complaint.id)
        ).one()

        db_session.delete(entry)
        with pytest.raises(RepositoryError):
            db_session.flush()
        db_session.rollback()
