"""
Tests for filing, approving and reminding on letters of appeal.

Filing order is upload, then insert, then notify. Each failure point is
checked for what it leaves behind.
"""
import os
import pytest
from datetime import date
from unittest.mock import MagicMock, patch

from sqlalchemy.exc import OperationalError

from app.models.db_models import NotificationDB, ReportKind, SubmissionDB, SubmissionStatus
from app.models.ssot import AppealState
from app.services.appeals import AppealService, AppealStateMachine
from app.services.errors import (
    ConflictError, NotFoundError, PermissionDeniedError, PersistenceError, UploadError, ValidationError,
)

LETTER = b"%PDF-1.4 letter of appeal"


@pytest.fixture
def event(make_event):
    return make_event()


@pytest.fixture
def service(db_session, storage):
    return AppealService(db_session, storage)


def _notifications(db_session, target=None):
    query = db_session.query(NotificationDB)
    if target:
        query = query.filter(NotificationDB.target_org == target)
    return query.all()


# =============================================================================
# TEST: FILING
# =============================================================================

class TestFileAppeal:

    def test_owner_files_appeal(self, db_session, service, storage, event):
        submission = service.file_appeal("AO", event.id, ReportKind.ACCOMPLISHMENT, "letter.pdf", LETTER)

        assert submission.submission_type == "Letter of Appeal"
        assert submission.activity_title == "Letter of Appeal - Accomplishment Report"
        assert submission.submitted_to == "LCO"
        assert submission.status == SubmissionStatus.PENDING.value
        assert submission.event_id == event.id
        assert submission.report_kind == "accomplishment"
        assert submission.storage_key.startswith("AO_appeal_")
        assert submission.storage_key.endswith(".pdf")
        assert submission.file_url == f"http://files.test/{submission.storage_key}"
        assert storage.list("AO_appeal_") == [submission.storage_key]

        notices = _notifications(db_session, "LCO")
        assert [n.event_title for n in notices] == ["Letter of Appeal Submitted"]

    def test_state_moves_to_pending_and_observed(self, service, event):
        service.file_appeal("AO", event.id, ReportKind.ACCOMPLISHMENT, "letter.pdf", LETTER)

        assert service.state_for("AO", event.id, ReportKind.ACCOMPLISHMENT).state == AppealState.APPEAL_SUBMITTED_PENDING
        assert service.state_for("LCO", event.id, ReportKind.ACCOMPLISHMENT).state == AppealState.OBSERVED_BY_REVIEWER
        assert service.state_for("AO", event.id, ReportKind.LIQUIDATION).state == AppealState.CAN_FILE_APPEAL

    def test_missing_file_writes_nothing(self, db_session, service, event):
        with pytest.raises(ValidationError) as exc_info:
            service.file_appeal("AO", event.id, ReportKind.ACCOMPLISHMENT, None, None)

        assert exc_info.value.invalid_fields == ["file"]
        assert db_session.query(SubmissionDB).count() == 0
        assert _notifications(db_session) == []

    def test_non_owner_refused(self, service, event):
        with pytest.raises(PermissionDeniedError):
            service.file_appeal("LCO", event.id, ReportKind.ACCOMPLISHMENT, "letter.pdf", LETTER)

    def test_unrelated_org_cannot_see_deadline(self, service, event):
        with pytest.raises(NotFoundError):
            service.file_appeal("GSC", event.id, ReportKind.ACCOMPLISHMENT, "letter.pdf", LETTER)

    def test_second_appeal_refused(self, db_session, service, event):
        service.file_appeal("AO", event.id, ReportKind.ACCOMPLISHMENT, "letter.pdf", LETTER)
        with pytest.raises(ConflictError):
            service.file_appeal("AO", event.id, ReportKind.ACCOMPLISHMENT, "again.pdf", LETTER)
        assert db_session.query(SubmissionDB).count() == 1

    def test_upload_failure_writes_nothing(self, db_session, event):
        """No row and no notification when storage rejects the file."""
        storage = MagicMock()
        storage.upload.side_effect = UploadError("bucket unavailable")
        service = AppealService(db_session, storage)

        with pytest.raises(UploadError):
            service.file_appeal("AO", event.id, ReportKind.ACCOMPLISHMENT, "letter.pdf", LETTER)

        assert db_session.query(SubmissionDB).count() == 0
        assert _notifications(db_session) == []

    def test_insert_failure_orphans_upload(self, db_session, service, storage, event):
        """The uploaded object stays behind and no notification is sent."""
        failure = OperationalError("INSERT INTO submissions", {}, Exception("database unavailable"))
        with patch.object(db_session, "commit", side_effect=failure):
            with pytest.raises(PersistenceError):
                service.file_appeal("AO", event.id, ReportKind.ACCOMPLISHMENT, "letter.pdf", LETTER)

        assert db_session.query(SubmissionDB).count() == 0
        assert _notifications(db_session) == []
        assert len(storage.list("AO_appeal_")) == 1
        assert os.path.exists(os.path.join(storage.base_path, storage.list("AO_appeal_")[0]))

    def test_file_without_extension(self, service, event):
        submission = service.file_appeal("AO", event.id, ReportKind.LIQUIDATION, "letter", LETTER)
        assert submission.storage_key.endswith(".bin")


# =============================================================================
# TEST: APPROVAL
# =============================================================================

class TestApproveAppeal:

    def test_reviewer_approves_with_override(self, db_session, service, event):
        appeal = service.file_appeal("AO", event.id, ReportKind.ACCOMPLISHMENT, "letter.pdf", LETTER)

        updated = service.approve_appeal("LCO", appeal.id, date(2024, 3, 20))

        assert updated.accomplishment_deadline_override == date(2024, 3, 20)
        assert updated.liquidation_deadline_override is None
        assert db_session.get(SubmissionDB, appeal.id).status == SubmissionStatus.APPROVED.value

        entry = service.get_entry("AO", event.id, ReportKind.ACCOMPLISHMENT)
        assert entry.due_date == date(2024, 3, 20)
        assert service.state_for("AO", event.id, ReportKind.ACCOMPLISHMENT).state == AppealState.APPEAL_APPROVED

        notices = _notifications(db_session, "AO")
        assert [n.event_title for n in notices] == ["Appeal Approved"]
        assert "2024-03-20" in notices[0].event_description

    def test_only_routed_reviewer_approves(self, db_session, service, event):
        appeal = service.file_appeal("AO", event.id, ReportKind.ACCOMPLISHMENT, "letter.pdf", LETTER)
        with pytest.raises(PermissionDeniedError):
            service.approve_appeal("OSLD", appeal.id, date(2024, 3, 20))
        db_session.refresh(event)
        assert event.accomplishment_deadline_override is None

    def test_unknown_appeal(self, service):
        with pytest.raises(NotFoundError):
            service.approve_appeal("LCO", "missing", date(2024, 3, 20))

    def test_deleted_event(self, db_session, service, event):
        appeal = service.file_appeal("AO", event.id, ReportKind.ACCOMPLISHMENT, "letter.pdf", LETTER)
        db_session.delete(event)
        db_session.commit()
        with pytest.raises(NotFoundError):
            service.approve_appeal("LCO", appeal.id, date(2024, 3, 20))


# =============================================================================
# TEST: REMINDERS
# =============================================================================

class TestNotifyOrganization:

    def test_oversight_reminds_owner(self, db_session, service, event):
        notification = service.notify_organization("LCO", event.id, ReportKind.LIQUIDATION)

        assert notification.target_org == "AO"
        assert notification.created_by == "LCO"
        assert notification.event_title == "Reminder: Liquidation Report Due Today"
        assert "League of Campus Organization" in notification.event_description

    def test_reminder_allowed_while_observing(self, service, event):
        service.file_appeal("AO", event.id, ReportKind.LIQUIDATION, "letter.pdf", LETTER)
        assert service.notify_organization("LCO", event.id, ReportKind.LIQUIDATION).target_org == "AO"

    def test_repeat_reminder_returns_existing(self, db_session, service, event):
        first = service.notify_organization("LCO", event.id, ReportKind.LIQUIDATION)
        again = service.notify_organization("LCO", event.id, ReportKind.LIQUIDATION)

        assert again.id == first.id
        reminders = db_session.query(NotificationDB).filter(
            NotificationDB.event_title == "Reminder: Liquidation Report Due Today"
        )
        assert reminders.count() == 1

    def test_reminders_counted_per_viewer_and_kind(self, db_session, service, event):
        service.notify_organization("LCO", event.id, ReportKind.LIQUIDATION)
        service.notify_organization("LCO", event.id, ReportKind.ACCOMPLISHMENT)
        service.notify_organization("OSLD", event.id, ReportKind.LIQUIDATION)

        assert db_session.query(NotificationDB).filter(NotificationDB.target_org == "AO").count() == 3

    def test_owner_cannot_remind_itself(self, service, event):
        with pytest.raises(PermissionDeniedError):
            service.notify_organization("AO", event.id, ReportKind.LIQUIDATION)

    def test_reminder_failure_surfaces(self, db_session, service, event):
        failure = OperationalError("INSERT INTO notifications", {}, Exception("database unavailable"))
        with patch.object(db_session, "commit", side_effect=failure):
            with pytest.raises(PersistenceError):
                service.notify_organization("LCO", event.id, ReportKind.LIQUIDATION)


# =============================================================================
# TEST: STORED STATE FOLLOWS THE PANEL TRANSITIONS
# =============================================================================

class TestPanelContract:

    def test_service_lands_where_panel_expects(self, service, event):
        machine = AppealStateMachine()
        state = service.state_for("AO", event.id, ReportKind.ACCOMPLISHMENT).state
        assert state == AppealState.CAN_FILE_APPEAL

        form = machine.transition(state, "accept")
        appeal = service.file_appeal("AO", event.id, ReportKind.ACCOMPLISHMENT, "letter.pdf", LETTER)
        state = service.state_for("AO", event.id, ReportKind.ACCOMPLISHMENT).state
        assert state == machine.transition(form, "submit")

        service.approve_appeal("LCO", appeal.id, date(2024, 3, 20))
        state = service.state_for("AO", event.id, ReportKind.ACCOMPLISHMENT).state
        assert state == machine.transition(AppealState.APPEAL_SUBMITTED_PENDING, "approve")
        assert machine.is_terminal_state(state)
