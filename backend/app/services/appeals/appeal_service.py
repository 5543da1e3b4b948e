"""
Appeal Service

Persistence side of the appeal lifecycle: filing a Letter of Appeal,
approving it with a replacement due date, and reminder notifications from
non-owners.

Filing order is upload → insert → notify. A failed upload writes nothing.
A failed insert after a successful upload leaves the uploaded object
orphaned. The notification is only attempted once the insert has succeeded.
"""
import logging
import time
from datetime import date
from typing import Optional
from uuid import uuid4

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.db_models import (
    EventDB, NotificationDB, ReportKind, SubmissionDB, SubmissionStatus, SubmissionType,
)
from app.models.ssot import AppealAction, AppealDecision, DeadlineEntry
from app.services.deadlines.generator import DeadlineEngine
from app.services.errors import (
    ConflictError, NotFoundError, PermissionDeniedError, PersistenceError, ValidationError,
)
from app.services.notifications import NotificationDispatcher
from app.services.routing import display_name, resolve_appeal_reviewer
from app.services.storage import ObjectStorage, appeal_storage_key
from .lifecycle import resolve_state

logger = logging.getLogger(__name__)


class AppealService:
    """
    Files and decides letters of appeal against report deadlines.

    Holds no lifecycle state of its own; every decision is re-resolved from
    stored submissions and override dates.
    """

    def __init__(self, db_session: Session, storage: Optional[ObjectStorage] = None):
        """Initialize with database session."""
        self.db = db_session
        self.storage = storage or ObjectStorage()
        self.deadlines = DeadlineEngine(db_session)
        self.notifications = NotificationDispatcher(db_session)

    # =========================================================================
    # READ
    # =========================================================================

    def _appeals_for_event(self, event_id: str):
        return self.db.query(SubmissionDB).filter(
            SubmissionDB.submission_type == SubmissionType.LETTER_OF_APPEAL.value,
            SubmissionDB.event_id == event_id,
        ).all()

    def get_entry(self, viewer: str, event_id: str, kind: ReportKind) -> DeadlineEntry:
        entry = self.deadlines.get_entry(viewer, event_id, kind)
        if entry is None:
            raise NotFoundError(f"No {kind.value} deadline for event {event_id}")
        return entry

    def state_for(self, viewer: str, event_id: str, kind: ReportKind) -> AppealDecision:
        """Resolve the viewer's appeal state for one deadline."""
        entry = self.get_entry(viewer, event_id, kind)
        return resolve_state(viewer, entry, self._appeals_for_event(event_id))

    # =========================================================================
    # FILE
    # =========================================================================

    def file_appeal(
        self,
        org: str,
        event_id: str,
        kind: ReportKind,
        file_name: Optional[str],
        content: Optional[bytes],
    ) -> SubmissionDB:
        """
        File a Letter of Appeal for a missed deadline.

        Only the deadline owner may file, once per event and kind.

        Raises:
            ValidationError: No file given. Nothing is written.
            UploadError: Storage write failed. Nothing is written.
            PersistenceError: Insert failed after upload; the object is orphaned.
        """
        if not file_name or not content:
            raise ValidationError({"file": True}, "Please attach the Letter of Appeal")

        entry = self.get_entry(org, event_id, kind)
        decision = resolve_state(org, entry, self._appeals_for_event(event_id))
        if not decision.is_owner:
            logger.warning(f"{org} attempted to appeal {kind.value} deadline of {entry.target_organization}")
            raise PermissionDeniedError("Only the organization that owns the deadline can file an appeal")
        if not decision.offers(AppealAction.FILE_APPEAL):
            raise ConflictError("An appeal was already filed or approved for this deadline")

        reviewer = resolve_appeal_reviewer(org).value
        key = appeal_storage_key(org, file_name, int(time.time() * 1000))

        # Raises UploadError before any row exists
        storage_key, public_url = self.storage.upload(key, content)

        submission = SubmissionDB(
            id=str(uuid4()),
            organization=org,
            submission_type=SubmissionType.LETTER_OF_APPEAL.value,
            activity_title=f"Letter of Appeal - {kind.label} Report",
            file_url=public_url,
            file_name=file_name,
            storage_key=storage_key,
            status=SubmissionStatus.PENDING.value,
            submitted_to=reviewer,
            event_id=event_id,
            report_kind=kind.value,
        )
        try:
            self.db.add(submission)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Appeal insert for {org} failed; uploaded object {storage_key} is orphaned: {e}")
            raise PersistenceError("Failed to submit appeal. Please try again.") from e

        logger.info(f"{org} filed {kind.value} appeal {submission.id} for event {event_id} to {reviewer}")

        self.notifications.notify_quietly(
            reviewer,
            "Letter of Appeal Submitted",
            f"{org} has submitted a Letter of Appeal for {kind.label} Report. Please review it.",
            org,
            event_id=event_id,
        )
        return submission

    # =========================================================================
    # DECIDE
    # =========================================================================

    def approve_appeal(self, reviewer: str, submission_id: str, override_date: date) -> EventDB:
        """
        Approve an appeal and set the replacement due date on its event.

        Only the organization the appeal was routed to may approve it.
        """
        submission = self.db.query(SubmissionDB).filter(SubmissionDB.id == submission_id).first()
        if submission is None or submission.submission_type != SubmissionType.LETTER_OF_APPEAL.value:
            raise NotFoundError(f"Appeal {submission_id} not found")
        if submission.submitted_to != reviewer:
            logger.warning(f"{reviewer} attempted to approve appeal {submission_id} sent to {submission.submitted_to}")
            raise PermissionDeniedError("Only the receiving organization can approve this appeal")

        event = self.db.query(EventDB).filter(EventDB.id == submission.event_id).first()
        if event is None:
            raise NotFoundError(f"Event {submission.event_id} no longer exists")

        kind = ReportKind(submission.report_kind)
        try:
            submission.status = SubmissionStatus.APPROVED.value
            event.set_override(kind, override_date)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to approve appeal {submission_id}: {e}")
            raise PersistenceError("Failed to approve appeal") from e

        logger.info(f"{reviewer} approved {kind.value} appeal {submission_id}; new due date {override_date.isoformat()}")

        self.notifications.notify_quietly(
            submission.organization,
            "Appeal Approved",
            f"The Appeal you submitted got approved. Please submit {kind.label} Report on the submission page "
            f"by {override_date.isoformat()} or your account will be on hold.",
            reviewer,
            event_id=event.id,
        )
        return event

    # =========================================================================
    # REMIND
    # =========================================================================

    def notify_organization(self, viewer: str, event_id: str, kind: ReportKind):
        """
        Reminder from a non-owner viewer to the deadline owner.

        One reminder per viewer, event and kind: a repeat returns the one
        already on file.
        """
        entry = self.get_entry(viewer, event_id, kind)
        decision = resolve_state(viewer, entry, self._appeals_for_event(event_id))
        if not decision.offers(AppealAction.NOTIFY_ORGANIZATION):
            raise PermissionDeniedError("Reminders are sent to other organizations, not your own")

        title = f"Reminder: {kind.label} Report Due Today"
        existing = self.db.query(NotificationDB).filter(
            NotificationDB.target_org == entry.target_organization,
            NotificationDB.created_by == viewer,
            NotificationDB.event_id == event_id,
            NotificationDB.event_title == title,
        ).first()
        if existing is not None:
            logger.info(f"{viewer} already reminded {entry.target_organization} of {kind.value} deadline for event {event_id}")
            return existing

        created = self.notifications.notify(
            entry.target_organization,
            title,
            f"{display_name(viewer)} is reminding you that today is the deadline for the submission of {kind.label} report.",
            viewer,
            event_id=event_id,
        )
        logger.info(f"{viewer} reminded {entry.target_organization} of {kind.value} deadline for event {event_id}")
        return created[0]
