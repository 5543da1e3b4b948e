"""
Submission Gateway

Validates and persists reports and activity requests, routes them to the
reviewer, and lets the reviewer decide them.

Key behaviors:
- Reports route through resolve_reviewer and start Pending
- Activity requests are refused outright while the filer's account is On Hold
- has_pending_activity_request is an advisory pre-check for callers; there is
  no uniqueness constraint behind it, so two concurrent requests can both land
- Only the submitted_to organization changes a submission's status
- Letters of appeal are refused here; AppealService.approve_appeal decides them
"""
import logging
from typing import List, Optional
from uuid import uuid4

from botocore.exceptions import BotoCoreError, ClientError
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...models.db_models import (
    REPORT_SUBMISSION_TYPES, ReportKind, SubmissionDB, SubmissionStatus, SubmissionType,
)
from ...models.ssot import ActivityRequest
from ..accounts import AccountService
from ..errors import (
    AccountOnHoldError, ConflictError, NotFoundError, PermissionDeniedError, PersistenceError,
    ValidationError,
)
from ..notifications import NotificationDispatcher
from ..routing import display_name, resolve_reviewer
from ..storage import ObjectStorage
from .validators import has_errors, validate_activity_request, validate_report

logger = logging.getLogger(__name__)

DRIVE_LINK_FILE_NAME = "Google Drive Link"
DRIVE_FOLDER_FILE_NAME = "Google Drive Folder Link"


class SubmissionGateway:
    """Entry point for filing and reviewing submissions."""

    def __init__(self, db_session: Session, storage: Optional[ObjectStorage] = None):
        """Initialize with database session."""
        self.db = db_session
        self.storage = storage or ObjectStorage()
        self.notifications = NotificationDispatcher(db_session)
        self.accounts = AccountService(db_session)

    def _insert(self, submission: SubmissionDB) -> SubmissionDB:
        try:
            self.db.add(submission)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to insert {submission.submission_type} from {submission.organization}: {e}")
            raise PersistenceError(f"Failed to submit {submission.submission_type.lower()}") from e
        self.db.refresh(submission)
        return submission

    # =========================================================================
    # FILING
    # =========================================================================

    def submit_report(self, org: str, kind: ReportKind, title: str, drive_link: str) -> SubmissionDB:
        """
        File an accomplishment or liquidation report as a Drive link.

        Raises ValidationError with per-field flags before any write.
        """
        errors = validate_report(title, drive_link)
        if has_errors(errors):
            raise ValidationError(errors)

        submission_type = REPORT_SUBMISSION_TYPES[kind]
        reviewer = resolve_reviewer(org).value

        submission = self._insert(SubmissionDB(
            id=str(uuid4()),
            organization=org,
            submission_type=submission_type.value,
            activity_title=title.strip(),
            file_url=drive_link,
            file_name=DRIVE_LINK_FILE_NAME,
            status=SubmissionStatus.PENDING.value,
            submitted_to=reviewer,
        ))
        logger.info(f"{org} submitted {submission_type.value} {submission.id} to {reviewer}")

        name = display_name(org)
        article = "an" if kind == ReportKind.ACCOMPLISHMENT else "a"
        self.notifications.notify_quietly(
            reviewer,
            f"New {submission_type.value} from {name}",
            f"{name} submitted {article} {submission_type.value} for \"{submission.activity_title}\". Check it out!",
            org,
            event_id=submission.id,
        )
        return submission

    def submit_activity_request(self, org: str, request: ActivityRequest) -> SubmissionDB:
        """
        File a Request to Conduct Activity.

        Refused with AccountOnHoldError before validation when the account is
        on hold. Callers are expected to check has_pending_activity_request first.
        """
        if self.accounts.is_on_hold(org):
            logger.warning(f"Activity request from {org} refused: account on hold")
            raise AccountOnHoldError("Your account is on hold. Activity requests are disabled.")

        errors = validate_activity_request(request)
        if has_errors(errors):
            raise ValidationError(errors)

        reviewer = resolve_reviewer(org).value
        start = request.start_date.strftime("%B %d, %Y")
        end = request.end_date.strftime("%B %d, %Y") if request.end_date else ""
        duration = f"{start} - {end} ({request.recurrence_type})"

        submission = self._insert(SubmissionDB(
            id=str(uuid4()),
            organization=org,
            submission_type=SubmissionType.ACTIVITY_REQUEST.value,
            activity_title=request.title.strip(),
            activity_duration=duration,
            activity_venue=request.venue,
            activity_participants=request.participants,
            activity_funds=request.funds,
            activity_budget=request.budget,
            activity_sdg=request.sdg,
            activity_likha=request.likha,
            file_url=request.design_link,
            file_name=DRIVE_FOLDER_FILE_NAME,
            status=SubmissionStatus.PENDING.value,
            submitted_to=reviewer,
        ))
        logger.info(f"{org} submitted activity request {submission.id} to {reviewer}")

        name = display_name(org)
        self.notifications.notify_quietly(
            reviewer,
            f"New Request from {name}",
            f"{name} submitted a Request to Conduct Activity titled \"{submission.activity_title}\". Check it out!",
            org,
            event_id=submission.id,
        )
        return submission

    def has_pending_activity_request(self, org: str) -> bool:
        return self.db.query(SubmissionDB.id).filter(
            SubmissionDB.organization == org,
            SubmissionDB.submission_type == SubmissionType.ACTIVITY_REQUEST.value,
            SubmissionDB.status == SubmissionStatus.PENDING.value,
        ).first() is not None

    # =========================================================================
    # REVIEW
    # =========================================================================

    def get(self, submission_id: str) -> SubmissionDB:
        submission = self.db.query(SubmissionDB).filter(SubmissionDB.id == submission_id).first()
        if submission is None:
            raise NotFoundError(f"Submission {submission_id} not found")
        return submission

    def review_submission(
        self,
        reviewer: str,
        submission_id: str,
        status: SubmissionStatus,
        reason: Optional[str] = None,
    ) -> SubmissionDB:
        """Set status as the submitted_to organization and notify the filer."""
        submission = self.get(submission_id)
        if submission.submitted_to != reviewer:
            logger.warning(f"{reviewer} attempted to review {submission_id} sent to {submission.submitted_to}")
            raise PermissionDeniedError("Only the receiving organization can review this submission")
        if submission.submission_type == SubmissionType.LETTER_OF_APPEAL.value:
            # Approval must also write the override date
            raise ConflictError("Letters of appeal are decided through the appeal approval endpoint")

        if status == SubmissionStatus.FOR_REVISION and not (reason and reason.strip()):
            raise ValidationError({"reason": True}, "A revision reason is required")

        try:
            submission.status = status.value
            submission.revision_reason = reason.strip() if status == SubmissionStatus.FOR_REVISION else None
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to set {submission_id} to {status.value}: {e}")
            raise PersistenceError("Failed to update submission") from e

        logger.info(f"{reviewer} marked {submission.submission_type} {submission_id} {status.value}")

        description = f"Your {submission.submission_type} \"{submission.activity_title}\" was marked {status.value} by {reviewer}."
        if submission.revision_reason:
            description += f" Reason: {submission.revision_reason}"
        self.notifications.notify_quietly(
            submission.organization,
            f"{submission.submission_type} {status.value}",
            description,
            reviewer,
            event_id=submission.id,
        )
        return submission

    # =========================================================================
    # FILER ACTIONS
    # =========================================================================

    def delete_submission(self, org: str, submission_id: str) -> None:
        """Filer removes its own submission and any uploaded file."""
        submission = self.get(submission_id)
        if submission.organization != org:
            raise PermissionDeniedError("Only the filing organization can delete this submission")

        storage_key = submission.storage_key
        try:
            self.db.delete(submission)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to delete submission {submission_id}: {e}")
            raise PersistenceError("Failed to delete submission") from e

        if storage_key:
            try:
                self.storage.remove([storage_key])
            except (OSError, BotoCoreError, ClientError) as e:
                logger.error(f"Submission {submission_id} deleted but file {storage_key} was not removed: {e}")

        logger.info(f"{org} deleted submission {submission_id}")

    def list_activity(self, org: str) -> List[SubmissionDB]:
        """Submissions filed by org or sent to it, newest first."""
        return self.db.query(SubmissionDB).filter(
            or_(SubmissionDB.organization == org, SubmissionDB.submitted_to == org)
        ).order_by(SubmissionDB.submitted_at.desc()).all()
