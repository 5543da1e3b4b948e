"""
Appeal API Routes

Letters of Appeal against report deadlines: state resolution, filing,
approval with a replacement due date, and reminders from non-owners.
"""
from datetime import date, datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, File, UploadFile, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from ..database import get_db
from ..auth import get_current_org
from ..models.db_models import ReportKind
from ..services.appeals import AppealService, appeal_valid_until
from ..services.storage import ObjectStorage, get_storage
from ..services.submissions import SubmissionGateway

router = APIRouter(prefix="/appeals", tags=["appeals"])


# =============================================================================
# REQUEST/RESPONSE MODELS
# =============================================================================

class AppealStateResponse(BaseModel):
    event_id: str
    kind: ReportKind
    due_date: date
    target_organization: str
    state: str
    is_owner: bool
    actions: List[str]


class AppealFiledResponse(BaseModel):
    submission_id: str
    submitted_to: str
    file_url: Optional[str] = None
    valid_until: date


class ApproveAppealRequest(BaseModel):
    override_date: date = Field(..., description="Replacement due date for the appealed report")


class ApproveAppealResponse(BaseModel):
    event_id: str
    kind: ReportKind
    override_date: date


class ReminderResponse(BaseModel):
    notification_id: str
    target_org: str


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.get("/{event_id}/{kind}/state", response_model=AppealStateResponse)
async def get_appeal_state(
    event_id: str,
    kind: ReportKind,
    db: Session = Depends(get_db),
    org: str = Depends(get_current_org),
):
    """Resolve the signed-in organization's appeal state for one deadline."""
    service = AppealService(db)
    entry = service.get_entry(org, event_id, kind)
    decision = service.state_for(org, event_id, kind)
    return AppealStateResponse(
        event_id=event_id,
        kind=kind,
        due_date=entry.due_date,
        target_organization=entry.target_organization,
        state=decision.state.value,
        is_owner=decision.is_owner,
        actions=sorted(action.value for action in decision.actions),
    )


@router.post("/{submission_id}/approve", response_model=ApproveAppealResponse)
async def approve_appeal(
    submission_id: str,
    request: ApproveAppealRequest,
    db: Session = Depends(get_db),
    org: str = Depends(get_current_org),
):
    """Approve an appeal as its reviewer and set the replacement due date."""
    event = AppealService(db).approve_appeal(org, submission_id, request.override_date)
    appeal = SubmissionGateway(db).get(submission_id)
    return ApproveAppealResponse(
        event_id=event.id,
        kind=ReportKind(appeal.report_kind),
        override_date=request.override_date,
    )


@router.post("/{event_id}/{kind}/notify", response_model=ReminderResponse)
async def notify_organization(
    event_id: str,
    kind: ReportKind,
    db: Session = Depends(get_db),
    org: str = Depends(get_current_org),
):
    """Remind the deadline owner that its report is due."""
    notification = AppealService(db).notify_organization(org, event_id, kind)
    return ReminderResponse(notification_id=notification.id, target_org=notification.target_org)


@router.post("/{event_id}/{kind}", response_model=AppealFiledResponse, status_code=status.HTTP_201_CREATED)
async def file_appeal(
    event_id: str,
    kind: ReportKind,
    file: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    storage: ObjectStorage = Depends(get_storage),
    org: str = Depends(get_current_org),
):
    """
    File a Letter of Appeal.

    Multipart upload; the file goes to object storage before the submission
    row is written.
    """
    content = await file.read() if file is not None else None
    file_name = file.filename if file is not None else None

    submission = AppealService(db, storage).file_appeal(org, event_id, kind, file_name, content)
    return AppealFiledResponse(
        submission_id=submission.id,
        submitted_to=submission.submitted_to,
        file_url=submission.file_url,
        valid_until=appeal_valid_until(submission.submitted_at or datetime.utcnow()),
    )
