"""
Submission API Routes

Reports and activity requests filed by organizations, and the reviewer
decisions on them.
"""
import logging
from datetime import date, datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from ..database import get_db
from ..auth import get_current_org
from ..models.db_models import ReportKind, SubmissionDB, SubmissionStatus
from ..models.ssot import ActivityRequest
from ..services.errors import ConflictError
from ..services.storage import ObjectStorage, get_storage
from ..services.submissions import SubmissionGateway

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/submissions", tags=["submissions"])


# =============================================================================
# REQUEST/RESPONSE MODELS
# =============================================================================

class ReportRequest(BaseModel):
    title: str = ""
    drive_link: str = Field("", description="Google Drive link to the report")


class ActivityRequestBody(BaseModel):
    title: str = ""
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    recurrence_type: str = ""
    venue: str = ""
    participants: str = ""
    funds: str = ""
    budget: str = ""
    sdg: str = ""
    likha: str = ""
    design_link: str = Field("", description="Google Drive folder with the activity design")


class ReviewRequest(BaseModel):
    status: SubmissionStatus
    reason: Optional[str] = None


class SubmissionResponse(BaseModel):
    id: str
    organization: str
    submission_type: str
    activity_title: str
    activity_duration: Optional[str] = None
    activity_venue: Optional[str] = None
    activity_participants: Optional[str] = None
    activity_funds: Optional[str] = None
    activity_budget: Optional[str] = None
    activity_sdg: Optional[str] = None
    activity_likha: Optional[str] = None
    file_url: Optional[str] = None
    file_name: Optional[str] = None
    status: str
    submitted_to: str
    revision_reason: Optional[str] = None
    event_id: Optional[str] = None
    report_kind: Optional[str] = None
    submitted_at: Optional[datetime] = None


def _to_response(submission: SubmissionDB) -> SubmissionResponse:
    return SubmissionResponse(
        id=submission.id,
        organization=submission.organization,
        submission_type=submission.submission_type,
        activity_title=submission.activity_title,
        activity_duration=submission.activity_duration,
        activity_venue=submission.activity_venue,
        activity_participants=submission.activity_participants,
        activity_funds=submission.activity_funds,
        activity_budget=submission.activity_budget,
        activity_sdg=submission.activity_sdg,
        activity_likha=submission.activity_likha,
        file_url=submission.file_url,
        file_name=submission.file_name,
        status=submission.status,
        submitted_to=submission.submitted_to,
        revision_reason=submission.revision_reason,
        event_id=submission.event_id,
        report_kind=submission.report_kind,
        submitted_at=submission.submitted_at,
    )


# =============================================================================
# FILING
# =============================================================================

@router.post("/reports/{kind}", response_model=SubmissionResponse, status_code=status.HTTP_201_CREATED)
async def submit_report(
    kind: ReportKind,
    request: ReportRequest,
    db: Session = Depends(get_db),
    org: str = Depends(get_current_org),
):
    submission = SubmissionGateway(db).submit_report(org, kind, request.title, request.drive_link)
    return _to_response(submission)


@router.post("/activity-requests", response_model=SubmissionResponse, status_code=status.HTTP_201_CREATED)
async def submit_activity_request(
    request: ActivityRequestBody,
    db: Session = Depends(get_db),
    org: str = Depends(get_current_org),
):
    """
    File a Request to Conduct Activity.

    One pending request per organization at a time. The check is advisory
    and runs before the insert.
    """
    gateway = SubmissionGateway(db)
    if gateway.has_pending_activity_request(org):
        logger.warning(f"Activity request from {org} refused: one is already pending")
        raise ConflictError("You already have a pending activity request")

    submission = gateway.submit_activity_request(org, ActivityRequest(**request.model_dump()))
    return _to_response(submission)


@router.get("/pending", response_model=dict)
async def pending_activity_request(db: Session = Depends(get_db), org: str = Depends(get_current_org)):
    return {"has_pending": SubmissionGateway(db).has_pending_activity_request(org)}


@router.get("", response_model=List[SubmissionResponse])
async def list_submissions(db: Session = Depends(get_db), org: str = Depends(get_current_org)):
    """Submissions filed by or sent to the signed-in organization."""
    return [_to_response(s) for s in SubmissionGateway(db).list_activity(org)]


# =============================================================================
# REVIEW / DELETE
# =============================================================================

@router.post("/{submission_id}/review", response_model=SubmissionResponse)
async def review_submission(
    submission_id: str,
    request: ReviewRequest,
    db: Session = Depends(get_db),
    org: str = Depends(get_current_org),
):
    submission = SubmissionGateway(db).review_submission(org, submission_id, request.status, request.reason)
    return _to_response(submission)


@router.delete("/{submission_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_submission(
    submission_id: str,
    db: Session = Depends(get_db),
    storage: ObjectStorage = Depends(get_storage),
    org: str = Depends(get_current_org),
):
    SubmissionGateway(db, storage).delete_submission(org, submission_id)
