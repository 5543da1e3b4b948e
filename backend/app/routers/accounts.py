"""
Account Status API Routes

Organizations poll their own status; OSLD places and lifts holds.
"""
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ..database import get_db
from ..auth import get_current_org
from ..models.db_models import AccountStatus, Organization
from ..services.accounts import AccountService, HOLD_POLL_INTERVAL_SECONDS

router = APIRouter(prefix="/accounts", tags=["accounts"])


class AccountStatusResponse(BaseModel):
    organization: str
    status: Optional[AccountStatus] = None
    on_hold: bool
    poll_interval_seconds: int = HOLD_POLL_INTERVAL_SECONDS


class SetStatusRequest(BaseModel):
    status: AccountStatus


@router.get("/me/status", response_model=AccountStatusResponse)
async def my_status(db: Session = Depends(get_db), org: str = Depends(get_current_org)):
    status = AccountService(db).get_status(org)
    return AccountStatusResponse(
        organization=org,
        status=status,
        on_hold=status == AccountStatus.ON_HOLD,
    )


@router.put("/{organization}/status", response_model=AccountStatusResponse)
async def set_status(
    organization: Organization,
    request: SetStatusRequest,
    db: Session = Depends(get_db),
    org: str = Depends(get_current_org),
):
    status = AccountService(db).set_status(org, organization.value, request.status)
    return AccountStatusResponse(
        organization=organization.value,
        status=status,
        on_hold=status == AccountStatus.ON_HOLD,
    )
