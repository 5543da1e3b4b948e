"""
Notification API Routes
"""
from typing import List

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ..database import get_db
from ..auth import get_current_org
from ..services.notifications import NotificationDispatcher

router = APIRouter(prefix="/notifications", tags=["notifications"])


class NotificationListResponse(BaseModel):
    notifications: List[dict]
    unread_count: int


class CountResponse(BaseModel):
    count: int


@router.get("", response_model=NotificationListResponse)
async def list_notifications(db: Session = Depends(get_db), org: str = Depends(get_current_org)):
    """Notifications addressed to the signed-in organization or ALL, newest first."""
    dispatcher = NotificationDispatcher(db)
    return NotificationListResponse(
        notifications=dispatcher.list_for(org),
        unread_count=dispatcher.unread_count(org),
    )


@router.post("/read-all", response_model=CountResponse)
async def mark_all_read(db: Session = Depends(get_db), org: str = Depends(get_current_org)):
    return CountResponse(count=NotificationDispatcher(db).mark_all_read(org))


@router.post("/{notification_id}/read", response_model=dict)
async def mark_read(
    notification_id: str,
    db: Session = Depends(get_db),
    org: str = Depends(get_current_org),
):
    NotificationDispatcher(db).mark_read(notification_id, org)
    return {"notification_id": notification_id, "is_read": True}


@router.delete("", response_model=CountResponse)
async def delete_all_notifications(db: Session = Depends(get_db), org: str = Depends(get_current_org)):
    """
    Delete every notification visible to the signed-in organization.

    Deletion is global: other recipients of the same rows lose them too.
    """
    return CountResponse(count=NotificationDispatcher(db).delete_all(org))
