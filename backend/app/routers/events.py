"""
Event Calendar API Routes

Listing is open to every organization; create, edit and delete are
restricted to OSLD by the service.
"""
from datetime import date, time
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from ..database import get_db
from ..auth import get_current_org
from ..models.db_models import BROADCAST, EventDB
from ..services.events import EventService

router = APIRouter(prefix="/events", tags=["events"])


# =============================================================================
# REQUEST/RESPONSE MODELS
# =============================================================================

class EventRequest(BaseModel):
    """Create or update an event. On update only the fields sent are changed."""
    title: Optional[str] = None
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    all_day: Optional[bool] = None
    target_organization: Optional[str] = Field(None, description="Organization code or ALL")
    require_accomplishment: Optional[bool] = None
    require_liquidation: Optional[bool] = None


class EventResponse(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    all_day: bool = True
    target_organization: str = BROADCAST
    require_accomplishment: bool = False
    require_liquidation: bool = False
    accomplishment_deadline_override: Optional[date] = None
    liquidation_deadline_override: Optional[date] = None
    created_by: str


def _to_response(event: EventDB) -> EventResponse:
    return EventResponse(
        id=event.id,
        title=event.title,
        description=event.description,
        start_date=event.start_date,
        end_date=event.end_date,
        start_time=event.start_time,
        end_time=event.end_time,
        all_day=bool(event.all_day),
        target_organization=event.target_organization,
        require_accomplishment=bool(event.require_accomplishment),
        require_liquidation=bool(event.require_liquidation),
        accomplishment_deadline_override=event.accomplishment_deadline_override,
        liquidation_deadline_override=event.liquidation_deadline_override,
        created_by=event.created_by,
    )


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.get("", response_model=List[EventResponse])
async def list_events(db: Session = Depends(get_db), org: str = Depends(get_current_org)):
    return [_to_response(e) for e in EventService(db).list_for(org)]


@router.post("", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    request: EventRequest,
    db: Session = Depends(get_db),
    org: str = Depends(get_current_org),
):
    """
    Create an event.

    Announces it to every other organization, and sends report due dates to
    the target organization when reports are required.
    """
    event = EventService(db).create_event(org, request.model_dump(exclude_none=True))
    return _to_response(event)


@router.put("/{event_id}", response_model=EventResponse)
async def update_event(
    event_id: str,
    request: EventRequest,
    db: Session = Depends(get_db),
    org: str = Depends(get_current_org),
):
    event = EventService(db).update_event(org, event_id, request.model_dump(exclude_unset=True))
    return _to_response(event)


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(
    event_id: str,
    db: Session = Depends(get_db),
    org: str = Depends(get_current_org),
):
    EventService(db).delete_event(org, event_id)
