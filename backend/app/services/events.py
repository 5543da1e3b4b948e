"""
Event Administration

Events are created, edited and deleted only by the administrative office.
Deadline entries are derived from them on read, so deleting an event also
removes its deadlines and any override dates.
"""
import logging
from datetime import date
from typing import Any, Dict, List, Optional
from uuid import uuid4

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.db_models import BROADCAST, EventDB, Organization
from app.services.deadlines.generator import DEADLINE_CONFIG
from app.services.deadlines.working_days import calculate_deadline
from app.services.errors import NotFoundError, PermissionDeniedError, PersistenceError, ValidationError
from app.services.notifications import NotificationDispatcher

logger = logging.getLogger(__name__)

EVENT_AUTHORITY = Organization.OSLD.value

EDITABLE_FIELDS = (
    "title", "description", "start_date", "end_date", "start_time", "end_time",
    "all_day", "target_organization", "require_accomplishment", "require_liquidation",
)

FLAG_FIELDS = ("all_day", "require_accomplishment", "require_liquidation")


def validate_event(data: Dict[str, Any]) -> Dict[str, bool]:
    start: Optional[date] = data.get("start_date")
    end: Optional[date] = data.get("end_date")
    target = data.get("target_organization") or BROADCAST
    valid_targets = {org.value for org in Organization} | {BROADCAST}
    errors = {
        "title": not (data.get("title") or "").strip(),
        "end_date": end is None or (start is not None and end < start),
        "target_organization": target not in valid_targets,
    }
    # Omitted flags take column defaults; an explicit null is an error
    errors.update({field: field in data and data[field] is None for field in FLAG_FIELDS})
    return errors


class EventService:

    def __init__(self, db_session: Session):
        self.db = db_session
        self.notifications = NotificationDispatcher(db_session)

    def _require_authority(self, actor: str) -> None:
        if actor != EVENT_AUTHORITY:
            logger.warning(f"{actor} attempted to modify events")
            raise PermissionDeniedError("Only OSLD can manage events")

    def _validate(self, data: Dict[str, Any]) -> None:
        errors = validate_event(data)
        if any(errors.values()):
            raise ValidationError(errors)

    def get(self, event_id: str) -> EventDB:
        event = self.db.query(EventDB).filter(EventDB.id == event_id).first()
        if event is None:
            raise NotFoundError(f"Event {event_id} not found")
        return event

    def list_for(self, viewer: str) -> List[EventDB]:
        """Events targeted to viewer or ALL; the administrative office sees every event."""
        query = self.db.query(EventDB)
        if viewer != EVENT_AUTHORITY:
            query = query.filter(
                or_(EventDB.target_organization == viewer, EventDB.target_organization == BROADCAST)
            )
        return query.order_by(EventDB.start_date.asc()).all()

    def create_event(self, creator: str, data: Dict[str, Any]) -> EventDB:
        """
        Create an event and announce it.

        Every organization except the creator gets the announcement. When
        reports are required of a specific organization, that organization
        also gets the computed due dates.
        """
        self._require_authority(creator)
        self._validate(data)

        event = EventDB(
            id=str(uuid4()),
            created_by=creator,
            **{field: data.get(field) for field in EDITABLE_FIELDS if field in data},
        )
        if not event.target_organization:
            event.target_organization = BROADCAST
        if not event.start_date:
            event.start_date = event.end_date

        try:
            self.db.add(event)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to create event '{data.get('title')}': {e}")
            raise PersistenceError("Failed to create event") from e
        self.db.refresh(event)
        logger.info(f"{creator} created event {event.id} for {event.target_organization}")

        self.notifications.notify_quietly(
            BROADCAST, event.title, event.description or "", creator, event_id=event.id
        )
        self._announce_required_reports(event, creator)
        return event

    def _announce_required_reports(self, event: EventDB, creator: str) -> None:
        if event.target_organization == BROADCAST:
            return

        required = [kind for kind in DEADLINE_CONFIG if event.requires(kind)]
        if not required:
            return

        labels = [kind.label for kind in required]
        due = ", ".join(
            f"{kind.label} Report due: {calculate_deadline(event.end_date, DEADLINE_CONFIG[kind]['working_days'])}"
            for kind in required
        )
        self.notifications.notify_quietly(
            event.target_organization,
            f"{' & '.join(labels)} Report Required: {event.title}",
            f"{creator} requires submission of {' and '.join(labels)} report for \"{event.title}\". {due}",
            creator,
            event_id=event.id,
        )

    def update_event(self, editor: str, event_id: str, data: Dict[str, Any]) -> EventDB:
        self._require_authority(editor)
        event = self.get(event_id)

        merged = {field: getattr(event, field) for field in EDITABLE_FIELDS if getattr(event, field) is not None}
        merged.update({k: v for k, v in data.items() if k in EDITABLE_FIELDS})
        self._validate(merged)
        merged["target_organization"] = merged.get("target_organization") or BROADCAST
        merged["start_date"] = merged.get("start_date") or merged["end_date"]

        try:
            for field, value in merged.items():
                setattr(event, field, value)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to update event {event_id}: {e}")
            raise PersistenceError("Failed to update event") from e

        logger.info(f"{editor} updated event {event_id}")
        return event

    def delete_event(self, editor: str, event_id: str) -> None:
        self._require_authority(editor)
        event = self.get(event_id)
        try:
            self.db.delete(event)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to delete event {event_id}: {e}")
            raise PersistenceError("Failed to delete event") from e
        logger.info(f"{editor} deleted event {event_id}")
