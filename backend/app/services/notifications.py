"""
Notification Dispatcher

Creates notification rows and per-reader read markers.

- A notification addressed to ALL fans out to one row per organization,
  skipping the creator. Each row is committed on its own, so a failure part
  way through leaves a partial delivery.
- Unread-ness is the absence of a read marker for (notification, reader);
  duplicate markers are harmless.
- delete_all removes the rows outright, for every recipient.
"""
import logging
from typing import Any, Dict, List, Optional
from uuid import uuid4

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models.db_models import (
    BROADCAST, NotificationDB, NotificationReadDB, Organization,
)
from .errors import NotFoundError, PersistenceError

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Notification writes and per-reader read state."""

    def __init__(self, db_session: Session):
        """Initialize with database session."""
        self.db = db_session

    # =========================================================================
    # DISPATCH
    # =========================================================================

    def notify(
        self,
        target: str,
        title: str,
        description: str,
        created_by: str,
        event_id: Optional[str] = None,
    ) -> List[NotificationDB]:
        """
        Insert one notification, or one per organization when target is ALL.

        Raises PersistenceError on the first failed insert. Rows committed
        before the failure stay delivered.
        """
        if target == BROADCAST:
            recipients = [org.value for org in Organization if org.value != created_by]
        else:
            recipients = [target]

        created = []
        for recipient in recipients:
            notification = NotificationDB(
                id=str(uuid4()),
                event_id=event_id,
                event_title=title,
                event_description=description,
                created_by=created_by,
                target_org=recipient,
            )
            try:
                self.db.add(notification)
                self.db.commit()
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.error(
                    f"Notification to {recipient} failed after {len(created)}/{len(recipients)} delivered: {e}"
                )
                raise PersistenceError("Failed to send notification") from e
            created.append(notification)

        logger.info(f"Notification '{title}' from {created_by} delivered to {len(created)} organization(s)")
        return created

    def notify_quietly(self, *args, **kwargs) -> List[NotificationDB]:
        """
        notify() for follow-up notifications after a primary write.

        The primary write already succeeded, so a failure here is logged and
        not surfaced.
        """
        try:
            return self.notify(*args, **kwargs)
        except PersistenceError:
            logger.warning("Follow-up notification dropped")
            return []

    # =========================================================================
    # READ STATE
    # =========================================================================

    def _visible_query(self, reader: str):
        return self.db.query(NotificationDB).filter(
            or_(NotificationDB.target_org == reader, NotificationDB.target_org == BROADCAST)
        )

    def _read_ids(self, reader: str) -> set:
        rows = self.db.query(NotificationReadDB.notification_id).filter(
            NotificationReadDB.read_by == reader
        ).all()
        return {row[0] for row in rows}

    def list_for(self, reader: str) -> List[Dict[str, Any]]:
        """Notifications addressed to reader or ALL, newest first."""
        notifications = self._visible_query(reader).order_by(NotificationDB.created_at.desc()).all()
        read_ids = self._read_ids(reader)
        return [
            {
                "id": n.id,
                "event_id": n.event_id,
                "title": n.event_title,
                "description": n.event_description or "",
                "created_by": n.created_by,
                "target_org": n.target_org,
                "created_at": n.created_at.isoformat() if n.created_at else None,
                "is_read": n.id in read_ids,
            }
            for n in notifications
        ]

    def unread_count(self, reader: str) -> int:
        read_ids = self._read_ids(reader)
        return sum(1 for n in self._visible_query(reader).all() if n.id not in read_ids)

    def mark_read(self, notification_id: str, reader: str) -> NotificationReadDB:
        # Another organization's notification reads as missing
        if self._visible_query(reader).filter(NotificationDB.id == notification_id).first() is None:
            raise NotFoundError(f"Notification {notification_id} not found")

        marker = NotificationReadDB(
            id=str(uuid4()),
            notification_id=notification_id,
            read_by=reader,
        )
        try:
            self.db.add(marker)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to mark notification {notification_id} read for {reader}: {e}")
            raise PersistenceError("Failed to mark notification as read") from e
        return marker

    def mark_all_read(self, reader: str) -> int:
        """Mark every unread visible notification. Returns how many were marked."""
        read_ids = self._read_ids(reader)
        unread = [n for n in self._visible_query(reader).all() if n.id not in read_ids]
        try:
            for n in unread:
                self.db.add(NotificationReadDB(id=str(uuid4()), notification_id=n.id, read_by=reader))
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to mark all notifications read for {reader}: {e}")
            raise PersistenceError("Failed to mark notifications as read") from e
        return len(unread)

    def delete_all(self, reader: str) -> int:
        """
        Delete every notification visible to reader.

        The reader's markers go first, then the notifications themselves.
        This removes them for every recipient, not only the reader.
        """
        ids = [n.id for n in self._visible_query(reader).all()]
        if not ids:
            return 0
        try:
            self.db.query(NotificationReadDB).filter(
                NotificationReadDB.notification_id.in_(ids),
                NotificationReadDB.read_by == reader,
            ).delete(synchronize_session=False)
            self.db.query(NotificationDB).filter(
                NotificationDB.id.in_(ids)
            ).delete(synchronize_session=False)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to delete notifications for {reader}: {e}")
            raise PersistenceError("Failed to delete notifications") from e

        logger.info(f"{reader} deleted {len(ids)} notification(s)")
        return len(ids)
