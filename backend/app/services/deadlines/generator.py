"""
Deadline Event Generator

Derives deadline entries from stored events. Entries are never persisted;
they are regenerated on every read so that edits and deletions of an event
are reflected immediately. Only an approved-appeal override date is stored,
on the parent event.

Visibility:
- Every organization sees deadlines of events targeted to itself.
- LCO also sees AO deadlines and USG also sees LSG deadlines. These are for
  reminders only; the owner is always the event's target organization.
"""
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from ...models.db_models import EventDB, ReportKind
from ...models.ssot import DeadlineEntry
from ..routing import oversight_subordinate
from .working_days import (
    ACCOMPLISHMENT_WORKING_DAYS,
    LIQUIDATION_WORKING_DAYS,
    add_working_days,
    to_date,
)


# =============================================================================
# DEADLINE CONFIGURATION
# =============================================================================

DEADLINE_CONFIG: Dict[ReportKind, Dict[str, Any]] = {
    ReportKind.ACCOMPLISHMENT: {
        "working_days": ACCOMPLISHMENT_WORKING_DAYS,
        "suffix": "accom-deadline",
        "description": "Due date for accomplishment report for \"{title}\"",
    },
    ReportKind.LIQUIDATION: {
        "working_days": LIQUIDATION_WORKING_DAYS,
        "suffix": "liq-deadline",
        "description": "Due date for liquidation report for \"{title}\"",
    },
}


# =============================================================================
# PURE GENERATION
# =============================================================================

def sees_deadlines_of(viewer: str, target_organization: str) -> bool:
    """Whether viewer gets deadline entries for events targeted to target_organization."""
    if target_organization == viewer:
        return True
    try:
        subordinate = oversight_subordinate(viewer)
    except ValueError:
        return False
    return subordinate is not None and subordinate.value == target_organization


def entries_for_event(event: EventDB) -> List[DeadlineEntry]:
    """One entry per required report kind; none if the event has no end date."""
    if not event.end_date:
        return []

    entries = []
    for kind, config in DEADLINE_CONFIG.items():
        if not event.requires(kind):
            continue

        override = event.override_for(kind)
        if override:
            due_date = to_date(override)
        else:
            due_date = add_working_days(to_date(event.end_date), config["working_days"])

        entries.append(DeadlineEntry(
            id=f"{event.id}-{config['suffix']}",
            event_id=event.id,
            title=event.title,
            description=config["description"].format(title=event.title),
            kind=kind,
            due_date=due_date,
            target_organization=event.target_organization,
            has_override=bool(override),
        ))
    return entries


def generate_for_viewer(viewer: str, events: Iterable[EventDB]) -> List[DeadlineEntry]:
    """Deadline entries the viewing organization sees."""
    entries = []
    for event in events:
        if sees_deadlines_of(viewer, event.target_organization):
            entries.extend(entries_for_event(event))
    return entries


def generate_all(events: Iterable[EventDB]) -> List[DeadlineEntry]:
    """Every deadline entry, for the administrative office's calendar."""
    entries = []
    for event in events:
        entries.extend(entries_for_event(event))
    return entries


def due_on(viewer: str, events: Iterable[EventDB], day: date) -> List[DeadlineEntry]:
    """Entries visible to viewer that fall due on day."""
    return [e for e in generate_for_viewer(viewer, events) if e.due_date == day]


# =============================================================================
# DEADLINE ENGINE
# =============================================================================

class DeadlineEngine:
    """
    Loads events from the store and derives deadline entries.

    Holds no state beyond the session; every call regenerates from rows.
    """

    def __init__(self, db_session: Session):
        """Initialize with database session."""
        self.db = db_session

    def _events(self) -> List[EventDB]:
        return self.db.query(EventDB).filter(
            EventDB.end_date.isnot(None)
        ).order_by(EventDB.end_date.asc()).all()

    def for_viewer(self, viewer: str) -> List[DeadlineEntry]:
        return generate_for_viewer(viewer, self._events())

    def all_entries(self) -> List[DeadlineEntry]:
        return generate_all(self._events())

    def due_today(self, viewer: str, today: Optional[date] = None) -> List[DeadlineEntry]:
        return due_on(viewer, self._events(), today or date.today())

    def get_entry(self, viewer: str, event_id: str, kind: ReportKind) -> Optional[DeadlineEntry]:
        """
        The viewer's entry for event_id and kind, or None.

        Returns None when the event is unknown, the kind is not required, or
        the viewer does not see the event's deadlines. The office that created
        the event sees all of its deadlines.
        """
        event = self.db.query(EventDB).filter(EventDB.id == event_id).first()
        if event is None:
            return None
        if event.created_by != viewer and not sees_deadlines_of(viewer, event.target_organization):
            return None
        for entry in entries_for_event(event):
            if entry.kind == kind:
                return entry
        return None
