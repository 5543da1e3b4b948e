"""
Org Portal - Derived Models

Values computed from stored rows on every read. Nothing here is persisted:
deadline entries are regenerated from events, appeal state is resolved from
submissions and override dates.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Dict, FrozenSet, Optional

from .db_models import ReportKind


# =============================================================================
# ENUMS
# =============================================================================

class AppealState(str, Enum):
    """Appeal lifecycle per (organization, deadline) pair."""
    NO_APPEAL_NEEDED = "no_appeal_needed"
    CAN_FILE_APPEAL = "can_file_appeal"
    APPEAL_FORM_OPEN = "appeal_form_open"  # Transient, UI only
    APPEAL_SUBMITTED_PENDING = "appeal_submitted_pending"
    APPEAL_APPROVED = "appeal_approved"
    OBSERVED_BY_REVIEWER = "observed_by_reviewer"


class AppealAction(str, Enum):
    FILE_APPEAL = "file_appeal"
    NOTIFY_ORGANIZATION = "notify_organization"


# =============================================================================
# DEADLINES
# =============================================================================

@dataclass(frozen=True)
class DeadlineEntry:
    """Due date for one report obligation of one event."""
    id: str
    event_id: str
    title: str
    description: str
    kind: ReportKind
    due_date: date
    target_organization: str
    has_override: bool = False

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "event_id": self.event_id,
            "title": self.title,
            "description": self.description,
            "kind": self.kind.value,
            "due_date": self.due_date.isoformat(),
            "target_organization": self.target_organization,
            "has_override": self.has_override,
        }


@dataclass(frozen=True)
class AppealDecision:
    """Resolved state plus the actions the viewer may take."""
    state: AppealState
    is_owner: bool
    actions: FrozenSet[AppealAction] = field(default_factory=frozenset)

    def offers(self, action: AppealAction) -> bool:
        return action in self.actions


# =============================================================================
# SUBMISSION INPUT
# =============================================================================

@dataclass
class ActivityRequest:
    """Fields of a Request to Conduct Activity, as entered by the filer."""
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
    design_link: str = ""
