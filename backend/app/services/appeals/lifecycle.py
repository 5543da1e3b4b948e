"""
Appeal Lifecycle

State per (viewing organization, deadline entry) is never stored. It is
resolved on every read from two facts:
- whether the deadline owner has filed a Letter of Appeal for the event+kind
- whether the entry carries an override date (appeal approved)

Precedence, first match wins:
    non-owner viewer, owner appeal filed    → OBSERVED_BY_REVIEWER
    owner viewer, override present          → APPEAL_APPROVED
    owner viewer, owner appeal filed        → APPEAL_SUBMITTED_PENDING
    owner viewer                            → CAN_FILE_APPEAL
    non-owner viewer                        → NO_APPEAL_NEEDED

Only the owner is ever offered FILE_APPEAL. Non-owners only get
NOTIFY_ORGANIZATION.

UI transitions (yes/no prompt, form open/cancel/submit) are kept in
AppealStateMachine.TRANSITIONS.
"""
from datetime import date, datetime
from typing import Any, Iterable, List, Optional, Tuple, Union

from dateutil.relativedelta import relativedelta

from app.models.db_models import ReportKind, SubmissionType
from app.models.ssot import AppealAction, AppealDecision, AppealState, DeadlineEntry

# Shown to the filer as guidance; no automatic expiry is derived from it
APPEAL_VALIDITY_DAYS = 3


class AppealStateError(Exception):
    """Raised when a lifecycle transition is invalid."""
    pass


def _field(submission: Any, name: str):
    if isinstance(submission, dict):
        return submission.get(name)
    return getattr(submission, name, None)


def _kind_value(kind: Union[ReportKind, str, None]):
    return kind.value if isinstance(kind, ReportKind) else kind


def owner_has_appealed(entry: DeadlineEntry, submissions: Iterable[Any]) -> bool:
    """
    Whether the deadline owner filed a Letter of Appeal for entry's event and kind.

    Accepts ORM rows or plain dicts with the same field names.
    """
    for submission in submissions:
        if (
            _field(submission, "submission_type") == SubmissionType.LETTER_OF_APPEAL.value
            and _field(submission, "organization") == entry.target_organization
            and _field(submission, "event_id") == entry.event_id
            and _kind_value(_field(submission, "report_kind")) == entry.kind.value
        ):
            return True
    return False


def resolve_state(viewer_org: str, entry: DeadlineEntry, submissions: Iterable[Any]) -> AppealDecision:
    """Appeal state of entry as seen by viewer_org."""
    is_owner = entry.target_organization == viewer_org
    appealed = owner_has_appealed(entry, submissions)

    if not is_owner and appealed:
        return AppealDecision(
            state=AppealState.OBSERVED_BY_REVIEWER,
            is_owner=False,
            actions=frozenset({AppealAction.NOTIFY_ORGANIZATION}),
        )

    if is_owner:
        if entry.has_override:
            return AppealDecision(state=AppealState.APPEAL_APPROVED, is_owner=True)
        if appealed:
            return AppealDecision(state=AppealState.APPEAL_SUBMITTED_PENDING, is_owner=True)
        return AppealDecision(
            state=AppealState.CAN_FILE_APPEAL,
            is_owner=True,
            actions=frozenset({AppealAction.FILE_APPEAL}),
        )

    return AppealDecision(
        state=AppealState.NO_APPEAL_NEEDED,
        is_owner=False,
        actions=frozenset({AppealAction.NOTIFY_ORGANIZATION}),
    )


def appeal_valid_until(submitted_at: Union[date, datetime]) -> date:
    """Last day the filer is told the appeal covers."""
    if isinstance(submitted_at, datetime):
        submitted_at = submitted_at.date()
    return submitted_at + relativedelta(days=APPEAL_VALIDITY_DAYS)


class AppealStateMachine:
    """
    UI-side transitions of the appeal panel.

    This is the contract for the client panel. The server does not step
    through it: AppealService re-resolves state from stored rows with
    resolve_state, and the panel uses this table for its local prompts.

    decline is the "no" answer to the file-appeal prompt: an informational
    dismissal that leaves the state unchanged.
    """

    # (current_state, action) -> new_state
    TRANSITIONS = {
        (AppealState.CAN_FILE_APPEAL, "accept"): AppealState.APPEAL_FORM_OPEN,
        (AppealState.CAN_FILE_APPEAL, "decline"): AppealState.CAN_FILE_APPEAL,
        (AppealState.APPEAL_FORM_OPEN, "cancel"): AppealState.CAN_FILE_APPEAL,
        (AppealState.APPEAL_FORM_OPEN, "submit"): AppealState.APPEAL_SUBMITTED_PENDING,
        (AppealState.APPEAL_SUBMITTED_PENDING, "approve"): AppealState.APPEAL_APPROVED,
    }

    def can_transition(self, current_state: AppealState, action: str) -> Tuple[bool, Optional[str]]:
        if (current_state, action) not in self.TRANSITIONS:
            return False, f"Invalid transition: {current_state.value} + {action}"
        return True, None

    def transition(self, current_state: AppealState, action: str) -> AppealState:
        """
        Perform a transition.

        Raises:
            AppealStateError: If the action is not allowed from current_state
        """
        allowed, error = self.can_transition(current_state, action)
        if not allowed:
            raise AppealStateError(error)
        return self.TRANSITIONS[(current_state, action)]

    def get_available_actions(self, current_state: AppealState) -> List[str]:
        return [action for (state, action) in self.TRANSITIONS if state == current_state]

    def is_terminal_state(self, state: AppealState) -> bool:
        return not self.get_available_actions(state)
