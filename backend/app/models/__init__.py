"""Org Portal - Data Models"""
from .db_models import (
    # Enums
    Organization, ReportKind, SubmissionType, SubmissionStatus, AccountStatus, BROADCAST,
    # ORM
    EventDB, SubmissionDB, NotificationDB, NotificationReadDB, OrgAccountDB,
)
from .ssot import (
    AppealState, AppealAction, DeadlineEntry, AppealDecision, ActivityRequest,
)

__all__ = [
    "Organization", "ReportKind", "SubmissionType", "SubmissionStatus", "AccountStatus", "BROADCAST",
    "EventDB", "SubmissionDB", "NotificationDB", "NotificationReadDB", "OrgAccountDB",
    "AppealState", "AppealAction", "DeadlineEntry", "AppealDecision", "ActivityRequest",
]
