"""
Org Portal - SQLAlchemy ORM Models
PostgreSQL database models for persistent storage
"""
from datetime import datetime
from enum import Enum
from sqlalchemy import Column, String, DateTime, Text, Boolean, Date, Time, Index
from ..database import Base


# =============================================================================
# ENUMS
# =============================================================================

class Organization(str, Enum):
    """Closed set of organization codes. Not user-extensible."""
    OSLD = "OSLD"    # Office of Student Life and Development
    AO = "AO"        # Accredited Organizations
    LSG = "LSG"      # Local Student Government
    GSC = "GSC"      # Graduating Student Council
    LCO = "LCO"      # League of Campus Organizations
    USG = "USG"      # University Student Government
    TGP = "TGP"      # The Gold Panicles
    USED = "USED"    # University Student Enterprise Development
    COA = "COA"      # Commission on Audit


# Broadcast target for events and notifications
BROADCAST = "ALL"


class ReportKind(str, Enum):
    """Report obligations an event can carry."""
    ACCOMPLISHMENT = "accomplishment"
    LIQUIDATION = "liquidation"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class SubmissionType(str, Enum):
    ACTIVITY_REQUEST = "Request to Conduct Activity"
    ACCOMPLISHMENT_REPORT = "Accomplishment Report"
    LIQUIDATION_REPORT = "Liquidation Report"
    LETTER_OF_APPEAL = "Letter of Appeal"


class SubmissionStatus(str, Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    FOR_REVISION = "For Revision"


class AccountStatus(str, Enum):
    ACTIVE = "Active"
    ON_HOLD = "On Hold"


REPORT_SUBMISSION_TYPES = {
    ReportKind.ACCOMPLISHMENT: SubmissionType.ACCOMPLISHMENT_REPORT,
    ReportKind.LIQUIDATION: SubmissionType.LIQUIDATION_REPORT,
}


# =============================================================================
# EVENTS
# =============================================================================

class EventDB(Base):
    """
    Scheduled activity or announcement.

    Owned by the administrative office. Deadline entries are derived from
    these rows on every read; only the override dates are persisted here.
    """
    __tablename__ = "osld_events"

    id = Column(String(36), primary_key=True)  # UUID
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)

    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    start_time = Column(Time, nullable=True)
    end_time = Column(Time, nullable=True)
    all_day = Column(Boolean, default=True)

    # Org code or "ALL"
    target_organization = Column(String(10), nullable=False, default=BROADCAST, index=True)

    require_accomplishment = Column(Boolean, default=False)
    require_liquidation = Column(Boolean, default=False)

    # Set when an appeal for the event+kind is approved
    accomplishment_deadline_override = Column(Date, nullable=True)
    liquidation_deadline_override = Column(Date, nullable=True)

    created_by = Column(String(10), nullable=False, default=Organization.OSLD.value)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def requires(self, kind: ReportKind) -> bool:
        if kind == ReportKind.ACCOMPLISHMENT:
            return bool(self.require_accomplishment)
        return bool(self.require_liquidation)

    def override_for(self, kind: ReportKind):
        if kind == ReportKind.ACCOMPLISHMENT:
            return self.accomplishment_deadline_override
        return self.liquidation_deadline_override

    def set_override(self, kind: ReportKind, value) -> None:
        if kind == ReportKind.ACCOMPLISHMENT:
            self.accomplishment_deadline_override = value
        else:
            self.liquidation_deadline_override = value


# =============================================================================
# SUBMISSIONS
# =============================================================================

class SubmissionDB(Base):
    """
    Report, request or appeal filed by an organization.

    Never mutated by the filer after creation. Status is changed only by the
    submitted_to organization.
    """
    __tablename__ = "submissions"

    id = Column(String(36), primary_key=True)  # UUID
    organization = Column(String(10), nullable=False, index=True)
    submission_type = Column(String(50), nullable=False)

    activity_title = Column(String(255), nullable=False)
    activity_duration = Column(String(255), default="N/A")
    activity_venue = Column(String(255), default="N/A")
    activity_participants = Column(String(255), default="N/A")
    activity_funds = Column(String(255), default="N/A")
    activity_budget = Column(String(255), default="N/A")
    activity_sdg = Column(String(255), default="N/A")
    activity_likha = Column(String(255), default="N/A")

    file_url = Column(String(1000), nullable=True)
    file_name = Column(String(255), nullable=True)
    storage_key = Column(String(500), nullable=True)  # Only for uploaded objects

    status = Column(String(20), nullable=False, default=SubmissionStatus.PENDING.value)
    submitted_to = Column(String(10), nullable=False, index=True)
    revision_reason = Column(Text, nullable=True)

    # Appeal linkage - loosely correlated, not a foreign key
    event_id = Column(String(36), nullable=True, index=True)
    report_kind = Column(String(20), nullable=True)

    submitted_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        Index("ix_submissions_org_type_status", "organization", "submission_type", "status"),
    )


# =============================================================================
# NOTIFICATIONS
# =============================================================================

class NotificationDB(Base):
    """Notification addressed to one organization or broadcast to ALL."""
    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True)  # UUID
    event_id = Column(String(36), nullable=True)  # Loose correlation, no FK
    event_title = Column(String(255), nullable=False)
    event_description = Column(Text, nullable=True)
    created_by = Column(String(10), nullable=False)
    target_org = Column(String(10), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)


class NotificationReadDB(Base):
    """Per-reader read marker. Unread-ness is the absence of a marker."""
    __tablename__ = "notification_read_status"

    id = Column(String(36), primary_key=True)  # UUID
    notification_id = Column(String(36), nullable=False, index=True)
    read_by = Column(String(10), nullable=False, index=True)
    read_at = Column(DateTime, default=datetime.utcnow)


# =============================================================================
# ACCOUNTS
# =============================================================================

class OrgAccountDB(Base):
    """Organization login account with hold status."""
    __tablename__ = "org_accounts"

    id = Column(String(36), primary_key=True)  # UUID
    organization = Column(String(10), nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    status = Column(String(20), nullable=False, default=AccountStatus.ACTIVE.value)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
