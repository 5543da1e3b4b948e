"""
Account Status Service

Active / On Hold status per organization account. Clients poll the status
every HOLD_POLL_INTERVAL_SECONDS; holds are never pushed, so a hold takes up
to one interval to reach the filer and does not cancel requests already sent.
"""
import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models.db_models import AccountStatus, Organization, OrgAccountDB
from .errors import NotFoundError, PermissionDeniedError, PersistenceError
from .notifications import NotificationDispatcher

logger = logging.getLogger(__name__)

HOLD_POLL_INTERVAL_SECONDS = 30

# Only the central office places or lifts holds
HOLD_AUTHORITY = Organization.OSLD.value


class AccountService:

    def __init__(self, db_session: Session):
        self.db = db_session
        self.notifications = NotificationDispatcher(db_session)

    def _accounts(self, org: str):
        return self.db.query(OrgAccountDB).filter(OrgAccountDB.organization == org)

    def get_status(self, org: str) -> Optional[AccountStatus]:
        """Status of the org's account, or None if it has none."""
        account = self._accounts(org).first()
        return AccountStatus(account.status) if account else None

    def is_on_hold(self, org: str) -> bool:
        return self._accounts(org).filter(
            OrgAccountDB.status == AccountStatus.ON_HOLD.value
        ).first() is not None

    def set_status(self, actor: str, org: str, status: AccountStatus) -> AccountStatus:
        """Apply status to every account of org and notify it."""
        if actor != HOLD_AUTHORITY:
            logger.warning(f"{actor} attempted to set {org} account status")
            raise PermissionDeniedError("Only OSLD can change account status")

        accounts = self._accounts(org).all()
        if not accounts:
            raise NotFoundError(f"No account for organization {org}")

        try:
            for account in accounts:
                account.status = status.value
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to set {org} account status to {status.value}: {e}")
            raise PersistenceError("Failed to update account status") from e

        logger.info(f"{actor} set {org} account status to {status.value}")

        if status == AccountStatus.ON_HOLD:
            title = "Account On Hold"
            description = "Your account has been placed on hold. New activity requests are disabled until it is reactivated."
        else:
            title = "Account Reactivated"
            description = "Your account is active again. You may submit activity requests."
        self.notifications.notify_quietly(org, title, description, actor)

        return status
