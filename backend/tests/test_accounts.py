"""
Tests for account hold status.
"""
import pytest

from app.models.db_models import AccountStatus, NotificationDB, OrgAccountDB
from app.services.accounts import AccountService
from app.services.errors import NotFoundError, PermissionDeniedError


class TestAccountService:

    def test_status_of_unknown_org(self, db_session):
        assert AccountService(db_session).get_status("TGP") is None
        assert not AccountService(db_session).is_on_hold("TGP")

    def test_osld_places_and_lifts_hold(self, db_session, make_account):
        make_account("AO")
        service = AccountService(db_session)

        service.set_status("OSLD", "AO", AccountStatus.ON_HOLD)
        assert service.is_on_hold("AO")
        assert service.get_status("AO") == AccountStatus.ON_HOLD

        service.set_status("OSLD", "AO", AccountStatus.ACTIVE)
        assert not service.is_on_hold("AO")

        titles = [n.event_title for n in db_session.query(NotificationDB).filter(NotificationDB.target_org == "AO")]
        assert sorted(titles) == ["Account On Hold", "Account Reactivated"]

    def test_hold_applies_to_every_account_of_org(self, db_session, make_account):
        make_account("AO", email="a1@school.edu")
        make_account("AO", email="a2@school.edu")
        AccountService(db_session).set_status("OSLD", "AO", AccountStatus.ON_HOLD)

        statuses = {a.status for a in db_session.query(OrgAccountDB).all()}
        assert statuses == {AccountStatus.ON_HOLD.value}

    def test_only_osld_sets_status(self, db_session, make_account):
        make_account("AO")
        with pytest.raises(PermissionDeniedError):
            AccountService(db_session).set_status("LCO", "AO", AccountStatus.ON_HOLD)

    def test_org_without_account(self, db_session):
        with pytest.raises(NotFoundError):
            AccountService(db_session).set_status("OSLD", "COA", AccountStatus.ON_HOLD)
