"""
Tests for reviewer routing and display names.
"""
import pytest

from app.models.db_models import Organization
from app.services.routing import (
    display_name,
    oversight_subordinate,
    resolve_appeal_reviewer,
    resolve_reviewer,
)


class TestRouting:

    def test_intermediate_reviewers(self):
        assert resolve_reviewer("AO") == Organization.LCO
        assert resolve_reviewer("LSG") == Organization.USG

    @pytest.mark.parametrize("org", ["GSC", "LCO", "USG", "TGP", "USED", "COA", "OSLD"])
    def test_everyone_else_goes_to_osld(self, org):
        assert resolve_reviewer(org) == Organization.OSLD

    def test_appeal_table_is_total(self):
        for org in Organization:
            assert isinstance(resolve_appeal_reviewer(org), Organization)
        assert resolve_appeal_reviewer(Organization.AO) == Organization.LCO
        assert resolve_appeal_reviewer(Organization.LSG) == Organization.USG
        assert resolve_appeal_reviewer(Organization.GSC) == Organization.OSLD

    def test_unknown_code_rejected(self):
        with pytest.raises(ValueError):
            resolve_reviewer("XYZ")
        with pytest.raises(ValueError):
            resolve_appeal_reviewer("ALL")

    def test_oversight(self):
        assert oversight_subordinate("LCO") == Organization.AO
        assert oversight_subordinate("USG") == Organization.LSG
        assert oversight_subordinate("AO") is None


class TestDisplayName:

    def test_known(self):
        assert display_name("TGP") == "The Gold Panicles"

    def test_broadcast(self):
        assert display_name("ALL") == "All Organizations"

    def test_unknown_passes_through(self):
        assert display_name("XYZ") == "XYZ"
