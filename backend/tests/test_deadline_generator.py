"""
Tests for deadline entry derivation and visibility.
"""
from datetime import date
from unittest.mock import MagicMock

from app.models.db_models import ReportKind
from app.services.deadlines import DeadlineEngine, generate_all, generate_for_viewer, due_on
from app.services.deadlines.generator import entries_for_event, sees_deadlines_of


def _event(**overrides):
    event = MagicMock()
    event.id = overrides.get("id", "evt-1")
    event.title = overrides.get("title", "Sports Fest")
    event.end_date = overrides.get("end_date", date(2024, 3, 1))
    event.target_organization = overrides.get("target_organization", "AO")
    flags = {
        ReportKind.ACCOMPLISHMENT: overrides.get("require_accomplishment", True),
        ReportKind.LIQUIDATION: overrides.get("require_liquidation", True),
    }
    stored = {
        ReportKind.ACCOMPLISHMENT: overrides.get("accomplishment_override"),
        ReportKind.LIQUIDATION: overrides.get("liquidation_override"),
    }
    event.requires.side_effect = lambda kind: flags[kind]
    event.override_for.side_effect = lambda kind: stored[kind]
    return event


# =============================================================================
# TEST: ENTRY DERIVATION
# =============================================================================

class TestEntriesForEvent:

    def test_one_entry_per_required_kind(self):
        entries = entries_for_event(_event())
        assert [e.kind for e in entries] == [ReportKind.ACCOMPLISHMENT, ReportKind.LIQUIDATION]
        assert entries[0].id == "evt-1-accom-deadline"
        assert entries[1].id == "evt-1-liq-deadline"
        assert entries[0].due_date == date(2024, 3, 6)
        assert entries[1].due_date == date(2024, 3, 12)

    def test_description_names_event(self):
        entry = entries_for_event(_event(require_liquidation=False))[0]
        assert entry.description == 'Due date for accomplishment report for "Sports Fest"'

    def test_no_required_reports_no_entries(self):
        assert entries_for_event(_event(require_accomplishment=False, require_liquidation=False)) == []

    def test_no_end_date_no_entries(self):
        assert entries_for_event(_event(end_date=None)) == []

    def test_override_replaces_computed_date(self):
        """Override applies only to its own kind."""
        entries = entries_for_event(_event(accomplishment_override=date(2024, 3, 20)))
        accom, liq = entries
        assert accom.due_date == date(2024, 3, 20)
        assert accom.has_override is True
        assert liq.due_date == date(2024, 3, 12)
        assert liq.has_override is False

    def test_owner_is_target_organization(self):
        for entry in entries_for_event(_event(target_organization="LSG")):
            assert entry.target_organization == "LSG"


# =============================================================================
# TEST: VISIBILITY
# =============================================================================

class TestVisibility:

    def test_owner_sees_own(self):
        assert sees_deadlines_of("AO", "AO")

    def test_oversight_pairs(self):
        assert sees_deadlines_of("LCO", "AO")
        assert sees_deadlines_of("USG", "LSG")

    def test_oversight_is_not_reciprocal(self):
        assert not sees_deadlines_of("AO", "LCO")
        assert not sees_deadlines_of("LSG", "USG")

    def test_others_see_nothing(self):
        assert not sees_deadlines_of("GSC", "AO")
        assert not sees_deadlines_of("USG", "AO")
        assert not sees_deadlines_of("LCO", "LSG")

    def test_unknown_viewer(self):
        assert not sees_deadlines_of("XYZ", "AO")

    def test_generate_for_viewer_filters(self):
        events = [_event(id="a", target_organization="AO"), _event(id="b", target_organization="GSC")]
        assert {e.event_id for e in generate_for_viewer("AO", events)} == {"a"}
        assert {e.event_id for e in generate_for_viewer("LCO", events)} == {"a"}
        assert {e.event_id for e in generate_for_viewer("GSC", events)} == {"b"}
        assert generate_for_viewer("TGP", events) == []

    def test_broadcast_events_have_no_owner_deadlines(self):
        assert generate_for_viewer("AO", [_event(target_organization="ALL")]) == []

    def test_generate_all_includes_every_event(self):
        events = [_event(id="a", target_organization="AO"), _event(id="b", target_organization="GSC")]
        assert len(generate_all(events)) == 4

    def test_due_on(self):
        entries = due_on("AO", [_event()], date(2024, 3, 6))
        assert [e.kind for e in entries] == [ReportKind.ACCOMPLISHMENT]


# =============================================================================
# TEST: ENGINE (STORE-BACKED)
# =============================================================================

class TestDeadlineEngine:

    def test_edits_reflected_immediately(self, db_session, make_event):
        event = make_event()
        engine = DeadlineEngine(db_session)
        assert len(engine.for_viewer("AO")) == 2

        event.require_liquidation = False
        db_session.commit()
        assert [e.kind for e in engine.for_viewer("AO")] == [ReportKind.ACCOMPLISHMENT]

        db_session.delete(event)
        db_session.commit()
        assert engine.for_viewer("AO") == []

    def test_due_today(self, db_session, make_event):
        make_event()
        engine = DeadlineEngine(db_session)
        assert len(engine.due_today("AO", date(2024, 3, 12))) == 1
        assert len(engine.due_today("LCO", date(2024, 3, 12))) == 1
        assert engine.due_today("AO", date(2024, 3, 7)) == []

    def test_get_entry(self, db_session, make_event):
        event = make_event()
        engine = DeadlineEngine(db_session)
        assert engine.get_entry("AO", event.id, ReportKind.LIQUIDATION).due_date == date(2024, 3, 12)
        assert engine.get_entry("LCO", event.id, ReportKind.LIQUIDATION) is not None
        assert engine.get_entry("GSC", event.id, ReportKind.LIQUIDATION) is None
        assert engine.get_entry("AO", "missing", ReportKind.LIQUIDATION) is None

    def test_creator_resolves_own_event(self, db_session, make_event):
        event = make_event()
        assert DeadlineEngine(db_session).get_entry("OSLD", event.id, ReportKind.ACCOMPLISHMENT) is not None
