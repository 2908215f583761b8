from simchurch.simulation_layer.events import event_engine
from simchurch.simulation_layer.events.catalog import EVENT_TEMPLATES, get_template
from simchurch.simulation_layer.models import NewsType, RejectionKind
from simchurch.simulation_layer.state import PendingChoice
from tests.conftest import ScriptedRandom
from tests.test_staff import make_staff


def test_catalog_has_every_event():
    assert len(EVENT_TEMPLATES) == 11
    choice_events = [t for t in EVENT_TEMPLATES.values() if t.is_choice]
    assert len(choice_events) == 5
    assert all(len(t.choices) >= 2 for t in choice_events)


def test_conditions(state):
    donation = get_template("anonymousDonation")
    state.week = 3
    assert not event_engine.check_conditions(donation, state)
    state.week = 4
    assert event_engine.check_conditions(donation, state)

    conflict = get_template("staffConflict")
    state.staff = [make_staff("a")]
    assert not event_engine.check_conditions(conflict, state)
    state.staff.append(make_staff("b"))
    assert event_engine.check_conditions(conflict, state)


class TestRoll:
    def test_nothing_fires(self, state):
        assert event_engine.roll_for_events(state, ScriptedRandom(default=0.99)) is None

    def test_one_pick_among_fired(self, state):
        picked = event_engine.roll_for_events(state, ScriptedRandom(default=0.0))
        assert picked.id == "keyFamilyUnhappy"

    def test_choice_events_can_be_suppressed(self, state):
        state.week = 20
        state.stats.attendance = 10
        picked = event_engine.roll_for_events(state, ScriptedRandom(default=0.0), allow_choice=False)
        assert picked is not None
        assert not picked.is_choice


class TestImmediateEvents:
    def test_donation(self, state):
        outcome = event_engine.process_immediate_event(state, get_template("anonymousDonation"), ScriptedRandom(default=0.0))

        assert state.stats.budget == 5500
        assert outcome.message == "You received an anonymous donation of $500!"
        assert state.news[-1].type == NewsType.POSITIVE
        assert state.event_history[-1].event_id == "anonymousDonation"

    def test_repairs(self, state):
        outcome = event_engine.process_immediate_event(state, get_template("buildingIssue"), ScriptedRandom(default=0.0))
        assert state.stats.budget == 4700
        assert outcome.outcome["budget_change"] == -300
        assert outcome.message == "Emergency repairs cost $300."
        assert state.news[-1].type == NewsType.NEGATIVE

    def test_expense_cut_stops_at_slider_minimum(self, state, rng):
        volunteer = get_template("skilledVolunteer")
        first = event_engine.process_immediate_event(state, volunteer, rng)
        second = event_engine.process_immediate_event(state, volunteer, rng)

        assert first.outcome["savings_per_week"] == 25
        assert second.outcome["savings_per_week"] == 0
        assert state.allocation.maintenance == 25

    def test_morale_floor(self, state, rng):
        state.stats.congregation_morale = 32
        event_engine.process_immediate_event(state, get_template("keyFamilyUnhappy"), rng)
        assert state.stats.congregation_morale == 30

    def test_history_is_bounded(self, state, rng):
        for _ in range(5):
            event_engine.process_immediate_event(state, get_template("gossipSpreading"), rng, history_limit=3)
        assert len(state.event_history) == 3


class TestChoices:
    def test_resolve_applies_choice(self, state, rng):
        event_engine.set_active_event(state, get_template("collaborationRequest"))

        result = event_engine.resolve_choice(state, "collaborationRequest", "accept", rng)

        assert result.success
        assert state.active_event is None
        assert state.stats.budget == 4800
        assert state.stats.reputation == 58
        assert state.stats.community_outreach == 40
        assert state.event_history[-1].choice_id == "accept"

    def test_resolve_without_pending_event(self, state, rng):
        result = event_engine.resolve_choice(state, "collaborationRequest", "accept", rng)
        assert result.rejection == RejectionKind.NOT_FOUND
        assert state.stats.budget == 5000

    def test_resolve_wrong_event(self, state, rng):
        event_engine.set_active_event(state, get_template("buildingRental"))
        result = event_engine.resolve_choice(state, "collaborationRequest", "accept", rng)
        assert result.rejection == RejectionKind.NOT_FOUND
        assert state.active_event.event_id == "buildingRental"

    def test_resolve_unknown_choice(self, state, rng):
        event_engine.set_active_event(state, get_template("buildingRental"))
        result = event_engine.resolve_choice(state, "buildingRental", "burnItDown", rng)
        assert result.rejection == RejectionKind.VALIDATION
        assert state.active_event is not None

    def test_gamble_failure(self, state):
        state.staff = [make_staff("a"), make_staff("b")]
        event_engine.set_active_event(state, get_template("staffConflict"))

        result = event_engine.resolve_choice(state, "staffConflict", "letResolve", ScriptedRandom([0.9]))

        assert result.outcome["resolved"] is False
        assert result.message == "The conflict escalated. Staff morale dropped significantly."
        assert [s.morale for s in state.staff] == [70, 70]
        assert state.stats.congregation_morale == 65

    def test_gamble_success(self, state):
        state.staff = [make_staff("a"), make_staff("b")]
        event_engine.set_active_event(state, get_template("staffConflict"))

        result = event_engine.resolve_choice(state, "staffConflict", "letResolve", ScriptedRandom([0.1]))

        assert result.outcome["resolved"] is True
        assert state.stats.congregation_morale == 73

    def test_side_taking(self, state, rng):
        state.staff = [make_staff("a"), make_staff("b")]
        event_engine.set_active_event(state, get_template("staffConflict"))
        event_engine.resolve_choice(state, "staffConflict", "sideA", rng)
        assert [s.morale for s in state.staff] == [90, 65]

    def test_side_taking_needs_two_staff(self, state, rng):
        state.staff = [make_staff("a")]
        state.active_event = PendingChoice(event_id="staffConflict", triggered_week=1)
        event_engine.resolve_choice(state, "staffConflict", "sideB", rng)
        assert state.staff[0].morale == 80

    def test_stale_choice_expires(self, state):
        state.active_event = PendingChoice(event_id="buildingRental", triggered_week=1)
        state.week = 4
        assert not event_engine.expire_stale_choice(state, 4)
        state.week = 5
        assert event_engine.expire_stale_choice(state, 4)

        assert state.active_event is None
        assert state.event_history[-1].choice_id == event_engine.EXPIRED_CHOICE_ID
        assert state.stats.budget == 5000


def test_event_history_newest_first(state, rng):
    for week, event_id in enumerate(["gossipSpreading", "keyFamilyUnhappy", "buildingIssue"], start=1):
        state.week = week
        event_engine.process_immediate_event(state, get_template(event_id), rng)

    history = event_engine.get_event_history(state, limit=2)
    assert [r.event_id for r in history] == ["buildingIssue", "keyFamilyUnhappy"]
