from collections import Counter

import pandas as pd
import pytest

from simchurch.simulation_layer.engine import (
    CHOICE_STRATEGIES,
    ChurchSimulation,
    SimulationBusyError,
)
from simchurch.simulation_layer.events.catalog import get_template
from simchurch.simulation_layer.events import event_engine
from simchurch.simulation_layer.models import RejectionKind
from simchurch.simulation_layer.policies import PolicyEffects
from simchurch.simulation_layer.staff.staff_member import StaffEffects


def test_new_game(simulation):
    assert len(simulation.state.congregation) == 50
    assert simulation.state.week == 1


def test_process_week_advances_one_week(simulation):
    result = simulation.process_week()

    assert result.week == 1
    assert simulation.state.week == 2
    assert len(simulation.state.financial_history) == 1
    assert result.net_income == result.income.total - result.expenses.total
    assert simulation.state.stats.budget == 5000 + result.net_income
    assert simulation.state.news


def test_same_seed_same_run(settings, store):
    first = ChurchSimulation.new_game(seed=7, settings=settings, store=store).run_weeks(20)
    second = ChurchSimulation.new_game(seed=7, settings=settings, store=store).run_weeks(20)
    pd.testing.assert_frame_equal(first, second)


def test_stats_stay_in_range(simulation):
    frame = simulation.run_weeks(60, resolve_choice=CHOICE_STRATEGIES["random"])

    assert len(frame) == 60
    assert (frame["attendance"] >= 1).all()
    assert frame["reputation"].between(0, 100).all()
    assert frame["congregation_morale"].between(30, 100).all()
    assert frame["attendance_change"].between(-10, 15).all()
    assert frame["reputation_change"].between(-5, 5).all()
    assert len(simulation.state.news) <= 50
    assert len(simulation.state.financial_history) <= 52


def test_at_most_one_new_event_per_week(simulation):
    for _ in range(80):
        result = simulation.process_week()
        if result.event is not None and result.event.pending:
            template = event_engine.get_active_event(simulation.state)
            choice_id = CHOICE_STRATEGIES["first"](template, simulation.rng)
            assert simulation.resolve_choice(template.id, choice_id).success
            assert simulation.state.active_event is None

    fired = Counter(r.week for r in simulation.state.event_history if r.choice_id is None)
    assert all(count == 1 for count in fired.values())


def test_pending_choice_blocks_new_choice_until_it_expires(simulation):
    pending = event_engine.set_active_event(simulation.state, get_template("buildingRental"))
    assert pending.pending
    slot = simulation.state.active_event

    for _ in range(4):
        simulation.process_week()
        assert simulation.state.active_event is slot

    simulation.process_week()
    assert simulation.state.active_event is not slot
    assert any(r.choice_id == "expired" for r in simulation.state.event_history)


def test_auto_resolve_clears_every_choice(simulation):
    frame = simulation.run_weeks(40, resolve_choice=CHOICE_STRATEGIES["first"])
    assert simulation.state.active_event is None
    if "choice_id" in frame:
        assert frame["choice_id"].dropna().isin(["accept", "sideA", "fullSupport"]).all()


def test_busy_guard(simulation):
    simulation._tick_lock.acquire()
    try:
        with pytest.raises(SimulationBusyError):
            simulation.process_week()
    finally:
        simulation._tick_lock.release()
    assert simulation.state.week == 1


def test_morale_drift_without_staff(simulation):
    simulation.state.stats.congregation_morale = 70
    simulation._update_morale(StaffEffects(), PolicyEffects())
    assert 69 <= simulation.state.stats.congregation_morale <= 71


def test_morale_clamped(simulation):
    simulation.state.stats.congregation_morale = 100
    simulation._update_morale(StaffEffects(morale_bonus=20), PolicyEffects(satisfaction_modifier=30))
    assert simulation.state.stats.congregation_morale == 100


class TestIncome:
    def test_empty_congregation_with_no_attendance(self, simulation):
        simulation.state.congregation = []
        simulation.state.stats.attendance = 0
        income = simulation._calculate_income(simulation.rng, PolicyEffects(), 1)
        assert income.tithes == 0

    def test_fallback_per_head_giving(self, simulation):
        simulation.state.congregation = []
        simulation.state.stats.attendance = 40
        simulation.state.stats.congregation_morale = 50
        income = simulation._calculate_income(simulation.rng, PolicyEffects(), 1)
        assert income.tithes == 500
        assert income.total == income.tithes + income.offerings

    def test_expenses_follow_allocation(self, simulation):
        expenses = simulation._calculate_expenses()
        assert expenses.total == 400
        assert expenses.salaries == 0


class TestQueries:
    def test_projection_does_not_advance_the_game_rng(self, simulation):
        simulation.process_week()
        before = simulation.rng.random_gen.getstate()
        projection = simulation.get_projected_financials()
        assert simulation.rng.random_gen.getstate() == before
        assert projection["net"] == projection["income"].total - projection["expenses"].total

    def test_financial_stats(self, simulation):
        assert simulation.get_financial_stats() == {"best_week": 0, "worst_week": 0, "average": 0, "runway": None}
        simulation.run_weeks(10)
        stats = simulation.get_financial_stats()
        assert stats["worst_week"] <= stats["average"] <= stats["best_week"]

    def test_church_status_tiers(self, simulation):
        simulation.state.stats.attendance = 10
        assert "just getting started" in simulation.get_church_status()
        simulation.state.stats.attendance = 400
        assert "megachurch" in simulation.get_church_status()

    def test_stat_change(self, simulation):
        simulation.process_week()
        change = simulation.get_stat_change()
        state = simulation.state
        assert change["budget"] == state.stats.budget - state.previous_stats.budget

    def test_member_alignment(self, simulation):
        member = simulation.state.congregation[0]
        assert -100 <= simulation.member_policy_alignment(member.id) <= 100
        assert simulation.member_policy_alignment("member_missing") is None


class TestActions:
    def test_allocation(self, simulation):
        assert simulation.set_expense_allocation("programs", 300).success
        assert simulation.state.allocation.programs == 300

        result = simulation.set_expense_allocation("programs", 900)
        assert result.rejection == RejectionKind.VALIDATION
        assert simulation.state.allocation.programs == 300

        assert not simulation.set_expense_allocation("catering", 100).success

    def test_unknown_scenario(self, simulation):
        result = simulation.start_scenario("moonBase")
        assert result.rejection == RejectionKind.NOT_FOUND
        assert simulation.state.game_mode == "sandbox"

    def test_start_scenario(self, simulation):
        assert simulation.start_scenario("turnaround").success
        state = simulation.state
        assert state.game_mode == "challenge"
        assert state.stats.budget == 3000
        assert len(state.congregation) == 35
        assert simulation.check_goals()["active"]

    def test_policy_change_through_engine(self, simulation):
        result = simulation.set_policy("worshipStyle", "contemporary")
        assert result.changed
        assert simulation.get_policy_history()[0].to_option == "contemporary"
