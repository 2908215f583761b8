import pytest

from simchurch.simulation_layer.models import NewsType
from simchurch.simulation_layer.scenario.scenarios import SCENARIOS, check_goals, start_scenario


def test_catalog():
    assert set(SCENARIOS) == {"newPlant", "turnaround", "megachurch", "budgetCrisis", "communityChampion"}


def test_unknown_scenario_leaves_state_alone(state, rng):
    assert not start_scenario(state, "moonBase", rng)
    assert state.game_mode == "sandbox"
    assert state.congregation == []


def test_church_plant_start(state, rng):
    assert start_scenario(state, "newPlant", rng)

    assert state.game_mode == "challenge"
    assert state.stats.attendance == 20
    assert state.stats.budget == 2000
    assert len(state.congregation) == 20
    assert state.church.name == "New Hope Fellowship"
    assert state.time_limit is None
    assert state.previous_stats.attendance == 20
    assert state.news[-1].type == NewsType.HIGHLIGHT


def test_sandbox_has_no_goals(state):
    assert check_goals(state) == {"active": False}


def test_goal_progress(state, rng):
    start_scenario(state, "turnaround", rng)
    state.stats.attendance = 60

    goals = check_goals(state)

    assert goals["active"]
    attendance_goal = goals["goals"][0]
    assert attendance_goal["current"] == 60
    assert attendance_goal["progress"] == 80
    assert not attendance_goal["completed"]
    assert goals["weeks_remaining"] == 52
    assert not goals["victory"]
    assert not goals["defeat"]


def test_victory(state, rng):
    start_scenario(state, "turnaround", rng)
    state.stats.attendance = 80
    state.stats.congregation_morale = 72
    goals = check_goals(state)
    assert goals["all_complete"]
    assert goals["victory"]


@pytest.mark.parametrize("scenario_id, limit", [("turnaround", 52), ("budgetCrisis", 26)])
def test_defeat_when_time_runs_out(state, rng, scenario_id, limit):
    start_scenario(state, scenario_id, rng)
    state.week += limit
    goals = check_goals(state)
    assert goals["time_up"]
    assert goals["defeat"]
    assert goals["weeks_remaining"] == 0


def test_untimed_scenario_never_times_out(state, rng):
    start_scenario(state, "newPlant", rng)
    state.week += 500
    goals = check_goals(state)
    assert not goals["time_up"]
    assert goals["weeks_remaining"] is None
