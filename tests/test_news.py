from simchurch.simulation_layer.models import CongregationResults, NewsType
from simchurch.simulation_layer.news import (
    FLAVOR_NEWS,
    WeeklyChanges,
    check_budget_warnings,
    generate_weekly_news,
    runway_weeks,
)
from tests.conftest import ScriptedRandom


def changes(attendance_change=0, net_income=0, new_candidates=(), **congregation):
    return WeeklyChanges(
        attendance_change=attendance_change,
        net_income=net_income,
        new_candidates=list(new_candidates),
        congregation=CongregationResults(**congregation),
    )


def test_quiet_week_gets_flavor_news(state):
    item = generate_weekly_news(state, changes(), ScriptedRandom())
    assert item.text in FLAVOR_NEWS
    assert len(state.news) == 1


def test_exactly_one_headline_per_week(state):
    generate_weekly_news(state, changes(attendance_change=8, net_income=900, conversions=2), ScriptedRandom())
    assert len(state.news) == 1
    assert state.news[0].text == "Great week! 8 new people attended this Sunday!"


def test_milestone_beats_everything(state):
    state.previous_stats.attendance = 95
    state.stats.attendance = 102
    item = generate_weekly_news(state, changes(attendance_change=7), ScriptedRandom())
    assert item.type == NewsType.HIGHLIGHT


def test_conversions_headline(state):
    item = generate_weekly_news(state, changes(conversions=1), ScriptedRandom())
    assert item.text == "🎉 1 visitor decided to become regular!"


def test_runway():
    assert runway_weeks(1000, -300) == 3
    assert runway_weeks(1000, 200) is None
    assert runway_weeks(-500, -100) is None


def test_debt_warning_without_runway_warning(state):
    state.stats.budget = -500
    warnings = check_budget_warnings(state, -100)
    assert len(warnings) == 1
    assert warnings[0].text == "🚨 Your church is in debt! Balance: $-500"


def test_low_funds_and_runway(state):
    state.stats.budget = 600
    texts = [w.text for w in check_budget_warnings(state, -200)]
    assert "⚠️ Warning: At this rate, you'll run out of funds in 3 weeks!" in texts
    assert "💸 Funds are running low. Only $600 remaining." in texts


def test_healthy_budget_has_no_warnings(state):
    assert check_budget_warnings(state, 100) == []


def test_news_feed_is_bounded(state):
    state.news_limit = 5
    for i in range(8):
        state.add_news(f"item {i}")
    assert len(state.news) == 5
    assert state.latest_news.text == "item 7"
