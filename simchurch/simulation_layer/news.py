"""
Weekly headline and budget warnings.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from simchurch.simulation_layer.models import CongregationResults, NewsItem, NewsType
from simchurch.simulation_layer.random_utils import SimRandom
from simchurch.simulation_layer.staff.staff_member import Candidate

FLAVOR_NEWS = [
    "A steady week at the church. The congregation seems content.",
    "Sunday service went smoothly this week.",
    "A few visitors stopped by to check out the church.",
    "The weekly prayer meeting had good attendance.",
    "A member mentioned they invited a friend to visit next week.",
]

ATTENDANCE_MILESTONE = 100
REPUTATION_MILESTONE = 75
RUNWAY_WARNING_WEEKS = 4
LOW_FUNDS = 1000


@dataclass
class WeeklyChanges:
    attendance_change: int
    net_income: int
    new_candidates: List[Candidate]
    congregation: CongregationResults


def _plural(count: int, word: str) -> str:
    return word if count == 1 else f"{word}s"


def weekly_news_options(state, changes: WeeklyChanges) -> List[Tuple[str, NewsType]]:
    """All headlines that apply this week, highest priority first."""
    options: List[Tuple[str, NewsType]] = []

    if state.stats.reputation >= REPUTATION_MILESTONE > state.previous_stats.reputation:
        options.append(("⭐ Your church is becoming well-known in the community!", NewsType.HIGHLIGHT))
    if state.stats.attendance >= ATTENDANCE_MILESTONE > state.previous_stats.attendance:
        options.append(("🎉 Milestone reached! Your church now has 100+ in attendance!", NewsType.HIGHLIGHT))

    if changes.attendance_change > 5:
        options.append((f"Great week! {changes.attendance_change} new people attended this Sunday!", NewsType.POSITIVE))
    elif changes.attendance_change < -5:
        options.append((f"Attendance dropped by {abs(changes.attendance_change)} this week.", NewsType.NEGATIVE))

    if changes.net_income > 500:
        options.append((f"Generous giving this week! Budget increased by ${changes.net_income}.", NewsType.POSITIVE))
    elif changes.net_income < -500:
        options.append((f"Tight week financially. Budget decreased by ${abs(changes.net_income)}.", NewsType.NEGATIVE))

    candidates = changes.new_candidates
    if len(candidates) == 1:
        options.append((f"📋 A new candidate is available for hire: {candidates[0].position}", NewsType.NORMAL))
    elif candidates:
        options.append((f"📋 {len(candidates)} new candidates are looking for positions!", NewsType.NORMAL))

    cr = changes.congregation
    if cr.new_visitors > 2:
        options.append((f"👋 {cr.new_visitors} new visitors attended this week!", NewsType.POSITIVE))
    if cr.conversions > 0:
        options.append((
            f"🎉 {cr.conversions} {_plural(cr.conversions, 'visitor')} decided to become "
            f"{_plural(cr.conversions, 'regular')}!",
            NewsType.POSITIVE,
        ))
    if cr.departures > 2:
        options.append((f"😢 {cr.departures} members left the church this week.", NewsType.NEGATIVE))

    return options


def generate_weekly_news(state, changes: WeeklyChanges, rng: SimRandom) -> NewsItem:
    """Post exactly one headline: the top option, or a flavor line on a quiet week."""
    options = weekly_news_options(state, changes)
    if options:
        text, news_type = options[0]
    else:
        text, news_type = rng.choice(FLAVOR_NEWS), NewsType.NORMAL
    return state.add_news(text, news_type)


def runway_weeks(budget: int, net: int) -> Optional[int]:
    """Whole weeks until the money runs out, or None when not burning money."""
    if net < 0 and budget > 0:
        return budget // abs(net)
    return None


def check_budget_warnings(state, net_income: int) -> List[NewsItem]:
    warnings = []
    budget = state.stats.budget

    runway = runway_weeks(budget, net_income)
    if runway is not None and runway <= RUNWAY_WARNING_WEEKS:
        warnings.append(state.add_news(
            f"⚠️ Warning: At this rate, you'll run out of funds in {runway} weeks!", NewsType.NEGATIVE
        ))
    if budget < 0:
        warnings.append(state.add_news(
            f"🚨 Your church is in debt! Balance: ${budget:,}", NewsType.NEGATIVE
        ))
    if 0 < budget < LOW_FUNDS:
        warnings.append(state.add_news(
            f"💸 Funds are running low. Only ${budget:,} remaining.", NewsType.NEGATIVE
        ))
    return warnings
