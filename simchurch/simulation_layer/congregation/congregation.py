"""
Congregation tick and roster queries.

The weekly pass is two-phase: members are walked and mutated in place
while new visitors and departures are only collected; the roster list is
rebuilt once after the walk.
"""

import logging
from collections import Counter
from typing import Dict, List, Optional

from simchurch.simulation_layer.congregation.behavior import (
    MemberWeekContext,
    process_member_week,
)
from simchurch.simulation_layer.congregation.member import GIVING_RANGES, CongregationMember
from simchurch.simulation_layer.congregation.member_generator import MemberGenerator
from simchurch.simulation_layer.models import (
    AgeGroup,
    AttendancePattern,
    CongregationResults,
    GivingLevel,
)
from simchurch.simulation_layer.random_utils import SimRandom, round_half_up

logger = logging.getLogger(__name__)

MAX_VISITOR_ROLLS = 3
BASE_VISITOR_CHANCE = 0.3
FAMILY_VISIT_CHANCE = 0.3
INVITE_SATISFACTION = 85
INVITE_CHANCE = 0.05

MEMBER_SORT_KEYS = ("satisfaction", "age", "name", "joined_week", "total_attendance")


def process_weekly_behaviors(state, rng: SimRandom) -> CongregationResults:
    """Run one week of member behavior and return the counters."""
    results = CongregationResults()
    ctx = MemberWeekContext(
        week=state.week,
        has_staff=bool(state.staff),
        reputation=state.stats.reputation,
        morale=state.stats.congregation_morale,
        program_spend=state.allocation.programs,
    )

    # Phase 1: walk the live roster; the list itself is not touched
    roster_size = len(state.congregation)
    for member in state.congregation:
        outcome = process_member_week(member, ctx, rng)
        if outcome.attended:
            results.attended_this_week += 1
        if outcome.converted:
            results.conversions += 1

    generator = MemberGenerator(rng, state)
    walk_ins = generate_new_visitors(state, rng, generator)
    invited = process_invitations(state, rng, generator)

    results.new_visitors = len(walk_ins) + len(invited)
    results.attended_this_week += len(walk_ins)

    # Phase 2: apply removals and additions in one rebuild
    staying = [m for m in state.congregation if not m.departed]
    results.departures = roster_size - len(staying)
    state.congregation = staying + walk_ins + invited

    logger.debug(
        "Week %d congregation: attended=%d visitors=%d conversions=%d departures=%d",
        state.week,
        results.attended_this_week,
        results.new_visitors,
        results.conversions,
        results.departures,
    )
    return results


def visitor_chance(reputation: int) -> float:
    return BASE_VISITOR_CHANCE + (reputation - 50) / 100


def generate_new_visitors(state, rng: SimRandom, generator: MemberGenerator) -> List[CongregationMember]:
    """0-3 walk-in rolls, some of which bring a whole family. Walk-ins attend this week."""
    visitors: List[CongregationMember] = []
    chance = visitor_chance(state.stats.reputation)

    for _ in range(rng.randint(0, MAX_VISITOR_ROLLS)):
        if not rng.chance(chance):
            continue
        if rng.chance(FAMILY_VISIT_CHANCE):
            visitors.extend(generator.generate_family(attendance_pattern=AttendancePattern.VISITOR))
        else:
            visitors.append(generator.generate_member(attendance_pattern=AttendancePattern.VISITOR))

    for visitor in visitors:
        visitor.last_attended_week = state.week
        visitor.total_attendance = 1
    return visitors


def process_invitations(state, rng: SimRandom, generator: MemberGenerator) -> List[CongregationMember]:
    """Very satisfied adult non-visitors sometimes bring a friend."""
    invited = []
    for member in state.congregation:
        if (
            member.departed
            or member.attendance_pattern == AttendancePattern.VISITOR
            or not member.is_adult
            or member.satisfaction < INVITE_SATISFACTION
        ):
            continue
        if rng.chance(INVITE_CHANCE):
            invited.append(
                generator.generate_member(attendance_pattern=AttendancePattern.VISITOR, invited_by=member.id)
            )
    return invited


def calculate_weekly_giving(state, rng: SimRandom, service_week: Optional[int] = None) -> int:
    """Sum of gifts from members who attended the service (default: the current week)."""
    if service_week is None:
        service_week = state.week
    total = 0
    for member in state.congregation:
        if not member.attended_in(service_week):
            continue
        amount_range = GIVING_RANGES[member.giving_level]
        if amount_range is None:
            continue
        amount = rng.randint(*amount_range)
        total += round_half_up(amount * member.satisfaction / 100)
    return total


def get_stats(state) -> Dict:
    """
    Roster breakdown.

    `active_this_week` counts members seen at the most recent service,
    i.e. the week that was last processed.
    """
    members = state.congregation
    if not members:
        return {
            "total": 0,
            "by_pattern": {},
            "by_age_group": {},
            "by_giving": {},
            "avg_satisfaction": 0,
            "active_this_week": 0,
        }

    patterns = Counter(m.attendance_pattern for m in members)
    ages = Counter(m.age_group for m in members)
    giving = Counter(m.giving_level for m in members)
    last_service = state.week - 1

    return {
        "total": len(members),
        "by_pattern": {p.value: patterns.get(p, 0) for p in AttendancePattern},
        "by_age_group": {g.value: ages.get(g, 0) for g in AgeGroup},
        "by_giving": {g.value: giving.get(g, 0) for g in GivingLevel},
        "avg_satisfaction": round_half_up(sum(m.satisfaction for m in members) / len(members)),
        "active_this_week": sum(1 for m in members if m.attended_in(last_service)),
    }


def get_members(
    state,
    pattern: Optional[AttendancePattern] = None,
    age_group: Optional[AgeGroup] = None,
    sort_by: Optional[str] = None,
    limit: Optional[int] = None,
) -> List[CongregationMember]:
    """Filter, sort (descending for numbers, alphabetical for names) and cap the roster."""
    members = list(state.congregation)
    if pattern is not None:
        members = [m for m in members if m.attendance_pattern == AttendancePattern(pattern)]
    if age_group is not None:
        members = [m for m in members if m.age_group == AgeGroup(age_group)]

    if sort_by is not None:
        if sort_by not in MEMBER_SORT_KEYS:
            raise ValueError(f"Unknown sort key: {sort_by}")
        members.sort(key=lambda m: getattr(m, sort_by), reverse=sort_by != "name")

    if limit is not None:
        members = members[:limit]
    return members


def find_member(state, member_id: str) -> Optional[CongregationMember]:
    return next((m for m in state.congregation if m.id == member_id), None)
