"""
Per-member weekly behavior.

Each tick a member goes through three steps in order:
    1. attendance roll (Bernoulli on the pattern's frequency)
    2. satisfaction drift
    3. attendance-pattern state machine

Visitor --(tenure>=4, sat>=70)--> sporadic / regular (sat>=85)
Visitor --(tenure>=4, sat<50 or tenure>8)--> departed
Regular --(sat<50)--> sporadic,  Regular --(sat>=90, p=.10)--> dedicated
Sporadic --(sat>=75, p=.20)--> regular,  Sporadic --(sat<40, p=.30)--> departed
Dedicated and departed members never change.
"""

from dataclasses import dataclass

from simchurch.simulation_layer.congregation.member import (
    ATTENDANCE_FREQUENCY,
    CongregationMember,
)
from simchurch.simulation_layer.models import AttendancePattern
from simchurch.simulation_layer.random_utils import SimRandom, clamp, round_half_up

VISITOR_DECISION_WEEKS = 4
VISITOR_MAX_WEEKS = 8
STABLE_TENURE_WEEKS = 20


@dataclass
class MemberWeekContext:
    """The slice of church state a member reacts to this week."""

    week: int
    has_staff: bool
    reputation: int
    morale: int
    program_spend: int


@dataclass
class MemberWeekOutcome:
    attended: bool = False
    converted: bool = False
    departed: bool = False


def roll_attendance(member: CongregationMember, week: int, rng: SimRandom) -> bool:
    if rng.chance(ATTENDANCE_FREQUENCY[member.attendance_pattern]):
        member.last_attended_week = week
        member.total_attendance += 1
        return True
    return False


def update_satisfaction(member: CongregationMember, ctx: MemberWeekContext, rng: SimRandom) -> int:
    """Apply this week's satisfaction drift and return the delta actually used."""
    delta = rng.randint(-3, 3)

    if ctx.has_staff:
        delta += rng.randint(0, 2)

    if ctx.reputation > 70:
        delta += 1
    elif ctx.reputation < 40:
        delta -= 2

    if ctx.program_spend >= 200:
        delta += 1
    elif ctx.program_spend < 50:
        delta -= 1

    # long-time members are steadier
    if member.tenure(ctx.week) >= STABLE_TENURE_WEEKS:
        delta = round_half_up(delta * 0.5)

    member.satisfaction = clamp(member.satisfaction + delta, 0, 100)
    return delta


def check_pattern_change(member: CongregationMember, week: int, rng: SimRandom) -> MemberWeekOutcome:
    """Run one step of the attendance-pattern state machine."""
    outcome = MemberWeekOutcome()
    if member.departed:
        return outcome

    pattern = member.attendance_pattern
    sat = member.satisfaction

    if pattern == AttendancePattern.VISITOR:
        tenure = member.tenure(week)
        if tenure >= VISITOR_DECISION_WEEKS:
            if sat >= 70:
                member.attendance_pattern = (
                    AttendancePattern.REGULAR if sat >= 85 else AttendancePattern.SPORADIC
                )
                outcome.converted = True
            elif sat < 50 or tenure > VISITOR_MAX_WEEKS:
                member.departed = True
                outcome.departed = True

    elif pattern == AttendancePattern.REGULAR:
        if sat < 50:
            member.attendance_pattern = AttendancePattern.SPORADIC
        elif sat >= 90 and rng.chance(0.10):
            member.attendance_pattern = AttendancePattern.DEDICATED

    elif pattern == AttendancePattern.SPORADIC:
        if sat >= 75 and rng.chance(0.20):
            member.attendance_pattern = AttendancePattern.REGULAR
        elif sat < 40 and rng.chance(0.30):
            member.departed = True
            outcome.departed = True

    return outcome


def process_member_week(
    member: CongregationMember, ctx: MemberWeekContext, rng: SimRandom
) -> MemberWeekOutcome:
    """Attendance, then satisfaction, then pattern change."""
    attended = roll_attendance(member, ctx.week, rng)
    update_satisfaction(member, ctx, rng)
    outcome = check_pattern_change(member, ctx.week, rng)
    outcome.attended = attended
    return outcome
