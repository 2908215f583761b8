"""
Hiring, firing and the weekly staff effects.
"""

import logging
from typing import Optional

from simchurch.simulation_layer.models import ActionResult, NewsType
from simchurch.simulation_layer.random_utils import round_half_up
from simchurch.simulation_layer.staff.positions import POSITIONS
from simchurch.simulation_layer.staff.staff_member import StaffEffects, StaffMember
from simchurch.simulation_layer.staff.traits import get_trait

logger = logging.getLogger(__name__)

FIRING_MORALE_HIT = 5


def remove_expired_candidates(state) -> int:
    """Drop candidates whose expiry week has been reached. Returns how many went."""
    before = len(state.candidates)
    state.candidates = [c for c in state.candidates if c.expires_week > state.week]
    return before - len(state.candidates)


def find_candidate(state, candidate_id: str):
    return next((c for c in state.candidates if c.id == candidate_id), None)


def find_staff(state, staff_id: str) -> Optional[StaffMember]:
    return next((s for s in state.staff if s.id == staff_id), None)


def hire_candidate(state, candidate_id: str) -> ActionResult:
    candidate = find_candidate(state, candidate_id)
    if candidate is None:
        logger.warning("Hire rejected: candidate %s not found", candidate_id)
        return ActionResult.not_found("Candidate not found")

    position = POSITIONS[candidate.position_id]
    if state.staff_count(position.id) >= position.max_positions:
        logger.warning("Hire rejected: %s is full", position.id)
        if position.max_positions == 1:
            reason = f"You can only have one {position.title}."
        else:
            reason = f"You already have the maximum number of {position.title}s ({position.max_positions})."
        return ActionResult.invalid(reason)

    staff_member = StaffMember(
        id=state.next_id("staff"),
        name=candidate.name,
        position_id=candidate.position_id,
        position=candidate.position,
        skills=dict(candidate.skills),
        traits=list(candidate.traits),
        salary=candidate.salary_expectation,
        hired_week=state.week,
    )
    state.staff.append(staff_member)
    state.candidates.remove(candidate)

    state.add_news(f"Welcome {staff_member.name}! They joined as {staff_member.position}.", NewsType.POSITIVE)
    logger.info("Hired %s as %s for $%d/week", staff_member.name, staff_member.position, staff_member.salary)
    return ActionResult.ok(f"Hired {staff_member.name} as {staff_member.position}", staff=staff_member)


def fire_staff(state, staff_id: str) -> ActionResult:
    staff_member = find_staff(state, staff_id)
    if staff_member is None:
        logger.warning("Fire rejected: staff %s not found", staff_id)
        return ActionResult.not_found("Staff member not found")

    state.staff.remove(staff_member)
    for colleague in state.staff:
        colleague.morale = max(0, colleague.morale - FIRING_MORALE_HIT)

    state.add_news(f"{staff_member.name} has left the church staff.", NewsType.NORMAL)
    logger.info("Let go %s (%s)", staff_member.name, staff_member.position)
    return ActionResult.ok(f"{staff_member.name} has been let go")


def pass_on_candidate(state, candidate_id: str) -> ActionResult:
    candidate = find_candidate(state, candidate_id)
    if candidate is None:
        return ActionResult.not_found("Candidate not found")
    state.candidates.remove(candidate)
    return ActionResult.ok(f"Passed on {candidate.name}")


def calculate_total_salaries(state) -> int:
    return sum(s.salary for s in state.staff)


def calculate_staff_effects(state) -> StaffEffects:
    """
    Position bonuses scaled by each member's average skill / 10, plus
    unscaled team morale from traits.
    """
    effects = StaffEffects()
    for staff_member in state.staff:
        position = POSITIONS.get(staff_member.position_id)
        if position is None:
            continue
        multiplier = staff_member.average_skill / 10
        base = position.effects

        effects.attendance_bonus += round_half_up(base.attendance_bonus * multiplier)
        effects.reputation_bonus += round_half_up(base.reputation_bonus * multiplier)
        effects.morale_bonus += round_half_up(base.morale_bonus * multiplier)
        effects.outreach_bonus += round_half_up(base.outreach_bonus * multiplier)

        for trait_id in staff_member.traits:
            trait = get_trait(trait_id)
            if trait is not None:
                effects.morale_bonus += trait.team_morale

    return effects
