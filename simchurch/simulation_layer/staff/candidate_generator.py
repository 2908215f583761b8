"""
Job candidate generator.
"""

from typing import Dict, List

from simchurch.data_layer.names import generate_name
from simchurch.simulation_layer.random_utils import SimRandom, round_half_up
from simchurch.simulation_layer.staff.positions import GENERAL_SKILLS, POSITIONS, Position
from simchurch.simulation_layer.staff.staff_member import Candidate
from simchurch.simulation_layer.staff.traits import generate_random_traits

PRIMARY_SKILL_RANGE = (5, 10)
OTHER_SKILL_RANGE = (3, 8)
SALARY_NOISE = 0.15
SALARY_STEP = 25
MAX_WEEKLY_CANDIDATES = 3
FALLBACK_BACKSTORY = "Seeking a new opportunity in ministry."


def generate_skills(position: Position, rng: SimRandom) -> Dict[str, int]:
    skills = {position.primary_skill: rng.randint(*PRIMARY_SKILL_RANGE)}
    for skill_id in (position.secondary_skill,) + GENERAL_SKILLS:
        skills[skill_id] = rng.randint(*OTHER_SKILL_RANGE)
    return skills


def generate_salary_expectation(position: Position, skills: Dict[str, int], rng: SimRandom) -> int:
    """Scales across the position's range with the primary skill, +-15% noise, to the nearest $25."""
    low, high = position.salary_range
    spread = high - low
    skill_factor = (skills.get(position.primary_skill, 5) - 1) / 9
    noise = rng.uniform(-SALARY_NOISE, SALARY_NOISE)
    salary = low + spread * skill_factor + spread * noise
    return round_half_up(salary / SALARY_STEP) * SALARY_STEP


def generate_candidate(state, position_id: str, rng: SimRandom, expiry_weeks: int = 3) -> Candidate:
    position = POSITIONS[position_id]
    name = generate_name(rng)
    traits = generate_random_traits(rng)
    skills = generate_skills(position, rng)
    salary = generate_salary_expectation(position, skills, rng)
    backstory = rng.choice(position.backstories) if position.backstories else FALLBACK_BACKSTORY

    return Candidate(
        id=state.next_id("candidate"),
        name=name,
        position_id=position_id,
        position=position.title,
        skills=skills,
        traits=traits,
        salary_expectation=salary,
        backstory=backstory,
        generated_week=state.week,
        expires_week=state.week + expiry_weeks,
    )


def generate_weekly_candidates(state, rng: SimRandom, expiry_weeks: int = 3) -> List[Candidate]:
    """0-3 candidates, each for a random position that is unlocked and not full."""
    count = rng.randint(0, MAX_WEEKLY_CANDIDATES)
    if count == 0:
        return []

    open_positions = available_positions(state)
    if not open_positions:
        return []

    return [
        generate_candidate(state, rng.choice(open_positions).id, rng, expiry_weeks)
        for _ in range(count)
    ]


def available_positions(state) -> List[Position]:
    """Positions unlocked by current attendance with room under the cap."""
    return [
        position
        for position in POSITIONS.values()
        if state.stats.attendance >= position.unlock_at_attendance
        and state.staff_count(position.id) < position.max_positions
    ]
