"""
Demographics-weighted member generator.
Creates individual members, whole families, and a starting congregation.
"""

from typing import List, Optional

from simchurch.data_layer.names import FIRST_NAMES, LAST_NAMES, generate_name
from simchurch.simulation_layer.congregation.member import (
    ADULT_AGE,
    INTERESTS,
    CongregationMember,
)
from simchurch.simulation_layer.models import AttendancePattern, GivingLevel
from simchurch.simulation_layer.random_utils import SimRandom


class MemberGenerator:
    """Generates congregation members. Ids are minted from the game state's counter."""

    # (cumulative probability, age range)
    AGE_BANDS = [
        (0.15, (0, 12)),    # children
        (0.25, (13, 17)),   # youth
        (0.45, (18, 30)),   # young adults
        (0.80, (31, 55)),   # middle age
        (1.00, (56, 85)),   # seniors
    ]
    GIVING_BANDS = [
        (0.25, GivingLevel.NON_GIVER),
        (0.50, GivingLevel.OCCASIONAL),
        (0.85, GivingLevel.TITHER),
        (1.00, GivingLevel.GENEROUS),
    ]
    TWO_PARENT_CHANCE = 0.7
    PARENT_AGE = (28, 55)
    CHILD_AGE = (3, 17)
    MAX_CHILDREN = 3

    def __init__(self, rng: SimRandom, state):
        self.rng = rng
        self.state = state

    def generate_age(self) -> int:
        roll = self.rng.random()
        for threshold, (low, high) in self.AGE_BANDS:
            if roll < threshold:
                return self.rng.randint(low, high)
        low, high = self.AGE_BANDS[-1][1]
        return self.rng.randint(low, high)

    def generate_giving_level(self, age: int) -> GivingLevel:
        if age < ADULT_AGE:
            return GivingLevel.NON_GIVER
        roll = self.rng.random()
        for threshold, level in self.GIVING_BANDS:
            if roll < threshold:
                return level
        return GivingLevel.GENEROUS

    def generate_interests(self, count: Optional[int] = None) -> List[str]:
        if count is None:
            count = self.rng.randint(1, 3)
        return self.rng.sample(INTERESTS, count)

    def generate_member(
        self,
        name: Optional[str] = None,
        age: Optional[int] = None,
        attendance_pattern: AttendancePattern = AttendancePattern.VISITOR,
        satisfaction: Optional[int] = None,
        giving_level: Optional[GivingLevel] = None,
        family_id: Optional[str] = None,
        invited_by: Optional[str] = None,
    ) -> CongregationMember:
        """Generate a single member. Unset attributes are sampled."""
        if age is None:
            age = self.generate_age()
        if giving_level is None or age < ADULT_AGE:
            giving_level = self.generate_giving_level(age)

        return CongregationMember(
            id=self.state.next_id("member"),
            name=name or generate_name(self.rng),
            age=age,
            joined_week=self.state.week,
            attendance_pattern=attendance_pattern,
            satisfaction=satisfaction if satisfaction is not None else self.rng.randint(60, 80),
            giving_level=giving_level,
            interests=self.generate_interests(),
            family_id=family_id,
            invited_by=invited_by,
        )

    def generate_family(
        self, attendance_pattern: AttendancePattern = AttendancePattern.REGULAR
    ) -> List[CongregationMember]:
        """1-2 adults sharing a surname plus 0-3 children, all under one new family id."""
        family_id = self.state.next_id("family")
        last_name = self.rng.choice(LAST_NAMES)
        members = []

        num_parents = 2 if self.rng.chance(self.TWO_PARENT_CHANCE) else 1
        for _ in range(num_parents):
            members.append(self.generate_member(
                name=f"{self.rng.choice(FIRST_NAMES)} {last_name}",
                age=self.rng.randint(*self.PARENT_AGE),
                family_id=family_id,
                attendance_pattern=attendance_pattern,
            ))

        num_children = self.rng.randint(0, self.MAX_CHILDREN)
        for _ in range(num_children):
            members.append(self.generate_member(
                name=f"{self.rng.choice(FIRST_NAMES)} {last_name}",
                age=self.rng.randint(*self.CHILD_AGE),
                family_id=family_id,
                attendance_pattern=attendance_pattern,
                giving_level=GivingLevel.NON_GIVER,
            ))

        return members

    def generate_initial_congregation(self, target_size: int = 50) -> List[CongregationMember]:
        """About 60% families, the rest singles who are mostly regulars."""
        members: List[CongregationMember] = []

        family_target = int(target_size * 0.6)
        while len(members) < family_target:
            members.extend(self.generate_family())

        for _ in range(target_size - len(members)):
            pattern = AttendancePattern.REGULAR if self.rng.chance(0.7) else AttendancePattern.SPORADIC
            members.append(self.generate_member(attendance_pattern=pattern))

        return members
