"""
Congregation member data model.
One simulated person in the church's roster.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from simchurch.simulation_layer.models import AgeGroup, AttendancePattern, GivingLevel


# Inclusive upper age bound of each group; senior is open-ended
AGE_GROUP_BOUNDS: List[Tuple[int, AgeGroup]] = [
    (12, AgeGroup.CHILD),
    (17, AgeGroup.YOUTH),
    (30, AgeGroup.YOUNG_ADULT),
    (55, AgeGroup.MIDDLE_AGE),
]

ATTENDANCE_FREQUENCY: Dict[AttendancePattern, float] = {
    AttendancePattern.VISITOR: 0.30,
    AttendancePattern.SPORADIC: 0.50,
    AttendancePattern.REGULAR: 0.85,
    AttendancePattern.DEDICATED: 0.95,
}

# Weekly amount range per giving level (None = gives nothing)
GIVING_RANGES: Dict[GivingLevel, Optional[Tuple[int, int]]] = {
    GivingLevel.NON_GIVER: None,
    GivingLevel.OCCASIONAL: (5, 20),
    GivingLevel.TITHER: (25, 75),
    GivingLevel.GENEROUS: (100, 300),
}

INTERESTS = [
    "music", "outreach", "children", "youth", "prayer",
    "bible study", "fellowship", "missions", "hospitality", "counseling",
]

ADULT_AGE = 18


def get_age_group(age: int) -> AgeGroup:
    for upper, group in AGE_GROUP_BOUNDS:
        if age <= upper:
            return group
    return AgeGroup.SENIOR


@dataclass
class CongregationMember:
    """
    A congregation member.
    Mutated every tick; removed from the roster only in the cleanup phase
    after `departed` is set.
    """

    id: str
    name: str
    age: int
    joined_week: int
    attendance_pattern: AttendancePattern = AttendancePattern.VISITOR
    satisfaction: int = 70  # 0~100
    giving_level: GivingLevel = GivingLevel.NON_GIVER
    interests: List[str] = field(default_factory=list)
    family_id: Optional[str] = None
    last_attended_week: Optional[int] = None
    total_attendance: int = 0
    invited_by: Optional[str] = None  # member id, not kept in sync after creation
    departed: bool = False

    @property
    def age_group(self) -> AgeGroup:
        return get_age_group(self.age)

    @property
    def is_adult(self) -> bool:
        return self.age >= ADULT_AGE

    def tenure(self, week: int) -> int:
        """Weeks since this member first showed up."""
        return week - self.joined_week

    def attended_in(self, week: int) -> bool:
        return self.last_attended_week == week

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "age": self.age,
            "age_group": self.age_group.value,
            "joined_week": self.joined_week,
            "attendance_pattern": self.attendance_pattern.value,
            "satisfaction": self.satisfaction,
            "giving_level": self.giving_level.value,
            "interests": list(self.interests),
            "family_id": self.family_id,
            "last_attended_week": self.last_attended_week,
            "total_attendance": self.total_attendance,
            "invited_by": self.invited_by,
            "departed": self.departed,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CongregationMember":
        return cls(
            id=data["id"],
            name=data["name"],
            age=data["age"],
            joined_week=data["joined_week"],
            attendance_pattern=AttendancePattern(data["attendance_pattern"]),
            satisfaction=data["satisfaction"],
            giving_level=GivingLevel(data["giving_level"]),
            interests=list(data.get("interests", [])),
            family_id=data.get("family_id"),
            last_attended_week=data.get("last_attended_week"),
            total_attendance=data.get("total_attendance", 0),
            invited_by=data.get("invited_by"),
            departed=data.get("departed", False),
        )
