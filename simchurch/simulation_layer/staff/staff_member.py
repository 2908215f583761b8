"""
Staff and candidate data models.
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, List


@dataclass
class Candidate:
    """An unhired applicant. Leaves the pool once `expires_week` is reached."""

    id: str
    name: str
    position_id: str
    position: str  # display title
    skills: Dict[str, int]  # 1~10
    traits: List[str]
    salary_expectation: int
    backstory: str
    generated_week: int
    expires_week: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Candidate":
        return cls(**data)


@dataclass
class StaffMember:
    """A hired employee. Salary is locked in at hire time."""

    id: str
    name: str
    position_id: str
    position: str
    skills: Dict[str, int]
    traits: List[str]
    salary: int
    hired_week: int
    morale: int = 80  # 0~100
    energy: int = 100  # 0~100
    loyalty: int = 50  # 0~100

    @property
    def average_skill(self) -> float:
        if not self.skills:
            return 0.0
        return sum(self.skills.values()) / len(self.skills)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StaffMember":
        return cls(**data)


@dataclass
class StaffEffects:
    """Additive bonuses the roster contributes to the weekly tick."""

    attendance_bonus: int = 0
    reputation_bonus: int = 0
    morale_bonus: int = 0
    outreach_bonus: int = 0
