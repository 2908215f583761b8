"""
Staff position and skill catalogs.
"""

from dataclasses import dataclass, field
from typing import Dict, Tuple


@dataclass(frozen=True)
class PositionEffects:
    """Base weekly bonuses at skill level 10; scaled down by average skill."""

    attendance_bonus: int = 0
    reputation_bonus: int = 0
    morale_bonus: int = 0
    outreach_bonus: int = 0


@dataclass(frozen=True)
class Position:
    id: str
    title: str
    icon: str
    description: str
    primary_skill: str
    secondary_skill: str
    base_salary: int
    salary_range: Tuple[int, int]
    unlock_at_attendance: int
    max_positions: int
    effects: PositionEffects = field(default_factory=PositionEffects)
    backstories: Tuple[str, ...] = ()

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "title": self.title,
            "icon": self.icon,
            "description": self.description,
            "primary_skill": self.primary_skill,
            "secondary_skill": self.secondary_skill,
            "base_salary": self.base_salary,
            "salary_range": list(self.salary_range),
            "unlock_at_attendance": self.unlock_at_attendance,
            "max_positions": self.max_positions,
        }


POSITIONS: Dict[str, Position] = {
    p.id: p
    for p in [
        Position(
            id="associatePastor",
            title="Associate Pastor",
            icon="👔",
            description="Assists with preaching, counseling, and pastoral care",
            primary_skill="preaching",
            secondary_skill="counseling",
            base_salary=800,
            salary_range=(650, 1000),
            unlock_at_attendance=0,
            max_positions=2,
            effects=PositionEffects(attendance_bonus=5, reputation_bonus=2, morale_bonus=3),
            backstories=(
                "Recently graduated from seminary, eager to serve.",
                "Has 5 years experience at a small rural church.",
                "Former missionary returning to pastoral ministry.",
                "Transitioning from a career in counseling.",
                "Grew up in this denomination, feels called to ministry.",
            ),
        ),
        Position(
            id="youthPastor",
            title="Youth Pastor",
            icon="🎸",
            description="Leads teen and young adult ministry",
            primary_skill="youthConnection",
            secondary_skill="creativity",
            base_salary=650,
            salary_range=(500, 850),
            unlock_at_attendance=50,
            max_positions=1,
            effects=PositionEffects(attendance_bonus=3),
            backstories=(
                "Just finished youth ministry internship.",
                "Former Young Life leader with great energy.",
                "Has a heart for reaching the next generation.",
                "College campus ministry background.",
                "Was a youth group kid who wants to give back.",
            ),
        ),
        Position(
            id="worshipLeader",
            title="Worship Leader",
            icon="🎵",
            description="Leads music and worship services",
            primary_skill="musicalTalent",
            secondary_skill="leadership",
            base_salary=600,
            salary_range=(450, 800),
            unlock_at_attendance=30,
            max_positions=1,
            effects=PositionEffects(attendance_bonus=4, morale_bonus=5),
            backstories=(
                "Classically trained musician seeking ministry role.",
                "Led worship at a church plant for 3 years.",
                "Professional musician feeling called to serve.",
                "Self-taught guitarist with a passion for worship.",
                "Former choir director at a large church.",
            ),
        ),
        Position(
            id="childrensDirector",
            title="Children's Director",
            icon="🧒",
            description="Oversees all children's programs",
            primary_skill="patience",
            secondary_skill="creativity",
            base_salary=550,
            salary_range=(400, 700),
            unlock_at_attendance=40,
            max_positions=1,
            effects=PositionEffects(attendance_bonus=3),
            backstories=(
                "Elementary school teacher transitioning to ministry.",
                "Parent volunteer who's ready to lead.",
                "Has run VBS programs for 10 years.",
                "Early childhood education background.",
                "Sunday school teacher with big ideas.",
            ),
        ),
        Position(
            id="adminAssistant",
            title="Administrative Assistant",
            icon="📋",
            description="Manages office operations and communications",
            primary_skill="organization",
            secondary_skill="communication",
            base_salary=450,
            salary_range=(350, 600),
            unlock_at_attendance=0,
            max_positions=2,
            backstories=(
                "Office management experience in corporate sector.",
                "Looking for meaningful work in a church setting.",
                "Organized and detail-oriented church member.",
                "Former executive assistant seeking change.",
                "Recent graduate with admin skills.",
            ),
        ),
        Position(
            id="outreachCoordinator",
            title="Outreach Coordinator",
            icon="🌍",
            description="Coordinates community outreach programs",
            primary_skill="communication",
            secondary_skill="compassion",
            base_salary=500,
            salary_range=(400, 650),
            unlock_at_attendance=60,
            max_positions=1,
            effects=PositionEffects(outreach_bonus=20, reputation_bonus=5),
            backstories=(
                "Non-profit background with community focus.",
                "Passionate about serving the underserved.",
                "Former social worker with big vision.",
                "Has organized multiple community events.",
                "Believes the church should be the hands and feet.",
            ),
        ),
    ]
}

# skill id -> (display name, icon)
SKILLS: Dict[str, Tuple[str, str]] = {
    "preaching": ("Preaching", "🎤"),
    "counseling": ("Counseling", "💬"),
    "youthConnection": ("Youth Connection", "🤙"),
    "creativity": ("Creativity", "🎨"),
    "musicalTalent": ("Musical Talent", "🎵"),
    "leadership": ("Leadership", "👑"),
    "patience": ("Patience", "🧘"),
    "organization": ("Organization", "📁"),
    "communication": ("Communication", "📣"),
    "compassion": ("Compassion", "❤️"),
    "administration": ("Administration", "📊"),
    "peopleSkills": ("People Skills", "🤝"),
}

# Every candidate is also rated on these
GENERAL_SKILLS = ("administration", "peopleSkills")


def get_position(position_id: str) -> Position:
    return POSITIONS[position_id]
