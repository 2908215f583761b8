"""
Shared data models for the simulation layer.
"""

from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, Dict, Optional


class AttendancePattern(str, Enum):
    VISITOR = "visitor"
    SPORADIC = "sporadic"
    REGULAR = "regular"
    DEDICATED = "dedicated"


class GivingLevel(str, Enum):
    NON_GIVER = "non_giver"
    OCCASIONAL = "occasional"
    TITHER = "tither"
    GENEROUS = "generous"


class AgeGroup(str, Enum):
    CHILD = "child"
    YOUTH = "youth"
    YOUNG_ADULT = "young_adult"
    MIDDLE_AGE = "middle_age"
    SENIOR = "senior"


class EventType(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    CHOICE = "choice"


class NewsType(str, Enum):
    NORMAL = "normal"
    POSITIVE = "positive"
    NEGATIVE = "negative"
    HIGHLIGHT = "highlight"


class RejectionKind(str, Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"


@dataclass
class ChurchStats:
    """Headline and secondary church stats."""

    attendance: int = 50
    budget: int = 5000
    reputation: int = 50
    congregation_morale: int = 70
    spiritual_health: int = 60
    community_outreach: int = 30


@dataclass
class PreviousStats:
    """Last week's headline stats, kept for trend display only."""

    attendance: int = 50
    budget: int = 5000
    reputation: int = 50


@dataclass
class IncomeBreakdown:
    tithes: int = 0
    offerings: int = 0
    other: int = 0
    total: int = 0


@dataclass
class ExpenseBreakdown:
    salaries: int = 0
    utilities: int = 0
    programs: int = 0
    maintenance: int = 0
    supplies: int = 0
    total: int = 0


# Slider ranges for the player-adjustable weekly allocations
ALLOCATION_RANGES: Dict[str, tuple] = {
    "utilities": (100, 500),
    "programs": (0, 500),
    "maintenance": (25, 300),
    "supplies": (25, 200),
}


@dataclass
class ExpenseAllocation:
    """Fixed weekly spending per category, set by the player."""

    utilities: int = 200
    programs: int = 100
    maintenance: int = 50
    supplies: int = 50

    @property
    def total(self) -> int:
        return self.utilities + self.programs + self.maintenance + self.supplies


@dataclass
class WeeklyFinancialRecord:
    """One tick's books."""

    week: int
    income: IncomeBreakdown
    expenses: ExpenseBreakdown
    net: int
    balance: int
    attendance: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WeeklyFinancialRecord":
        return cls(
            week=data["week"],
            income=IncomeBreakdown(**data["income"]),
            expenses=ExpenseBreakdown(**data["expenses"]),
            net=data["net"],
            balance=data["balance"],
            attendance=data["attendance"],
        )


@dataclass
class NewsItem:
    text: str
    type: NewsType = NewsType.NORMAL
    week: int = 1

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NewsItem":
        return cls(text=data["text"], type=NewsType(data["type"]), week=data["week"])


@dataclass(frozen=True)
class EventRecord:
    """Immutable log entry for an event that fired (and how it was resolved)."""

    event_id: str
    title: str
    type: EventType
    week: int
    outcome: Dict[str, Any] = field(default_factory=dict)
    choice_id: Optional[str] = None
    message: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EventRecord":
        return cls(
            event_id=data["event_id"],
            title=data["title"],
            type=EventType(data["type"]),
            week=data["week"],
            outcome=dict(data.get("outcome", {})),
            choice_id=data.get("choice_id"),
            message=data.get("message", ""),
        )


@dataclass(frozen=True)
class PolicyChangeRecord:
    policy_id: str
    from_option: str
    to_option: str
    week: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PolicyChangeRecord":
        return cls(**data)


@dataclass
class ActionResult:
    """
    Outcome of a player action.
    Rejections leave the state untouched and say why.
    """

    success: bool
    message: str = ""
    rejection: Optional[RejectionKind] = None
    payload: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, message: str = "", **payload) -> "ActionResult":
        return cls(success=True, message=message, payload=payload)

    @classmethod
    def invalid(cls, message: str) -> "ActionResult":
        return cls(success=False, message=message, rejection=RejectionKind.VALIDATION)

    @classmethod
    def not_found(cls, message: str) -> "ActionResult":
        return cls(success=False, message=message, rejection=RejectionKind.NOT_FOUND)


@dataclass
class CongregationResults:
    """Per-tick counters from the congregation pass."""

    new_visitors: int = 0
    conversions: int = 0
    departures: int = 0
    attended_this_week: int = 0


def to_plain(obj) -> Any:
    """Dataclass -> JSON-ready dict (enums collapse to their values)."""
    return _strip_enums(asdict(obj))


def _strip_enums(value):
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _strip_enums(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_strip_enums(v) for v in value]
    return value
