"""
Game state: the single aggregate every component reads and mutates.

There is no module-level game; callers create a GameState and pass it
explicitly to each component.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pydantic import TypeAdapter

from simchurch.simulation_layer.congregation.member import CongregationMember
from simchurch.simulation_layer.models import (
    ChurchStats,
    EventRecord,
    ExpenseAllocation,
    ExpenseBreakdown,
    IncomeBreakdown,
    NewsItem,
    NewsType,
    PolicyChangeRecord,
    PreviousStats,
    WeeklyFinancialRecord,
    to_plain,
)
from simchurch.simulation_layer.policies import default_policies
from simchurch.simulation_layer.staff.staff_member import Candidate, StaffMember

TREND_STATS = ("attendance", "budget", "reputation")


@dataclass
class ChurchInfo:
    name: str = "Grace Community Church"
    founded: int = 1
    building_size: str = "small"
    building_condition: int = 100
    building_capacity: int = 150


@dataclass
class PendingChoice:
    """A choice event waiting for the player."""

    event_id: str
    triggered_week: int


@dataclass
class GameState:
    """Root aggregate for one game."""

    week: int = 1
    game_mode: str = "sandbox"  # 'sandbox' | 'challenge'
    difficulty: str = "normal"
    scenario_id: Optional[str] = None
    scenario_start_week: int = 1
    goals: List[Dict[str, Any]] = field(default_factory=list)
    time_limit: Optional[int] = None

    church: ChurchInfo = field(default_factory=ChurchInfo)
    stats: ChurchStats = field(default_factory=ChurchStats)
    previous_stats: PreviousStats = field(default_factory=PreviousStats)

    congregation: List[CongregationMember] = field(default_factory=list)
    staff: List[StaffMember] = field(default_factory=list)
    candidates: List[Candidate] = field(default_factory=list)

    policies: Dict[str, str] = field(default_factory=default_policies)
    policy_history: List[PolicyChangeRecord] = field(default_factory=list)

    active_event: Optional[PendingChoice] = None
    event_history: List[EventRecord] = field(default_factory=list)

    allocation: ExpenseAllocation = field(default_factory=ExpenseAllocation)
    last_income: IncomeBreakdown = field(default_factory=IncomeBreakdown)
    last_expenses: ExpenseBreakdown = field(default_factory=ExpenseBreakdown)
    financial_history: List[WeeklyFinancialRecord] = field(default_factory=list)

    news: List[NewsItem] = field(default_factory=list)
    news_limit: int = 50
    id_counter: int = 0

    def next_id(self, prefix: str) -> str:
        self.id_counter += 1
        return f"{prefix}_{self.id_counter}"

    def add_news(self, text: str, news_type: NewsType = NewsType.NORMAL) -> NewsItem:
        item = NewsItem(text=text, type=news_type, week=self.week)
        self.news.append(item)
        del self.news[:-self.news_limit]
        return item

    @property
    def latest_news(self) -> Optional[NewsItem]:
        return self.news[-1] if self.news else None

    def snapshot_previous_stats(self) -> None:
        self.previous_stats = PreviousStats(
            attendance=self.stats.attendance,
            budget=self.stats.budget,
            reputation=self.stats.reputation,
        )

    def stat_change(self, stat_name: str) -> int:
        """Change of a headline stat since last week's snapshot."""
        if stat_name not in TREND_STATS:
            return 0
        return getattr(self.stats, stat_name) - getattr(self.previous_stats, stat_name)

    def advance_week(self) -> None:
        self.week += 1

    def staff_count(self, position_id: str) -> int:
        return sum(1 for s in self.staff if s.position_id == position_id)

    # ------------------------------------------------------------------
    # Serialization (whole-state JSON passthrough)
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        data = to_plain(self)
        data["congregation"] = [m.to_dict() for m in self.congregation]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GameState":
        """
        Rebuild a game from its saved dict.

        Field types are checked strictly first; a mistyped field raises
        pydantic's ValidationError (a ValueError).
        """
        _SAVED_STATE.validate_json(json.dumps(data), strict=True)
        active = data.get("active_event")
        return cls(
            week=data["week"],
            game_mode=data.get("game_mode", "sandbox"),
            difficulty=data.get("difficulty", "normal"),
            scenario_id=data.get("scenario_id"),
            scenario_start_week=data.get("scenario_start_week", 1),
            goals=list(data.get("goals", [])),
            time_limit=data.get("time_limit"),
            church=ChurchInfo(**data["church"]),
            stats=ChurchStats(**data["stats"]),
            previous_stats=PreviousStats(**data["previous_stats"]),
            congregation=[CongregationMember.from_dict(m) for m in data["congregation"]],
            staff=[StaffMember.from_dict(s) for s in data["staff"]],
            candidates=[Candidate.from_dict(c) for c in data["candidates"]],
            policies=dict(data["policies"]),
            policy_history=[PolicyChangeRecord.from_dict(p) for p in data.get("policy_history", [])],
            active_event=PendingChoice(**active) if active else None,
            event_history=[EventRecord.from_dict(e) for e in data.get("event_history", [])],
            allocation=ExpenseAllocation(**data["allocation"]),
            last_income=IncomeBreakdown(**data.get("last_income", {})),
            last_expenses=ExpenseBreakdown(**data.get("last_expenses", {})),
            financial_history=[WeeklyFinancialRecord.from_dict(r) for r in data.get("financial_history", [])],
            news=[NewsItem.from_dict(n) for n in data.get("news", [])],
            news_limit=data.get("news_limit", 50),
            id_counter=data.get("id_counter", 0),
        )


# JSON-mode strict validation: enums by value, nested dataclasses from objects,
# no str -> int coercion
_SAVED_STATE = TypeAdapter(GameState)
