"""
Pydantic models for API request/response.
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field


class NewGameRequest(BaseModel):
    seed: Optional[int] = None
    congregation_size: Optional[int] = Field(default=None, ge=0, le=1000)


class RunWeeksRequest(BaseModel):
    weeks: int = Field(default=1, ge=1, le=520)
    auto_resolve: Optional[Literal["first", "random"]] = None


class ScenarioRequest(BaseModel):
    scenario_id: str


class SaveRequest(BaseModel):
    slot: Optional[str] = None


class AllocationRequest(BaseModel):
    category: str
    amount: int


class PolicyChangeRequest(BaseModel):
    option_id: str


class ChoiceRequest(BaseModel):
    event_id: str
    choice_id: str


class ActionResponse(BaseModel):
    success: bool
    message: str = ""
    data: Dict[str, Any] = Field(default_factory=dict)


class IncomeModel(BaseModel):
    tithes: int
    offerings: int
    other: int
    total: int


class ExpenseModel(BaseModel):
    salaries: int
    utilities: int
    programs: int
    maintenance: int
    supplies: int
    total: int


class CongregationResultsModel(BaseModel):
    new_visitors: int
    conversions: int
    departures: int
    attended_this_week: int


class EventOutcomeModel(BaseModel):
    event_id: str
    title: str
    type: str
    pending: bool
    message: str
    outcome: Dict[str, Any] = Field(default_factory=dict)


class WeekResultResponse(BaseModel):
    week: int
    income: IncomeModel
    expenses: ExpenseModel
    net_income: int
    attendance_change: int
    reputation_change: int
    new_candidate_count: int
    event: Optional[EventOutcomeModel] = None
    congregation: CongregationResultsModel
    attendance: int
    budget: int
    reputation: int
    congregation_morale: int


class ProjectionResponse(BaseModel):
    income: IncomeModel
    expenses: ExpenseModel
    net: int


class FinancialStatsResponse(BaseModel):
    best_week: int
    worst_week: int
    average: int
    runway: Optional[int] = None


class MemberResponse(BaseModel):
    id: str
    name: str
    age: int
    age_group: str
    joined_week: int
    attendance_pattern: str
    satisfaction: int
    giving_level: str
    interests: List[str]
    family_id: Optional[str] = None
    last_attended_week: Optional[int] = None
    total_attendance: int
    invited_by: Optional[str] = None


class PolicyChangeResponse(BaseModel):
    success: bool
    changed: bool
    message: str
    consequences: Optional[Dict[str, Any]] = None


class ResolutionResponse(BaseModel):
    success: bool
    message: str
    event_id: Optional[str] = None
    choice_id: Optional[str] = None
    outcome: Dict[str, Any] = Field(default_factory=dict)
