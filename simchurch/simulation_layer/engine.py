"""
Simulation engine for Sim Church.
Owns one GameState plus its random source and advances it one week per call.

Weekly tick order:
    snapshot -> candidates -> congregation -> income -> expenses -> budget
    -> attendance -> reputation -> morale -> books -> news -> warnings
    -> events -> week + 1
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

import pandas as pd

from config import Settings, get_settings
from simchurch.data_layer.save_store import SaveStore
from simchurch.simulation_layer.congregation import congregation as congregation_tick
from simchurch.simulation_layer.congregation.member import CongregationMember
from simchurch.simulation_layer.congregation.member_generator import MemberGenerator
from simchurch.simulation_layer.events import event_engine
from simchurch.simulation_layer.events.catalog import EventTemplate
from simchurch.simulation_layer.events.event_engine import EventOutcome, ResolutionResult
from simchurch.simulation_layer.models import (
    ALLOCATION_RANGES,
    ActionResult,
    CongregationResults,
    EventRecord,
    ExpenseBreakdown,
    IncomeBreakdown,
    PolicyChangeRecord,
    WeeklyFinancialRecord,
    to_plain,
)
from simchurch.simulation_layer.news import (
    WeeklyChanges,
    check_budget_warnings,
    generate_weekly_news,
    runway_weeks,
)
from simchurch.simulation_layer.policies import (
    MORALE_CEILING,
    MORALE_FLOOR,
    PolicyChangeResult,
    PolicyEffects,
    calculate_member_policy_alignment,
    calculate_policy_effects,
    get_policy_summary,
    is_valid_policy_state,
    set_policy,
)
from simchurch.simulation_layer.random_utils import SimRandom, clamp, round_half_up
from simchurch.simulation_layer.scenario import scenarios
from simchurch.simulation_layer.staff import candidate_generator, staff_manager
from simchurch.simulation_layer.staff.staff_member import StaffEffects
from simchurch.simulation_layer.state import GameState

logger = logging.getLogger(__name__)

FALLBACK_GIVING_PER_PERSON = 25
SPECIAL_OFFERING_CHANCE = 0.1
SPECIAL_OFFERING_RANGE = (50, 200)

ATTENDANCE_CHANGE_LIMITS = (-10, 15)
REPUTATION_CHANGE_LIMITS = (-5, 5)

# (upper attendance bound, message); the last tier is open-ended
CHURCH_STATUS_TIERS = [
    (30, "Your church is just getting started. Every new member counts!"),
    (75, "Your church is growing steadily. Keep up the good work!"),
    (150, "A thriving community is forming around your church."),
    (300, "Your church has become a pillar of the community!"),
]
MEGACHURCH_STATUS = "A megachurch in the making! Incredible growth!"

ChoiceResolver = Callable[[EventTemplate, SimRandom], str]


def first_choice(template: EventTemplate, rng: SimRandom) -> str:
    return template.choices[0].id


def random_choice(template: EventTemplate, rng: SimRandom) -> str:
    return rng.choice(template.choices).id


# auto-answer strategies for headless runs (CLI --choices, API auto_resolve)
CHOICE_STRATEGIES: Dict[str, ChoiceResolver] = {
    "first": first_choice,
    "random": random_choice,
}


class SimulationBusyError(RuntimeError):
    """A week was requested while another one is still being processed."""


@dataclass
class WeekResult:
    """Summary of one processed week."""

    week: int
    income: IncomeBreakdown
    expenses: ExpenseBreakdown
    net_income: int
    attendance_change: int
    reputation_change: int
    new_candidate_count: int
    event: Optional[EventOutcome] = None
    congregation: CongregationResults = field(default_factory=CongregationResults)
    attendance: int = 0
    budget: int = 0
    reputation: int = 0
    congregation_morale: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return to_plain(self)

    def to_row(self) -> Dict[str, Any]:
        """Flat record for DataFrame output."""
        return {
            "week": self.week,
            "attendance": self.attendance,
            "budget": self.budget,
            "reputation": self.reputation,
            "congregation_morale": self.congregation_morale,
            "income": self.income.total,
            "tithes": self.income.tithes,
            "offerings": self.income.offerings,
            "expenses": self.expenses.total,
            "salaries": self.expenses.salaries,
            "net_income": self.net_income,
            "attendance_change": self.attendance_change,
            "reputation_change": self.reputation_change,
            "new_candidates": self.new_candidate_count,
            "new_visitors": self.congregation.new_visitors,
            "conversions": self.congregation.conversions,
            "departures": self.congregation.departures,
            "event_id": self.event.event_id if self.event else None,
            "event_pending": self.event.pending if self.event else False,
        }


class ChurchSimulation:
    """
    Facade over one game.
    Every mutation goes through this object; queries never mutate.
    """

    def __init__(
        self,
        state: Optional[GameState] = None,
        rng: Optional[SimRandom] = None,
        settings: Optional[Settings] = None,
        store: Optional[SaveStore] = None,
    ):
        self.settings = settings or get_settings()
        sim = self.settings.simulation
        self.rng = rng or SimRandom(sim.seed)
        self.state = state or GameState(news_limit=sim.news_limit)
        self.store = store or SaveStore(self.settings.paths.save_dir)
        self._tick_lock = threading.Lock()

    @classmethod
    def new_game(
        cls,
        seed: Optional[int] = None,
        settings: Optional[Settings] = None,
        congregation_size: Optional[int] = None,
        store: Optional[SaveStore] = None,
    ) -> "ChurchSimulation":
        """Sandbox game with a freshly generated congregation."""
        settings = settings or get_settings()
        if seed is None:
            seed = settings.simulation.seed
        simulation = cls(rng=SimRandom(seed), settings=settings, store=store)

        size = congregation_size if congregation_size is not None else settings.simulation.initial_congregation_size
        state = simulation.state
        state.congregation = MemberGenerator(simulation.rng, state).generate_initial_congregation(size)
        logger.info("New game: %d members, seed=%s", len(state.congregation), seed)
        return simulation

    def start_scenario(self, scenario_id: str) -> ActionResult:
        """Replace the current game with a challenge scenario."""
        scenario = scenarios.get_scenario(scenario_id)
        if scenario is None:
            return ActionResult.not_found(f"Unknown scenario: {scenario_id}")

        state = GameState(news_limit=self.settings.simulation.news_limit)
        scenarios.start_scenario(state, scenario_id, self.rng)
        self.state = state
        logger.info("Started scenario %s", scenario_id)
        return ActionResult.ok(f"Scenario started: {scenario.name}", scenario_id=scenario_id)

    def check_goals(self) -> Dict[str, Any]:
        return scenarios.check_goals(self.state)

    # ------------------------------------------------------------------
    # Weekly tick
    # ------------------------------------------------------------------

    def process_week(self) -> WeekResult:
        if not self._tick_lock.acquire(blocking=False):
            raise SimulationBusyError("A week is already being processed")
        try:
            return self._process_week()
        finally:
            self._tick_lock.release()

    def _process_week(self) -> WeekResult:
        state, rng, sim = self.state, self.rng, self.settings.simulation
        week = state.week

        # 1. trend snapshot
        state.snapshot_previous_stats()

        # 2. job market
        staff_manager.remove_expired_candidates(state)
        new_candidates = candidate_generator.generate_weekly_candidates(state, rng, sim.candidate_expiry_weeks)
        state.candidates.extend(new_candidates)
        staff_effects = staff_manager.calculate_staff_effects(state)
        policy_effects = calculate_policy_effects(state.policies)

        # 3. congregation; the headcount becomes this week's attendance
        congregation_results = congregation_tick.process_weekly_behaviors(state, rng)
        state.stats.attendance = congregation_results.attended_this_week

        # 4-6. books
        income = self._calculate_income(rng, policy_effects, state.week)
        expenses = self._calculate_expenses()
        net_income = income.total - expenses.total
        state.stats.budget = round_half_up(state.stats.budget + net_income)

        # 7. attendance drift on top of the headcount
        attendance_change = self._calculate_attendance_change(staff_effects, policy_effects)
        state.stats.attendance = max(1, state.stats.attendance + attendance_change)

        # 8. reputation
        reputation_change = self._calculate_reputation_change(staff_effects, policy_effects)
        state.stats.reputation = clamp(state.stats.reputation + reputation_change, 0, 100)

        # 9. congregation morale
        self._update_morale(staff_effects, policy_effects)

        # 10. financial history
        self._record_financials(income, expenses, net_income)

        # 11-12. news
        generate_weekly_news(
            state,
            WeeklyChanges(
                attendance_change=attendance_change,
                net_income=net_income,
                new_candidates=new_candidates,
                congregation=congregation_results,
            ),
            rng,
        )
        check_budget_warnings(state, net_income)

        # 13. events
        event = self._roll_event()

        # 14.
        state.advance_week()

        logger.info(
            "Week %d: attendance=%d budget=%d reputation=%d net=%+d",
            week, state.stats.attendance, state.stats.budget, state.stats.reputation, net_income,
        )
        return WeekResult(
            week=week,
            income=income,
            expenses=expenses,
            net_income=net_income,
            attendance_change=attendance_change,
            reputation_change=reputation_change,
            new_candidate_count=len(new_candidates),
            event=event,
            congregation=congregation_results,
            attendance=state.stats.attendance,
            budget=state.stats.budget,
            reputation=state.stats.reputation,
            congregation_morale=state.stats.congregation_morale,
        )

    def run_weeks(self, num_weeks: int, resolve_choice: Optional[ChoiceResolver] = None) -> pd.DataFrame:
        """
        Process several weeks and return one row per week.

        Args:
            num_weeks: number of ticks
            resolve_choice: optional callback picking a choice id for each
                pending event right after it is raised
        """
        rows: List[Dict[str, Any]] = []
        for _ in range(num_weeks):
            result = self.process_week()
            row = result.to_row()
            if resolve_choice is not None and result.event is not None and result.event.pending:
                template = event_engine.get_active_event(self.state)
                choice_id = resolve_choice(template, self.rng)
                resolution = self.resolve_choice(template.id, choice_id)
                row["choice_id"] = choice_id if resolution.success else None
            rows.append(row)
        return pd.DataFrame(rows)

    def _calculate_income(self, rng: SimRandom, policy_effects: PolicyEffects, service_week: int) -> IncomeBreakdown:
        state = self.state
        if state.congregation:
            tithes = congregation_tick.calculate_weekly_giving(state, rng, service_week)
        else:
            tithes = state.stats.attendance * FALLBACK_GIVING_PER_PERSON * state.stats.congregation_morale / 100

        tithes *= policy_effects.giving_modifier
        offerings = rng.randint(*SPECIAL_OFFERING_RANGE) if rng.chance(SPECIAL_OFFERING_CHANCE) else 0
        other = 0

        return IncomeBreakdown(
            tithes=round_half_up(tithes),
            offerings=offerings,
            other=other,
            total=round_half_up(tithes + offerings + other),
        )

    def _calculate_expenses(self) -> ExpenseBreakdown:
        allocation = self.state.allocation
        salaries = staff_manager.calculate_total_salaries(self.state)
        return ExpenseBreakdown(
            salaries=salaries,
            utilities=allocation.utilities,
            programs=allocation.programs,
            maintenance=allocation.maintenance,
            supplies=allocation.supplies,
            total=salaries + allocation.total,
        )

    def _calculate_attendance_change(self, staff_effects: StaffEffects, policy_effects: PolicyEffects) -> int:
        stats, rng = self.state.stats, self.rng
        change = rng.randint(-5, 5)

        if stats.reputation > 60:
            change += rng.randint(0, 3)
        elif stats.reputation < 40:
            change -= rng.randint(0, 3)

        if stats.congregation_morale > 70:
            change += rng.randint(0, 2)
        elif stats.congregation_morale < 50:
            change -= rng.randint(0, 2)

        change += staff_effects.attendance_bonus // 2

        # growth modifier only amplifies growth
        if change > 0:
            change = round_half_up(change * policy_effects.attendance_growth_modifier)

        return clamp(change, *ATTENDANCE_CHANGE_LIMITS)

    def _calculate_reputation_change(self, staff_effects: StaffEffects, policy_effects: PolicyEffects) -> int:
        stats, rng = self.state.stats, self.rng
        change = rng.randint(-2, 2)

        if stats.budget < 0:
            change -= 2
        elif stats.budget > 20000:
            change += 1

        if stats.community_outreach > 50:
            change += rng.randint(0, 2)

        change += staff_effects.reputation_bonus // 3
        change += round_half_up(policy_effects.reputation_modifier / 10)

        return clamp(change, *REPUTATION_CHANGE_LIMITS)

    def _update_morale(self, staff_effects: StaffEffects, policy_effects: PolicyEffects) -> None:
        stats, rng = self.state.stats, self.rng
        if staff_effects.morale_bonus > 0:
            change = rng.randint(0, 2)
        else:
            change = rng.randint(-1, 1)
        change += round_half_up(policy_effects.satisfaction_modifier / 10)

        new_morale = stats.congregation_morale + change + staff_effects.morale_bonus / 5
        stats.congregation_morale = round_half_up(clamp(new_morale, MORALE_FLOOR, MORALE_CEILING))

    def _record_financials(self, income: IncomeBreakdown, expenses: ExpenseBreakdown, net_income: int) -> None:
        state = self.state
        state.financial_history.append(
            WeeklyFinancialRecord(
                week=state.week,
                income=income,
                expenses=expenses,
                net=net_income,
                balance=state.stats.budget,
                attendance=state.stats.attendance,
            )
        )
        del state.financial_history[:-self.settings.simulation.financial_history_limit]
        state.last_income = income
        state.last_expenses = expenses

    def _roll_event(self) -> Optional[EventOutcome]:
        state, sim = self.state, self.settings.simulation
        event_engine.expire_stale_choice(state, sim.choice_event_expiry_weeks, sim.event_history_limit)

        # a pending decision blocks new choice events, not immediate ones
        template = event_engine.roll_for_events(state, self.rng, allow_choice=state.active_event is None)
        if template is None:
            return None
        if template.is_choice:
            return event_engine.set_active_event(state, template)
        return event_engine.process_immediate_event(state, template, self.rng, sim.event_history_limit)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_congregation_stats(self) -> Dict[str, Any]:
        return congregation_tick.get_stats(self.state)

    def get_members(
        self,
        pattern: Optional[str] = None,
        age_group: Optional[str] = None,
        sort_by: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[CongregationMember]:
        return congregation_tick.get_members(self.state, pattern, age_group, sort_by, limit)

    def get_financial_stats(self) -> Dict[str, Any]:
        """Best / worst / average weekly net over the kept history, and runway (None = not burning money)."""
        history = self.state.financial_history
        if not history:
            return {"best_week": 0, "worst_week": 0, "average": 0, "runway": None}

        nets = [record.net for record in history]
        average = round_half_up(sum(nets) / len(nets))
        return {
            "best_week": max(nets),
            "worst_week": min(nets),
            "average": average,
            "runway": runway_weeks(self.state.stats.budget, average),
        }

    def get_projected_financials(self) -> Dict[str, Any]:
        """
        Next week's books if nothing changes, assuming last service's
        attendees give again. Sampling uses a child stream so the game's
        own random sequence is not advanced.
        """
        preview_rng = self.rng.spawn()
        policy_effects = calculate_policy_effects(self.state.policies)
        income = self._calculate_income(preview_rng, policy_effects, self.state.week - 1)
        expenses = self._calculate_expenses()
        return {"income": income, "expenses": expenses, "net": income.total - expenses.total}

    def get_church_status(self) -> str:
        attendance = self.state.stats.attendance
        for upper, message in CHURCH_STATUS_TIERS:
            if attendance < upper:
                return message
        return MEGACHURCH_STATUS

    def get_stat_change(self) -> Dict[str, int]:
        return {name: self.state.stat_change(name) for name in ("attendance", "budget", "reputation")}

    def get_event_history(self, limit: Optional[int] = 20) -> List[EventRecord]:
        return event_engine.get_event_history(self.state, limit)

    def get_active_event(self) -> Optional[EventTemplate]:
        return event_engine.get_active_event(self.state)

    def get_policy_history(self, limit: Optional[int] = 10) -> List[PolicyChangeRecord]:
        history = list(reversed(self.state.policy_history))
        return history if limit is None else history[:limit]

    def get_policy_effects(self) -> PolicyEffects:
        return calculate_policy_effects(self.state.policies)

    def get_policy_summary(self) -> List[Dict[str, str]]:
        return get_policy_summary(self.state.policies)

    def get_available_positions(self):
        return candidate_generator.available_positions(self.state)

    def member_policy_alignment(self, member_id: str) -> Optional[int]:
        member = congregation_tick.find_member(self.state, member_id)
        if member is None:
            return None
        return calculate_member_policy_alignment(member, self.get_policy_effects())

    # ------------------------------------------------------------------
    # Player actions
    # ------------------------------------------------------------------

    def set_policy(self, category_id: str, option_id: str) -> PolicyChangeResult:
        return set_policy(self.state, category_id, option_id, self.settings.simulation.policy_history_limit)

    def resolve_choice(self, event_id: str, choice_id: str) -> ResolutionResult:
        return event_engine.resolve_choice(
            self.state, event_id, choice_id, self.rng, self.settings.simulation.event_history_limit
        )

    def hire_candidate(self, candidate_id: str) -> ActionResult:
        return staff_manager.hire_candidate(self.state, candidate_id)

    def fire_staff(self, staff_id: str) -> ActionResult:
        return staff_manager.fire_staff(self.state, staff_id)

    def pass_on_candidate(self, candidate_id: str) -> ActionResult:
        return staff_manager.pass_on_candidate(self.state, candidate_id)

    def set_expense_allocation(self, category: str, amount: int) -> ActionResult:
        if category not in ALLOCATION_RANGES:
            logger.warning("Rejected allocation: unknown category %r", category)
            return ActionResult.invalid(f"Unknown expense category: {category}")
        low, high = ALLOCATION_RANGES[category]
        if not low <= amount <= high:
            logger.warning("Rejected allocation: %s=%d outside %d-%d", category, amount, low, high)
            return ActionResult.invalid(f"{category} must be between {low} and {high}")

        setattr(self.state.allocation, category, amount)
        return ActionResult.ok(f"{category} set to ${amount}/week", category=category, amount=amount)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _slot(self, slot: Optional[str]) -> str:
        return slot or self.settings.api.save_slot

    def save(self, slot: Optional[str] = None) -> bool:
        return self.store.save(self._slot(slot), self.state.to_dict())

    def load(self, slot: Optional[str] = None) -> bool:
        """Replace the game with a saved one. On any failure the current game is kept."""
        data = self.store.load(self._slot(slot))
        if data is None:
            return False
        try:
            state = GameState.from_dict(data)
            valid_policies = is_valid_policy_state(state.policies)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Save slot %s is malformed: %s", self._slot(slot), e)
            return False
        if not valid_policies:
            logger.warning("Save slot %s has an invalid policy set", self._slot(slot))
            return False

        self.state = state
        logger.info("Loaded slot %s at week %d", self._slot(slot), state.week)
        return True

    def has_saved_game(self, slot: Optional[str] = None) -> bool:
        return self.store.exists(self._slot(slot))
