"""
Event effect operations.

Effects form a closed set of small dataclasses. Each one mutates the game
state through `apply(state, rng)` and returns an outcome dict that is
merged into the event record and used to format the result message.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Tuple

from simchurch.simulation_layer.models import ALLOCATION_RANGES
from simchurch.simulation_layer.policies import MORALE_CEILING, MORALE_FLOOR
from simchurch.simulation_layer.random_utils import SimRandom, clamp


@dataclass(frozen=True)
class AdjustBudget:
    """Fixed amount, or a uniform draw from [low, high] times `sign`."""

    amount: int = 0
    low: Optional[int] = None
    high: Optional[int] = None
    sign: int = 1

    def apply(self, state, rng: SimRandom) -> Dict[str, Any]:
        if self.low is not None and self.high is not None:
            delta = self.sign * rng.randint(self.low, self.high)
        else:
            delta = self.amount
        state.stats.budget += delta
        return {"budget_change": delta, "amount": abs(delta)}


@dataclass(frozen=True)
class AdjustReputation:
    amount: int

    def apply(self, state, rng: SimRandom) -> Dict[str, Any]:
        state.stats.reputation = clamp(state.stats.reputation + self.amount, 0, 100)
        return {"reputation_change": self.amount}


@dataclass(frozen=True)
class AdjustMorale:
    """Congregation morale, kept inside the usual morale band."""

    amount: int

    def apply(self, state, rng: SimRandom) -> Dict[str, Any]:
        stats = state.stats
        stats.congregation_morale = clamp(stats.congregation_morale + self.amount, MORALE_FLOOR, MORALE_CEILING)
        return {"morale_change": self.amount}


@dataclass(frozen=True)
class AdjustOutreach:
    amount: int

    def apply(self, state, rng: SimRandom) -> Dict[str, Any]:
        stats = state.stats
        stats.community_outreach = clamp(stats.community_outreach + self.amount, 0, 100)
        return {"outreach_change": self.amount}


@dataclass(frozen=True)
class AdjustExpense:
    """Permanent change to one weekly allocation, floored at the slider minimum."""

    category: str
    amount: int

    def apply(self, state, rng: SimRandom) -> Dict[str, Any]:
        floor = ALLOCATION_RANGES[self.category][0]
        current = getattr(state.allocation, self.category)
        new_value = max(floor, current + self.amount)
        setattr(state.allocation, self.category, new_value)
        return {"savings_per_week": current - new_value}


@dataclass(frozen=True)
class AdjustStaffMorale:
    """
    Staff morale change.
    With `index` only that roster slot is touched, and only when at least
    `min_staff` people are on staff; without it everyone is.
    """

    amount: int
    index: Optional[int] = None
    min_staff: int = 0

    def apply(self, state, rng: SimRandom) -> Dict[str, Any]:
        if len(state.staff) < self.min_staff:
            return {}
        if self.index is None:
            targets = state.staff
        elif self.index < len(state.staff):
            targets = [state.staff[self.index]]
        else:
            targets = []
        for staff_member in targets:
            staff_member.morale = clamp(staff_member.morale + self.amount, 0, 100)
        return {"staff_morale_change": self.amount} if targets else {}


@dataclass(frozen=True)
class Gamble:
    """Coin flip between two effect lists. Reports `resolved` = which side came up."""

    probability: float
    on_success: Tuple["Effect", ...] = ()
    on_failure: Tuple["Effect", ...] = ()

    def apply(self, state, rng: SimRandom) -> Dict[str, Any]:
        resolved = rng.chance(self.probability)
        outcome = apply_effects(self.on_success if resolved else self.on_failure, state, rng)
        outcome["resolved"] = resolved
        return outcome


Effect = Any  # one of the dataclasses above


def apply_effects(effects: Sequence[Effect], state, rng: SimRandom) -> Dict[str, Any]:
    """Apply effects in order. Numeric keys reported by more than one effect are summed."""
    outcome: Dict[str, Any] = {}
    for effect in effects:
        for key, value in effect.apply(state, rng).items():
            if key in outcome and isinstance(value, int) and not isinstance(value, bool):
                outcome[key] += value
            else:
                outcome[key] = value
    return outcome
