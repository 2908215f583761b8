"""
Personality traits for staff and candidates.

Only team morale effects feed the weekly tick; the other effect values are
carried as catalog data for display.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from simchurch.simulation_layer.random_utils import SimRandom


@dataclass(frozen=True)
class Trait:
    id: str
    name: str
    emoji: str
    type: str  # 'positive' | 'neutral' | 'negative'
    description: str
    effects: Dict[str, float] = field(default_factory=dict)

    @property
    def team_morale(self) -> int:
        return int(self.effects.get("team_morale_bonus", 0) + self.effects.get("team_morale_penalty", 0))


TRAITS: Dict[str, Trait] = {
    t.id: t
    for t in [
        # positive
        Trait("hardWorker", "Hard Worker", "💪", "positive", "Gets more done, but may burn out faster",
              {"productivity": 1.2, "burnout_rate": 1.3}),
        Trait("cheerful", "Cheerful", "😊", "positive", "Boosts morale of those around them",
              {"team_morale_bonus": 5, "congregation_bonus": 3}),
        Trait("learner", "Learner", "📚", "positive", "Skills improve faster over time",
              {"skill_growth_rate": 1.5}),
        Trait("teamPlayer", "Team Player", "🤝", "positive", "Works well with others, reduces conflicts",
              {"conflict_chance": 0.5, "team_efficiency": 1.1}),
        Trait("dedicated", "Dedicated", "🎯", "positive", "Less likely to leave, very loyal",
              {"quit_chance": 0.3, "loyalty_bonus": 20}),
        # negative
        Trait("difficult", "Difficult", "😤", "negative", "Creates friction with other staff",
              {"conflict_chance": 2.0, "team_morale_penalty": -5}),
        Trait("lazy", "Lazy", "😴", "negative", "Lower productivity",
              {"productivity": 0.7}),
        Trait("greedy", "Greedy", "💰", "negative", "Demands raises more often",
              {"raise_frequency": 2.0, "salary_expectation": 1.2}),
        Trait("primaDonna", "Prima Donna", "🎭", "negative", "High maintenance, needs constant praise",
              {"attention_need": 2.0, "morale_decay_rate": 1.5}),
        Trait("flightRisk", "Flight Risk", "🚪", "negative", "May leave for better opportunities",
              {"quit_chance": 2.5, "loyalty_bonus": -15}),
        # neutral
        Trait("passionate", "Passionate", "🔥", "neutral", "High highs, low lows - inconsistent but inspired",
              {"performance_variance": 2.0, "inspiration_chance": 1.5}),
        Trait("introverted", "Introverted", "🤫", "neutral", "Great one-on-one, struggles with groups",
              {"counseling_bonus": 1.3, "group_leading_penalty": 0.8}),
        Trait("extroverted", "Extroverted", "📢", "neutral", "Great with crowds, may overlook individuals",
              {"group_leading_bonus": 1.3, "counseling_penalty": 0.8}),
    ]
}

TRAIT_POOLS: Dict[str, List[str]] = {
    "positive": [t.id for t in TRAITS.values() if t.type == "positive"],
    "neutral": [t.id for t in TRAITS.values() if t.type == "neutral"],
    "negative": [t.id for t in TRAITS.values() if t.type == "negative"],
}

# (cumulative probability, pool)
POOL_WEIGHTS = [(0.5, "positive"), (0.8, "neutral"), (1.0, "negative")]
MAX_PICK_ATTEMPTS = 10


def get_trait(trait_id: str) -> Optional[Trait]:
    return TRAITS.get(trait_id)


def generate_random_traits(rng: SimRandom, count: Optional[int] = None) -> List[str]:
    """1 trait 60% of the time, else 2. A duplicate pick is retried, then dropped."""
    if count is None:
        count = 1 if rng.chance(0.6) else 2

    traits: List[str] = []
    for _ in range(count):
        roll = rng.random()
        pool = next(TRAIT_POOLS[name] for threshold, name in POOL_WEIGHTS if roll < threshold)

        trait = rng.choice(pool)
        attempts = 1
        while trait in traits and attempts < MAX_PICK_ATTEMPTS:
            trait = rng.choice(pool)
            attempts += 1
        if trait not in traits:
            traits.append(trait)

    return traits
