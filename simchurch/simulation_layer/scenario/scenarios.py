"""
Challenge scenarios.
Starting conditions, goals and time limits for challenge mode.
"""

from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, List, Optional

from simchurch.simulation_layer.congregation.member_generator import MemberGenerator
from simchurch.simulation_layer.models import NewsType
from simchurch.simulation_layer.random_utils import SimRandom, round_half_up
from simchurch.simulation_layer.state import ChurchInfo, GameState

# goal type -> ChurchStats attribute
GOAL_STATS = {
    "attendance": "attendance",
    "budget": "budget",
    "reputation": "reputation",
    "congregationMorale": "congregation_morale",
    "communityOutreach": "community_outreach",
}


@dataclass(frozen=True)
class Goal:
    type: str
    target: int
    label: str


@dataclass(frozen=True)
class Scenario:
    id: str
    name: str
    icon: str
    difficulty: str
    description: str
    goals: List[Goal]
    starting_stats: Dict[str, int]
    church: ChurchInfo
    time_limit: Optional[int]
    reward: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "icon": self.icon,
            "difficulty": self.difficulty,
            "description": self.description,
            "goals": [asdict(g) for g in self.goals],
            "time_limit": self.time_limit,
            "reward": self.reward,
        }


SCENARIOS: Dict[str, Scenario] = {
    s.id: s
    for s in [
        Scenario(
            id="newPlant",
            name="Church Plant",
            icon="🌱",
            difficulty="Easy",
            description="Start a new church from scratch with just 20 members and $2,000. Grow it to 100 members.",
            goals=[Goal("attendance", 100, "Reach 100 attendance")],
            starting_stats=dict(attendance=20, budget=2000, reputation=30, congregation_morale=80,
                                spiritual_health=70, community_outreach=20),
            church=ChurchInfo(name="New Hope Fellowship", building_size="small",
                              building_condition=100, building_capacity=80),
            time_limit=None,
            reward="🏆 Church Planter",
        ),
        Scenario(
            id="turnaround",
            name="The Turnaround",
            icon="🔄",
            difficulty="Medium",
            description="A struggling church with low morale and dwindling attendance. Can you save it?",
            goals=[
                Goal("attendance", 75, "Restore attendance to 75"),
                Goal("congregationMorale", 70, "Raise morale to 70%"),
            ],
            starting_stats=dict(attendance=35, budget=3000, reputation=25, congregation_morale=35,
                                spiritual_health=40, community_outreach=15),
            church=ChurchInfo(name="Revival Baptist Church", building_size="medium",
                              building_condition=60, building_capacity=150),
            time_limit=52,
            reward="🏆 Revivalist",
        ),
        Scenario(
            id="megachurch",
            name="Megachurch Dreams",
            icon="🏛️",
            difficulty="Hard",
            description="Start with a healthy church of 150. Can you grow it to 500 in 2 years?",
            goals=[
                Goal("attendance", 500, "Reach 500 attendance"),
                Goal("reputation", 85, "Achieve 85 reputation"),
            ],
            starting_stats=dict(attendance=150, budget=25000, reputation=60, congregation_morale=70,
                                spiritual_health=65, community_outreach=50),
            church=ChurchInfo(name="Community Life Church", building_size="large",
                              building_condition=90, building_capacity=300),
            time_limit=104,
            reward="🏆 Visionary Leader",
        ),
        Scenario(
            id="budgetCrisis",
            name="Budget Crisis",
            icon="💸",
            difficulty="Medium",
            description="Your church is in debt! Balance the budget and get to $10,000 in savings.",
            goals=[Goal("budget", 10000, "Reach $10,000 budget")],
            starting_stats=dict(attendance=80, budget=-2000, reputation=45, congregation_morale=50,
                                spiritual_health=55, community_outreach=30),
            church=ChurchInfo(name="Grace Community Church", building_size="medium",
                              building_condition=70, building_capacity=150),
            time_limit=26,
            reward="🏆 Financial Steward",
        ),
        Scenario(
            id="communityChampion",
            name="Community Champion",
            icon="🤝",
            difficulty="Medium",
            description="Focus on outreach. Build your community reputation to 90.",
            goals=[
                Goal("reputation", 90, "Reach 90 reputation"),
                Goal("communityOutreach", 80, "Reach 80 outreach"),
            ],
            starting_stats=dict(attendance=60, budget=8000, reputation=40, congregation_morale=65,
                                spiritual_health=60, community_outreach=25),
            church=ChurchInfo(name="Open Arms Church", building_size="small",
                              building_condition=85, building_capacity=100),
            time_limit=52,
            reward="🏆 Community Leader",
        ),
    ]
}


def get_scenario(scenario_id: str) -> Optional[Scenario]:
    return SCENARIOS.get(scenario_id)


def start_scenario(state: GameState, scenario_id: str, rng: SimRandom) -> bool:
    """
    Turn a fresh GameState into the scenario's starting position.
    Returns False (state untouched) for an unknown id.
    """
    scenario = SCENARIOS.get(scenario_id)
    if scenario is None:
        return False

    state.game_mode = "challenge"
    state.scenario_id = scenario_id
    state.scenario_start_week = state.week
    state.goals = [asdict(g) for g in scenario.goals]
    state.time_limit = scenario.time_limit

    for name, value in scenario.starting_stats.items():
        setattr(state.stats, name, value)
    state.church = replace(scenario.church)
    state.snapshot_previous_stats()

    state.congregation = MemberGenerator(rng, state).generate_initial_congregation(state.stats.attendance)
    state.add_news(f"📜 Scenario: {scenario.name} - {scenario.description}", NewsType.HIGHLIGHT)
    return True


def check_goals(state: GameState) -> Dict[str, Any]:
    """Progress on each goal plus victory / defeat flags."""
    if state.game_mode != "challenge" or not state.goals:
        return {"active": False}

    results = []
    for goal in state.goals:
        attr = GOAL_STATS.get(goal["type"])
        current = getattr(state.stats, attr) if attr else 0
        results.append({
            **goal,
            "current": current,
            "progress": min(100, round_half_up(current / goal["target"] * 100)),
            "completed": current >= goal["target"],
        })

    all_complete = all(r["completed"] for r in results)
    weeks_elapsed = state.week - state.scenario_start_week
    time_up = bool(state.time_limit) and weeks_elapsed >= state.time_limit

    return {
        "active": True,
        "scenario_id": state.scenario_id,
        "goals": results,
        "all_complete": all_complete,
        "time_up": time_up,
        "weeks_remaining": state.time_limit - weeks_elapsed if state.time_limit else None,
        "victory": all_complete,
        "defeat": time_up and not all_complete,
    }
