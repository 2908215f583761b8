"""
Random event catalog.

Templates are immutable. Messages are format strings filled from the
outcome dict the effects return.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from simchurch.simulation_layer.events.effects import (
    AdjustBudget,
    AdjustExpense,
    AdjustMorale,
    AdjustOutreach,
    AdjustReputation,
    AdjustStaffMorale,
    Effect,
    Gamble,
)
from simchurch.simulation_layer.models import EventType


@dataclass(frozen=True)
class EventConditions:
    """Trigger thresholds. None means no requirement."""

    min_week: Optional[int] = None
    min_attendance: Optional[int] = None
    min_reputation: Optional[int] = None
    min_budget: Optional[int] = None
    min_staff: Optional[int] = None


@dataclass(frozen=True)
class EventChoice:
    id: str
    text: str
    description: str
    effects: Tuple[Effect, ...] = ()
    result_message: str = ""
    # used instead of result_message when a Gamble came up on the failure side
    failure_message: Optional[str] = None

    def message_for(self, outcome: Dict[str, Any]) -> str:
        if self.failure_message is not None and outcome.get("resolved") is False:
            return self.failure_message.format(**outcome)
        return self.result_message.format(**outcome)


@dataclass(frozen=True)
class EventTemplate:
    id: str
    type: EventType
    title: str
    description: str
    icon: str
    probability: float
    conditions: EventConditions = field(default_factory=EventConditions)
    effects: Tuple[Effect, ...] = ()
    message: str = ""
    choices: Tuple[EventChoice, ...] = ()

    @property
    def is_choice(self) -> bool:
        return self.type == EventType.CHOICE

    def get_choice(self, choice_id: str) -> Optional[EventChoice]:
        return next((c for c in self.choices if c.id == choice_id), None)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "title": self.title,
            "description": self.description,
            "icon": self.icon,
            "choices": [
                {"id": c.id, "text": c.text, "description": c.description} for c in self.choices
            ],
        }


EVENT_TEMPLATES: Dict[str, EventTemplate] = {
    t.id: t
    for t in [
        # === POSITIVE ===
        EventTemplate(
            id="anonymousDonation",
            type=EventType.POSITIVE,
            title="💝 Anonymous Donation",
            description="An anonymous donor has given a generous gift to the church!",
            icon="💝",
            probability=0.05,
            conditions=EventConditions(min_week=4),
            effects=(AdjustBudget(low=500, high=2000),),
            message="You received an anonymous donation of ${amount}!",
        ),
        EventTemplate(
            id="mediaAttention",
            type=EventType.POSITIVE,
            title="📺 Media Attention",
            description="Local news wants to feature your church's community outreach!",
            icon="📺",
            probability=0.03,
            conditions=EventConditions(min_reputation=60, min_week=8),
            effects=(AdjustReputation(10),),
            message="The news coverage boosted your reputation by 10!",
        ),
        EventTemplate(
            id="skilledVolunteer",
            type=EventType.POSITIVE,
            title="🙋 Skilled Volunteer",
            description="A talented church member wants to volunteer their professional skills!",
            icon="🙋",
            probability=0.04,
            conditions=EventConditions(min_attendance=60),
            effects=(AdjustMorale(5), AdjustExpense("maintenance", -25)),
            message="Their help saves $25/week on maintenance and boosts morale!",
        ),
        # === NEGATIVE ===
        EventTemplate(
            id="buildingIssue",
            type=EventType.NEGATIVE,
            title="🔧 Building Emergency",
            description="A pipe burst in the church building! Repairs are needed immediately.",
            icon="🔧",
            probability=0.04,
            conditions=EventConditions(min_week=3),
            effects=(AdjustBudget(low=300, high=800, sign=-1),),
            message="Emergency repairs cost ${amount}.",
        ),
        EventTemplate(
            id="keyFamilyUnhappy",
            type=EventType.NEGATIVE,
            title="😟 Unhappy Family",
            description="A key family in the congregation is expressing dissatisfaction.",
            icon="😟",
            probability=0.05,
            conditions=EventConditions(min_attendance=40),
            effects=(AdjustMorale(-8),),
            message="Congregation morale dropped by 8. Try to address their concerns!",
        ),
        EventTemplate(
            id="gossipSpreading",
            type=EventType.NEGATIVE,
            title="🗣️ Gossip Spreading",
            description="Rumors are circulating about recent church decisions.",
            icon="🗣️",
            probability=0.06,
            conditions=EventConditions(min_week=6),
            effects=(AdjustReputation(-5), AdjustMorale(-3)),
            message="Reputation -5, Morale -3. Address this before it escalates!",
        ),
        # === CHOICE ===
        EventTemplate(
            id="collaborationRequest",
            type=EventType.CHOICE,
            title="🤝 Collaboration Opportunity",
            description="Another local church wants to partner on a community outreach event.",
            icon="🤝",
            probability=0.04,
            conditions=EventConditions(min_reputation=40, min_week=5),
            choices=(
                EventChoice(
                    "accept", "Accept the partnership", "Costs $200 but increases reputation",
                    effects=(AdjustBudget(-200), AdjustReputation(8), AdjustOutreach(10)),
                    result_message="The partnership was a success! Reputation +8, Outreach +10.",
                ),
                EventChoice(
                    "decline", "Politely decline", "No cost, but miss the opportunity",
                    result_message="You declined the offer. Perhaps another time.",
                ),
            ),
        ),
        EventTemplate(
            id="buildingRental",
            type=EventType.CHOICE,
            title="🏢 Building Rental Request",
            description="A community group wants to rent your building for a secular event.",
            icon="🏢",
            probability=0.05,
            conditions=EventConditions(min_week=4),
            choices=(
                EventChoice(
                    "accept", "Allow the rental ($150)", "Earn money but some members may disapprove",
                    effects=(AdjustBudget(150), AdjustMorale(-3), AdjustOutreach(5)),
                    result_message="Earned $150! Some members are uneasy, but community ties improved.",
                ),
                EventChoice(
                    "decline", "Decline the request", "Keep members happy, miss the income",
                    effects=(AdjustMorale(2),),
                    result_message="Members appreciate keeping the building for church use only.",
                ),
            ),
        ),
        EventTemplate(
            id="staffConflict",
            type=EventType.CHOICE,
            title="⚡ Staff Disagreement",
            description="Two staff members are in conflict over ministry direction.",
            icon="⚡",
            probability=0.06,
            conditions=EventConditions(min_staff=2),
            choices=(
                EventChoice(
                    "sideA", "Side with the senior staff member", "May upset the other staff member",
                    effects=(
                        AdjustStaffMorale(10, index=0, min_staff=2),
                        AdjustStaffMorale(-15, index=1, min_staff=2),
                    ),
                    result_message="The senior staff member is pleased, but the other feels overlooked.",
                ),
                EventChoice(
                    "sideB", "Side with the newer staff member", "Shows you value fresh ideas",
                    effects=(
                        AdjustStaffMorale(-15, index=0, min_staff=2),
                        AdjustStaffMorale(10, index=1, min_staff=2),
                    ),
                    result_message="The newer staff member feels validated. The senior staff is frustrated.",
                ),
                EventChoice(
                    "compromise", "Mandate a compromise", "Neither fully happy, but workable",
                    effects=(AdjustStaffMorale(-5),),
                    result_message="Both staff accepted the compromise, though neither is thrilled.",
                ),
                EventChoice(
                    "letResolve", "Let them work it out", "May resolve naturally or escalate",
                    effects=(
                        Gamble(
                            0.5,
                            on_success=(AdjustMorale(3),),
                            on_failure=(AdjustStaffMorale(-10), AdjustMorale(-5)),
                        ),
                    ),
                    result_message="They worked it out themselves! Team spirit improved.",
                    failure_message="The conflict escalated. Staff morale dropped significantly.",
                ),
            ),
        ),
        EventTemplate(
            id="memberCrisis",
            type=EventType.CHOICE,
            title="🆘 Member in Crisis",
            description=(
                "A congregation member is going through a difficult time "
                "and needs significant pastoral care."
            ),
            icon="🆘",
            probability=0.05,
            conditions=EventConditions(min_attendance=30),
            choices=(
                EventChoice(
                    "fullSupport", "Provide full support (10+ hours this week)",
                    "Deep investment but other things suffer",
                    effects=(AdjustMorale(8), AdjustReputation(3), AdjustOutreach(-5)),
                    result_message=(
                        "Your dedicated care made a real difference. "
                        "The congregation notices your compassion."
                    ),
                ),
                EventChoice(
                    "moderate", "Provide moderate support", "Balance care with other responsibilities",
                    effects=(AdjustMorale(3),),
                    result_message="You provided meaningful support while maintaining balance.",
                ),
                EventChoice(
                    "referOut", "Refer to professional counseling", "Professional help, but feels less personal",
                    effects=(AdjustBudget(-100),),
                    result_message="You connected them with professional help (-$100 for referral assistance).",
                ),
            ),
        ),
        EventTemplate(
            id="largeDonorOffer",
            type=EventType.CHOICE,
            title="💎 Major Donor Offer",
            description=(
                "A wealthy visitor offers a large donation, "
                "but wants naming rights to the fellowship hall."
            ),
            icon="💎",
            probability=0.02,
            conditions=EventConditions(min_week=10, min_reputation=50),
            choices=(
                EventChoice(
                    "accept", "Accept the offer ($5,000)", "Big money, but some see it as selling out",
                    effects=(AdjustBudget(5000), AdjustMorale(-10), AdjustReputation(5)),
                    result_message=(
                        'You received $5,000! The "Smith Fellowship Hall" sign goes up. '
                        "Some members grumble."
                    ),
                ),
                EventChoice(
                    "negotiate", "Negotiate (smaller donation, no naming)", "Try to find middle ground",
                    effects=(AdjustBudget(1500),),
                    result_message="The donor agreed to $1,500 without naming rights. A fair compromise.",
                ),
                EventChoice(
                    "decline", "Politely decline", "Maintain principles, miss the funding",
                    effects=(AdjustMorale(5),),
                    result_message="Members respect your decision to keep the church's integrity. Morale +5.",
                ),
            ),
        ),
    ]
}


def get_template(event_id: str) -> Optional[EventTemplate]:
    return EVENT_TEMPLATES.get(event_id)
