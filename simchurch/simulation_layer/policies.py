"""
Policies & beliefs: the church's identity as seven independent choices.

Each selected option contributes modifiers; calculate_policy_effects()
folds them into one PolicyEffects vector for the weekly tick.
Additive fields sum, multiplicative fields multiply, age-group sets union,
so the result does not depend on category order.
"""

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, FrozenSet, Iterable, List, Mapping, Optional

from simchurch.simulation_layer.models import (
    AgeGroup,
    NewsType,
    PolicyChangeRecord,
    RejectionKind,
)
from simchurch.simulation_layer.random_utils import clamp

if TYPE_CHECKING:
    from simchurch.simulation_layer.congregation.member import CongregationMember
    from simchurch.simulation_layer.state import GameState

logger = logging.getLogger(__name__)

ADDITIVE_FIELDS = (
    "reputation_modifier",
    "satisfaction_modifier",
    "spiritual_health_modifier",
    "community_outreach_modifier",
    "trust_modifier",
)
MULTIPLICATIVE_FIELDS = (
    "giving_modifier",
    "attendance_growth_modifier",
    "conversion_rate",
    "retention_bonus",
)

MORALE_FLOOR = 30
MORALE_CEILING = 100


@dataclass(frozen=True)
class PolicyOptionEffects:
    """Modifiers declared by one option. None means the option leaves that field alone."""

    reputation_modifier: Optional[float] = None
    satisfaction_modifier: Optional[float] = None
    spiritual_health_modifier: Optional[float] = None
    community_outreach_modifier: Optional[float] = None
    trust_modifier: Optional[float] = None
    giving_modifier: Optional[float] = None
    attendance_growth_modifier: Optional[float] = None
    conversion_rate: Optional[float] = None
    retention_bonus: Optional[float] = None
    attracts_age_groups: FrozenSet[AgeGroup] = frozenset()
    repels_age_groups: FrozenSet[AgeGroup] = frozenset()


@dataclass(frozen=True)
class PolicyOption:
    id: str
    name: str
    description: str
    icon: str
    effects: PolicyOptionEffects


@dataclass(frozen=True)
class PolicyCategory:
    id: str
    name: str
    icon: str
    description: str
    group: str
    options: Dict[str, PolicyOption]  # insertion order = option ordering
    default: str

    def option_index(self, option_id: str) -> int:
        return list(self.options).index(option_id)


@dataclass
class PolicyEffects:
    """Combined modifiers of every selected option."""

    reputation_modifier: float = 0
    giving_modifier: float = 1.0
    attendance_growth_modifier: float = 1.0
    satisfaction_modifier: float = 0
    spiritual_health_modifier: float = 0
    community_outreach_modifier: float = 0
    conversion_rate: float = 1.0
    retention_bonus: float = 1.0
    trust_modifier: float = 0
    attracts_age_groups: set = field(default_factory=set)
    repels_age_groups: set = field(default_factory=set)


@dataclass
class PolicyChangeConsequences:
    morale_change: int = 0
    members_upset: int = 0
    news_message: Optional[str] = None


@dataclass
class PolicyChangeResult:
    success: bool
    changed: bool = False
    consequences: Optional[PolicyChangeConsequences] = None
    message: str = ""
    rejection: Optional[RejectionKind] = None


def _option(option_id, name, description, icon, attracts=(), repels=(), **modifiers) -> PolicyOption:
    return PolicyOption(
        id=option_id,
        name=name,
        description=description,
        icon=icon,
        effects=PolicyOptionEffects(
            attracts_age_groups=frozenset(attracts),
            repels_age_groups=frozenset(repels),
            **modifiers,
        ),
    )


def _category(category_id, name, icon, description, group, default, options) -> PolicyCategory:
    return PolicyCategory(
        id=category_id,
        name=name,
        icon=icon,
        description=description,
        group=group,
        options={o.id: o for o in options},
        default=default,
    )


A = AgeGroup

POLICY_CATEGORIES: Dict[str, PolicyCategory] = {
    c.id: c
    for c in [
        # === WORSHIP & SERVICE ===
        _category(
            "worshipStyle", "Worship Style", "🎵",
            "The musical and liturgical style of your services", "worship", "blended",
            [
                _option("traditional", "Traditional", "Hymns, organ, formal liturgy", "🎹",
                        attracts=[A.SENIOR, A.MIDDLE_AGE], repels=[A.YOUNG_ADULT, A.YOUTH],
                        reputation_modifier=0, giving_modifier=1.1, attendance_growth_modifier=0.9),
                _option("contemporary", "Contemporary", "Modern worship bands, casual atmosphere", "🎸",
                        attracts=[A.YOUNG_ADULT, A.YOUTH, A.CHILD], repels=[A.SENIOR],
                        reputation_modifier=5, giving_modifier=0.9, attendance_growth_modifier=1.2),
                _option("blended", "Blended", "Mix of traditional and contemporary elements", "🎶",
                        attracts=[A.MIDDLE_AGE, A.YOUNG_ADULT],
                        reputation_modifier=2, giving_modifier=1.0, attendance_growth_modifier=1.0),
            ],
        ),
        _category(
            "serviceLength", "Service Length", "⏱️",
            "How long your Sunday services typically run", "worship", "standard",
            [
                _option("short", "Short (45 min)", "Quick, focused services for busy families", "⚡",
                        attracts=[A.YOUNG_ADULT, A.CHILD], repels=[A.SENIOR],
                        spiritual_health_modifier=-5, attendance_growth_modifier=1.1, satisfaction_modifier=0),
                _option("standard", "Standard (75 min)", "Traditional service length", "⏰",
                        spiritual_health_modifier=0, attendance_growth_modifier=1.0, satisfaction_modifier=0),
                _option("long", "Extended (2+ hrs)", "Deep worship and teaching time", "🕐",
                        attracts=[A.SENIOR, A.MIDDLE_AGE], repels=[A.YOUNG_ADULT, A.CHILD],
                        spiritual_health_modifier=10, attendance_growth_modifier=0.85, satisfaction_modifier=5),
            ],
        ),
        # === THEOLOGY & BELIEFS ===
        _category(
            "theologicalStance", "Theological Stance", "📖",
            "Your church's position on doctrinal matters", "beliefs", "moderate",
            [
                _option("conservative", "Conservative", "Traditional interpretation of scripture", "📕",
                        attracts=[A.SENIOR, A.MIDDLE_AGE],
                        reputation_modifier=-5, giving_modifier=1.15, spiritual_health_modifier=5),
                _option("moderate", "Moderate", "Balanced approach to doctrine", "📗",
                        reputation_modifier=5, giving_modifier=1.0, spiritual_health_modifier=0),
                _option("progressive", "Progressive", "Contemporary interpretation and inclusivity focus", "📘",
                        attracts=[A.YOUNG_ADULT, A.YOUTH], repels=[A.SENIOR],
                        reputation_modifier=10, giving_modifier=0.9, spiritual_health_modifier=-5),
            ],
        ),
        # === COMMUNITY & MEMBERSHIP ===
        _category(
            "membershipRequirements", "Membership Requirements", "📋",
            "How people officially join your church", "community", "classes",
            [
                _option("open", "Open Door", "Anyone can join with minimal process", "🚪",
                        attendance_growth_modifier=1.2, giving_modifier=0.85,
                        satisfaction_modifier=-5, conversion_rate=1.3),
                _option("classes", "Classes Required", "New member classes before joining", "📚",
                        attendance_growth_modifier=1.0, giving_modifier=1.0,
                        satisfaction_modifier=5, conversion_rate=1.0),
                _option("strict", "Strict Process", "Interview, classes, and commitment covenant", "✍️",
                        attendance_growth_modifier=0.8, giving_modifier=1.2,
                        satisfaction_modifier=10, conversion_rate=0.7),
            ],
        ),
        _category(
            "communityFocus", "Community Focus", "🎯",
            "Where your church directs its energy", "community", "balanced",
            [
                _option("inward", "Member Care", "Focus on nurturing existing members", "🏠",
                        satisfaction_modifier=15, attendance_growth_modifier=0.7,
                        community_outreach_modifier=-10, retention_bonus=1.3),
                _option("balanced", "Balanced", "Equal focus on members and outreach", "⚖️",
                        satisfaction_modifier=5, attendance_growth_modifier=1.0,
                        community_outreach_modifier=0, retention_bonus=1.0),
                _option("outward", "Evangelism Focus", "Prioritize reaching new people", "🌍",
                        satisfaction_modifier=-5, attendance_growth_modifier=1.4,
                        community_outreach_modifier=15, retention_bonus=0.85),
            ],
        ),
        # === LEADERSHIP & GOVERNANCE ===
        _category(
            "decisionMaking", "Decision Making", "🗳️",
            "How major decisions are made", "governance", "elderBoard",
            [
                _option("pastorLed", "Pastor-Led", "Pastor makes final decisions", "👔",
                        satisfaction_modifier=-5),
                _option("elderBoard", "Elder Board", "Council of elders guide decisions", "👥",
                        satisfaction_modifier=5),
                _option("congregational", "Congregational Vote", "Members vote on major decisions", "🗳️",
                        satisfaction_modifier=10),
            ],
        ),
        _category(
            "financialTransparency", "Financial Transparency", "💰",
            "How open you are about church finances", "governance", "partial",
            [
                _option("private", "Private", "Only leadership sees finances", "🔒",
                        giving_modifier=0.9, satisfaction_modifier=-10, trust_modifier=-15),
                _option("partial", "Partial", "Annual reports and general updates", "📊",
                        giving_modifier=1.0, satisfaction_modifier=0, trust_modifier=0),
                _option("full", "Full Transparency", "Detailed monthly reports available to all", "📈",
                        giving_modifier=1.1, satisfaction_modifier=5, trust_modifier=10),
            ],
        ),
    ]
}

CATEGORY_GROUPS: Dict[str, Dict] = {
    "worship": {"name": "Worship & Service", "icon": "⛪", "policies": ["worshipStyle", "serviceLength"]},
    "beliefs": {"name": "Theology & Beliefs", "icon": "📖", "policies": ["theologicalStance"]},
    "community": {
        "name": "Community & Membership",
        "icon": "👥",
        "policies": ["membershipRequirements", "communityFocus"],
    },
    "governance": {
        "name": "Leadership & Governance",
        "icon": "🏛️",
        "policies": ["decisionMaking", "financialTransparency"],
    },
}


def default_policies() -> Dict[str, str]:
    return {policy_id: category.default for policy_id, category in POLICY_CATEGORIES.items()}


def calculate_policy_effects(
    policies: Mapping[str, str],
    order: Optional[Iterable[str]] = None,
) -> PolicyEffects:
    """
    Fold every selected option into one PolicyEffects.

    Args:
        policies: category id -> selected option id
        order: optional category iteration order (result is the same for any order)
    """
    effects = PolicyEffects()
    for policy_id in (order if order is not None else policies):
        category = POLICY_CATEGORIES.get(policy_id)
        if category is None:
            continue
        option = category.options.get(policies.get(policy_id))
        if option is None:
            continue
        e = option.effects

        for name in ADDITIVE_FIELDS:
            value = getattr(e, name)
            if value is not None:
                setattr(effects, name, getattr(effects, name) + value)
        for name in MULTIPLICATIVE_FIELDS:
            value = getattr(e, name)
            if value is not None:
                setattr(effects, name, getattr(effects, name) * value)

        effects.attracts_age_groups |= e.attracts_age_groups
        effects.repels_age_groups |= e.repels_age_groups

    return effects


def set_policy(state: "GameState", policy_id: str, option_id: str, history_limit: int = 20) -> PolicyChangeResult:
    """
    Select an option for a policy category.
    Re-selecting the current option is a no-op: no history, no morale cost.
    """
    category = POLICY_CATEGORIES.get(policy_id)
    if category is None:
        logger.warning("Rejected policy change: unknown policy %r", policy_id)
        return PolicyChangeResult(success=False, message="Invalid policy", rejection=RejectionKind.VALIDATION)
    if option_id not in category.options:
        logger.warning("Rejected policy change: unknown option %r for %s", option_id, policy_id)
        return PolicyChangeResult(success=False, message="Invalid option", rejection=RejectionKind.VALIDATION)

    old_option = state.policies.get(policy_id, category.default)
    if old_option == option_id:
        return PolicyChangeResult(success=True, changed=False, message=f"{category.name} unchanged")

    state.policies[policy_id] = option_id
    state.policy_history.append(
        PolicyChangeRecord(policy_id=policy_id, from_option=old_option, to_option=option_id, week=state.week)
    )
    del state.policy_history[:-history_limit]

    consequences = _apply_change_consequences(state, category, old_option, option_id)
    return PolicyChangeResult(
        success=True,
        changed=True,
        consequences=consequences,
        message=f"{category.name} set to {category.options[option_id].name}",
    )


def _apply_change_consequences(
    state: "GameState", category: PolicyCategory, old_option: str, new_option: str
) -> PolicyChangeConsequences:
    """Any change unsettles people; jumping across the option scale unsettles them more."""
    consequences = PolicyChangeConsequences(morale_change=-5)

    magnitude = abs(category.option_index(new_option) - category.option_index(old_option))
    if magnitude > 1:
        consequences.morale_change -= 10
        consequences.members_upset = int(len(state.congregation) * 0.1)
        consequences.news_message = (
            f"Major shift in {category.name}! Some members are concerned about the direction."
        )
        news_type = NewsType.NEGATIVE
    else:
        consequences.news_message = f"{category.name} policy adjusted to {category.options[new_option].name}."
        news_type = NewsType.NORMAL

    stats = state.stats
    stats.congregation_morale = clamp(
        stats.congregation_morale + consequences.morale_change, MORALE_FLOOR, MORALE_CEILING
    )
    state.add_news(f"📜 {consequences.news_message}", news_type)
    logger.info("Policy %s: %s -> %s (morale %+d)", category.id, old_option, new_option, consequences.morale_change)
    return consequences


def calculate_member_policy_alignment(member: "CongregationMember", effects: PolicyEffects) -> int:
    """How well current policies suit a member, -100 ~ +100."""
    alignment = 0
    if member.age_group in effects.attracts_age_groups:
        alignment += 20
    if member.age_group in effects.repels_age_groups:
        alignment -= 30
    alignment += effects.satisfaction_modifier
    return int(clamp(alignment, -100, 100))


def get_policy_summary(policies: Mapping[str, str]) -> List[Dict[str, str]]:
    summaries = []
    for policy_id, option_id in policies.items():
        category = POLICY_CATEGORIES[policy_id]
        option = category.options[option_id]
        summaries.append({
            "policy_id": policy_id,
            "policy_name": category.name,
            "policy_icon": category.icon,
            "option_id": option_id,
            "option_name": option.name,
            "option_icon": option.icon,
            "description": option.description,
        })
    return summaries


def is_valid_policy_state(policies: Mapping[str, str]) -> bool:
    """Every category present with a known option."""
    return set(policies) == set(POLICY_CATEGORIES) and all(
        isinstance(option_id, str) and option_id in POLICY_CATEGORIES[policy_id].options
        for policy_id, option_id in policies.items()
    )
