"""
Event engine: condition checks, the weekly roll, immediate resolution,
the pending choice slot and the bounded event log.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from simchurch.simulation_layer.events.catalog import EVENT_TEMPLATES, EventTemplate, get_template
from simchurch.simulation_layer.events.effects import apply_effects
from simchurch.simulation_layer.models import EventRecord, EventType, NewsType, RejectionKind
from simchurch.simulation_layer.random_utils import SimRandom
from simchurch.simulation_layer.state import PendingChoice

logger = logging.getLogger(__name__)

EXPIRED_CHOICE_ID = "expired"


@dataclass
class EventOutcome:
    """What the weekly roll produced."""

    event_id: str
    title: str
    type: EventType
    pending: bool = False
    message: str = ""
    outcome: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ResolutionResult:
    success: bool
    message: str = ""
    rejection: Optional[RejectionKind] = None
    event_id: Optional[str] = None
    choice_id: Optional[str] = None
    outcome: Dict[str, Any] = field(default_factory=dict)


def check_conditions(template: EventTemplate, state) -> bool:
    c = template.conditions
    if c.min_week is not None and state.week < c.min_week:
        return False
    if c.min_attendance is not None and state.stats.attendance < c.min_attendance:
        return False
    if c.min_reputation is not None and state.stats.reputation < c.min_reputation:
        return False
    if c.min_budget is not None and state.stats.budget < c.min_budget:
        return False
    if c.min_staff is not None and len(state.staff) < c.min_staff:
        return False
    return True


def roll_for_events(state, rng: SimRandom, allow_choice: bool = True) -> Optional[EventTemplate]:
    """
    One Bernoulli trial per eligible template, then one uniform pick
    from whatever fired. At most one event per call.
    """
    fired: List[EventTemplate] = []
    for template in EVENT_TEMPLATES.values():
        if template.is_choice and not allow_choice:
            continue
        if check_conditions(template, state) and rng.chance(template.probability):
            fired.append(template)

    if not fired:
        return None
    return rng.choice(fired)


def record_event(
    state,
    template: EventTemplate,
    outcome: Dict[str, Any],
    message: str,
    choice_id: Optional[str] = None,
    history_limit: int = 50,
) -> EventRecord:
    record = EventRecord(
        event_id=template.id,
        title=template.title,
        type=template.type,
        week=state.week,
        outcome=outcome,
        choice_id=choice_id,
        message=message,
    )
    state.event_history.append(record)
    del state.event_history[:-history_limit]
    return record


def process_immediate_event(
    state, template: EventTemplate, rng: SimRandom, history_limit: int = 50
) -> EventOutcome:
    outcome = apply_effects(template.effects, state, rng)
    message = template.message.format(**outcome)
    record_event(state, template, outcome, message, history_limit=history_limit)

    news_type = NewsType.POSITIVE if template.type == EventType.POSITIVE else NewsType.NEGATIVE
    state.add_news(f"{template.icon} {message}", news_type)
    logger.info("Event %s fired in week %d: %s", template.id, state.week, message)

    return EventOutcome(
        event_id=template.id, title=template.title, type=template.type, message=message, outcome=outcome
    )


def set_active_event(state, template: EventTemplate) -> EventOutcome:
    state.active_event = PendingChoice(event_id=template.id, triggered_week=state.week)
    logger.info("Event %s is waiting for a decision", template.id)
    return EventOutcome(
        event_id=template.id, title=template.title, type=template.type, pending=True,
        message=template.description,
    )


def get_active_event(state) -> Optional[EventTemplate]:
    if state.active_event is None:
        return None
    return get_template(state.active_event.event_id)


def resolve_choice(
    state, event_id: str, choice_id: str, rng: SimRandom, history_limit: int = 50
) -> ResolutionResult:
    """Apply the chosen option of the pending event and clear the slot."""
    template = get_active_event(state)
    if template is None or template.id != event_id:
        logger.warning("Choice rejected: %s is not the pending event", event_id)
        return ResolutionResult(
            success=False, message="No such pending event", rejection=RejectionKind.NOT_FOUND, event_id=event_id
        )

    choice = template.get_choice(choice_id)
    if choice is None:
        logger.warning("Choice rejected: %s has no option %r", event_id, choice_id)
        return ResolutionResult(
            success=False, message="Invalid choice", rejection=RejectionKind.VALIDATION, event_id=event_id
        )

    outcome = apply_effects(choice.effects, state, rng)
    message = choice.message_for(outcome)
    record_event(state, template, outcome, message, choice_id=choice_id, history_limit=history_limit)
    state.add_news(f"{template.icon} {message}", NewsType.NORMAL)
    state.active_event = None

    logger.info("Event %s resolved with %s", event_id, choice_id)
    return ResolutionResult(
        success=True, message=message, event_id=event_id, choice_id=choice_id, outcome=outcome
    )


def expire_stale_choice(state, expiry_weeks: int, history_limit: int = 50) -> bool:
    """Drop a pending choice that has waited `expiry_weeks` or more. Nothing is applied."""
    pending = state.active_event
    if pending is None or state.week - pending.triggered_week < expiry_weeks:
        return False

    template = get_template(pending.event_id)
    state.active_event = None
    if template is None:
        return True

    message = f"The moment passed: {template.title} went unanswered."
    record_event(state, template, {}, message, choice_id=EXPIRED_CHOICE_ID, history_limit=history_limit)
    state.add_news(message, NewsType.NORMAL)
    logger.info("Pending event %s expired after %d weeks", pending.event_id, state.week - pending.triggered_week)
    return True


def get_event_history(state, limit: Optional[int] = 20) -> List[EventRecord]:
    """Most recent first."""
    history = list(reversed(state.event_history))
    return history if limit is None else history[:limit]
