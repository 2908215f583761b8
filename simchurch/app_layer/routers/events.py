"""
Event API endpoints: the pending choice and the event log.
"""

from fastapi import APIRouter, Depends

from simchurch.app_layer.dependencies import get_simulation, raise_for_rejection
from simchurch.app_layer.schemas import ChoiceRequest, ResolutionResponse
from simchurch.simulation_layer.engine import ChurchSimulation
from simchurch.simulation_layer.models import to_plain

router = APIRouter()


@router.get("/active")
async def get_active_event(sim: ChurchSimulation = Depends(get_simulation)):
    """The choice event waiting for a decision, or null."""
    template = sim.get_active_event()
    if template is None:
        return None
    return {**template.to_dict(), "triggered_week": sim.state.active_event.triggered_week}


@router.post("/resolve", response_model=ResolutionResponse)
async def resolve_choice(body: ChoiceRequest, sim: ChurchSimulation = Depends(get_simulation)):
    result = sim.resolve_choice(body.event_id, body.choice_id)
    raise_for_rejection(result)
    return {
        "success": result.success,
        "message": result.message,
        "event_id": result.event_id,
        "choice_id": result.choice_id,
        "outcome": result.outcome,
    }


@router.get("/history")
async def get_history(limit: int = 20, sim: ChurchSimulation = Depends(get_simulation)):
    """Most recent event first."""
    return [to_plain(r) for r in sim.get_event_history(limit)]
