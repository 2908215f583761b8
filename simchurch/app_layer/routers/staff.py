"""
Staff API endpoints: candidate pool, roster, hiring and firing.
"""

from fastapi import APIRouter, Depends

from simchurch.app_layer.dependencies import get_simulation, raise_for_rejection
from simchurch.app_layer.schemas import ActionResponse
from simchurch.simulation_layer.engine import ChurchSimulation
from simchurch.simulation_layer.staff.positions import POSITIONS

router = APIRouter()


@router.get("/")
async def list_staff(sim: ChurchSimulation = Depends(get_simulation)):
    return [s.to_dict() for s in sim.state.staff]


@router.get("/candidates")
async def list_candidates(sim: ChurchSimulation = Depends(get_simulation)):
    return [c.to_dict() for c in sim.state.candidates]


@router.get("/positions")
async def list_positions(sim: ChurchSimulation = Depends(get_simulation)):
    """Every position, flagged with whether it can be filled right now."""
    open_ids = {p.id for p in sim.get_available_positions()}
    return [
        {**p.to_dict(), "available": p.id in open_ids, "filled": sim.state.staff_count(p.id)}
        for p in POSITIONS.values()
    ]


@router.post("/hire/{candidate_id}", response_model=ActionResponse)
async def hire_candidate(candidate_id: str, sim: ChurchSimulation = Depends(get_simulation)):
    result = sim.hire_candidate(candidate_id)
    raise_for_rejection(result)
    return ActionResponse(success=True, message=result.message, data={"staff": result.payload["staff"].to_dict()})


@router.post("/fire/{staff_id}", response_model=ActionResponse)
async def fire_staff(staff_id: str, sim: ChurchSimulation = Depends(get_simulation)):
    result = sim.fire_staff(staff_id)
    raise_for_rejection(result)
    return ActionResponse(success=True, message=result.message)


@router.post("/pass/{candidate_id}", response_model=ActionResponse)
async def pass_on_candidate(candidate_id: str, sim: ChurchSimulation = Depends(get_simulation)):
    result = sim.pass_on_candidate(candidate_id)
    raise_for_rejection(result)
    return ActionResponse(success=True, message=result.message)
