"""
Simulation API endpoints: the weekly tick, game lifecycle, finances and saves.
"""

import json
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException, Request

from simchurch.app_layer.dependencies import get_simulation, raise_for_rejection
from simchurch.app_layer.schemas import (
    ActionResponse,
    AllocationRequest,
    FinancialStatsResponse,
    NewGameRequest,
    ProjectionResponse,
    RunWeeksRequest,
    SaveRequest,
    ScenarioRequest,
    WeekResultResponse,
)
from simchurch.simulation_layer.engine import CHOICE_STRATEGIES, ChurchSimulation
from simchurch.simulation_layer.models import to_plain
from simchurch.simulation_layer.scenario.scenarios import SCENARIOS

router = APIRouter()


@router.post("/new", response_model=ActionResponse)
async def new_game(request: Request, body: NewGameRequest, sim: ChurchSimulation = Depends(get_simulation)):
    """Start a fresh sandbox game in place of the current one."""
    simulation = ChurchSimulation.new_game(
        seed=body.seed,
        settings=sim.settings,
        congregation_size=body.congregation_size,
        store=sim.store,
    )
    request.app.state.simulation = simulation
    return ActionResponse(
        success=True,
        message="New game started",
        data={"congregation_size": len(simulation.state.congregation)},
    )


@router.post("/week", response_model=WeekResultResponse)
async def process_week(sim: ChurchSimulation = Depends(get_simulation)):
    """Advance the game by one week."""
    return sim.process_week().to_dict()


@router.post("/run")
async def run_weeks(body: RunWeeksRequest, sim: ChurchSimulation = Depends(get_simulation)) -> List[Dict[str, Any]]:
    """Advance several weeks; one summary row per week."""
    resolver = CHOICE_STRATEGIES.get(body.auto_resolve) if body.auto_resolve else None
    frame = sim.run_weeks(body.weeks, resolve_choice=resolver)
    return json.loads(frame.to_json(orient="records"))


@router.get("/state")
async def get_state(sim: ChurchSimulation = Depends(get_simulation)):
    """Headline view of the current game."""
    state = sim.state
    return {
        "week": state.week,
        "game_mode": state.game_mode,
        "scenario_id": state.scenario_id,
        "church": to_plain(state.church),
        "stats": to_plain(state.stats),
        "stat_change": sim.get_stat_change(),
        "status": sim.get_church_status(),
        "allocation": to_plain(state.allocation),
        "staff_count": len(state.staff),
        "candidate_count": len(state.candidates),
        "congregation_size": len(state.congregation),
        "pending_event": state.active_event.event_id if state.active_event else None,
        "news": [to_plain(n) for n in reversed(state.news[-10:])],
    }


@router.get("/financials", response_model=FinancialStatsResponse)
async def get_financials(sim: ChurchSimulation = Depends(get_simulation)):
    return sim.get_financial_stats()


@router.get("/financials/history")
async def get_financial_history(sim: ChurchSimulation = Depends(get_simulation)):
    """Most recent week first."""
    return [to_plain(r) for r in reversed(sim.state.financial_history)]


@router.get("/projection", response_model=ProjectionResponse)
async def get_projection(sim: ChurchSimulation = Depends(get_simulation)):
    projection = sim.get_projected_financials()
    return {
        "income": to_plain(projection["income"]),
        "expenses": to_plain(projection["expenses"]),
        "net": projection["net"],
    }


@router.put("/allocation", response_model=ActionResponse)
async def set_allocation(body: AllocationRequest, sim: ChurchSimulation = Depends(get_simulation)):
    result = sim.set_expense_allocation(body.category, body.amount)
    raise_for_rejection(result)
    return ActionResponse(success=True, message=result.message, data=result.payload)


@router.get("/scenarios")
async def list_scenarios():
    return [s.to_dict() for s in SCENARIOS.values()]


@router.post("/scenario", response_model=ActionResponse)
async def start_scenario(body: ScenarioRequest, sim: ChurchSimulation = Depends(get_simulation)):
    result = sim.start_scenario(body.scenario_id)
    raise_for_rejection(result)
    return ActionResponse(success=True, message=result.message, data=result.payload)


@router.get("/goals")
async def get_goals(sim: ChurchSimulation = Depends(get_simulation)):
    return sim.check_goals()


@router.post("/save", response_model=ActionResponse)
async def save_game(body: SaveRequest, sim: ChurchSimulation = Depends(get_simulation)):
    if not sim.save(body.slot):
        raise HTTPException(status_code=500, detail="Failed to save game")
    return ActionResponse(success=True, message="Game saved")


@router.post("/load", response_model=ActionResponse)
async def load_game(body: SaveRequest, sim: ChurchSimulation = Depends(get_simulation)):
    if not sim.has_saved_game(body.slot):
        raise HTTPException(status_code=404, detail="No saved game")
    if not sim.load(body.slot):
        raise HTTPException(status_code=400, detail="Saved game could not be loaded")
    return ActionResponse(success=True, message="Game loaded", data={"week": sim.state.week})
