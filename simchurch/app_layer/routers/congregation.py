"""
Congregation API endpoints.
"""

from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from simchurch.app_layer.dependencies import get_simulation
from simchurch.app_layer.schemas import MemberResponse
from simchurch.simulation_layer.engine import ChurchSimulation
from simchurch.simulation_layer.models import AgeGroup, AttendancePattern

router = APIRouter()

SortKey = Literal["satisfaction", "age", "name", "joined_week", "total_attendance"]


@router.get("/stats")
async def get_stats(sim: ChurchSimulation = Depends(get_simulation)):
    """Roster breakdown by pattern, age group and giving level."""
    return sim.get_congregation_stats()


@router.get("/members", response_model=List[MemberResponse])
async def list_members(
    pattern: Optional[AttendancePattern] = None,
    age_group: Optional[AgeGroup] = None,
    sort_by: Optional[SortKey] = None,
    limit: Optional[int] = Query(default=None, ge=1),
    sim: ChurchSimulation = Depends(get_simulation),
):
    members = sim.get_members(pattern=pattern, age_group=age_group, sort_by=sort_by, limit=limit)
    return [m.to_dict() for m in members]


@router.get("/members/{member_id}/alignment")
async def get_member_alignment(member_id: str, sim: ChurchSimulation = Depends(get_simulation)):
    """How well the current policies suit one member (-100 ~ +100)."""
    alignment = sim.member_policy_alignment(member_id)
    if alignment is None:
        raise HTTPException(status_code=404, detail="Member not found")
    return {"member_id": member_id, "alignment": alignment}
