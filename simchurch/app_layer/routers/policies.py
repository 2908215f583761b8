"""
Policy API endpoints.
"""

from fastapi import APIRouter, Depends

from simchurch.app_layer.dependencies import get_simulation, raise_for_rejection
from simchurch.app_layer.schemas import PolicyChangeRequest, PolicyChangeResponse
from simchurch.simulation_layer.engine import ChurchSimulation
from simchurch.simulation_layer.models import to_plain
from simchurch.simulation_layer.policies import CATEGORY_GROUPS, POLICY_CATEGORIES

router = APIRouter()


def _category_to_dict(category) -> dict:
    return {
        "id": category.id,
        "name": category.name,
        "icon": category.icon,
        "description": category.description,
        "group": category.group,
        "default": category.default,
        "options": [
            {"id": o.id, "name": o.name, "description": o.description, "icon": o.icon}
            for o in category.options.values()
        ],
    }


@router.get("/")
async def get_policies(sim: ChurchSimulation = Depends(get_simulation)):
    """Current selections plus the full catalog."""
    return {
        "current": sim.state.policies,
        "summary": sim.get_policy_summary(),
        "groups": CATEGORY_GROUPS,
        "categories": [_category_to_dict(c) for c in POLICY_CATEGORIES.values()],
    }


@router.put("/{category_id}", response_model=PolicyChangeResponse)
async def set_policy(category_id: str, body: PolicyChangeRequest, sim: ChurchSimulation = Depends(get_simulation)):
    result = sim.set_policy(category_id, body.option_id)
    raise_for_rejection(result)
    return {
        "success": result.success,
        "changed": result.changed,
        "message": result.message,
        "consequences": to_plain(result.consequences) if result.consequences else None,
    }


@router.get("/history")
async def get_history(limit: int = 10, sim: ChurchSimulation = Depends(get_simulation)):
    """Most recent change first."""
    return [to_plain(r) for r in sim.get_policy_history(limit)]


@router.get("/effects")
async def get_effects(sim: ChurchSimulation = Depends(get_simulation)):
    effects = sim.get_policy_effects()
    data = to_plain(effects)
    data["attracts_age_groups"] = sorted(g.value for g in effects.attracts_age_groups)
    data["repels_age_groups"] = sorted(g.value for g in effects.repels_age_groups)
    return data
