"""
FastAPI dependency injection providers.
"""

from fastapi import HTTPException, Request

from simchurch.simulation_layer.engine import ChurchSimulation
from simchurch.simulation_layer.models import RejectionKind

REJECTION_STATUS = {
    RejectionKind.VALIDATION: 400,
    RejectionKind.NOT_FOUND: 404,
}


def get_simulation(request: Request) -> ChurchSimulation:
    """The game owned by the app (created in the lifespan handler)."""
    return request.app.state.simulation


def raise_for_rejection(result) -> None:
    """Turn a rejected action result into the matching HTTP error."""
    if result.success:
        return
    status = REJECTION_STATUS.get(result.rejection, 400)
    raise HTTPException(status_code=status, detail=result.message)
