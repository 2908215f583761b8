"""
FastAPI application entry point.
"""

from contextlib import asynccontextmanager
from typing import Callable, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from config import get_settings
from simchurch.app_layer.routers import congregation, events, policies, simulation, staff
from simchurch.simulation_layer.engine import ChurchSimulation, SimulationBusyError

SimulationFactory = Callable[[], ChurchSimulation]


def create_app(simulation_factory: Optional[SimulationFactory] = None) -> FastAPI:
    factory = simulation_factory or ChurchSimulation.new_game
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup: one game per process
        app.state.simulation = factory()
        yield

    app = FastAPI(
        title=settings.api.title,
        description="Weekly church management simulation: congregation, staff, policies and events",
        version=settings.api.version,
        lifespan=lifespan,
    )

    @app.exception_handler(SimulationBusyError)
    async def busy_handler(request: Request, exc: SimulationBusyError):
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    app.include_router(
        simulation.router, prefix="/api/v1/simulation", tags=["simulation"]
    )
    app.include_router(
        congregation.router, prefix="/api/v1/congregation", tags=["congregation"]
    )
    app.include_router(
        staff.router, prefix="/api/v1/staff", tags=["staff"]
    )
    app.include_router(
        policies.router, prefix="/api/v1/policies", tags=["policies"]
    )
    app.include_router(
        events.router, prefix="/api/v1/events", tags=["events"]
    )

    @app.get("/health")
    async def health_check():
        return {"status": "ok"}

    return app


app = create_app()
