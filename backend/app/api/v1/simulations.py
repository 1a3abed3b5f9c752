from fastapi import APIRouter, Request

from app.config import settings
from app.core.rate_limit import simulation_limiter
from app.schemas.simulation import SimulateRequest, SimulateResponse
from app.services.simulation_service import run_simulation

router = APIRouter()


@router.post(
    "/simulate",
    response_model=SimulateResponse,
    summary="Run thermal simulation",
    description=(
        "Simulate the collector loop and storage tank hour by hour. "
        "Temperatures are given and returned in °F."
    ),
)
def simulate_temperatures(body: SimulateRequest, request: Request):
    # Plain ``def``: the CPU-bound loop runs in the threadpool, one state per request.
    simulation_limiter.check(request)
    return run_simulation(body, settings.physical_constants)
