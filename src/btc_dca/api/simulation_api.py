"""
Simulation API router.

Runs a DCA simulation for a date range, cadence and amount against the
daily price series of the configured asset, returning the timeline and
summary as JSON or the timeline as CSV. Requests that pass schema
validation but are still rejected by the simulation service get a 400
with an ErrorResponse body.
"""

from datetime import datetime, timezone
from typing import Tuple

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, PlainTextResponse

from btc_dca.api.dependencies import get_price_loader
from btc_dca.config.api_models import ErrorResponse, SimulationRequest, SimulationResponse
from btc_dca.data.price_loader import PriceLoader
from btc_dca.exceptions import InvalidInputError
from btc_dca.monitoring.error_logging import ErrorComponent, ErrorLogger, FallbackReason
from btc_dca.schedule.schedule_generator import generate_schedule
from btc_dca.simulation.dca_simulator import SimulationResult
from btc_dca.simulation.export import export_timeline_csv
from btc_dca.simulation.service import run_simulation
from btc_dca.utils.logger import get_logger

router = APIRouter()
logger = get_logger("simulation_api")

REJECTED = {400: {"model": ErrorResponse, "description": "Simulation input rejected"}}


def _run(request: SimulationRequest, loader: PriceLoader) -> Tuple[SimulationResult, int]:
    prices = loader.fetch_prices(request.start_date, request.end_date)
    result = run_simulation(
        request.start_date,
        request.end_date,
        request.cadence,
        request.amount,
        prices,
    )
    schedule_size = len(generate_schedule(request.start_date, request.end_date, request.cadence))
    return result, schedule_size


def _rejection(request: SimulationRequest, error: InvalidInputError) -> JSONResponse:
    ErrorLogger(ErrorComponent.SIMULATION_API).log_error(
        f"Rejected simulation request: {error}",
        reason=FallbackReason.INVALID_INPUT,
        exception=error,
        context=request.model_dump(mode="json"),
    )
    body = ErrorResponse(
        error_code=FallbackReason.INVALID_INPUT.name,
        message=str(error),
        details=request.model_dump(mode="json"),
        timestamp=datetime.now(timezone.utc).isoformat(),
    )
    return JSONResponse(status_code=400, content=body.model_dump())


@router.post("", response_model=SimulationResponse, responses=REJECTED)
def simulate_dca(
    request: SimulationRequest,
    loader: PriceLoader = Depends(get_price_loader),
):
    """
    Simulate recurring purchases over the requested range.

    Returns:
        SimulationResponse: timeline, summary, number of scheduled dates and
        whether the price series was the mock fallback.
    """
    logger.info(f"Simulation request received: {request.model_dump()}")
    try:
        result, schedule_size = _run(request, loader)
    except InvalidInputError as e:
        return _rejection(request, e)
    return SimulationResponse(
        **result.to_dict(),
        schedule_size=schedule_size,
        used_mock_prices=loader.last_fetch_was_mock,
    )


@router.post("/csv", response_class=PlainTextResponse, responses=REJECTED)
def simulate_dca_csv(
    request: SimulationRequest,
    loader: PriceLoader = Depends(get_price_loader),
):
    """Timeline of the simulation as CSV (date, invested, units, value, price)."""
    try:
        result, _ = _run(request, loader)
    except InvalidInputError as e:
        return _rejection(request, e)
    return PlainTextResponse(
        export_timeline_csv(result),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="dca_timeline.csv"'},
    )
