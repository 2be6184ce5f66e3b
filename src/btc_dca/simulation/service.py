# src/btc_dca/simulation/service.py
"""
Simulation service: the validated entrypoint used by the CLI and the API.

Rejects malformed input loudly (InvalidInputError) before handing clean
values to the pure schedule generator and simulator.
"""

from datetime import date
from typing import Any, Mapping, Optional, Tuple

import pandas as pd

from btc_dca.exceptions import InvalidInputError
from btc_dca.monitoring.error_logging import ErrorComponent, ErrorLogger, FallbackReason
from btc_dca.schedule.schedule_generator import generate_schedule
from btc_dca.simulation.dca_simulator import SimulationResult, simulate
from btc_dca.utils.logger import get_logger
from btc_dca.validation.sanitizer import InputSanitizer

logger = get_logger("simulation_service")


def default_date_range(today: Optional[date] = None, lookback_months: int = 12) -> Tuple[date, date]:
    """(today - lookback_months, today)."""
    end = today or date.today()
    start = (pd.Timestamp(end) - pd.DateOffset(months=lookback_months)).date()
    return start, end


def run_simulation(
    start: Any,
    end: Any,
    cadence: Any,
    amount: Any,
    prices: Mapping[str, float],
    error_logger: Optional[ErrorLogger] = None,
) -> SimulationResult:
    """
    Validate inputs, build the schedule and simulate it.

    Args:
        start: First purchase date (date or YYYY-MM-DD).
        end: Last possible purchase date (inclusive).
        cadence: weekly / biweekly / monthly.
        amount: Fiat spent per purchase, must be > 0.
        prices: ISO date -> price.
        error_logger: Records rejected input (INVALID_INPUT).

    Returns:
        SimulationResult

    Raises:
        InvalidInputError: On non-date start/end, unknown cadence or amount <= 0.
    """
    error_logger = error_logger or ErrorLogger(ErrorComponent.SIMULATION_SERVICE)

    def reject(message: str, field: str, value: Any) -> InvalidInputError:
        error_logger.log_error(
            message,
            reason=FallbackReason.INVALID_INPUT,
            context={"field": field, "value": repr(value)},
        )
        return InvalidInputError(message)

    start_day = InputSanitizer.sanitize_date(start)
    if start_day is None:
        raise reject(f"Invalid start date: {start!r}", "start", start)
    end_day = InputSanitizer.sanitize_date(end)
    if end_day is None:
        raise reject(f"Invalid end date: {end!r}", "end", end)
    step = InputSanitizer.sanitize_cadence(cadence)
    if step is None:
        raise reject(f"Invalid cadence: {cadence!r}", "cadence", cadence)
    per_purchase = InputSanitizer.sanitize_amount(amount)
    if per_purchase is None:
        raise reject(f"Purchase amount must be a positive number, got {amount!r}", "amount", amount)

    schedule = generate_schedule(start_day, end_day, step)
    result = simulate(schedule, prices, per_purchase)
    logger.info(
        f"Simulation {start_day}..{end_day} ({step.value}, {per_purchase:g}/buy): "
        f"{len(result.timeline)}/{len(schedule)} purchases, "
        f"P&L {result.summary.profit_and_loss_percent:+.2f}%"
    )
    return result
