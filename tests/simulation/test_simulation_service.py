"""Tests for the validated simulation entrypoint."""

from datetime import date

import pytest

from btc_dca.exceptions import InvalidInputError
from btc_dca.monitoring.error_logging import ErrorComponent, ErrorLogger
from btc_dca.simulation.service import default_date_range, run_simulation

PRICES = {"2024-01-01": 40000.0, "2024-01-08": 44000.0, "2024-01-15": 42000.0}


def test_run_simulation_weekly():
    """Weekly run over two priced dates ends 5% up."""
    result = run_simulation("2024-01-01", "2024-01-14", "weekly", 100, PRICES)
    assert [p.date for p in result.timeline] == ["2024-01-01", "2024-01-08"]
    assert result.summary.profit_and_loss_percent == pytest.approx(5.0)


def test_run_simulation_accepts_numeric_strings_and_dates():
    """Date objects, upper-case cadence and numeric strings are accepted."""
    result = run_simulation(date(2024, 1, 1), date(2024, 1, 15), "WEEKLY", "50", PRICES)
    assert result.summary.total_invested == pytest.approx(150.0)


def test_inverted_range_is_empty_not_an_error():
    """Start after end gives an empty result."""
    result = run_simulation("2024-02-01", "2024-01-01", "weekly", 100, PRICES)
    assert result.timeline == []
    assert result.summary.total_invested == 0


@pytest.mark.parametrize("amount", [0, -10, "abc", None, float("nan")])
def test_non_positive_or_non_numeric_amount_rejected(amount):
    """Amounts that are not positive numbers raise."""
    with pytest.raises(InvalidInputError):
        run_simulation("2024-01-01", "2024-01-31", "weekly", amount, PRICES)


@pytest.mark.parametrize("start,end", [
    ("2024-13-01", "2024-01-31"),
    ("2024-01-01", "soon"),
    (None, "2024-01-31"),
    ("2024-01-01junk", "2024-01-31"),
    ("2024-01-01", "2024-1-31"),
])
def test_non_date_bounds_rejected(start, end):
    """Start or end that are not dates raise."""
    with pytest.raises(InvalidInputError):
        run_simulation(start, end, "weekly", 100, PRICES)


def test_unknown_cadence_rejected():
    """Unknown cadence raises."""
    with pytest.raises(InvalidInputError):
        run_simulation("2024-01-01", "2024-01-31", "hourly", 100, PRICES)


def test_default_date_range():
    """Default range looks back the configured number of months."""
    assert default_date_range(date(2024, 3, 31), lookback_months=1) == (date(2024, 2, 29), date(2024, 3, 31))
    start, end = default_date_range(date(2024, 6, 15))
    assert (start, end) == (date(2023, 6, 15), date(2024, 6, 15))


def test_rejected_input_is_recorded(tmp_path):
    """Rejected input is written to the error log as invalid_input."""
    error_logger = ErrorLogger(ErrorComponent.SIMULATION_SERVICE, error_log_path=tmp_path / "errors.jsonl")
    with pytest.raises(InvalidInputError):
        run_simulation("2024-01-01junk", "2024-01-31", "weekly", 100, PRICES, error_logger=error_logger)

    record = error_logger.error_history[-1]
    assert error_logger.error_count == 1
    assert record["component"] == "simulation_service"
    assert record["reason"] == "invalid_input"
    assert record["context"] == {"field": "start", "value": "'2024-01-01junk'"}
    assert (tmp_path / "errors.jsonl").exists()


def test_valid_input_records_nothing(tmp_path):
    """A valid run leaves the error log untouched."""
    error_logger = ErrorLogger(ErrorComponent.SIMULATION_SERVICE, error_log_path=tmp_path / "errors.jsonl")
    run_simulation("2024-01-01", "2024-01-14", "weekly", 100, PRICES, error_logger=error_logger)
    assert error_logger.error_history == []
