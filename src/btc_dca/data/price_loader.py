# src/btc_dca/data/price_loader.py
"""
Daily price loader.

Pulls a daily close series from the CoinGecko ``market_chart`` endpoint and
reduces it to an ISO date -> price mapping. When the API is unreachable or
returns something unusable, a deterministic mock series covering the
requested range is returned instead so the simulation can still run.
"""

from datetime import date, timedelta
from typing import Dict, Optional

import numpy as np
import requests

from btc_dca.monitoring.error_logging import ErrorComponent, ErrorLogger, FallbackReason
from btc_dca.schedule.schedule_generator import DateLike, to_date
from btc_dca.simulation.dca_simulator import map_daily_prices
from btc_dca.utils.config_loader import PriceSourceConfig
from btc_dca.utils.logger import get_logger

logger = get_logger("price_loader")


def days_between(start: date, end: date) -> int:
    """Whole days from start to end (negative when end is before start)."""
    return (end - start).days


def mock_price_series(
    start: DateLike,
    end: DateLike,
    base_price: float = 30000.0,
    floor: float = 10000.0,
) -> Dict[str, float]:
    """
    Deterministic synthetic daily series from start to end inclusive.

    Each day drifts the previous price by sin(i / 20) * 1% + 0.05%,
    never dropping below ``floor``.
    """
    start_day, end_day = to_date(start), to_date(end)
    n_days = days_between(start_day, end_day)
    if n_days < 0:
        return {}

    steps = np.arange(n_days + 1)
    growth = 1 + (np.sin(steps / 20) * 0.01 + 0.0005)

    series: Dict[str, float] = {}
    price = base_price
    for i, factor in enumerate(growth):
        price = max(floor, price * float(factor))
        series[(start_day + timedelta(days=i)).isoformat()] = price
    return series


class PriceLoader:
    """
    Fetches daily prices for the configured asset.

    Attributes:
        config (PriceSourceConfig): API location, asset, currency and limits.
        last_fetch_was_mock (bool): True when the last call fell back to mock data.
    """

    def __init__(self, config: Optional[PriceSourceConfig] = None, error_logger: Optional[ErrorLogger] = None):
        self.config = config or PriceSourceConfig()
        self.error_logger = error_logger or ErrorLogger(ErrorComponent.PRICE_LOADER)
        self.last_fetch_was_mock = False

    @property
    def endpoint(self) -> str:
        return f"{self.config.base_url.rstrip('/')}/coins/{self.config.coin_id}/market_chart"

    def requested_days(self, start: date, end: date) -> int:
        """History length to request: the range plus padding, within [1, max_days]."""
        days = days_between(start, end) + self.config.padding_days
        return min(max(days, 1), self.config.max_days)

    def fetch_remote(self, start: DateLike, end: DateLike) -> Dict[str, float]:
        """
        Query the price API.

        Raises:
            requests.RequestException: On network / HTTP failure.
            ValueError: If the payload has no usable ``prices`` list.
        """
        start_day, end_day = to_date(start), to_date(end)
        params = {
            "vs_currency": self.config.vs_currency,
            "days": self.requested_days(start_day, end_day),
            "interval": "daily",
        }
        logger.info(f"Sending GET request to API: {self.endpoint} with params: {params}")
        response = requests.get(self.endpoint, params=params, timeout=self.config.timeout)
        response.raise_for_status()

        payload = response.json()
        raw = payload.get("prices") if isinstance(payload, dict) else None
        if not isinstance(raw, list):
            raise ValueError("Price payload has no 'prices' list")

        prices = map_daily_prices(raw)
        if not prices:
            raise ValueError("Price payload contained no usable points")
        logger.info(f"Fetched {len(prices)} daily prices")
        return prices

    def fetch_prices(self, start: DateLike, end: DateLike) -> Dict[str, float]:
        """
        Daily prices covering start..end, from the API or the mock fallback.

        Returns:
            Dict[str, float]: ISO date -> price.
        """
        start_day, end_day = to_date(start), to_date(end)
        try:
            prices = self.fetch_remote(start_day, end_day)
            self.last_fetch_was_mock = False
            return prices
        except requests.exceptions.Timeout as e:
            reason = FallbackReason.TIMEOUT
            error = e
        except requests.exceptions.RequestException as e:
            reason = FallbackReason.EXTERNAL_API_FAILURE
            error = e
        except ValueError as e:
            # also covers JSONDecodeError
            reason = FallbackReason.CORRUPT_DATA
            error = e

        self.error_logger.log_fallback(
            reason=reason,
            exception=error,
            context={"start": start_day.isoformat(), "end": end_day.isoformat()},
            fallback_action="Using mock price series",
        )
        self.last_fetch_was_mock = True
        return mock_price_series(start_day, end_day)
