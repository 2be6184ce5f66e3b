# src/btc_dca/simulation/dca_simulator.py
"""
DCA Simulator

Values a purchase schedule against a daily price series.

For every scheduled date that has a price, a fixed fiat amount buys
amount / price units; cumulative invested and cumulative units are carried
forward and each timeline point is marked at its own date's price.
Dates without a price are skipped silently: no purchase that period.

The summary is taken from the last timeline point only.
"""

import math
from dataclasses import dataclass, asdict, field
from datetime import datetime, timezone
from numbers import Real
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from btc_dca.exceptions import InvalidInputError
from btc_dca.utils.logger import get_logger

logger = get_logger("dca_simulator")

PriceSeries = Mapping[str, float]


@dataclass(frozen=True)
class TimelinePoint:
    """Cumulative position right after one scheduled purchase."""
    date: str
    invested_cumulative: float
    btc_cumulative: float
    value: float
    price: float

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


@dataclass(frozen=True)
class Summary:
    """Final position of a simulation."""
    total_invested: float = 0.0
    total_units: float = 0.0
    current_value: float = 0.0
    profit_and_loss: float = 0.0
    profit_and_loss_percent: float = 0.0
    latest_price: float = 0.0

    @classmethod
    def empty(cls) -> "Summary":
        return cls()

    @classmethod
    def from_point(cls, point: Optional[TimelinePoint]) -> "Summary":
        """Derive the summary from the last timeline point (zeros if None)."""
        if point is None:
            return cls.empty()
        invested = point.invested_cumulative
        pnl = point.value - invested
        pnl_pct = (pnl / invested) * 100 if invested else 0.0
        return cls(
            total_invested=invested,
            total_units=point.btc_cumulative,
            current_value=point.value,
            profit_and_loss=pnl,
            profit_and_loss_percent=pnl_pct,
            latest_price=point.price,
        )

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class SimulationResult:
    timeline: List[TimelinePoint] = field(default_factory=list)
    summary: Summary = field(default_factory=Summary)

    def to_dict(self) -> Dict[str, object]:
        return {
            "timeline": [p.to_dict() for p in self.timeline],
            "summary": self.summary.to_dict(),
        }


def _validate_amount(amount) -> float:
    if isinstance(amount, bool) or not isinstance(amount, Real):
        raise InvalidInputError(f"Purchase amount must be numeric, got {type(amount).__name__}")
    amount = float(amount)
    if math.isnan(amount) or math.isinf(amount):
        raise InvalidInputError(f"Purchase amount must be finite, got {amount}")
    if amount < 0:
        raise InvalidInputError(f"Purchase amount must not be negative, got {amount}")
    return amount


def _usable_price(price) -> Optional[float]:
    # Absent, zero, negative or NaN prices cannot buy anything.
    if price is None or isinstance(price, bool):
        return None
    try:
        price = float(price)
    except (TypeError, ValueError):
        return None
    if math.isnan(price) or math.isinf(price) or price <= 0:
        return None
    return price


def simulate(schedule: Sequence[str], prices: PriceSeries, amount_per_purchase: float) -> SimulationResult:
    """
    Run a dollar-cost-averaging simulation.

    Args:
        schedule: ISO dates on which a purchase is attempted, in order.
        prices: ISO date -> price. Gaps are tolerated.
        amount_per_purchase: Fiat spent on each purchase. Zero is allowed and
            produces a zero-growth timeline.

    Returns:
        SimulationResult: timeline (one point per priced date) and summary.

    Raises:
        InvalidInputError: If the amount is non-numeric, non-finite or negative.
    """
    amount = _validate_amount(amount_per_purchase)
    prices = prices or {}

    timeline: List[TimelinePoint] = []
    cum_units = 0.0
    cum_invested = 0.0
    skipped = 0

    for day in schedule:
        price = _usable_price(prices.get(day))
        if price is None:
            skipped += 1
            continue

        cum_units += amount / price
        cum_invested += amount
        timeline.append(
            TimelinePoint(
                date=day,
                invested_cumulative=cum_invested,
                btc_cumulative=cum_units,
                value=cum_units * price,
                price=price,
            )
        )

    if skipped:
        logger.debug(f"Skipped {skipped} of {len(schedule)} scheduled dates without a price")

    summary = Summary.from_point(timeline[-1] if timeline else None)
    logger.debug(
        f"Simulated {len(timeline)} purchases: invested={summary.total_invested:.2f}, "
        f"value={summary.current_value:.2f}"
    )
    return SimulationResult(timeline=timeline, summary=summary)


def map_daily_prices(pairs: Iterable[Tuple[float, float]]) -> Dict[str, float]:
    """
    Reduce (timestamp_ms, price) pairs to a UTC calendar-day price map.

    When several timestamps fall on the same day, the last one wins.
    Malformed pairs are dropped.
    """
    out: Dict[str, float] = {}
    for pair in pairs or []:
        try:
            ts, price = pair[0], pair[1]
            day = datetime.fromtimestamp(float(ts) / 1000, tz=timezone.utc).date().isoformat()
            out[day] = float(price)
        except (TypeError, ValueError, IndexError, OverflowError, OSError) as e:
            logger.warning(f"Dropping malformed price pair {pair!r}: {e}")
    return out
