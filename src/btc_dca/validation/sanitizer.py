"""Input sanitization for simulation parameters coming from the CLI or API."""

from datetime import date
from typing import Any, Optional
import math
import logging

from btc_dca.exceptions import InvalidInputError
from btc_dca.schedule.schedule_generator import Cadence, to_date

logger = logging.getLogger(__name__)


class InputSanitizer:
    """Sanitize and clean user-supplied simulation inputs."""

    @staticmethod
    def sanitize_date(value: Any) -> Optional[date]:
        """Sanitize a date given as date/datetime or YYYY-MM-DD string.

        Args:
            value: Raw date input

        Returns:
            Calendar date or None if invalid
        """
        if value is None or (isinstance(value, str) and not value.strip()):
            logger.warning("Date is empty")
            return None
        try:
            return to_date(value)
        except InvalidInputError as e:
            logger.warning(f"Invalid date: {e}")
            return None

    @staticmethod
    def sanitize_cadence(value: Any) -> Optional[Cadence]:
        """Sanitize a cadence name.

        Args:
            value: Cadence enum or name ('weekly', 'biweekly', 'monthly')

        Returns:
            Cadence or None if invalid
        """
        try:
            return Cadence.parse(value)
        except InvalidInputError as e:
            logger.warning(str(e))
            return None

    @staticmethod
    def sanitize_amount(value: Any, allow_zero: bool = False) -> Optional[float]:
        """Sanitize a per-purchase amount.

        Args:
            value: Amount as number or numeric string
            allow_zero: Accept 0 (degenerate, zero-growth simulation)

        Returns:
            Amount as float or None if invalid
        """
        if isinstance(value, bool):
            logger.warning("Amount must be numeric, got bool")
            return None
        try:
            amount = float(value)
        except (ValueError, TypeError) as e:
            logger.warning(f"Cannot convert amount to float: {e}")
            return None

        if math.isnan(amount) or math.isinf(amount):
            logger.warning(f"Amount is NaN or infinite: {amount}")
            return None

        if amount < 0 or (amount == 0 and not allow_zero):
            logger.warning(f"Amount must be positive, got {amount}")
            return None

        return amount

    @staticmethod
    def sanitize_text(value: Any) -> str:
        """Coerce an optional title/snippet to a string ('' when absent)."""
        if value is None:
            return ""
        if not isinstance(value, str):
            return str(value)
        return value
