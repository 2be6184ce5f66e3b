# src/btc_dca/monitoring/error_logging.py
"""
Error logging for the I/O boundary of the DCA & sentiment engine.

Upstream failures (price API down, a news feed unreachable) are never fatal:
the caller falls back to a mock price series or a neutral sentiment score.
Rejected user input is not a fallback but is recorded the same way. Every
record is tagged with the component that produced it and the reason, and
appended to a JSONL log (``logging.error_log`` in the app config, else
``datalake/runs/error_log.jsonl`` under the working directory).
"""

import logging
import traceback
from typing import Dict, Any, Optional, Union
from datetime import datetime, timezone
from pathlib import Path
import json
from enum import Enum

DEFAULT_ERROR_LOG = Path("datalake") / "runs" / "error_log.jsonl"

# Set from the app config at startup; overrides DEFAULT_ERROR_LOG.
_configured_error_log: Optional[Path] = None


def configure_error_log(path: Optional[Union[str, Path]]) -> None:
    """Route records of ErrorLoggers created without an explicit path to ``path``."""
    global _configured_error_log
    _configured_error_log = Path(path) if path else None


class ErrorComponent(Enum):
    """Component identifiers for error tracking and monitoring."""
    PRICE_LOADER = "price_loader"
    SENTIMENT_AGGREGATOR = "sentiment_aggregator"
    SIMULATION_SERVICE = "simulation_service"
    SENTIMENT_API = "sentiment_api"
    SIMULATION_API = "simulation_api"


class FallbackReason(Enum):
    """Reasons why fallback was triggered or a request was refused."""
    EXTERNAL_API_FAILURE = "external_api_failure"
    TIMEOUT = "timeout"
    CORRUPT_DATA = "corrupt_data"
    INVALID_INPUT = "invalid_input"
    UNKNOWN = "unknown"


class ErrorLogger:
    """
    Structured error logging with component tagging and fallback tracking.

    Usage:
        error_logger = ErrorLogger(component=ErrorComponent.PRICE_LOADER)
        try:
            prices = fetch_remote_prices()
        except requests.RequestException as exc:
            error_logger.log_fallback(
                reason=FallbackReason.EXTERNAL_API_FAILURE,
                exception=exc,
                context={"days": 370},
                fallback_action="Using mock price series",
            )
            prices = mock_price_series(start, end)
    """

    def __init__(
        self,
        component: ErrorComponent,
        base_logger: Optional[logging.Logger] = None,
        error_log_path: Optional[Union[str, Path]] = None,
    ):
        """
        Initialize error logger for a specific component.

        Args:
            component: ErrorComponent enum identifying the component
            base_logger: Optional logging.Logger to use (creates default if None)
            error_log_path: JSONL file receiving error records
                            (defaults to the configured error log)
        """
        self.component = component
        self.logger = base_logger or logging.getLogger(f"error.{component.value}")
        self.logger.setLevel(logging.INFO)

        self.error_count = 0
        self.fallback_count = 0
        self.error_history: list[Dict[str, Any]] = []

        if error_log_path:
            self.error_log_path = Path(error_log_path)
        else:
            self.error_log_path = _configured_error_log or DEFAULT_ERROR_LOG

    def log_fallback(
        self,
        reason: FallbackReason,
        exception: Optional[Exception] = None,
        context: Optional[Dict[str, Any]] = None,
        fallback_action: Optional[str] = None,
    ) -> None:
        """
        Log an error event with fallback information.

        Args:
            reason: FallbackReason enum indicating why fallback occurred
            exception: Optional exception that triggered the fallback
            context: Optional context dict (feed url, date range, etc.)
            fallback_action: Optional description of fallback action taken
        """
        self.fallback_count += 1

        error_record = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "component": self.component.value,
            "reason": reason.value,
            "fallback_count": self.fallback_count,
            "exception_type": type(exception).__name__ if exception else None,
            "exception_message": str(exception) if exception else None,
            "traceback": _format_traceback(exception),
            "context": context or {},
            "fallback_action": fallback_action or "Using fallback data",
        }

        self.error_history.append(error_record)

        context_str = ", ".join(f"{k}={v}" for k, v in (context or {}).items())
        exc_str = f": {exception}" if exception else ""

        log_msg = (
            f"[{self.component.value.upper()}] "
            f"Fallback triggered ({reason.value}){exc_str} "
            f"| Context: {context_str} "
            f"| Action: {fallback_action or 'Using fallback data'}"
        )

        self.logger.warning(log_msg)
        self._persist_error(error_record)

    def log_error(
        self,
        error_msg: str,
        reason: FallbackReason = FallbackReason.UNKNOWN,
        exception: Optional[Exception] = None,
        context: Optional[Dict[str, Any]] = None,
        severity: str = "warning",
    ) -> None:
        """
        Log an error that is reported to the caller instead of falling back.

        Args:
            error_msg: Description of the error
            reason: FallbackReason classifying the error
            exception: Optional exception object
            context: Optional context dict
            severity: 'debug', 'info', 'warning', 'error', 'critical'
        """
        self.error_count += 1

        error_record = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "component": self.component.value,
            "reason": reason.value,
            "message": error_msg,
            "exception_type": type(exception).__name__ if exception else None,
            "exception_message": str(exception) if exception else None,
            "traceback": _format_traceback(exception),
            "context": context or {},
            "severity": severity,
        }

        self.error_history.append(error_record)

        log_func = getattr(self.logger, severity, self.logger.warning)
        context_str = ", ".join(f"{k}={v}" for k, v in (context or {}).items())
        log_msg = f"[{self.component.value.upper()}] {error_msg} ({reason.value}) | Context: {context_str}"
        log_func(log_msg)

        self._persist_error(error_record)

    def _persist_error(self, error_record: Dict[str, Any]) -> None:
        """Append error record to JSONL error log file."""
        try:
            self.error_log_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.error_log_path, "a") as f:
                f.write(json.dumps(error_record, default=str) + "\n")
        except OSError as e:
            self.logger.error(f"Failed to write error log: {e}")


def _format_traceback(exception: Optional[Exception]) -> Optional[str]:
    if exception is None:
        return None
    return "".join(
        traceback.format_exception(type(exception), exception, exception.__traceback__)
    )
