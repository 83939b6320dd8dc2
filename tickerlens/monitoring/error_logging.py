# tickerlens/monitoring/error_logging.py
"""
Error Logging Framework for the TickerLens dashboard.

Every soft failure (search falling back to the static table, a panel that
could not load its series, a sentiment request that timed out) is logged
with a component tag and a reason, kept in memory for the session, and
optionally appended to a JSONL file.
"""

import json
import logging
import traceback
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

ERROR_LOG_FILE = "error_log.jsonl"
RECENT_ERRORS = 10
DEFAULT_FALLBACK_ACTION = "Using fallback data"


class ErrorComponent(Enum):
    """Component identifiers for error tracking and monitoring."""
    MARKET_DATA = "market_data"
    TICKER_SEARCH = "ticker_search"
    SENTIMENT = "sentiment"
    NEWS_PROXY = "news_proxy"


class FallbackReason(Enum):
    """Why a component degraded instead of answering normally."""
    MISSING_API_KEY = "missing_api_key"
    RATE_LIMITED = "rate_limited"
    PROVIDER_ERROR = "provider_error"
    TIMEOUT = "timeout"
    NETWORK_FAILURE = "network_failure"
    INVALID_INPUT = "invalid_input"


def _format_context(context: Optional[Dict[str, Any]]) -> str:
    return ", ".join(f"{k}={v}" for k, v in (context or {}).items())


class ErrorLogger:
    """
    Structured error logging with component tagging and fallback tracking.

    Usage:
        error_logger = ErrorLogger(component=ErrorComponent.TICKER_SEARCH)
        try:
            matches = await client.symbol_search(query)
        except RateLimitError as exc:
            error_logger.log_fallback(
                reason=FallbackReason.RATE_LIMITED,
                exception=exc,
                context={"query": query},
                fallback_action="Using static suggestions",
            )
            matches = fallback_suggestions(query)
    """

    def __init__(
        self,
        component: ErrorComponent,
        base_logger: Optional[logging.Logger] = None,
        log_dir: Optional[Union[str, Path]] = None,
    ):
        """
        Args:
            component: Component the records are tagged with.
            base_logger: Logger to write to; defaults to "error.<component>".
            log_dir: Directory for error_log.jsonl. Records stay in memory only if None.
        """
        self.component = component
        self.logger = base_logger or logging.getLogger(f"error.{component.value}")
        self.logger.setLevel(logging.INFO)

        self.error_count = 0
        self.fallback_count = 0
        self.error_history: List[Dict[str, Any]] = []

        self.error_log_path: Optional[Path] = None
        if log_dir is not None:
            self.error_log_path = Path(log_dir) / ERROR_LOG_FILE
            self.error_log_path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def tag(self) -> str:
        return f"[{self.component.value.upper()}]"

    def _record(
        self,
        exception: Optional[Exception],
        context: Optional[Dict[str, Any]],
        **fields: Any,
    ) -> Dict[str, Any]:
        record = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "component": self.component.value,
            **fields,
            "exception_type": type(exception).__name__ if exception else None,
            "exception_message": str(exception) if exception else None,
            "traceback": traceback.format_exc() if exception else None,
            "context": context or {},
        }
        self.error_history.append(record)
        self._persist_error(record)
        return record

    def log_fallback(
        self,
        reason: FallbackReason,
        exception: Optional[Exception] = None,
        context: Optional[Dict[str, Any]] = None,
        fallback_action: Optional[str] = None,
    ) -> None:
        """
        Record that a component answered from a fallback path.

        Args:
            reason: Why the fallback was taken.
            exception: Exception that triggered it, if any.
            context: Ticker, query, endpoint and similar details.
            fallback_action: What was served instead.
        """
        self.fallback_count += 1
        action = fallback_action or DEFAULT_FALLBACK_ACTION
        exc_str = f": {exception}" if exception else ""
        self.logger.warning(
            f"{self.tag} Fallback triggered ({reason.value}){exc_str} "
            f"| Context: {_format_context(context)} | Action: {action}"
        )
        self._record(
            exception,
            context,
            reason=reason.value,
            fallback_count=self.fallback_count,
            fallback_action=action,
        )

    def log_error(
        self,
        error_msg: str,
        exception: Optional[Exception] = None,
        context: Optional[Dict[str, Any]] = None,
        severity: str = "warning",
    ) -> None:
        """
        Record a failure that was surfaced to the user rather than hidden.

        Args:
            error_msg: Description of the failure.
            exception: Exception object, if any.
            context: Ticker, panel and similar details.
            severity: 'debug', 'info', 'warning', 'error' or 'critical'.
        """
        self.error_count += 1
        log_func = getattr(self.logger, severity, self.logger.warning)
        log_func(f"{self.tag} {error_msg} | Context: {_format_context(context)}")
        self._record(exception, context, message=error_msg, severity=severity)

    def _persist_error(self, error_record: Dict[str, Any]) -> None:
        if self.error_log_path is None:
            return
        try:
            with open(self.error_log_path, "a") as f:
                f.write(json.dumps(error_record) + "\n")
        except OSError as e:
            self.logger.error(f"Failed to write error log: {e}")

    def get_error_summary(self) -> Dict[str, Any]:
        """Counts plus the most recent records."""
        return {
            "component": self.component.value,
            "total_errors": self.error_count,
            "total_fallbacks": self.fallback_count,
            "recent_errors": self.error_history[-RECENT_ERRORS:],
        }

    def clear_history(self) -> None:
        self.error_history.clear()


def create_component_logger(
    component: ErrorComponent, log_dir: Optional[Union[str, Path]] = None
) -> ErrorLogger:
    """Create a component-specific error logger."""
    return ErrorLogger(component=component, log_dir=log_dir)
