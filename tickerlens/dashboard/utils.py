# tickerlens/dashboard/utils.py

import asyncio
import logging
from typing import Any, Awaitable, Optional

from tickerlens.utils.logger import UI_DATE_FORMAT, UI_FORMAT, get_logger

# -------------------------------
# Logger Function
# -------------------------------
def get_ui_logger(name: Optional[str] = "dashboard") -> logging.Logger:
    """Dashboard logger: pipe-separated records that stay out of the root logger."""
    return get_logger(name or "dashboard", fmt=UI_FORMAT, datefmt=UI_DATE_FORMAT, propagate=False)

# -------------------------------
# Helper Functions
# -------------------------------
def run_async(coro: Awaitable[Any]) -> Any:
    """
    Run a coroutine to completion from Streamlit's synchronous script thread.

    Args:
        coro: Coroutine to run.

    Returns:
        Whatever the coroutine returns.
    """
    return asyncio.run(coro)


def format_signed_percent(value: Optional[float]) -> str:
    if value is None:
        return "N/A"
    sign = "+" if value > 0 else ""
    return f"{sign}{value:.1f}%"


def format_money(value: Optional[float], suffix: str = "", decimals: int = 2) -> str:
    if value is None:
        return "N/A"
    return f"${value:.{decimals}f}{suffix}"

# -------------------------------
# Dashboard Constants
# -------------------------------
DEFAULT_CHART_HEIGHT = 420
DEFAULT_BAR_HEIGHT = 260
SENTIMENT_COLORS = {"positive": "#22c55e", "negative": "#ef4444", "neutral": "#9ca3af"}
SENTIMENT_ICONS = {"positive": "📈", "negative": "📉", "neutral": "➖"}
