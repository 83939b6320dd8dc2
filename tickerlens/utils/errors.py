"""
Error hierarchy shared by the market-data, search and sentiment layers.

Each failure the dashboard can show to a user maps onto one of these
classes, so panels can branch on type instead of parsing messages.
"""

from typing import Optional

import httpx


class TickerLensError(Exception):
    """Base class for all user-facing failures."""


class MissingConfigurationError(TickerLensError):
    """A required API key or base URL is not configured."""

    def __init__(self, env_var: str, service: str):
        self.env_var = env_var
        self.service = service
        super().__init__(
            f"{service} API key not configured. Please add {env_var} to your .env.local file."
        )


class ProviderError(TickerLensError):
    """The upstream provider answered with an explicit error payload."""

    def __init__(self, message: str, function: Optional[str] = None):
        self.function = function
        super().__init__(message)


class RateLimitError(ProviderError):
    """The upstream provider signalled that the call quota is exhausted."""


class EmptyPayloadError(TickerLensError):
    """Well-formed response without any usable records."""


class SentimentServiceError(TickerLensError):
    """Sentiment or news lookup failed; the message is safe to display."""


TIMEOUT_MESSAGE = "Request timed out. Please try again."
NETWORK_MESSAGE = "Network error. Please check your connection and try again."


def describe_http_error(exc: Exception, default: str) -> str:
    """
    Map a transport or HTTP exception to a message for the UI.

    Args:
        exc (Exception): Exception raised by an httpx call.
        default (str): Message used when nothing more specific applies.

    Returns:
        str: Message distinguishing timeouts from connectivity failures.
    """
    if isinstance(exc, httpx.HTTPStatusError):
        try:
            body = exc.response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("error"):
            return str(body["error"])
        return default
    if isinstance(exc, httpx.TimeoutException):
        return TIMEOUT_MESSAGE
    if isinstance(exc, httpx.TransportError):
        return NETWORK_MESSAGE
    if isinstance(exc, TickerLensError):
        return str(exc)
    return default
