"""News-based market sentiment: news proxy feed, prediction client and response normalizer."""

from .normalizer import SentimentVerdict, build_summary, normalize_predictions, normalize_response
from .sentiment_client import SentimentClient

__all__ = [
    "SentimentClient",
    "SentimentVerdict",
    "build_summary",
    "normalize_predictions",
    "normalize_response",
]
