#tickerlens/features/market_sentiment/normalizer.py
"""
Sentiment Response Normalizer

Maps the label/score list returned by the prediction service into a fixed
three-class distribution and a single verdict.

Label mapping is a case-insensitive substring test, checked in the order
positive, negative, neutral ("LABEL_0 positive", "POS", "Neutral" all map).
Labels matching no family are dropped. When several labels map to the same
slot the later one overwrites the earlier (last write wins). Items that are
not label/score mappings, or whose score is not a number, are skipped.

The verdict is positive if its slot holds the maximum, else negative if its
slot holds the maximum, else neutral. Confidence is the raw maximum score;
the three slots are not re-normalized.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from tickerlens.utils.errors import SentimentServiceError
from tickerlens.utils.logger import get_logger

logger = get_logger("sentiment_normalizer")

POSITIVE = "positive"
NEUTRAL = "neutral"
NEGATIVE = "negative"

# Slot -> substrings, in matching order.
LABEL_PATTERNS = (
    (POSITIVE, ("positive", "pos")),
    (NEGATIVE, ("negative", "neg")),
    (NEUTRAL, ("neutral", "neu")),
)

NO_PREDICTIONS_MESSAGE = "No predictions received from API"
MALFORMED_PREDICTIONS_MESSAGE = "Malformed predictions received from API"


@dataclass
class SentimentVerdict:
    sentiment: str
    confidence: float
    probabilities: Dict[str, float]
    text: str = ""
    model: Optional[str] = None
    source: Optional[str] = None
    note: Optional[str] = None
    summary: str = ""
    news_articles: List[Dict[str, Any]] = field(default_factory=list)
    news_text: Optional[str] = None


def match_slot(label: str) -> Optional[str]:
    """Slot a raw label maps to, or None if it matches no sentiment family."""
    lowered = str(label).lower()
    for slot, needles in LABEL_PATTERNS:
        if any(needle in lowered for needle in needles):
            return slot
    return None


def choose_sentiment(probabilities: Mapping[str, float]) -> str:
    max_prob = max(probabilities[POSITIVE], probabilities[NEUTRAL], probabilities[NEGATIVE])
    if probabilities[POSITIVE] == max_prob:
        return POSITIVE
    if probabilities[NEGATIVE] == max_prob:
        return NEGATIVE
    return NEUTRAL


def normalize_predictions(predictions: Sequence[Mapping[str, Any]]) -> SentimentVerdict:
    """
    Collapse an arbitrary prediction list into a three-class verdict.

    Args:
        predictions: Items with "label" and "score".

    Returns:
        SentimentVerdict: Chosen class, its raw score and all three slots.
    """
    probabilities = {POSITIVE: 0.0, NEUTRAL: 0.0, NEGATIVE: 0.0}

    for pred in predictions:
        if not isinstance(pred, Mapping):
            logger.warning(f"Skipping malformed prediction: {pred!r}")
            continue
        slot = match_slot(pred.get("label", ""))
        if slot is None:
            continue
        try:
            probabilities[slot] = float(pred.get("score", 0.0))
        except (TypeError, ValueError):
            logger.warning(f"Skipping prediction with invalid score: {pred!r}")

    sentiment = choose_sentiment(probabilities)
    return SentimentVerdict(
        sentiment=sentiment,
        confidence=probabilities[sentiment],
        probabilities=probabilities,
    )


def normalize_response(payload: Mapping[str, Any]) -> SentimentVerdict:
    """
    Validate a prediction-service response and normalize it.

    Raises:
        SentimentServiceError: If the response carries an error, or its predictions
            field is missing or not a list.
    """
    if not isinstance(payload, Mapping):
        raise SentimentServiceError(NO_PREDICTIONS_MESSAGE)
    if payload.get("error"):
        raise SentimentServiceError(str(payload["error"]))
    predictions = payload.get("predictions")
    if predictions is None:
        raise SentimentServiceError(NO_PREDICTIONS_MESSAGE)
    if not isinstance(predictions, (list, tuple)):
        raise SentimentServiceError(MALFORMED_PREDICTIONS_MESSAGE)

    verdict = normalize_predictions(predictions)
    verdict.text = payload.get("text", "")
    verdict.model = payload.get("model")
    verdict.source = payload.get("source")
    verdict.note = payload.get("note")
    logger.info(
        f"Normalized sentiment: {verdict.sentiment} "
        f"(confidence={verdict.confidence:.3f}, probabilities={verdict.probabilities})"
    )
    return verdict


def build_summary(ticker: str, sentiment: str) -> str:
    """Narrative shown under the verdict on the ticker dashboard."""
    ticker = ticker.upper()
    if sentiment == POSITIVE:
        return (
            f"Recent news analysis for {ticker} indicates positive market sentiment. "
            "The model detected optimistic language in financial reports and news coverage, "
            "suggesting favorable investor outlook, potential growth opportunities, or positive "
            "market reception. This analysis is based on actual news content from reliable "
            "financial sources."
        )
    if sentiment == NEGATIVE:
        return (
            f"Recent news analysis for {ticker} shows negative market sentiment. "
            "The model identified concerning language in financial reports and news coverage "
            "that might indicate investor concerns, market uncertainties, or potential challenges. "
            "This suggests caution may be warranted based on current news sentiment."
        )
    return (
        f"Recent news analysis for {ticker} reveals neutral market sentiment. "
        "The model found balanced language in financial reports and news coverage without "
        "strong directional bias, suggesting mixed investor opinions or a period of "
        "consolidation based on current news coverage."
    )
