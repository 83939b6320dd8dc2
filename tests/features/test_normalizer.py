import pytest

from tickerlens.features.market_sentiment.normalizer import (
    NEGATIVE,
    NEUTRAL,
    POSITIVE,
    build_summary,
    match_slot,
    normalize_predictions,
    normalize_response,
)
from tickerlens.utils.errors import SentimentServiceError
from tests.mocks.news_mocks import prediction_payload


@pytest.mark.parametrize(
    "label, slot",
    [
        ("positive", POSITIVE),
        ("LABEL_0 Positive", POSITIVE),
        ("POS", POSITIVE),
        ("negative", NEGATIVE),
        ("neg", NEGATIVE),
        ("Neutral", NEUTRAL),
        ("NEU", NEUTRAL),
        ("LABEL_3", None),
        ("", None),
    ],
)
def test_match_slot(label, slot):
    assert match_slot(label) == slot


def test_standard_three_class_response():
    verdict = normalize_response(prediction_payload())

    assert verdict.sentiment == POSITIVE
    assert verdict.confidence == pytest.approx(0.7)
    assert verdict.probabilities == {POSITIVE: 0.7, NEUTRAL: 0.1, NEGATIVE: 0.2}
    assert verdict.model == "finbert"
    assert verdict.text == "Apple beats earnings"


def test_confidence_is_not_renormalized():
    verdict = normalize_predictions(
        [{"label": "negative", "score": 0.4}, {"label": "neutral", "score": 0.1}]
    )
    assert verdict.sentiment == NEGATIVE
    assert verdict.confidence == pytest.approx(0.4)
    assert verdict.probabilities[POSITIVE] == 0.0


@pytest.mark.parametrize(
    "scores, expected",
    [
        ({"positive": 0.4, "negative": 0.4, "neutral": 0.2}, POSITIVE),
        ({"positive": 0.2, "negative": 0.4, "neutral": 0.4}, NEGATIVE),
        ({"positive": 0.1, "negative": 0.1, "neutral": 0.8}, NEUTRAL),
        ({"positive": 0.3, "negative": 0.3, "neutral": 0.3}, POSITIVE),
    ],
)
def test_ties_prefer_positive_then_negative(scores, expected):
    predictions = [{"label": label, "score": score} for label, score in scores.items()]
    assert normalize_predictions(predictions).sentiment == expected


def test_duplicate_labels_last_write_wins():
    verdict = normalize_predictions(
        [
            {"label": "positive", "score": 0.9},
            {"label": "neutral", "score": 0.3},
            {"label": "POS", "score": 0.1},
        ]
    )
    assert verdict.probabilities[POSITIVE] == pytest.approx(0.1)
    assert verdict.sentiment == NEUTRAL


def test_unknown_labels_are_dropped():
    verdict = normalize_predictions(
        [{"label": "LABEL_9", "score": 0.99}, {"label": "negative", "score": 0.6}]
    )
    assert verdict.sentiment == NEGATIVE
    assert sum(verdict.probabilities.values()) == pytest.approx(0.6)


def test_empty_predictions_are_allowed():
    verdict = normalize_response(prediction_payload(predictions=[]))
    assert verdict.probabilities == {POSITIVE: 0.0, NEUTRAL: 0.0, NEGATIVE: 0.0}
    assert verdict.sentiment == POSITIVE
    assert verdict.confidence == 0.0


def test_missing_predictions_raises():
    payload = prediction_payload()
    del payload["predictions"]
    with pytest.raises(SentimentServiceError, match="No predictions received from API"):
        normalize_response(payload)


def test_error_field_raises_with_service_message():
    with pytest.raises(SentimentServiceError, match="Model not loaded"):
        normalize_response(prediction_payload(error="Model not loaded"))


def test_non_mapping_payload_raises():
    with pytest.raises(SentimentServiceError):
        normalize_response(["positive"])


@pytest.mark.parametrize("predictions", [
    {"label": "positive", "score": 0.9},
    "positive",
    0.9,
])
def test_non_list_predictions_raise(predictions):
    with pytest.raises(SentimentServiceError, match="Malformed predictions"):
        normalize_response(prediction_payload(predictions=predictions))


# === Test Case: Malformed prediction items ===
# Description : Non-mapping items and unusable scores are skipped instead of failing the verdict
# Component   : normalize_predictions
# Category    : Edge cases
def test_malformed_items_are_skipped():
    verdict = normalize_response(prediction_payload(predictions=[
        "positive",
        None,
        {"label": "positive", "score": None},
        {"label": "neutral", "score": "high"},
        {"label": "negative", "score": "0.4"},
    ]))
    assert verdict.probabilities == {POSITIVE: 0.0, NEUTRAL: 0.0, NEGATIVE: 0.4}
    assert verdict.sentiment == NEGATIVE
    assert verdict.confidence == pytest.approx(0.4)


def test_optional_fields_are_carried():
    verdict = normalize_response(prediction_payload(source="huggingface", note="cold start"))
    assert verdict.source == "huggingface"
    assert verdict.note == "cold start"


@pytest.mark.parametrize(
    "sentiment, phrase",
    [
        (POSITIVE, "indicates positive market sentiment"),
        (NEGATIVE, "shows negative market sentiment"),
        (NEUTRAL, "reveals neutral market sentiment"),
    ],
)
def test_build_summary(sentiment, phrase):
    summary = build_summary("aapl", sentiment)
    assert summary.startswith("Recent news analysis for AAPL")
    assert phrase in summary
