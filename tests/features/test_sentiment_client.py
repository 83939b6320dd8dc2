import httpx
import pytest
from unittest.mock import MagicMock, patch

from tickerlens.features.market_sentiment.sentiment_client import DEFAULT_FAILURE, SentimentClient
from tickerlens.utils.config_loader import SentimentConfig
from tickerlens.utils.errors import NETWORK_MESSAGE, TIMEOUT_MESSAGE, SentimentServiceError
from tests.mocks.market_data_mocks import get_json_response
from tests.mocks.news_mocks import get_async_client, get_post_session, prediction_payload

BASE_URL = "http://sentiment.test"
CLIENT_PATH = "tickerlens.features.market_sentiment.sentiment_client.httpx.AsyncClient"


def status_error_response(status_code, body):
    request = httpx.Request("POST", f"{BASE_URL}/api/analyze")
    response = httpx.Response(status_code, json=body, request=request)
    mock_response = MagicMock()
    mock_response.raise_for_status.side_effect = httpx.HTTPStatusError(
        message=f"{status_code} error", request=request, response=response
    )
    return mock_response


@pytest.mark.asyncio
async def test_analyze_posts_text_and_normalizes():
    session = get_post_session(get_json_response(prediction_payload()))
    async_client = get_async_client(session)

    with patch(CLIENT_PATH, async_client):
        verdict = await SentimentClient(base_url=BASE_URL + "/").analyze("  Apple beats earnings ", timeout=15.0)

    assert verdict.sentiment == "positive"
    async_client.assert_called_once_with(timeout=15.0)
    session.post.assert_awaited_once_with(
        f"{BASE_URL}/api/analyze",
        json={"text": "Apple beats earnings"},
        headers={"Content-Type": "application/json"},
    )


@pytest.mark.asyncio
async def test_default_timeout_is_analyzer_timeout():
    session = get_post_session(get_json_response(prediction_payload()))
    async_client = get_async_client(session)

    with patch(CLIENT_PATH, async_client):
        await SentimentClient(base_url=BASE_URL, config=SentimentConfig(analyzer_timeout=30.0)).analyze("text")

    async_client.assert_called_once_with(timeout=30.0)


@pytest.mark.asyncio
@pytest.mark.parametrize("text", ["", "   "])
async def test_blank_text_is_rejected_without_request(text):
    async_client = get_async_client(get_post_session())

    with patch(CLIENT_PATH, async_client):
        with pytest.raises(SentimentServiceError, match="Please enter some text to analyze"):
            await SentimentClient(base_url=BASE_URL).analyze(text)

    async_client.assert_not_called()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error, message",
    [
        (httpx.ReadTimeout("timed out"), TIMEOUT_MESSAGE),
        (httpx.ConnectError("connection refused"), NETWORK_MESSAGE),
    ],
)
async def test_transport_failures_map_to_messages(error, message):
    with patch(CLIENT_PATH, get_async_client(get_post_session(error=error))):
        with pytest.raises(SentimentServiceError) as exc_info:
            await SentimentClient(base_url=BASE_URL).analyze("text")

    assert str(exc_info.value) == message


@pytest.mark.asyncio
async def test_http_error_body_message_is_surfaced():
    session = get_post_session(status_error_response(503, {"error": "Model is loading"}))

    with patch(CLIENT_PATH, get_async_client(session)):
        with pytest.raises(SentimentServiceError, match="Model is loading"):
            await SentimentClient(base_url=BASE_URL).analyze("text")


@pytest.mark.asyncio
async def test_http_error_without_body_uses_failure_message():
    session = get_post_session(status_error_response(500, {}))

    with patch(CLIENT_PATH, get_async_client(session)):
        with pytest.raises(SentimentServiceError) as exc_info:
            await SentimentClient(base_url=BASE_URL).analyze("text", failure_message="Custom failure")

    assert str(exc_info.value) == "Custom failure"


@pytest.mark.asyncio
async def test_invalid_json_uses_default_failure():
    response = get_json_response(None)
    response.json.side_effect = ValueError("Expecting value")

    with patch(CLIENT_PATH, get_async_client(get_post_session(response))):
        with pytest.raises(SentimentServiceError) as exc_info:
            await SentimentClient(base_url=BASE_URL).analyze("text")

    assert str(exc_info.value) == DEFAULT_FAILURE


@pytest.mark.asyncio
async def test_service_error_field_is_raised():
    session = get_post_session(get_json_response({"error": "Text too long"}))

    with patch(CLIENT_PATH, get_async_client(session)):
        with pytest.raises(SentimentServiceError, match="Text too long"):
            await SentimentClient(base_url=BASE_URL).analyze("text")


@pytest.mark.asyncio
async def test_non_list_predictions_are_a_service_error():
    session = get_post_session(get_json_response({"predictions": {"label": "positive", "score": 0.9}}))

    with patch(CLIENT_PATH, get_async_client(session)):
        with pytest.raises(SentimentServiceError, match="Malformed predictions"):
            await SentimentClient(base_url=BASE_URL).analyze("text")


def test_base_url_from_environment(monkeypatch):
    monkeypatch.setenv("SENTIMENT_API_URL", "http://from-env:5000/")
    assert SentimentClient().base_url == "http://from-env:5000"
