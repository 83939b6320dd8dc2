#tickerlens/features/market_sentiment/sentiment_client.py
"""
Client for the remote sentiment prediction service.

POST {base_url}/api/analyze with {"text": ...}. The service answers with a
predictions list (label/score pairs) or an "error" field. Requests use a
fixed client-side timeout; any failure is re-raised as a
SentimentServiceError carrying a message fit for the UI.
"""

from typing import Any, Dict, Optional

import httpx

from tickerlens.features.market_sentiment.normalizer import SentimentVerdict, normalize_response
from tickerlens.utils.config_loader import SentimentConfig, get_secret
from tickerlens.utils.errors import SentimentServiceError, describe_http_error
from tickerlens.utils.logger import get_logger

logger = get_logger("sentiment_client")

DEFAULT_FAILURE = "Failed to analyze sentiment. Please try again."


class SentimentClient:
    """Sends text to the prediction service and normalizes the answer."""

    def __init__(self, base_url: Optional[str] = None, config: Optional[SentimentConfig] = None):
        self.config = config or SentimentConfig()
        self.base_url = (
            base_url or get_secret(self.config.base_url_env) or self.config.default_base_url
        ).rstrip("/")

    async def predict(self, text: str, timeout: Optional[float] = None) -> Dict[str, Any]:
        """
        Request raw predictions for a text.

        Args:
            text (str): Text to classify.
            timeout (Optional[float]): Seconds before the call counts as failed.
                Defaults to the free-text analyzer timeout.

        Returns:
            Dict[str, Any]: Decoded service response.
        """
        timeout = timeout if timeout is not None else self.config.analyzer_timeout
        url = f"{self.base_url}/api/analyze"
        logger.info(f"Requesting sentiment from {url} ({len(text)} chars, timeout={timeout}s)")
        async with httpx.AsyncClient(timeout=timeout) as session:
            response = await session.post(
                url,
                json={"text": text.strip()},
                headers={"Content-Type": "application/json"},
            )
            response.raise_for_status()
            return response.json()

    async def analyze(
        self,
        text: str,
        timeout: Optional[float] = None,
        failure_message: str = DEFAULT_FAILURE,
    ) -> SentimentVerdict:
        """
        Classify a text and return the normalized verdict.

        Raises:
            SentimentServiceError: On empty input, timeouts, network errors,
                service errors or a response without predictions.
        """
        if not text or not text.strip():
            raise SentimentServiceError("Please enter some text to analyze")

        try:
            payload = await self.predict(text, timeout=timeout)
        except httpx.HTTPError as e:
            logger.error(f"Sentiment request failed: {e}")
            raise SentimentServiceError(describe_http_error(e, failure_message)) from e
        except ValueError as e:
            logger.error(f"Sentiment service returned invalid JSON: {e}")
            raise SentimentServiceError(failure_message) from e

        return normalize_response(payload)
