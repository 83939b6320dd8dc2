"""Pydantic models for API request validation and responses."""

from pydantic import BaseModel, Field, field_validator
from typing import Optional, List


ALLOWED_TICKER_CHARS = set("ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789.-_")


def _clean_ticker(v):
    if not v or not isinstance(v, str):
        raise ValueError("Ticker must be a non-empty string")

    v = v.strip().upper()
    if not v:
        raise ValueError("Ticker must be a non-empty string")
    if not all(c in ALLOWED_TICKER_CHARS for c in v):
        raise ValueError(f"Ticker contains invalid characters: {v}")

    return v


class SentimentRequest(BaseModel):
    """Body sent to the sentiment prediction service."""

    text: str = Field(..., min_length=1, description="Free text to classify")

    @field_validator("text")
    @classmethod
    def validate_text(cls, v):
        """Reject whitespace-only text."""
        v = v.strip()
        if not v:
            raise ValueError("Please enter some text to analyze")
        return v


class NewsQuery(BaseModel):
    """Query parameters of the news proxy."""

    symbol: str = Field(
        ...,
        min_length=1,
        max_length=10,
        description="Stock ticker symbol (e.g., AAPL, BRK.B)"
    )
    company_name: Optional[str] = Field(
        default=None,
        description="Company name used as the search phrase instead of the symbol"
    )

    @field_validator("symbol")
    @classmethod
    def validate_symbol(cls, v):
        """Validate ticker format."""
        return _clean_ticker(v)


class NewsSource(BaseModel):
    name: Optional[str] = None


class NewsArticle(BaseModel):
    """One article as returned by NewsAPI (field names kept as published)."""

    title: Optional[str] = None
    description: Optional[str] = None
    publishedAt: Optional[str] = None
    source: Optional[NewsSource] = None
    url: Optional[str] = None


class NewsResponse(BaseModel):
    """Successful news proxy response."""

    success: bool = True
    text: str
    articles: List[NewsArticle] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """Error body used by the news proxy."""

    error: str
