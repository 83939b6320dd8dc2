# tickerlens/features/search/candidates.py

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping

from tickerlens.features.metrics.aggregator import parse_amount

# -------------------------------
# Static fallback table (symbol -> display name)
# -------------------------------
FALLBACK_SYMBOLS: Dict[str, str] = {
    "AAPL": "Apple Inc",
    "MSFT": "Microsoft Corporation",
    "GOOGL": "Alphabet Inc Class A",
    "AMZN": "Amazon.com Inc",
    "TSLA": "Tesla Inc",
    "META": "Meta Platforms Inc",
    "NVDA": "NVIDIA Corporation",
    "NFLX": "Netflix Inc",
    "SPY": "SPDR S&P 500 ETF Trust",
    "QQQ": "Invesco QQQ Trust",
}

EQUITY_TYPE = "Equity"
DOMESTIC_REGION = "United States"
FALLBACK_MATCH_SCORE = 0.8

_COMPANY_SUFFIX = re.compile(r"\s+(Inc\.?|Corp\.?|Corporation|Company|Co\.?|Ltd\.?|LLC|LP)$", re.IGNORECASE)


@dataclass(frozen=True)
class SuggestionCandidate:
    """One autocomplete suggestion, from the live search API or the fallback table."""
    symbol: str
    name: str
    type: str = EQUITY_TYPE
    region: str = DOMESTIC_REGION
    market_open: str = "09:30"
    market_close: str = "16:00"
    timezone: str = "UTC-04"
    currency: str = "USD"
    match_score: float = FALLBACK_MATCH_SCORE

    @classmethod
    def from_provider(cls, match: Mapping[str, Any]) -> "SuggestionCandidate":
        """Build a candidate from an Alpha Vantage SYMBOL_SEARCH "bestMatches" entry."""
        return cls(
            symbol=str(match.get("1. symbol", "")),
            name=str(match.get("2. name", "")),
            type=str(match.get("3. type", "")),
            region=str(match.get("4. region", "")),
            market_open=str(match.get("5. marketOpen", "")),
            market_close=str(match.get("6. marketClose", "")),
            timezone=str(match.get("7. timezone", "")),
            currency=str(match.get("8. currency", "")),
            match_score=parse_amount(match.get("9. matchScore")),
        )

    @property
    def is_domestic_equity(self) -> bool:
        return self.type == EQUITY_TYPE and self.region == DOMESTIC_REGION

    @property
    def display_name(self) -> str:
        return format_company_name(self.name)

    @property
    def label(self) -> str:
        """Single-line text used in suggestion lists."""
        return (
            f"{self.symbol} - {self.display_name} "
            f"({self.type} • {self.currency} • Match: {self.match_score * 100:.0f}%)"
        )


def format_company_name(name: str) -> str:
    """Drop a trailing corporate suffix ("Apple Inc" -> "Apple")."""
    return _COMPANY_SUFFIX.sub("", name).strip()


def rank_live_matches(matches: List[Mapping[str, Any]], limit: int = 8) -> List[SuggestionCandidate]:
    """
    Filter live results to domestic equities and rank them by match score.

    Args:
        matches: Raw "bestMatches" entries.
        limit: Maximum number of suggestions.

    Returns:
        List[SuggestionCandidate]: Highest match score first; ties keep provider order.
    """
    candidates = [SuggestionCandidate.from_provider(m) for m in matches]
    domestic = [c for c in candidates if c.is_domestic_equity]
    domestic.sort(key=lambda c: c.match_score, reverse=True)
    return domestic[:limit]


def fallback_suggestions(query: str, limit: int = 5) -> List[SuggestionCandidate]:
    """
    Case-insensitive substring match of the query against the static table.

    Args:
        query: Partial symbol or company name.
        limit: Maximum number of suggestions.

    Returns:
        List[SuggestionCandidate]: Matches in table order.
    """
    needle = query.strip().lower()
    matches = [
        SuggestionCandidate(symbol=symbol, name=name)
        for symbol, name in FALLBACK_SYMBOLS.items()
        if needle in symbol.lower() or needle in name.lower()
    ]
    return matches[:limit]
