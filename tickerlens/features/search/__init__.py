"""Ticker autocomplete: live symbol search, static fallback and the search box protocol."""

from .candidates import FALLBACK_SYMBOLS, SuggestionCandidate, fallback_suggestions, format_company_name
from .debounce import Debouncer
from .search_box import SearchBoxController
from .search_engine import TickerSearchEngine

__all__ = [
    "FALLBACK_SYMBOLS",
    "Debouncer",
    "SearchBoxController",
    "SuggestionCandidate",
    "TickerSearchEngine",
    "fallback_suggestions",
    "format_company_name",
]
