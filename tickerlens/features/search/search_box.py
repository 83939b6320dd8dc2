# tickerlens/features/search/search_box.py

from typing import Any, Callable, List, Optional

from tickerlens.features.search.candidates import SuggestionCandidate
from tickerlens.features.search.debounce import Debouncer, invoke
from tickerlens.features.search.search_engine import TickerSearchEngine
from tickerlens.utils.config_loader import SearchConfig
from tickerlens.utils.logger import get_logger

logger = get_logger("search_box")


class SearchBoxController:
    """
    Event-level state of the ticker search box.

    Typing only ever produces suggestions; analysis starts when the user
    commits, either by selecting a suggestion or by pressing Enter.

    Attributes:
        value (str): Current (upper-cased) input text.
        suggestions (List[SuggestionCandidate]): Latest suggestion list.
        show_suggestions (bool): Whether the suggestion list is open.
        is_searching (bool): A live query is in flight.
    """

    def __init__(
        self,
        engine: TickerSearchEngine,
        on_search: Callable[[str], Any],
        on_ticker_selected: Optional[Callable[[str], Any]] = None,
        config: Optional[SearchConfig] = None,
    ):
        self.engine = engine
        self.on_search = on_search
        self.on_ticker_selected = on_ticker_selected
        self.config = config or SearchConfig()

        self.value: str = ""
        self.suggestions: List[SuggestionCandidate] = []
        self.show_suggestions: bool = False
        self.is_searching: bool = False
        self._generation = 0

        self._query_debouncer = Debouncer(self.config.debounce_ms / 1000, self._run_query)
        self._settle_timer = Debouncer(self.config.settle_ms / 1000, self._commit)

    # -------------------------------
    # Typing
    # -------------------------------
    def on_input_change(self, text: str) -> None:
        self.value = text.upper()
        self._invalidate_queries()

        query = self.value.strip()
        if len(query) >= self.config.min_typing_length:
            self._query_debouncer(query)
        else:
            self._clear_suggestions()

    async def _run_query(self, query: str) -> None:
        generation = self._generation
        self.is_searching = True
        try:
            results = await self.engine.search(query)
        finally:
            self.is_searching = False
        if generation != self._generation:
            logger.debug(f"Dropped stale suggestions for '{query}'")
            return
        self.suggestions = results
        self.show_suggestions = bool(results)
        logger.info(f"Suggestions for '{query}': {[c.symbol for c in results]}")

    # -------------------------------
    # Committing
    # -------------------------------
    def select(self, candidate: SuggestionCandidate) -> None:
        """Commit a suggestion: close the list, take its symbol, analyze after a short settle delay."""
        self.value = candidate.symbol
        self._clear_suggestions()
        self._invalidate_queries()
        self._notify_selected()
        self._settle_timer()

    def on_enter(self) -> None:
        if self.show_suggestions and self.suggestions:
            self.select(self.suggestions[0])
            return
        self.show_suggestions = False
        self._invalidate_queries()
        self._notify_selected()
        self._commit()

    def _commit(self) -> Optional[Any]:
        logger.info(f"Committed ticker: {self.value}")
        return invoke(self.on_search, self.value)

    def _notify_selected(self) -> None:
        if self.on_ticker_selected is not None:
            invoke(self.on_ticker_selected, self.value)

    # -------------------------------
    # Dismissing
    # -------------------------------
    def on_escape(self) -> None:
        self.show_suggestions = False

    def on_outside_click(self) -> None:
        self.show_suggestions = False

    def on_focus(self) -> None:
        if self.suggestions:
            self.show_suggestions = True

    def _invalidate_queries(self) -> None:
        """Cancel the pending query; results of queries already in flight are discarded."""
        self._query_debouncer.cancel()
        self._generation += 1

    def _clear_suggestions(self) -> None:
        self.suggestions = []
        self.show_suggestions = False

    @property
    def query_pending(self) -> bool:
        return self._query_debouncer.pending

    async def drain(self) -> None:
        """Wait for fired suggestion queries and commits to finish."""
        await self._query_debouncer.drain()
        await self._settle_timer.drain()
