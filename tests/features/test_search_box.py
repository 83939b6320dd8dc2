import asyncio

import pytest
from unittest.mock import AsyncMock, MagicMock

from tickerlens.features.search.candidates import SuggestionCandidate
from tickerlens.features.search.search_box import SearchBoxController
from tickerlens.utils.config_loader import SearchConfig

TESLA = SuggestionCandidate(symbol="TSLA", name="Tesla Inc")
TESLA_ETF = SuggestionCandidate(symbol="TSLL", name="Direxion Daily TSLA Bull 2X Shares")

FAST = SearchConfig(debounce_ms=20, settle_ms=10)


def make_controller(config=None, results=None):
    engine = MagicMock()
    engine.search = AsyncMock(return_value=[TESLA, TESLA_ETF] if results is None else results)
    on_search = MagicMock()
    on_selected = MagicMock()
    controller = SearchBoxController(engine, on_search, on_ticker_selected=on_selected, config=config)
    return controller, engine, on_search, on_selected


async def type_text(controller, text, gap=0.0):
    for i in range(1, len(text) + 1):
        controller.on_input_change(text[:i])
        if gap:
            await asyncio.sleep(gap)


# === Test Case: Debounced typing ===
# Description : Four keystrokes 100ms apart produce exactly one query, 500ms after the last one.
# Component   : SearchBoxController
# Category    : Unit / Timing
@pytest.mark.asyncio
async def test_typing_issues_one_query_after_quiet_period():
    controller, engine, on_search, _ = make_controller()

    for text in ("T", "TS", "TSL", "TSLA"):
        controller.on_input_change(text)
        await asyncio.sleep(0.1)

    engine.search.assert_not_called()
    await asyncio.sleep(0.5)
    await controller.drain()

    engine.search.assert_awaited_once_with("TSLA")
    assert [c.symbol for c in controller.suggestions] == ["TSLA", "TSLL"]
    assert controller.show_suggestions is True
    on_search.assert_not_called()


@pytest.mark.asyncio
async def test_input_is_upper_cased_and_short_input_clears_list():
    controller, engine, _, _ = make_controller(config=FAST)

    await type_text(controller, "tsla")
    await asyncio.sleep(0.05)
    await controller.drain()
    assert controller.value == "TSLA"
    engine.search.assert_awaited_once_with("TSLA")

    controller.on_input_change("ts")
    assert controller.suggestions == []
    assert controller.show_suggestions is False
    assert controller.query_pending is False


@pytest.mark.asyncio
async def test_whitespace_only_input_does_not_query():
    controller, engine, _, _ = make_controller(config=FAST)

    controller.on_input_change("   ")
    await asyncio.sleep(0.05)

    engine.search.assert_not_called()


@pytest.mark.asyncio
async def test_trailing_space_does_not_reach_typing_threshold():
    controller, engine, _, _ = make_controller(config=FAST)

    controller.on_input_change("ts ")
    await asyncio.sleep(0.05)
    await controller.drain()

    assert controller.value == "TS "
    engine.search.assert_not_called()
    assert controller.show_suggestions is False


def make_slow_controller(delay=0.1):
    controller, engine, on_search, on_selected = make_controller(config=FAST)

    async def slow_search(query):
        await asyncio.sleep(delay)
        return [TESLA, TESLA_ETF]

    engine.search = AsyncMock(side_effect=slow_search)
    return controller, engine, on_search, on_selected


# === Test Case: Stale query after selection ===
# Description : A suggestion query still in flight when the user selects must not reopen the list.
# Component   : SearchBoxController
# Category    : Unit / Ordering
@pytest.mark.asyncio
async def test_in_flight_query_does_not_reopen_list_after_select():
    controller, engine, on_search, _ = make_slow_controller()

    controller.on_input_change("TSL")
    await asyncio.sleep(0.04)
    assert controller.is_searching is True

    controller.select(TESLA)
    await asyncio.sleep(0.15)
    await controller.drain()

    engine.search.assert_awaited_once_with("TSL")
    assert controller.value == "TSLA"
    assert controller.suggestions == []
    assert controller.show_suggestions is False
    on_search.assert_called_once_with("TSLA")


@pytest.mark.asyncio
async def test_in_flight_query_is_dropped_when_input_shrinks():
    controller, engine, _, _ = make_slow_controller()

    controller.on_input_change("TSL")
    await asyncio.sleep(0.04)
    controller.on_input_change("TS")
    await asyncio.sleep(0.15)
    await controller.drain()

    engine.search.assert_awaited_once_with("TSL")
    assert controller.suggestions == []
    assert controller.show_suggestions is False


@pytest.mark.asyncio
async def test_only_latest_query_fills_the_list():
    controller, engine, _, _ = make_controller(config=FAST)
    delays = {"TSL": 0.1, "TSLA": 0.01}

    async def search(query):
        await asyncio.sleep(delays[query])
        return [TESLA_ETF] if query == "TSL" else [TESLA]

    engine.search = AsyncMock(side_effect=search)

    controller.on_input_change("TSL")
    await asyncio.sleep(0.04)
    controller.on_input_change("TSLA")
    await asyncio.sleep(0.2)
    await controller.drain()

    assert engine.search.await_count == 2
    assert [c.symbol for c in controller.suggestions] == ["TSLA"]
    assert controller.show_suggestions is True


@pytest.mark.asyncio
async def test_empty_results_keep_list_closed():
    controller, _, _, _ = make_controller(config=FAST, results=[])

    await type_text(controller, "ZZZZ")
    await asyncio.sleep(0.05)
    await controller.drain()

    assert controller.show_suggestions is False


# === Test Case: Suggestion selection ===
# Description : Selecting closes the list at once and commits after the settle delay.
# Component   : SearchBoxController
# Category    : Unit / Timing
@pytest.mark.asyncio
async def test_select_commits_after_settle_delay():
    controller, _, on_search, on_selected = make_controller()

    controller.select(TESLA)

    assert controller.value == "TSLA"
    assert controller.show_suggestions is False
    on_selected.assert_called_once_with("TSLA")
    on_search.assert_not_called()

    await asyncio.sleep(0.15)
    on_search.assert_called_once_with("TSLA")


@pytest.mark.asyncio
async def test_select_cancels_pending_query():
    controller, engine, _, _ = make_controller(config=FAST)

    await type_text(controller, "TSL")
    assert controller.query_pending
    controller.select(TESLA)
    await asyncio.sleep(0.05)
    await controller.drain()

    engine.search.assert_not_called()


@pytest.mark.asyncio
async def test_enter_with_open_list_selects_first_suggestion():
    controller, _, on_search, on_selected = make_controller(config=FAST)

    await type_text(controller, "TSL")
    await asyncio.sleep(0.05)
    await controller.drain()
    assert controller.show_suggestions

    controller.on_enter()
    assert controller.value == "TSLA"
    on_selected.assert_called_once_with("TSLA")

    await asyncio.sleep(0.05)
    on_search.assert_called_once_with("TSLA")


@pytest.mark.asyncio
async def test_enter_without_list_commits_raw_input_immediately():
    controller, engine, on_search, _ = make_controller()

    await type_text(controller, "ibm")
    controller.on_enter()

    on_search.assert_called_once_with("IBM")
    assert controller.query_pending is False
    await asyncio.sleep(0.6)
    engine.search.assert_not_called()


@pytest.mark.asyncio
async def test_async_search_callback_is_scheduled():
    engine = MagicMock()
    engine.search = AsyncMock(return_value=[])
    on_search = AsyncMock()
    controller = SearchBoxController(engine, on_search, config=FAST)

    controller.select(TESLA)
    await asyncio.sleep(0.05)
    await controller.drain()

    on_search.assert_awaited_once_with("TSLA")


# === Test Case: Dismissal ===
# Description : Escape and outside clicks close the list without touching the typed value.
# Component   : SearchBoxController
# Category    : Unit
@pytest.mark.asyncio
async def test_outside_click_and_escape_keep_value():
    controller, _, on_search, _ = make_controller(config=FAST)

    await type_text(controller, "TSL")
    await asyncio.sleep(0.05)
    await controller.drain()

    controller.on_outside_click()
    assert controller.show_suggestions is False
    assert controller.value == "TSL"

    controller.on_focus()
    assert controller.show_suggestions is True

    controller.on_escape()
    assert controller.show_suggestions is False
    assert controller.value == "TSL"
    on_search.assert_not_called()


@pytest.mark.asyncio
async def test_focus_without_suggestions_keeps_list_closed():
    controller, _, _, _ = make_controller(config=FAST)
    controller.on_focus()
    assert controller.show_suggestions is False
