"""
Central CLI entrypoint for TickerLens.

Usage:
    python main.py <command> [--config CONFIG_PATH]

Supported commands:
    dashboard       Launch the Streamlit dashboard
    serve           Start the news proxy API server
    search          Print ticker suggestions for a query
    analyze         Fetch, aggregate and print every panel for a ticker

Examples:
    python main.py dashboard --port 8501
    python main.py serve --host 0.0.0.0 --port 8000
    python main.py search apple
    python main.py analyze AAPL --config configs/dashboard_config.yaml
"""

import argparse
import asyncio
import os
import subprocess
import sys
from typing import Optional

from tickerlens.api.main import start_api
from tickerlens.dashboard.ticker_dashboard import SENTIMENT, TickerDashboard
from tickerlens.features.metrics.aggregator import series_to_frame
from tickerlens.features.search.search_engine import TickerSearchEngine
from tickerlens.utils.config_loader import DashboardConfig, load_typed_config
from tickerlens.utils.logger import get_logger

logger = get_logger(__name__)

DASHBOARD_APP = os.path.join(os.path.dirname(os.path.abspath(__file__)), "tickerlens", "dashboard", "app.py")


def validate_config_path(config_path: str) -> None:
    """
    Validates whether the given config path exists and is a file.

    Args:
        config_path (str): Path to the config file.

    Raises:
        FileNotFoundError: If the config file does not exist.
    """
    if not os.path.isfile(config_path):
        logger.error(f"Config file not found: {config_path}")
        raise FileNotFoundError(f"Config file not found: {config_path}")


def load_cli_config(config_path: Optional[str]) -> DashboardConfig:
    if config_path is None:
        return load_typed_config()
    validate_config_path(config_path)
    return load_typed_config(config_path)


def get_run_logger(config: DashboardConfig):
    return get_logger("tickerlens.cli", level=config.logging.level, log_file=config.logging.file)


async def run_search(query: str, config: DashboardConfig) -> int:
    engine = TickerSearchEngine(config=config.search)
    results = await engine.search(query)
    get_run_logger(config).info(f"Search '{query}' returned {len(results)} suggestions")
    if not results:
        print(f"No suggestions for '{query}'")
        return 1
    for candidate in results:
        print(f"{candidate.symbol:<8} {candidate.display_name:<40} {candidate.match_score:.4f}")
    return 0


async def run_analyze(ticker: str, config: DashboardConfig) -> int:
    dashboard = TickerDashboard(config=config, error_log_dir=config.logging.error_log_dir)
    states = await dashboard.analyze(ticker)

    sentiment = states.pop(SENTIMENT)
    print(f"== {dashboard.ticker} sentiment")
    if sentiment.is_success:
        verdict = sentiment.data
        print(f"{verdict.sentiment} (confidence {verdict.confidence * 100:.1f}%)")
        print(verdict.summary)
    else:
        print(f"error: {sentiment.error}")

    failures = 0 if sentiment.is_success else 1
    for name, state in states.items():
        print(f"\n== {dashboard.ticker} {name.replace('_', ' ')}")
        if state.is_success:
            print(series_to_frame(state.data).to_string(index=False))
            if state.summary is not None:
                print(state.summary)
        else:
            failures += 1
            print(f"error: {state.error}")
    get_run_logger(config).info(f"Analysis of {dashboard.ticker}: {failures} of {len(states) + 1} panels failed")
    return 1 if failures else 0


def main():
    """
    Parse CLI arguments and dispatch commands.
    """
    parser = argparse.ArgumentParser(description="TickerLens CLI")
    parser.add_argument("--config", "-c", default=None, help="Path to dashboard config YAML")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # --- Dashboard ---
    dashboard_parser = subparsers.add_parser("dashboard", help="Launch the Streamlit dashboard")
    dashboard_parser.add_argument("--port", type=int, default=8501, help="Port for Streamlit")

    # --- Serve ---
    serve_parser = subparsers.add_parser("serve", help="Start the news proxy API server")
    serve_parser.add_argument("--host", default="0.0.0.0", help="Host to bind the server")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port for the API")
    serve_parser.add_argument("--reload", action="store_true", help="Reload on code changes")

    # --- Search ---
    search_parser = subparsers.add_parser("search", help="Print ticker suggestions")
    search_parser.add_argument("query", help="Partial symbol or company name")

    # --- Analyze ---
    analyze_parser = subparsers.add_parser("analyze", help="Analyze a ticker")
    analyze_parser.add_argument("ticker", help="Ticker symbol, e.g. AAPL")

    args = parser.parse_args()

    try:
        if args.command == "serve":
            logger.info(f"Launching API server on {args.host}:{args.port}")
            start_api(host=args.host, port=args.port, reload=args.reload)
            return 0

        if args.command == "dashboard":
            command = [sys.executable, "-m", "streamlit", "run", DASHBOARD_APP, "--server.port", str(args.port)]
            env = dict(os.environ)
            if args.config:
                validate_config_path(args.config)
                env["TICKERLENS_CONFIG"] = os.path.abspath(args.config)
            logger.info(f"Launching dashboard: {' '.join(command)}")
            return subprocess.call(command, env=env)

        config = load_cli_config(args.config)
        if args.command == "search":
            return asyncio.run(run_search(args.query, config))
        if args.command == "analyze":
            return asyncio.run(run_analyze(args.ticker, config))

    except FileNotFoundError as e:
        logger.error(str(e))
        return 2
    except ValueError as e:
        logger.error(f"Invalid input: {e}")
        return 2
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130

    return 0


if __name__ == "__main__":
    sys.exit(main())
