"""TickerLens: market data, sentiment and chart specs for a stock ticker dashboard."""

__version__ = "0.1.0"
