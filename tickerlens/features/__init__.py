"""Feature modules: metrics, ticker search, market sentiment and chart specs."""
