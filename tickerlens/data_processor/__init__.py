"""Market-data provider clients."""
