"""Shared helpers: logging, configuration and the error hierarchy."""
