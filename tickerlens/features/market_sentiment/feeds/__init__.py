"""Upstream news feeds used by the news proxy."""
