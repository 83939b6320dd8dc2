"""Structured error tracking."""
