"""Penny Trends - trending penny stock tracker for finance subreddits."""

__version__ = "0.1.0"
