# src/ratewatch/__init__.py
"""
RateWatch - Multi-currency Exchange Rate Tracker

Fetches daily exchange rates from an external provider, stores them
idempotently, and serves latest/historical lookups with inverse-orientation
fallback and short-lived caching.
"""

__version__ = "1.0.0"
