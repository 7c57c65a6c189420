# src/ratewatch/adapters/__init__.py
"""
Adapters Layer - External Interfaces

This package contains all adapters for external systems:
- Providers (rate APIs)
- Persistence (SQL storage)
- Cache (response caching)
"""

__all__ = []
