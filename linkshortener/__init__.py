"""Batch URL shortening with expiring links and click analytics."""

__version__ = '1.0.0'
