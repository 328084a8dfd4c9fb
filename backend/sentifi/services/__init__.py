# backend/sentifi/services/__init__.py
"""
Service modules: feed fetching, sentiment classification, ingestion and analytics
"""

from . import analytics
from . import classifier
from . import feeds
from . import ingestion

__all__ = [
    "analytics",
    "classifier",
    "feeds",
    "ingestion",
]
