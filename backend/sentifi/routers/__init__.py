"""
Router modules for API endpoints
"""

from . import articles
from . import health
from . import sentiment

__all__ = [
    "articles",
    "health",
    "sentiment",
]
