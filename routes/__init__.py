"""
API route modules.

Each module defines routes for one domain area.
"""

from routes.dekoji import router as dekoji_router

__all__ = [
    "dekoji_router",
]
