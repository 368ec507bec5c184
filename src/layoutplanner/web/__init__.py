"""FastAPI REST API for layout planning.

Usage:
    uvicorn layoutplanner.web:app --reload
"""

from layoutplanner.web.app import app, create_app

__all__ = ["app", "create_app"]
