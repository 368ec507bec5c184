"""API routers for the REST API."""

from layoutplanner.web.routers.formats import router as formats_router
from layoutplanner.web.routers.plan import router as plan_router

__all__ = [
    "formats_router",
    "plan_router",
]
