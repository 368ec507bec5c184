"""FastAPI application factory."""

import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from layoutplanner import __version__
from layoutplanner.web.exceptions import register_exception_handlers
from layoutplanner.web.routers import formats_router, plan_router

# Comma separated browser origins allowed to call the API; "*" when unset
CORS_ENV_VAR = "LAYOUTPLANNER_CORS_ORIGINS"


def _cors_origins() -> list[str]:
    raw = os.environ.get(CORS_ENV_VAR, "*")
    return [origin.strip() for origin in raw.split(",") if origin.strip()] or ["*"]


def create_app() -> FastAPI:
    """Build the planner API with its routers and error handlers."""
    app = FastAPI(
        title="Layout Planner API",
        description="Packs design canvases onto printable sheets and prepares export payloads",
        version=__version__,
    )

    # The sheet editor calls the API from the browser
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins(),
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition"],
    )

    register_exception_handlers(app)

    for router in (formats_router, plan_router):
        app.include_router(router, prefix="/api/v1")

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy"}

    return app


# Application instance for ASGI servers (uvicorn)
app = create_app()
