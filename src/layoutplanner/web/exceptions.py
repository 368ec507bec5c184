"""Error handlers for the REST API.

All errors share the body ``{"error", "error_type", "details"}``.
"""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from layoutplanner.application.config import ConfigError
from layoutplanner.infrastructure.export_client import (
    DocumentServiceError,
    SheetLimitError,
)


def error_response(
    status_code: int, message: str, error_type: str, details: Any = None
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": message, "error_type": error_type, "details": details},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Map planner exceptions to JSON error responses.

    SheetLimitError subclasses DocumentServiceError; handler lookup follows
    the exception MRO, so the sheet limit keeps its own 400 response.
    """

    @app.exception_handler(ConfigError)
    async def config_error_handler(request: Request, exc: ConfigError) -> JSONResponse:
        return error_response(422, exc.message, exc.error_type, exc.details or None)

    @app.exception_handler(SheetLimitError)
    async def sheet_limit_handler(request: Request, exc: SheetLimitError) -> JSONResponse:
        return error_response(
            400,
            exc.message,
            "sheet_limit",
            {"sheet_count": exc.sheet_count, "max_sheets": exc.max_sheets},
        )

    @app.exception_handler(DocumentServiceError)
    async def document_service_handler(
        request: Request, exc: DocumentServiceError
    ) -> JSONResponse:
        details = None if exc.status_code is None else {"status_code": exc.status_code}
        return error_response(502, exc.message, "document_service", details)
