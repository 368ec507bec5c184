"""Client for the document rendering service.

The document service turns an export payload (see ``export_payload``) into
a printable document, one page per sheet. This module only transports the
payload; how the service lays out pages is its own concern.

Classes:
    DocumentServiceClient: Async client posting payloads to the service
    DocumentServiceError: Raised when the service cannot produce a document
    SheetLimitError: Raised before sending payloads with too many sheets
"""

from __future__ import annotations

import gzip
import json
import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "http://localhost:4177/api/layout-pdf"
DEFAULT_TIMEOUT = 60.0
DEFAULT_MAX_SHEETS = 10


class DocumentServiceError(Exception):
    """The document service failed to return a document.

    Attributes:
        message: Human-readable description.
        status_code: HTTP status code, if a response was received.
        response_text: Response body text, if any.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_text: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response_text = response_text


class SheetLimitError(DocumentServiceError):
    """The payload has more sheets than one export may contain."""

    def __init__(self, sheet_count: int, max_sheets: int) -> None:
        super().__init__(
            f"Export is limited to {max_sheets} sheets at a time "
            f"(layout has {sheet_count})"
        )
        self.sheet_count = sheet_count
        self.max_sheets = max_sheets


def encode_payload(payload: dict[str, Any], compress: bool = True) -> tuple[bytes, dict[str, str]]:
    """Serialize a payload into a request body and headers.

    The body is gzip-compressed only when compression actually makes it
    smaller.

    Returns:
        Tuple of (body, headers).
    """
    body = json.dumps(payload, ensure_ascii=False).encode("utf-8")
    headers = {"Content-Type": "application/json"}
    if compress:
        compressed = gzip.compress(body)
        if 0 < len(compressed) < len(body):
            headers["Content-Encoding"] = "gzip"
            return compressed, headers
    return body, headers


class DocumentServiceClient:
    """Posts export payloads to the document service.

    Attributes:
        endpoint: Full URL of the service's render endpoint.
        timeout: Request timeout in seconds.
        compress: Whether to gzip request bodies when it saves space.
        max_sheets: Maximum number of sheets accepted per export.

    Example:
        >>> client = DocumentServiceClient()
        >>> document = await client.render_document(payload)
    """

    def __init__(
        self,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout: float = DEFAULT_TIMEOUT,
        compress: bool = True,
        max_sheets: int = DEFAULT_MAX_SHEETS,
    ) -> None:
        self.endpoint = endpoint
        self.timeout = timeout
        self.compress = compress
        self.max_sheets = max_sheets

    def check_sheet_limit(self, payload: dict[str, Any]) -> None:
        """Raise SheetLimitError if the payload exceeds ``max_sheets``."""
        sheet_count = len(payload.get("sheets") or [])
        if sheet_count > self.max_sheets:
            raise SheetLimitError(sheet_count, self.max_sheets)

    async def render_document(self, payload: dict[str, Any]) -> bytes:
        """Send a payload and return the rendered document bytes.

        Args:
            payload: Export payload.

        Returns:
            Raw document content as returned by the service.

        Raises:
            SheetLimitError: If the payload has too many sheets. Raised
                before any request is made.
            DocumentServiceError: On connection failures, timeouts and
                non-2xx responses.
        """
        self.check_sheet_limit(payload)
        body, headers = encode_payload(payload, compress=self.compress)

        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    self.endpoint,
                    content=body,
                    headers=headers,
                    timeout=self.timeout,
                )
        except httpx.TimeoutException as e:
            logger.error(f"Timeout contacting document service at {self.endpoint}")
            raise DocumentServiceError(
                f"Document service timed out after {self.timeout:g}s"
            ) from e
        except httpx.RequestError as e:
            logger.error(f"Could not reach document service at {self.endpoint}: {e}")
            raise DocumentServiceError(f"Could not reach document service: {e}") from e

        if not response.is_success:
            text = response.text
            logger.error(
                f"Document service returned status {response.status_code}: {text[:200]}"
            )
            raise DocumentServiceError(
                text or f"Export server error: {response.status_code}",
                status_code=response.status_code,
                response_text=text,
            )

        logger.info(
            f"Document service returned {len(response.content)} bytes "
            f"for {len(payload.get('sheets') or [])} sheets"
        )
        return response.content


def render_document_sync(
    payload: dict[str, Any],
    client: DocumentServiceClient | None = None,
) -> bytes:
    """Synchronous wrapper around ``DocumentServiceClient.render_document``.

    Convenience function for CLI usage where async is not needed.
    """
    import asyncio

    client = client or DocumentServiceClient()
    return asyncio.run(client.render_document(payload))
