"""Tests for the REST API.

Tests cover:
- Health and format listing endpoints
- Planning with request options and configuration
- Payload building
- Document rendering with the document service mocked
- Error responses
"""

from __future__ import annotations

from typing import Any, Callable

import pytest
from fastapi.testclient import TestClient

from layoutplanner.infrastructure.export_client import (
    DocumentServiceClient,
    DocumentServiceError,
)
from layoutplanner.web import create_app
from layoutplanner.web.dependencies import get_base_config

DesignFactory = Callable[..., dict[str, Any]]

SVG = '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 8 8"><rect width="8" height="8" stroke="black"/></svg>'


@pytest.fixture
def client() -> TestClient:
    get_base_config.cache_clear()
    return TestClient(create_app())


@pytest.fixture
def designs(design_factory: DesignFactory) -> list[dict[str, Any]]:
    return [
        design_factory("a", 100, 150, svg=SVG),
        design_factory("b", 150, 100, preview="https://cdn.example/b.png"),
        design_factory("huge", 400, 400),
    ]


class TestMetaEndpoints:
    """Tests for health and formats."""

    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    def test_formats(self, client: TestClient) -> None:
        response = client.get("/api/v1/formats")
        assert response.status_code == 200
        formats = {f["key"]: f for f in response.json()["formats"]}
        assert set(formats) == {"A5", "A4", "A3", "MJ_295x600"}
        assert formats["MJ_295x600"]["label"] == "MJ 295x600"
        assert (formats["A4"]["width"], formats["A4"]["height"]) == (210.0, 297.0)


class TestPlanEndpoint:
    """Tests for POST /api/v1/plan."""

    def test_plan(self, client: TestClient, designs: list[dict[str, Any]]) -> None:
        response = client.post("/api/v1/plan", json={"designs": designs, "spacing_mm": 5})

        assert response.status_code == 200
        data = response.json()
        assert data["format"] == "A4"
        assert data["spacing_mm"] == 5
        assert data["summary"]["sheet_count"] == 1
        assert data["summary"]["placed_copies"] == 2
        placements = data["sheets"][0]["placements"]
        assert [p["id"] for p in placements] == ["a::1", "b::1"]
        assert placements[1]["rotated"] is True
        assert placements[0]["asset_url"] is None
        assert data["leftovers"][0]["id"] == "huge::1"

    def test_include_assets(self, client: TestClient, designs: list[dict[str, Any]]) -> None:
        response = client.post(
            "/api/v1/plan", json={"designs": designs, "include_assets": True}
        )
        placements = response.json()["sheets"][0]["placements"]
        assert placements[0]["asset_kind"] == "svg"
        assert placements[0]["asset_url"].startswith("data:image/svg+xml;charset=utf-8,")
        assert placements[1]["asset_kind"] == "raster"
        assert placements[1]["asset_url"] == "https://cdn.example/b.png"

    def test_request_config_and_overrides(
        self, client: TestClient, designs: list[dict[str, Any]]
    ) -> None:
        response = client.post(
            "/api/v1/plan",
            json={
                "designs": designs,
                "config": {"sheet": {"format": "A3", "spacing_mm": 2}},
                "orientation": "landscape",
            },
        )
        data = response.json()
        assert data["format"] == "A3"
        assert data["orientation"] == "landscape"
        assert (data["sheet_width"], data["sheet_height"]) == (420.0, 297.0)
        assert data["spacing_mm"] == 2

    def test_malformed_designs_skipped(self, client: TestClient) -> None:
        response = client.post(
            "/api/v1/plan", json={"designs": [{"width": "?"}, 7, None]}
        )
        assert response.status_code == 200
        assert response.json()["summary"]["requested_copies"] == 0

    def test_invalid_config(self, client: TestClient) -> None:
        response = client.post(
            "/api/v1/plan",
            json={"designs": [], "config": {"sheet": {"spacing_mm": -1}}},
        )
        assert response.status_code == 422
        body = response.json()
        assert body["error_type"] == "validation"
        assert body["details"][0]["path"] == "sheet.spacing_mm"

    def test_invalid_request(self, client: TestClient) -> None:
        response = client.post("/api/v1/plan", json={"designs": [], "format": "Letter"})
        assert response.status_code == 422


class TestPayloadEndpoint:
    """Tests for POST /api/v1/plan/payload."""

    def test_payload(self, client: TestClient, designs: list[dict[str, Any]]) -> None:
        response = client.post("/api/v1/plan/payload", json={"designs": designs})

        assert response.status_code == 200
        payload = response.json()
        assert payload["sheetLabel"] == "A4"
        assert list(payload["svgAssets"]) == ["svg-1"]
        assert "#0000FF" in payload["svgAssets"]["svg-1"]

    def test_inline_markup(self, client: TestClient, designs: list[dict[str, Any]]) -> None:
        response = client.post(
            "/api/v1/plan/payload", json={"designs": designs, "inline_markup": True}
        )
        payload = response.json()
        assert payload["svgAssets"] == {}
        assert payload["sheets"][0]["placements"][0]["svgMarkup"].startswith("<svg")


class TestDocumentEndpoint:
    """Tests for POST /api/v1/plan/document."""

    def test_document(
        self,
        client: TestClient,
        designs: list[dict[str, Any]],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        async def fake_render(self: DocumentServiceClient, payload: dict[str, Any]) -> bytes:
            self.check_sheet_limit(payload)
            return b"%PDF-fake"

        monkeypatch.setattr(DocumentServiceClient, "render_document", fake_render)

        response = client.post("/api/v1/plan/document", json={"designs": designs})

        assert response.status_code == 200
        assert response.content == b"%PDF-fake"
        assert response.headers["content-type"] == "application/pdf"
        assert "layout-A4-" in response.headers["content-disposition"]

    def test_sheet_limit(
        self, client: TestClient, design_factory: DesignFactory
    ) -> None:
        """Over-limit layouts are refused without contacting the service."""
        response = client.post(
            "/api/v1/plan/document",
            json={
                "designs": [design_factory("page", 210, 297, copiesCount=3)],
                "config": {"export": {"max_sheets": 2}},
            },
        )
        assert response.status_code == 400
        body = response.json()
        assert body["error_type"] == "sheet_limit"
        assert body["details"] == {"sheet_count": 3, "max_sheets": 2}

    def test_service_failure(
        self,
        client: TestClient,
        designs: list[dict[str, Any]],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        async def failing(self: DocumentServiceClient, payload: dict[str, Any]) -> bytes:
            raise DocumentServiceError("renderer crashed", status_code=500)

        monkeypatch.setattr(DocumentServiceClient, "render_document", failing)

        response = client.post("/api/v1/plan/document", json={"designs": designs})
        assert response.status_code == 502
        body = response.json()
        assert body["error"] == "renderer crashed"
        assert body["error_type"] == "document_service"
        assert body["details"] == {"status_code": 500}
