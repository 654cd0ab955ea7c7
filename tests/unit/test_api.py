"""
Unit tests for the HTTP API.
Routes run against the real app with the analysis service and Redis replaced.
"""

from unittest.mock import AsyncMock, Mock, patch

import pytest
from fastapi import status
from fastapi.testclient import TestClient

from foodbuddy.core.dependencies import get_analysis_service
from foodbuddy.main import app
from foodbuddy.models.analysis import UsageContext
from foodbuddy.services.analysis_service import AnalysisService, InvalidComparisonInputException
from foodbuddy.services.comparison import PRODUCT_A
from foodbuddy.services.llm import AnalysisServiceException, InvalidIngredientsException
from foodbuddy.services.ocr import OCRResult, OCRServiceException

SESSION = {"X-Session-ID": "session-123"}


@pytest.fixture
def analysis_service(mock_provider, enricher):
    service = AnalysisService(provider=mock_provider, enricher=enricher)
    app.dependency_overrides[get_analysis_service] = lambda: service
    yield service
    app.dependency_overrides.clear()


@pytest.fixture
def client(redis_double):
    with patch("foodbuddy.cache.stores.redis_client", redis_double):
        yield TestClient(app)


class TestAnalyzeEndpoint:
    """POST /api/v1/analysis/analyze"""

    def test_enriched_result(self, client, analysis_service):
        response = client.post(
            "/api/v1/analysis/analyze",
            json={"ingredients": "Sugar, Palm oil, Red 40, Preservative E202", "context": "kids"},
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["_rawLength"] == 4
        assert data["breakdown"] == {"natural": 25, "processed": 50, "additives": 25}
        assert data["alternatives"][0]["title"] == "Diluted Fruit Juice"
        assert {d["name"] for d in data["dietary"]} == {"Vegan", "Gluten-Free", "Keto"}
        assert "X-Process-Time" in response.headers

    def test_invalid_input_returned_untouched(self, client, analysis_service, mock_provider, invalid_raw_analysis):
        mock_provider.analyze_ingredients.return_value = invalid_raw_analysis

        response = client.post("/api/v1/analysis/analyze", json={"ingredients": "my laptop"}, headers=SESSION)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["intent"] == "Invalid input"
        assert "breakdown" not in data
        assert client.get("/api/v1/history", headers=SESSION).json() == []

    @pytest.mark.parametrize("ingredients", ["", "   "])
    def test_blank_ingredients_is_400(self, client, analysis_service, mock_provider, ingredients):
        response = client.post("/api/v1/analysis/analyze", json={"ingredients": ingredients})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "Ingredients text is required"
        mock_provider.analyze_ingredients.assert_not_awaited()

    def test_provider_validation_error_is_400(self, client, analysis_service, mock_provider):
        mock_provider.analyze_ingredients.side_effect = InvalidIngredientsException()
        response = client.post("/api/v1/analysis/analyze", json={"ingredients": "x"})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_upstream_failure_is_502(self, client, analysis_service, mock_provider):
        mock_provider.analyze_ingredients.side_effect = AnalysisServiceException("boom", error_code="HTTP_500")
        response = client.post("/api/v1/analysis/analyze", json={"ingredients": "Oats"})
        assert response.status_code == status.HTTP_502_BAD_GATEWAY

    def test_missing_api_key_is_503(self, client, analysis_service, mock_provider):
        mock_provider.analyze_ingredients.side_effect = AnalysisServiceException("no key", error_code="MISSING_API_KEY")
        response = client.post("/api/v1/analysis/analyze", json={"ingredients": "Oats"})
        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE

    def test_result_recorded_in_session_history(self, client, analysis_service):
        client.post("/api/v1/analysis/analyze", json={"ingredients": "Oats, Sugar"}, headers=SESSION)

        history = client.get("/api/v1/history", headers=SESSION).json()

        assert len(history) == 1
        assert history[0]["ingredients"] == "Oats, Sugar"
        assert history[0]["result"]["_rawLength"] == 2


class TestCompareEndpoint:
    """POST /api/v1/analysis/compare"""

    def test_comparison_response(self, client, analysis_service):
        response = client.post(
            "/api/v1/analysis/compare",
            json={"ingredients_a": "Oats", "ingredients_b": "Sugar, Red 40"},
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert set(data) == {"product_a", "product_b", "comparison"}
        assert data["comparison"]["winner"] == PRODUCT_A
        assert data["comparison"]["bestFor"]["winner"] == PRODUCT_A

    def test_invalid_side_is_422(self, client, analysis_service):
        with patch.object(
            analysis_service, "compare_products",
            AsyncMock(side_effect=InvalidComparisonInputException("Product B"))
        ):
            response = client.post(
                "/api/v1/analysis/compare",
                json={"ingredients_a": "Oats", "ingredients_b": "keyboard"},
            )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert "Product B" in response.json()["detail"]

    def test_blank_side_is_400(self, client, analysis_service):
        response = client.post(
            "/api/v1/analysis/compare",
            json={"ingredients_a": "Oats", "ingredients_b": "  "},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "Ingredients text is required"

    def test_upstream_failure_is_502(self, client, analysis_service, mock_provider):
        mock_provider.analyze_ingredients.side_effect = AnalysisServiceException("timeout", error_code="TIMEOUT")
        response = client.post(
            "/api/v1/analysis/compare",
            json={"ingredients_a": "Oats", "ingredients_b": "Sugar"},
        )
        assert response.status_code == status.HTTP_502_BAD_GATEWAY


class TestScanEndpoint:
    """POST /api/v1/analysis/scan"""

    def test_scan_label(self, client, analysis_service):
        ocr = Mock()
        ocr.extract_text = AsyncMock(return_value=OCRResult(
            raw_text="Ingredients: Oats, Sugar", confidence=0.9, ingredient_text="Oats, Sugar"
        ))
        analysis_service._ocr = ocr

        response = client.post(
            "/api/v1/analysis/scan",
            files={"image": ("label.jpg", b"\xff\xd8\xff", "image/jpeg")},
            data={"context": "athlete"},
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["ocr"]["ingredient_text"] == "Oats, Sugar"
        assert data["analysis"]["_rawLength"] == 2

    def test_rejects_non_images(self, client, analysis_service):
        response = client.post(
            "/api/v1/analysis/scan",
            files={"image": ("label.txt", b"hello", "text/plain")},
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_rejects_large_images(self, client, analysis_service):
        with patch("foodbuddy.api.v1.analysis.settings") as mock_settings:
            mock_settings.max_image_bytes = 4
            response = client.post(
                "/api/v1/analysis/scan",
                files={"image": ("label.png", b"12345", "image/png")},
            )
        assert response.status_code == status.HTTP_413_REQUEST_ENTITY_TOO_LARGE

    def test_unreadable_label_is_422(self, client, analysis_service):
        ocr = Mock()
        ocr.extract_text = AsyncMock(return_value=OCRResult(raw_text="", confidence=0.0))
        analysis_service._ocr = ocr

        response = client.post(
            "/api/v1/analysis/scan",
            files={"image": ("label.png", b"png", "image/png")},
        )
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_ocr_unavailable_is_503(self, client, analysis_service):
        ocr = Mock()
        ocr.extract_text = AsyncMock(side_effect=OCRServiceException("no client", error_code="CLIENT_UNAVAILABLE"))
        analysis_service._ocr = ocr

        response = client.post(
            "/api/v1/analysis/scan",
            files={"image": ("label.png", b"png", "image/png")},
        )
        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE


class TestExportEndpoints:

    def test_export_analysis(self, client, sugary_raw_analysis):
        response = client.post("/api/v1/analysis/export", json=sugary_raw_analysis.model_dump())

        assert response.status_code == status.HTTP_200_OK
        assert response.headers["content-type"].startswith("text/plain")
        assert "- Added Sugar: High sugar intake" in response.text

    def test_export_history_item(self, client, analysis_service):
        client.post("/api/v1/analysis/analyze", json={"ingredients": "Oats"}, headers=SESSION)
        history_id = client.get("/api/v1/history", headers=SESSION).json()[0]["id"]

        response = client.get(f"/api/v1/history/{history_id}/export", headers=SESSION)

        assert response.status_code == status.HTTP_200_OK
        assert response.text.startswith("Intent:\nSweet snack for children")

    def test_export_unknown_history_item(self, client):
        response = client.get("/api/v1/history/nope/export", headers=SESSION)
        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestHistoryEndpoints:

    def test_session_header_required(self, client):
        assert client.get("/api/v1/history").status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_invalid_session_id(self, client):
        response = client.get("/api/v1/history", headers={"X-Session-ID": "bad id!"})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_clear(self, client, analysis_service):
        client.post("/api/v1/analysis/analyze", json={"ingredients": "Oats"}, headers=SESSION)

        assert client.delete("/api/v1/history", headers=SESSION).status_code == status.HTTP_204_NO_CONTENT
        assert client.get("/api/v1/history", headers=SESSION).json() == []


class TestShoppingListEndpoints:

    def test_add_list_remove_clear(self, client):
        created = client.post("/api/v1/shopping-list", json={"item": " Stevia "}, headers=SESSION)
        assert created.status_code == status.HTTP_201_CREATED
        assert created.json() == {"added": True, "items": ["Stevia"]}

        duplicate = client.post("/api/v1/shopping-list", json={"item": "Stevia"}, headers=SESSION)
        assert duplicate.json()["added"] is False

        client.post("/api/v1/shopping-list", json={"item": "Oat milk"}, headers=SESSION)
        assert client.get("/api/v1/shopping-list", headers=SESSION).json() == {"items": ["Stevia", "Oat milk"]}

        removed = client.delete("/api/v1/shopping-list/Stevia", headers=SESSION)
        assert removed.json() == {"items": ["Oat milk"]}

        assert client.delete("/api/v1/shopping-list", headers=SESSION).status_code == status.HTTP_204_NO_CONTENT
        assert client.get("/api/v1/shopping-list", headers=SESSION).json() == {"items": []}

    def test_remove_missing_item(self, client):
        response = client.delete("/api/v1/shopping-list/Stevia", headers=SESSION)
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_empty_item_rejected(self, client):
        response = client.post("/api/v1/shopping-list", json={"item": "  "}, headers=SESSION)
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


class TestHealthAndErrors:

    def test_health(self, client):
        with patch("foodbuddy.main.redis_client") as mock_redis:
            mock_redis.ping = AsyncMock(return_value=True)
            response = client.get("/health")

        assert response.json()["status"] == "healthy"

    def test_health_degraded_without_redis(self, client):
        with patch("foodbuddy.main.redis_client") as mock_redis:
            mock_redis.ping = AsyncMock(return_value=False)
            response = client.get("/api/v1/health")

        assert response.json()["status"] == "degraded"

    def test_unexpected_error_is_generic_500(self, redis_double, analysis_service):
        with patch.object(analysis_service, "analyze", AsyncMock(side_effect=RuntimeError("bug"))):
            with patch("foodbuddy.cache.stores.redis_client", redis_double):
                response = TestClient(app, raise_server_exceptions=False).post(
                    "/api/v1/analysis/analyze", json={"ingredients": "Oats", "context": UsageContext.GENERAL.value}
                )

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json()["error"] == "Internal server error"
