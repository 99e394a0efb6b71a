"""Tests for the YNAB API client using httpx.MockTransport."""

import pytest
import httpx

from tests.conftest import raw_category
from src.core.ynab_client import YNABClient, YNABError


@pytest.fixture
def mock_client():
    """Factory that creates a YNABClient with a mocked transport."""
    async def _make(handler):
        client = YNABClient(api_token="test-token", budget_id="test-budget")
        transport = httpx.MockTransport(handler)
        client._client = httpx.AsyncClient(
            transport=transport,
            base_url="https://api.ynab.com/v1",
            headers={"Authorization": "Bearer test-token"},
            timeout=30.0,
        )
        return client
    return _make


class TestGetBudgets:
    async def test_returns_parsed_budgets(self, mock_client):
        def handler(request):
            assert request.headers["Authorization"] == "Bearer test-token"
            return httpx.Response(200, json={
                "data": {
                    "budgets": [{
                        "id": "b1",
                        "name": "Home",
                        "first_month": "2024-01-01",
                        "last_month": "2025-06-01",
                        "currency_format": {"iso_code": "USD"},
                    }],
                },
            })

        client = await mock_client(handler)
        budgets = await client.get_budgets()
        assert len(budgets) == 1
        assert budgets[0].name == "Home"
        assert budgets[0].last_month == "2025-06-01"

    async def test_api_error_raises_ynab_error(self, mock_client):
        def handler(request):
            return httpx.Response(401, json={
                "error": {
                    "id": "401",
                    "name": "unauthorized",
                    "detail": "Bad token",
                },
            })

        client = await mock_client(handler)
        with pytest.raises(YNABError) as exc_info:
            await client.get_budgets()
        assert exc_info.value.status_code == 401
        assert "Bad token" in exc_info.value.detail


class TestGetCategories:
    async def test_returns_parsed_category_groups(self, mock_client):
        def handler(request):
            assert request.url.path == "/v1/budgets/test-budget/categories"
            return httpx.Response(200, json={
                "data": {
                    "category_groups": [{
                        "id": "grp1",
                        "name": "Monthly Bills",
                        "hidden": False,
                        "deleted": False,
                        "categories": [raw_category()],
                    }],
                    "server_knowledge": 5,
                },
            })

        client = await mock_client(handler)
        groups = await client.get_categories()
        assert len(groups) == 1
        assert groups[0].name == "Monthly Bills"
        assert groups[0].categories[0].goal_target == 1500000


class TestGetMonth:
    async def test_returns_month_and_warnings(self, mock_client):
        def handler(request):
            assert request.url.path == "/v1/budgets/b2/months/2025-01-01"
            return httpx.Response(200, json={
                "data": {
                    "month": {
                        "month": "2025-01-01",
                        "income": 5000000,
                        "budgeted": 1500000,
                        "activity": -1500000,
                        "to_be_budgeted": 0,
                        "deleted": False,
                        "categories": [
                            raw_category(),
                            raw_category(id="cat-bad", activity="n/a"),
                        ],
                    },
                },
            })

        client = await mock_client(handler)
        month, warnings = await client.get_month("2025-01-01", budget_id="b2")
        assert month.income == 5000000
        assert [c.id for c in month.categories] == ["cat-rent"]
        assert warnings[0].category_id == "cat-bad"

    async def test_month_payload_is_raw(self, mock_client):
        def handler(request):
            return httpx.Response(200, json={
                "data": {"month": {"month": "2025-01-01", "categories": []}},
            })

        client = await mock_client(handler)
        payload = await client.get_month_payload("2025-01-01")
        assert payload == {"month": "2025-01-01", "categories": []}


class TestErrorHandling:
    async def test_timeout_raises_ynab_error(self, mock_client):
        def handler(request):
            raise httpx.ReadTimeout("timed out")

        client = await mock_client(handler)
        with pytest.raises(YNABError) as exc_info:
            await client.get_budgets()
        assert exc_info.value.status_code == 408
        assert "timed out" in exc_info.value.detail.lower()

    async def test_error_without_body(self, mock_client):
        def handler(request):
            return httpx.Response(500)

        client = await mock_client(handler)
        with pytest.raises(YNABError) as exc_info:
            await client.get_budgets()
        assert exc_info.value.status_code == 500
        assert exc_info.value.name == "unknown_error"


class TestClose:
    async def test_close_is_idempotent(self, mock_client):
        client = await mock_client(lambda request: httpx.Response(200, json={"data": {}}))
        await client.close()
        await client.close()
