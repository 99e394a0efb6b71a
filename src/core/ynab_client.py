"""YNAB API client wrapper.

Async HTTP client for the YNAB REST API (https://api.ynab.com/v1).
Fetches the budget, category and month records the alignment engine
consumes, and maps API failures onto :class:`YNABError`.
"""

from typing import Any, Optional

import httpx

from src.core.processing import parse_month_payload
from src.models.results import AnalysisWarning
from src.models.schemas import Budget, CategoryGroup, MonthDetail

BASE_URL = "https://api.ynab.com/v1"
DEFAULT_TIMEOUT = 30.0


class YNABError(Exception):
    """Base exception for YNAB API errors."""

    def __init__(self, status_code: int, error_id: str, name: str, detail: str):
        self.status_code = status_code
        self.error_id = error_id
        self.name = name
        self.detail = detail
        super().__init__(f"YNAB API Error [{status_code}] {name}: {detail}")


class YNABClient:
    """Async client for the read-only YNAB endpoints used by the analysis."""

    def __init__(self, api_token: str, budget_id: str = "default"):
        self.api_token = api_token
        self.budget_id = budget_id
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=BASE_URL,
                headers={"Authorization": f"Bearer {self.api_token}"},
                timeout=DEFAULT_TIMEOUT,
            )
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        """Make an authenticated request to the YNAB API and return its ``data``."""
        try:
            response = await self.client.request(
                method=method,
                url=path,
                params=params or {},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            body = e.response.json() if e.response.content else {}
            error = body.get("error", {})
            raise YNABError(
                status_code=e.response.status_code,
                error_id=error.get("id", str(e.response.status_code)),
                name=error.get("name", "unknown_error"),
                detail=error.get("detail", str(e)),
            ) from e
        except httpx.TimeoutException as e:
            raise YNABError(
                status_code=408,
                error_id="timeout",
                name="request_timeout",
                detail="Request to YNAB API timed out. Please try again.",
            ) from e

        return response.json().get("data", {})

    # --- Budgets ---

    async def get_budgets(self) -> list[Budget]:
        """Get all budgets for the authenticated user."""
        data = await self._request("GET", "/budgets")
        return [Budget(**b) for b in data.get("budgets", [])]

    # --- Categories ---

    async def get_categories(
        self, budget_id: Optional[str] = None
    ) -> list[CategoryGroup]:
        """Get all category groups and their categories."""
        bid = budget_id or self.budget_id
        data = await self._request("GET", f"/budgets/{bid}/categories")
        return [CategoryGroup(**cg) for cg in data.get("category_groups", [])]

    # --- Months ---

    async def get_month_payload(
        self, month: str, budget_id: Optional[str] = None
    ) -> dict[str, Any]:
        """Get a month's raw detail, including its categories."""
        bid = budget_id or self.budget_id
        data = await self._request("GET", f"/budgets/{bid}/months/{month}")
        return data.get("month", {})

    async def get_month(
        self, month: str, budget_id: Optional[str] = None
    ) -> tuple[MonthDetail, list[AnalysisWarning]]:
        """Get a month's detail, skipping (and reporting) malformed categories."""
        payload = await self.get_month_payload(month, budget_id)
        return parse_month_payload(payload)
