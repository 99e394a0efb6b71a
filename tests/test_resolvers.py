"""Tests for budget and month resolution helpers."""

from datetime import date

import pytest

from tests.conftest import make_budget
from src.core.months import AnalysisValidationError
from src.core.resolvers import (
    ResolverError,
    default_month_for_budget,
    resolve_budget,
    validate_month_in_budget_range,
)


class TestResolveBudget:
    def test_exact_id_match(self):
        budgets = [make_budget("Home"), make_budget("Business")]
        assert resolve_budget(budgets, "budget-business").name == "Business"

    def test_default_is_first_budget(self):
        budgets = [make_budget("Home"), make_budget("Business")]
        assert resolve_budget(budgets).name == "Home"

    def test_unknown_id_raises_with_available(self):
        budgets = [make_budget("Home")]
        with pytest.raises(ResolverError) as exc_info:
            resolve_budget(budgets, "nope")
        assert "Home" in str(exc_info.value)
        assert exc_info.value.entity_type == "budget"

    def test_no_budgets_raises(self):
        with pytest.raises(ResolverError):
            resolve_budget([])


class TestValidateMonthInBudgetRange:
    def test_month_in_range(self):
        budget = make_budget(first_month="2024-01-01", last_month="2025-06-01")
        assert validate_month_in_budget_range("2025-01-01", budget) == "2025-01-01"

    def test_range_is_inclusive(self):
        budget = make_budget(first_month="2024-01-01", last_month="2025-06-01")
        assert validate_month_in_budget_range("2024-01-01", budget)
        assert validate_month_in_budget_range("2025-06-01", budget)

    def test_before_start(self):
        budget = make_budget(first_month="2024-01-01")
        with pytest.raises(ResolverError, match="before budget start"):
            validate_month_in_budget_range("2023-12-01", budget)

    def test_after_end(self):
        budget = make_budget(last_month="2025-06-01")
        with pytest.raises(ResolverError, match="after budget end"):
            validate_month_in_budget_range("2025-07-01", budget)

    def test_malformed_month(self):
        with pytest.raises(AnalysisValidationError):
            validate_month_in_budget_range("2025-07", make_budget())

    def test_missing_budget_range(self):
        budget = make_budget(first_month=None)
        with pytest.raises(ResolverError, match="missing date range"):
            validate_month_in_budget_range("2025-01-01", budget)


class TestDefaultMonthForBudget:
    def test_current_month_in_range(self):
        budget = make_budget(first_month="2024-01-01", last_month="2025-06-01")
        assert default_month_for_budget(budget, date(2025, 3, 14)) == "2025-03-01"

    def test_clamps_to_last_month(self):
        budget = make_budget(first_month="2024-01-01", last_month="2025-06-01")
        assert default_month_for_budget(budget, date(2026, 1, 2)) == "2025-06-01"

    def test_clamps_to_first_month(self):
        budget = make_budget(first_month="2024-01-01", last_month="2025-06-01")
        assert default_month_for_budget(budget, date(2023, 5, 5)) == "2024-01-01"

    def test_invalid_range_raises(self):
        budget = make_budget(first_month="garbage")
        with pytest.raises(ResolverError, match="invalid date range"):
            default_month_for_budget(budget, date(2025, 1, 1))
