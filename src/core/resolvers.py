"""Budget and month resolution helpers for the analysis tools.

Pure functions that pick the budget and month to analyze from
already-fetched data. No I/O.
"""

from __future__ import annotations

from datetime import date

from src.core.months import AnalysisValidationError, first_day_of_month, parse_month
from src.models.schemas import Budget


class ResolverError(Exception):
    """Raised when an entity cannot be resolved."""

    def __init__(
        self,
        entity_type: str,
        query: str,
        available: list[str] | None = None,
        detail: str | None = None,
    ):
        self.entity_type = entity_type
        self.query = query
        self.available = available or []
        if detail is None:
            detail = f"No {entity_type} found matching '{query}'."
            if self.available:
                detail += f" Available: {', '.join(self.available)}"
        super().__init__(detail)


def resolve_budget(
    budgets: list[Budget],
    budget_id: str | None = None,
) -> Budget:
    """Find a budget by exact ID, or the first budget when *budget_id* is ``None``.

    Raises :class:`ResolverError` if nothing matches.
    """
    if budget_id:
        for b in budgets:
            if b.id == budget_id:
                return b
        raise ResolverError(
            "budget",
            budget_id,
            available=[f"{b.name} ({b.id})" for b in budgets],
        )
    if not budgets:
        raise ResolverError("budget", "<default>")
    return budgets[0]


def _budget_range(budget: Budget) -> tuple[date, date]:
    if not budget.first_month or not budget.last_month:
        raise ResolverError(
            "month range",
            budget.name,
            detail=f"Budget {budget.name} is missing date range information.",
        )
    try:
        return parse_month(budget.first_month), parse_month(budget.last_month)
    except AnalysisValidationError as e:
        raise ResolverError(
            "month range",
            budget.name,
            detail=(
                f"Budget {budget.name} has an invalid date range: "
                f"first_month={budget.first_month}, last_month={budget.last_month}"
            ),
        ) from e


def validate_month_in_budget_range(month: str, budget: Budget) -> str:
    """Return *month* if it lies within the budget's first/last month.

    Raises :class:`AnalysisValidationError` for a malformed month and
    :class:`ResolverError` when it falls outside the budget.
    """
    requested = parse_month(month)
    first, last = _budget_range(budget)
    if requested < first:
        raise ResolverError(
            "month",
            month,
            detail=f"Month {month} is before budget start date {budget.first_month}.",
        )
    if requested > last:
        raise ResolverError(
            "month",
            month,
            detail=f"Month {month} is after budget end date {budget.last_month}.",
        )
    return month


def default_month_for_budget(budget: Budget, today: date | None = None) -> str:
    """The current month, clamped into the budget's range."""
    current = parse_month(first_day_of_month(today))
    first, last = _budget_range(budget)
    if current > last:
        return budget.last_month
    if current < first:
        return budget.first_month
    return first_day_of_month(current)
