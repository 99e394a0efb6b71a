"""Normalize YNAB goal configurations into a "needed this month" amount.

Each goal type stores its target differently: Monthly Funding keeps the
monthly amount in ``goal_target``, balance and debt goals expose YNAB's
own monthly figure in ``goal_under_funded``, and Plan Your Spending goals
dated in the future may omit ``goal_under_funded`` entirely, in which case
the monthly amount is projected from what is left to fund.
"""

from __future__ import annotations

import logging

from src.core.months import AnalysisValidationError, month_index, parse_month
from src.models.results import TargetExtraction
from src.models.schemas import Category, GoalType

logger = logging.getLogger("ynab_alignment")

GOAL_TYPE_DESCRIPTIONS: dict[GoalType, str] = {
    GoalType.MONTHLY_FUNDING: "Monthly Funding",
    GoalType.TARGET_BALANCE: "Target Category Balance",
    GoalType.TARGET_BALANCE_BY_DATE: "Target Category Balance by Date",
    GoalType.PLAN_YOUR_SPENDING: "Plan Your Spending",
    GoalType.DEBT_PAYOFF: "Debt Payoff Goal",
}


def describe_goal_type(goal_type: str | None) -> str:
    """Human-readable name for a YNAB goal type code."""
    try:
        return GOAL_TYPE_DESCRIPTIONS[GoalType(goal_type)]
    except ValueError:
        return "No Target"


def _under_funded_or_target(category: Category, label: str) -> TargetExtraction:
    if category.goal_under_funded is not None:
        return TargetExtraction(category.goal_under_funded, f"{label}: goal_under_funded")
    return TargetExtraction(category.goal_target, f"{label}: goal_target fallback")


def _future_target_month_index(category: Category, current: int) -> int | None:
    """Month index of the goal's target month if it is strictly after *current*."""
    if not category.goal_target_month:
        return None
    try:
        target = month_index(parse_month(category.goal_target_month))
    except AnalysisValidationError:
        logger.warning(
            "Ignoring unparseable goal_target_month %r on category %s",
            category.goal_target_month,
            category.id,
        )
        return None
    return target if target > current else None


def _plan_your_spending(category: Category, current_month: str) -> TargetExtraction:
    label = describe_goal_type(GoalType.PLAN_YOUR_SPENDING)
    if category.goal_under_funded is not None:
        return TargetExtraction(category.goal_under_funded, f"{label}: goal_under_funded")

    current = month_index(parse_month(current_month))
    target = _future_target_month_index(category, current)
    if target is None or category.goal_target is None:
        return TargetExtraction(category.goal_target, f"{label}: goal_target fallback")

    months_remaining = max(1, target - current)
    remaining_needed = category.goal_target - (category.goal_overall_funded or 0)
    if remaining_needed <= 0:
        return TargetExtraction(0, f"{label}: future goal already funded")

    # Half-up, not round()'s half-to-even.
    amount = int(remaining_needed / months_remaining + 0.5)
    return TargetExtraction(
        amount,
        f"{label}: {remaining_needed} remaining over {months_remaining} month(s)",
    )


def explain_target(category: Category, current_month: str) -> TargetExtraction:
    """Compute the "needed this month" amount along with the rule that applied.

    *current_month* must be a valid ``YYYY-MM-DD`` identifier; it is only
    consulted for Plan Your Spending goals with a future target month.
    """
    if not category.goal_type:
        return TargetExtraction(None, "No Goal")

    kind = category.goal_kind
    if kind is None:
        logger.debug(
            "Unknown goal type %r on category %s, treating as no target",
            category.goal_type,
            category.id,
        )
        return TargetExtraction(None, f"Unknown Goal Type: {category.goal_type}")

    if kind is GoalType.MONTHLY_FUNDING:
        return TargetExtraction(
            category.goal_target, f"{describe_goal_type(kind)}: goal_target"
        )
    if kind in (
        GoalType.TARGET_BALANCE,
        GoalType.TARGET_BALANCE_BY_DATE,
        GoalType.DEBT_PAYOFF,
    ):
        return _under_funded_or_target(category, describe_goal_type(kind))
    return _plan_your_spending(category, current_month)


def extract_target(category: Category, current_month: str) -> int | None:
    """The normalized "needed this month" amount in milliunits, or ``None``."""
    return explain_target(category, current_month).amount
