"""Shared test fixtures for target alignment tests."""

from src.models.schemas import Budget, Category, CategoryGroup, MonthDetail


def make_category(
    name: str = "Groceries",
    group_id: str = "grp-1",
    group_name: str | None = None,
    hidden: bool = False,
    deleted: bool = False,
    budgeted: int = 0,
    activity: int = 0,
    balance: int = 0,
    goal_type: str | None = None,
    goal_target: int | None = None,
    goal_target_month: str | None = None,
    goal_under_funded: int | None = None,
    goal_overall_funded: int | None = None,
    goal_overall_left: int | None = None,
    goal_percentage_complete: int | None = None,
) -> Category:
    return Category(
        id=f"cat-{name.lower().replace(' ', '-')}",
        category_group_id=group_id,
        category_group_name=group_name,
        name=name,
        hidden=hidden,
        deleted=deleted,
        budgeted=budgeted,
        activity=activity,
        balance=balance,
        goal_type=goal_type,
        goal_target=goal_target,
        goal_target_month=goal_target_month,
        goal_under_funded=goal_under_funded,
        goal_overall_funded=goal_overall_funded,
        goal_overall_left=goal_overall_left,
        goal_percentage_complete=goal_percentage_complete,
    )


def make_monthly_category(
    name: str,
    budgeted: int,
    goal_target: int | None,
) -> Category:
    """A Monthly Funding category, or a goal-less one when *goal_target* is None."""
    return make_category(
        name=name,
        budgeted=budgeted,
        goal_type="MF" if goal_target is not None else None,
        goal_target=goal_target,
    )


def make_category_group(
    name: str = "Monthly Bills",
    categories: list[Category] | None = None,
    hidden: bool = False,
    deleted: bool = False,
) -> CategoryGroup:
    return CategoryGroup(
        id=f"grp-{name.lower().replace(' ', '-')}",
        name=name,
        hidden=hidden,
        deleted=deleted,
        categories=categories or [],
    )


def make_month(
    month: str = "2025-01-01",
    categories: list[Category] | None = None,
    income: int = 5000000,
    activity: int = -3200000,
) -> MonthDetail:
    categories = categories or []
    return MonthDetail(
        month=month,
        income=income,
        budgeted=sum(c.budgeted for c in categories),
        activity=activity,
        to_be_budgeted=0,
        categories=categories,
    )


def make_budget(
    name: str = "My Budget",
    first_month: str | None = "2024-01-01",
    last_month: str | None = "2025-06-01",
) -> Budget:
    return Budget(
        id=f"budget-{name.lower().replace(' ', '-')}",
        name=name,
        first_month=first_month,
        last_month=last_month,
    )


def raw_category(**overrides) -> dict:
    """A category as it arrives in a YNAB month payload."""
    data = {
        "id": "cat-rent",
        "category_group_id": "grp-1",
        "category_group_name": "Bills",
        "name": "Rent",
        "hidden": False,
        "deleted": False,
        "budgeted": 1500000,
        "activity": -1500000,
        "balance": 0,
        "goal_type": "MF",
        "goal_target": 1500000,
    }
    data.update(overrides)
    return data
