"""Turn raw YNAB category records into processed analysis records.

Pure functions, no I/O. Malformed category records are reported as
warnings rather than raised so one bad record cannot sink a whole month.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError

from src.core.alignment import classify_alignment, target_percentage
from src.core.months import AnalysisValidationError, validate_month
from src.core.targets import explain_target
from src.models.results import AnalysisWarning, ProcessedCategory
from src.models.schemas import (
    DEFAULT_ANALYSIS_CONFIG,
    AnalysisConfig,
    Category,
    CategoryGroup,
    MonthDetail,
)

logger = logging.getLogger("ynab_alignment")


def should_include_category(
    category: Category,
    config: AnalysisConfig = DEFAULT_ANALYSIS_CONFIG,
) -> bool:
    """Apply the deleted/hidden/minimum-assignment filters from *config*."""
    if category.deleted and not config.include_deleted_categories:
        return False
    if category.hidden and not config.include_hidden_categories:
        return False
    if abs(category.budgeted) < config.minimum_assignment_threshold:
        return False
    return True


def process_category(
    category: Category,
    group_name: str,
    current_month: str,
    config: AnalysisConfig = DEFAULT_ANALYSIS_CONFIG,
) -> ProcessedCategory:
    """Compare a category's assigned amount with its normalized monthly target."""
    extraction = explain_target(category, current_month)
    target = extraction.amount
    assigned = category.budgeted

    return ProcessedCategory(
        id=category.id,
        name=category.name,
        category_group_name=group_name or category.category_group_name or "Unknown",
        assigned=assigned,
        target=target,
        target_type=category.goal_type or None,
        variance=assigned - target if target is not None else 0,
        alignment_status=classify_alignment(assigned, target, config.tolerance_milliunits),
        percentage_of_target=target_percentage(assigned, target),
        has_target=target is not None,
        is_hidden=category.hidden,
        goal_under_funded=category.goal_under_funded,
        goal_overall_left=category.goal_overall_left,
        goal_percentage_complete=category.goal_percentage_complete,
        calculation_rule=extraction.rule,
    )


def process_categories(
    categories: Iterable[Category],
    current_month: str,
    config: AnalysisConfig = DEFAULT_ANALYSIS_CONFIG,
) -> list[ProcessedCategory]:
    """Filter and process every category of a month, preserving input order."""
    validate_month(current_month)
    return [
        process_category(cat, "", current_month, config)
        for cat in categories
        if should_include_category(cat, config)
    ]


def flatten_category_groups(groups: Iterable[CategoryGroup]) -> list[Category]:
    """Flatten a group structure, stamping each category with its group's name."""
    flattened: list[Category] = []
    for group in groups:
        for cat in group.categories:
            flattened.append(cat.model_copy(update={"category_group_name": group.name}))
    return flattened


# --- Tolerant payload parsing ---


def _describe_raw(raw: Any) -> tuple[str | None, str | None]:
    if isinstance(raw, Mapping):
        cat_id, name = raw.get("id"), raw.get("name")
        return (
            str(cat_id) if cat_id is not None else None,
            str(name) if name is not None else None,
        )
    return None, None


def parse_categories(
    raw_categories: Iterable[Any],
) -> tuple[list[Category], list[AnalysisWarning]]:
    """Validate category records one by one.

    Returns the valid categories and a warning for each record that
    failed validation.
    """
    categories: list[Category] = []
    warnings: list[AnalysisWarning] = []

    for raw in raw_categories:
        cat_id, name = _describe_raw(raw)
        if isinstance(raw, Category):
            categories.append(raw)
            continue
        try:
            categories.append(Category.model_validate(raw))
        except ValidationError as e:
            fields = sorted({".".join(str(p) for p in err["loc"]) for err in e.errors()})
            message = (
                f"Skipped malformed category: {e.error_count()} validation error(s)"
                f" in {', '.join(fields) or 'record'}"
            )
            logger.warning("%s (id=%s, name=%s)", message, cat_id, name)
            warnings.append(AnalysisWarning(category_id=cat_id, category_name=name, message=message))

    return categories, warnings


def parse_month_payload(
    payload: Mapping[str, Any],
) -> tuple[MonthDetail, list[AnalysisWarning]]:
    """Build a :class:`MonthDetail` from a raw YNAB month payload.

    The month envelope must be valid, otherwise
    :class:`AnalysisValidationError` is raised. Individual categories that
    fail validation are dropped and reported as warnings.
    """
    envelope = {k: v for k, v in payload.items() if k != "categories"}
    try:
        month = MonthDetail.model_validate(envelope)
    except ValidationError as e:
        raise AnalysisValidationError(
            f"Invalid month data: {e.error_count()} validation error(s)"
        ) from e
    validate_month(month.month)

    categories, warnings = parse_categories(payload.get("categories") or [])
    return month.model_copy(update={"categories": categories}), warnings
