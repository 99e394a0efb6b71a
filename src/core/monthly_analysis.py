"""Month-level target alignment analysis.

Aggregates processed categories into bucket totals, ranks the largest
variances, and scores the month. Every function here is a pure function
of its inputs apart from the ``last_updated`` timestamp, which does not
take part in equality.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from typing import Any

from src.core.alignment import variance_percentage
from src.core.months import validate_month
from src.core.processing import flatten_category_groups, parse_month_payload, process_categories
from src.models.results import (
    AlignmentStatus,
    CategoryVariance,
    DashboardSummary,
    DisciplineRating,
    KeyMetrics,
    MonthlyAnalysis,
    ProcessedCategory,
    VarianceRanking,
)
from src.models.schemas import (
    DEFAULT_ANALYSIS_CONFIG,
    AnalysisConfig,
    CategoryGroup,
    MonthDetail,
)

logger = logging.getLogger("ynab_alignment")

DEFAULT_TOP_N = 10


def _pct(amount: int, total: int) -> float:
    return amount / total * 100 if total > 0 else 0.0


# --- Month Analyzer ---


def analyze_month(
    categories: Iterable[ProcessedCategory],
    month: str,
    budget_id: str,
    budget_name: str,
    *,
    total_income: int = 0,
    total_activity: int = 0,
    now: datetime | None = None,
) -> MonthlyAnalysis:
    """Aggregate processed categories into month totals and alignment buckets.

    Over-target categories contribute only their excess to the over bucket
    and under-target categories only their shortfall to the under bucket.
    The rest of a targeted category's assignment counts as on target, so
    the four buckets always add up to ``total_assigned``. A badly
    under-funded category can therefore leave ``on_target_amount`` (and
    its percentage) negative.
    """
    total_assigned = 0
    total_targeted = 0
    on_amount = over_amount = under_amount = none_amount = 0
    analyzed = with_targets = over_count = under_count = without_count = 0

    for cat in categories:
        analyzed += 1
        total_assigned += cat.assigned
        if cat.has_target:
            with_targets += 1
            total_targeted += cat.target or 0

        status = cat.alignment_status
        if status is AlignmentStatus.NO_TARGET:
            without_count += 1
            none_amount += cat.assigned
        elif status is AlignmentStatus.OVER_TARGET:
            over_count += 1
            excess = max(0, cat.variance)
            over_amount += excess
            on_amount += cat.assigned - excess
        elif status is AlignmentStatus.UNDER_TARGET:
            under_count += 1
            shortfall = abs(min(0, cat.variance))
            under_amount += shortfall
            on_amount += cat.assigned - shortfall
        else:
            on_amount += cat.assigned

    stamp = (now or datetime.now(timezone.utc)).isoformat()

    return MonthlyAnalysis(
        month=month,
        budget_id=budget_id,
        budget_name=budget_name,
        total_income=total_income,
        total_activity=total_activity,
        total_assigned=total_assigned,
        total_targeted=total_targeted,
        on_target_amount=on_amount,
        over_target_amount=over_amount,
        under_target_amount=under_amount,
        no_target_amount=none_amount,
        on_target_percentage=_pct(on_amount, total_assigned),
        over_target_percentage=_pct(over_amount, total_assigned),
        under_target_percentage=_pct(under_amount, total_assigned),
        no_target_percentage=_pct(none_amount, total_assigned),
        categories_analyzed=analyzed,
        categories_with_targets=with_targets,
        categories_over_target=over_count,
        categories_under_target=under_count,
        categories_without_targets=without_count,
        last_updated=stamp,
    )


# --- Variance Ranker ---


def calculate_category_variance(
    category: ProcessedCategory,
    month: str,
) -> CategoryVariance | None:
    """Variance detail for a category with a target, else ``None``."""
    if not category.has_target or category.target is None:
        return None
    return CategoryVariance(
        category_id=category.id,
        category_name=category.name,
        category_group_name=category.category_group_name,
        assigned=category.assigned,
        target=category.target,
        variance=category.variance,
        variance_percentage=variance_percentage(category.variance, category.target),
        target_type=category.target_type,
        month=month,
    )


def _rank_key(v: CategoryVariance) -> tuple[int, str, str]:
    # Largest absolute variance first; name then id keep ties stable.
    return (-abs(v.variance), v.category_name, v.category_id)


def rank_variances(
    categories: Iterable[ProcessedCategory],
    month: str,
    limit: int = DEFAULT_TOP_N,
) -> VarianceRanking:
    """Top *limit* over-target, under-target, and zero-target categories.

    Over-target entries come out in descending variance, under-target in
    ascending (most negative first). Categories whose target is exactly 0
    but that have a positive assignment carry no variance percentage and
    are listed separately.
    """
    over: list[CategoryVariance] = []
    under: list[CategoryVariance] = []
    zero: list[CategoryVariance] = []

    for cat in categories:
        v = calculate_category_variance(cat, month)
        if v is None:
            continue
        if v.target == 0:
            if v.assigned > 0:
                zero.append(v)
        elif cat.alignment_status is AlignmentStatus.OVER_TARGET:
            over.append(v)
        elif cat.alignment_status is AlignmentStatus.UNDER_TARGET:
            under.append(v)

    return VarianceRanking(
        over_target=sorted(over, key=_rank_key)[:limit],
        under_target=sorted(under, key=_rank_key)[:limit],
        zero_target=sorted(zero, key=_rank_key)[:limit],
    )


# --- Discipline Scorer ---


def discipline_score(analysis: MonthlyAnalysis) -> float:
    """On-target share plus half credit for over-target; under-target earns nothing."""
    return analysis.on_target_percentage + analysis.over_target_percentage * 0.5


def calculate_budget_discipline_rating(analysis: MonthlyAnalysis) -> DisciplineRating:
    score = discipline_score(analysis)
    if score >= 85:
        return DisciplineRating.EXCELLENT
    if score >= 70:
        return DisciplineRating.GOOD
    if score >= 50:
        return DisciplineRating.FAIR
    return DisciplineRating.NEEDS_IMPROVEMENT


def calculate_target_alignment_score(analysis: MonthlyAnalysis) -> float:
    """0-100 score rewarding accuracy and target coverage, penalizing under-funding."""
    coverage = (
        analysis.categories_with_targets / analysis.categories_analyzed * 100
        if analysis.categories_analyzed > 0
        else 0.0
    )
    score = (
        analysis.on_target_percentage
        + analysis.over_target_percentage * 0.3
        - analysis.under_target_percentage * 0.5
        + coverage * 0.1
    )
    return max(0.0, min(100.0, score))


def calculate_key_metrics(
    analysis: MonthlyAnalysis,
    categories: Iterable[ProcessedCategory],
) -> KeyMetrics:
    """Alignment score, discipline rating, total variance and achievement.

    Achievement is the share of the month's targets actually funded: each
    targeted category is credited with its assignment up to its target,
    never less than 0, so the result stays within 0-100.
    """
    targeted = [cat for cat in categories if cat.has_target and cat.target]
    total_variance = sum(abs(cat.variance) for cat in targeted)
    funded = sum(max(0, min(cat.assigned, cat.target)) for cat in targeted)
    achievement = (
        funded / analysis.total_targeted * 100
        if analysis.total_targeted > 0
        else 0.0
    )
    return KeyMetrics(
        target_alignment_score=calculate_target_alignment_score(analysis),
        budget_discipline_rating=calculate_budget_discipline_rating(analysis),
        total_variance=total_variance,
        average_target_achievement=achievement,
    )


# --- Dashboard Summary ---


def generate_dashboard_summary(
    month_data: MonthDetail | Mapping[str, Any],
    budget_id: str,
    budget_name: str,
    config: AnalysisConfig | None = None,
    *,
    limit: int = DEFAULT_TOP_N,
    now: datetime | None = None,
) -> DashboardSummary:
    """Run the full target alignment analysis for one budget month.

    *month_data* may be a validated :class:`MonthDetail` or the raw YNAB
    month payload; in the latter case malformed categories are skipped
    and reported on ``DashboardSummary.warnings``.

    Raises :class:`~src.core.months.AnalysisValidationError` if the month
    identifier is malformed.
    """
    config = config or DEFAULT_ANALYSIS_CONFIG

    if isinstance(month_data, MonthDetail):
        month, warnings = month_data, []
    else:
        month, warnings = parse_month_payload(month_data)
    validate_month(month.month)

    processed = process_categories(month.categories, month.month, config)
    analysis = analyze_month(
        processed,
        month.month,
        budget_id,
        budget_name,
        total_income=month.income,
        total_activity=month.activity,
        now=now,
    )
    ranking = rank_variances(processed, month.month, limit)
    metrics = calculate_key_metrics(analysis, processed)

    logger.debug(
        "Analyzed %d categories for %s (%s): score=%.1f rating=%s",
        analysis.categories_analyzed,
        month.month,
        budget_id,
        metrics.target_alignment_score,
        metrics.budget_discipline_rating.value,
    )

    return DashboardSummary(
        selected_month=month.month,
        monthly_analysis=analysis,
        top_over_target_categories=ranking.over_target,
        top_under_target_categories=ranking.under_target,
        zero_target_categories=ranking.zero_target,
        categories_without_targets=[
            cat for cat in processed if not cat.has_target and cat.assigned != 0
        ],
        categories=processed,
        key_metrics=metrics,
        warnings=list(warnings),
    )


def analyze_category_groups(
    groups: Iterable[CategoryGroup],
    month: str,
    budget_id: str,
    budget_name: str,
    config: AnalysisConfig | None = None,
    *,
    now: datetime | None = None,
) -> DashboardSummary:
    """Run the analysis over a category-group structure instead of a month record."""
    validate_month(month)
    categories = flatten_category_groups(groups)
    month_data = MonthDetail(
        month=month,
        budgeted=sum(c.budgeted for c in categories),
        activity=sum(c.activity for c in categories),
        categories=categories,
    )
    return generate_dashboard_summary(month_data, budget_id, budget_name, config, now=now)
