"""Result dataclasses for the target alignment engine.

These are internal types consumed by the tool layer: lightweight frozen
dataclasses rather than Pydantic models since they don't need validation.
All monetary fields are integer milliunits.
"""

import dataclasses
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class AlignmentStatus(str, Enum):
    ON_TARGET = "on-target"
    OVER_TARGET = "over-target"
    UNDER_TARGET = "under-target"
    NO_TARGET = "no-target"


class DisciplineRating(str, Enum):
    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"
    NEEDS_IMPROVEMENT = "Needs Improvement"


@dataclass(frozen=True)
class TargetExtraction:
    """The "needed this month" amount and the rule that produced it."""
    amount: int | None  # milliunits, None when the category has no target
    rule: str


@dataclass(frozen=True)
class ProcessedCategory:
    """A category's assigned amount compared against its normalized target."""
    id: str
    name: str
    category_group_name: str
    assigned: int                      # milliunits
    target: int | None                 # milliunits needed this month
    target_type: str | None            # raw YNAB goal_type code
    variance: int                      # assigned - target, 0 without a target
    alignment_status: AlignmentStatus
    percentage_of_target: float | None
    has_target: bool
    is_hidden: bool = False
    goal_under_funded: int | None = None
    goal_overall_left: int | None = None
    goal_percentage_complete: int | None = None
    calculation_rule: str = ""


@dataclass(frozen=True)
class CategoryVariance:
    """Variance detail for a category that has a target."""
    category_id: str
    category_name: str
    category_group_name: str
    assigned: int
    target: int
    variance: int
    variance_percentage: float | None  # None when target is 0
    target_type: str | None
    month: str


@dataclass(frozen=True)
class VarianceRanking:
    """Largest-variance categories, split by direction."""
    over_target: list[CategoryVariance] = field(default_factory=list)
    under_target: list[CategoryVariance] = field(default_factory=list)
    zero_target: list[CategoryVariance] = field(default_factory=list)  # target of 0, non-zero assigned


@dataclass(frozen=True)
class MonthlyAnalysis:
    """Month-level totals, alignment buckets, and category counts."""
    month: str
    budget_id: str
    budget_name: str
    total_income: int
    total_activity: int
    total_assigned: int
    total_targeted: int
    on_target_amount: int
    over_target_amount: int
    under_target_amount: int
    no_target_amount: int
    on_target_percentage: float
    over_target_percentage: float
    under_target_percentage: float
    no_target_percentage: float
    categories_analyzed: int
    categories_with_targets: int
    categories_over_target: int
    categories_under_target: int
    categories_without_targets: int
    last_updated: str = field(default="", compare=False)


@dataclass(frozen=True)
class KeyMetrics:
    target_alignment_score: float    # 0-100
    budget_discipline_rating: DisciplineRating
    total_variance: int              # milliunits, absolute
    average_target_achievement: float


@dataclass(frozen=True)
class AnalysisWarning:
    """A category that was skipped instead of failing the whole month."""
    category_id: str | None
    category_name: str | None
    message: str


@dataclass(frozen=True)
class DashboardSummary:
    """Everything the dashboard needs for one (budget, month) pair."""
    selected_month: str
    monthly_analysis: MonthlyAnalysis
    top_over_target_categories: list[CategoryVariance]
    top_under_target_categories: list[CategoryVariance]
    zero_target_categories: list[CategoryVariance]
    categories_without_targets: list[ProcessedCategory]
    categories: list[ProcessedCategory]
    key_metrics: KeyMetrics
    warnings: list[AnalysisWarning] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready representation with camelCase keys."""
        return _to_json(dataclasses.asdict(self))


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _to_json(value: Any) -> Any:
    if isinstance(value, dict):
        return {_camel(k): _to_json(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_to_json(v) for v in value]
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value
