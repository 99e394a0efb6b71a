"""Pydantic models for YNAB API data types."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# --- YNAB uses "milliunits" for currency (1000 = $1.00) ---

def milliunits_to_dollars(milliunits: int) -> float:
    """Convert YNAB milliunits to dollars."""
    return milliunits / 1000.0


# --- Enums ---

class GoalType(str, Enum):
    MONTHLY_FUNDING = "MF"
    TARGET_BALANCE = "TB"
    TARGET_BALANCE_BY_DATE = "TBD"
    PLAN_YOUR_SPENDING = "NEED"
    DEBT_PAYOFF = "DEBT"


# --- Response Models ---

class Budget(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    last_modified_on: Optional[str] = None
    first_month: Optional[str] = None
    last_month: Optional[str] = None


class Category(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    category_group_id: Optional[str] = None
    category_group_name: Optional[str] = None
    name: str
    budgeted: int  # milliunits, the amount assigned this month
    activity: int  # milliunits
    balance: int = 0  # milliunits
    hidden: bool = False
    deleted: bool = False
    note: Optional[str] = None

    # Kept as a raw string so goal types YNAB adds later still parse.
    goal_type: Optional[str] = None
    goal_target: Optional[int] = None  # milliunits
    goal_target_month: Optional[str] = None  # YYYY-MM-DD
    goal_creation_month: Optional[str] = None
    goal_under_funded: Optional[int] = None  # milliunits
    goal_overall_funded: Optional[int] = None  # milliunits
    goal_overall_left: Optional[int] = None  # milliunits
    goal_percentage_complete: Optional[int] = None

    @property
    def goal_kind(self) -> Optional[GoalType]:
        """The goal type as an enum member, or ``None`` if absent or unknown."""
        if not self.goal_type:
            return None
        try:
            return GoalType(self.goal_type)
        except ValueError:
            return None


class CategoryGroup(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    hidden: bool = False
    deleted: bool = False
    categories: list[Category] = []


class MonthDetail(BaseModel):
    """A budget month with its per-category records."""
    model_config = ConfigDict(extra="ignore")

    month: str
    note: Optional[str] = None
    income: int = 0  # milliunits
    budgeted: int = 0  # milliunits
    activity: int = 0  # milliunits
    to_be_budgeted: int = 0  # milliunits
    deleted: bool = False
    categories: list[Category] = []


# --- Analysis Configuration ---


class AnalysisConfig(BaseModel):
    """Tunables for a target alignment analysis run.

    Accepts both the snake_case field names and the camelCase names used
    by the dashboard's JSON configuration.
    """
    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    tolerance_milliunits: int = Field(
        default=1000,
        ge=0,
        alias="toleranceMilliunits",
        description="Max |assigned - target| still counted as on target",
    )
    include_hidden_categories: bool = Field(
        default=False, alias="includeHiddenCategories"
    )
    include_deleted_categories: bool = Field(
        default=False, alias="includeDeletedCategories"
    )
    minimum_assignment_threshold: int = Field(
        default=0,
        ge=0,
        alias="minimumAssignmentThreshold",
        description="Skip categories whose |assigned| is below this (milliunits)",
    )


DEFAULT_ANALYSIS_CONFIG = AnalysisConfig()


# --- MCP Tool Input Models ---


class TargetAlignmentInput(BaseModel):
    """Input for the monthly target alignment analysis tool."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    month: Optional[str] = Field(
        None,
        description="Budget month (YYYY-MM-DD, first of month). Defaults to the current month.",
    )
    budget_id: Optional[str] = Field(
        None, description="Budget ID. Defaults to the configured budget."
    )
