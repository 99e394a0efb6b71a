"""YNAB Target Alignment MCP Server.

Exposes the monthly target alignment analysis as MCP tools for use with
Claude Desktop and Claude Code.
"""

import json
import logging
import os
import sys
from collections.abc import Mapping
from contextlib import asynccontextmanager
from pathlib import Path
from dotenv import load_dotenv
from mcp.server.fastmcp import Context, FastMCP

# Ensure project root is on sys.path so `src` is importable when loaded
# directly by tools like `mcp dev` (which use importlib, not `python -m`).
_project_root = str(Path(__file__).resolve().parent.parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

load_dotenv()

from src.core.monthly_analysis import generate_dashboard_summary
from src.core.resolvers import (
    default_month_for_budget,
    resolve_budget,
    validate_month_in_budget_range,
)
from src.core.ynab_client import YNABClient
from src.mcp.error_handling import handle_tool_errors
from src.models.schemas import AnalysisConfig, TargetAlignmentInput

logger = logging.getLogger("ynab_alignment")

# Environment variable -> AnalysisConfig field
_CONFIG_ENV = {
    "ALIGNMENT_TOLERANCE_MILLIUNITS": "tolerance_milliunits",
    "ALIGNMENT_INCLUDE_HIDDEN": "include_hidden_categories",
    "ALIGNMENT_INCLUDE_DELETED": "include_deleted_categories",
    "ALIGNMENT_MINIMUM_ASSIGNMENT": "minimum_assignment_threshold",
}


def load_analysis_config(environ: Mapping[str, str] = os.environ) -> AnalysisConfig:
    """Build the analysis config from ``ALIGNMENT_*`` environment variables."""
    values = {
        field: environ[var]
        for var, field in _CONFIG_ENV.items()
        if environ.get(var, "").strip()
    }
    return AnalysisConfig.model_validate(values)


# --- Lifespan: initialize shared resources ---


@asynccontextmanager
async def app_lifespan(server: FastMCP):
    token = os.environ.get("YNAB_API_TOKEN", "")
    budget_id = os.environ.get("YNAB_BUDGET_ID", "default")

    if not token:
        raise RuntimeError(
            "YNAB_API_TOKEN environment variable is required. "
            "Get one at https://app.ynab.com/settings/developer"
        )

    client = YNABClient(api_token=token, budget_id=budget_id)
    config = load_analysis_config()
    logger.info(
        "Starting target alignment server (budget=%s, tolerance=%d)",
        budget_id,
        config.tolerance_milliunits,
    )

    yield {"ynab": client, "config": config}

    await client.close()


mcp = FastMCP("ynab_alignment", lifespan=app_lifespan)


# --- Helper to get client from context ---


def _get_deps(ctx) -> tuple[YNABClient, AnalysisConfig]:
    state = ctx.request_context.lifespan_context
    return state["ynab"], state["config"]


# --- Read-Only Tools ---


@mcp.tool(
    name="ynab_get_budgets",
    annotations={
        "title": "List YNAB Budgets",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
@handle_tool_errors
async def ynab_get_budgets(ctx: Context) -> str:
    """List all YNAB budgets with their available month range."""
    ynab, _ = _get_deps(ctx)
    budgets = await ynab.get_budgets()
    if not budgets:
        return "No budgets found."
    return json.dumps(
        [
            {
                "id": b.id,
                "name": b.name,
                "firstMonth": b.first_month,
                "lastMonth": b.last_month,
            }
            for b in budgets
        ],
        indent=2,
    )


@mcp.tool(
    name="ynab_target_alignment",
    annotations={
        "title": "Monthly Target Alignment",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
@handle_tool_errors
async def ynab_target_alignment(params: TargetAlignmentInput, ctx: Context) -> str:
    """Compare each category's assigned amount with its target for a month.

    Returns the dashboard summary as JSON: month totals and alignment
    buckets, the largest over/under-target categories, every processed
    category, and the alignment score and discipline rating.
    """
    ynab, config = _get_deps(ctx)

    budgets = await ynab.get_budgets()
    preferred = params.budget_id or (
        ynab.budget_id if ynab.budget_id != "default" else None
    )
    budget = resolve_budget(budgets, preferred)

    if params.month:
        month = validate_month_in_budget_range(params.month, budget)
    else:
        month = default_month_for_budget(budget)

    payload = await ynab.get_month_payload(month, budget.id)
    summary = generate_dashboard_summary(payload, budget.id, budget.name, config)
    for warning in summary.warnings:
        logger.warning(
            "Category %s skipped in %s: %s", warning.category_id, month, warning.message
        )
    return json.dumps(summary.to_dict(), indent=2)


if __name__ == "__main__":
    mcp.run()
