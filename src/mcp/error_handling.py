"""Error handling for the target alignment MCP tools.

Maps YNAB API, budget/month resolution and analysis input failures to
plain strings the assistant can relay to the user.
"""

from __future__ import annotations

import functools
import logging
from typing import Callable

import httpx
from pydantic import ValidationError

from src.core.months import AnalysisValidationError
from src.core.resolvers import ResolverError
from src.core.ynab_client import YNABError

logger = logging.getLogger("ynab_alignment")


def handle_tool_errors(fn: Callable) -> Callable:
    """Wrap an analysis tool so known failures come back as messages.

    MCP tools must return ``str``, not raise. A month outside the budget
    or a malformed month reads as a sentence about that month; anything
    unexpected is logged with its traceback and summarized.
    """

    @functools.wraps(fn)
    async def wrapper(*args, **kwargs):
        try:
            return await fn(*args, **kwargs)
        except YNABError as e:
            return f"YNAB API error: {e.detail}"
        except ResolverError as e:
            return str(e)
        except AnalysisValidationError as e:
            return f"Invalid analysis input: {e}"
        except httpx.ConnectError:
            return "Cannot connect to YNAB API. Check your network connection."
        except httpx.TimeoutException:
            return "Request to YNAB timed out. Please try again."
        except ValidationError as e:
            return f"Invalid data: {e.error_count()} validation error(s). Check your input."
        except Exception as e:
            logger.exception("Unexpected error in tool %s", fn.__name__)
            return f"Unexpected error: {type(e).__name__}: {e}"

    return wrapper
