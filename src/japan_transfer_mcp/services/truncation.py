import logging

from japan_transfer_mcp.models.routes import RouteSearchResult
from japan_transfer_mcp.services.narrative import RenderContext, render_route_report
from japan_transfer_mcp.services.tokenizer import Tokenizer

logger = logging.getLogger(__name__)


def retained_route_count(route_count: int, max_tokens: int, measured_tokens: int) -> int:
    """Proportional estimate of how many routes fit in max_tokens.

    Assumes per-route cost dominates the fixed header cost. Never below 1, so
    a tight budget still yields one route when there was any.
    """
    return max(1, route_count * max_tokens // measured_tokens)


def render_within_budget(
    result: RouteSearchResult,
    context: RenderContext,
    tokenizer: Tokenizer,
    max_tokens: int | None = None,
) -> str:
    """Render the report, dropping trailing routes when it is over budget.

    The budget is best effort, not a hard ceiling: when the full report is too
    long, the route list is cut once to a proportional estimate and the
    shorter report is returned as-is, even if it is still over max_tokens.
    Kept routes keep their order and their original route numbers.
    """
    text = render_route_report(result, context)
    if max_tokens is None:
        return text

    measured = tokenizer.count(text)
    if measured <= max_tokens:
        return text

    retained = retained_route_count(len(result.routes), max_tokens, measured)
    logger.debug(
        f"Report is {measured} tokens (budget {max_tokens}); "
        f"keeping {retained} of {len(result.routes)} routes"
    )
    limited = result.model_copy(update={"routes": result.routes[:retained]})
    return render_route_report(limited, context)
