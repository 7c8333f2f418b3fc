"""MCP tool for searching routes between two stations or bus stops."""

import logging
from typing import Any

import mcp.types as types
from pydantic import BaseModel, ConfigDict, Field

from japan_transfer_mcp.services.route_service import DatetimeType
from japan_transfer_mcp.services.route_service import (
    search_route_by_station_name as _search_route_by_station_name,
)
from japan_transfer_mcp.services.tokenizer import Tokenizer
from japan_transfer_mcp.tools.registry import (
    ToolRegistry,
    ToolSpec,
    error_result,
    text_result,
    validate_arguments,
)

logger = logging.getLogger(__name__)

TOOL_NAME = "search_route_by_station_name"

DESCRIPTION = """Search for routes by station name.

Returns candidate itineraries with times, duration, transfers, fares, the
stations and lines along the way, and any service notices.

maxTokens is best effort: when the full report is too long, later routes are
dropped once, in proportion to the overshoot, and at least one route is always
kept. The result can still be slightly over the limit.
"""


class RouteSearchInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    origin: str = Field(
        min_length=1,
        alias="from",
        description=(
            "The name of the departure station. "
            "The value must be a name obtained from search_station_by_name."
        ),
    )
    destination: str = Field(
        min_length=1,
        alias="to",
        description=(
            "The name of the arrival station. "
            "The value must be a name obtained from search_station_by_name."
        ),
    )
    datetime_type: DatetimeType = Field(
        alias="datetimeType",
        description="The type of datetime to use for the search",
    )
    query_datetime: str | None = Field(
        default=None,
        alias="datetime",
        description=(
            "The datetime to use for the search. Format: YYYY-MM-DD HH:MM:SS. "
            "If not provided, the current time in Japan will be used."
        ),
    )
    max_tokens: int | None = Field(
        default=None,
        ge=0,
        alias="maxTokens",
        description="The maximum number of tokens to return",
    )


async def search_route_by_station_name(
    arguments: dict[str, Any],
    tokenizer: Tokenizer,
) -> types.CallToolResult:
    """Handle a search_route_by_station_name call.

    Any failure becomes an error-flagged result reading
    "Route search error: <detail>".
    """
    try:
        params = validate_arguments(RouteSearchInput, arguments)
        text = await _search_route_by_station_name(
            params.origin,
            params.destination,
            params.datetime_type,
            tokenizer=tokenizer,
            query_datetime=params.query_datetime,
            max_tokens=params.max_tokens,
        )
    except Exception as e:
        logger.warning(f"Route search failed: {e}")
        return error_result(f"Route search error: {e}")

    return text_result(text)


def register_route_tools(registry: ToolRegistry) -> None:
    registry.register(
        ToolSpec(
            name=TOOL_NAME,
            description=DESCRIPTION,
            input_model=RouteSearchInput,
            handler=search_route_by_station_name,
        )
    )
